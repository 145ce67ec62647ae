"""
System components for semdiff.

This module provides configuration management for the analysis engine.
"""

from semdiff.components.config import (
    Config, ConfigManager, apply_config_defaults, load_project_config, validate_project_config
)
