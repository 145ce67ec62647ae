"""
Configuration management for semdiff.

This module provides functionality for managing configuration,
including loading from environment variables, files and default values,
and for validating project configurations before analysis.
"""

import os
import json
import logging
import threading
from typing import Dict, Optional, Any, Union
from copy import deepcopy
import yaml

from semdiff.errors import InvalidConfiguration
from semdiff.schemas.models import MODES, ProjectConfig, RandomizationConfig
from semdiff.utils.general import distinct

# Set up logging
logger = logging.getLogger(__name__)

DISCRETE_SCALE_POINTS = (5, 7, 9, 11)
MAX_TERM_LENGTH = 50


def to_int(value: Any) -> Optional[int]:
    """
    Convert a value to an integer.

    Args:
        value: Value to convert

    Returns:
        Integer value, or None if conversion failed
    """
    if value is None:
        return None

    try:
        return int(value)
    except (ValueError, TypeError):
        return None


def to_bool(value: Any) -> Optional[bool]:
    """
    Convert a value to a boolean.

    Args:
        value: Value to convert

    Returns:
        Boolean value, or None if conversion failed
    """
    if value is None:
        return None

    if isinstance(value, bool):
        return value

    if isinstance(value, (int, float)):
        return bool(value)

    if isinstance(value, str):
        value = value.lower().strip()
        if value in ('true', 'yes', 'y', '1', 't'):
            return True
        if value in ('false', 'no', 'n', '0', 'f'):
            return False

    return None


def read_data_file(filepath: str) -> Any:
    """
    Read a JSON or YAML file.

    Args:
        filepath: Path ending in .json, .yaml or .yml

    Returns:
        Parsed content
    """
    if filepath.endswith('.json'):
        with open(filepath, 'r') as f:
            return json.load(f)
    elif filepath.endswith('.yaml') or filepath.endswith('.yml'):
        with open(filepath, 'r') as f:
            return yaml.safe_load(f)
    else:
        raise ValueError(f"Unsupported file format: {filepath}")


class Config:
    """
    Configuration manager for semdiff.
    """

    def __init__(self, overrides: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration.

        Args:
            overrides: Optional configuration overrides
        """
        self._lock = threading.RLock()
        self._config = {}
        self._initialized = False

        self.load_config(overrides)

    def load_config(self, overrides: Optional[Dict[str, Any]] = None) -> None:
        """
        Load configuration from all sources.

        Defaults are applied first, then environment variables, then the
        explicit overrides.

        Args:
            overrides: Optional configuration overrides
        """
        with self._lock:
            config = self._get_defaults()
            config = self._apply_env_vars(config)

            if overrides:
                config = self._apply_overrides(config, overrides)

            self._config = config
            self._initialized = True

            logger.info("Configuration loaded")

    def _get_defaults(self) -> Dict[str, Any]:
        return {
            'scale': {
                'points': 7,
                'mode': 'discrete'
            },

            'randomization': {
                'enabled': False
            },

            'clustering': {
                'k': 3,
                'max-iterations': 100,
                'seed': None  # None draws from an unseeded generator
            },

            'logging': {
                'level': 'warn'
            }
        }

    def _apply_env_vars(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply environment variables to configuration.

        Args:
            config: Current configuration

        Returns:
            Updated configuration
        """
        config = deepcopy(config)

        # Scale
        points = to_int(os.environ.get('SEMDIFF_SCALE_POINTS'))
        if points is not None:
            config['scale']['points'] = points
        config['scale']['mode'] = os.environ.get('SEMDIFF_SCALE_MODE', config['scale']['mode']).lower()

        # Randomization
        enabled = to_bool(os.environ.get('SEMDIFF_RANDOMIZATION'))
        if enabled is not None:
            config['randomization']['enabled'] = enabled

        # Clustering
        k = to_int(os.environ.get('SEMDIFF_CLUSTER_K'))
        if k is not None:
            config['clustering']['k'] = k
        max_iterations = to_int(os.environ.get('SEMDIFF_CLUSTER_MAX_ITERATIONS'))
        if max_iterations is not None:
            config['clustering']['max-iterations'] = max_iterations
        seed = to_int(os.environ.get('SEMDIFF_CLUSTER_SEED'))
        if seed is not None:
            config['clustering']['seed'] = seed

        # Logging
        config['logging']['level'] = os.environ.get('LOG_LEVEL', config['logging']['level']).lower()

        return config

    def _apply_overrides(self, config: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply configuration overrides.

        Args:
            config: Current configuration
            overrides: Configuration overrides

        Returns:
            Updated configuration
        """
        config = deepcopy(config)

        def deep_update(d, u):
            for k, v in u.items():
                if isinstance(v, dict) and k in d and isinstance(d[k], dict):
                    d[k] = deep_update(d[k], v)
                else:
                    d[k] = v
            return d

        return deep_update(config, overrides)

    def get(self, path: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            path: Configuration path (dot-separated)
            default: Default value if not found

        Returns:
            Configuration value, or default if not found
        """
        if not self._initialized:
            self.load_config()

        value = self._config
        for component in path.split('.'):
            if isinstance(value, dict) and component in value:
                value = value[component]
            else:
                return default

        return value

    def set(self, path: str, value: Any) -> None:
        """
        Set a configuration value.

        Args:
            path: Configuration path (dot-separated)
            value: Configuration value
        """
        with self._lock:
            if not self._initialized:
                self.load_config()

            components = path.split('.')
            config = self._config
            for component in components[:-1]:
                if component not in config:
                    config[component] = {}
                config = config[component]

            config[components[-1]] = value

    def to_dict(self) -> Dict[str, Any]:
        if not self._initialized:
            self.load_config()

        return deepcopy(self._config)

    def save_to_file(self, filepath: str) -> None:
        """
        Save configuration to a file.

        Args:
            filepath: Path to save configuration (.json, .yaml or .yml)
        """
        if not self._initialized:
            self.load_config()

        if filepath.endswith('.json'):
            with open(filepath, 'w') as f:
                json.dump(self._config, f, indent=2)
        elif filepath.endswith('.yaml') or filepath.endswith('.yml'):
            with open(filepath, 'w') as f:
                yaml.dump(self._config, f, default_flow_style=False)
        else:
            raise ValueError(f"Unsupported file format: {filepath}")

    def load_from_file(self, filepath: str) -> None:
        """
        Load configuration from a file.

        Args:
            filepath: Path to load configuration from
        """
        self.load_config(read_data_file(filepath))


class ConfigManager:
    """
    Singleton manager for configuration.
    """

    _instance = None
    _lock = threading.RLock()

    @classmethod
    def get_config(cls, overrides: Optional[Dict[str, Any]] = None) -> Config:
        """
        Get the configuration instance.

        Args:
            overrides: Optional configuration overrides

        Returns:
            Config instance
        """
        with cls._lock:
            if cls._instance is None:
                cls._instance = Config(overrides)
            elif overrides:
                cls._instance.load_config(overrides)

            return cls._instance

    @classmethod
    def reset(cls) -> None:
        with cls._lock:
            cls._instance = None


def _validate_term(term: str, side: str, item_id: str) -> None:
    trimmed = (term or '').strip()
    if not trimmed:
        raise InvalidConfiguration(f"Item {item_id}: {side} pole label is required")
    if len(trimmed) > MAX_TERM_LENGTH:
        raise InvalidConfiguration(
            f"Item {item_id}: {side} pole label is too long (max {MAX_TERM_LENGTH} characters)"
        )


def validate_project_config(project: ProjectConfig) -> ProjectConfig:
    """
    Check a project configuration before it is used for analysis.

    Discrete scales must have 5, 7, 9 or 11 points. Each item needs two
    distinct, non-empty pole labels and a unique id.

    Args:
        project: Project configuration

    Returns:
        The same project, for chaining

    Raises:
        InvalidConfiguration: On the first violation found
    """
    scale = project.scale
    if scale.mode not in MODES:
        raise InvalidConfiguration(f"Unknown scale mode: {scale.mode!r}")
    if scale.points <= 0:
        raise InvalidConfiguration(f"Scale points must be positive, got {scale.points}")
    if scale.mode == 'discrete' and scale.points not in DISCRETE_SCALE_POINTS:
        raise InvalidConfiguration(
            f"Invalid scale: {scale.points} points (use one of {', '.join(map(str, DISCRETE_SCALE_POINTS))})"
        )

    for item in project.items:
        _validate_term(item.low, 'low', item.id)
        _validate_term(item.high, 'high', item.id)
        if item.low.strip().lower() == item.high.strip().lower():
            raise InvalidConfiguration(f"Item {item.id}: the two pole labels must differ")

    ids = project.item_ids
    if len(distinct(ids)) != len(ids):
        raise InvalidConfiguration("Item ids must be unique")

    return project


def apply_config_defaults(project: ProjectConfig, config: Optional[Config] = None) -> ProjectConfig:
    """
    Fill the scale and randomization settings a project leaves unset.

    Only sections absent from the project document take the configured
    ``scale.*`` and ``randomization.enabled`` values; explicit project
    settings always win.

    Args:
        project: Project configuration
        config: Runtime configuration (defaults to the shared instance)

    Returns:
        The project, or a copy with the missing sections filled in
    """
    config = config or ConfigManager.get_config()

    update = {}
    if 'scale' not in project.model_fields_set:
        update['scale'] = project.scale.model_copy(update={
            'points': config.get('scale.points', 7),
            'mode': config.get('scale.mode', 'discrete'),
        })
    if 'randomization' not in project.model_fields_set:
        update['randomization'] = RandomizationConfig(
            enabled=bool(config.get('randomization.enabled', False))
        )

    if not update:
        return project

    logger.debug(f"Using configured defaults for {', '.join(sorted(update))}")
    return project.model_copy(update=update)


def load_project_config(source: Union[str, Dict[str, Any]],
                        config: Optional[Config] = None) -> ProjectConfig:
    """
    Build and validate a project configuration from a file path or a dict.

    Scale and randomization sections missing from the document are taken
    from the runtime configuration.

    Args:
        source: Path to a .json/.yaml/.yml file, or already parsed data
        config: Runtime configuration (defaults to the shared instance)

    Returns:
        Validated ProjectConfig
    """
    data = read_data_file(source) if isinstance(source, str) else source
    # Project documents from the store wrap the settings in a 'config' key
    if isinstance(data, dict) and 'config' in data and isinstance(data['config'], dict):
        data = data['config']
    project = apply_config_defaults(ProjectConfig.model_validate(data or {}), config)
    return validate_project_config(project)
