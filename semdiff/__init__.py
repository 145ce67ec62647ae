"""
Semdiff package for semantic-differential survey analysis.

This is the analysis engine behind the survey tools: it turns raw
participant responses into normalized values and computes item
statistics, group comparisons and participant clusters over them.
"""

__version__ = '0.1.0'

from semdiff.components.config import Config, ConfigManager
from semdiff.analysis.project import ProjectAnalysis
from semdiff.errors import InvalidConfiguration
