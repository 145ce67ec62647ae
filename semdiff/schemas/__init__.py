"""
Data model for scale items, sessions and analysis results.
"""

from semdiff.schemas.models import (
    ScaleItem, ScaleConfig, RandomizationConfig, ProjectConfig,
    ResponseRecord, Session, ItemStatistics, GroupProfile, ClusterAssignment,
    UNGROUPED, MODES, MAX_PARTICIPANT_NAME_LENGTH, MAX_GROUP_LENGTH
)
