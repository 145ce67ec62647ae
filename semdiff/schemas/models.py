"""
Schema definitions for semantic-differential projects and sessions.

Input models accept the camelCase keys written by the session store
(``pairId``, ``rawValue``, ``groupId`` ...) as well as the snake_case
field names.
"""

from typing import Dict, List, Optional, Any, Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator


UNGROUPED = 'ungrouped'
MODES = ('discrete', 'continuous')
MAX_PARTICIPANT_NAME_LENGTH = 100
MAX_GROUP_LENGTH = 50


class ScaleItem(BaseModel):
    """One bipolar dimension, e.g. Traditional vs Innovative."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    low: str = Field('', alias='leftTerm')
    high: str = Field('', alias='rightTerm')
    category: Optional[str] = None


class ScaleConfig(BaseModel):
    """Presentation settings shared by every item of a project."""
    model_config = ConfigDict(populate_by_name=True)

    points: int = 7
    mode: str = 'discrete'
    show_labels: bool = Field(True, alias='showLabels')
    show_midpoint: bool = Field(True, alias='showMidpoint')


class RandomizationConfig(BaseModel):
    """Pole counterbalancing switch."""
    enabled: bool = False


DEFAULT_ITEMS = [
    ScaleItem(id='sp_default_1', low='Traditional', high='Innovative'),
    ScaleItem(id='sp_default_2', low='Simple', high='Complex'),
    ScaleItem(id='sp_default_3', low='Formal', high='Informal'),
]


class ProjectConfig(BaseModel):
    """Project configuration: ordered items plus scale and randomization settings."""
    model_config = ConfigDict(populate_by_name=True)

    items: List[ScaleItem] = Field(default_factory=lambda: list(DEFAULT_ITEMS),
                                   alias='semanticPairs')
    scale: ScaleConfig = Field(default_factory=ScaleConfig)
    randomization: RandomizationConfig = Field(default_factory=RandomizationConfig)
    question: Optional[str] = ''
    instructions: Optional[str] = ''

    @property
    def item_ids(self) -> List[str]:
        return [item.id for item in self.items]


class ResponseRecord(BaseModel):
    """
    One participant's answer to one item.

    ``raw_value`` is a position index in discrete mode or a 0-100
    percentage in continuous mode. ``value`` is the derived signed value
    in [-50, 50].
    """
    model_config = ConfigDict(populate_by_name=True)

    item_id: str = Field(alias='pairId')
    raw_value: float = Field(0.0, alias='rawValue')
    was_flipped: bool = Field(False, alias='wasFlipped')
    value: float = 0.0
    timestamp: Optional[int] = None


class Session(BaseModel):
    """A participant's full submission set."""
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias='sessionId')
    project_id: Optional[str] = Field(None, alias='projectId')
    participant_name: Optional[str] = Field('', alias='participantName')
    group_id: Optional[str] = Field('', alias='groupId')
    group_label: Optional[str] = Field('', alias='groupLabel')
    status: Literal['created', 'in_progress', 'completed'] = 'created'
    created_at: Optional[int] = Field(None, alias='createdAt')
    completed_at: Optional[int] = Field(None, alias='completedAt')
    responses: List[ResponseRecord] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @field_validator('participant_name')
    @classmethod
    def truncate_participant_name(cls, value: Optional[str]) -> Optional[str]:
        return value[:MAX_PARTICIPANT_NAME_LENGTH] if value else value

    @field_validator('group_id', 'group_label')
    @classmethod
    def truncate_group(cls, value: Optional[str]) -> Optional[str]:
        return value[:MAX_GROUP_LENGTH] if value else value

    @property
    def is_completed(self) -> bool:
        return self.status == 'completed'

    @property
    def group_key(self) -> str:
        return self.group_id or UNGROUPED

    def response_for(self, item_id: str) -> Optional[ResponseRecord]:
        """Return the first response recorded for an item, or None."""
        for response in self.responses:
            if response.item_id == item_id:
                return response
        return None


class ItemStatistics(BaseModel):
    """Descriptive statistics for one item over a set of completed sessions."""
    item_id: str
    low: str = ''
    high: str = ''
    mean: float = 0.0
    std_dev: float = 0.0
    median: float = 0.0
    min: float = 0.0
    max: float = 0.0
    count: int = 0
    distribution: Optional[List[int]] = None


class GroupProfile(BaseModel):
    """Per-item statistics for one group of sessions."""
    group_id: str
    group_label: str
    item_stats: List[ItemStatistics]
    profile_vector: List[int] = Field(default_factory=list)
    participant_count: int = 0


class ClusterAssignment(BaseModel):
    """One cluster from a k-means run."""
    cluster_id: int
    centroid: List[float]
    members: List[str]
    member_count: int
