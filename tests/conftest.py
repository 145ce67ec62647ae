"""
Pytest configuration and fixtures for semdiff tests.

This module provides:
- Sample scale items and project configurations
- A factory for building sessions from raw positions
- Resetting of the shared configuration between tests
"""

import pytest

from semdiff.components.config import ConfigManager
from semdiff.math.normalize import build_response
from semdiff.schemas.models import ProjectConfig, ScaleConfig, ScaleItem, Session


@pytest.fixture(autouse=True)
def reset_config(monkeypatch):
    """Give every test a fresh configuration without SEMDIFF_* overrides."""
    for name in ('SEMDIFF_SCALE_POINTS', 'SEMDIFF_SCALE_MODE', 'SEMDIFF_RANDOMIZATION',
                 'SEMDIFF_CLUSTER_K', 'SEMDIFF_CLUSTER_MAX_ITERATIONS', 'SEMDIFF_CLUSTER_SEED',
                 'LOG_LEVEL'):
        monkeypatch.delenv(name, raising=False)
    ConfigManager.reset()
    yield
    ConfigManager.reset()


@pytest.fixture
def items():
    """Three bipolar items in configuration order."""
    return [
        ScaleItem(id='p1', low='Traditional', high='Innovative', category='Values'),
        ScaleItem(id='p2', low='Simple', high='Complex'),
        ScaleItem(id='p3', low='Formal', high='Informal'),
    ]


@pytest.fixture
def project(items):
    """Seven-point discrete project with randomization enabled."""
    return ProjectConfig(
        items=items,
        scale=ScaleConfig(points=7, mode='discrete'),
        randomization={'enabled': True}
    )


@pytest.fixture
def make_session():
    """
    Factory building a session from raw discrete positions.

    ``positions`` maps item id to a position on a 7-point scale.
    """
    def _make(session_id, positions, status='completed', group_id='', group_label='',
              flipped=None, mode='discrete', scale_points=7):
        flipped = flipped or {}
        responses = [
            build_response(item_id, raw, flipped.get(item_id, False), mode, scale_points, timestamp=0)
            for item_id, raw in positions.items()
        ]
        return Session(
            session_id=session_id,
            status=status,
            group_id=group_id,
            group_label=group_label,
            responses=responses
        )
    return _make


@pytest.fixture
def sessions(make_session):
    """Five sessions in two groups, one of them still in progress."""
    return [
        make_session('s1', {'p1': 0, 'p2': 6, 'p3': 3}, group_id='a', group_label='Marketing'),
        make_session('s2', {'p1': 1, 'p2': 5, 'p3': 3}, group_id='a', group_label='Sales'),
        make_session('s3', {'p1': 6, 'p2': 0, 'p3': 3}, group_id='b', group_label='Under 30'),
        make_session('s4', {'p1': 5, 'p2': 1}),
        make_session('s5', {'p1': 3, 'p2': 3, 'p3': 3}, status='in_progress', group_id='b'),
    ]
