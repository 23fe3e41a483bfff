"""Shared pytest fixtures."""

import pytest

from mizan import MorphologyEngine


@pytest.fixture
def engine():
    """Empty engine."""
    return MorphologyEngine()


@pytest.fixture
def seeded_engine():
    """Engine with the default schemes and sample roots."""
    return MorphologyEngine.with_defaults()
