"""Shared fixtures for installer pre-flight tests."""

import logging
from unittest.mock import Mock

import pytest

from lib.context import OperationContext
from lib.flavor import Flavor, Kind


@pytest.fixture
def ctx():
    """An operation context without a deadline."""
    return OperationContext()


@pytest.fixture
def mock_logger():
    """Create a mock logger."""
    return Mock(spec=logging.Logger)


@pytest.fixture
def make_detector():
    """Build a flavor detector stub returning a fixed flavor."""

    def _make(kind=Kind.UNKNOWN, cluster_name=""):
        detector = Mock()
        detector.detect_flavor.return_value = Flavor(kind, cluster_name)
        return detector

    return _make
