"""
Library package for the cluster networking installer.
"""

# Import version from lightweight module (avoids importing heavy deps at build time)
from ._version import __version__, __version_date__

from .context import OperationContext
from .exceptions import (
    ConfigurationError,
    FatalError,
    InstallerError,
    OperationCancelledError,
    TransientError,
    ValidationError,
)
from .flavor import Flavor, FlavorDetector, Kind
from .kube_client import KubeClient
from .utils import format_duration, is_version_ge, parse_version, setup_logging

__all__ = [
    "__version__",
    "__version_date__",
    "KubeClient",
    "Flavor",
    "FlavorDetector",
    "Kind",
    "OperationContext",
    "InstallerError",
    "TransientError",
    "FatalError",
    "ValidationError",
    "ConfigurationError",
    "OperationCancelledError",
    "setup_logging",
    "parse_version",
    "is_version_ge",
    "format_duration",
]
