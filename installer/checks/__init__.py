"""Flavor-specific pre-flight validation checks."""

from .azure import AzureVersionValidation
from .base import ValidationCheck
from .local import KindVersionValidation, MinikubeVersionValidation
from .registry import ValidationRegistry, default_registry
from .runner import run_validation_checks

__all__ = [
    "ValidationCheck",
    "ValidationRegistry",
    "default_registry",
    "run_validation_checks",
    "MinikubeVersionValidation",
    "KindVersionValidation",
    "AzureVersionValidation",
]
