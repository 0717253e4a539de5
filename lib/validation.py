#!/usr/bin/env python3
"""
Input validation utilities for the cluster networking installer.

This module validates CLI arguments, Kubernetes context names, cluster names,
encryption modes and filesystem paths before any cluster call is made.

Features:
- Cluster name validation (DNS-1123 label rules, dots rejected separately)
- Encryption mode validation (closed set, case-sensitive)
- Context name validation
- CLI argument validation
- Filesystem path validation for values files
"""

import logging
import os
import re
from typing import Pattern, Sequence

from lib.constants import ENCRYPTION_MODES, LOGGER_NAME
from lib.exceptions import (
    ClusterNameDotError,
    ClusterNamePatternError,
    InvalidEncryptionModeError,
    SecurityValidationError,
    ValidationError,
)

logger = logging.getLogger(LOGGER_NAME)

# Cluster names end up in Kubernetes object names and node annotations.
# DNS-1123 label format: lowercase alphanumeric characters or '-',
# starts and ends with an alphanumeric character, single characters allowed.
CLUSTER_NAME_PATTERN: Pattern[str] = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")

# Context name validation pattern (more permissive than K8s names)
# Allows alphanumeric, hyphens, underscores, dots, forward slashes, colons and '@'
# This accommodates contexts like 'kind-dev', 'gke_project_zone_name' or EKS ARNs
CONTEXT_NAME_PATTERN: Pattern[str] = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.:@\-/]*[A-Za-z0-9]$|^[A-Za-z0-9]$")
CONTEXT_NAME_MAX_LENGTH = 253


class InputValidator:
    """Input validation for installer parameters and CLI arguments."""

    @staticmethod
    def validate_cluster_name(name: str) -> None:
        """
        Validate a cluster name.

        Args:
            name: The cluster name to validate

        Raises:
            ClusterNameDotError: If the name contains a dot
            ClusterNamePatternError: If the name does not match CLUSTER_NAME_PATTERN
        """
        if "." in name:
            raise ClusterNameDotError(name, "invalid cluster name, dots are not allowed")

        if not CLUSTER_NAME_PATTERN.fullmatch(name):
            raise ClusterNamePatternError(
                name,
                f"invalid cluster name {name!r}, must match regular expression: {CLUSTER_NAME_PATTERN.pattern}",
            )

    @staticmethod
    def validate_encryption_mode(mode: str) -> None:
        """
        Validate the encryption mode.

        Raises:
            InvalidEncryptionModeError: If mode is not an exact member of ENCRYPTION_MODES
        """
        if mode not in ENCRYPTION_MODES:
            raise InvalidEncryptionModeError(
                mode,
                f"invalid encryption mode {mode!r}. Must be one of: {', '.join(ENCRYPTION_MODES)}",
            )

    @staticmethod
    def validate_context_name(context: str) -> None:
        """
        Validate Kubernetes context name.

        Args:
            context: The context name to validate

        Raises:
            ValidationError: If context name is invalid
        """
        if not context:
            raise ValidationError("Context name cannot be empty")

        if len(context) > CONTEXT_NAME_MAX_LENGTH:
            raise ValidationError(
                f"Context name '{context}' exceeds maximum length of {CONTEXT_NAME_MAX_LENGTH} characters"
            )

        if not CONTEXT_NAME_PATTERN.match(context):
            raise ValidationError(
                f"Invalid context name '{context}'. "
                f"Must consist of alphanumeric characters, '-', '_', '.', ':', '@' or '/', "
                f"and must start and end with an alphanumeric character"
            )

    @staticmethod
    def _validate_choice(value: str, valid_choices: Sequence[str], field_name: str) -> None:
        """Validate that a value is one of the allowed choices.

        Raises:
            ValidationError: If value is not in valid_choices
        """
        if value not in valid_choices:
            raise ValidationError(f"Invalid {field_name} '{value}'. Must be one of: {', '.join(valid_choices)}")

    @staticmethod
    def validate_cli_log_format(log_format: str) -> None:
        """Validate CLI log format argument."""
        InputValidator._validate_choice(log_format, ["text", "json"], "log format")

    @staticmethod
    def validate_non_empty_string(value: str, field_name: str) -> None:
        """
        Validate that a string is not empty or whitespace-only.

        Raises:
            ValidationError: If string is empty or whitespace-only
        """
        if not value or not value.strip():
            raise ValidationError(f"{field_name} cannot be empty or whitespace-only")

    @staticmethod
    def validate_timeout(timeout: float, field_name: str = "timeout") -> None:
        """Validate that a timeout is a positive number of seconds."""
        if timeout <= 0:
            raise ValidationError(f"{field_name} must be a positive number of seconds, got {timeout}")

    @staticmethod
    def validate_safe_filesystem_path(path: str, field_name: str) -> None:
        """
        Validate that a path is safe to read.

        Args:
            path: The path to validate
            field_name: Name of the field for error messages

        Raises:
            SecurityValidationError: If path contains unsafe characters or patterns
            ValidationError: If path is empty
        """
        if not path:
            raise ValidationError(f"{field_name} path cannot be empty")

        # Prevent path traversal by checking for '..' as a path component
        if ".." in path.split("/"):
            raise SecurityValidationError(
                f"SECURITY: Path traversal attempt detected in {field_name} path '{path}'. "
                f"The '..' sequence is not allowed as a path component."
            )

        unsafe_chars = ["~", "$", "{", "}", "|", "&", ";", "<", ">", "`"]
        if any(char in path for char in unsafe_chars):
            raise SecurityValidationError(
                f"SECURITY: Invalid characters in {field_name} path '{path}'. "
                f"Disallowed patterns: {', '.join(unsafe_chars)}."
            )

        if path.startswith("/"):
            resolved_path = os.path.realpath(path)
            safe_prefixes = ["/tmp/", "/etc/"]  # nosec B108 - path validation, not temp file usage
            cwd = os.getcwd()
            if cwd:
                safe_prefixes.append(os.path.realpath(cwd) + "/")
            home = os.path.expanduser("~")
            if home and home != "~":
                safe_prefixes.append(os.path.realpath(home) + "/")

            if not any(resolved_path.startswith(prefix) for prefix in safe_prefixes):
                raise SecurityValidationError(
                    f"SECURITY: Absolute path '{path}' is not allowed for {field_name}. "
                    f"Use relative paths or paths within /tmp, /etc, workspace root, or home directory."
                )

    @staticmethod
    def validate_all_cli_args(args: object) -> None:
        """
        Validate CLI arguments that can be checked without a cluster.

        Cluster name and encryption mode are validated later by the
        configuration gate, after values files and auto-detection are merged.

        Raises:
            ValidationError: If any argument validation fails
        """
        if getattr(args, "context", None):
            InputValidator.validate_context_name(args.context)

        if getattr(args, "log_format", None):
            InputValidator.validate_cli_log_format(args.log_format)

        if getattr(args, "values", None):
            InputValidator.validate_safe_filesystem_path(args.values, "values")

        timeout = getattr(args, "timeout", None)
        if timeout is not None:
            InputValidator.validate_timeout(timeout)

        for name in getattr(args, "disable_check", None) or []:
            InputValidator.validate_non_empty_string(name, "disable-check")

        ipam = getattr(args, "ipam", None)
        if ipam:
            logger.warning("--ipam is deprecated and only kept for backwards compatibility")
