"""
Configuration gate.

Final acceptance of the merged configuration, run after flavor inference
because it depends on the auto-filled cluster name.
"""

import logging

from lib.exceptions import ClusterNameDotError, ClusterNamePatternError, InvalidEncryptionModeError
from lib.flavor import Flavor
from lib.validation import CLUSTER_NAME_PATTERN, InputValidator

from .params import InstallParameters


def normalize_cluster_name(name: str) -> str:
    """Make a detector-supplied name safe for Kubernetes object names."""
    return name.replace("_", "-")


def adopt_cluster_name(params: InstallParameters, flavor: Flavor, logger: logging.Logger) -> None:
    """
    Fill params.cluster_name from the detected flavor unless the user set it.

    With no name from either source the field stays empty and the gate
    rejects it.
    """
    if params.cluster_name != "" or not flavor.cluster_name:
        return

    name = normalize_cluster_name(flavor.cluster_name)
    logger.info("🔮 Auto-detected cluster name: %s", name)
    params.cluster_name = name


def log_deprecated_ipam(params: InstallParameters, logger: logging.Logger) -> None:
    # TODO: remove together with the deprecated --ipam flag
    if params.ipam != "":
        logger.info("ℹ Custom IPAM mode: %s", params.ipam)


def validate_cluster_name(name: str, logger: logging.Logger) -> None:
    try:
        InputValidator.validate_cluster_name(name)
    except ClusterNameDotError:
        logger.error("✗ Cluster name %r cannot contain dots", name)
        raise
    except ClusterNamePatternError:
        logger.error(
            "✗ Cluster name %r is not valid, must match regular expression: %s",
            name,
            CLUSTER_NAME_PATTERN.pattern,
        )
        raise


def validate_encryption(mode: str, logger: logging.Logger) -> None:
    try:
        InputValidator.validate_encryption_mode(mode)
    except InvalidEncryptionModeError:
        logger.error("✗ Invalid encryption mode: %r", mode)
        raise


def run_configuration_gate(params: InstallParameters, logger: logging.Logger) -> None:
    """
    Accept or reject the resolved parameters.

    Raises:
        ClusterNameDotError: Cluster name contains a dot
        ClusterNamePatternError: Cluster name is not a DNS label
        InvalidEncryptionModeError: Encryption mode is not supported
    """
    validate_cluster_name(params.cluster_name, logger)
    validate_encryption(params.encryption, logger)
