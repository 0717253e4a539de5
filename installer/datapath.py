"""
Datapath mode resolution.

Maps the detected cluster kind to a datapath mode and, for the kinds that
need it, disables kube-proxy replacement. A datapath mode set by the user is
authoritative; resolution only fills unset fields and is idempotent.
"""

import logging
from typing import Any

from lib.constants import (
    DATAPATH_AKS_BYOCNI,
    DATAPATH_AWS_ENI,
    DATAPATH_AZURE,
    DATAPATH_GKE,
    DATAPATH_TUNNEL,
    KUBE_PROXY_REPLACEMENT_DISABLED,
)
from lib.context import OperationContext
from lib.flavor import Flavor, Kind

from .params import InstallParameters

# Kinds whose datapath needs no lookup
STATIC_DATAPATH_MODES = {
    Kind.KIND: DATAPATH_TUNNEL,
    Kind.MINIKUBE: DATAPATH_TUNNEL,
    Kind.EKS: DATAPATH_AWS_ENI,
    Kind.GKE: DATAPATH_GKE,
}


def _disable_kube_proxy_replacement(params: InstallParameters, logger: logging.Logger) -> None:
    if params.kube_proxy_replacement == "":
        logger.info("ℹ kube-proxy-replacement disabled")
        params.kube_proxy_replacement = KUBE_PROXY_REPLACEMENT_DISABLED


def resolve_datapath_mode(
    ctx: OperationContext,
    flavor: Flavor,
    params: InstallParameters,
    *,
    byocni_detector: Any,
    logger: logging.Logger,
    with_kpr: bool = True,
) -> None:
    """
    Fill params.datapath_mode (and kube_proxy_replacement) from the flavor.

    Args:
        ctx: Operation context
        flavor: Detected cluster flavor
        params: Parameters to update in place
        byocni_detector: Object with detect_byocni(ctx) -> bool, used for AKS only
        logger: Logger for progress messages
        with_kpr: Whether kube-proxy replacement defaults apply

    Raises:
        ProviderLookupError: If the AKS BYOCNI lookup fails
        OperationCancelledError: If ctx is cancelled or expires
    """
    if params.datapath_mode != "":
        logger.info("ℹ Custom datapath mode: %s", params.datapath_mode)
        return

    ctx.check("datapath mode detection")

    if flavor.kind is Kind.AKS:
        # Azure IPAM is not available in BYOCNI mode
        params.azure.is_byocni = bool(byocni_detector.detect_byocni(ctx))
        params.datapath_mode = DATAPATH_AKS_BYOCNI if params.azure.is_byocni else DATAPATH_AZURE
        if with_kpr:
            _disable_kube_proxy_replacement(params, logger)
    else:
        params.datapath_mode = STATIC_DATAPATH_MODES.get(flavor.kind, DATAPATH_TUNNEL)
        if flavor.kind is Kind.KIND and with_kpr:
            _disable_kube_proxy_replacement(params, logger)

    logger.info("🔮 Auto-detected datapath mode: %s", params.datapath_mode)
