"""
Pre-flight orchestration for install and uninstall.

K8sInstaller.autodetect_and_validate() runs the full chain: flavor detection,
flavor-specific validation checks, cluster name adoption, datapath
resolution and the configuration gate. The first failing stage aborts the
chain before anything is applied to the cluster.

K8sUninstaller.autodetect() only detects the flavor, so uninstalling works
against misconfigured or partially installed clusters.
"""

import logging
from typing import Any, Optional

from lib.azure import AzureBYOCNIDetector
from lib.constants import LOGGER_NAME
from lib.context import OperationContext
from lib.flavor import Flavor, Kind
from lib.tools import ToolRunner

from .checks import ValidationRegistry, default_registry, run_validation_checks
from .datapath import resolve_datapath_mode
from .gate import adopt_cluster_name, log_deprecated_ipam, run_configuration_gate
from .params import InstallParameters


def _detect(flavor_detector: Any, ctx: OperationContext, logger: logging.Logger) -> Flavor:
    flavor = flavor_detector.detect_flavor(ctx)
    if flavor.kind is not Kind.UNKNOWN:
        logger.info("🔮 Auto-detected Kubernetes kind: %s", flavor.kind)
    return flavor


class K8sUninstaller:
    """Uninstall-side pre-flight: flavor detection only."""

    def __init__(self, flavor_detector: Any, logger: Optional[logging.Logger] = None) -> None:
        self.flavor_detector = flavor_detector
        self.logger = logger or logging.getLogger(LOGGER_NAME)
        self.flavor = Flavor()

    def autodetect(self, ctx: OperationContext) -> Flavor:
        self.flavor = _detect(self.flavor_detector, ctx, self.logger)
        return self.flavor


class K8sInstaller:
    """Install-side pre-flight: detection, validation and default resolution."""

    def __init__(
        self,
        flavor_detector: Any,
        params: InstallParameters,
        *,
        registry: Optional[ValidationRegistry] = None,
        tool_runner: Optional[ToolRunner] = None,
        byocni_detector: Any = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """
        Args:
            flavor_detector: Object with detect_flavor(ctx) -> Flavor
            params: Parameters owned by this installer for the run
            registry: Validation checks per kind (process default if omitted)
            tool_runner: Runner for external tools used by checks and lookups
            byocni_detector: Object with detect_byocni(ctx) -> bool; built from
                params.azure on demand if omitted
            logger: Logger receiving progress and diagnostics
        """
        self.flavor_detector = flavor_detector
        self.params = params
        # Captured before auto-detection can fill it in
        self.user_cluster_name = params.cluster_name
        self.registry = registry if registry is not None else default_registry()
        self.tool_runner = tool_runner or ToolRunner()
        self._byocni_detector = byocni_detector
        self.logger = logger or logging.getLogger(LOGGER_NAME)
        self.flavor = Flavor()

    @property
    def chart_version(self) -> str:
        return self.params.version

    @property
    def byocni_detector(self) -> Any:
        if self._byocni_detector is None:
            # A name the user gave wins; otherwise the detector's raw name is the
            # AKS resource name, which may differ from the normalized install name
            cluster_name = self.user_cluster_name or self.flavor.cluster_name
            self._byocni_detector = AzureBYOCNIDetector(
                self.tool_runner,
                self.params.azure,
                cluster_name,
                logger=self.logger,
            )
        return self._byocni_detector

    def autodetect(self, ctx: OperationContext) -> Flavor:
        self.flavor = _detect(self.flavor_detector, ctx, self.logger)
        return self.flavor

    def detect_datapath_mode(self, ctx: OperationContext, with_kpr: bool = True) -> None:
        resolve_datapath_mode(
            ctx,
            self.flavor,
            self.params,
            byocni_detector=self.byocni_detector,
            logger=self.logger,
            with_kpr=with_kpr,
        )

    def autodetect_and_validate(self, ctx: OperationContext) -> InstallParameters:
        """
        Detect the cluster flavor, validate it and resolve defaults.

        Returns:
            The resolved InstallParameters (the same instance passed in)

        Raises:
            ValidationCheckError: A flavor-specific check failed
            ProviderLookupError: The AKS BYOCNI lookup failed
            InvalidClusterNameError: The cluster name was rejected
            InvalidEncryptionModeError: The encryption mode was rejected
            OperationCancelledError: ctx was cancelled or expired
        """
        self.autodetect(ctx)

        run_validation_checks(
            ctx,
            self.flavor,
            self.params,
            self,
            registry=self.registry,
            logger=self.logger,
        )

        ctx.check("pre-flight")
        self.logger.info("ℹ Using chart version %s", self.chart_version)

        adopt_cluster_name(self.params, self.flavor, self.logger)

        self.detect_datapath_mode(ctx, with_kpr=True)

        log_deprecated_ipam(self.params, self.logger)

        ctx.check("pre-flight")
        run_configuration_gate(self.params, self.logger)

        return self.params
