"""
Azure Kubernetes Service lookups.

Determines whether an AKS cluster was created in bring-your-own-CNI mode
(network plugin "none"), which decides the datapath the installer uses.
"""

import json
import logging
from typing import TYPE_CHECKING, Any, Optional

from lib.constants import AKS_BYOCNI_NETWORK_PLUGIN, LOGGER_NAME
from lib.context import OperationContext
from lib.exceptions import ProviderLookupError, ToolExecutionError

if TYPE_CHECKING:
    from installer.params import AzureParameters

logger = logging.getLogger(LOGGER_NAME)

PROVIDER = "azure"


class AzureBYOCNIDetector:
    """Looks up the AKS network profile through the az CLI."""

    def __init__(
        self,
        tool_runner: Any,
        azure_params: "AzureParameters",
        cluster_name: str,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.tool_runner = tool_runner
        self.azure_params = azure_params
        self.cluster_name = cluster_name
        self.logger = logger or logging.getLogger(LOGGER_NAME)

    def _aks_show_command(self) -> list:
        cmd = [
            "az",
            "aks",
            "show",
            "--resource-group",
            self.azure_params.resource_group,
            "--name",
            self.cluster_name,
            "--output",
            "json",
        ]
        if self.azure_params.subscription_id:
            cmd += ["--subscription", self.azure_params.subscription_id]
        return cmd

    def detect_byocni(self, ctx: OperationContext) -> bool:
        """
        Return True if the AKS cluster runs without a platform CNI.

        Raises:
            ProviderLookupError: If the lookup cannot be performed or parsed
            OperationCancelledError: If ctx is cancelled or expires
        """
        if not self.azure_params.resource_group:
            raise ProviderLookupError(
                PROVIDER,
                "--azure-resource-group is required to auto-detect the AKS datapath mode",
            )
        if not self.cluster_name:
            raise ProviderLookupError(PROVIDER, "AKS cluster name is unknown, use --cluster-name")

        self.logger.info(
            "Looking up AKS cluster %s in resource group %s",
            self.cluster_name,
            self.azure_params.resource_group,
        )
        try:
            output = self.tool_runner.run(ctx, self._aks_show_command())
        except ToolExecutionError as e:
            raise ProviderLookupError(PROVIDER, f"failed to look up AKS cluster {self.cluster_name}: {e}") from e

        try:
            cluster = json.loads(output)
            network_plugin = (cluster.get("networkProfile") or {}).get("networkPlugin")
        except (ValueError, AttributeError) as e:
            raise ProviderLookupError(PROVIDER, f"unexpected output from az aks show: {e}") from e

        self.logger.debug("AKS cluster %s network plugin: %s", self.cluster_name, network_plugin)
        return network_plugin == AKS_BYOCNI_NETWORK_PLUGIN
