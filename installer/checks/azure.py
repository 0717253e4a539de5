"""Validation checks for Azure Kubernetes Service clusters."""

import json
from typing import TYPE_CHECKING

from lib.constants import AZURE_CLI_MIN_VERSION
from lib.context import OperationContext
from lib.exceptions import ValidationError
from lib.utils import is_version_ge

from .base import ValidationCheck

if TYPE_CHECKING:
    from installer.autodetect import K8sInstaller


class AzureVersionValidation(ValidationCheck):
    """The AKS datapath lookup needs a working az CLI."""

    name = "az-binary"

    def check(self, ctx: OperationContext, installer: "K8sInstaller") -> None:
        output = installer.tool_runner.run(ctx, ["az", "version", "--output", "json"])
        try:
            version = json.loads(output).get("azure-cli", "")
        except (ValueError, AttributeError) as e:
            raise ValidationError(f"unable to parse az version output: {e}") from e

        if not is_version_ge(version, AZURE_CLI_MIN_VERSION):
            raise ValidationError(f"minimum az version is {AZURE_CLI_MIN_VERSION!r}, found version {version!r}")

        installer.logger.info("✓ Detected az CLI version %s", version)
