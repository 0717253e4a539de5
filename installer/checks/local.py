"""Validation checks for local development clusters."""

import json
from typing import TYPE_CHECKING

from lib.constants import KIND_MIN_VERSION, MINIKUBE_MIN_VERSION
from lib.context import OperationContext
from lib.exceptions import ValidationError
from lib.tools import extract_version
from lib.utils import is_version_ge, parse_version

from .base import ValidationCheck

if TYPE_CHECKING:
    from installer.autodetect import K8sInstaller


class MinikubeVersionValidation(ValidationCheck):
    """Requires a minikube release that supports CNI plugins."""

    name = "minimum-version"

    def check(self, ctx: OperationContext, installer: "K8sInstaller") -> None:
        output = installer.tool_runner.run(ctx, ["minikube", "version", "--output=json"])
        try:
            version = json.loads(output).get("minikubeVersion", "")
        except (ValueError, AttributeError) as e:
            raise ValidationError(f"unable to parse minikube version output: {e}") from e

        if parse_version(version) is None:
            raise ValidationError(f"unable to parse minikube version {version!r}")
        if not is_version_ge(version, MINIKUBE_MIN_VERSION):
            raise ValidationError(f"minimum version is {MINIKUBE_MIN_VERSION!r}, found version {version!r}")

        installer.logger.info("✓ Detected minikube version %s", version)


class KindVersionValidation(ValidationCheck):
    """Requires a kind release whose node images run a CNI-less control plane."""

    name = "kind-version"

    def check(self, ctx: OperationContext, installer: "K8sInstaller") -> None:
        output = installer.tool_runner.run(ctx, ["kind", "version"])
        version = extract_version(output)
        if version is None:
            raise ValidationError(f"unable to parse kind version from {output.strip()!r}")
        if not is_version_ge(version, KIND_MIN_VERSION):
            raise ValidationError(f"minimum version is {KIND_MIN_VERSION!r}, found version {version!r}")

        installer.logger.info("✓ Detected kind version %s", version)
