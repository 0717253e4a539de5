"""
Install parameters shared by every pre-flight stage.

A single InstallParameters instance is owned by the installer for one run.
Each resolvable field moves at most once from unset ("") to resolved, and a
value supplied by the user is never overwritten by auto-detection.
"""

import argparse
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator
from pydantic import ValidationError as SchemaValidationError

from lib.constants import DEFAULT_CHART_VERSION, ENCRYPTION_DISABLED, LOGGER_NAME
from lib.exceptions import ConfigurationError

logger = logging.getLogger(LOGGER_NAME)


@dataclass
class AzureParameters:
    """AKS-specific settings; is_byocni is filled in by the provider lookup."""

    resource_group: str = ""
    subscription_id: str = ""
    is_byocni: bool = False


@dataclass
class InstallParameters:
    """User-supplied configuration plus values resolved during pre-flight."""

    disable_checks: List[str] = field(default_factory=list)
    datapath_mode: str = ""
    kube_proxy_replacement: str = ""
    cluster_name: str = ""
    encryption: str = ENCRYPTION_DISABLED
    # Deprecated, kept for backwards compatibility
    ipam: str = ""
    version: str = DEFAULT_CHART_VERSION
    azure: AzureParameters = field(default_factory=AzureParameters)

    def is_check_disabled(self, name: str) -> bool:
        """Return True if the named validation check was disabled by the user."""
        return name in self.disable_checks

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class AzureValues(BaseModel):
    """The `azure` section of a values file."""

    model_config = ConfigDict(extra="forbid")

    resource_group: Optional[StrictStr] = None
    subscription_id: Optional[StrictStr] = None


class ValuesFile(BaseModel):
    """
    Schema of a --values file.

    Every scalar must be a YAML string. Unquoted numbers and booleans are
    rejected because YAML has already changed them (`1.10` loads as 1.1).

    Example:
        version: "1.16.3"
        cluster_name: prod
        disable_checks:
          - az-binary
        azure:
          resource_group: prod-rg
    """

    model_config = ConfigDict(extra="forbid")

    disable_checks: List[StrictStr] = Field(default_factory=list)
    datapath_mode: Optional[StrictStr] = None
    kube_proxy_replacement: Optional[StrictStr] = None
    cluster_name: Optional[StrictStr] = None
    encryption: Optional[StrictStr] = None
    ipam: Optional[StrictStr] = None
    version: Optional[StrictStr] = None
    azure: Optional[AzureValues] = None

    @field_validator("disable_checks", mode="before")
    @classmethod
    def single_check_as_list(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value


# CLI attribute -> InstallParameters field
_CLI_FIELDS = {
    "datapath_mode": "datapath_mode",
    "kube_proxy_replacement": "kube_proxy_replacement",
    "cluster_name": "cluster_name",
    "encryption": "encryption",
    "ipam": "ipam",
    "version": "version",
}
_CLI_AZURE_FIELDS = {
    "azure_resource_group": "resource_group",
    "azure_subscription_id": "subscription_id",
}


def _merge_unique(*lists: Optional[List[str]]) -> List[str]:
    merged: List[str] = []
    for items in lists:
        for item in items or []:
            if item not in merged:
                merged.append(item)
    return merged


def _describe_errors(exc: SchemaValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['msg']}" for error in exc.errors()
    )


def load_values_file(path: str) -> ValuesFile:
    """
    Load install parameters from a YAML values file.

    Raises:
        ConfigurationError: If the file cannot be read or does not match ValuesFile
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to load values file {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Values file {path} must contain a mapping, got {type(data).__name__}")

    try:
        values = ValuesFile.model_validate(data)
    except SchemaValidationError as e:
        raise ConfigurationError(f"Invalid values file {path}: {_describe_errors(e)}") from e

    logger.debug("Loaded values file %s", path)
    return values


def build_parameters(args: argparse.Namespace, values: Optional[ValuesFile] = None) -> InstallParameters:
    """
    Build InstallParameters from a values file and parsed CLI arguments.

    Values file entries are applied first; CLI flags that were given override
    them. Disabled check lists from both sources are merged.
    """
    values = values or ValuesFile()

    params = InstallParameters(**values.model_dump(exclude={"azure", "disable_checks"}, exclude_none=True))
    if values.azure is not None:
        params.azure = AzureParameters(**values.azure.model_dump(exclude_none=True))

    for attr, name in _CLI_FIELDS.items():
        value = getattr(args, attr, None)
        if value is not None:
            setattr(params, name, value)

    for attr, name in _CLI_AZURE_FIELDS.items():
        value = getattr(args, attr, None)
        if value is not None:
            setattr(params.azure, name, value)

    params.disable_checks = _merge_unique(values.disable_checks, getattr(args, "disable_check", None))
    return params
