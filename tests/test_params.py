"""Unit tests for installer/params.py (values files and CLI precedence)."""

import argparse

import pytest

from installer.params import (
    AzureParameters,
    AzureValues,
    InstallParameters,
    ValuesFile,
    build_parameters,
    load_values_file,
)
from lib.constants import DEFAULT_CHART_VERSION
from lib.exceptions import ConfigurationError


def _args(**overrides):
    defaults = {
        "datapath_mode": None,
        "kube_proxy_replacement": None,
        "cluster_name": None,
        "encryption": None,
        "ipam": None,
        "version": None,
        "azure_resource_group": None,
        "azure_subscription_id": None,
        "disable_check": None,
    }
    defaults.update(overrides)
    return argparse.Namespace(**defaults)


@pytest.mark.unit
class TestInstallParameters:
    def test_defaults(self):
        params = InstallParameters()

        assert params.datapath_mode == ""
        assert params.kube_proxy_replacement == ""
        assert params.cluster_name == ""
        assert params.encryption == "disabled"
        assert params.version == DEFAULT_CHART_VERSION
        assert params.azure == AzureParameters()

    def test_is_check_disabled_exact_match(self):
        params = InstallParameters(disable_checks=["minimum-version"])

        assert params.is_check_disabled("minimum-version")
        assert not params.is_check_disabled("minimum")
        assert not params.is_check_disabled("Minimum-Version")

    def test_to_dict_includes_azure(self):
        data = InstallParameters(azure=AzureParameters(resource_group="rg")).to_dict()

        assert data["azure"]["resource_group"] == "rg"
        assert data["disable_checks"] == []


@pytest.mark.unit
class TestLoadValuesFile:
    def test_loads_mapping(self, tmp_path):
        path = tmp_path / "values.yaml"
        path.write_text(
            "cluster_name: prod\n"
            "encryption: wireguard\n"
            'version: "1.10.0"\n'
            "disable_checks:\n"
            "  - minimum-version\n"
            "azure:\n"
            "  resource_group: prod-rg\n"
        )

        values = load_values_file(str(path))

        assert values.cluster_name == "prod"
        assert values.encryption == "wireguard"
        assert values.version == "1.10.0"
        assert values.disable_checks == ["minimum-version"]
        assert values.azure == AzureValues(resource_group="prod-rg")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "values.yaml"
        path.write_text("")

        assert load_values_file(str(path)) == ValuesFile()

    def test_single_disable_check_string(self, tmp_path):
        path = tmp_path / "values.yaml"
        path.write_text("disable_checks: kind-version\n")

        assert load_values_file(str(path)).disable_checks == ["kind-version"]

    def test_null_entries_are_unset(self, tmp_path):
        path = tmp_path / "values.yaml"
        path.write_text("cluster_name: ~\ndisable_checks: ~\nazure: ~\n")

        values = load_values_file(str(path))

        assert values.cluster_name is None
        assert values.disable_checks == []
        assert values.azure is None

    @pytest.mark.parametrize(
        "content,message",
        [
            ("- a\n- b\n", "must contain a mapping"),
            ("datapath: tunnel\n", "datapath"),
            ("azure:\n  region: westeurope\n", "azure.region"),
            ("azure:\n  is_byocni: true\n", "azure.is_byocni"),
            ("azure: rg\n", "azure"),
            ("disable_checks: 3\n", "disable_checks"),
            ("cluster_name: [unclosed\n", "Failed to load"),
        ],
    )
    def test_rejects_invalid_content(self, tmp_path, content, message):
        path = tmp_path / "values.yaml"
        path.write_text(content)

        with pytest.raises(ConfigurationError, match=message):
            load_values_file(str(path))

    @pytest.mark.parametrize(
        "content,location",
        [
            # YAML turns these into numbers or booleans before we see them
            ("version: 1.10\n", "version"),
            ("encryption: false\n", "encryption"),
            ("disable_checks:\n  - 1.0\n", "disable_checks.0"),
            ("azure:\n  resource_group: 12345\n", "azure.resource_group"),
        ],
    )
    def test_rejects_unquoted_non_string_scalars(self, tmp_path, content, location):
        path = tmp_path / "values.yaml"
        path.write_text(content)

        with pytest.raises(ConfigurationError, match=location):
            load_values_file(str(path))

    def test_quoted_scalars_are_kept_verbatim(self, tmp_path):
        path = tmp_path / "values.yaml"
        path.write_text('version: "1.10"\ndisable_checks:\n  - "1.0"\nazure:\n  resource_group: "12345"\n')

        params = build_parameters(_args(), load_values_file(str(path)))

        assert params.version == "1.10"
        assert params.is_check_disabled("1.0")
        assert params.azure.resource_group == "12345"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Failed to load"):
            load_values_file(str(tmp_path / "missing.yaml"))


@pytest.mark.unit
class TestBuildParameters:
    def test_cli_only(self):
        params = build_parameters(_args(cluster_name="dev", disable_check=["kind-version"]))

        assert params.cluster_name == "dev"
        assert params.disable_checks == ["kind-version"]
        assert params.datapath_mode == ""
        assert params.encryption == "disabled"
        assert params.version == DEFAULT_CHART_VERSION

    def test_cli_overrides_values_file(self):
        values = ValuesFile(
            cluster_name="from-file",
            datapath_mode="native",
            azure=AzureValues(resource_group="file-rg", subscription_id="sub-1"),
        )

        params = build_parameters(_args(cluster_name="from-cli", azure_resource_group="cli-rg"), values)

        assert params.cluster_name == "from-cli"
        assert params.datapath_mode == "native"
        assert params.azure.resource_group == "cli-rg"
        assert params.azure.subscription_id == "sub-1"
        assert params.azure.is_byocni is False

    def test_unset_values_keep_defaults(self):
        params = build_parameters(_args(), ValuesFile(cluster_name="prod"))

        assert params.encryption == "disabled"
        assert params.version == DEFAULT_CHART_VERSION
        assert params.azure == AzureParameters()

    def test_disable_checks_merged_without_duplicates(self):
        values = ValuesFile(disable_checks=["minimum-version", "kind-version"])

        params = build_parameters(_args(disable_check=["kind-version", "az-binary"]), values)

        assert params.disable_checks == ["minimum-version", "kind-version", "az-binary"]

    def test_does_not_mutate_values(self):
        values = ValuesFile(cluster_name="prod", disable_checks=["x"])

        params = build_parameters(_args(disable_check=["y"]), values)
        params.disable_checks.append("z")

        assert values.disable_checks == ["x"]
