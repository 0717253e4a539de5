"""
Tests for the exception module hierarchy and behavior.
"""

import pytest

from lib.exceptions import (
    ClusterNameDotError,
    ClusterNamePatternError,
    ConfigurationError,
    DuplicateCheckError,
    FatalError,
    InstallerError,
    InvalidClusterNameError,
    InvalidEncryptionModeError,
    OperationCancelledError,
    OperationTimeoutError,
    ProviderLookupError,
    SecurityValidationError,
    ToolExecutionError,
    TransientError,
    ValidationCheckError,
    ValidationError,
)


@pytest.mark.unit
class TestExceptionHierarchy:
    """Test the exception class inheritance chain."""

    def test_installer_error_is_base_exception(self):
        """InstallerError should be the root of our exception hierarchy."""
        assert issubclass(InstallerError, Exception)
        exc = InstallerError("test error")
        assert isinstance(exc, Exception)

    def test_transient_and_fatal_extend_installer_error(self):
        assert issubclass(TransientError, InstallerError)
        assert issubclass(FatalError, InstallerError)

    def test_validation_error_extends_configuration_error(self):
        """ValidationError should extend ConfigurationError."""
        assert issubclass(ValidationError, ConfigurationError)
        assert issubclass(ValidationError, FatalError)
        assert issubclass(ValidationError, InstallerError)

    def test_security_validation_error_extends_validation_error(self):
        assert issubclass(SecurityValidationError, ValidationError)

    @pytest.mark.parametrize(
        "exc_cls",
        [ValidationCheckError, InvalidClusterNameError, InvalidEncryptionModeError],
    )
    def test_gate_errors_are_validation_errors(self, exc_cls):
        assert issubclass(exc_cls, ValidationError)

    def test_cluster_name_sub_kinds_are_distinct(self):
        """Dot and pattern errors share a parent but are separate kinds."""
        assert issubclass(ClusterNameDotError, InvalidClusterNameError)
        assert issubclass(ClusterNamePatternError, InvalidClusterNameError)
        assert not issubclass(ClusterNameDotError, ClusterNamePatternError)
        assert not issubclass(ClusterNamePatternError, ClusterNameDotError)

    def test_provider_lookup_and_tool_errors_are_fatal(self):
        assert issubclass(ProviderLookupError, FatalError)
        assert issubclass(ToolExecutionError, FatalError)
        assert not issubclass(ProviderLookupError, ValidationError)

    def test_duplicate_check_error_is_configuration_error(self):
        assert issubclass(DuplicateCheckError, ConfigurationError)

    def test_cancellation_is_not_a_validation_error(self):
        assert issubclass(OperationTimeoutError, OperationCancelledError)
        assert issubclass(OperationCancelledError, InstallerError)
        assert not issubclass(OperationCancelledError, FatalError)


@pytest.mark.unit
class TestExceptionMessages:
    """Test exception message handling and attributes."""

    def test_validation_check_error_carries_kind_and_check(self):
        exc = ValidationCheckError("minikube", "minimum-version", "too old")
        assert exc.kind == "minikube"
        assert exc.check_name == "minimum-version"
        assert str(exc) == "validation check for kind 'minikube' failed: too old"

    def test_validation_check_error_without_reason(self):
        exc = ValidationCheckError("kind", "kind-version")
        assert str(exc) == "validation check for kind 'kind' failed"

    def test_duplicate_check_error_message(self):
        exc = DuplicateCheckError("aks", "az-binary")
        assert exc.kind == "aks"
        assert exc.check_name == "az-binary"
        assert "az-binary" in str(exc)

    def test_invalid_cluster_name_keeps_name(self):
        exc = ClusterNameDotError("ab.cd", "invalid cluster name, dots are not allowed")
        assert exc.name == "ab.cd"
        assert "dots" in str(exc)

    def test_provider_lookup_error_keeps_provider(self):
        exc = ProviderLookupError("azure", "lookup failed")
        assert exc.provider == "azure"
        assert str(exc) == "lookup failed"

    def test_exceptions_can_be_chained(self):
        """Check failures keep the original error as __cause__."""
        original = ValueError("boom")
        try:
            try:
                raise original
            except ValueError as e:
                raise ValidationCheckError("kind", "kind-version", str(e)) from e
        except ValidationCheckError as exc:
            assert exc.__cause__ is original
