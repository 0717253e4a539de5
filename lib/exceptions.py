"""
Custom exceptions for cluster networking installer pre-flight checks.
"""


class InstallerError(Exception):
    """Base class for all installer errors."""


class TransientError(InstallerError):
    """
    Error that might be resolved by retrying.
    Examples: Network timeouts, 503 Service Unavailable.
    """


class FatalError(InstallerError):
    """
    Error that cannot be resolved by retrying.
    Examples: Invalid configuration, missing tools, failed provider lookups.
    """


class ConfigurationError(FatalError):
    """Invalid configuration or arguments."""


class ValidationError(ConfigurationError):
    """Pre-flight validation failure."""


class SecurityValidationError(ValidationError):
    """Input rejected because it could escape the allowed filesystem area."""


class DuplicateCheckError(ConfigurationError):
    """Two validation checks registered for one kind share a name."""

    def __init__(self, kind: str, check_name: str) -> None:
        self.kind = kind
        self.check_name = check_name
        super().__init__(f"duplicate validation check {check_name!r} registered for kind {kind!r}")


class ValidationCheckError(ValidationError):
    """A flavor-specific validation check failed."""

    def __init__(self, kind: str, check_name: str, reason: str = "") -> None:
        self.kind = kind
        self.check_name = check_name
        self.reason = reason
        message = f"validation check for kind {kind!r} failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class InvalidClusterNameError(ValidationError):
    """Cluster name is not acceptable as a Kubernetes object name."""

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        super().__init__(message)


class ClusterNameDotError(InvalidClusterNameError):
    """Cluster name contains a dot."""


class ClusterNamePatternError(InvalidClusterNameError):
    """Cluster name does not match the DNS-label pattern."""


class InvalidEncryptionModeError(ValidationError):
    """Encryption mode is not one of the supported values."""

    def __init__(self, mode: str, message: str) -> None:
        self.mode = mode
        super().__init__(message)


class ProviderLookupError(FatalError):
    """A cloud-provider specific lookup failed."""

    def __init__(self, provider: str, message: str) -> None:
        self.provider = provider
        super().__init__(message)


class ToolExecutionError(FatalError):
    """An external command-line tool is missing or exited with an error."""

    def __init__(self, tool: str, message: str) -> None:
        self.tool = tool
        super().__init__(message)


class OperationCancelledError(InstallerError):
    """The caller cancelled the operation."""


class OperationTimeoutError(OperationCancelledError):
    """The operation deadline expired."""
