"""Registry of validation checks per cluster kind."""

from functools import lru_cache
from types import MappingProxyType
from typing import Iterable, Mapping, Tuple

from lib.exceptions import ConfigurationError, DuplicateCheckError
from lib.flavor import Kind

from .azure import AzureVersionValidation
from .base import ValidationCheck
from .local import KindVersionValidation, MinikubeVersionValidation


class ValidationRegistry:
    """Immutable mapping from cluster kind to its ordered validation checks.

    Order defines execution order. A kind without an entry simply has no
    flavor-specific checks. Check names must be unique within a kind so that
    --disable-check is never ambiguous.
    """

    def __init__(self, checks: Mapping[Kind, Iterable[ValidationCheck]]) -> None:
        frozen = {}
        for kind, kind_checks in checks.items():
            kind = Kind(kind)
            kind_checks = tuple(kind_checks)
            seen = set()
            for check in kind_checks:
                if not check.name:
                    raise ConfigurationError(f"validation check {check!r} for kind {kind!r} has no name")
                if check.name in seen:
                    raise DuplicateCheckError(str(kind), check.name)
                seen.add(check.name)
            if kind_checks:
                frozen[kind] = kind_checks
        self._checks = MappingProxyType(frozen)

    def checks_for(self, kind: Kind) -> Tuple[ValidationCheck, ...]:
        """Return the checks registered for kind (empty when none)."""
        return self._checks.get(kind, ())

    def kinds(self) -> Tuple[Kind, ...]:
        return tuple(self._checks)

    def check_names(self) -> Tuple[str, ...]:
        """All registered check names, used for CLI help output."""
        names = []
        for kind_checks in self._checks.values():
            for check in kind_checks:
                if check.name not in names:
                    names.append(check.name)
        return tuple(names)

    def __contains__(self, kind: object) -> bool:
        return kind in self._checks


@lru_cache(maxsize=1)
def default_registry() -> ValidationRegistry:
    """Build the process-wide registry once; later calls return the same instance."""
    return ValidationRegistry(
        {
            Kind.MINIKUBE: [MinikubeVersionValidation()],
            Kind.KIND: [KindVersionValidation()],
            Kind.AKS: [AzureVersionValidation()],
        }
    )
