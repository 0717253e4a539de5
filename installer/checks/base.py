"""Base class for flavor-specific validation checks."""

from typing import TYPE_CHECKING

from lib.context import OperationContext

if TYPE_CHECKING:
    from installer.autodetect import K8sInstaller


class ValidationCheck:
    """A named pre-flight check registered for one cluster kind.

    Subclasses set `name` (stable and unique within a kind, used by
    --disable-check) and implement check(), raising on failure.
    """

    name: str = ""

    def check(self, ctx: OperationContext, installer: "K8sInstaller") -> None:
        """Run the check.

        Args:
            ctx: Operation context; long-running work must honour it
            installer: Installer state (parameters, flavor, tool runner, logger)

        Raises:
            Exception: Any error fails the check
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
