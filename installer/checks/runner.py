"""Runs the validation checks registered for a detected flavor."""

import logging
from typing import TYPE_CHECKING, List

from lib.constants import DISABLE_CHECK_FLAG
from lib.context import OperationContext
from lib.exceptions import OperationCancelledError, ValidationCheckError
from lib.flavor import Flavor

from .registry import ValidationRegistry

if TYPE_CHECKING:
    from installer.autodetect import K8sInstaller
    from installer.params import InstallParameters


def run_validation_checks(
    ctx: OperationContext,
    flavor: Flavor,
    params: "InstallParameters",
    installer: "K8sInstaller",
    *,
    registry: ValidationRegistry,
    logger: logging.Logger,
) -> List[str]:
    """
    Run every non-disabled check for flavor.kind in registration order.

    Stops at the first failing check. Disabling a name that is not
    registered is a no-op.

    Returns:
        Names of the checks that ran and passed

    Raises:
        ValidationCheckError: If a check fails (chained from the check's error)
        OperationCancelledError: If ctx is cancelled or expires
    """
    checks = registry.checks_for(flavor.kind)
    if not checks:
        return []

    logger.info("Running %r validation checks", str(flavor.kind))
    passed: List[str] = []
    for check in checks:
        name = check.name
        if params.is_check_disabled(name):
            logger.info("⏭ Skipping disabled validation test %r", name)
            continue

        ctx.check(f"validation check {name}")
        try:
            check.check(ctx, installer)
        except OperationCancelledError:
            raise
        except Exception as exc:
            logger.error("✗ Validation test %s failed: %s", name, exc)
            logger.info("ℹ You can disable the test with %s=%s", DISABLE_CHECK_FLAG, name)
            raise ValidationCheckError(str(flavor.kind), name, str(exc)) from exc
        passed.append(name)

    return passed
