"""Unit tests for the validation registry and check runner."""

from unittest.mock import Mock

import pytest

from installer.checks import ValidationCheck, ValidationRegistry, default_registry, run_validation_checks
from installer.params import InstallParameters
from lib.context import OperationContext
from lib.exceptions import ConfigurationError, DuplicateCheckError, OperationCancelledError, ValidationCheckError
from lib.flavor import Flavor, Kind


class RecordingCheck(ValidationCheck):
    """Stub check that records invocations and optionally fails."""

    def __init__(self, name, error=None):
        self.name = name
        self.error = error
        self.calls = 0

    def check(self, ctx, installer):
        self.calls += 1
        if self.error is not None:
            raise self.error


def _run(checks, kind=Kind.KIND, disable=None, ctx=None, logger=None):
    registry = ValidationRegistry({kind: checks})
    params = InstallParameters(disable_checks=list(disable or []))
    return run_validation_checks(
        ctx or OperationContext(),
        Flavor(kind),
        params,
        Mock(),
        registry=registry,
        logger=logger or Mock(),
    )


@pytest.mark.unit
class TestValidationRegistry:
    def test_default_registry_contents(self):
        registry = default_registry()

        assert [c.name for c in registry.checks_for(Kind.MINIKUBE)] == ["minimum-version"]
        assert [c.name for c in registry.checks_for(Kind.KIND)] == ["kind-version"]
        assert [c.name for c in registry.checks_for(Kind.AKS)] == ["az-binary"]
        assert set(registry.check_names()) == {"minimum-version", "kind-version", "az-binary"}

    def test_default_registry_built_once(self):
        assert default_registry() is default_registry()

    @pytest.mark.parametrize("kind", [Kind.UNKNOWN, Kind.EKS, Kind.GKE, Kind.K3S])
    def test_absent_kind_has_no_checks(self, kind):
        registry = default_registry()

        assert registry.checks_for(kind) == ()
        assert kind not in registry

    def test_duplicate_names_rejected(self):
        with pytest.raises(DuplicateCheckError) as exc_info:
            ValidationRegistry({Kind.KIND: [RecordingCheck("dup"), RecordingCheck("dup")]})

        assert exc_info.value.check_name == "dup"
        assert exc_info.value.kind == "kind"

    def test_same_name_allowed_across_kinds(self):
        registry = ValidationRegistry({Kind.KIND: [RecordingCheck("v")], Kind.MINIKUBE: [RecordingCheck("v")]})

        assert set(registry.kinds()) == {Kind.KIND, Kind.MINIKUBE}

    def test_unnamed_check_rejected(self):
        with pytest.raises(ConfigurationError):
            ValidationRegistry({Kind.KIND: [RecordingCheck("")]})

    def test_registry_is_immutable(self):
        source = {Kind.KIND: [RecordingCheck("a")]}
        registry = ValidationRegistry(source)
        source[Kind.KIND].append(RecordingCheck("b"))

        assert [c.name for c in registry.checks_for(Kind.KIND)] == ["a"]
        with pytest.raises(TypeError):
            registry._checks[Kind.EKS] = ()


@pytest.mark.unit
class TestCheckRunner:
    def test_absent_kind_runs_nothing(self):
        logger = Mock()
        check = RecordingCheck("a")
        registry = ValidationRegistry({Kind.KIND: [check]})

        ran = run_validation_checks(
            OperationContext(), Flavor(Kind.EKS), InstallParameters(), Mock(), registry=registry, logger=logger
        )

        assert ran == []
        assert check.calls == 0
        logger.info.assert_not_called()

    def test_runs_in_registration_order(self):
        first, second = RecordingCheck("first"), RecordingCheck("second")

        assert _run([first, second]) == ["first", "second"]
        assert first.calls == second.calls == 1

    def test_disabled_check_never_invoked(self):
        disabled, other = RecordingCheck("kind-version"), RecordingCheck("other")
        logger = Mock()

        ran = _run([disabled, other], disable=["kind-version"], logger=logger)

        assert disabled.calls == 0
        assert ran == ["other"]
        logger.info.assert_any_call("⏭ Skipping disabled validation test %r", "kind-version")

    def test_disabling_unknown_name_is_noop(self):
        check = RecordingCheck("kind-version")

        assert _run([check], disable=["does-not-exist"]) == ["kind-version"]

    def test_disable_match_is_exact(self):
        check = RecordingCheck("kind-version")

        _run([check], disable=["kind", "KIND-VERSION"])

        assert check.calls == 1

    def test_first_failure_short_circuits(self):
        failing = RecordingCheck("first", error=RuntimeError("too old"))
        second = RecordingCheck("second")
        logger = Mock()

        with pytest.raises(ValidationCheckError) as exc_info:
            _run([failing, second], logger=logger)

        assert second.calls == 0
        assert exc_info.value.kind == "kind"
        assert exc_info.value.check_name == "first"
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        logger.error.assert_called_once()
        logger.info.assert_any_call("ℹ You can disable the test with %s=%s", "--disable-check", "first")

    def test_disabled_failing_check_lets_run_pass(self):
        failing = RecordingCheck("first", error=RuntimeError("too old"))

        assert _run([failing, RecordingCheck("second")], disable=["first"]) == ["second"]

    def test_cancelled_context_stops_before_checks(self):
        check = RecordingCheck("a")
        ctx = OperationContext()
        ctx.cancel()

        with pytest.raises(OperationCancelledError):
            _run([check], ctx=ctx)

        assert check.calls == 0

    def test_cancellation_inside_check_is_not_wrapped(self):
        check = RecordingCheck("a", error=OperationCancelledError("cancelled"))

        with pytest.raises(OperationCancelledError) as exc_info:
            _run([check])

        assert not isinstance(exc_info.value, ValidationCheckError)
