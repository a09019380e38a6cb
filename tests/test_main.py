"""Tests for program entry dispatch."""

from rush.__main__ import dispatch_fork_builtin, main
from rush.builtins import BuiltinRegistry
from rush.errors import BuiltinError
from rush.types import ExecResult


def _registry(calls):
    async def handle_hello(ctx, stmt):
        calls.append((stmt.name, stmt.arguments))
        return ExecResult()

    async def handle_fail(ctx, stmt):
        return ExecResult(exit_code=2, message="fail: no luck")

    async def handle_raise(ctx, stmt):
        raise BuiltinError("raise: broken")

    registry = BuiltinRegistry()
    registry.add_fork_builtin("hello", handle_hello)
    registry.add_fork_builtin("raise", handle_raise)
    registry.add_fork_builtin("fail", handle_fail)
    return registry


class TestForkDispatch:
    """Test running as a multi-call binary."""

    def test_matching_name_runs_handler(self):
        calls = []
        status = dispatch_fork_builtin(_registry(calls), ["/usr/local/bin/hello", "a", "b"])
        assert status == 0
        assert calls == [("hello", ["a", "b"])]

    def test_failure_is_fatal(self, caplog):
        status = dispatch_fork_builtin(_registry([]), ["fail"])
        assert status == 1
        assert "fail: no luck" in caplog.text

    def test_raised_error_is_fatal(self, caplog):
        assert dispatch_fork_builtin(_registry([]), ["raise"]) == 1
        assert "raise: broken" in caplog.text

    def test_other_names_are_ignored(self):
        assert dispatch_fork_builtin(_registry([]), ["rush"]) is None

    def test_isolate_without_arguments(self):
        from rush.builtins import create_builtin_registry

        assert dispatch_fork_builtin(create_builtin_registry(), ["isolate"]) == 1


class TestMain:
    """Test the interactive entry point."""

    def test_arguments_are_refused(self, capsys):
        assert main(["rush", "script.sh"]) == 1
        assert "no scripts/args yet" in capsys.readouterr().out
