"""
Tests for the adapter protocol, registry, mock, filesystem and emit adapters.
"""

import sys
from pathlib import Path

from diff_verify.adapters.base import ExecutionContext
from diff_verify.adapters.mock import MockAdapter
from diff_verify.adapters.registry import AdapterRegistry, default_registry
from diff_verify.adapters.shell.command import EmitCommandAdapter
from diff_verify.adapters.shell.filesystem import FilesystemAdapter
from diff_verify.core.models.action import Action, Receipt, now_iso

# ── Protocol Tests ───────────────────────────────────────────────────


class TestExecutionContext:
    def test_resolve_relative(self):
        ctx = ExecutionContext(action=Action(id="t", adapter="filesystem"), project_root="/repo")
        assert ctx.resolve("a/b.ts") == Path("/repo/a/b.ts")

    def test_resolve_absolute(self):
        ctx = ExecutionContext(action=Action(id="t", adapter="filesystem"), project_root="/repo")
        assert ctx.resolve("/elsewhere/b.ts") == Path("/elsewhere/b.ts")


# ── Mock Adapter Tests ───────────────────────────────────────────────


class TestMockAdapter:
    def test_default_success(self):
        mock = MockAdapter(adapter_name="emit")
        ctx = ExecutionContext(action=Action(id="emit", adapter="emit"))
        receipt = mock.execute(ctx)
        assert receipt.ok
        assert mock.call_count == 1

    def test_set_failure(self):
        mock = MockAdapter()
        mock.set_failure("op-fail", error="Intentional failure")
        ctx = ExecutionContext(action=Action(id="op-fail", adapter="mock"))
        receipt = mock.execute(ctx)
        assert receipt.failed
        assert "Intentional failure" in receipt.error

    def test_on_execute_hook(self):
        seen = []
        mock = MockAdapter(on_execute=lambda ctx: seen.append(ctx.action.id))
        mock.execute(ExecutionContext(action=Action(id="op-1", adapter="mock")))
        assert seen == ["op-1"]

    def test_reset(self):
        mock = MockAdapter()
        mock.set_failure("op-1")
        mock.execute(ExecutionContext(action=Action(id="op-1", adapter="mock")))
        mock.reset()
        assert mock.call_count == 0


# ── Registry Tests ──────────────────────────────────────────────────


class TestAdapterRegistry:
    def test_register_and_get(self):
        registry = AdapterRegistry()
        mock = MockAdapter(adapter_name="test")
        registry.register(mock)
        assert registry.get("test") is mock
        assert "test" in registry.list_adapters()

    def test_default_registry(self):
        registry = default_registry()
        assert sorted(registry.list_adapters()) == ["emit", "filesystem"]

    def test_unknown_adapter(self):
        registry = AdapterRegistry()
        receipt = registry.execute_action(Action(id="x", adapter="nope"))
        assert receipt.failed
        assert "No adapter registered" in receipt.error

    def test_dry_run_skips_execution(self):
        registry = AdapterRegistry()
        mock = MockAdapter(adapter_name="emit")
        registry.register(mock)
        receipt = registry.execute_action(Action(id="emit", adapter="emit"), dry_run=True)
        assert receipt.skipped
        assert mock.call_count == 0

    def test_unavailable_adapter_not_executed(self):
        registry = AdapterRegistry()
        mock = MockAdapter(adapter_name="emit", available=False)
        registry.register(mock)
        receipt = registry.execute_action(Action(id="emit", adapter="emit"))
        assert receipt.failed
        assert "not available" in receipt.error
        assert mock.call_count == 0

    def test_receipt_spans_execution(self):
        seen: list[str] = []
        registry = AdapterRegistry()
        registry.register(MockAdapter(adapter_name="emit", on_execute=lambda ctx: seen.append(now_iso())))
        receipt = registry.execute_action(Action(id="emit", adapter="emit"))
        assert receipt.ok
        assert receipt.started_at <= seen[0] <= receipt.ended_at

    def test_validation_failure(self):
        registry = AdapterRegistry()
        registry.register(FilesystemAdapter())
        receipt = registry.execute_action(
            Action(id="copy:a", adapter="filesystem", params={"operation": "copy", "src": "a"})
        )
        assert receipt.failed
        assert "dest" in receipt.error

    def test_validation_runs_in_dry_run(self):
        registry = AdapterRegistry()
        registry.register(FilesystemAdapter())
        receipt = registry.execute_action(
            Action(id="bad", adapter="filesystem", params={"operation": "chmod", "path": "a"}),
            dry_run=True,
        )
        assert receipt.failed

    def test_raising_adapter_becomes_failure(self):
        def _boom(ctx):
            raise RuntimeError("kaboom")

        registry = AdapterRegistry()
        registry.register(MockAdapter(adapter_name="emit", on_execute=_boom))
        receipt = registry.execute_action(Action(id="emit", adapter="emit"))
        assert receipt.failed
        assert "kaboom" in receipt.error


# ── Filesystem Adapter Tests ────────────────────────────────────────


class TestFilesystemAdapter:
    def _run(self, root: Path, **params) -> Receipt:
        ctx = ExecutionContext(
            action=Action(id=f"{params['operation']}:t", adapter="filesystem", params=params),
            project_root=str(root),
            params=params,
        )
        return FilesystemAdapter().execute(ctx)

    def test_copy(self, tmp_path: Path):
        (tmp_path / "a.ts").write_text("A")
        receipt = self._run(tmp_path, operation="copy", src="a.ts", dest="a.ts.tmp")
        assert receipt.ok
        assert (tmp_path / "a.ts.tmp").read_text() == "A"
        assert (tmp_path / "a.ts").read_text() == "A"

    def test_copy_missing_source(self, tmp_path: Path):
        receipt = self._run(tmp_path, operation="copy", src="nope.ts", dest="nope.ts.tmp")
        assert receipt.failed

    def test_move_overwrites(self, tmp_path: Path):
        (tmp_path / "a.ts").write_text("generated")
        (tmp_path / "a.ts.tmp").write_text("original")
        receipt = self._run(tmp_path, operation="move", src="a.ts.tmp", dest="a.ts")
        assert receipt.ok
        assert (tmp_path / "a.ts").read_text() == "original"
        assert not (tmp_path / "a.ts.tmp").exists()

    def test_read_keeps_line_endings(self, tmp_path: Path):
        (tmp_path / "a.ts").write_bytes(b"x\r\ny\n")
        receipt = self._run(tmp_path, operation="read", path="a.ts")
        assert receipt.ok
        assert receipt.output == "x\r\ny\n"

    def test_read_invalid_utf8(self, tmp_path: Path):
        (tmp_path / "a.bin").write_bytes(b"\xff\xfe\xfa")
        receipt = self._run(tmp_path, operation="read", path="a.bin")
        assert receipt.failed

    def test_validate_unknown_operation(self):
        ctx = ExecutionContext(
            action=Action(id="x", adapter="filesystem", params={"operation": "write"})
        )
        valid, msg = FilesystemAdapter().validate(ctx)
        assert not valid
        assert "Unknown operation" in msg


# ── Emit Adapter Tests ──────────────────────────────────────────────


class TestEmitCommandAdapter:
    def _run(self, root: Path, command: list[str]) -> Receipt:
        params = {"command": command}
        ctx = ExecutionContext(
            action=Action(id="emit", adapter="emit", params=params),
            project_root=str(root),
            params=params,
        )
        return EmitCommandAdapter().execute(ctx)

    def test_success(self, tmp_path: Path):
        receipt = self._run(tmp_path, [sys.executable, "-c", "open('out.txt', 'w').write('hi')"])
        assert receipt.ok
        assert receipt.metadata["return_code"] == 0
        # runs in the working directory
        assert (tmp_path / "out.txt").read_text() == "hi"

    def test_nonzero_exit(self, tmp_path: Path):
        receipt = self._run(tmp_path, [sys.executable, "-c", "import sys; sys.exit(4)"])
        assert receipt.failed
        assert receipt.metadata["return_code"] == 4
        assert "4" in receipt.error

    def test_missing_program(self, tmp_path: Path):
        receipt = self._run(tmp_path, ["definitely-not-a-real-program-xyz"])
        assert receipt.failed
        assert "Cannot start" in receipt.error

    def test_validate_requires_command(self):
        ctx = ExecutionContext(action=Action(id="emit", adapter="emit"))
        valid, msg = EmitCommandAdapter().validate(ctx)
        assert not valid
        assert "command" in msg

    def test_validate_rejects_string_command(self):
        ctx = ExecutionContext(
            action=Action(id="emit", adapter="emit", params={"command": "npm run gen"})
        )
        valid, _ = EmitCommandAdapter().validate(ctx)
        assert not valid
