"""Tests for workspace/provisioner.py — thread id rules and directory provisioning."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from kendesktop.errors import (
    FilesystemError,
    HomeDirectoryError,
    ValidationError,
    WorkspacePermissionError,
)
from kendesktop.workspace.provisioner import (
    LocalFilesystem,
    ThreadWorkspace,
    WorkspaceProvisioner,
    normalize_thread_id,
)


class TestNormalizeThreadId:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("Thread-01", "thread-01"),
            ("  abc  ", "abc"),
            ("a.b_c-d", "a.b_c-d"),
            ("UPPER", "upper"),
            ("2026.10.19", "2026.10.19"),
        ],
    )
    def test_accepts(self, raw: str, expected: str):
        assert normalize_thread_id(raw) == expected

    @pytest.mark.parametrize("raw", ["Thread-01", " MiXeD.Case_1 ", "x"])
    def test_idempotent(self, raw: str):
        once = normalize_thread_id(raw)
        assert normalize_thread_id(once) == once

    @pytest.mark.parametrize("raw", ["", "   ", "\t"])
    def test_rejects_empty(self, raw: str):
        with pytest.raises(ValidationError, match="Thread ID is required"):
            normalize_thread_id(raw)

    @pytest.mark.parametrize(
        "raw", ["bad/id", "has space", "a\\b", "emoji-😀", "tab\tinside", "ü", ".", ".."]
    )
    def test_rejects_disallowed(self, raw: str):
        with pytest.raises(ValidationError, match="lowercase letters, numbers"):
            normalize_thread_id(raw)


class TestPaths:
    def test_root_path(self):
        prov = WorkspaceProvisioner(environ={"HOME": "/Users/tester"})
        assert str(prov.root_path()) == "/Users/tester/Executive Assistant/Ken"

    def test_custom_segments_and_env(self):
        prov = WorkspaceProvisioner(
            environ={"KEN_HOME": "/home/x"},
            home_env="KEN_HOME",
            root_segments=("Work", "Ken"),
        )
        assert str(prov.root_path()) == "/home/x/Work/Ken"

    @pytest.mark.parametrize("environ", [{}, {"HOME": ""}, {"HOME": "   "}])
    def test_missing_home(self, environ: dict):
        prov = WorkspaceProvisioner(environ=environ)
        with pytest.raises(HomeDirectoryError, match="Unable to resolve home directory"):
            prov.root_path()

    def test_home_read_on_every_call(self, tmp_path: Path):
        environ = {"HOME": str(tmp_path / "one")}
        prov = WorkspaceProvisioner(environ=environ)
        first = prov.ensure_thread_workspace("t")
        environ["HOME"] = str(tmp_path / "two")
        second = prov.ensure_thread_workspace("t")
        assert first.root_path != second.root_path
        assert second.created is True


class TestEnsureThreadWorkspace:
    def test_first_call_creates(self, provisioner: WorkspaceProvisioner, home: Path):
        ws = provisioner.ensure_thread_workspace("Thread-01")

        assert ws.thread_id == "thread-01"
        assert ws.created is True
        assert ws.root_path == str(home / "Executive Assistant" / "Ken")
        assert ws.thread_path.endswith("/thread-01")
        assert Path(ws.thread_path).is_dir()

    def test_second_call_reuses(self, provisioner: WorkspaceProvisioner):
        first = provisioner.ensure_thread_workspace("Thread-01")
        second = provisioner.ensure_thread_workspace("thread-01")

        assert second.created is False
        assert second.root_path == first.root_path
        assert second.thread_path == first.thread_path

    def test_existing_contents_untouched(
        self, provisioner: WorkspaceProvisioner, home: Path
    ):
        ws = provisioner.ensure_thread_workspace("t1")
        note = Path(ws.thread_path) / "notes.md"
        note.write_text("keep me")

        provisioner.ensure_thread_workspace("t1")
        assert note.read_text() == "keep me"

    def test_root_already_exists(self, provisioner: WorkspaceProvisioner, home: Path):
        (home / "Executive Assistant" / "Ken").mkdir(parents=True)
        assert provisioner.ensure_thread_workspace("t1").created is True

    @pytest.mark.parametrize("raw", ["bad/id", ""])
    def test_invalid_id_does_not_touch_filesystem(self, raw: str):
        fs = MagicMock()
        prov = WorkspaceProvisioner(filesystem=fs, environ={"HOME": "/nowhere"})
        with pytest.raises(ValidationError):
            prov.ensure_thread_workspace(raw)
        fs.exists.assert_not_called()
        fs.create_dir_all.assert_not_called()

    def test_invalid_id_checked_before_home(self):
        prov = WorkspaceProvisioner(environ={})
        with pytest.raises(ValidationError):
            prov.ensure_thread_workspace("bad/id")

    def test_exists_checked_before_create(self):
        fs = MagicMock()
        fs.exists.return_value = False
        prov = WorkspaceProvisioner(filesystem=fs, environ={"HOME": "/Users/tester"})

        ws = prov.ensure_thread_workspace("t1")

        expected = Path("/Users/tester/Executive Assistant/Ken/t1")
        assert fs.mock_calls[0].args == (expected,)
        assert [c[0] for c in fs.mock_calls] == ["exists", "create_dir_all"]
        assert ws == ThreadWorkspace(
            thread_id="t1",
            root_path="/Users/tester/Executive Assistant/Ken",
            thread_path="/Users/tester/Executive Assistant/Ken/t1",
            created=True,
        )

    def test_permission_denied(self):
        fs = MagicMock()
        fs.exists.return_value = False
        fs.create_dir_all.side_effect = PermissionError(13, "Permission denied")
        prov = WorkspaceProvisioner(filesystem=fs, environ={"HOME": "/Users/tester"})

        with pytest.raises(WorkspacePermissionError) as exc_info:
            prov.ensure_thread_workspace("t1")

        message = exc_info.value.message
        assert "Grant Files and Folders access" in message
        assert "/Users/tester/Executive Assistant/Ken is writable" in message
        assert exc_info.value.path == "/Users/tester/Executive Assistant/Ken/t1"

    def test_permission_denied_on_exists_check(self):
        fs = MagicMock()
        fs.exists.side_effect = PermissionError(13, "Permission denied")
        prov = WorkspaceProvisioner(filesystem=fs, environ={"HOME": "/Users/tester"})

        with pytest.raises(WorkspacePermissionError) as exc_info:
            prov.ensure_thread_workspace("t1")

        assert "Grant Files and Folders access" in exc_info.value.message
        fs.create_dir_all.assert_not_called()

    def test_other_os_error(self):
        fs = MagicMock()
        fs.exists.return_value = False
        fs.create_dir_all.side_effect = OSError(28, "No space left on device")
        prov = WorkspaceProvisioner(filesystem=fs, environ={"HOME": "/Users/tester"})

        with pytest.raises(FilesystemError) as exc_info:
            prov.ensure_thread_workspace("t1")

        assert not isinstance(exc_info.value, WorkspacePermissionError)
        assert "/Users/tester/Executive Assistant/Ken/t1" in exc_info.value.message
        assert "No space left on device" in exc_info.value.message

    def test_file_in_the_way(self, provisioner: WorkspaceProvisioner, home: Path):
        root = home / "Executive Assistant" / "Ken"
        root.mkdir(parents=True)
        (root / "t1").write_text("not a dir")

        with pytest.raises(FilesystemError):
            provisioner.ensure_thread_workspace("t1")

    def test_to_dict(self, provisioner: WorkspaceProvisioner):
        ws = provisioner.ensure_thread_workspace("t1")
        assert ws.to_dict() == {
            "threadId": "t1",
            "rootPath": ws.root_path,
            "threadPath": ws.thread_path,
            "created": True,
        }


class TestLocalFilesystem:
    def test_create_dir_all_is_idempotent(self, tmp_path: Path):
        fs = LocalFilesystem()
        target = tmp_path / "a" / "b" / "c"
        assert fs.exists(target) is False
        fs.create_dir_all(target)
        fs.create_dir_all(target)
        assert fs.exists(target) is True
