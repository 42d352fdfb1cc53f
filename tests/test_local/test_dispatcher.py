"""Tests for the action dispatcher."""

import json
import os

import pytest

from rush_local import fs
from rush_local.config import AgentConfig
from rush_local.dispatcher import Dispatcher
from rush_local.errors import (
    AccessDenied,
    ArchiveError,
    DestroyRootRefused,
    InvalidPid,
    InvalidRequest,
    NameAlreadyExists,
    NameCannotContainSlash,
    NotFound,
    ResourceError,
    UnknownAction,
)
from rush_local.processes import CommandTableSource, ProcTableSource
from rush_local.requests import Action, StatRequest
from rush_local.types import ProcessRecord


class FixedProbe:
    def measure(self, path: str) -> int:
        return 4096


class FixedSource:
    def list(self) -> list[ProcessRecord]:
        return [
            ProcessRecord(pid="1", uid=0, command="init", cmdline="/sbin/init", mem=400, cpu=15),
            ProcessRecord(pid="77", uid=1000, command="vim", cmdline="vim notes.txt", mem=8, cpu=1),
        ]


@pytest.fixture
def dispatcher():
    return Dispatcher(disk_usage=FixedProbe(), process_source=FixedSource())


@pytest.fixture
def workdir(tmp_path):
    return tmp_path / "x"


class TestEndToEnd:
    """Tests for multi-step request sequences."""

    def test_create_write_index_read(self, dispatcher, workdir):
        x = str(workdir)
        assert dispatcher.receive({"action": "create_dir", "full_path": x}) == b""
        assert dispatcher.receive(
            {"action": "write_file", "full_path": f"{x}/a.txt", "payload": "hi"}
        ) == b""
        assert dispatcher.receive({"action": "index", "base_path": x, "glob": "*"}) == b"a.txt\n"
        assert dispatcher.receive({"action": "file_contents", "full_path": f"{x}/a.txt"}) == b"hi"

    def test_rename_with_slash_leaves_state(self, dispatcher, workdir):
        workdir.mkdir()
        (workdir / "a.txt").write_text("hi")
        before = sorted(os.listdir(workdir))
        with pytest.raises(NameCannotContainSlash) as exc_info:
            dispatcher.receive(
                {"action": "rename", "path": str(workdir), "name": "a.txt", "new_name": "b/c"}
            )
        assert exc_info.value.action == "rename"
        assert sorted(os.listdir(workdir)) == before
        assert (workdir / "a.txt").read_text() == "hi"

    def test_destroy_root_fails(self, dispatcher):
        with pytest.raises(DestroyRootRefused) as exc_info:
            dispatcher.receive({"action": "destroy", "full_path": "/"})
        assert exc_info.value.action == "destroy"


class TestFilesystemActions:
    """Tests for filesystem actions through the dispatcher."""

    def test_destroy_then_stat(self, dispatcher, tmp_path):
        target = tmp_path / "gone"
        target.mkdir()
        dispatcher.receive({"action": "destroy", "full_path": str(target)})
        with pytest.raises(NotFound) as exc_info:
            dispatcher.receive({"action": "stat", "full_path": str(target)})
        assert isinstance(exc_info.value.cause, FileNotFoundError)

    def test_create_dir_twice(self, dispatcher, tmp_path):
        target = str(tmp_path / "d")
        dispatcher.receive({"action": "create_dir", "full_path": target})
        dispatcher.receive({"action": "create_dir", "full_path": target})
        assert os.path.isdir(target)

    def test_rename_existing(self, dispatcher, tmp_path):
        (tmp_path / "a").write_text("a")
        (tmp_path / "b").write_text("b")
        with pytest.raises(NameAlreadyExists):
            dispatcher.receive(
                {"action": "rename", "path": str(tmp_path), "name": "a", "new_name": "b"}
            )
        assert (tmp_path / "a").read_text() == "a"

    def test_rename(self, dispatcher, tmp_path):
        (tmp_path / "a").write_text("a")
        dispatcher.receive(
            {"action": "rename", "path": str(tmp_path), "name": "a", "new_name": "z"}
        )
        assert (tmp_path / "z").read_text() == "a"

    def test_copy(self, dispatcher, tmp_path):
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "f").write_text("data")
        dispatcher.receive(
            {"action": "copy", "src": str(tmp_path / "src"), "dst": str(tmp_path / "dst")}
        )
        assert (tmp_path / "dst" / "f").read_text() == "data"

    def test_index_dirs_first(self, dispatcher, tmp_path):
        (tmp_path / "b.txt").write_text("")
        (tmp_path / "sub").mkdir()
        out = dispatcher.receive({"action": "index", "base_path": str(tmp_path), "glob": ""})
        assert out.decode().splitlines() == ["sub/", "b.txt"]

    def test_index_empty(self, dispatcher, tmp_path):
        assert dispatcher.receive({"action": "index", "base_path": str(tmp_path)}) == b""

    def test_stat_json(self, dispatcher, tmp_path):
        (tmp_path / "f").write_bytes(b"12345")
        data = json.loads(dispatcher.receive({"action": "stat", "full_path": str(tmp_path / "f")}))
        assert data["size"] == 5
        assert set(data) == {"size", "ctime", "atime", "mtime"}

    def test_size_uses_probe(self, dispatcher, tmp_path):
        assert dispatcher.receive({"action": "size", "full_path": str(tmp_path)}) == b"4096"

    def test_file_contents_missing(self, dispatcher, tmp_path):
        with pytest.raises(NotFound) as exc_info:
            dispatcher.receive({"action": "file_contents", "full_path": str(tmp_path / "nope")})
        assert exc_info.value.action == "file_contents"

    def test_permission_denied(self, dispatcher, monkeypatch):
        def denied(path):
            raise PermissionError(13, "Permission denied", path)

        monkeypatch.setattr(fs, "file_contents", denied)
        with pytest.raises(AccessDenied) as exc_info:
            dispatcher.receive({"action": "file_contents", "full_path": "/secret"})
        assert "/secret" in exc_info.value.message

    def test_missing_param_passed_through(self, dispatcher):
        # An absent full_path reaches destroy as "", which destroy refuses.
        with pytest.raises(DestroyRootRefused):
            dispatcher.receive({"action": "destroy"})

    @pytest.mark.parametrize(
        "action", ["destroy", "stat", "create_dir", "file_contents", "write_file"]
    )
    def test_nul_byte_in_path(self, dispatcher, action):
        with pytest.raises(InvalidRequest) as exc_info:
            dispatcher.receive({"action": action, "full_path": "/tmp/a\x00b"})
        assert exc_info.value.action == action
        assert isinstance(exc_info.value.cause, ValueError)

    def test_nul_byte_in_copy(self, dispatcher, tmp_path):
        with pytest.raises(InvalidRequest):
            dispatcher.receive(
                {"action": "copy", "src": f"{tmp_path}/a\x00b", "dst": str(tmp_path / "c")}
            )

    def test_missing_path_for_read(self, dispatcher, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(ResourceError):
            dispatcher.receive({"action": "file_contents"})


class TestArchiveActions:
    """Tests for archive actions through the dispatcher."""

    def test_read_then_write(self, dispatcher, tmp_path):
        src = tmp_path / "tree"
        (src / "inner").mkdir(parents=True)
        (src / "inner" / "f.txt").write_text("payload")
        dest = tmp_path / "dest"
        dest.mkdir()
        data = dispatcher.receive({"action": "read_archive", "full_path": str(src)})
        request = {"action": "write_archive", "payload": data, "dir": str(dest)}
        assert dispatcher.receive(request) == b""
        assert (dest / "tree" / "inner" / "f.txt").read_text() == "payload"

    def test_read_archive_of_root_refused(self, dispatcher):
        with pytest.raises(ArchiveError) as exc_info:
            dispatcher.receive({"action": "read_archive", "full_path": "/"})
        assert exc_info.value.action == "read_archive"

    def test_bad_archive(self, dispatcher, tmp_path):
        with pytest.raises(ArchiveError) as exc_info:
            dispatcher.receive(
                {"action": "write_archive", "payload": b"junk" * 256, "dir": str(tmp_path)}
            )
        assert exc_info.value.action == "write_archive"


class TestProcessActions:
    """Tests for process actions through the dispatcher."""

    def test_processes_json(self, dispatcher):
        data = json.loads(dispatcher.receive({"action": "processes"}))
        assert [p["pid"] for p in data] == ["1", "77"]
        assert data[1]["cmdline"] == "vim notes.txt"

    def test_process_alive(self, dispatcher):
        assert dispatcher.receive({"action": "process_alive", "pid": str(os.getpid())}) == b"1"
        assert dispatcher.receive({"action": "process_alive", "pid": "0"}) == b"0"
        assert dispatcher.receive({"action": "process_alive"}) == b"0"

    def test_kill_invalid_pid(self, dispatcher):
        with pytest.raises(InvalidPid) as exc_info:
            dispatcher.receive({"action": "kill_process", "pid": ""})
        assert exc_info.value.action == "kill_process"

    def test_kill_refused_by_os(self, dispatcher, monkeypatch):
        from rush_local.processes import control

        def missing(pid, sig):
            raise ProcessLookupError(3, "No such process")

        monkeypatch.setattr(control.os, "kill", missing)
        with pytest.raises(NotFound):
            dispatcher.receive({"action": "kill_process", "pid": "99999"})


class TestDispatch:
    """Tests for Dispatcher routing and error handling."""

    def test_unknown_action(self, dispatcher):
        with pytest.raises(UnknownAction):
            dispatcher.receive({"action": "reboot"})

    def test_every_action_handled(self, dispatcher):
        assert set(dispatcher.actions()) == set(Action)

    def test_dispatch_typed_request(self, dispatcher, tmp_path):
        (tmp_path / "f").write_text("abc")
        out = dispatcher.dispatch(StatRequest(full_path=str(tmp_path / "f")))
        assert json.loads(out)["size"] == 3

    def test_unvalidated_nul_path_typed(self, dispatcher):
        request = StatRequest.model_construct(full_path="/tmp/a\x00b")
        with pytest.raises(InvalidRequest) as exc_info:
            dispatcher.dispatch(request)
        assert exc_info.value.action == "stat"
        assert isinstance(exc_info.value.cause, ValueError)

    def test_failure_logged(self, dispatcher, caplog):
        with caplog.at_level("WARNING", logger="rush_local"):
            with pytest.raises(DestroyRootRefused):
                dispatcher.receive({"action": "destroy", "full_path": "/"})
        assert any("destroy failed" in r.getMessage() for r in caplog.records)

    def test_from_config(self, tmp_path):
        config = AgentConfig(proc_root=str(tmp_path))
        assert isinstance(Dispatcher.from_config(config)._process_source, ProcTableSource)
        config = AgentConfig(proc_root=str(tmp_path / "missing"))
        assert isinstance(Dispatcher.from_config(config)._process_source, CommandTableSource)
