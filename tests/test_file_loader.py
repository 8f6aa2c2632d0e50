import json

import pytest

from rvcalyx.file_loader import FileLoader, FileType
from rvcalyx.schemes import SimOutput


@pytest.fixture
def workspace(tmp_path):
    programs = tmp_path / "progs"
    traces = tmp_path / "traces"
    programs.mkdir()
    traces.mkdir()
    (programs / "b.s").write_text("addi x1, x0, 1\n")
    (programs / "a.ASM").write_text("nop\n")
    (programs / "prog.o").write_bytes(b"\x7fELF")
    (programs / "notes.txt").write_text("ignored")
    (traces / "run.json").write_text(json.dumps({"cycles": 4, "memories": {}}))
    return {"programs": str(programs), "traces": str(traces)}


def test_list_files_by_type(workspace):
    progs = workspace["programs"]
    assert FileLoader.list_files(FileType.ASSEMBLY, workspace) == [f"{progs}/a.ASM", f"{progs}/b.s"]
    assert FileLoader.list_files(FileType.OBJECT, workspace) == [f"{progs}/prog.o"]
    assert FileLoader.list_files(FileType.TRACE, workspace) == [f"{workspace['traces']}/run.json"]


def test_list_files_missing_directory(tmp_path):
    dirs = {"programs": str(tmp_path / "none"), "traces": str(tmp_path / "none")}
    assert FileLoader.list_files(FileType.TRACE, dirs) == []


def test_load_dispatches_on_extension(workspace):
    kind, data = FileLoader.load(f"{workspace['programs']}/b.s")
    assert kind == FileType.ASSEMBLY
    assert data == "addi x1, x0, 1\n"

    kind, data = FileLoader.load(f"{workspace['traces']}/run.json")
    assert kind == FileType.TRACE
    assert isinstance(data, SimOutput)
    assert data.cycles == 4

    kind, data = FileLoader.load(f"{workspace['programs']}/prog.o")
    assert kind == FileType.OBJECT
    assert data == b"\x7fELF"


def test_unknown_extension():
    with pytest.raises(ValueError):
        FileLoader.detect_type("notes.txt")
