import struct
import subprocess
from pathlib import Path

import pytest

from rvcalyx import assembler
from rvcalyx.assembler import AssemblerError, assemble, assemble_words


def fake_run(image=None, returncode=0, stderr=""):
    calls = []

    def run(cmd, **kwargs):
        calls.append(cmd)
        if image is not None:
            Path(cmd[3]).write_bytes(image)
        return subprocess.CompletedProcess(cmd, returncode, stdout="", stderr=stderr)

    return run, calls


def test_assemble_words(monkeypatch, make_elf, tmp_path):
    run, calls = fake_run(make_elf(struct.pack("<2I", 0x00F00293, 0x00000073)))
    monkeypatch.setattr(assembler.subprocess, "run", run)

    source = tmp_path / "prog.s"
    assert assemble_words(source, "fake-as") == [0x00F00293, 0x00000073]

    cmd = calls[0]
    assert cmd[:3] == ["fake-as", str(source), "-o"]
    assert not Path(cmd[3]).exists()


def test_assembler_failure(monkeypatch, tmp_path):
    run, calls = fake_run(returncode=1, stderr="prog.s:1: Error: unrecognized opcode `bogus'\n")
    monkeypatch.setattr(assembler.subprocess, "run", run)

    with pytest.raises(AssemblerError, match="unrecognized opcode"):
        assemble(tmp_path / "prog.s", "fake-as")
    assert not Path(calls[0][3]).exists()


def test_missing_assembler(monkeypatch, tmp_path):
    def run(cmd, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", cmd[0])

    monkeypatch.setattr(assembler.subprocess, "run", run)
    with pytest.raises(AssemblerError, match="Cannot run assembler"):
        assemble(tmp_path / "prog.s", "no-such-as")
