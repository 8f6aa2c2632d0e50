import io
import json
import struct

import pytest

from rvcalyx import cli

SIM = {"cycles": 12, "memories": {"insts": [51, 19, "x", 1123], "reg_file": [0, 5]}}


def test_decode_file(tmp_path, capsys):
    path = tmp_path / "sim.json"
    path.write_text(json.dumps(SIM))
    assert cli.main(["decode", str(path)]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "Took 12 cycles"
    assert "  3: beq x0, x0, 8" in out
    assert out[-1] == "x1    ra: 5"


def test_decode_stdin_with_abi(monkeypatch, capsys):
    sim = {"cycles": 1, "memories": {"insts": [0x403150B3], "reg_file": []}}
    monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(sim)))
    assert cli.main(["decode", "--abi"]) == 0
    assert "  0: sra ra, sp, gp" in capsys.readouterr().out.splitlines()


def test_decode_unknown_opcode_fails(tmp_path, capsys):
    path = tmp_path / "sim.json"
    path.write_text(json.dumps({"cycles": 1, "memories": {"insts": [0xFFFFFFFF]}}))
    assert cli.main(["decode", str(path)]) == 1
    assert "Unknown opcode: 0b1111111" in capsys.readouterr().err


def test_decode_keeps_listing_up_to_the_bad_slot(tmp_path, capsys):
    path = tmp_path / "sim.json"
    path.write_text(json.dumps({"cycles": 7, "memories": {"insts": [0x33, 0x13, 0xFFFFFFFF]}}))
    assert cli.main(["decode", str(path)]) == 1
    captured = capsys.readouterr()
    assert captured.out.splitlines() == [
        "Took 7 cycles", "", "== instructions ==", "  0: add x0, x0, x0", "  1: addi x0, x0, 0",
    ]
    assert "Unknown opcode" in captured.err


def test_decode_malformed_json(tmp_path, capsys):
    path = tmp_path / "sim.json"
    path.write_text("{")
    assert cli.main(["decode", str(path)]) == 1
    assert "error:" in capsys.readouterr().err


def test_disasm_words(capsys):
    assert cli.main(["disasm", "00000033", "0x00452283", "00100073"]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "  0: add x0, x0, x0",
        "  1: lw x5, 4(x10)",
        "  2: ebreak",
    ]


def test_disasm_binary_file(tmp_path, capsys):
    path = tmp_path / "prog.bin"
    path.write_bytes(struct.pack("<2I", 0x00C000EF, 0x000012B7))
    assert cli.main(["disasm", "--abi", "--bin", str(path)]) == 0
    assert capsys.readouterr().out.splitlines() == ["  0: jal ra, 12", "  1: lui t0, 0x1"]


def test_disasm_rejects_partial_word(tmp_path, capsys):
    path = tmp_path / "prog.bin"
    path.write_bytes(struct.pack("<I", 0x00000033) + b"\x13\x00")
    assert cli.main(["disasm", "--bin", str(path)]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "not word aligned: 6 bytes" in captured.err


def test_disasm_unknown_opcode(capsys):
    assert cli.main(["disasm", "ffffffff"]) == 1


def test_disasm_rejects_non_hex():
    with pytest.raises(SystemExit):
        cli.main(["disasm", "zz"])


def test_abi_names_from_config(tmp_path, capsys):
    cfg = tmp_path / "cfg.json"
    cfg.write_text(json.dumps({"abi_names": True}))
    assert cli.main(["--config", str(cfg), "disasm", "00452283"]) == 0
    assert capsys.readouterr().out.splitlines() == ["  0: lw t0, 4(a0)"]


def test_encode(monkeypatch, tmp_path, capsys):
    calls = []

    def assemble_words(source, assembler):
        calls.append((source, assembler))
        return [0x00F00293, 0x00000073]

    monkeypatch.setattr(cli, "assemble_words", assemble_words)
    source = tmp_path / "prog.s"
    source.write_text("addi t0, zero, 15\necall\n")

    assert cli.main(["encode", str(source), "--data", "reg_file:2:32", "--data", "out:1:8:9"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert calls == [(source, "riscv64-unknown-elf-as")]
    assert out["insts"]["data"] == [0x00F00293, 0x00000073]
    assert out["reg_file"]["data"] == [0, 0]
    assert out["out"] == {"data": [9], "format": {"numeric_type": "bitnum", "is_signed": False, "width": 8}}


def test_encode_uses_config_and_output_file(monkeypatch, tmp_path):
    monkeypatch.setattr(cli, "assemble_words", lambda source, assembler: [0x13])
    cfg = tmp_path / "cfg.json"
    cfg.write_text(json.dumps({"instruction_memory": "rom", "assembler": "my-as"}))
    output = tmp_path / "data.json"

    assert cli.main(["--config", str(cfg), "encode", str(tmp_path / "prog.s"), "-o", str(output)]) == 0
    assert list(json.loads(output.read_text())) == ["rom"]

    assert cli.main(["--config", str(cfg), "encode", str(tmp_path / "prog.s"), "-n", "code", "-o", str(output)]) == 0
    assert list(json.loads(output.read_text())) == ["code"]


def test_encode_bad_memory_spec():
    with pytest.raises(SystemExit):
        cli.main(["encode", "prog.s", "--data", "mem:4"])


def test_encode_rejects_negative_memory(capsys):
    with pytest.raises(SystemExit):
        cli.main(["encode", "prog.s", "--data", "mem:-2:-8:-5"])
    assert "negative size" in capsys.readouterr().err


def test_missing_config_file(tmp_path, capsys):
    assert cli.main(["--config", str(tmp_path / "none.json"), "disasm", "00000013"]) == 1
    assert "Config file not found" in capsys.readouterr().err
