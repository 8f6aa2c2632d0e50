import json

import pytest

from rvcalyx.config import Config, ConfigError, load_config


def test_missing_default_file_gives_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    cfg = load_config()
    assert cfg == Config()
    assert cfg.instruction_memory == "insts"
    assert cfg.register_memory == "reg_file"
    assert cfg.abi_names is False


def test_default_file_in_working_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "rvcalyx.json").write_text(json.dumps({"abi_names": True, "assembler": "my-as"}))
    cfg = load_config()
    assert cfg.abi_names is True
    assert cfg.assembler == "my-as"


def test_directories_are_merged(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"directories": {"traces": "out"}}))
    cfg = load_config(path)
    assert cfg.directories == {"programs": "riscv_programs", "traces": "out"}


def test_missing_explicit_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.json")


@pytest.mark.parametrize("content", [
    "{broken",
    "[]",
    '{"abi_names": "yes"}',
    '{"instruction_memory": 3}',
    '{"directories": []}',
])
def test_invalid_config(tmp_path, content):
    path = tmp_path / "cfg.json"
    path.write_text(content)
    with pytest.raises(ConfigError):
        load_config(path)
