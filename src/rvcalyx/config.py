import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

from rvcalyx.assembler import DEFAULT_ASSEMBLER
from rvcalyx.file_loader import paths as default_directories
from rvcalyx.schemes import DEFAULT_INSTRUCTION_MEMORY, DEFAULT_REGISTER_MEMORY

CONFIG_FILE = "rvcalyx.json"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class Config:
    assembler: str = DEFAULT_ASSEMBLER
    instruction_memory: str = DEFAULT_INSTRUCTION_MEMORY
    register_memory: str = DEFAULT_REGISTER_MEMORY
    abi_names: bool = False
    directories: Dict[str, str] = field(default_factory=lambda: dict(default_directories))

    @staticmethod
    def from_dict(raw: Dict[str, Any]) -> "Config":
        if not isinstance(raw, dict):
            raise ConfigError("Config root must be a JSON object")
        cfg = Config()
        values = {}
        for key in ('assembler', 'instruction_memory', 'register_memory'):
            if key in raw:
                if not isinstance(raw[key], str):
                    raise ConfigError(f"'{key}' must be a string")
                values[key] = raw[key]
        if 'abi_names' in raw:
            if not isinstance(raw['abi_names'], bool):
                raise ConfigError("'abi_names' must be true or false")
            values['abi_names'] = raw['abi_names']
        if 'directories' in raw:
            if not isinstance(raw['directories'], dict):
                raise ConfigError("'directories' must be an object")
            values['directories'] = {**cfg.directories, **raw['directories']}
        return replace(cfg, **values)


def load_config(path: Optional[Union[str, Path]] = None) -> Config:
    """Read the JSON config at `path`, or `rvcalyx.json` in the working directory.

    A missing default file gives the built-in defaults; a missing explicit
    path is an error.
    """
    explicit = path is not None
    cfg_path = Path(path) if explicit else Path(CONFIG_FILE)
    if not cfg_path.exists():
        if explicit:
            raise ConfigError(f"Config file not found: {cfg_path}")
        return Config()

    try:
        with open(cfg_path, 'r') as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Malformed config file {cfg_path}: {e}")
    return Config.from_dict(raw)
