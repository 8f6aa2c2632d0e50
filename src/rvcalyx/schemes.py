from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, IO, Iterable, List, Optional, Union
import json
import struct

WORD_SIZE_BYTES = 4 # 32 bits

DEFAULT_INSTRUCTION_MEMORY = "insts"
DEFAULT_REGISTER_MEMORY = "reg_file"


@dataclass(frozen=True)
class CalyxFormat:
    numeric_type: str = "bitnum"
    is_signed: bool = False
    width: int = 32

    def to_dict(self) -> Dict[str, Any]:
        return {
            "numeric_type": self.numeric_type,
            "is_signed": self.is_signed,
            "width": self.width,
        }


@dataclass(frozen=True)
class CalyxData:
    """One memory of a Calyx data file."""
    data: List[int]
    format: CalyxFormat = field(default_factory=CalyxFormat)

    def to_dict(self) -> Dict[str, Any]:
        return {"data": list(self.data), "format": self.format.to_dict()}


@dataclass(frozen=True)
class MemorySpec:
    """Extra memory requested on the command line as `name:size:width[:value]`."""
    name: str
    size: int
    width: int
    value: Optional[int] = None

    @staticmethod
    def parse(text: str) -> "MemorySpec":
        parts = text.split(":")
        if len(parts) not in (3, 4):
            raise ValueError("Wrong number of arguments")
        try:
            size, width = int(parts[1]), int(parts[2])
            value = int(parts[3]) if len(parts) == 4 else None
        except ValueError as e:
            raise ValueError(f"Invalid memory spec '{text}': {e}")
        if size < 0:
            raise ValueError(f"Invalid memory spec '{text}': negative size")
        if width <= 0:
            raise ValueError(f"Invalid memory spec '{text}': width must be positive")
        if value is not None and not 0 <= value <= 0xFFFFFFFF:
            raise ValueError(f"Invalid memory spec '{text}': value does not fit in 32 bits")
        return MemorySpec(name=parts[0], size=size, width=width, value=value)

    def to_data(self) -> CalyxData:
        fill = self.value if self.value is not None else 0
        return CalyxData(data=[fill] * self.size, format=CalyxFormat(width=self.width))

    def __str__(self):
        suffix = f":{self.value}" if self.value is not None else ""
        return f"{self.name}:{self.size}:{self.width}{suffix}"


def build_data_file(words: Iterable[int], name: str = DEFAULT_INSTRUCTION_MEMORY,
                    memories: Iterable[MemorySpec] = ()) -> Dict[str, CalyxData]:
    """Instruction memory `name` holding `words`, plus the requested extra memories."""
    mapping = {name: CalyxData(data=list(words))}
    for memory in memories:
        mapping[memory.name] = memory.to_data()
    return mapping


def dump_data_file(mapping: Dict[str, CalyxData]) -> str:
    return json.dumps({name: data.to_dict() for name, data in mapping.items()}, indent=2)


MemoryEntry = Union[int, str]


@dataclass(frozen=True)
class SimOutput:
    """Result of a Calyx simulation run: cycle count and final memory contents."""
    cycles: int
    memories: Dict[str, List[MemoryEntry]]

    @staticmethod
    def from_dict(raw: Dict[str, Any]) -> "SimOutput":
        try:
            cycles = raw["cycles"]
            memories = raw["memories"]
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed simulation output: missing {e}")
        if not isinstance(cycles, int) or not isinstance(memories, dict):
            raise ValueError("Malformed simulation output: wrong field types")

        parsed: Dict[str, List[MemoryEntry]] = {}
        for name, entries in memories.items():
            if not isinstance(entries, list):
                raise ValueError(f"Memory '{name}' is not a list")
            for entry in entries:
                if isinstance(entry, bool) or not isinstance(entry, (int, str)):
                    raise ValueError(f"Memory '{name}' holds an unsupported entry: {entry!r}")
            parsed[name] = list(entries)
        return SimOutput(cycles=cycles, memories=parsed)

    @staticmethod
    def load(stream: IO[str]) -> "SimOutput":
        try:
            raw = json.load(stream)
        except json.JSONDecodeError as e:
            raise ValueError(f"Simulation output is not valid JSON: {e}")
        return SimOutput.from_dict(raw)

    def words(self, name: str) -> List[MemoryEntry]:
        """Entries of memory `name`, empty when the simulation did not dump it."""
        return self.memories.get(name, [])

    def __str__(self):
        return f"Took {self.cycles} cycles"


def unpack_words(data: bytes, word_amount: Optional[int] = None, use_little_endian: bool = True) -> List[int]:
    """Unpack N 32-bit words from bytes (all of them when N is omitted). Uses little endian as default"""
    if word_amount is None:
        word_amount = len(data) // WORD_SIZE_BYTES
    if len(data) < word_amount * WORD_SIZE_BYTES:
        raise ValueError(f"Not enough data to unpack the required number of words. Expected at least {word_amount * WORD_SIZE_BYTES} bytes, got {len(data)} bytes.")
    endian_char = "<" if use_little_endian else ">"
    return list(struct.unpack(f"{endian_char}{word_amount}I", data[: word_amount * WORD_SIZE_BYTES]))


def pack_words(words: Iterable[int], use_little_endian: bool = True) -> bytes:
    endian_char = "<" if use_little_endian else ">"
    return b"".join(struct.pack(f"{endian_char}I", word) for word in words)
