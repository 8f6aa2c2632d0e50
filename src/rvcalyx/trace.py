"""Human-readable view of a Calyx simulation dump."""

from typing import Iterable, Iterator, List, Tuple

from rvcalyx.instructions import REGISTER_NAMES, decode
from rvcalyx.schemes import DEFAULT_INSTRUCTION_MEMORY, DEFAULT_REGISTER_MEMORY, MemoryEntry, SimOutput


def instruction_listing(entries: Iterable[MemoryEntry], abi: bool = False) -> List[Tuple[int, str]]:
    """(slot, rendered instruction) for every numeric slot; string slots are skipped."""
    listing = []
    for idx, entry in enumerate(entries):
        if isinstance(entry, int):
            listing.append((idx, decode(entry).render(abi=abi)))
    return listing


def register_listing(entries: Iterable[MemoryEntry]) -> List[Tuple[int, str, MemoryEntry]]:
    """(index, ABI name, value) for every register-file slot."""
    return [
        (idx, REGISTER_NAMES[idx] if idx < len(REGISTER_NAMES) else "?", value)
        for idx, value in enumerate(entries)
    ]


def format_trace(sim: SimOutput, instruction_memory: str = DEFAULT_INSTRUCTION_MEMORY,
                 register_memory: str = DEFAULT_REGISTER_MEMORY, abi: bool = False) -> Iterator[str]:
    """Lines of the listing, produced slot by slot.

    An unknown opcode raises after the earlier slots have been yielded.
    """
    yield str(sim)
    yield ""
    yield "== instructions =="
    for idx, entry in enumerate(sim.words(instruction_memory)):
        if isinstance(entry, int):
            yield f"{idx: >3}: {decode(entry).render(abi=abi)}"

    yield ""
    yield "== registers =="
    for idx, name, value in register_listing(sim.words(register_memory)):
        yield f"x{idx} {name: >5}: {value}"
