import pytest

from rvcalyx.instructions import UnknownOpcode
from rvcalyx.schemes import SimOutput
from rvcalyx.trace import format_trace, instruction_listing, register_listing

SIM = SimOutput.from_dict({
    "cycles": 12,
    "memories": {"insts": [51, 19, "x", 1123], "reg_file": [0, 5]},
})


def test_format_trace():
    assert list(format_trace(SIM)) == [
        "Took 12 cycles",
        "",
        "== instructions ==",
        "  0: add x0, x0, x0",
        "  1: addi x0, x0, 0",
        "  3: beq x0, x0, 8",
        "",
        "== registers ==",
        "x0  zero: 0",
        "x1    ra: 5",
    ]


def test_format_trace_custom_memory_names():
    sim = SimOutput.from_dict({"cycles": 3, "memories": {"rom": [0x00452283], "regs": []}})
    lines = list(format_trace(sim, instruction_memory="rom", register_memory="regs", abi=True))
    assert lines == ["Took 3 cycles", "", "== instructions ==", "  0: lw t0, 4(a0)", "", "== registers =="]


def test_missing_memories_give_empty_sections():
    sim = SimOutput.from_dict({"cycles": 0, "memories": {}})
    assert list(format_trace(sim)) == ["Took 0 cycles", "", "== instructions ==", "", "== registers =="]


def test_instruction_listing_stops_on_unknown_opcode():
    with pytest.raises(UnknownOpcode):
        instruction_listing([51, 0xFFFFFFFF])


def test_register_listing_past_the_register_file():
    listing = register_listing(list(range(33)))
    assert listing[8] == (8, "fp", 8)
    assert listing[32] == (32, "?", 32)


def test_format_trace_yields_slots_before_unknown_opcode():
    sim = SimOutput.from_dict({"cycles": 7, "memories": {"insts": [0x33, 0x13, 0xFFFFFFFF, 0x13]}})
    lines = format_trace(sim)
    produced = [next(lines) for _ in range(5)]
    assert produced == ["Took 7 cycles", "", "== instructions ==", "  0: add x0, x0, x0", "  1: addi x0, x0, 0"]
    with pytest.raises(UnknownOpcode):
        next(lines)
