"""RV32I instruction words: format classification, field extraction and
mnemonic rendering.

Decoding is a pure function of the 32-bit word. Only the opcode is allowed to
fail (`UnknownOpcode`); a known opcode with an unhandled function code still
renders, as the dataclass field dump.
"""

import struct
from dataclasses import dataclass
from typing import Callable, ClassVar, Dict, Iterable, Iterator, Optional, Tuple, Type

from rvcalyx.bits import extract_bits
from rvcalyx.immediates import SplitImmediate, branch_immediate, jump_immediate, store_immediate

WORD_MASK = 0xFFFFFFFF

# --- OPCODES (Bits 6:0) ---
OP_R_TYPE = 0b0110011  # Arithmetic Register-Register
OP_I_TYPE = 0b0010011  # Arithmetic Immediate
OP_LOAD   = 0b0000011  # Load instructions
OP_STORE  = 0b0100011  # Store instructions
OP_BRANCH = 0b1100011  # Conditional branches
OP_JALR   = 0b1100111  # Jump and Link Register
OP_JAL    = 0b1101111  # Jump and Link
OP_LUI    = 0b0110111  # Load Upper Immediate
OP_AUIPC  = 0b0010111  # Add Upper Immediate to PC (not decodable, see FORMAT_MAP)
OP_SYSTEM = 0b1110011  # ECALL / EBREAK


class DecodeError(Exception):
    """Base class for instruction decoding failures."""


class UnknownOpcode(DecodeError):
    def __init__(self, opcode: int):
        super().__init__(f"Unknown opcode: 0b{opcode:07b}")
        self.opcode = opcode


# ==============================================================================
# REGISTER NAMES
# ==============================================================================

REGISTER_NAMES: Tuple[str, ...] = (
    "zero", "ra", "sp", "gp", "tp", "t0", "t1", "t2",
    "fp", "s1", "a0", "a1", "a2", "a3", "a4", "a5",
    "a6", "a7", "s2", "s3", "s4", "s5", "s6", "s7",
    "s8", "s9", "s10", "s11", "t3", "t4", "t5", "t6",
)

REGISTERS: Dict[str, int] = {name: i for i, name in enumerate(REGISTER_NAMES)}
REGISTERS['s0'] = 8
for i in range(32): REGISTERS[f'x{i}'] = i


def register_name(index: int) -> str:
    """Calling-convention name of register `index` (0..31)."""
    if not 0 <= index < len(REGISTER_NAMES):
        raise ValueError(f"Register index out of range: {index}")
    return REGISTER_NAMES[index]


def register_index(name: str) -> int:
    """Inverse of `register_name`, also accepting `x<n>` and `s0`."""
    key = name.strip().lower()
    if key not in REGISTERS:
        raise ValueError(f"Unknown register: {name}")
    return REGISTERS[key]


def _x_name(index: int) -> str:
    return f"x{index}"


# ==============================================================================
# FORMATS
# ==============================================================================

@dataclass(frozen=True)
class BaseInstruction:
    """Fields common to every format. `repr()` is the generic field dump."""
    format: ClassVar[str] = "?"

    opcode: int

    @classmethod
    def from_word(cls, word: int) -> "BaseInstruction":
        raise NotImplementedError

    def dispatch_key(self) -> Tuple[int, Optional[int], Optional[int]]:
        """(opcode, funct3, qualifier) used to look up the mnemonic.

        The qualifier is whatever narrows the operation beyond funct3
        (funct7, the shift type or funct12).
        """
        return (self.opcode, None, None)

    @property
    def mnemonic(self) -> Optional[str]:
        return InstructionFactory.lookup_mnemonic(*self.dispatch_key())

    def operands(self, reg: Callable[[int], str]) -> str:
        return ""

    def render(self, abi: bool = False) -> str:
        mnemonic = self.mnemonic
        if mnemonic is None:
            return repr(self)
        operands = self.operands(register_name if abi else _x_name)
        return f"{mnemonic} {operands}" if operands else mnemonic

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class RType(BaseInstruction):
    format: ClassVar[str] = "R"

    rd: int
    funct3: int
    rs1: int
    rs2: int
    funct7: int

    @classmethod
    def from_word(cls, word: int) -> "RType":
        return cls(
            opcode=extract_bits(word, 0, 6, 8),
            rd=extract_bits(word, 7, 11, 8),
            funct3=extract_bits(word, 12, 14, 8),
            rs1=extract_bits(word, 15, 19, 8),
            rs2=extract_bits(word, 20, 24, 8),
            funct7=extract_bits(word, 25, 31, 8),
        )

    def dispatch_key(self):
        return (self.opcode, self.funct3, self.funct7)

    def operands(self, reg):
        return f"{reg(self.rd)}, {reg(self.rs1)}, {reg(self.rs2)}"


@dataclass(frozen=True)
class IType(BaseInstruction):
    """Arithmetic-immediate, load, jalr and system words.

    `imm` is the raw 12-bit pattern; sign extension is left to the caller.
    """
    format: ClassVar[str] = "I"

    rd: int
    funct3: int
    rs1: int
    imm: int

    @classmethod
    def from_word(cls, word: int) -> "IType":
        return cls(
            opcode=extract_bits(word, 0, 6, 8),
            rd=extract_bits(word, 7, 11, 8),
            funct3=extract_bits(word, 12, 14, 8),
            rs1=extract_bits(word, 15, 19, 8),
            imm=extract_bits(word, 20, 31, 16),
        )

    def dispatch_key(self):
        # Shifts keep their type in imm[11:5]; system calls use the whole field
        # and only name the word when rd and rs1 are zero
        qualifier = None
        if self.opcode == OP_I_TYPE:
            qualifier = self.imm >> 5
        elif self.opcode == OP_SYSTEM and self.rd == 0 and self.rs1 == 0:
            qualifier = self.imm
        return (self.opcode, self.funct3, qualifier)

    def operands(self, reg):
        if self.opcode in (OP_LOAD, OP_JALR):
            return f"{reg(self.rd)}, {self.imm}({reg(self.rs1)})"
        if self.opcode == OP_SYSTEM:
            return ""
        imm = self.imm
        if self.dispatch_key() == (OP_I_TYPE, 0b101, 0b0100000):
            imm &= 0x1F  # srai: drop the shift-type bits
        return f"{reg(self.rd)}, {reg(self.rs1)}, {imm}"


@dataclass(frozen=True)
class SType(BaseInstruction):
    format: ClassVar[str] = "S"

    imm_lo: int
    funct3: int
    rs1: int
    rs2: int
    imm_hi: int

    @classmethod
    def from_word(cls, word: int) -> "SType":
        return cls(
            opcode=extract_bits(word, 0, 6, 8),
            imm_lo=extract_bits(word, 7, 11, 8),
            funct3=extract_bits(word, 12, 14, 8),
            rs1=extract_bits(word, 15, 19, 8),
            rs2=extract_bits(word, 20, 24, 8),
            imm_hi=extract_bits(word, 25, 31, 8),
        )

    def dispatch_key(self):
        return (self.opcode, self.funct3, None)

    @property
    def immediate(self) -> SplitImmediate:
        return store_immediate(self.imm_lo, self.imm_hi)

    @property
    def imm(self) -> int:
        return self.immediate.value

    def operands(self, reg):
        return f"{reg(self.rs2)}, {self.imm}({reg(self.rs1)})"


@dataclass(frozen=True)
class BType(BaseInstruction):
    """Conditional branch. `imm_lo`/`imm_hi` are the raw split fields; `imm`
    is the reassembled 13-bit byte offset."""
    format: ClassVar[str] = "B"

    imm_lo: int
    funct3: int
    rs1: int
    rs2: int
    imm_hi: int

    @classmethod
    def from_word(cls, word: int) -> "BType":
        return cls(
            opcode=extract_bits(word, 0, 6, 8),
            imm_lo=extract_bits(word, 7, 11, 8),
            funct3=extract_bits(word, 12, 14, 8),
            rs1=extract_bits(word, 15, 19, 8),
            rs2=extract_bits(word, 20, 24, 8),
            imm_hi=extract_bits(word, 25, 31, 8),
        )

    def dispatch_key(self):
        return (self.opcode, self.funct3, None)

    @property
    def immediate(self) -> SplitImmediate:
        return branch_immediate(self.imm_lo, self.imm_hi)

    @property
    def imm(self) -> int:
        return self.immediate.value

    def operands(self, reg):
        return f"{reg(self.rs1)}, {reg(self.rs2)}, {self.imm}"


@dataclass(frozen=True)
class UType(BaseInstruction):
    format: ClassVar[str] = "U"

    rd: int
    imm: int

    @classmethod
    def from_word(cls, word: int) -> "UType":
        return cls(
            opcode=extract_bits(word, 0, 6, 8),
            rd=extract_bits(word, 7, 11, 8),
            imm=extract_bits(word, 12, 31, 32),
        )

    def operands(self, reg):
        return f"{reg(self.rd)}, {hex(self.imm)}"


@dataclass(frozen=True)
class JType(BaseInstruction):
    """Jump and link. `imm` is the raw 20-bit field; `offset` the reassembled
    21-bit byte offset."""
    format: ClassVar[str] = "J"

    rd: int
    imm: int

    @classmethod
    def from_word(cls, word: int) -> "JType":
        return cls(
            opcode=extract_bits(word, 0, 6, 8),
            rd=extract_bits(word, 7, 11, 8),
            imm=extract_bits(word, 12, 31, 32),
        )

    @property
    def immediate(self) -> SplitImmediate:
        return jump_immediate(self.imm)

    @property
    def offset(self) -> int:
        return self.immediate.value

    def operands(self, reg):
        return f"{reg(self.rd)}, {self.offset}"


# ==============================================================================
# DISPATCH
# ==============================================================================

class InstructionFactory:
    # Map Opcode -> format class
    FORMAT_MAP: Dict[int, Type[BaseInstruction]] = {
        OP_R_TYPE: RType,
        OP_I_TYPE: IType,
        OP_LOAD:   IType,
        OP_STORE:  SType,
        OP_BRANCH: BType,
        OP_JAL:    JType,
        OP_JALR:   IType,
        OP_LUI:    UType,
        OP_SYSTEM: IType,
    }

    # MNEMONIC_MAP: (opcode, funct3, qualifier) -> mnemonic
    MNEMONIC_MAP: Dict[Tuple[int, Optional[int], Optional[int]], str] = {
        # --- R-Type ---
        (OP_R_TYPE, 0b000, 0b0000000): "add",
        (OP_R_TYPE, 0b000, 0b0100000): "sub",
        (OP_R_TYPE, 0b001, 0b0000000): "sll",
        (OP_R_TYPE, 0b010, 0b0000000): "slt",
        (OP_R_TYPE, 0b011, 0b0000000): "sltu",
        (OP_R_TYPE, 0b100, 0b0000000): "xor",
        (OP_R_TYPE, 0b101, 0b0000000): "srl",
        (OP_R_TYPE, 0b101, 0b0100000): "sra",
        (OP_R_TYPE, 0b110, 0b0000000): "or",
        (OP_R_TYPE, 0b111, 0b0000000): "and",

        # --- I-Type Arithmetic ---
        (OP_I_TYPE, 0b000, None):      "addi",
        (OP_I_TYPE, 0b010, None):      "slti",
        (OP_I_TYPE, 0b011, None):      "sltiu",
        (OP_I_TYPE, 0b100, None):      "xori",
        (OP_I_TYPE, 0b110, None):      "ori",
        (OP_I_TYPE, 0b111, None):      "andi",
        (OP_I_TYPE, 0b001, None):      "slli",
        (OP_I_TYPE, 0b101, None):      "srli",
        (OP_I_TYPE, 0b101, 0b0100000): "srai",

        # --- I-Type Loads & JALR ---
        (OP_LOAD,   0b000, None): "lb",
        (OP_LOAD,   0b001, None): "lh",
        (OP_LOAD,   0b010, None): "lw",
        (OP_LOAD,   0b100, None): "lbu",
        (OP_LOAD,   0b101, None): "lhu",
        (OP_JALR,   0b000, None): "jalr",

        # --- S-Type ---
        (OP_STORE,  0b000, None): "sb",
        (OP_STORE,  0b001, None): "sh",
        (OP_STORE,  0b010, None): "sw",

        # --- B-Type ---
        (OP_BRANCH, 0b000, None): "beq",
        (OP_BRANCH, 0b001, None): "bne",
        (OP_BRANCH, 0b100, None): "blt",
        (OP_BRANCH, 0b101, None): "bge",
        (OP_BRANCH, 0b110, None): "bltu",
        (OP_BRANCH, 0b111, None): "bgeu",

        # --- U-Type & J-Type ---
        (OP_LUI,    None,  None): "lui",
        (OP_AUIPC,  None,  None): "auipc",
        (OP_JAL,    None,  None): "jal",

        # --- System ---
        (OP_SYSTEM, 0b000, 0x000): "ecall",
        (OP_SYSTEM, 0b000, 0x001): "ebreak",
    }

    @classmethod
    def lookup_mnemonic(cls, opcode: int, funct3: Optional[int], qualifier: Optional[int]) -> Optional[str]:
        for key in [(opcode, funct3, qualifier), (opcode, funct3, None), (opcode, None, None)]:
            if key in cls.MNEMONIC_MAP:
                return cls.MNEMONIC_MAP[key]
        return None

    @classmethod
    def format_of(cls, word: int) -> Type[BaseInstruction]:
        opcode = extract_bits(word, 0, 6, 8)
        if opcode not in cls.FORMAT_MAP:
            raise UnknownOpcode(opcode)
        return cls.FORMAT_MAP[opcode]

    @classmethod
    def decode(cls, word: int) -> BaseInstruction:
        if not 0 <= word <= WORD_MASK:
            raise ValueError(f"Not a 32-bit word: {word!r}")
        return cls.format_of(word).from_word(word)


def decode(word: int) -> BaseInstruction:
    """Decode one 32-bit instruction word."""
    return InstructionFactory.decode(word)


def decode_words(words: Iterable[int]) -> Iterator[BaseInstruction]:
    for word in words:
        yield InstructionFactory.decode(word)


def decode_bytes(data: bytes) -> Iterator[BaseInstruction]:
    """Decode a little-endian byte stream, four bytes per instruction."""
    if len(data) % 4 != 0:
        raise ValueError(f"Instruction stream is not word aligned: {len(data)} bytes")
    for (word,) in struct.iter_unpack('<I', data):
        yield InstructionFactory.decode(word)


def render(instr: BaseInstruction, abi: bool = False) -> str:
    """Human-readable form of `instr`; never fails."""
    return instr.render(abi=abi)


def disassemble(word: int, abi: bool = False) -> str:
    return render(decode(word), abi=abi)
