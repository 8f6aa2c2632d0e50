"""Reassembly of the RISC-V immediates that are split across the word.

Each helper takes the raw fields exactly as they sit in the instruction and
returns the unsigned pattern together with the position of its sign bit.
"""

from dataclasses import dataclass

from rvcalyx.bits import to_signed


@dataclass(frozen=True)
class SplitImmediate:
    value: int
    sign_bit: int

    @property
    def width(self) -> int:
        return self.sign_bit + 1

    @property
    def signed(self) -> int:
        return to_signed(self.value, self.width)


def _bit(value: int, index: int) -> int:
    return (value >> index) & 1


def branch_immediate(imm_lo: int, imm_hi: int) -> SplitImmediate:
    """B-type offset from imm_lo (word bits 11:7) and imm_hi (word bits 31:25).

    imm[12|10:5] lives in imm_hi, imm[4:1|11] in imm_lo, imm[0] is always 0.
    """
    imm_4_1 = (imm_lo >> 1) & 0xF
    imm_11 = _bit(imm_lo, 0)
    imm_10_5 = imm_hi & 0x3F
    imm_12 = _bit(imm_hi, 6)
    value = (imm_12 << 12) | (imm_11 << 11) | (imm_10_5 << 5) | (imm_4_1 << 1)
    return SplitImmediate(value, 12)


def store_immediate(imm_lo: int, imm_hi: int) -> SplitImmediate:
    """S-type offset: imm[4:0] from imm_lo, imm[11:5] from imm_hi."""
    value = ((imm_hi & 0x7F) << 5) | (imm_lo & 0x1F)
    return SplitImmediate(value, 11)


def jump_immediate(imm: int) -> SplitImmediate:
    """J-type offset from the raw 20-bit field at word bits 31:12.

    The field holds imm[20|10:1|11|19:12], most significant first.
    """
    imm_19_12 = imm & 0xFF
    imm_11 = _bit(imm, 8)
    imm_10_1 = (imm >> 9) & 0x3FF
    imm_20 = _bit(imm, 19)
    value = (imm_20 << 20) | (imm_19_12 << 12) | (imm_11 << 11) | (imm_10_1 << 1)
    return SplitImmediate(value, 20)
