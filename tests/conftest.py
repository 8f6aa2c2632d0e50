import logging
import struct

import pytest

EM_RISCV = 243


def build_elf(text: bytes, section: bytes = b".text") -> bytes:
    """Minimal relocatable ELF32 (little endian) holding a single code section."""
    shstrtab = b"\x00" + section + b"\x00.shstrtab\x00"
    text_off = 52
    strtab_off = text_off + len(text)
    shoff = (strtab_off + len(shstrtab) + 3) & ~3

    ident = b"\x7fELF" + bytes([1, 1, 1, 0]) + bytes(8)
    header = ident + struct.pack("<HHIIIIIHHHHHH", 1, EM_RISCV, 1, 0, 0, shoff, 0, 52, 0, 0, 40, 3, 2)
    body = text + shstrtab
    body += bytes(shoff - text_off - len(body))

    sections = struct.pack("<10I", *([0] * 10))
    sections += struct.pack("<10I", 1, 1, 6, 0, text_off, len(text), 0, 0, 4, 0)
    sections += struct.pack("<10I", 2 + len(section), 3, 0, 0, strtab_off, len(shstrtab), 0, 0, 1, 0)
    return header + body + sections


@pytest.fixture
def make_elf():
    return build_elf


@pytest.fixture(autouse=True)
def quiet_channels():
    """Each test starts with fresh, propagating log channels."""
    for name in ('rvcalyx.clean', 'rvcalyx.raw'):
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.propagate = True
        logger.setLevel(logging.NOTSET)
    yield
