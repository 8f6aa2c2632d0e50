import io
import logging
from pathlib import Path
from typing import List, Union

from elftools.common.exceptions import ELFError
from elftools.elf.elffile import ELFFile

from rvcalyx.schemes import WORD_SIZE_BYTES, unpack_words

TEXT_SECTION = ".text"

# Connect to the UI logger
clean_out = logging.getLogger('rvcalyx.clean')
raw_out = logging.getLogger('rvcalyx.raw')


class LoaderError(Exception):
    """Custom exception for program loading failures."""
    pass


def validate_payload(data: bytearray) -> bytearray:
    """Checks the payload is non-empty and word aligned, padding it if needed."""
    if not data:
        raise LoaderError("Validation failed: code section is empty.")

    if len(data) % WORD_SIZE_BYTES != 0:
        padding = WORD_SIZE_BYTES - (len(data) % WORD_SIZE_BYTES)
        clean_out.warning(f"Padding binary with {padding} bytes for alignment.")
        data += b'\x00' * padding
    else:
        clean_out.info("- File is properly aligned (multiple of 4 bytes).")

    clean_out.info(f"- Checked code size: {len(data) // WORD_SIZE_BYTES} words")
    return data


def extract_text_section(elf_bytes: bytes, section: str = TEXT_SECTION) -> bytes:
    """Raw contents of `section` from an ELF image."""
    try:
        elf = ELFFile(io.BytesIO(elf_bytes))
        shdr = elf.get_section_by_name(section)
    except ELFError as e:
        raise LoaderError(f"Failed to parse ELF: {e}")

    if shdr is None:
        raise LoaderError(f"ELF has no {section} section")

    data = shdr.data()
    clean_out.info(f"Found {section}: {len(data)} bytes")
    return data


def read_program_words(source: Union[str, Path, bytes], section: str = TEXT_SECTION) -> List[int]:
    """Instruction words of the code section of an ELF file (path or bytes)."""
    if isinstance(source, (bytes, bytearray)):
        elf_bytes = bytes(source)
    else:
        try:
            elf_bytes = Path(source).read_bytes()
        except OSError as e:
            raise LoaderError(f"Cannot read '{source}': {e}")

    data = validate_payload(bytearray(extract_text_section(elf_bytes, section)))
    words = unpack_words(bytes(data))

    for i in range(0, len(words), 8):
        raw_out.info(" ".join(f"{w:08X}" for w in words[i:i + 8]))
    return words
