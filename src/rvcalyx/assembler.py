import logging
import os
import subprocess
import tempfile
from pathlib import Path
from typing import List, Union

from rvcalyx.loader import TEXT_SECTION, read_program_words

DEFAULT_ASSEMBLER = "riscv64-unknown-elf-as"

raw_log = logging.getLogger('rvcalyx.raw')
clean_log = logging.getLogger('rvcalyx.clean')


class Log:
    """Boilerplate redirected to the logging system."""

    @staticmethod
    def command(cmd):
        clean_log.info(f"Running: {' '.join(str(c) for c in cmd)}")

    @staticmethod
    def stderr(text):
        for line in text.splitlines():
            raw_log.info(f"<< {line}")

    @staticmethod
    def error(msg):
        clean_log.error(f"!!! ASSEMBLY ERROR: {msg}")


class AssemblerError(Exception):
    """The external assembler could not be run or rejected the input."""


def assemble(source: Union[str, Path], assembler: str = DEFAULT_ASSEMBLER) -> bytes:
    """Assemble `source` with the external GNU assembler, returning the object file bytes."""
    fd, obj_path = tempfile.mkstemp(suffix=".o")
    os.close(fd)
    try:
        cmd = [assembler, str(source), "-o", obj_path]
        Log.command(cmd)
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise AssemblerError(f"Cannot run assembler '{assembler}': {e}")

        if result.stderr:
            Log.stderr(result.stderr)
        if result.returncode != 0:
            Log.error(result.stderr.strip() or f"exit status {result.returncode}")
            raise AssemblerError(result.stderr.strip() or f"{assembler} exited with status {result.returncode}")

        return Path(obj_path).read_bytes()
    finally:
        os.unlink(obj_path)


def assemble_words(source: Union[str, Path], assembler: str = DEFAULT_ASSEMBLER,
                   section: str = TEXT_SECTION) -> List[int]:
    """Assemble `source` and return the instruction words of its code section."""
    return read_program_words(assemble(source, assembler), section)
