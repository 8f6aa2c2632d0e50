from dataclasses import dataclass, field
from typing import Dict, List, Optional

from rvcalyx.config import Config
from rvcalyx.instructions import DecodeError, decode
from rvcalyx.schemes import MemoryEntry, SimOutput, build_data_file, dump_data_file
from rvcalyx.trace import instruction_listing, register_listing

# Main App section

@dataclass
class AppState:
    config: Config = field(default_factory=Config)
    last_loaded_trace: str = ""
    last_assembled_program: str = ""

    def is_ready_for_trace(self):
        return bool(self.last_loaded_trace)

app_state = AppState()


def format_value(value: MemoryEntry, view_format: str) -> str:
    """Register value in 'HEX', 'BIN' or 'DEC'; non-numeric entries pass through."""
    if not isinstance(value, int):
        return str(value)
    if view_format == 'HEX':
        return f"0x{value & 0xFFFFFFFF:08X}"
    elif view_format == 'BIN':
        return f"{value & 0xFFFFFFFF:032b}"
    return f"{value}"


# Trace Section

class TraceState:
    def __init__(self):
        self.filename = ""
        self.sim: Optional[SimOutput] = None
        self.view_format = 'HEX'    # 'HEX', 'DEC', 'BIN'
        self.error = ""

    def load(self, filename: str, sim: SimOutput):
        self.filename = filename
        self.sim = sim
        self.error = ""

    def clear(self):
        self.__init__()

    def get_instruction_rows(self, memory: str, abi: bool = False) -> List[Dict[str, str]]:
        """Rows for the instruction grid. A word with an unknown opcode stops the listing."""
        if self.sim is None:
            return []
        try:
            listing = instruction_listing(self.sim.words(memory), abi=abi)
        except DecodeError as e:
            self.error = str(e)
            return []
        return [{'slot': f"{idx: >3}", 'instruction': text} for idx, text in listing]

    def get_register_rows(self, memory: str) -> List[Dict[str, str]]:
        if self.sim is None:
            return []
        return [
            {'register': f"x{idx}", 'name': name, 'value': format_value(value, self.view_format)}
            for idx, name, value in register_listing(self.sim.words(memory))
        ]

trace_state = TraceState()


# Program Section

class ProgramState:
    def __init__(self):
        self.filename = ""
        self.content = "# Select a program from the list"
        self.words: List[int] = []
        self.ready = False

    def set_words(self, words: List[int]):
        self.words = list(words)
        self.ready = True

    def data_file_json(self, memory: str) -> str:
        return dump_data_file(build_data_file(self.words, name=memory))

    def get_rows(self, abi: bool = False) -> List[Dict[str, str]]:
        rows = []
        for idx, word in enumerate(self.words):
            try:
                text = decode(word).render(abi=abi)
            except DecodeError as e:
                text = f"<{e}>"
            rows.append({'address': f"0x{idx * 4:04X}", 'word': f"0x{word:08X}", 'instruction': text})
        return rows

program_state = ProgramState()


# Disassembler Section

@dataclass
class DisasmState:
    text: str = ""
    rows: List[Dict[str, str]] = field(default_factory=list)

    def parse(self, text: str, abi: bool = False) -> List[str]:
        """Decode whitespace/comma separated hex words; returns per-token errors."""
        self.text = text
        self.rows = []
        errors = []
        tokens = [t for t in text.replace(',', ' ').split() if t]
        for idx, token in enumerate(tokens):
            try:
                word = int(token, 16)
                if not 0 <= word <= 0xFFFFFFFF:
                    raise ValueError("not a 32-bit word")
                rendered = decode(word).render(abi=abi)
            except (ValueError, DecodeError) as e:
                errors.append(f"{token}: {e}")
                continue
            self.rows.append({'slot': f"{idx: >3}", 'word': f"0x{word:08X}", 'instruction': rendered})
        return errors

disasm_state = DisasmState()
