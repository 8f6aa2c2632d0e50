from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union
from enum import Enum

from rvcalyx.schemes import SimOutput

paths = {
    'programs': "riscv_programs",
    'traces': "sim_traces",
}

class FileType(Enum):
    ASSEMBLY = "assembly"      # .s, .asm
    TRACE = "trace"            # .json
    OBJECT = "object"          # .o, .elf

EXTENSIONS = {
    FileType.ASSEMBLY: ['.s', '.asm'],
    FileType.TRACE: ['.json'],
    FileType.OBJECT: ['.o', '.elf'],
}

class FileLoader:
    @staticmethod
    def list_files(file_source: FileType, directories: Optional[Dict[str, str]] = None) -> List[str]:
        """List files in the given source directory based on type"""
        directories = directories or paths
        if file_source == FileType.TRACE:
            target_dir = Path(directories['traces'])
        elif file_source in (FileType.ASSEMBLY, FileType.OBJECT):
            target_dir = Path(directories['programs'])
        else:
            raise ValueError(f"Unknown file source: {file_source}")

        if not target_dir.is_dir():
            return []

        extensions = EXTENSIONS[file_source]
        return sorted(f"{target_dir}/{f.name}" for f in target_dir.iterdir() if f.suffix.lower() in extensions)

    @staticmethod
    def detect_type(file_path: str) -> FileType:
        """Detect file type from extension"""
        suffix = Path(file_path).suffix.lower()
        for file_type, extensions in EXTENSIONS.items():
            if suffix in extensions:
                return file_type
        raise ValueError(f"Unknown file type: {suffix}")

    @staticmethod
    def load_assembly(file_path: str) -> str:
        with open(file_path, 'r') as f:
            return f.read()

    @staticmethod
    def load_trace(file_path: str) -> SimOutput:
        with open(file_path, 'r') as f:
            return SimOutput.load(f)

    @staticmethod
    def load_object(file_path: str) -> bytes:
        with open(file_path, 'rb') as f:
            return f.read()

    @classmethod
    def load(cls, file_path: str) -> Tuple[FileType, Union[str, SimOutput, bytes]]:
        """Universal loader - returns (type, data)"""
        file_type = cls.detect_type(file_path)

        if file_type == FileType.ASSEMBLY:
            data = cls.load_assembly(file_path)
        elif file_type == FileType.TRACE:
            data = cls.load_trace(file_path)
        else:
            data = cls.load_object(file_path)

        return file_type, data
