import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rvcalyx.assembler import AssemblerError, assemble_words
from rvcalyx.config import Config, ConfigError, load_config
from rvcalyx.instructions import DecodeError, decode
from rvcalyx.loader import LoaderError
from rvcalyx.schemes import WORD_SIZE_BYTES, MemorySpec, SimOutput, build_data_file, dump_data_file, unpack_words
from rvcalyx.trace import format_trace

clean_log = logging.getLogger('rvcalyx.clean')
raw_log = logging.getLogger('rvcalyx.raw')


def configure_logging(verbose: bool = False):
    """Send both channels to stderr, message only."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter('%(message)s'))
    for logger in (clean_log, raw_log):
        logger.handlers.clear()
        logger.addHandler(handler)
        logger.propagate = False
    clean_log.setLevel(logging.INFO if verbose else logging.WARNING)
    raw_log.setLevel(logging.INFO if verbose else logging.WARNING)


def memory_spec(text: str) -> MemorySpec:
    try:
        return MemorySpec.parse(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def hex_word(text: str) -> int:
    try:
        word = int(text, 16)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a hex word: {text}")
    if not 0 <= word <= 0xFFFFFFFF:
        raise argparse.ArgumentTypeError(f"not a 32-bit word: {text}")
    return word


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rvcalyx", description="Translate RISC-V assembly into Calyx data files and back")
    parser.add_argument('--config', default=None, help="JSON config file (default: ./rvcalyx.json)")
    parser.add_argument('-v', '--verbose', action='store_true', help="Log progress to stderr")
    sub = parser.add_subparsers(dest='command', required=True)

    enc = sub.add_parser('encode', help="Encode a RISC-V assembly file into Calyx data format")
    enc.add_argument('riscv_file', type=Path, help="Input file in RISC-V assembly format")
    enc.add_argument('-n', '--name', default=None, help="Name of instruction memory")
    enc.add_argument('-a', '--assembler', default=None, help="RISC-V assembler executable")
    enc.add_argument('--data', type=memory_spec, action='append', default=[], metavar='NAME:SIZE:WIDTH[:VALUE]',
                     help="Additional memory to emit (repeatable)")
    enc.add_argument('-o', '--output', type=Path, default=None, help="Output file (default: stdout)")

    dec = sub.add_parser('decode', help="Decode a Calyx simulation dump into human readable form")
    dec.add_argument('data', nargs='?', type=Path, default=None, help="Simulation JSON (default: stdin)")
    dec.add_argument('--abi', action='store_true', default=None, help="Use ABI register names")

    dis = sub.add_parser('disasm', help="Disassemble raw instruction words")
    dis.add_argument('words', nargs='*', type=hex_word, help="Hex instruction words")
    dis.add_argument('--bin', type=Path, default=None, help="Little-endian binary file of instruction words")
    dis.add_argument('--abi', action='store_true', default=None, help="Use ABI register names")
    return parser


def encode(args, cfg: Config) -> int:
    assembler = args.assembler or cfg.assembler
    name = args.name or cfg.instruction_memory

    words = assemble_words(args.riscv_file, assembler)
    clean_log.info(f"Assembled {len(words)} instructions from {args.riscv_file}")

    output_json = dump_data_file(build_data_file(words, name=name, memories=args.data))
    if args.output:
        args.output.write_text(output_json)
        clean_log.info(f"Wrote {args.output}")
    else:
        print(output_json)
    return 0


def decode_trace(args, cfg: Config) -> int:
    if args.data is None:
        sim = SimOutput.load(sys.stdin)
    else:
        with open(args.data, 'r') as f:
            sim = SimOutput.load(f)

    abi = cfg.abi_names if args.abi is None else args.abi
    for line in format_trace(sim, cfg.instruction_memory, cfg.register_memory, abi=abi):
        print(line)
    return 0


def disassemble(args, cfg: Config) -> int:
    words = list(args.words)
    if args.bin is not None:
        data = args.bin.read_bytes()
        if len(data) % WORD_SIZE_BYTES != 0:
            raise ValueError(f"{args.bin} is not word aligned: {len(data)} bytes")
        words += unpack_words(data)
    abi = cfg.abi_names if args.abi is None else args.abi

    for idx, word in enumerate(words):
        raw_log.info(f"0x{word:08x}")
        print(f"{idx: >3}: {decode(word).render(abi=abi)}")
    return 0


COMMANDS = {
    'encode': encode,
    'decode': decode_trace,
    'disasm': disassemble,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        cfg = load_config(args.config)
        return COMMANDS[args.command](args, cfg)
    except (DecodeError, LoaderError, AssemblerError, ConfigError, OSError, ValueError) as e:
        clean_log.error(f"error: {e}")
    return 1


if __name__ == '__main__':
    sys.exit(main())
