"""Headless CHIP-8 runner.

Runs a program for a fixed number of cycles without any window or audio, then
optionally prints the display and memory. Useful for debugging programs and
for smoke-testing the core.
"""

import argparse
import sys

from tqdm import tqdm

from chipjax.machine import Chip8
from chipjax.errors import EmulatorError
from chipjax.logging import logger, set_log_level


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chipjax",
        description="Run a CHIP-8 program headless for a number of cycles",
    )
    parser.add_argument(
        "rom",
        type=str,
        help="Path to the program image (raw bytes, loaded at 0x200)",
    )
    parser.add_argument(
        "--cycles",
        type=int,
        default=1000,
        help="Number of cycles to run (default: 1000)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Seed for the RND instruction (default: 0)",
    )
    parser.add_argument(
        "--transcribed",
        action="store_true",
        help="Make SHR shift left, as transcribed, instead of right",
    )
    parser.add_argument(
        "--dump-display",
        action="store_true",
        help="Print the display after the run",
    )
    parser.add_argument(
        "--dump-memory",
        action="store_true",
        help="Print a hex dump of memory after the run",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Console log level (default: INFO)",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Hide the progress bar",
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    set_log_level(args.log_level)

    machine = Chip8(seed=args.seed, canonical_mode=not args.transcribed)
    try:
        machine.load_rom(args.rom)
    except OSError as e:
        logger.error(f"Could not read {args.rom}: {e}")
        return 1
    except EmulatorError as e:
        logger.error(str(e))
        return 1

    redraws = 0
    try:
        for _ in tqdm(range(args.cycles), desc="Running", unit="cycle", disable=args.no_progress):
            redraws += machine.step()
    except EmulatorError as e:
        logger.error(f"Machine fault at PC=0x{machine.pc:03X}: {e}")
        return 2

    logger.info(f"Ran {args.cycles} cycles, {redraws} redraws, PC=0x{machine.pc:03X}")

    if args.dump_display:
        print(machine.display_dump())
    if args.dump_memory:
        print(machine.memory_dump())
    return 0


if __name__ == "__main__":
    sys.exit(main())
