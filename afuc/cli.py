#!/usr/bin/env python3
"""Command-line front end: ``afuc-disasm [-g GPUVER] [-v] [-c] FILE``."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from .config import GpuVersion, load_config
from .errors import DisasmError, UnknownGpuVersion
from .names import NameDatabase
from .program import Program, ProgramBuffer

logger = logging.getLogger(__name__)

EXIT_ERROR = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="afuc-disasm", description="Disassemble Adreno CP microcode"
    )
    parser.add_argument("file", help="Firmware image, e.g. a530_pm4.fw")
    parser.add_argument(
        "-g",
        "--gpu",
        type=int,
        default=None,
        help="GPU version (5, etc); inferred from the file name if omitted",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=None,
        help="Show offsets, raw words, unexpected bits and the jump table",
    )
    parser.add_argument(
        "-c", "--colors", action="store_true", default=None, help="Use colors"
    )
    parser.add_argument(
        "--names", type=str, help="JSON register/packet name database"
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("AFUC_LOG_LEVEL", "WARNING"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Diagnostics on stderr (default: WARNING)",
    )
    return parser


def _select_gpu(args: argparse.Namespace) -> GpuVersion:
    if args.gpu is not None:
        return GpuVersion.for_version(args.gpu)
    gpu = GpuVersion.infer(args.file)
    if gpu is None:
        raise UnknownGpuVersion(f"Cannot infer GPU version from {args.file!r}")
    return gpu


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level, format="%(levelname)s %(name)s: %(message)s"
    )

    try:
        gpu = _select_gpu(args)
    except UnknownGpuVersion as exc:
        print(f"{exc}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return EXIT_USAGE

    try:
        config = load_config(gpu=gpu, verbose=args.verbose, colors=args.colors)
        names = (
            NameDatabase.load(args.names, gpu.domain)
            if args.names
            else NameDatabase.builtin(gpu.domain)
        )
        buffer = ProgramBuffer.from_file(args.file)
        lines = Program(config, names).listing(buffer, source=args.file)
    except OSError as exc:
        print(f"Cannot read input: {exc}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return EXIT_USAGE
    except (DisasmError, ValueError) as exc:
        logger.error("%s", exc)
        return EXIT_ERROR

    try:
        for line in lines:
            sys.stdout.write(line + "\n")
        sys.stdout.flush()
    except BrokenPipeError:
        # Allow piping to tools like `head` without noisy tracebacks.
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())
