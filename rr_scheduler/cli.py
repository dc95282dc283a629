from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .models import Process, SimulationResult
from .report import build_process_table, build_sequence_panel, format_sequence
from .simulator import simulate_rr
from .workload_io import load_workload, parse_text, validate_workload

DEFAULT_QUANTUM = 2
DEFAULT_MAX_SEQ_LEN = 20

logger = logging.getLogger("rr_scheduler")


def _positive_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from None
    if parsed <= 0:
        raise argparse.ArgumentTypeError(f"must be > 0, got {parsed}")
    return parsed


def _non_negative_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from None
    if parsed < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {parsed}")
    return parsed


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to a JSON, CSV or text workload file ('-' reads text from stdin).",
    )
    parser.add_argument(
        "--quantum",
        "-q",
        type=_positive_int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum (default: {DEFAULT_QUANTUM}).",
    )
    parser.add_argument(
        "--max-seq-len",
        "-s",
        type=_non_negative_int,
        default=DEFAULT_MAX_SEQ_LEN,
        help=f"Maximum length of the reported execution sequence (default: {DEFAULT_MAX_SEQ_LEN}).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log simulation events (idle jumps, bulk skips, completions).",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rr-sim",
        description="Round-Robin CPU scheduling simulator.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Simulate a workload and print the results.")
    _add_common_arguments(run_parser)
    run_parser.add_argument(
        "--no-bulk-skip",
        action="store_true",
        help="Advance one quantum at a time instead of skipping whole rounds.",
    )
    run_parser.add_argument(
        "--uncapped-idle",
        action="store_true",
        help="Let the idle marker before a late arrival bypass --max-seq-len.",
    )
    run_parser.add_argument(
        "--plain",
        action="store_true",
        help="Print only the plain 'seq = [...]' line and the process table.",
    )

    check_parser = subparsers.add_parser(
        "check",
        help="Run the optimized and the quantum-by-quantum simulation and compare them.",
    )
    _add_common_arguments(check_parser)

    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _read_workload(workload: str) -> List[Process]:
    if workload == "-":
        processes = parse_text(sys.stdin.read())
    else:
        processes = load_workload(Path(workload))
    validate_workload(processes)
    logger.info("loaded %d processes from %s", len(processes), workload)
    return processes


def _print_result(result: SimulationResult, console: Console, plain: bool = False) -> None:
    if plain:
        console.print(format_sequence(result), markup=False, highlight=False)
    else:
        console.print(build_sequence_panel(result))
    console.print(build_process_table(result))


def _same_result(a: SimulationResult, b: SimulationResult) -> bool:
    times_a = [(p.pid, p.start_time, p.finish_time) for p in a.processes]
    times_b = [(p.pid, p.start_time, p.finish_time) for p in b.processes]
    return times_a == times_b and a.sequence == b.sequence


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)
    console = Console()

    try:
        processes = _read_workload(args.workload)
    except (OSError, ValueError) as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 1

    if args.command == "run":
        result = simulate_rr(
            args.quantum,
            args.max_seq_len,
            processes,
            bulk_skip=not args.no_bulk_skip,
            cap_idle=not args.uncapped_idle,
        )
        _print_result(result, console, plain=args.plain)
        return 0

    if args.command == "check":
        fast = simulate_rr(args.quantum, args.max_seq_len, processes)
        naive = simulate_rr(args.quantum, args.max_seq_len, processes, bulk_skip=False)
        if _same_result(fast, naive):
            console.print("[green]Bulk-skip and quantum-by-quantum simulations agree.[/green]")
            return 0
        console.print("[red]Bulk-skip and quantum-by-quantum simulations differ![/red]")
        console.print(format_sequence(fast), markup=False, highlight=False)
        console.print(format_sequence(naive), markup=False, highlight=False)
        return 1

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
