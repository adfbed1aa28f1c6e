from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path
from typing import List

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .algorithms import ALGORITHMS, run_algorithm, run_algorithms
from .config import ALGORITHM_ORDER, DEFAULT_NUM_PROCESSES, DEFAULT_QUANTUM, SimulationConfig
from .errors import SchedulerError
from .gantt import build_rich_gantt, render_gantt
from .metrics import summarize_results
from .models import Process, SimulationResult
from .timeline import merge_streams
from .workload_io import generate_processes, load_workload, save_workload

log = logging.getLogger(__name__)


def _add_workload_args(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--workload",
        "-w",
        help="Path to JSON or CSV workload file.",
    )
    source.add_argument(
        "--processes",
        "-n",
        type=int,
        default=None,
        help=f"Generate this many random processes instead of loading a file (default: {DEFAULT_NUM_PROCESSES}).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for generated workloads.",
    )
    parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum for RR / MLFQ, MLFQ levels use q, 2q, 4q (default: {DEFAULT_QUANTUM}).",
    )
    parser.add_argument(
        "--max-time",
        type=int,
        default=None,
        help="Abort if simulated time passes this value (default: derived from the workload).",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FIFO, SJF, STCF, RR, MLFQ).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every dispatch, demotion and completion.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run one scheduling algorithm on a workload.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        choices=list(ALGORITHMS),
        help="Algorithm to use.",
    )
    _add_workload_args(run_parser)
    run_parser.add_argument(
        "--plain",
        action="store_true",
        help="Print a plain-text Gantt chart instead of the colored one.",
    )
    run_parser.add_argument(
        "--step",
        action="store_true",
        help="Show a simple time-stepped simulation in the terminal.",
    )
    run_parser.add_argument(
        "--step-delay",
        type=float,
        default=0.3,
        help="Seconds to wait between steps when --step is used (default: 0.3).",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        choices=list(ALGORITHMS),
        default=list(ALGORITHM_ORDER),
        help="Algorithms to compare (default: fifo sjf stcf rr mlfq).",
    )
    _add_workload_args(compare_parser)
    compare_parser.add_argument(
        "--sequential",
        action="store_true",
        help="Run the algorithms one after another instead of in parallel.",
    )

    generate_parser = subparsers.add_parser("generate", help="Write a random workload to a JSON file.")
    generate_parser.add_argument(
        "--processes",
        "-n",
        type=int,
        default=DEFAULT_NUM_PROCESSES,
        help=f"Number of processes (default: {DEFAULT_NUM_PROCESSES}).",
    )
    generate_parser.add_argument("--seed", type=int, default=None, help="Random seed.")
    generate_parser.add_argument("--output", "-o", required=True, help="Destination .json file.")

    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


def _load_processes(args: argparse.Namespace) -> List[Process]:
    if args.workload:
        return load_workload(Path(args.workload))
    count = args.processes if args.processes is not None else DEFAULT_NUM_PROCESSES
    processes = generate_processes(count, seed=args.seed)
    log.info("Generated %d process(es) with seed %s", count, args.seed)
    return processes


def _print_workload(processes: List[Process], console: Console) -> None:
    table = Table(title="Workload", box=box.SIMPLE_HEAVY)
    table.add_column("PID", justify="center")
    table.add_column("Arrive", justify="right")
    table.add_column("Burst", justify="right")
    for p in processes:
        table.add_row(f"P{p.pid}", str(p.arrival_time), str(p.burst_time))
    console.print(table)


def _print_result(result: SimulationResult, console: Console, plain: bool = False) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    if plain:
        console.print(render_gantt(result.segments, result.total_time), markup=False, highlight=False)
    else:
        panel, time_marks = build_rich_gantt(result)
        console.print(panel)
        if time_marks:
            console.print(time_marks)

    console.print()

    headers = ["PID", "Arrive", "Burst", "Finish", "Turnaround", "Wait"]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        proc_table.add_column(h, justify="center" if h == "PID" else "right")

    for p in result.results:
        proc_table.add_row(
            f"P{p.pid}",
            str(p.arrival_time),
            str(p.burst_time),
            str(p.finish_time),
            str(p.turnaround_time),
            str(p.waiting_time),
        )

    console.print(proc_table)
    console.print()

    summary = summarize_results(result)
    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg finish", f"{summary['avg_finish']:.2f}")
    sys_table.add_row("Avg turnaround", f"{summary['avg_turnaround']:.2f}")
    sys_table.add_row("Avg waiting", f"{summary['avg_waiting']:.2f}")
    sys_table.add_row("Avg response", f"{summary['avg_response']:.2f}")
    if result.system:
        sys = result.system
        sys_table.add_row("Makespan", str(sys.makespan))
        sys_table.add_row("Throughput (proc/time)", f"{sys.throughput:.3f}")
        sys_table.add_row("CPU utilization", f"{sys.cpu_utilization*100:.1f}%")

    console.print(sys_table)


def _print_comparison(results: dict, console: Console) -> None:
    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Makespan", justify="right")
    summary_table.add_column("Avg finish", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg response", justify="right")

    for result in results.values():
        summary = summarize_results(result)
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            str(result.total_time),
            f"{summary['avg_finish']:.2f}",
            f"{summary['avg_turnaround']:.2f}",
            f"{summary['avg_waiting']:.2f}",
            f"{summary['avg_response']:.2f}",
        )

    console.print(summary_table)


def _animate_result(result: SimulationResult, console: Console, delay: float) -> None:
    """
    Simple time-stepped textual simulation using the computed schedule.
    """
    levels = {}
    for level, stream in enumerate(result.segments, start=1):
        for segment in stream:
            levels[segment] = level

    timeline = merge_streams(result.segments)
    if not timeline:
        console.print("[red]No execution to animate.[/red]")
        return

    console.print(f"[bold]Simulating {result.algorithm}[/bold] (duration {result.total_time} time units)")
    console.print("[dim]Press Ctrl+C to skip animation.[/dim]")

    for t in range(result.total_time):
        msg = f"t={t:2d}: (idle)"
        for sl in timeline:
            if sl.start_time <= t < sl.end_time:
                msg = f"t={t:2d}: P{sl.pid}"
                if result.levels > 1:
                    msg += f" (Q{levels[sl]})"
                msg += f" [green]{'█' * (t - sl.start_time + 1)}[/green]"
                break
        console.print(msg, highlight=False)
        time.sleep(delay)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)
    console = Console()

    try:
        if args.command == "run":
            processes = _load_processes(args)
            _print_workload(processes, console)
            result = run_algorithm(args.algorithm, processes, quantum=args.quantum, max_time=args.max_time)
            if args.step:
                try:
                    _animate_result(result, console, delay=args.step_delay)
                except KeyboardInterrupt:
                    console.print("[yellow]Animation skipped.[/yellow]")
            _print_result(result, console, plain=args.plain)
            return 0

        if args.command == "compare":
            processes = _load_processes(args)
            _print_workload(processes, console)
            config = SimulationConfig(
                quantum=args.quantum,
                max_time=args.max_time,
                parallel=not args.sequential,
            )
            results = run_algorithms(args.algorithms, processes, config)
            _print_comparison(results, console)
            return 0

        if args.command == "generate":
            processes = generate_processes(args.processes, seed=args.seed)
            path = save_workload(processes, args.output)
            console.print(f"Wrote {len(processes)} process(es) to [green]{path}[/green]")
            return 0
    except (SchedulerError, ValueError, OSError) as exc:
        console.print(f"[red]Error: {exc}[/red]")
        return 1

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
