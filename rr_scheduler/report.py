from __future__ import annotations

from typing import Dict

from rich import box
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import SimulationResult


def format_sequence(result: SimulationResult) -> str:
    """
    Plain-text rendering of the execution sequence, idle shown as -1.
    """
    return "seq = [" + ", ".join(str(pid) for pid in result.sequence_ids) + "]"


def build_sequence_panel(result: SimulationResult) -> Panel:
    """
    Build a Rich Panel with one colored cell per execution sequence entry.
    """
    if not result.sequence:
        return Panel("(empty sequence)", title="Execution sequence")

    colors = ["red", "green", "yellow", "blue", "magenta", "cyan"]
    pid_to_color: Dict[int, str] = {}

    def pid_color(pid: int) -> str:
        if pid not in pid_to_color:
            idx = len(pid_to_color) % len(colors)
            pid_to_color[pid] = colors[idx]
        return pid_to_color[pid]

    cells = Text()
    for idx, slot in enumerate(result.sequence):
        if idx:
            cells.append(" ")
        if slot.is_idle:
            cells.append(" idle ", style="dim reverse")
        else:
            cells.append(f" {slot.pid} ", style=f"bold on {pid_color(slot.pid)}")

    title = f"Execution sequence (quantum {result.quantum}, max {result.max_seq_len})"
    return Panel.fit(cells, title=title)


def build_process_table(result: SimulationResult) -> Table:
    table = Table(title="Processes", box=box.SIMPLE_HEAVY)
    for header in ("Id", "Arrival", "Burst", "Start", "Finish"):
        justify = "center" if header == "Id" else "right"
        table.add_column(header, justify=justify)

    for p in result.processes:
        table.add_row(
            str(p.pid),
            str(p.arrival_time),
            str(p.burst),
            "" if p.start_time is None else str(p.start_time),
            "" if p.finish_time is None else str(p.finish_time),
        )
    return table
