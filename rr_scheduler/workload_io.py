from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Iterable, List

from .models import Process


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON, CSV or plain-text file into a list of Process
    objects. Anything that is not .json or .csv is read as plain text.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        return _load_json(path)
    if suffix == ".csv":
        return _load_csv(path)

    return parse_text(path.read_text(encoding="utf-8"))


def parse_text(text: str) -> List[Process]:
    """
    Parse the classic text format: one ``arrival burst`` pair per line.

    Blank lines and ``#`` comments are skipped. Process ids are assigned
    sequentially from 0 in line order.
    """
    processes: List[Process] = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        parts = line.split()
        if len(parts) != 2:
            raise ValueError(f"Line {lineno}: expected 'arrival burst', got {raw!r}")
        try:
            arrival_time, burst = int(parts[0]), int(parts[1])
        except ValueError as exc:
            raise ValueError(f"Line {lineno}: non-integer value in {raw!r}") from exc
        processes.append(Process(pid=len(processes), arrival_time=arrival_time, burst=burst))
    return processes


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, Iterable) or isinstance(raw, (str, dict)):
        raise ValueError("JSON workload must be a list of process objects")

    processes: List[Process] = []
    for entry in raw:
        processes.append(_process_from_mapping(entry))

    return processes


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            processes.append(_process_from_mapping(row))
    return processes


def _process_from_mapping(mapping) -> Process:
    try:
        pid = int(mapping["pid"])
        arrival_time = int(mapping["arrival_time"])
        burst_val = mapping["burst"] if "burst" in mapping else mapping["burst_time"]
        burst = int(burst_val)
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Invalid process entry: {mapping!r}") from exc

    return Process(pid=pid, arrival_time=arrival_time, burst=burst)


def validate_workload(processes: List[Process]) -> None:
    """
    Reject workloads the simulator cannot handle: the simulator itself does
    no checking and assumes unique ids, positive bursts and sorted arrivals.
    """
    if not processes:
        raise ValueError("Workload contains no processes")

    seen: set[int] = set()
    previous_arrival = 0
    for p in processes:
        if p.pid in seen:
            raise ValueError(f"Duplicate process id {p.pid}")
        seen.add(p.pid)

        if p.arrival_time < 0:
            raise ValueError(f"Process {p.pid}: arrival time must be >= 0, got {p.arrival_time}")
        if p.burst <= 0:
            raise ValueError(f"Process {p.pid}: burst must be > 0, got {p.burst}")
        if p.arrival_time < previous_arrival:
            raise ValueError(
                f"Process {p.pid}: arrival time {p.arrival_time} is earlier than the "
                f"previous process ({previous_arrival}); workload must be sorted by arrival"
            )
        previous_arrival = p.arrival_time
