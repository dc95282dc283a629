from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

IDLE_ID = -1


@dataclass
class Process:
    pid: int
    arrival_time: int
    burst: int
    start_time: Optional[int] = None
    finish_time: Optional[int] = None


@dataclass(frozen=True)
class Slot:
    """
    One entry of the execution sequence: either the CPU was idle or it was
    running the process ``pid``.
    """

    pid: Optional[int] = None

    @classmethod
    def running(cls, pid: int) -> "Slot":
        return cls(pid=pid)

    @property
    def is_idle(self) -> bool:
        return self.pid is None

    def as_int(self) -> int:
        return IDLE_ID if self.pid is None else self.pid


IDLE = Slot()


@dataclass
class SimulationResult:
    quantum: int
    max_seq_len: int
    processes: List[Process] = field(default_factory=list)
    sequence: List[Slot] = field(default_factory=list)

    @property
    def sequence_ids(self) -> List[int]:
        return [slot.as_int() for slot in self.sequence]
