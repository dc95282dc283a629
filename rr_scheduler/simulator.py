from __future__ import annotations

import logging
from collections import deque
from dataclasses import replace
from enum import Enum
from typing import Callable, Deque, Dict, List, Optional, Sequence

from .models import IDLE, Process, SimulationResult, Slot
from .trace import ExecutionTrace

logger = logging.getLogger(__name__)


class SimState(Enum):
    ADMIT_NEXT = "admit_next"
    DRAIN = "drain"
    BULK_SKIP = "bulk_skip"
    STEP_PREEMPT = "step_preempt"
    STEP_COMPLETE = "step_complete"
    DONE = "done"


def bulk_skip_rounds(
    quantum: int,
    curr_time: int,
    remaining: Sequence[int],
    next_arrival: Optional[int] = None,
) -> int:
    """
    Number of full round-robin cycles that can be applied in one step.

    ``remaining`` holds the remaining bursts of the ready queue. A cycle is
    safe when nobody can finish inside it and no pending process arrives
    before it ends. Returns 0 when no cycle is safe.
    """
    if not remaining:
        return 0
    shortest = min(remaining)
    if shortest <= quantum:
        return 0

    # The shortest job keeps a final slice in (0, quantum] for the normal path.
    rounds = (shortest - 1) // quantum

    if next_arrival is not None:
        cycle = len(remaining) * quantum
        if curr_time + cycle >= next_arrival:
            return 0
        rounds = min(rounds, (next_arrival - curr_time) // cycle)
    return rounds


class RoundRobinSimulator:
    """
    Discrete-event Round-Robin simulation driven by an explicit state machine.

    ``_next_state`` inspects the queues and names what happens next; each
    state has one handler that mutates the simulator. The loop stops at
    ``SimState.DONE`` once both queues are empty.
    """

    def __init__(
        self,
        quantum: int,
        max_seq_len: int,
        processes: Sequence[Process],
        bulk_skip: bool = True,
        cap_idle: bool = True,
    ) -> None:
        self.quantum = quantum
        self.max_seq_len = max_seq_len
        self.bulk_skip = bulk_skip
        self.cap_idle = cap_idle

        # Work on copies so we don't surprise callers.
        self.processes: List[Process] = [
            replace(p, start_time=None, finish_time=None) for p in processes
        ]
        self.by_pid: Dict[int, Process] = {p.pid: p for p in self.processes}

        self.curr_time = 0
        self.started = False
        self.pending: Deque[Process] = deque(self.processes)
        self.ready: Deque[int] = deque()
        self.remaining: Dict[int, int] = {p.pid: p.burst for p in self.processes}
        self.trace = ExecutionTrace(max_seq_len)

        self._handlers: Dict[SimState, Callable[[], None]] = {
            SimState.ADMIT_NEXT: self._admit_next,
            SimState.DRAIN: self._drain,
            SimState.BULK_SKIP: self._bulk_skip,
            SimState.STEP_PREEMPT: self._step_preempt,
            SimState.STEP_COMPLETE: self._step_complete,
        }

    def run(self) -> SimulationResult:
        state = self._next_state()
        while state is not SimState.DONE:
            self._handlers[state]()
            state = self._next_state()

        return SimulationResult(
            quantum=self.quantum,
            max_seq_len=self.max_seq_len,
            processes=self.processes,
            sequence=self.trace.slots(),
        )

    def _next_state(self) -> SimState:
        if not self.ready and not self.pending:
            return SimState.DONE

        # Arrivals at or before curr_time are drained even when the ready queue
        # just emptied. ADMIT_NEXT handles only the first event and real gaps.
        if (
            self.started
            and self.pending
            and self.pending[0].arrival_time <= self.curr_time
        ):
            return SimState.DRAIN

        if not self.ready:
            return SimState.ADMIT_NEXT

        if self.bulk_skip:
            # A lone survivor with nothing left to arrive runs straight to the end.
            if len(self.ready) == 1 and not self.pending:
                return SimState.STEP_COMPLETE
            if self._safe_rounds() > 0:
                return SimState.BULK_SKIP

        if self.remaining[self.ready[0]] <= self.quantum:
            return SimState.STEP_COMPLETE
        return SimState.STEP_PREEMPT

    def _safe_rounds(self) -> int:
        next_arrival = self.pending[0].arrival_time if self.pending else None
        return bulk_skip_rounds(
            self.quantum,
            self.curr_time,
            [self.remaining[pid] for pid in self.ready],
            next_arrival,
        )

    def _admit(self) -> None:
        self.ready.append(self.pending.popleft().pid)

    def _dispatch(self, pid: int, at: int) -> None:
        proc = self.by_pid[pid]
        if proc.start_time is None:
            proc.start_time = at

    def _admit_next(self) -> None:
        proc = self.pending[0]
        self._admit()
        if proc.arrival_time > self.curr_time:
            logger.debug("cpu idle from t=%d to t=%d", self.curr_time, proc.arrival_time)
        self.curr_time = proc.arrival_time
        self.started = True

        # Time 0 is only ever seen on the very first admission.
        if self.curr_time == 0 and (self.cap_idle or not self.trace.full):
            slot = Slot.running(proc.pid)
        else:
            slot = IDLE

        if self.cap_idle:
            self.trace.append(slot)
        else:
            self.trace.force_append(slot)

    def _drain(self) -> None:
        self._admit()

    def _bulk_skip(self) -> None:
        rounds = self._safe_rounds()
        cycle = list(self.ready)
        for pos, pid in enumerate(cycle):
            self._dispatch(pid, self.curr_time + self.quantum * pos)
            self.remaining[pid] -= self.quantum * rounds

        elapsed = len(cycle) * self.quantum * rounds
        logger.debug(
            "bulk skip of %d rounds over %d ready processes at t=%d (+%d)",
            rounds,
            len(cycle),
            self.curr_time,
            elapsed,
        )
        self.curr_time += elapsed
        self.trace.append_rounds([Slot.running(pid) for pid in cycle], rounds)

    def _step_preempt(self) -> None:
        pid = self.ready.popleft()
        self._dispatch(pid, self.curr_time)
        self.curr_time += self.quantum
        self.trace.append(Slot.running(pid))
        self.remaining[pid] -= self.quantum

        # Arrivals during the slice queue ahead of the preempted process;
        # arrivals at exactly curr_time queue behind it (see DRAIN).
        while self.pending and self.pending[0].arrival_time < self.curr_time:
            self._admit()
        self.ready.append(pid)

    def _step_complete(self) -> None:
        pid = self.ready.popleft()
        self._dispatch(pid, self.curr_time)
        self.curr_time += self.remaining[pid]
        self.trace.append(Slot.running(pid))
        self.remaining[pid] = 0
        self.by_pid[pid].finish_time = self.curr_time
        logger.debug("process %d finished at t=%d", pid, self.curr_time)


def simulate_rr(
    quantum: int,
    max_seq_len: int,
    processes: Sequence[Process],
    *,
    bulk_skip: bool = True,
    cap_idle: bool = True,
) -> SimulationResult:
    """
    Round-Robin simulation over ``processes`` (sorted by arrival time).

    Returns copies of the processes with ``start_time``/``finish_time`` set
    and the compressed execution sequence capped at ``max_seq_len`` entries.

    ``bulk_skip=False`` advances strictly one quantum at a time; results are
    identical, only slower. ``cap_idle=False`` lets the idle marker emitted
    when the CPU jumps to the next arrival bypass the cap and compression.
    """
    return RoundRobinSimulator(
        quantum,
        max_seq_len,
        processes,
        bulk_skip=bulk_skip,
        cap_idle=cap_idle,
    ).run()
