from __future__ import annotations

from typing import Iterable, List

from .models import Slot


class ExecutionTrace:
    """
    Run-length compressed execution sequence, capped at ``max_len`` entries.

    ``append`` drops a slot equal to the last recorded one and anything past
    the cap. ``force_append`` bypasses both checks; it only exists for the
    uncapped bootstrap idle policy.
    """

    def __init__(self, max_len: int) -> None:
        self.max_len = max_len
        self._slots: List[Slot] = []

    def __len__(self) -> int:
        return len(self._slots)

    @property
    def full(self) -> bool:
        return len(self._slots) >= self.max_len

    @property
    def last(self) -> Slot | None:
        return self._slots[-1] if self._slots else None

    def append(self, slot: Slot) -> None:
        if self.full or self.last == slot:
            return
        self._slots.append(slot)

    def force_append(self, slot: Slot) -> None:
        self._slots.append(slot)

    def append_rounds(self, cycle: Iterable[Slot], rounds: int) -> None:
        """
        Record ``cycle`` repeated ``rounds`` times.

        Only as many rounds as can still change the trace are replayed: one
        when the cycle has a single entry, otherwise at most one per free slot.
        """
        cycle = list(cycle)
        if not cycle or rounds <= 0:
            return
        replay = 1 if len(cycle) == 1 else min(rounds, self.max_len - len(self._slots))
        for _ in range(replay):
            if self.full:
                break
            for slot in cycle:
                self.append(slot)

    def slots(self) -> List[Slot]:
        return list(self._slots)
