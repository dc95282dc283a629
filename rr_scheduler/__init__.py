"""
Round-Robin CPU scheduling simulator.

Simulates fixed-quantum Round-Robin over processes with known arrival times
and bursts, reporting each process's start/finish time and the compressed
execution sequence.
"""

from .models import IDLE, Process, SimulationResult, Slot
from .simulator import simulate_rr

__all__ = ["IDLE", "Process", "SimulationResult", "Slot", "simulate_rr", "cli"]
