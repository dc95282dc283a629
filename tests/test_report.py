from rich.console import Console

from rr_scheduler.models import Process
from rr_scheduler.report import build_process_table, build_sequence_panel, format_sequence
from rr_scheduler.simulator import simulate_rr


def _result():
    procs = [Process(0, arrival_time=1, burst=3), Process(1, arrival_time=2, burst=2)]
    return simulate_rr(2, 10, procs)


def _render(renderable) -> str:
    console = Console(record=True, width=100)
    console.print(renderable)
    return console.export_text()


def test_format_sequence():
    assert format_sequence(_result()) == "seq = [-1, 0, 1, 0]"


def test_process_table_has_one_row_per_process():
    table = build_process_table(_result())
    assert table.row_count == 2
    text = _render(table)
    assert "Finish" in text
    assert "6" in text


def test_sequence_panel_shows_idle():
    text = _render(build_sequence_panel(_result()))
    assert "idle" in text
    assert "quantum 2" in text


def test_empty_sequence_panel():
    result = simulate_rr(2, 0, [Process(0, 0, 1)])
    assert "empty" in _render(build_sequence_panel(result))
