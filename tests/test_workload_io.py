from pathlib import Path

import pytest

from rr_scheduler.models import Process
from rr_scheduler.workload_io import load_workload, parse_text, validate_workload


def test_load_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":0,"arrival_time":0,"burst":3},'
                 '{"pid":1,"arrival_time":1,"burst_time":2}]')
    procs = load_workload(p)
    assert isinstance(procs[0], Process)
    assert procs[1].burst == 2
    assert procs[1].arrival_time == 1
    assert procs[0].start_time is None


def test_load_csv(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst\n0,0,3\n1,4,2\n")
    procs = load_workload(p)
    assert [(x.pid, x.arrival_time, x.burst) for x in procs] == [(0, 0, 3), (1, 4, 2)]


def test_load_text_assigns_ids_in_line_order(tmp_path: Path):
    p = tmp_path / "w.txt"
    p.write_text("# arrival burst\n0 5\n\n2 3  # late\n2 1\n")
    procs = load_workload(p)
    assert [(x.pid, x.arrival_time, x.burst) for x in procs] == [(0, 0, 5), (1, 2, 3), (2, 2, 1)]


def test_parse_text_rejects_bad_lines():
    with pytest.raises(ValueError, match="Line 2"):
        parse_text("0 1\n3\n")
    with pytest.raises(ValueError, match="non-integer"):
        parse_text("0 x\n")


def test_invalid_json_entry(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":0,"arrival_time":0}]')
    with pytest.raises(ValueError, match="Invalid process entry"):
        load_workload(p)


def test_json_must_be_a_list(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('{"pid":0}')
    with pytest.raises(ValueError):
        load_workload(p)


@pytest.mark.parametrize(
    "procs,message",
    [
        ([], "no processes"),
        ([Process(0, 0, 1), Process(0, 1, 1)], "Duplicate"),
        ([Process(0, -1, 1)], "arrival time must be"),
        ([Process(0, 0, 0)], "burst must be"),
        ([Process(0, 5, 1), Process(1, 2, 1)], "sorted"),
    ],
)
def test_validate_workload_rejects(procs, message):
    with pytest.raises(ValueError, match=message):
        validate_workload(procs)


def test_validate_workload_accepts_sorted():
    validate_workload([Process(0, 0, 1), Process(1, 0, 2), Process(2, 9, 1)])
