"""Tests for the command line driver."""

import json

import pytest

from airportqueue.__main__ import main

SCENARIO_A = "1, 0\n0,5,0\n1,2,0\n3,0,1\n"


@pytest.fixture
def input_file(tmp_path):
    path = tmp_path / "passengers.txt"
    path.write_text(SCENARIO_A, encoding="utf-8")
    return path


def test_text_report(input_file, capsys):
    assert main([str(input_file)]) == 0
    out = capsys.readouterr().out
    assert "Number of people served: 2" in out
    assert "Average wait time for economy: 2.0000" in out
    assert "Average service time: 3.5000" in out


def test_json_report(input_file, capsys):
    assert main([str(input_file), "--json", "--sample-interval", "0.5"]) == 0
    report = json.loads(capsys.readouterr().out)
    assert report["served"] == {"economy": 2, "business": 0}
    assert report["average_wait"]["business"] is None
    assert report["servers"][0]["name"] == "economy-0"


def test_malformed_input_exits_with_2(tmp_path, capsys):
    path = tmp_path / "bad.txt"
    path.write_text("one,two\n", encoding="utf-8")
    assert main([str(path)]) == 2
    assert "error:" in capsys.readouterr().err


def test_missing_file_exits_with_2(tmp_path):
    assert main([str(tmp_path / "nope.txt")]) == 2


def test_plot_written(input_file, tmp_path, capsys):
    pytest.importorskip("matplotlib")
    plot_path = tmp_path / "plots" / "queues.png"
    assert main([str(input_file), "--plot", str(plot_path)]) == 0
    assert plot_path.exists()
