"""Tests for the command-line entry point."""

import json
import sys

import pytest

import main


def test_headless_run_exports_results(tmp_path):
    out = tmp_path / "results.json"
    results = main.run_headless(2, seed=3, fight_logging=False, export_results=str(out))
    assert [r.fight_number for r in results] == [1, 2]
    exported = json.loads(out.read_text())
    assert exported[0]["fight_number"] == 1
    assert exported[0]["winner"] in (0, 1, 2)


def test_headless_run_updates_roster_file(tmp_path):
    roster_file = tmp_path / "roster.json"
    main.run_headless(1, seed=4, roster_file=str(roster_file), fight_logging=False)
    bugs = json.loads(roster_file.read_text())["bugs"]
    assert sum(bug["wins"] + bug["losses"] for bug in bugs) in (0, 2)


def test_rejects_zero_fights(monkeypatch):
    monkeypatch.setattr(sys, "argv", ["main.py", "--headless", "--fights", "0"])
    with pytest.raises(SystemExit):
        main.main()
