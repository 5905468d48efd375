from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

from inspection_rollup.cli.__main__ import main as cli_main
from inspection_rollup.config.loader import load_config as real_load_config
from inspection_rollup.logging.init import reset_logging


def test_cli_report_default_filter(store_file: Path, capsys):
    reset_logging()
    code = cli_main(["--store", str(store_file)])
    out = capsys.readouterr().out
    assert code == 0
    assert "INFO documents=2 rows=2 dedupe=on" in out
    assert "INFO UNIT unit=Most actual=19.5 plan=12000" in out
    assert "SUMMARY units=1 rows=2" in out


def test_cli_month_filter(store_file: Path, capsys):
    reset_logging()
    code = cli_main(["--store", str(store_file), "--year", "2023", "--month", "6"])
    out = capsys.readouterr().out
    assert code == 0
    assert "UNIT unit=Most actual=5 plan=1000 pct=0.5 rows=1" in out


def test_cli_bad_month_is_fatal(store_file: Path, capsys):
    reset_logging()
    code = cli_main(["--store", str(store_file), "--month", "13"])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR arguments:" in out


def test_cli_row_without_status_is_fatal(store_file: Path, capsys):
    reset_logging()
    code = cli_main(["--store", str(store_file), "--row", "A:0"])
    assert code == 1
    assert "--row requires --set-status" in capsys.readouterr().out


def test_cli_missing_config_file(store_file: Path, temp_workdir: Path, capsys):
    reset_logging()
    code = cli_main(["--store", str(store_file), "--config", str(temp_workdir / "nope.yml")])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR config:" in out


def test_cli_config_from_environment(store_file: Path, write_config: Path, capsys, monkeypatch):
    reset_logging()
    monkeypatch.setenv("ROLLUP_CONFIG", str(write_config))
    with patch("inspection_rollup.cli.__main__.load_config", wraps=real_load_config) as spy:
        code = cli_main(["--store", str(store_file)])
    assert code == 0
    spy.assert_called_once_with(write_config)


def test_cli_broken_store_is_fatal(temp_workdir: Path, capsys):
    reset_logging()
    path = temp_workdir / "broken.json"
    path.write_text("{", encoding="utf-8")
    code = cli_main(["--store", str(path)])
    assert code == 1
    assert "ERROR store:" in capsys.readouterr().out


def test_cli_target_command_saves_store(store_file: Path, capsys):
    reset_logging()
    code = cli_main(["--store", str(store_file), "--target", "2024", "Teplice", "6000"])
    assert code == 0
    saved = json.loads(store_file.read_text(encoding="utf-8"))
    assert saved["targets"] == {"2023": {"Most": 12000.0}, "2024": {"Teplice": 6000.0}}
    assert "INFO store updated:" in capsys.readouterr().out


def test_cli_debug_mode(store_file: Path, capsys):
    reset_logging()
    code = cli_main(["--store", str(store_file), "--debug"])
    out = capsys.readouterr().out
    reset_logging()
    assert code == 0
    assert "DEBUG materialized documents=2" in out


def test_cli_category_filter(temp_workdir: Path, make_document, capsys):
    store_path = temp_workdir / "data" / "store.json"
    docs = [
        make_document("K", [["2023-05-01", "Hlavní", "10"]]).to_dict() | {"category": "Kamera"},
        make_document("C", [["2023-05-02", "Dlouhá", "4"]]).to_dict() | {"category": "Čištění"},
    ]
    store_path.write_text(json.dumps({"documents": docs, "targets": {}}), encoding="utf-8")

    reset_logging()
    code = cli_main(["--store", str(store_path), "--category", "Kamera"])
    out = capsys.readouterr().out
    assert code == 0
    assert "INFO documents=2 rows=1 dedupe=on" in out
    assert "SUMMARY units=1 rows=1 uploaded=0 remediation=0 length=10" in out
