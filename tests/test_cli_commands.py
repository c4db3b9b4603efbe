from __future__ import annotations

import json
from pathlib import Path

import pytest
from pytest import CaptureFixture

from ahtvc.cli import main
from ahtvc.graphiceq import parse_graphic_eq


def _write_eq(path: Path, content: str) -> Path:
    path.write_text(content, encoding="utf-8")
    return path


def _prepare_input(tmp_path: Path) -> Path:
    return _write_eq(
        tmp_path / "Device X Graphic Filters Harman.txt",
        "# AutoEQ\nGraphicEQ: 20 1.0; 1000 2.0; 9000 -1.0; 10000 0.5; 12000 0.0; 15000 1.5; 18000 -2.0",
    )


def test_convert_cli_writes_outputs(capsys: CaptureFixture[str], tmp_path: Path) -> None:
    input_path = _prepare_input(tmp_path)
    output_dir = tmp_path / "results"
    json_path = tmp_path / "report.json"

    main(
        [
            "convert",
            "--input",
            str(input_path),
            "--output-dir",
            str(output_dir),
            "--json",
            str(json_path),
            "--print",
        ]
    )

    primary = output_dir / "Device X_AHTVC-By_MiFun.txt"
    secondary = output_dir / "Device X_AHTVCLr2-By_MiFun.txt"
    assert primary.exists()
    assert secondary.exists()

    primary_curve = parse_graphic_eq(primary.read_text(encoding="utf-8"))
    assert max(primary_curve.values()) <= 0.0

    captured = capsys.readouterr().out
    assert "Device: Device X" in captured
    assert primary.read_text(encoding="utf-8") in captured

    report = json.loads(json_path.read_text(encoding="utf-8"))
    assert report["device"] == "Device X"
    assert report["input_points"] == 7
    assert report["secondary"]["file_name"] == secondary.name


def test_convert_cli_defaults_to_input_directory(tmp_path: Path) -> None:
    input_path = _prepare_input(tmp_path)

    main(["-q", "convert", "--input", str(input_path), "--device-name", "Custom", "--window", "3"])

    assert (tmp_path / "Custom_AHTVC-By_MiFun.txt").exists()
    assert (tmp_path / "Custom_AHTVCLr2-By_MiFun.txt").exists()


def test_convert_cli_with_custom_correction(tmp_path: Path) -> None:
    input_path = _write_eq(tmp_path / "Device.txt", "GraphicEQ: 100 3.0; 1000 3.0")
    correction = _write_eq(tmp_path / "flat.txt", "GraphicEQ: 100 0.0")
    output_dir = tmp_path / "out"

    main(
        [
            "convert",
            "--input",
            str(input_path),
            "--correction",
            str(correction),
            "--output-dir",
            str(output_dir),
        ]
    )

    text = (output_dir / "Device_AHTVC-By_MiFun.txt").read_text(encoding="utf-8")
    assert text == "GraphicEQ: 100 0.0; 1000 0.0"


def test_convert_cli_reports_parse_error(tmp_path: Path) -> None:
    input_path = _write_eq(tmp_path / "broken.txt", "Preamp: -6 dB")

    with pytest.raises(SystemExit) as excinfo:
        main(["convert", "--input", str(input_path)])

    assert excinfo.value.code == 2


def test_convert_cli_rejects_even_window(tmp_path: Path) -> None:
    input_path = _prepare_input(tmp_path)
    with pytest.raises(SystemExit):
        main(["convert", "--input", str(input_path), "--window", "4"])


def test_inspect_cli_prints_summary(capsys: CaptureFixture[str], tmp_path: Path) -> None:
    input_path = _prepare_input(tmp_path)

    main(["inspect", "--input", str(input_path)])

    captured = capsys.readouterr().out
    assert "Points: 7" in captured
    assert "Frequency range: 20-18000 Hz" in captured
    assert "Gain range: -2.0..2.0 dB" in captured


def test_no_command_prints_help(capsys: CaptureFixture[str]) -> None:
    main([])
    assert "usage: ahtvc" in capsys.readouterr().out


def test_convert_cli_reports_undecodable_input(tmp_path: Path, capsys: CaptureFixture[str]) -> None:
    input_path = tmp_path / "Device.txt"
    input_path.write_bytes("GraphicEQ: 100 1.0; 200 2.0 # ü".encode("latin-1"))

    with pytest.raises(SystemExit) as excinfo:
        main(["convert", "--input", str(input_path)])

    assert excinfo.value.code == 2
    assert "UTF-8" in capsys.readouterr().err
