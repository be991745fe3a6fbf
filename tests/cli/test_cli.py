import json
from pathlib import Path

import pytest

from splfl import cli


def test_no_arguments_prints_help(capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main([])
    assert exc_info.value.code == 0
    assert "usage: splfl" in capsys.readouterr().out


def test_models_lists_catalog(capsys) -> None:
    cli.main(["models"])
    out = capsys.readouterr().out
    assert "Feature-interaction models:" in out
    assert "M19" in out
    assert "F+O+A+N+ON+AN" in out


def test_inspect_prints_header_and_systems(capsys) -> None:
    cli.main(["inspect", "-F", "2", "-M", "8", "--systems"])
    out = capsys.readouterr().out
    assert out.startswith("M8\tselected model\n6\tT\t")
    assert "S4\tf1\tf1 * f2\tf1 + f2\tf2\t" in out


def test_inspect_invalid_model_exits(capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["inspect", "-F", "2", "-M", "20"])
    assert exc_info.value.code == 1
    assert "❌ ERROR: Failed to inspect product line: ValueError" in (
        capsys.readouterr().out
    )


def test_run_writes_default_text_report(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    cli.main(["run", "-F", "2", "-M", "8"])
    report = tmp_path / "fl_2_M8_closed_form.txt"
    assert report.exists()
    assert "✅ Results written to: fl_2_M8_closed_form.txt" in capsys.readouterr().out

    header, results = report.read_text().split("\n\n")
    assert header.startswith("M8\tselected model")
    assert results.splitlines()[0] == "E3\t!f2\t( S1 & S2 ) \\ ( S3 | S4 )"


def test_run_enumeration_includes_systems(tmp_path: Path) -> None:
    out = tmp_path / "report.txt"
    cli.main(["run", "-F", "2", "-M", "8", "-s", "enumeration", "-r", str(out)])
    sections = out.read_text().split("\n\n")
    assert sections[1].startswith("S1\t!f1\t!f2\t")
    assert sections[2].splitlines()[2] == "f1\t( S2 & S4 ) \\ ( S1 | S3 )"


def test_run_json_to_output_dir(tmp_path: Path) -> None:
    cli.main(
        ["run", "-F", "2", "-M", "8", "-s", "exhaustive", "-f", "json", "-o", str(tmp_path)]
    )
    doc = json.loads((tmp_path / "fl_2_M8_exhaustive.json").read_text())
    run = doc["runs"]["fl_2_M8_exhaustive"]["data"]
    assert run["counts"]["D"] == 16
    assert len(run["systems"]) == 4
    isolations = run["results"]["exhaustive"]["isolations"]
    assert [i["difference_id"] for i in isolations] == [3, 5, 8, 10, 12, 14]


def test_run_csv_stdout_without_file(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    cli.main(["run", "-F", "2", "-M", "8", "-f", "csv", "--stdout", "--no-results"])
    out = capsys.readouterr().out
    lines = out.splitlines()
    assert lines[0] == "difference_id,feature,kind,intersections,unions,bitstring"
    assert lines[1] == "3,!f2,not,S1 S2,S3 S4,0011"
    assert list(tmp_path.iterdir()) == []


def test_run_rejects_unknown_strategy(capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["run", "-F", "2", "-M", "8", "-s", "guess", "--no-results"])
    assert exc_info.value.code == 1
    assert "❌ ERROR: Failed to run feature location" in capsys.readouterr().out


def test_run_exhaustive_feature_ceiling(capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["run", "-F", "7", "-M", "1", "-s", "exhaustive", "--no-results"])
    assert exc_info.value.code == 1
    assert "Exhaustive search supports at most 6" in capsys.readouterr().out


def test_verify_reports_agreement(capsys) -> None:
    cli.main(
        [
            "verify",
            "-F",
            "2",
            "-M",
            "19",
            "--strategies",
            "enumeration",
            "exhaustive",
            "closed_form",
        ]
    )
    out = capsys.readouterr().out
    assert "✅ Strategies agree (enumeration, exhaustive, closed_form)" in out
    assert "F=2, M19" in out


def test_analyze_writes_results(tmp_path: Path, monkeypatch, capsys) -> None:
    analysis = tmp_path / "study.yaml"
    analysis.write_text(
        "runs:\n  - {features: 2, model: 8, strategies: [enumeration], verify: true}\n"
    )
    monkeypatch.chdir(tmp_path)
    cli.main(["analyze", str(analysis)])
    out = capsys.readouterr().out
    assert "✅ Analysis completed (1 runs)" in out
    doc = json.loads((tmp_path / "study.results.json").read_text())
    assert doc["analysis"]["F2_M8"]["verified"] is True
    assert doc["runs"]["F2_M8"]["data"]["verification"]["agree"] is True


def test_analyze_stdout_no_results(tmp_path: Path, capsys) -> None:
    analysis = tmp_path / "study.yaml"
    analysis.write_text("runs:\n  - {name: tiny, features: 1, model: 5}\n")
    cli.main(["analyze", str(analysis), "--stdout", "--no-results"])
    out = capsys.readouterr().out
    payload = json.loads(out[out.index("{") :])
    assert payload["runs"]["tiny"]["data"]["counts"]["T"] == 2
    assert not (tmp_path / "study.results.json").exists()


def test_analyze_missing_file(tmp_path: Path, capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["analyze", str(tmp_path / "missing.yaml")])
    assert exc_info.value.code == 1
    assert "❌ ERROR: Analysis file not found" in capsys.readouterr().out


def test_analyze_invalid_file(tmp_path: Path, capsys) -> None:
    analysis = tmp_path / "bad.yaml"
    analysis.write_text("runs:\n  - {features: 2, model: 42}\n")
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["analyze", str(analysis)])
    assert exc_info.value.code == 1
    assert "❌ ERROR: Failed to run analysis: ValidationError" in (
        capsys.readouterr().out
    )


def test_bitstrings_writes_category_files(tmp_path: Path, capsys) -> None:
    cli.main(["bitstrings", "-F", "2", "-M", "8", "-o", str(tmp_path / "bits")])
    names = sorted(p.name for p in (tmp_path / "bits").iterdir())
    assert names == ["fl_2_A.csv", "fl_2_F.csv", "fl_2_N.csv", "fl_2_O.csv"]
    assert (tmp_path / "bits" / "fl_2_A.csv").read_text() == "f1 * f2\t1000\n"
    assert capsys.readouterr().out.count("✅ Bitstrings written to:") == 4


def test_quiet_flag_sets_warning_level(tmp_path: Path, monkeypatch) -> None:
    import logging

    monkeypatch.chdir(tmp_path)
    cli.main(["--quiet", "run", "-F", "1", "-M", "1", "--no-results"])
    assert logging.getLogger("splfl").level == logging.WARNING
    cli.main(["run", "-F", "1", "-M", "1", "--no-results"])
    assert logging.getLogger("splfl").level == logging.INFO
