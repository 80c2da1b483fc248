# Copyright (c) Syntropy Systems
"""Tests for simscope CLI commands."""

import json

from factories import make_ability, make_record
from typer.testing import CliRunner

from simscope.cli.main import app

runner = CliRunner()


def write_summary(path, records):
    path.write_text(json.dumps([r.to_dict() for r in records]))
    return path


class TestInitCommand:
    """Tests for simscope init command."""

    def test_init_creates_directory(self, temp_dir, monkeypatch):
        """Test that init creates .simscope directory."""
        monkeypatch.chdir(temp_dir)

        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0
        assert (temp_dir / ".simscope").exists()
        assert (temp_dir / ".simscope" / "config.yaml").exists()
        assert (temp_dir / ".simscope" / "golden").is_dir()

    def test_init_already_initialized(self, simscope_project):
        """Test init when already initialized."""
        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0
        assert "Already initialized" in result.stdout


class TestAnalyzeCommand:
    """Tests for simscope analyze command."""

    def test_analyze_summary(self, temp_dir):
        """Test analysis of a summary file."""
        path = write_summary(
            temp_dir / "summary.json",
            [
                make_record(
                    abilities=[
                        make_ability("Fracture", fraction=0.3, executes=100),
                        make_ability("Soul Cleave", fraction=0.2, executes=50),
                    ],
                    combatLength=300,
                )
            ],
        )

        result = runner.invoke(app, ["analyze", str(path)])

        assert result.exit_code == 0
        assert "Analysis: Patchwerk 1T" in result.stdout
        assert "GCD usage" in result.stdout
        assert "Low GCD efficiency" in result.stdout
        assert "DPGCD ranking" in result.stdout

    def test_analyze_with_spec(self, temp_dir, vengeance_spec):
        """Test a spec file enables buff analysis."""
        summary = write_summary(
            temp_dir / "summary.json",
            [
                make_record(
                    abilities=[make_ability("Fracture", executes=150)],
                    buffs=[{"name": "Demon Spikes", "uptime": 42.0}],
                    combatLength=300,
                )
            ],
        )
        spec = temp_dir / "vengeance.json"
        # JSON is valid YAML
        spec.write_text(vengeance_spec.to_json())

        result = runner.invoke(app, ["analyze", str(summary), "--spec", str(spec)])

        assert result.exit_code == 0
        assert "Key buff uptimes" in result.stdout
        assert "Demon Spikes uptime is 42.0%" in result.stdout

    def test_analyze_json(self, temp_dir):
        """Test JSON output uses wire names."""
        path = write_summary(temp_dir / "summary.json", [make_record(combatLength=300)])

        result = runner.invoke(app, ["analyze", str(path), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data[0]["gcdUsage"]["estimatedGCDs"] == 200
        assert data[0]["scenarioName"] == "Patchwerk 1T"

    def test_analyze_raw_sim_output(self, temp_dir):
        """Test raw simulator output is decoded with the given scenario."""
        path = temp_dir / "raw.json"
        path.write_text(
            json.dumps(
                {
                    "sim": {
                        "players": [
                            {
                                "name": "vengeance",
                                "collected_data": {"dps": {"mean": 40000.0}},
                                "stats": [],
                                "buffs": [],
                            }
                        ]
                    }
                }
            )
        )

        result = runner.invoke(app, ["analyze", str(path), "--scenario", "small_aoe"])

        assert result.exit_code == 0
        assert "Analysis: Patchwerk 5T" in result.stdout

    def test_analyze_malformed(self, temp_dir):
        """Test a malformed record fails with the missing field."""
        path = temp_dir / "summary.json"
        path.write_text(json.dumps([{"scenario": "st", "scenarioName": "x"}]))

        result = runner.invoke(app, ["analyze", str(path)])

        assert result.exit_code == 1
        assert "Malformed result" in result.stdout
        assert "'dps' is missing" in result.stdout

    def test_analyze_raw_out_of_range(self, temp_dir):
        """Test an invalid raw simulator stat is reported, not raised."""
        path = temp_dir / "raw.json"
        path.write_text(
            json.dumps(
                {
                    "sim": {
                        "players": [
                            {
                                "collected_data": {"dps": {"mean": 40000.0}},
                                "buffs": [{"name": "demon_spikes", "uptime": 250.0}],
                            }
                        ]
                    }
                }
            )
        )

        result = runner.invoke(app, ["analyze", str(path)])

        assert result.exit_code == 1
        assert "buffs.0.uptime" in result.stdout

    def test_analyze_invalid_utf8(self, temp_dir):
        """Test an undecodable summary file is reported."""
        path = temp_dir / "summary.json"
        path.write_bytes(b"\xff\xfe\x00[")

        result = runner.invoke(app, ["analyze", str(path)])

        assert result.exit_code == 1
        assert "Malformed result" in result.stdout

    def test_analyze_missing_file(self, temp_dir):
        result = runner.invoke(app, ["analyze", str(temp_dir / "nope.json")])

        assert result.exit_code == 1
        assert "File not found" in result.stdout

    def test_analyze_bad_spec(self, temp_dir):
        """Test an unreadable spec file is reported."""
        path = write_summary(temp_dir / "summary.json", [make_record()])

        result = runner.invoke(
            app, ["analyze", str(path), "--spec", str(temp_dir / "missing.yaml")]
        )

        assert result.exit_code == 1
        assert "Cannot read spec file" in result.stdout

    def test_verbose_flag(self, temp_dir):
        path = write_summary(temp_dir / "summary.json", [make_record()])

        result = runner.invoke(app, ["--verbose", "analyze", str(path)])

        assert result.exit_code == 0


class TestDiffCommand:
    """Tests for simscope diff command."""

    def test_diff(self, temp_dir):
        """Test a two-build differential."""
        path = write_summary(
            temp_dir / "roster.json",
            [
                make_record(
                    abilities=[
                        make_ability("Fracture", fraction=0.20),
                        make_ability("Soul Cleave", fraction=0.10),
                        make_ability("Felblade", fraction=0.03),
                    ],
                    player="aldrachi",
                ),
                make_record(
                    abilities=[
                        make_ability("Fracture", fraction=0.24),
                        make_ability("Soul Cleave", fraction=0.22),
                    ],
                    player="annihilator",
                ),
            ],
        )

        result = runner.invoke(app, ["diff", str(path)])

        assert result.exit_code == 0
        assert "Soul Cleave" in result.stdout
        assert "Build-specific abilities" in result.stdout
        assert "Felblade: aldrachi" in result.stdout
        assert "1 universal abilities" in result.stdout

    def test_diff_json(self, temp_dir):
        path = write_summary(
            temp_dir / "roster.json",
            [
                make_record(abilities=[make_ability("Fracture", fraction=0.2)]),
                make_record(abilities=[make_ability("Fracture", fraction=0.21)]),
            ],
        )

        result = runner.invoke(app, ["diff", str(path), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["universal"][0]["ability"] == "Fracture"

    def test_diff_single_build(self, temp_dir):
        """Test one build is not enough to compare."""
        path = write_summary(temp_dir / "roster.json", [make_record()])

        result = runner.invoke(app, ["diff", str(path)])

        assert result.exit_code == 1
        assert "Need at least 2 builds" in result.stdout


class TestProfilesetShowCommand:
    """Tests for simscope profileset show command."""

    def test_show(self, raw_profileset_file):
        """Test variants are ranked against the baseline."""
        result = runner.invoke(app, ["profileset", "show", str(raw_profileset_file)])

        assert result.exit_code == 0
        assert "baseline_build" in result.stdout
        assert "talent_b" in result.stdout
        assert "+3.00%" in result.stdout
        assert "-2.00%" in result.stdout

    def test_show_json(self, raw_profileset_file):
        result = runner.invoke(
            app, ["profileset", "show", str(raw_profileset_file), "--json"]
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [v["name"] for v in data["variants"]] == ["talent_b", "talent_a"]

    def test_show_malformed(self, temp_dir):
        path = temp_dir / "bad.json"
        path.write_text(json.dumps({"sim": {"players": [{"name": "x"}]}}))

        result = runner.invoke(app, ["profileset", "show", str(path)])

        assert result.exit_code == 1
        assert "collected_data" in result.stdout


class TestProfilesetGoldenCommands:
    """Tests for simscope profileset save-golden and check commands."""

    def test_save_golden(self, simscope_project, raw_profileset_file):
        """Test saving a golden baseline."""
        result = runner.invoke(
            app, ["profileset", "save-golden", str(raw_profileset_file), "talents"]
        )

        assert result.exit_code == 0
        assert "Saved golden results" in result.stdout
        assert (simscope_project / ".simscope" / "golden" / "talents.json").exists()

        result = runner.invoke(
            app, ["profileset", "save-golden", str(raw_profileset_file), "talents"]
        )

        assert result.exit_code == 0
        assert "Replaced golden results" in result.stdout

    def test_save_golden_outside_project(self, temp_dir, raw_profileset_file, monkeypatch):
        """Test golden commands need a project."""
        monkeypatch.chdir(temp_dir)

        result = runner.invoke(
            app, ["profileset", "save-golden", str(raw_profileset_file), "talents"]
        )

        assert result.exit_code == 1
        assert "simscope init" in result.stdout

    def test_check_without_golden_saves(self, simscope_project, raw_profileset_file):
        """Test the first check seeds the golden baseline."""
        result = runner.invoke(
            app, ["profileset", "check", str(raw_profileset_file), "talents"]
        )

        assert result.exit_code == 0
        assert "No golden results for 'talents'." in result.stdout
        assert (simscope_project / ".simscope" / "golden" / "talents.json").exists()

    def test_check_unchanged(self, simscope_project, raw_profileset_file):
        """Test checking the same results passes."""
        runner.invoke(app, ["profileset", "save-golden", str(raw_profileset_file), "talents"])

        result = runner.invoke(
            app, ["profileset", "check", str(raw_profileset_file), "talents"]
        )

        assert result.exit_code == 0
        assert "No regressions detected." in result.stdout

    def test_check_regression(
        self, simscope_project, raw_profileset_file, raw_profileset_output
    ):
        """Test a DPS drop past the error threshold fails."""
        runner.invoke(app, ["profileset", "save-golden", str(raw_profileset_file), "talents"])

        results = raw_profileset_output["sim"]["profilesets"]["results"]
        results[0]["mean"] = 90000.0
        results[1]["mean"] = 101500.0
        raw_profileset_file.write_text(json.dumps(raw_profileset_output))

        result = runner.invoke(
            app, ["profileset", "check", str(raw_profileset_file), "talents"]
        )

        assert result.exit_code == 1
        assert "Regressions detected:" in result.stdout
        assert "talent_a: 98000 -> 90000" in result.stdout
        assert "Warnings:" in result.stdout
        assert "talent_b: 103000 -> 101500" in result.stdout

    def test_check_warning_only_passes(
        self, simscope_project, raw_profileset_file, raw_profileset_output
    ):
        """Test warnings do not fail the check."""
        runner.invoke(app, ["profileset", "save-golden", str(raw_profileset_file), "talents"])

        raw_profileset_output["sim"]["profilesets"]["results"][0]["mean"] = 96500.0
        raw_profileset_file.write_text(json.dumps(raw_profileset_output))

        result = runner.invoke(
            app, ["profileset", "check", str(raw_profileset_file), "talents"]
        )

        assert result.exit_code == 0
        assert "Warnings:" in result.stdout

    def test_check_threshold_options(
        self, simscope_project, raw_profileset_file, raw_profileset_output
    ):
        """Test --error tightens the failure threshold."""
        runner.invoke(app, ["profileset", "save-golden", str(raw_profileset_file), "talents"])

        raw_profileset_output["sim"]["profilesets"]["results"][0]["mean"] = 96500.0
        raw_profileset_file.write_text(json.dumps(raw_profileset_output))

        result = runner.invoke(
            app,
            ["profileset", "check", str(raw_profileset_file), "talents", "--error", "1"],
        )

        assert result.exit_code == 1

    def test_check_invalid_golden(self, simscope_project, raw_profileset_file):
        """Test a corrupt golden file is reported."""
        (simscope_project / ".simscope" / "golden" / "talents.json").write_text("{}")

        result = runner.invoke(
            app, ["profileset", "check", str(raw_profileset_file), "talents"]
        )

        assert result.exit_code == 1
        assert "are invalid" in result.stdout
