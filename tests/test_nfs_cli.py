"""
Tests for the nfs-score command line.
"""

import json
import shutil
from pathlib import Path

import pytest

from database import dispose_engine
from nfs_scoring.cli import create_parser, main


SAMPLE_BATCH = Path(__file__).resolve().parent.parent / "conf" / "sample_batch.json"


@pytest.fixture
def batch_file(tmp_path):
    path = tmp_path / "batch.json"
    shutil.copy(SAMPLE_BATCH, path)
    return path


@pytest.fixture(autouse=True)
def reset_database():
    yield
    dispose_engine()


# =============================================================
# TEST: Parser
# =============================================================

class TestParser:

    def test_score_defaults(self):
        """Score command defaults to JSON output without persistence."""
        args = create_parser().parse_args(["score", "batch.json"])

        assert args.command == "score"
        assert args.format == "json"
        assert args.persist is False
        assert args.log_level == "WARNING"

    def test_command_is_required(self):
        """A subcommand must be given."""
        with pytest.raises(SystemExit):
            create_parser().parse_args([])


# =============================================================
# TEST: score
# =============================================================

class TestScoreCommand:

    def test_json_output(self, batch_file, tmp_path):
        """Score command writes one JSON result per item."""
        output = tmp_path / "out.json"

        assert main(["score", str(batch_file), "--output", str(output)]) == 0

        results = json.loads(output.read_text(encoding="utf-8"))
        assert len(results) == 2
        assert results[0]["enterpriseId"] == "ent-001"
        assert results[0]["riskLevel"] == "MEDIUM"
        assert results[0]["nfsGrade"] == "BBB"
        assert results[0]["score"] == pytest.approx(66.0)
        assert results[1]["enterpriseId"] == "ent-002"

    def test_explain_adds_breakdown(self, batch_file, tmp_path):
        """--explain adds per-category component points."""
        output = tmp_path / "out.json"

        main(["score", str(batch_file), "--explain", "-o", str(output)])

        results = json.loads(output.read_text(encoding="utf-8"))
        breakdown = results[0]["breakdown"]
        assert breakdown["financial"]["components"]["profitability"] == 25.0
        assert breakdown["credit"]["neutral"] is True

    def test_text_output(self, batch_file, capsys):
        """Text format prints a summary per enterprise."""
        assert main(["score", str(batch_file), "--format", "text"]) == 0

        out = capsys.readouterr().out
        assert "NFS SCORE SUMMARY" in out
        assert "ent-002" in out

    def test_config_file(self, batch_file, tmp_path):
        """A YAML config changes the neutral score used."""
        config = tmp_path / "nfs.yaml"
        config.write_text("neutral_score: 40\n")
        output = tmp_path / "out.json"

        main(["score", str(batch_file), "--config", str(config), "-o", str(output)])

        results = json.loads(output.read_text(encoding="utf-8"))
        assert results[0]["factors"]["creditScore"] == 40.0
        assert results[0]["score"] == pytest.approx(60.0)

    def test_persist_with_unknown_enterprises(self, batch_file, tmp_path):
        """Unregistered enterprises become failed slots when persisting."""
        output = tmp_path / "out.json"

        code = main([
            "--database-url", "sqlite://",
            "score", str(batch_file), "--persist", "-o", str(output),
        ])

        assert code == 0
        results = json.loads(output.read_text(encoding="utf-8"))
        assert [r["riskLevel"] for r in results] == ["ERROR", "ERROR"]
        assert [r["nfsGrade"] for r in results] == ["E", "E"]

    def test_invalid_file(self, tmp_path, capsys):
        """An invalid payload exits with status 2."""
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([{"enterpriseId": "ent-1"}]), encoding="utf-8")

        assert main(["score", str(path)]) == 2
        assert "error:" in capsys.readouterr().err


# =============================================================
# TEST: Database Commands
# =============================================================

class TestDatabaseCommands:

    def test_init_db(self, capsys):
        """init-db creates the tables."""
        assert main(["--database-url", "sqlite://", "init-db"]) == 0
        assert "Database initialized" in capsys.readouterr().out

    def test_show_missing_calculation(self, capsys):
        """Showing an unknown calculation exits with status 2."""
        assert main(["--database-url", "sqlite://", "show", "missing-id"]) == 2
        assert "not found" in capsys.readouterr().err

    def test_history_empty(self, capsys):
        """History for an enterprise without records is empty."""
        assert main(["--database-url", "sqlite://", "history", "ent-001"]) == 0

        payload = json.loads(capsys.readouterr().out)
        assert payload["data"] == []
        assert payload["pagination"]["total"] == 0
