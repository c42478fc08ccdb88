"""Tests for the command line interface."""

import json

import pytest

from pay_statements.cli import PayStatementsCli
from pay_statements.services.types import Payee


@pytest.fixture
def cli(settings):
    return PayStatementsCli(settings)


@pytest.fixture
def statement_file(tmp_path, assembler, entries):
    record = assembler.assemble(None, Payee(name="Maria Lopez"), "pp-001", "Check", entries)
    path = tmp_path / "statement.json"
    path.write_text(json.dumps(record.to_dict()), encoding="utf-8")
    return path


class TestPeriodsCommand:
    """Test `periods`."""

    def test_marks_default_period(self, cli, capsys):
        assert cli.run(["periods", "--today", "2025-09-03"]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 9
        assert lines[1] == "* pp-002  09/01/2025 – 09/14/2025"
        assert lines[0].startswith("  pp-001")

    def test_available_json(self, cli, capsys):
        assert cli.run(["periods", "--available", "--today", "2025-09-20", "--format", "json"]) == 0

        periods = json.loads(capsys.readouterr().out)
        assert periods[0]["id"] == "pp-002"
        assert len(periods) == 8

    def test_rejects_bad_date(self, cli):
        with pytest.raises(SystemExit):
            cli.run(["periods", "--today", "09/03/2025"])


class TestDeriveCommand:
    """Test `derive`."""

    def test_text_output(self, cli, statement_file, capsys):
        assert cli.run(["derive", str(statement_file)]) == 0

        out = capsys.readouterr().out
        assert "Building A" in out
        assert "Office (hourly)" in out
        assert "2.5 hrs" in out
        assert out.rstrip().endswith("$390.00")

    def test_json_output(self, cli, tmp_path, capsys):
        path = tmp_path / "details.json"
        path.write_text(
            json.dumps(
                {
                    "payment_details": [
                        {"description": "Building A", "amount": "85", "notes": "type=perVisit&qty=4"},
                        {"description": "", "amount": "50"},
                    ]
                }
            ),
            encoding="utf-8",
        )

        assert cli.run(["derive", str(path), "--format", "json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["total"] == "340.00"
        assert len(data["summary"]) == 1

    def test_missing_file(self, cli, tmp_path, capsys):
        assert cli.run(["derive", str(tmp_path / "missing.json")]) == 1
        assert "cannot read input" in capsys.readouterr().err


class TestExportCommand:
    """Test `export`."""

    @pytest.mark.parametrize("preset", ["current", "bpv1"])
    def test_writes_pdf(self, cli, statement_file, tmp_path, preset):
        output = tmp_path / "out" / "statement.pdf"

        assert cli.run(["export", str(statement_file), "--output", str(output), "--preset", preset]) == 0

        assert output.read_bytes().startswith(b"%PDF")

    def test_invalid_json(self, cli, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{", encoding="utf-8")

        assert cli.run(["export", str(path), "--output", str(tmp_path / "x.pdf")]) == 1

    def test_unknown_period_is_rejected(self, cli, statement_file, tmp_path, capsys):
        data = json.loads(statement_file.read_text(encoding="utf-8"))
        data["payment"]["pay_period_id"] = "pp-999"
        statement_file.write_text(json.dumps(data), encoding="utf-8")
        output = tmp_path / "statement.pdf"

        assert cli.run(["export", str(statement_file), "--output", str(output)]) == 1

        assert "Unknown pay period" in capsys.readouterr().err
        assert not output.exists()


class TestServeCommand:
    """Test `serve`."""

    def test_runs_uvicorn(self, cli, monkeypatch):
        calls = []
        monkeypatch.setattr("uvicorn.run", lambda app, **kwargs: calls.append((app, kwargs)))

        assert cli.run(["serve", "--port", "9001"]) == 0

        app, kwargs = calls[0]
        assert app == "pay_statements.api.app:app"
        assert kwargs["port"] == 9001
        assert kwargs["host"] == "127.0.0.1"


def test_no_command_prints_help(cli, capsys):
    assert cli.run([]) == 1
    assert "usage" in capsys.readouterr().out
