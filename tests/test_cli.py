"""Tests for the command line interface."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from invoicefinder.cli import _setup_logging, app
from invoicefinder.errors import ExtractionError


runner = CliRunner()


class TestSetupLogging:
    """Tests for _setup_logging helper."""

    def test_setup_logging_verbose(self) -> None:
        """Verbose mode sets DEBUG level."""
        with patch("invoicefinder.cli.logging.basicConfig") as mock_config:
            _setup_logging(verbose=True)
            mock_config.assert_called_once()
            assert mock_config.call_args[1]["level"] == logging.DEBUG

    def test_setup_logging_normal(self) -> None:
        """Normal mode sets INFO level."""
        with patch("invoicefinder.cli.logging.basicConfig") as mock_config:
            _setup_logging(verbose=False)
            mock_config.assert_called_once()
            assert mock_config.call_args[1]["level"] == logging.INFO


@pytest.fixture
def workspace(tmp_path: Path) -> dict:
    root = tmp_path / "root"
    (root / "sub").mkdir(parents=True)
    (root / "inv001-scan.pdf").write_bytes(b"%PDF-1.4 a")
    (root / "sub" / "b.pdf").write_bytes(b"%PDF-1.4 b")
    (root / "c.pdf").write_bytes(b"%PDF-1.4 c")
    csv_file = tmp_path / "invoices.csv"
    csv_file.write_text("Customer,Invoice #\nAcme,INV001\nGlobex,inv002\nInitech,INV003\nCafe,café\n")
    return {
        "csv": csv_file,
        "root": root,
        "target": tmp_path / "out" / "copies",
        "report": tmp_path / "out" / "unmatched.txt",
    }


def _fake_extract(path: Path) -> List[str]:
    if path.name == "c.pdf":
        raise ExtractionError(path, "corrupt")
    if path.name == "b.pdf":
        return ["see inv002 attached"]
    return ["nothing here"]


def _args(ws: dict, workers: str = "2") -> List[str]:
    return [str(ws["csv"]), str(ws["root"]), str(ws["target"]), str(ws["report"]), workers]


class TestRunCommand:
    """Tests for the main command."""

    @patch("invoicefinder.index.scanner.extract_lines", side_effect=_fake_extract)
    def test_full_run(self, _mock_extract, workspace: dict) -> None:
        """Copies matches and reports unmatched tokens."""
        result = runner.invoke(app, _args(workspace))

        assert result.exit_code == 0, result.output
        copies = sorted(p.name for p in workspace["target"].iterdir())
        assert copies == ["inv001_inv001-scan.pdf", "inv002_b.pdf"]
        assert workspace["report"].read_text() == "inv003\n"
        assert "Copied: 2" in result.stdout

    @patch("invoicefinder.index.scanner.extract_lines", side_effect=_fake_extract)
    def test_rerun_is_idempotent(self, _mock_extract, workspace: dict) -> None:
        runner.invoke(app, _args(workspace))
        result = runner.invoke(app, _args(workspace))

        assert result.exit_code == 0
        assert "Copied: 0" in result.stdout
        assert len(list(workspace["target"].iterdir())) == 2

    @patch("invoicefinder.index.scanner.extract_lines", side_effect=_fake_extract)
    def test_upper_token_case(self, _mock_extract, workspace: dict) -> None:
        result = runner.invoke(app, _args(workspace) + ["--token-case", "upper"])

        assert result.exit_code == 0, result.output
        copies = sorted(p.name for p in workspace["target"].iterdir())
        assert copies == ["INV001_inv001-scan.pdf", "INV002_b.pdf"]

    def test_wrong_argument_count(self, workspace: dict) -> None:
        """Too few arguments prints usage and does nothing."""
        result = runner.invoke(app, _args(workspace)[:4])

        assert result.exit_code == 2
        assert not workspace["target"].exists()
        assert not workspace["report"].exists()

    def test_too_many_arguments(self, workspace: dict) -> None:
        result = runner.invoke(app, _args(workspace) + ["extra"])

        assert result.exit_code == 2
        assert not workspace["report"].exists()

    @pytest.mark.parametrize("workers", ["four", "0"])
    def test_invalid_worker_count(self, workers: str, workspace: dict) -> None:
        result = runner.invoke(app, _args(workspace, workers))

        assert result.exit_code == 2
        assert not workspace["target"].exists()

    def test_missing_column_is_fatal(self, workspace: dict) -> None:
        """A CSV without the search column aborts before any output."""
        workspace["csv"].write_text("Customer,Amount\nAcme,1\n")

        result = runner.invoke(app, _args(workspace))

        assert result.exit_code == 1
        assert not workspace["target"].exists()
        assert not workspace["report"].exists()

    def test_missing_csv_is_fatal(self, workspace: dict) -> None:
        workspace["csv"].unlink()

        result = runner.invoke(app, _args(workspace))

        assert result.exit_code == 1
        assert not workspace["report"].exists()

    def test_missing_root_dir(self, workspace: dict, tmp_path: Path) -> None:
        args = _args(workspace)
        args[1] = str(tmp_path / "nope")

        result = runner.invoke(app, args)

        assert result.exit_code == 2
        assert not workspace["target"].exists()

    @patch("invoicefinder.index.scanner.extract_lines", side_effect=_fake_extract)
    def test_custom_column(self, _mock_extract, workspace: dict) -> None:
        workspace["csv"].write_text("Ref\nINV003\n")

        result = runner.invoke(app, _args(workspace) + ["--column", "Ref"])

        assert result.exit_code == 0, result.output
        assert workspace["report"].read_text() == "inv003\n"

    @patch("invoicefinder.index.scanner.extract_lines", side_effect=_fake_extract)
    def test_target_dir_is_a_file(self, _mock_extract, workspace: dict) -> None:
        """A target path that cannot be created ends with an error, not a traceback."""
        workspace["target"].parent.mkdir(parents=True)
        workspace["target"].write_text("not a directory")

        result = runner.invoke(app, _args(workspace))

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Error:" in result.stdout
        assert not workspace["report"].exists()

    @patch("invoicefinder.index.scanner.extract_lines", side_effect=_fake_extract)
    def test_report_dir_unwritable(self, _mock_extract, workspace: dict, tmp_path: Path) -> None:
        """A report path under a regular file is a fatal error with exit 1."""
        blocker = tmp_path / "blocker"
        blocker.write_text("file")
        args = _args(workspace)
        args[3] = str(blocker / "unmatched.txt")

        result = runner.invoke(app, args)

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Error:" in result.stdout


class TestRealPdfRun:
    """End to end with PDFs generated by PyMuPDF."""

    def test_generated_documents(self, tmp_path: Path) -> None:
        import fitz

        root = tmp_path / "root"
        root.mkdir()
        for name, text in [("a.pdf", "invoice 4242 paid"), ("b.pdf", "invoice 42 paid")]:
            doc = fitz.open()
            doc.new_page().insert_text((72, 72), text)
            doc.save(str(root / name))
            doc.close()
        (root / "broken.pdf").write_bytes(b"not a pdf at all")
        csv_file = tmp_path / "t.csv"
        csv_file.write_text("Invoice #\n42\n99\n")
        target = tmp_path / "out"
        report = tmp_path / "missing.txt"

        result = runner.invoke(app, [str(csv_file), str(root), str(target), str(report), "3"])

        assert result.exit_code == 0, result.output
        assert [p.name for p in target.iterdir()] == ["42_b.pdf"]
        assert report.read_text() == "99\n"
