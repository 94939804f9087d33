from __future__ import annotations

from pathlib import Path

from click.testing import CliRunner
from pypdf import PdfReader

from pdfbuildx.cli import cli


def test_new_creates_document(tmp_path: Path) -> None:
    output = tmp_path / "out.pdf"
    runner = CliRunner()

    result = runner.invoke(
        cli, ["new", str(output), "--title", "Invoice", "--pages", "2", "-c", "CUSTOM"]
    )

    assert result.exit_code == 0, result.output
    assert "Successfully created" in result.output
    reader = PdfReader(str(output))
    assert len(reader.pages) == 2
    assert reader.metadata.title == "Invoice"


def test_new_with_font_text_and_profile(tmp_path: Path, font_path: Path, icc_path: Path) -> None:
    output = tmp_path / "out.pdf"
    runner = CliRunner()

    result = runner.invoke(
        cli,
        [
            "new",
            str(output),
            "--font",
            str(font_path),
            "--text",
            "Aa",
            "--icc-profile",
            str(icc_path),
            "--check",
        ],
    )

    assert result.exit_code == 0, result.output
    reader = PdfReader(str(output))
    assert "/F0" in reader.pages[0]["/Resources"]["/Font"]
    assert len(reader.trailer["/Root"]["/OutputIntents"]) == 1


def test_new_text_without_font_fails(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["new", str(tmp_path / "out.pdf"), "--text", "Hi"])
    assert result.exit_code == 1
    assert "--text requires --font" in result.output


def test_new_check_reports_violations(tmp_path: Path) -> None:
    output = tmp_path / "out.pdf"
    runner = CliRunner()

    result = runner.invoke(cli, ["new", str(output), "--check"])

    assert result.exit_code == 1
    assert "ICC profile" in result.output
    assert not output.exists()


def test_inspect_shows_structure(tmp_path: Path, icc_path: Path) -> None:
    output = tmp_path / "out.pdf"
    runner = CliRunner()
    runner.invoke(cli, ["new", str(output), "--title", "Report", "--icc-profile", str(icc_path)])

    result = runner.invoke(cli, ["inspect", str(output)])

    assert result.exit_code == 0, result.output
    assert "Report" in result.output
    assert "Document ID" in result.output
    assert "PDF/X-3:2003" in result.output


def test_inspect_rejects_non_pdf(tmp_path: Path) -> None:
    bogus = tmp_path / "bogus.pdf"
    bogus.write_bytes(b"not a pdf")
    runner = CliRunner()

    result = runner.invoke(cli, ["inspect", str(bogus)])

    assert result.exit_code == 1
    assert "Error" in result.output
