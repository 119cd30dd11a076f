"""Test cases for the __main__ module."""

import lzma
import shutil
import pytest
from click.testing import CliRunner

from admatrix import __main__
from admatrix.errors import EX_DATAERR, EX_NOINPUT, EX_UNAVAILABLE, EX_CANTCREAT

requires_xz = pytest.mark.skipif(shutil.which("xz") is None, reason="xz not installed")


@pytest.fixture
def runner() -> CliRunner:
    """Fixture for invoking command-line interfaces."""
    return CliRunner()


def read_xz(path) -> str:
    with lzma.open(path, "rt") as f:
        return f.read()


def test_main_succeeds(runner: CliRunner) -> None:
    """It exits with a status code of zero."""
    result = runner.invoke(__main__.main, ["--help"])
    assert result.exit_code == 0


def test_main_version(runner: CliRunner) -> None:
    """It reports the package version."""
    result = runner.invoke(__main__.main, ["--version"])
    assert result.exit_code == 0
    assert "1.0" in result.output


def test_main_usage_error(runner: CliRunner) -> None:
    """It rejects a missing output stem."""
    result = runner.invoke(__main__.main, ["manifest.txt"])
    assert result.exit_code == 2
    assert "Usage" in result.output


@requires_xz
def test_main(runner: CliRunner, write_vcf, write_manifest, tmp_path) -> None:
    """Test main() end to end on two overlapping samples."""

    a = write_vcf("a.vcf", [("1", 100, "5,3"), ("1", 200, "0,4"), ("2", 50, "9,1")])
    b = write_vcf("b.vcf", [("1", 100, "6,2"), ("2", 50, "7,0")])
    manifest = write_manifest([a, b])
    stem = str(tmp_path / "cohort")

    result = runner.invoke(__main__.main, [manifest, stem, "--verbose"])

    assert result.exit_code == 0, f"Failed with: {result.output}"
    assert "2 VCF files." in result.output
    assert "Wrote 3 rows." in result.output
    assert read_xz(stem + "-ref.tsv.xz") == "1\t100\t5\t6\t\n1\t200\t0\t.\t\n2\t50\t9\t7\t\n"
    assert (
        read_xz(stem + "-ref+alt.tsv.xz")
        == "1\t100\t5,3\t6,2\t\n1\t200\t0,4\t.\t\n2\t50\t9,1\t7,0\t\n"
    )


@requires_xz
def test_main_empty_manifest(runner: CliRunner, write_manifest, tmp_path) -> None:
    """Test that an empty manifest writes two empty matrices."""

    manifest = write_manifest([])
    stem = str(tmp_path / "cohort")

    result = runner.invoke(__main__.main, [manifest, stem])

    assert result.exit_code == 0, f"Failed with: {result.output}"
    assert read_xz(stem + "-ref.tsv.xz") == ""
    assert read_xz(stem + "-ref+alt.tsv.xz") == ""


@requires_xz
def test_main_existing_output(
    runner: CliRunner, write_vcf, write_manifest, tmp_path
) -> None:
    """Test that existing outputs need --overwrite."""

    manifest = write_manifest([write_vcf("a.vcf", [("1", 10, "1,1")])])
    stem = str(tmp_path / "cohort")
    (tmp_path / "cohort-ref.tsv.xz").touch()

    result = runner.invoke(__main__.main, [manifest, stem])
    assert result.exit_code == EX_CANTCREAT
    assert "--overwrite" in result.output

    result = runner.invoke(__main__.main, [manifest, stem, "--overwrite"])
    assert result.exit_code == 0, f"Failed with: {result.output}"
    assert "Will overwrite" in result.output
    assert read_xz(stem + "-ref.tsv.xz") == "1\t10\t1\t\n"


def test_main_missing_manifest(runner: CliRunner, tmp_path) -> None:
    """Test the exit code for an unreadable manifest."""

    result = runner.invoke(
        __main__.main, [str(tmp_path / "nowhere.txt"), str(tmp_path / "cohort")]
    )
    assert result.exit_code == EX_NOINPUT
    assert "Error: Cannot open" in result.output


def test_main_blank_manifest_line(runner: CliRunner, tmp_path) -> None:
    """Test the exit code for a manifest with a blank line."""

    manifest = tmp_path / "manifest.txt"
    manifest.write_text("a.vcf\n\n")

    result = runner.invoke(__main__.main, [str(manifest), str(tmp_path / "cohort")])
    assert result.exit_code == EX_DATAERR
    assert "blank lines" in result.output


def test_main_missing_input(runner: CliRunner, write_manifest, tmp_path) -> None:
    """Test the exit code for a missing sample file; no outputs are created."""

    manifest = write_manifest([str(tmp_path / "missing.vcf")])
    stem = str(tmp_path / "cohort")

    result = runner.invoke(__main__.main, [manifest, stem])
    assert result.exit_code == EX_UNAVAILABLE
    assert "missing.vcf" in result.output
    assert not (tmp_path / "cohort-ref.tsv.xz").exists()


@requires_xz
def test_main_parse_error(runner: CliRunner, write_vcf, write_manifest, tmp_path) -> None:
    """Test the exit code for a malformed sample payload."""

    manifest = write_manifest(
        [write_vcf("a.vcf", [("1", 10, "1,1")]), write_vcf("b.vcf", [("1", 10, ".")])]
    )

    result = runner.invoke(__main__.main, [manifest, str(tmp_path / "cohort")])
    assert result.exit_code == EX_DATAERR
    assert "b.vcf at 1:10" in result.output


def test_write_matrices_output_failure(
    write_vcf, write_manifest, tmp_path, monkeypatch
) -> None:
    """Test that an output failure closes every sample stream."""

    manifest = write_manifest([write_vcf("a.vcf", [("1", 10, "1,1")])])
    monkeypatch.setenv("PATH", str(tmp_path))
    opened = []
    original_open_sample_streams = __main__.open_sample_streams

    def tracking_open_sample_streams(paths, debug=False):
        opened.extend(original_open_sample_streams(paths, debug=debug))
        return opened

    monkeypatch.setattr(__main__, "open_sample_streams", tracking_open_sample_streams)

    with pytest.raises(__main__.AdMatrixError, match="Cannot find 'xz'"):
        __main__.write_matrices(manifest, str(tmp_path / "cohort"))
    assert len(opened) == 1
    assert not opened[0].is_open
