"""
Unit tests for archive format sniffing.
"""

import logging

import pytest

from browserfetch.core.process import CommandResult
from browserfetch.core.sniffer import (
    ArchiveFormat,
    classify,
    classify_file_output,
    classify_header,
    format_from_name,
    normalize_archive_name,
)


XZ_HEADER = b"\xfd\x37\x7a\x58\x5a\x00" + b"\x00" * 14
GZIP_HEADER = b"\x1f\x8b\x08\x00" + b"\x00" * 16
BZIP2_HEADER = b"BZh91AY&SY" + b"\x00" * 10
ZIP_HEADER = b"PK\x03\x04" + b"\x00" * 16


class TestClassifyHeader:
    """Test magic byte matching."""

    @pytest.mark.parametrize(
        "header,expected",
        [
            (XZ_HEADER, ArchiveFormat.TAR_XZ),
            (GZIP_HEADER, ArchiveFormat.TAR_GZ),
            (BZIP2_HEADER, ArchiveFormat.TAR_BZ2),
            (ZIP_HEADER, ArchiveFormat.ZIP),
        ],
    )
    def test_magic_numbers(self, header, expected):
        """Each magic number maps to its own format."""
        assert classify_header(header) is expected

    def test_unknown_header(self):
        """Unrecognized bytes are unknown."""
        assert classify_header(b"<html>") is ArchiveFormat.UNKNOWN

    def test_empty_header(self):
        """An empty file is unknown."""
        assert classify_header(b"") is ArchiveFormat.UNKNOWN

    def test_partial_xz_magic_is_not_xz(self):
        """XZ requires all six bytes."""
        assert classify_header(b"\xfd\x37\x7a\x58") is ArchiveFormat.UNKNOWN


class TestClassifyFileOutput:
    """Test matching of `file` utility output."""

    def test_gzip_wins_over_later_markers(self):
        """Markers are checked in order gzip, bzip2, Zip."""
        output = "archive: gzip compressed data, was Zip"
        assert classify_file_output(output) is ArchiveFormat.TAR_GZ

    def test_bzip2(self):
        assert classify_file_output("x: bzip2 compressed data") is ArchiveFormat.TAR_BZ2

    def test_zip_is_case_sensitive(self):
        """Only a capitalized 'Zip' matches."""
        assert classify_file_output("x: Zip archive data") is ArchiveFormat.ZIP
        assert classify_file_output("x: zip something") is ArchiveFormat.UNKNOWN


class TestClassify:
    """Test classify() on files."""

    def test_magic_match_skips_file_command(self, tmp_path, fake_runner):
        """The file utility is not consulted when magic bytes match."""
        archive = tmp_path / "a.bin"
        archive.write_bytes(GZIP_HEADER)

        assert classify(archive, fake_runner) is ArchiveFormat.TAR_GZ
        assert fake_runner.calls == []

    def test_falls_back_to_file_command(self, tmp_path, fake_runner):
        """Unknown headers are classified from `file` output."""
        archive = tmp_path / "a.bin"
        archive.write_bytes(b"\x00" * 20)
        fake_runner.on("file", stdout=f"{archive}: bzip2 compressed data\n")

        assert classify(archive, fake_runner) is ArchiveFormat.TAR_BZ2
        assert fake_runner.calls == [["file", str(archive)]]

    def test_file_command_failure_is_unknown(self, tmp_path, fake_runner):
        """A failing file utility yields unknown rather than an error."""
        archive = tmp_path / "a.bin"
        archive.write_bytes(b"\x00" * 20)
        fake_runner.on("file", returncode=1, stderr="boom")

        assert classify(archive, fake_runner) is ArchiveFormat.UNKNOWN

    def test_missing_file_command_is_unknown(self, tmp_path, fake_runner):
        """A missing file utility yields unknown."""
        archive = tmp_path / "a.bin"
        archive.write_bytes(b"\x00" * 20)

        def missing(args, stdout_path):
            raise FileNotFoundError("file")

        fake_runner.on("file", missing)

        assert classify(archive, fake_runner) is ArchiveFormat.UNKNOWN


class TestFormatFromName:
    """Test extension-implied formats."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("chrome-linux.zip", ArchiveFormat.ZIP),
            ("firefox-130.0a1.en-US.linux-x86_64.tar.bz2", ArchiveFormat.TAR_BZ2),
            ("firefox.TAR.GZ", ArchiveFormat.TAR_GZ),
            ("firefox.tar.xz", ArchiveFormat.TAR_XZ),
            ("firefox.dmg", ArchiveFormat.UNKNOWN),
        ],
    )
    def test_names(self, name, expected):
        assert format_from_name(name) is expected


class TestNormalizeArchiveName:
    """Test corrective renaming."""

    def test_renames_mismatched_archive(self, tmp_path, fake_runner):
        """A .tar.bz2 that is really xz is renamed to .tar.xz."""
        archive = tmp_path / "firefox-130.0a1.en-US.linux-x86_64.tar.bz2"
        archive.write_bytes(XZ_HEADER)

        result = normalize_archive_name(archive, fake_runner)

        assert result == tmp_path / "firefox-130.0a1.en-US.linux-x86_64.tar.xz"
        assert result.exists()
        assert not archive.exists()

    def test_renames_to_zip(self, tmp_path, fake_runner):
        """A .tar.bz2 that is really a ZIP becomes .zip."""
        archive = tmp_path / "firefox.tar.bz2"
        archive.write_bytes(ZIP_HEADER)

        result = normalize_archive_name(archive, fake_runner)

        assert result.name == "firefox.zip"

    def test_matching_archive_keeps_name(self, tmp_path, fake_runner):
        """No rename when content and extension agree."""
        archive = tmp_path / "firefox.tar.bz2"
        archive.write_bytes(BZIP2_HEADER)

        assert normalize_archive_name(archive, fake_runner) == archive
        assert archive.exists()

    def test_unknown_content_keeps_name(self, tmp_path, fake_runner):
        """Unknown content leaves the original name in place."""
        archive = tmp_path / "firefox.tar.bz2"
        archive.write_bytes(b"\x00" * 20)
        fake_runner.on("file", stdout="data")

        assert normalize_archive_name(archive, fake_runner) == archive

    def test_disk_images_are_not_sniffed(self, tmp_path, fake_runner):
        """Names without an archive extension are returned untouched."""
        archive = tmp_path / "firefox.dmg"
        archive.write_bytes(BZIP2_HEADER)

        assert normalize_archive_name(archive, fake_runner) == archive
        assert fake_runner.calls == []

    def test_file_command_result_drives_rename(self, tmp_path, fake_runner):
        """Fallback detection also triggers a rename."""
        archive = tmp_path / "firefox.tar.bz2"
        archive.write_bytes(b"\x00" * 20)
        fake_runner.on(
            "file", lambda args, out: CommandResult(0, "x: gzip compressed data")
        )

        result = normalize_archive_name(archive, fake_runner)

        assert result.name == "firefox.tar.gz"

    def test_rename_logged_to_given_logger(self, tmp_path, fake_runner, caplog):
        archive = tmp_path / "firefox.tar.bz2"
        archive.write_bytes(XZ_HEADER)
        injected = logging.getLogger("browserfetch_tests.sniffer")

        with caplog.at_level(logging.INFO):
            normalize_archive_name(archive, fake_runner, injected)

        renames = [r for r in caplog.records if "renaming to firefox.tar.xz" in r.getMessage()]
        assert [r.name for r in renames] == [injected.name]
