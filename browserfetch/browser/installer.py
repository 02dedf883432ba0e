"""
Archive extraction and post-install fixups.

``install_archive`` dispatches on the archive's extension. ZIP archives are
extracted in-process; tarballs and macOS disk images go through a
:class:`~browserfetch.core.process.CommandRunner` so every external tool's
exit status is checked in one place.
"""

import logging
import os
import re
import tempfile
import zipfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Union

from browserfetch.core.exceptions import ExtractionFailed, UnsupportedArchiveFormat
from browserfetch.core.filesystem import extract_zip, make_executable, recursive_copy
from browserfetch.core.platform import IS_WINDOWS_HOST, Platform, Product
from browserfetch.core.process import CommandResult, CommandRunner, SubprocessRunner

logger = logging.getLogger(__name__)

CHROMIUM_HELPER_APPS = [
    "Chromium Helper",
    "Chromium Helper (GPU)",
    "Chromium Helper (Plugin)",
    "Chromium Helper (Renderer)",
]

_VOLUME_PATTERN = re.compile(r"/Volumes/(.*)", re.MULTILINE)


def _check(
    runner: CommandRunner,
    args: Sequence[str],
    what: str,
    stdout_path: Optional[Path] = None,
) -> CommandResult:
    """Run a command and raise ExtractionFailed on a non-zero exit."""
    try:
        result = runner.run(args, stdout_path=stdout_path)
    except OSError as e:
        raise ExtractionFailed(f"{what} failed: could not run {args[0]}: {e}") from e
    if not result.ok:
        raise ExtractionFailed(
            f"{what} failed with exit code {result.returncode}: {result.stderr.strip()}"
        )
    return result


def install_archive(
    archive_path: Union[str, Path],
    destination: Union[str, Path],
    runner: Optional[CommandRunner] = None,
    logger: logging.Logger = logger,
) -> None:
    """
    Extract an archive into a destination folder.

    Supported formats:
    - .zip
    - .tar.bz2 (bzcat to a temporary file, then tar)
    - .tar.gz
    - .tar.xz
    - .dmg (macOS disk image, mounted and copied)

    Args:
        archive_path: Archive to install
        destination: Folder to extract into (created if missing)
        runner: Command runner for external tools
        logger: Logger for progress messages

    Raises:
        UnsupportedArchiveFormat: If the extension has no handler
        ExtractionFailed: If an external tool fails, a ZIP archive is
            corrupt or the image has no app
        InsecureArchiveError: If a ZIP entry escapes the destination
    """
    archive_path = Path(archive_path)
    destination = Path(destination)
    runner = runner or SubprocessRunner()
    name = archive_path.name.lower()

    logger.info(f"Installing {archive_path} to {destination}")

    if name.endswith(".zip"):
        try:
            extract_zip(archive_path, destination)
        except zipfile.BadZipFile as e:
            raise ExtractionFailed(f"unzip failed: {e}") from e
    elif name.endswith(".tar.bz2"):
        _extract_tar_bz2(archive_path, destination, runner)
    elif name.endswith(".tar.gz"):
        _extract_tar(archive_path, destination, "-xzf", runner)
    elif name.endswith(".tar.xz"):
        _extract_tar(archive_path, destination, "-xJf", runner)
    elif name.endswith(".dmg"):
        destination.mkdir(parents=True, exist_ok=True)
        install_dmg(archive_path, destination, runner, logger)
    else:
        raise UnsupportedArchiveFormat(archive_path)


def _extract_tar(
    archive_path: Path, destination: Path, flags: str, runner: CommandRunner
) -> None:
    destination.mkdir(parents=True, exist_ok=True)
    _check(runner, ["tar", "-C", str(destination), flags, str(archive_path)], "untar")


def _extract_tar_bz2(
    archive_path: Path, destination: Path, runner: CommandRunner
) -> None:
    """Decompress with bzcat into a temporary tarball, then unpack it."""
    destination.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix="browserfetch-", suffix=".tar")
    os.close(fd)
    tmp_path = Path(tmp_name)
    try:
        _check(runner, ["bzcat", str(archive_path)], "bzcat", stdout_path=tmp_path)
        _check(runner, ["tar", "-C", str(destination), "-xvf", str(tmp_path)], "untar")
    finally:
        tmp_path.unlink(missing_ok=True)


# ============================================================================
# macOS Disk Images
# ============================================================================


@contextmanager
def mounted_disk_image(
    dmg_path: Union[str, Path],
    runner: CommandRunner,
    logger: logging.Logger = logger,
) -> Iterator[Path]:
    """
    Attach a disk image for the duration of a ``with`` block.

    The image is detached exactly once when the block exits, whether or not
    the body raised. If the body raised, a failed detach is logged and the
    body's error propagates.

    Yields:
        Mount point of the attached volume

    Raises:
        ExtractionFailed: If attaching fails, no volume path is reported,
            or detaching fails after the body completed
    """
    result = _check(
        runner,
        ["hdiutil", "attach", "-nobrowse", "-noautoopen", str(dmg_path)],
        "hdiutil attach",
    )
    volumes = _VOLUME_PATTERN.search(result.stdout)
    if not volumes:
        raise ExtractionFailed(f"Could not find volume path in {result.stdout}")
    mount_path = Path(volumes.group(0).strip())

    detach = ["hdiutil", "detach", str(mount_path), "-quiet"]
    try:
        yield mount_path
    except BaseException:
        logger.debug(f"Unmounting {mount_path}")
        try:
            _check(runner, detach, "unmounting")
        except ExtractionFailed as detach_error:
            logger.warning(f"Failed to unmount {mount_path}: {detach_error}")
        raise

    logger.debug(f"Unmounting {mount_path}")
    _check(runner, detach, "unmounting")


def install_dmg(
    dmg_path: Union[str, Path],
    destination: Union[str, Path],
    runner: CommandRunner,
    logger: logging.Logger = logger,
) -> None:
    """Copy the application bundle out of a disk image into destination."""
    destination = Path(destination)

    with mounted_disk_image(dmg_path, runner, logger) as mount_path:
        app_name = next(
            (entry.name for entry in sorted(mount_path.iterdir()) if entry.name.endswith(".app")),
            None,
        )
        if not app_name:
            raise ExtractionFailed(f"Cannot find app in {mount_path}")
        recursive_copy(mount_path / app_name, destination / app_name)


# ============================================================================
# Permission Fixups
# ============================================================================


def chromium_helper_paths(executable_path: Union[str, Path], version: str) -> List[Path]:
    """Helper binaries inside Chromium's versioned framework directory."""
    versions_dir = _framework_versions_dir(executable_path)
    return [
        versions_dir / version / "Helpers" / f"{helper}.app" / "Contents" / "MacOS" / helper
        for helper in CHROMIUM_HELPER_APPS
    ]


def _framework_versions_dir(executable_path: Union[str, Path]) -> Path:
    # <App>.app/Contents/MacOS/Chromium -> <App>.app/Contents/Frameworks/...
    contents = Path(executable_path).parent.parent
    return contents / "Frameworks" / "Chromium Framework.framework" / "Versions"


def make_chromium_helpers_executable(
    executable_path: Union[str, Path], logger: logging.Logger = logger
) -> None:
    """
    Mark the Chromium helper apps executable on macOS.

    The version directory is read from the framework's ``Current`` file.
    Failures are logged as warnings: the main binary remains usable.
    """
    current = _framework_versions_dir(executable_path) / "Current"
    try:
        # "Current" is usually a symlink to the version directory
        if current.is_symlink():
            version = os.readlink(current)
        else:
            version = current.read_text().strip()
        for helper_path in chromium_helper_paths(executable_path, version):
            make_executable(helper_path)
    except OSError as e:
        logger.warning(f"Failed to make Chromium Helpers executable: {e}")


def make_executables(
    product: Product,
    platform: Platform,
    executable_path: Union[str, Path],
    logger: logging.Logger = logger,
) -> None:
    """
    Apply post-install permission fixups.

    Nothing is done on Windows hosts. Elsewhere the browser executable gets
    mode 0755, plus the Chromium helper binaries for Chrome on macOS.
    """
    if IS_WINDOWS_HOST:
        return
    make_executable(executable_path)
    if product is Product.CHROME and platform is Platform.MAC:
        make_chromium_helpers_executable(executable_path, logger)
