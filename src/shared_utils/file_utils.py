import logging
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Tuple

from config import HIDDEN_FILE_PREFIX, WORKING_AREA_SUFFIX

logger = logging.getLogger(__name__)

# Characters that are not legal in file names on at least one supported platform
_ILLEGAL_FILENAME_CHARS = frozenset('\\/:*?"<>|')


def clean_filename(filename: str) -> str:
    """Sanitize a filename to prevent path traversal."""
    return Path(filename).name


def legal_filename(filename: str) -> Tuple[str, bool]:
    """Map `filename` to a name that is legal on every file system.

    Returns the legal name and whether any character had to be replaced.
    """
    legal = "".join(
        "_" if (ch in _ILLEGAL_FILENAME_CHARS or ord(ch) < 32 or ord(ch) == 127) else ch
        for ch in filename
    )
    return legal, legal != filename


def is_hidden(path: Path) -> bool:
    return path.name.startswith(HIDDEN_FILE_PREFIX)


def get_sequence_files(sequence_dir: Path) -> List[Path]:
    """All non-hidden files under `sequence_dir`, descending into subdirectories.

    Entries are returned in directory-listing order; no sort is applied.
    """
    files: List[Path] = []
    for path in Path(sequence_dir).iterdir():
        if is_hidden(path):
            logger.debug(f"Skipping hidden entry {path}")
            continue
        if path.is_dir():
            files.extend(get_sequence_files(path))
        else:
            files.append(path)
    return files


def get_working_area_path(cache_dir: Path, genome_file_name: str) -> Path:
    return Path(cache_dir) / f"{clean_filename(genome_file_name)}{WORKING_AREA_SUFFIX}"


def remove_quietly(path: Path) -> bool:
    """Best-effort removal of a file or directory tree.

    Failures are logged and reported through the return value, never raised.
    """
    path = Path(path)
    try:
        if path.is_dir():
            shutil.rmtree(path)
        elif path.exists():
            path.unlink()
    except OSError as e:
        logger.warning(f"Failed to remove {path}: {e}")
        return False
    return True


@contextmanager
def working_area(cache_dir: Path, genome_file_name: str) -> Iterator[Path]:
    """Create a private working directory and remove it on every exit path.

    A directory left behind by an earlier, interrupted run is removed first.
    """
    tmpdir = get_working_area_path(cache_dir, genome_file_name)
    if tmpdir.exists():
        logger.warning(f"Working area {tmpdir} already exists, recreating it")
        shutil.rmtree(tmpdir)
    tmpdir.mkdir(parents=True)
    logger.debug(f"Created working area {tmpdir}")
    try:
        yield tmpdir
    finally:
        if remove_quietly(tmpdir):
            logger.debug(f"Removed working area {tmpdir}")
