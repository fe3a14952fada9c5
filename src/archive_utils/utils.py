import logging
import os
import zipfile
from pathlib import Path
from typing import List, Optional, Sequence

from config import GENOME_ARCHIVE_EXTENSION, PROPERTY_FILE_NAME
from archive_utils.manifest import parse_genome_properties
from shared_utils.file_utils import remove_quietly
from shared_utils.schemas import GenomeArchiveContents, PathLike

logger = logging.getLogger(__name__)


class ArchiveError(OSError):
    """Raised when a genome archive cannot be written or read back."""


def default_archive_filename(genome_id: str) -> str:
    if not genome_id:
        raise ValueError("Genome id is required")
    filename = Path(genome_id).name
    if len(filename) > 250:
        filename = filename[:250]
    if not filename.endswith(GENOME_ARCHIVE_EXTENSION):
        filename = filename + GENOME_ARCHIVE_EXTENSION
    return filename


def _check_archive_inputs(input_files: Sequence[Optional[PathLike]]) -> List[Path]:
    files: List[Path] = []
    used_filenames = set()
    for input_file in input_files:
        if input_file is None:
            continue
        input_file = Path(input_file)
        if not input_file.is_file():
            raise FileNotFoundError(f"Archive input {input_file} does not exist")
        if input_file.name in used_filenames:
            raise ArchiveError(f"Duplicate archive entry {input_file.name}")
        used_filenames.add(input_file.name)
        files.append(input_file)
    return files


def create_zip_file(destination_filepath: PathLike, input_files: Sequence[Optional[PathLike]]) -> Path:
    """Zip `input_files` flat (base names only) into `destination_filepath`.

    `None` entries are skipped so callers can pass optional files directly.
    The archive is written under a temporary name and only moved into place
    once complete, so a failure never leaves a partial archive behind.
    """
    files = _check_archive_inputs(input_files)
    destination_filepath = Path(destination_filepath)
    destination_filepath.parent.mkdir(parents=True, exist_ok=True)
    partial_filepath = destination_filepath.with_name(f".{destination_filepath.name}.part")

    try:
        with zipfile.ZipFile(partial_filepath, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for input_file in files:
                archive.write(input_file, arcname=input_file.name)
                logger.debug(f"Added {input_file.name} to {destination_filepath.name}")
        os.replace(partial_filepath, destination_filepath)
    finally:
        if partial_filepath.exists():
            remove_quietly(partial_filepath)

    if not destination_filepath.exists():
        raise ArchiveError("Zip creation failed!")
    logger.info(f"Genome archive created at {destination_filepath}")
    return destination_filepath


def read_genome_archive(archive_path: PathLike) -> GenomeArchiveContents:
    """Manifest properties and entry names of a genome archive."""
    with zipfile.ZipFile(archive_path, "r") as archive:
        entries = archive.namelist()
        try:
            with archive.open(PROPERTY_FILE_NAME) as handle:
                text = handle.read().decode("utf-8")
        except KeyError as e:
            raise ArchiveError(f"{PROPERTY_FILE_NAME} missing from {archive_path}") from e
    return GenomeArchiveContents(properties=parse_genome_properties(text), entries=entries)
