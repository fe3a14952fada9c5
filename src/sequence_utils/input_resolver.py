import gzip
import logging
import zipfile
from pathlib import Path
from typing import List, Optional

from config import FASTA_GZIP_EXTENSION, SEQUENCE_PROGRESS_SHARE, ZIP_EXTENSION
from sequence_utils.fasta_splitter import split_fasta_file, split_fasta_stream
from shared_utils.file_utils import get_sequence_files
from shared_utils.http_utils import download_file, is_url
from shared_utils.schemas import ChromSizes, PathLike, SequenceImportResult
from shared_utils.utils import ProgressMonitor, notify_progress

logger = logging.getLogger(__name__)

# Resource-fork folder added by the macOS archive utility
_MACOS_METADATA_DIR = "__MACOSX/"


def _progress_increments(count: int) -> List[int]:
    """Split the sequence progress share over `count` streams, summing to the full share."""
    if count <= 0:
        return [SEQUENCE_PROGRESS_SHARE]
    base, remainder = divmod(SEQUENCE_PROGRESS_SHARE, count)
    return [base + 1 if index < remainder else base for index in range(count)]


def is_zip_bundle(path: Path) -> bool:
    return path.name.lower().endswith(ZIP_EXTENSION)


def get_bundle_entries(bundle: zipfile.ZipFile) -> List[zipfile.ZipInfo]:
    """Entries of a zip bundle that may hold sequence data."""
    entries = []
    for info in bundle.infolist():
        if info.is_dir() or info.filename.startswith(_MACOS_METADATA_DIR):
            continue
        if Path(info.filename).name.startswith("."):
            continue
        entries.append(info)
    return entries


def split_sequence_directory(
    sequence_dir: Path,
    output_dir: Path,
    chrom_sizes: ChromSizes,
    monitor: Optional[ProgressMonitor] = None,
    max_contigs: Optional[int] = None,
) -> SequenceImportResult:
    files = get_sequence_files(sequence_dir)
    logger.info(f"Found {len(files)} sequence files in {sequence_dir}")
    progress_increments = _progress_increments(len(files))
    if not files:
        notify_progress(monitor, progress_increments[0])

    altered_filenames = False
    for file, progress_increment in zip(files, progress_increments):
        altered = split_fasta_file(file, output_dir, chrom_sizes, max_contigs)
        altered_filenames = altered_filenames or altered
        notify_progress(monitor, progress_increment)
    return SequenceImportResult(
        altered_filenames=altered_filenames,
        single_fasta=False,
        streams_processed=len(files),
    )


def split_sequence_bundle(
    bundle_path: Path,
    output_dir: Path,
    chrom_sizes: ChromSizes,
    monitor: Optional[ProgressMonitor] = None,
    max_contigs: Optional[int] = None,
) -> SequenceImportResult:
    """Split every FASTA entry of a zip bundle, reusing one open bundle handle."""
    altered_filenames = False
    with zipfile.ZipFile(bundle_path, "r") as bundle:
        entries = get_bundle_entries(bundle)
        logger.info(f"Found {len(entries)} sequence entries in {bundle_path}")
        progress_increments = _progress_increments(len(entries))
        if not entries:
            notify_progress(monitor, progress_increments[0])

        for info, progress_increment in zip(entries, progress_increments):
            logger.info(f"Creating sequence files from {bundle_path.name}:{info.filename}")
            # GzipFile leaves a fileobj it was handed open, so the entry gets its own scope
            with bundle.open(info) as entry:
                stream = entry
                if info.filename.lower().endswith(FASTA_GZIP_EXTENSION):
                    stream = gzip.GzipFile(fileobj=entry, mode="rb")
                altered = split_fasta_stream(stream, output_dir, chrom_sizes, max_contigs)
            altered_filenames = altered_filenames or altered
            notify_progress(monitor, progress_increment)
    return SequenceImportResult(
        altered_filenames=altered_filenames,
        single_fasta=False,
        streams_processed=len(entries),
    )


def resolve_sequence_input(
    sequence_input: PathLike,
    output_dir: PathLike,
    chrom_sizes: ChromSizes,
    monitor: Optional[ProgressMonitor] = None,
    max_contigs: Optional[int] = None,
    download_dir: Optional[PathLike] = None,
) -> SequenceImportResult:
    """Split `sequence_input` into per-record sequence files under `output_dir`.

    Accepts a directory of FASTA files, a zip of FASTA files, a single FASTA
    file (optionally gzipped) or a URL to a file of either kind, which is first
    downloaded into `download_dir`. Lengths from every stream accumulate into
    `chrom_sizes`.
    """
    output_dir = Path(output_dir)
    if is_url(str(sequence_input)):
        if download_dir is None:
            raise ValueError(f"A download directory is required for {sequence_input}")
        sequence_input = download_file(str(sequence_input), Path(download_dir))
    sequence_input = Path(sequence_input)

    if sequence_input.is_dir():
        return split_sequence_directory(sequence_input, output_dir, chrom_sizes, monitor, max_contigs)
    if is_zip_bundle(sequence_input):
        return split_sequence_bundle(sequence_input, output_dir, chrom_sizes, monitor, max_contigs)

    altered_filenames = split_fasta_file(sequence_input, output_dir, chrom_sizes, max_contigs)
    notify_progress(monitor, SEQUENCE_PROGRESS_SHARE)
    return SequenceImportResult(
        altered_filenames=altered_filenames,
        single_fasta=True,
        streams_processed=1,
    )
