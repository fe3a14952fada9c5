"""Split multi-record FASTA streams into one sequence file per record.

Each record `>name comment` becomes `<output_dir>/<name>.txt` holding the
record's sequence lines upper-cased and concatenated without line breaks.
Record lengths are committed into a caller-owned `ChromSizes` mapping.
"""

import gzip
import io
import logging
import re
from pathlib import Path
from typing import IO, Optional, TextIO, Union

from config import FASTA_GZIP_EXTENSION, SEQUENCE_FILE_SUFFIX, get_max_contigs
from shared_utils.file_utils import legal_filename
from shared_utils.schemas import ChromSizes, PathLike

logger = logging.getLogger(__name__)

RECORD_MARKER = ">"
SEQUENCE_NAME_SPLITTER = re.compile(r"\s+")


class MaximumContigsError(Exception):
    """Raised when a stream holds more records than the configured maximum."""

    def __init__(self, max_contigs: int):
        self.max_contigs = max_contigs
        super().__init__(f"Maximum number of contigs exceeded ({max_contigs})")


def _as_text(stream: Union[IO[bytes], TextIO]) -> TextIO:
    if isinstance(stream, io.TextIOBase):
        return stream
    return io.TextIOWrapper(stream, encoding="utf-8", errors="replace")


def record_name(header_line: str) -> str:
    """First whitespace-delimited token of a header, without the marker."""
    return SEQUENCE_NAME_SPLITTER.split(header_line.strip(), 1)[0][len(RECORD_MARKER):]


def split_fasta_stream(
    stream: Union[IO[bytes], TextIO],
    output_dir: PathLike,
    chrom_sizes: ChromSizes,
    max_contigs: Optional[int] = None,
) -> bool:
    """Write one sequence file per record of `stream` into `output_dir`.

    The stream is consumed and closed. Lines before the first header are
    ignored. Returns True if any output file name had to be altered to be
    legal on the file system.

    Raises MaximumContigsError as soon as the header count exceeds
    `max_contigs`.
    """
    if max_contigs is None:
        max_contigs = get_max_contigs()
    output_dir = Path(output_dir)

    altered_filenames = False
    contig_counter = 0
    chr_name: Optional[str] = None
    chr_size = 0
    chromosome_file: Optional[TextIO] = None
    try:
        with _as_text(stream) as reader:
            output_dir.mkdir(parents=True, exist_ok=True)
            for raw_line in reader:
                line = raw_line.strip()

                if line.startswith(RECORD_MARKER):
                    if chr_name is not None:
                        chrom_sizes[chr_name] = chr_size

                    contig_counter += 1
                    if contig_counter > max_contigs:
                        raise MaximumContigsError(max_contigs)

                    chr_name = record_name(line)
                    chr_size = 0
                    chr_file_name = chr_name + SEQUENCE_FILE_SUFFIX
                    legal_name, was_altered = legal_filename(chr_file_name)
                    if was_altered:
                        logger.debug(f"Renamed sequence file {chr_file_name!r} -> {legal_name!r}")
                        altered_filenames = True

                    if chromosome_file is not None:
                        chromosome_file.close()
                        chromosome_file = None
                    chromosome_file = open(output_dir / legal_name, "w", encoding="utf-8")

                elif chromosome_file is not None:
                    chr_size += len(line)
                    chromosome_file.write(line.upper())

            # Last record
            if chr_name is not None:
                chrom_sizes[chr_name] = chr_size
    finally:
        if chromosome_file is not None:
            chromosome_file.close()

    logger.debug(f"Wrote {contig_counter} sequence files to {output_dir}")
    return altered_filenames


def open_fasta(path: PathLike) -> IO[bytes]:
    """Open a FASTA file for binary reading, gunzipping `.gz` files."""
    path = Path(path)
    if path.name.lower().endswith(FASTA_GZIP_EXTENSION):
        return gzip.open(path, "rb")
    return open(path, "rb")


def split_fasta_file(
    sequence_input_file: PathLike,
    output_dir: PathLike,
    chrom_sizes: ChromSizes,
    max_contigs: Optional[int] = None,
) -> bool:
    """Split a plain or gzipped FASTA file. See `split_fasta_stream`."""
    logger.info(f"Creating sequence files from {sequence_input_file}")
    return split_fasta_stream(open_fasta(sequence_input_file), output_dir, chrom_sizes, max_contigs)
