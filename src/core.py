# ## Genome archive creation
# Turns FASTA input plus optional annotation files into a `.genome` archive.

import logging
import time
from pathlib import Path
from typing import Optional

from archive_utils.cytoband import cytoband_file_name, generate_cytoband_file
from archive_utils.manifest import create_genome_property_file
from archive_utils.utils import create_zip_file
from config import SEQUENCE_PROGRESS_SHARE, get_genome_cache_dir, get_log_level
from sequence_utils.input_resolver import resolve_sequence_input
from shared_utils.file_utils import clean_filename, working_area
from shared_utils.http_utils import is_url
from shared_utils.schemas import ChromSizes, GenomeImportRequest, PathLike
from shared_utils.utils import ProgressMonitor, notify_progress

# Set up logger
logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Remaining progress after sequence splitting, summing to 100 with SEQUENCE_PROGRESS_SHARE
MANIFEST_PROGRESS = 20
ARCHIVE_PROGRESS = 30


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(level=level or get_log_level(), format=LOG_FORMAT)


def _log_invalid_request(request: GenomeImportRequest) -> None:
    logger.error("Invalid input for genome creation: ")
    logger.error(f"\tGenome Output Location={request.archive_output_location}")
    logger.error(f"\tGenome filename={request.genome_file_name}")
    logger.error(f"\tGenome Id={request.genome_id}")
    logger.error(f"\tGenome Name={request.genome_display_name}")


def get_sequence_output_folder(request: GenomeImportRequest) -> Path:
    """Folder receiving the split sequence files.

    Remote sequence locations cannot be written to, so the genome id is used
    as the local folder name in that case. The folder always nests under
    `archive_output_location`: a leading root is dropped along with any
    `.` or `..` components.
    """
    sequence_location = request.sequence_location
    if not sequence_location or is_url(sequence_location):
        sequence_location = request.genome_id
    location = Path(sequence_location)
    parts = [part for part in location.relative_to(location.anchor).parts if part not in (".", "..")]
    if not parts:
        parts = [request.genome_id]
    return Path(request.archive_output_location).joinpath(*parts)


def import_genome(
    request: GenomeImportRequest,
    monitor: Optional[ProgressMonitor] = None,
    cache_dir: Optional[PathLike] = None,
    max_contigs: Optional[int] = None,
) -> Optional[Path]:
    """Create the genome archive described by `request`.

    Returns the archive path, or None when required fields are missing.
    Raises OSError for I/O failures and MaximumContigsError when a FASTA
    stream holds too many records. Split sequence files already written
    are not removed on failure.
    """
    if request.missing_fields():
        _log_invalid_request(request)
        return None

    if cache_dir is None:
        cache_dir = get_genome_cache_dir()
    start_time = time.time()

    archive_output_location = Path(request.archive_output_location)
    cytoband_file = request.cytoband_file
    sequence_location = request.sequence_location
    chroms_sorted = False
    altered_chr_filenames = False

    with working_area(Path(cache_dir), request.genome_file_name) as tmpdir:
        if request.sequence_input_file is not None:
            chrom_sizes: ChromSizes = {}
            sequence_output_folder = get_sequence_output_folder(request)
            sequence_output_folder.mkdir(parents=True, exist_ok=True)

            result = resolve_sequence_input(
                request.sequence_input_file,
                sequence_output_folder,
                chrom_sizes,
                monitor=monitor,
                max_contigs=max_contigs,
                download_dir=tmpdir,
            )
            altered_chr_filenames = result["altered_filenames"]
            logger.info(
                f"Split {len(chrom_sizes)} sequences from {result['streams_processed']} "
                f"stream(s) into {sequence_output_folder}"
            )

            if cytoband_file is None:
                cytoband_file = tmpdir / cytoband_file_name(request.genome_id)
                chroms_sorted = generate_cytoband_file(chrom_sizes, cytoband_file, result["single_fasta"])
        else:
            notify_progress(monitor, SEQUENCE_PROGRESS_SHARE)

        if request.sequence_output_location_override:
            sequence_location = request.sequence_output_location_override

        property_file = create_genome_property_file(
            request.genome_id,
            request.genome_display_name,
            sequence_location,
            request.ref_flat_file,
            cytoband_file,
            request.chr_alias_file,
            chroms_sorted,
            altered_chr_filenames,
            tmpdir,
        )
        notify_progress(monitor, MANIFEST_PROGRESS)

        archive = archive_output_location / clean_filename(request.genome_file_name)
        create_zip_file(
            archive,
            [request.ref_flat_file, cytoband_file, property_file, request.chr_alias_file],
        )
        notify_progress(monitor, ARCHIVE_PROGRESS)

    logger.info(f"Created genome archive {archive} in {time.time() - start_time:.1f}s")
    return archive


def create_genome_archive(
    archive_output_location: Optional[PathLike],
    genome_file_name: Optional[str],
    genome_id: Optional[str],
    genome_display_name: Optional[str],
    sequence_location: Optional[str],
    sequence_input_file: Optional[PathLike] = None,
    ref_flat_file: Optional[PathLike] = None,
    cytoband_file: Optional[PathLike] = None,
    chr_alias_file: Optional[PathLike] = None,
    sequence_output_location_override: Optional[str] = None,
    monitor: Optional[ProgressMonitor] = None,
    *,
    cache_dir: Optional[PathLike] = None,
    max_contigs: Optional[int] = None,
) -> Optional[Path]:
    """Create a genome archive containing everything needed to load a genome.

    `sequence_location` is where the viewer will look for sequence data. When
    `sequence_input_file` is given, its records are split into that folder
    (relative to `archive_output_location`) and, unless `cytoband_file` is
    supplied, a one-band-per-chromosome cytoband file is generated.
    """
    request = GenomeImportRequest(
        archive_output_location=archive_output_location,
        genome_file_name=genome_file_name,
        genome_id=genome_id,
        genome_display_name=genome_display_name,
        sequence_location=sequence_location,
        sequence_input_file=sequence_input_file,
        ref_flat_file=ref_flat_file,
        cytoband_file=cytoband_file,
        chr_alias_file=chr_alias_file,
        sequence_output_location_override=sequence_output_location_override,
    )
    return import_genome(request, monitor=monitor, cache_dir=cache_dir, max_contigs=max_contigs)
