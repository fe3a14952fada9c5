import logging
from pathlib import Path

from config import CYTOBAND_FILE_SUFFIX
from shared_utils.file_utils import legal_filename
from shared_utils.schemas import ChromSizes, PathLike
from shared_utils.utils import sort_chromosome_names

logger = logging.getLogger(__name__)


def cytoband_file_name(genome_id: str) -> str:
    return legal_filename(f"{genome_id}{CYTOBAND_FILE_SUFFIX}")[0]


def generate_cytoband_file(chrom_sizes: ChromSizes, cytoband_file: PathLike, single_fasta: bool) -> bool:
    """Write a single band per chromosome spanning its full length.

    Chromosomes from a single FASTA keep their file order, anything else is
    sorted with `sort_chromosome_names`. Returns True if the chromosomes were
    sorted.
    """
    chr_names = list(chrom_sizes.keys())
    ordered = not single_fasta
    if ordered:
        chr_names = sort_chromosome_names(chr_names)

    cytoband_file = Path(cytoband_file)
    with open(cytoband_file, "w", encoding="utf-8") as f:
        for chr_name in chr_names:
            f.write(f"{chr_name}\t0\t{chrom_sizes[chr_name]}\n")
    logger.info(f"Generated cytoband file {cytoband_file.name} for {len(chr_names)} chromosomes")
    return ordered
