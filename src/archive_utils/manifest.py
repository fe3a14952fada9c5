"""
Genome property file (`property.txt`) stored at the root of every genome
archive. One `key=value` pair per line, keys limited to the set declared in
`shared_utils.schemas`.
"""

import logging
from pathlib import Path
from typing import Dict, Optional

from config import PROPERTY_FILE_NAME
from shared_utils.http_utils import is_url
from shared_utils.schemas import (
    GENOME_ARCHIVE_CYTOBAND_FILE_KEY,
    GENOME_ARCHIVE_GENE_FILE_KEY,
    GENOME_ARCHIVE_ID_KEY,
    GENOME_ARCHIVE_NAME_KEY,
    GENOME_ARCHIVE_SEQUENCE_FILE_LOCATION_KEY,
    GENOME_CHR_ALIAS_FILE_KEY,
    GENOME_FILENAMES_ALTERED_KEY,
    GENOME_ORDERED_KEY,
    GenomeProperties,
    PathLike,
)

logger = logging.getLogger(__name__)


def normalize_sequence_location(sequence_location: str) -> str:
    """Use forward slashes in local sequence locations; URLs are left alone."""
    if is_url(sequence_location):
        return sequence_location
    return sequence_location.replace("\\", "/")


def build_genome_properties(
    genome_id: Optional[str],
    genome_display_name: Optional[str],
    sequence_location: Optional[str],
    ref_flat_file: Optional[PathLike],
    cytoband_file: Optional[PathLike],
    chr_alias_file: Optional[PathLike],
    chroms_sorted: bool,
    altered_chr_filenames: bool,
) -> GenomeProperties:
    """Manifest entries in file order. Keys without a value are left out."""
    properties = GenomeProperties()
    if altered_chr_filenames:
        properties[GENOME_FILENAMES_ALTERED_KEY] = True
    properties[GENOME_ORDERED_KEY] = chroms_sorted
    if genome_id is not None:
        properties[GENOME_ARCHIVE_ID_KEY] = genome_id
    if genome_display_name is not None:
        properties[GENOME_ARCHIVE_NAME_KEY] = genome_display_name
    if cytoband_file is not None:
        properties[GENOME_ARCHIVE_CYTOBAND_FILE_KEY] = Path(cytoband_file).name
    if ref_flat_file is not None:
        properties[GENOME_ARCHIVE_GENE_FILE_KEY] = Path(ref_flat_file).name
    if chr_alias_file is not None:
        properties[GENOME_CHR_ALIAS_FILE_KEY] = Path(chr_alias_file).name
    if sequence_location is not None:
        properties[GENOME_ARCHIVE_SEQUENCE_FILE_LOCATION_KEY] = normalize_sequence_location(sequence_location)
    return properties


def _format_value(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def format_genome_properties(properties: GenomeProperties) -> str:
    return "".join(f"{key}={_format_value(value)}\n" for key, value in properties.items())


def parse_genome_properties(text: str) -> Dict[str, str]:
    """Read `key=value` lines back into a dict of strings."""
    properties: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        properties[key.strip()] = value.strip()
    return properties


def create_genome_property_file(
    genome_id: Optional[str],
    genome_display_name: Optional[str],
    sequence_location: Optional[str],
    ref_flat_file: Optional[PathLike],
    cytoband_file: Optional[PathLike],
    chr_alias_file: Optional[PathLike],
    chroms_sorted: bool,
    altered_chr_filenames: bool,
    tmpdir: PathLike,
) -> Path:
    """Write `property.txt` into `tmpdir` and return its path."""
    properties = build_genome_properties(
        genome_id,
        genome_display_name,
        sequence_location,
        ref_flat_file,
        cytoband_file,
        chr_alias_file,
        chroms_sorted,
        altered_chr_filenames,
    )
    property_file = Path(tmpdir) / PROPERTY_FILE_NAME
    with open(property_file, "w", encoding="utf-8") as f:
        f.write(format_genome_properties(properties))
    logger.debug(f"Wrote {PROPERTY_FILE_NAME} with keys {list(properties)}")
    return property_file
