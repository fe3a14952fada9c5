"""
Request and result schemas shared by the importer modules.
Results are TypedDicts so they can be logged or dumped to JSON as-is.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union

from typing_extensions import TypedDict

PathLike = Union[str, Path]

# ---- Manifest (property.txt) keys ---- #

GENOME_ARCHIVE_ID_KEY = "id"
GENOME_ARCHIVE_NAME_KEY = "name"
GENOME_ARCHIVE_CYTOBAND_FILE_KEY = "cytobandFile"
GENOME_ARCHIVE_GENE_FILE_KEY = "geneFile"
GENOME_CHR_ALIAS_FILE_KEY = "chrAliasFile"
GENOME_ARCHIVE_SEQUENCE_FILE_LOCATION_KEY = "sequenceLocation"
GENOME_ORDERED_KEY = "ordered"
GENOME_FILENAMES_ALTERED_KEY = "filenamesAltered"

# Record identifier -> committed sequence length, in first-seen order
ChromSizes = Dict[str, int]


@dataclass(frozen=True)
class GenomeImportRequest:
    """Parameters of one archive-creation call.

    `sequence_location` names the folder (relative to `archive_output_location`)
    that receives the split sequence files, or a URL when the sequence data is
    hosted elsewhere. `sequence_input_file` may be a FASTA file, a gzipped FASTA,
    a zip of FASTA files, a directory of FASTA files or a URL to any of those.
    """

    archive_output_location: Optional[PathLike]
    genome_file_name: Optional[str]
    genome_id: Optional[str]
    genome_display_name: Optional[str]
    sequence_location: Optional[str] = None
    sequence_input_file: Optional[PathLike] = None
    ref_flat_file: Optional[PathLike] = None
    cytoband_file: Optional[PathLike] = None
    chr_alias_file: Optional[PathLike] = None
    sequence_output_location_override: Optional[str] = None

    def missing_fields(self) -> List[str]:
        """Names of required fields that are absent or empty."""
        required = {
            "archive_output_location": self.archive_output_location,
            "genome_file_name": self.genome_file_name,
            "genome_id": self.genome_id,
            "genome_display_name": self.genome_display_name,
        }
        return [name for name, value in required.items() if value is None or not str(value)]


# ---- Results ---- #


class SequenceImportResult(TypedDict):
    altered_filenames: bool
    single_fasta: bool
    streams_processed: int


class GenomeProperties(TypedDict, total=False):
    filenamesAltered: bool
    ordered: bool
    id: str
    name: str
    cytobandFile: str
    geneFile: str
    chrAliasFile: str
    sequenceLocation: str


class GenomeArchiveContents(TypedDict):
    properties: Dict[str, str]
    entries: List[str]
