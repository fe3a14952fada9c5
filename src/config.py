import os
from pathlib import Path

from dotenv import load_dotenv

# Configuration
DEFAULT_CACHE_DIR = Path.home() / ".genome_importer" / "genomes"
DEFAULT_MAX_CONTIGS = 1000000
DEFAULT_REQUEST_TIMEOUT_SECONDS = 60

# File naming inside the output archive and the sequence folder
SEQUENCE_FILE_SUFFIX = ".txt"
FASTA_GZIP_EXTENSION = ".gz"
ZIP_EXTENSION = ".zip"
GENOME_ARCHIVE_EXTENSION = ".genome"
PROPERTY_FILE_NAME = "property.txt"
CYTOBAND_FILE_SUFFIX = "_cytoband.txt"
WORKING_AREA_SUFFIX = "_tmp"
HIDDEN_FILE_PREFIX = "."

# Share of the 0-100 progress scale spent while splitting sequence input
SEQUENCE_PROGRESS_SHARE = 50


def get_genome_cache_dir() -> Path:
    """Root directory for per-import working areas."""
    load_dotenv()
    cache_dir = os.getenv("GENOME_CACHE_DIR")
    if not cache_dir:
        return DEFAULT_CACHE_DIR
    return Path(cache_dir).expanduser()


def get_max_contigs() -> int:
    load_dotenv()
    return int(os.getenv("MAX_CONTIGS", str(DEFAULT_MAX_CONTIGS)))


def get_request_timeout() -> int:
    load_dotenv()
    return int(os.getenv("REQUEST_TIMEOUT_SECONDS", str(DEFAULT_REQUEST_TIMEOUT_SECONDS)))


def get_log_level() -> str:
    load_dotenv()
    return os.getenv("LOG_LEVEL", "INFO").upper()


def ensure_dirs():
    cache_dir = get_genome_cache_dir()
    if not cache_dir.exists():
        cache_dir.mkdir(parents=True, exist_ok=True)
    return cache_dir
