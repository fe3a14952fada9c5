import logging
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

import requests

from config import get_request_timeout
from shared_utils.file_utils import clean_filename

logger = logging.getLogger(__name__)

URL_SCHEMES = ("http", "https", "ftp")


def is_url(location: Optional[str]) -> bool:
    """True for http, https and ftp locations."""
    if not location:
        return False
    return urlparse(str(location)).scheme.lower() in URL_SCHEMES


def filename_from_url(url: str, default: str = "sequence.fa") -> str:
    name = clean_filename(unquote(urlparse(url).path))
    return name or default


def download_file(url: str, destination_dir: Path, timeout: Optional[int] = None) -> Path:
    """Stream `url` into `destination_dir` and return the written path.

    Raises requests.HTTPError for non-2xx responses.
    """
    if timeout is None:
        timeout = get_request_timeout()
    destination_dir = Path(destination_dir)
    destination_dir.mkdir(parents=True, exist_ok=True)
    destination_filepath = destination_dir / filename_from_url(url)

    logger.info(f"Downloading {url}")
    with requests.get(url, stream=True, timeout=timeout) as response:
        response.raise_for_status()
        with open(destination_filepath, "wb") as f:
            for chunk in response.iter_content(chunk_size=8192):
                if chunk:
                    f.write(chunk)
    logger.info(
        f"Downloaded {destination_filepath.name}: "
        f"{destination_filepath.stat().st_size / (1024 * 1024):.1f} MB"
    )
    return destination_filepath
