import gzip
import zipfile
from pathlib import Path

import pytest

TWO_RECORD_FASTA = ">chr1 comment\nACGT\nAC\n>chr2\nG\n"


class RecordingMonitor:
    def __init__(self):
        self.increments = []

    def fire_progress_change(self, increment: int) -> None:
        self.increments.append(increment)


def write_text(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


def write_gzip(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with gzip.open(path, "wt") as f:
        f.write(text)
    return path


def write_zip(path: Path, members: dict) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as z:
        for name, data in members.items():
            z.writestr(name, data)
    return path


@pytest.fixture
def monitor() -> RecordingMonitor:
    return RecordingMonitor()


# Working-area root isolated per test, so nothing touches ~/.genome_importer
@pytest.fixture
def cache_dir(tmp_path) -> Path:
    return tmp_path / "cache"


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    monkeypatch.setenv("GENOME_CACHE_DIR", str(tmp_path / "env_cache"))
    monkeypatch.delenv("MAX_CONTIGS", raising=False)


class FakeResponse:
    """Stand-in for a streamed requests.Response."""

    def __init__(self, chunks, status_code=200):
        self.chunks = chunks
        self.status_code = status_code
        self.closed = False

    def raise_for_status(self):
        import requests

        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def iter_content(self, chunk_size=1):
        yield from self.chunks

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True
        return False
