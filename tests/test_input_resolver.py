import zipfile

import pytest

from conftest import TWO_RECORD_FASTA, FakeResponse, write_gzip, write_text, write_zip
from sequence_utils.fasta_splitter import MaximumContigsError
from sequence_utils.input_resolver import get_bundle_entries, resolve_sequence_input


def test_single_file(tmp_path, monitor):
    fasta = write_text(tmp_path / "genome.fa", TWO_RECORD_FASTA)
    chrom_sizes = {}
    result = resolve_sequence_input(fasta, tmp_path / "seq", chrom_sizes, monitor=monitor)
    assert result == {"altered_filenames": False, "single_fasta": True, "streams_processed": 1}
    assert chrom_sizes == {"chr1": 6, "chr2": 1}
    assert monitor.increments == [50]


def test_single_gzip_file(tmp_path):
    fasta = write_gzip(tmp_path / "genome.fa.gz", ">chrM\nacgt\n")
    chrom_sizes = {}
    result = resolve_sequence_input(fasta, tmp_path / "seq", chrom_sizes)
    assert result["single_fasta"] is True
    assert (tmp_path / "seq" / "chrM.txt").read_text() == "ACGT"


def test_directory_is_recursive_and_skips_hidden(tmp_path, monitor):
    src = tmp_path / "fastas"
    write_text(src / "chr1.fa", ">chr1\nAAAA\n")
    write_gzip(src / "nested" / "chr2.fa.gz", ">chr2\nCC\n")
    write_text(src / ".hidden.fa", ">hidden\nGG\n")
    write_text(src / ".git" / "blob.fa", ">blob\nTT\n")
    chrom_sizes = {}
    result = resolve_sequence_input(src, tmp_path / "seq", chrom_sizes, monitor=monitor)
    assert result["single_fasta"] is False
    assert result["streams_processed"] == 2
    assert sorted(chrom_sizes.items()) == [("chr1", 4), ("chr2", 2)]
    assert monitor.increments == [25, 25]


def test_directory_altered_flag_is_folded(tmp_path):
    src = tmp_path / "fastas"
    write_text(src / "a.fa", ">a|1\nA\n")
    write_text(src / "b.fa", ">b\nC\n")
    result = resolve_sequence_input(src, tmp_path / "seq", {})
    assert result["altered_filenames"] is True


def test_empty_directory(tmp_path, monitor):
    (tmp_path / "empty").mkdir()
    chrom_sizes = {}
    result = resolve_sequence_input(tmp_path / "empty", tmp_path / "seq", chrom_sizes, monitor=monitor)
    assert result["streams_processed"] == 0
    assert chrom_sizes == {}
    assert monitor.increments == [50]


def test_zip_bundle(tmp_path, monitor):
    bundle = write_zip(
        tmp_path / "genome.ZIP",
        {
            "chr1.fa": ">chr1\nACGT\nAC\n",
            "sub/": "",
            "sub/chr10.fa": ">chr10 tail\nGG\n>chr2\nT\n",
            "__MACOSX/sub/._chr10.fa": ">junk\nNNN\n",
            ".DS_Store": ">junk2\nNNN\n",
        },
    )
    chrom_sizes = {}
    result = resolve_sequence_input(bundle, tmp_path / "seq", chrom_sizes, monitor=monitor)
    assert result == {"altered_filenames": False, "single_fasta": False, "streams_processed": 2}
    assert chrom_sizes == {"chr1": 6, "chr10": 2, "chr2": 1}
    assert monitor.increments == [25, 25]
    assert not (tmp_path / "seq" / "junk.txt").exists()


def test_zip_bundle_with_gzip_entry(tmp_path):
    import gzip

    bundle = write_zip(tmp_path / "genome.zip", {"chr3.fa.gz": gzip.compress(b">chr3\nacgtac\n")})
    chrom_sizes = {}
    resolve_sequence_input(bundle, tmp_path / "seq", chrom_sizes)
    assert chrom_sizes == {"chr3": 6}
    assert (tmp_path / "seq" / "chr3.txt").read_text() == "ACGTAC"


def test_bundle_entries_filter(tmp_path):
    bundle = write_zip(tmp_path / "b.zip", {"d/": "", "d/x.fa": ">x\nA\n", "d/.y": "y"})
    with zipfile.ZipFile(bundle) as z:
        assert [info.filename for info in get_bundle_entries(z)] == ["d/x.fa"]


def test_contig_limit_aborts_resolution(tmp_path):
    src = tmp_path / "fastas"
    write_text(src / "a.fa", ">a\nA\n>b\nC\n>c\nG\n")
    with pytest.raises(MaximumContigsError):
        resolve_sequence_input(src, tmp_path / "seq", {}, max_contigs=2)


def test_url_requires_download_dir(tmp_path):
    with pytest.raises(ValueError):
        resolve_sequence_input("https://example.org/genome.fa", tmp_path / "seq", {})


def test_url_is_downloaded_then_split(tmp_path, monkeypatch):
    import shared_utils.http_utils as http_utils

    calls = []

    def fake_get(url, stream, timeout):
        calls.append(url)
        return FakeResponse([b">chr1\nAC", b"GT\n>chr2\nA\n"])

    monkeypatch.setattr(http_utils.requests, "get", fake_get)
    chrom_sizes = {}
    result = resolve_sequence_input(
        "https://example.org/data/genome.fa", tmp_path / "seq", chrom_sizes, download_dir=tmp_path / "dl"
    )
    assert calls == ["https://example.org/data/genome.fa"]
    assert result["single_fasta"] is True
    assert chrom_sizes == {"chr1": 4, "chr2": 1}
    assert (tmp_path / "dl" / "genome.fa").exists()


def test_many_streams_still_report_full_share(tmp_path, monitor):
    src = tmp_path / "fastas"
    for index in range(60):
        write_text(src / f"c{index}.fa", f">c{index}\nA\n")
    result = resolve_sequence_input(src, tmp_path / "seq", {}, monitor=monitor)
    assert result["streams_processed"] == 60
    assert sum(monitor.increments) == 50


def test_uneven_split_reports_full_share(tmp_path, monitor):
    bundle = write_zip(tmp_path / "genome.zip", {f"c{index}.fa": f">c{index}\nA\n" for index in range(3)})
    resolve_sequence_input(bundle, tmp_path / "seq", {}, monitor=monitor)
    assert monitor.increments == [17, 17, 16]
