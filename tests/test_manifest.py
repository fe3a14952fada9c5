from archive_utils.manifest import (
    build_genome_properties,
    create_genome_property_file,
    normalize_sequence_location,
    parse_genome_properties,
)


def test_all_keys_in_file_order(tmp_path):
    path = create_genome_property_file(
        "hg_test",
        "Test Genome",
        "seq\\hg_test",
        tmp_path / "refGene.txt",
        tmp_path / "work" / "hg_test_cytoband.txt",
        tmp_path / "alias.tab",
        chroms_sorted=True,
        altered_chr_filenames=True,
        tmpdir=tmp_path,
    )
    assert path == tmp_path / "property.txt"
    assert path.read_text(encoding="utf-8").splitlines() == [
        "filenamesAltered=true",
        "ordered=true",
        "id=hg_test",
        "name=Test Genome",
        "cytobandFile=hg_test_cytoband.txt",
        "geneFile=refGene.txt",
        "chrAliasFile=alias.tab",
        "sequenceLocation=seq/hg_test",
    ]


def test_absent_values_are_omitted():
    properties = build_genome_properties("g", "G", None, None, None, None, False, False)
    assert dict(properties) == {"ordered": False, "id": "g", "name": "G"}


def test_url_sequence_location_is_not_normalized():
    url = "https://example.org/seq\\hg19"
    assert normalize_sequence_location(url) == url
    assert normalize_sequence_location("a\\b\\c") == "a/b/c"


def test_parse_genome_properties():
    text = "# comment\nordered=false\nname=A=B\n\nbogus line\n"
    assert parse_genome_properties(text) == {"ordered": "false", "name": "A=B"}


def test_non_ascii_display_name(tmp_path):
    path = create_genome_property_file("g", "Drosophila mélanogaster", None, None, None, None, False, False, tmp_path)
    assert parse_genome_properties(path.read_text(encoding="utf-8"))["name"] == "Drosophila mélanogaster"
