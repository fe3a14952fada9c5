"""
Command line front end for genome archive creation.

    genome-importer create --output-dir out --genome-id hg_test --name "Test genome" \
        --sequence-input genome.fa.gz
    genome-importer inspect out/hg_test.genome
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from archive_utils.manifest import format_genome_properties
from archive_utils.utils import ArchiveError, default_archive_filename, read_genome_archive
from core import configure_logging, create_genome_archive
from sequence_utils.fasta_splitter import MaximumContigsError


class _StderrProgress:
    def __init__(self):
        self.total = 0

    def fire_progress_change(self, increment: int) -> None:
        self.total = min(100, self.total + increment)
        print(f"\rprogress: {self.total:3d}%", end="", file=sys.stderr, flush=True)


def parse_args(argv: List[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="genome-importer",
        description="Build genome archives from FASTA sequence input.",
    )
    p.add_argument("--log-level", default=None, help="Logging level (default: $LOG_LEVEL or INFO)")
    sub = p.add_subparsers(dest="command", required=True)

    c = sub.add_parser("create", help="Create a genome archive")
    c.add_argument("--output-dir", required=True, type=Path, help="Directory receiving the archive and sequence folder")
    c.add_argument("--genome-id", required=True, help="Genome id written to the manifest")
    c.add_argument("--name", required=True, help="Display name written to the manifest")
    c.add_argument("--archive-name", default=None, help="Archive file name (default: <genome-id>.genome)")
    c.add_argument("--sequence-location", default=None, help="Sequence folder or URL (default: <genome-id>)")
    c.add_argument("--sequence-input", default=None, help="FASTA file, .gz, .zip of FASTA files, directory or URL")
    c.add_argument("--gene-file", type=Path, default=None, help="Gene annotation file to bundle")
    c.add_argument("--cytoband-file", type=Path, default=None, help="Cytoband file (generated from sequence lengths when omitted)")
    c.add_argument("--alias-file", type=Path, default=None, help="Chromosome alias file to bundle")
    c.add_argument("--sequence-location-override", default=None, help="Sequence location written to the manifest instead of --sequence-location")
    c.add_argument("--cache-dir", type=Path, default=None, help="Root for the temporary working area (default: $GENOME_CACHE_DIR)")
    c.add_argument("--max-contigs", type=int, default=None, help="Maximum records per FASTA stream (default: $MAX_CONTIGS)")
    c.add_argument("--progress", action="store_true", help="Report progress on stderr")

    i = sub.add_parser("inspect", help="Print the manifest and entries of a genome archive")
    i.add_argument("archive", type=Path, help="Genome archive to read")
    return p.parse_args(argv)


def _create(args: argparse.Namespace) -> int:
    monitor = _StderrProgress() if args.progress else None
    archive_name = args.archive_name
    if not archive_name and args.genome_id:
        archive_name = default_archive_filename(args.genome_id)
    try:
        archive = create_genome_archive(
            args.output_dir,
            archive_name,
            args.genome_id,
            args.name,
            args.sequence_location or args.genome_id,
            sequence_input_file=args.sequence_input,
            ref_flat_file=args.gene_file,
            cytoband_file=args.cytoband_file,
            chr_alias_file=args.alias_file,
            sequence_output_location_override=args.sequence_location_override,
            monitor=monitor,
            cache_dir=args.cache_dir,
            max_contigs=args.max_contigs,
        )
    except MaximumContigsError as e:
        print(f"[error] {e}", file=sys.stderr)
        return 2
    finally:
        if monitor is not None:
            print(file=sys.stderr)
    if archive is None:
        print("[error] Invalid input for genome creation", file=sys.stderr)
        return 1
    print(archive)
    return 0


def _inspect(args: argparse.Namespace) -> int:
    try:
        contents = read_genome_archive(args.archive)
    except ArchiveError as e:
        print(f"[error] {e}", file=sys.stderr)
        return 1
    print(format_genome_properties(contents["properties"]), end="")
    for entry in contents["entries"]:
        print(f"  {entry}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(args.log_level)
    if args.command == "create":
        return _create(args)
    return _inspect(args)


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
