#!/usr/bin/env python3
"""
PhenoGO command line.

Usage:
    phenogo run --keyword stomatal --obo go-basic.obo --gaf tair.gaf.gz \\
        --xref Arabidopsis_thaliana.gene_info --output results/
    phenogo run --config run.yaml --no-fetch
    phenogo verify results/phenotype_genes.tsv
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .validators import CLIValidator
from ..core.config import Config
from ..core.exceptions import ConfigurationError, PhenoGOException
from ..core.logging_config import configure_logging, setup_structured_logging
from ..core.pipeline_orchestrator import PhenotypePipeline
from ..core.report_writer import verify_checksum
from .. import __version__

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='phenogo',
        description='Phenotype keyword -> GO pathway gene report',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Full run with NCBI metadata
  phenogo run --keyword stomatal --obo go-basic.obo --gaf tair.gaf.gz \\
      --xref Arabidopsis_thaliana.gene_info --gene-id-column synonym --output results/

  # Offline run from a YAML run file
  phenogo run --config run.yaml --no-fetch

  # Check that a table was not altered
  phenogo verify results/phenotype_genes.tsv
        """
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    subparsers = parser.add_subparsers(dest='command')

    run = subparsers.add_parser('run', help='Run the pipeline')
    run.add_argument('--config', '-c', type=str, help='YAML run file')
    run.add_argument('--env', type=str, choices=['development', 'production', 'testing'],
                     help='Configuration environment (default: PHENOGO_ENV or development)')
    run.add_argument('--keyword', '-k', type=str, help='Phenotype keyword (literal, case-sensitive)')
    run.add_argument('--category', type=str,
                     help='GO namespace (default: biological_process)')
    run.add_argument('--obo', dest='obo_path', type=str, help='Ontology OBO file')
    run.add_argument('--gaf', dest='gaf_path', type=str, help='GO annotation file (GAF 2.x, may be gzipped)')
    run.add_argument('--xref', dest='xref_path', type=str, help='Cross-reference table (e.g. NCBI gene_info)')
    run.add_argument('--xref-primary-column', type=str, help='Primary id column of the cross-reference table')
    run.add_argument('--xref-secondary-column', type=str, help='Secondary id column of the cross-reference table')
    run.add_argument('--gene-id-column', type=str, choices=['db_object_id', 'db_object_symbol', 'synonym'],
                     help='GAF column used as the primary gene id')
    run.add_argument('--taxon', type=str, help='Keep only annotations of this NCBI taxon (e.g. 3702)')
    run.add_argument('--exclude-evidence', nargs='+', metavar='CODE',
                     help='Evidence codes to drop (e.g. IEA)')
    run.add_argument('--include-ancestors', action='store_true',
                     help='Also expand to the ancestors of the matched terms')
    run.add_argument('--output', '-o', dest='output_dir', type=str, help='Output directory (default: results)')
    run.add_argument('--no-fetch', action='store_true', help='Skip the remote metadata lookup')
    run.add_argument('--no-figures', action='store_true', help='Skip figure rendering')
    run.add_argument('--verbose', '-v', action='store_true', help='Debug logging')

    verify = subparsers.add_parser('verify', help='Verify a table against its checksum file')
    verify.add_argument('table', type=str, help='Association table')
    verify.add_argument('--checksum', type=str,
                        help='Checksum file (default: the first <table>.<algorithm> found, sha256 first)')

    return parser


def _overrides(args: argparse.Namespace) -> dict:
    return {
        'keyword': args.keyword,
        'category': args.category,
        'obo_path': args.obo_path,
        'gaf_path': args.gaf_path,
        'xref_path': args.xref_path,
        'xref_primary_column': args.xref_primary_column,
        'xref_secondary_column': args.xref_secondary_column,
        'gene_id_column': args.gene_id_column,
        'taxon': args.taxon,
        'excluded_evidence': args.exclude_evidence,
        'include_ancestors': True if args.include_ancestors else None,
        'output_dir': args.output_dir,
        'fetch_metadata': False if args.no_fetch else None,
        'render_figures': False if args.no_figures else None,
        'log_level': 'DEBUG' if args.verbose else None,
    }


def _setup_logging(config: Config) -> None:
    if config.structured_logging:
        setup_structured_logging(log_level=config.log_level, log_file=config.log_file)
    else:
        configure_logging(log_level=config.log_level, log_file=config.log_file)


def run_command(args: argparse.Namespace) -> int:
    try:
        config = Config(env=args.env, config_file=args.config, overrides=_overrides(args))
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    _setup_logging(config)

    is_valid, errors = CLIValidator().validate_run(
        config.keyword, config.obo_path, config.gaf_path, config.xref_path, config.category
    )
    if not is_valid:
        for error in errors:
            logger.error(error)
        return 1

    try:
        summary = PhenotypePipeline(config).run()
    except PhenoGOException as e:
        logger.error(f"Run failed: {e}")
        return 1

    print(f"\nKeyword '{summary.keyword}': {summary.matched_terms} matched terms, "
          f"{summary.expanded_terms} after expansion, {summary.pathways} pathways")
    if summary.multi_root_pathways:
        print(f"Multi-root pathways: {', '.join(summary.multi_root_pathways)}")
    print(f"{summary.associations} associations ({summary.unique_associations} unique pathway/term/gene)")
    if summary.fetch_status is not None:
        status = summary.fetch_status
        print(f"Metadata: {status.successful}/{status.requested} genes fetched, {status.failed} failed")
    print(f"Table: {summary.outputs.get('table')}")
    print(f"Checksum: {summary.checksum}")
    return 0


def verify_command(args: argparse.Namespace) -> int:
    table = Path(args.table)
    if not table.exists():
        print(f"Table not found: {table}", file=sys.stderr)
        return 1
    checksum_path = Path(args.checksum) if args.checksum else None
    if checksum_path is not None and not checksum_path.exists():
        print(f"Checksum file not found: {checksum_path}", file=sys.stderr)
        return 1

    try:
        ok = verify_checksum(table, checksum_path)
    except (OSError, ValueError) as e:
        print(f"Cannot verify {table}: {e}", file=sys.stderr)
        return 1

    print(f"{table}: {'OK' if ok else 'FAILED'}")
    return 0 if ok else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == 'run':
        return run_command(args)
    if args.command == 'verify':
        return verify_command(args)

    parser.print_help()
    return 1


if __name__ == '__main__':
    sys.exit(main())
