#!/usr/bin/env python3
"""
CLI Plan Splitter
Splits a survey search PDF into one PDF per survey plan.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from plan_splitter.config.settings import settings
from plan_splitter.document_processing.plan_segmenter import PlanSegmenter, load_source_document
from plan_splitter.exceptions import ParseFailure
from plan_splitter.models.plan_models import SegmentationResult
from plan_splitter.services.plan_storage import (
    InMemoryMetadataStore,
    InMemoryPlanStorage,
    JsonlMetadataStore,
    LocalPlanStorage,
)
from plan_splitter.utils.logger import setup_logging

EXIT_OK = 0
EXIT_PARTIAL = 1
EXIT_PARSE_FAILURE = 2


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        description="Split a survey search PDF into individual plan PDFs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Split into ./plan_storage
  %(prog)s "Survey 100001-1, 100001-2.pdf" --project-id 42

  # Show the plans that would be created
  %(prog)s bundle.pdf --dry-run

  # Also look for plan references in page text
  %(prog)s bundle.pdf --scan-page-text --log-level DEBUG
        """
    )

    parser.add_argument('pdf', type=Path, help='Source PDF to split')
    parser.add_argument(
        '--project-id',
        default='unassigned',
        help='Project the plans belong to (default: unassigned)'
    )
    parser.add_argument(
        '--source-document-id',
        default=None,
        help='Id of the source document record'
    )
    parser.add_argument(
        '--output-dir',
        type=Path,
        default=None,
        help=f'Storage root for plan files (default: {settings.storage.root_dir})'
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Show the plan boundaries without writing any files'
    )
    parser.add_argument(
        '--scan-page-text',
        action='store_true',
        help='Look for plan references in page text when bookmarks and filename give none'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default=settings.logging.level,
        help='Logging level (default: %(default)s)'
    )

    return parser.parse_args(argv)


def print_result(result: SegmentationResult) -> None:
    """Print stored plans and failures as a table"""
    print(f"\n{result.source_filename}: {result.total_pages} pages, strategy={result.strategy.value}")
    print(f"{'Reference':<24} {'Pages':<12} {'Bytes':>10}  Key")
    for plan in result.materialized:
        pages = f"{plan.pages[0]}-{plan.pages[-1]}"
        marker = " (review)" if plan.provenance.value == "heuristic" else ""
        print(f"{plan.reference:<24} {pages:<12} {plan.byte_size:>10}  {plan.storage_key}{marker}")

    if result.failures:
        print(f"\n{len(result.failures)} plan(s) failed:")
        for failure in result.failures:
            print(f"  {failure.reference} (pages {failure.start_page}-{failure.end_page}): {failure.reason}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = parse_arguments(argv)

    setup_logging(
        app_name="plan_splitter",
        log_level=args.log_level,
        log_dir=settings.logging.log_dir,
        json_console=settings.logging.format == "json",
    )
    logger = logging.getLogger("plan_splitter.cli")

    run_settings = settings
    if args.scan_page_text:
        run_settings = settings.model_copy(update={
            "segmentation": settings.segmentation.model_copy(update={"scan_page_text": True})
        })
    logger.info(f"Configuration: {run_settings.get_config_summary()}")

    try:
        content = args.pdf.read_bytes()
    except OSError as e:
        logger.error(f"Cannot read {args.pdf}: {e}")
        return EXIT_PARSE_FAILURE

    if args.dry_run:
        storage, metadata_store = InMemoryPlanStorage(), InMemoryMetadataStore()
    else:
        root_dir = args.output_dir or settings.storage.root_dir
        storage = LocalPlanStorage(root_dir)
        metadata_store = JsonlMetadataStore(Path(root_dir) / settings.storage.metadata_file)

    segmenter = PlanSegmenter(storage, metadata_store, run_settings)

    try:
        if args.dry_run:
            source = load_source_document(
                content, args.pdf.name, run_settings.segmentation.max_file_size_mb
            )
            strategy, boundaries = segmenter.plan_boundaries(source)
            print(f"\n{source.filename}: {source.page_count} pages, strategy={strategy.value}")
            for boundary in boundaries:
                print(
                    f"{boundary.reference:<24} {boundary.start_page}-{boundary.end_page:<8} "
                    f"{boundary.provenance.value}"
                )
            return EXIT_OK

        result = segmenter.segment(
            content,
            args.pdf.name,
            project_id=args.project_id,
            source_document_id=args.source_document_id,
        )
    except ParseFailure as e:
        logger.error(f"Could not segment {args.pdf}: {e}")
        return EXIT_PARSE_FAILURE

    print_result(result)
    return EXIT_OK if result.is_complete else EXIT_PARTIAL


if __name__ == "__main__":
    sys.exit(main())
