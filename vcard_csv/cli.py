"""
Command-line interface for the vCard to CSV converter.
"""

import sys
import argparse
from typing import List, Optional

from . import __version__
from .exceptions import ConverterError
from .logging_setup import setup_logger, log_stats
from .models import DUPLICATE_POLICIES, DEFAULT_DUPLICATE_POLICY, FULL_NAME, FIRST_NAME, LAST_NAME
from .pipeline import MAX_DOCUMENTS, load_documents, parse_documents
from .writer import write_csv, write_json, calculate_field_stats, collect_columns


def print_banner(logger):
    """Print startup banner."""
    logger.info("═" * 40)
    logger.info(f"  VCARD TO CSV CONVERTER v{__version__}")
    logger.info("═" * 40)
    logger.info("")


def print_summary(result, logger):
    """Print conversion summary statistics."""
    logger.info("")
    logger.info("═" * 40)
    logger.info("  CONVERSION COMPLETE")
    logger.info("═" * 40)
    logger.info(
        f"Processed {result.contact_count} contacts from {result.document_count} "
        f"{'file' if result.document_count == 1 else 'files'}"
    )
    logger.info(f"Columns: {len(collect_columns(result.records))}")
    log_stats(logger, calculate_field_stats(result.records), title="Field Statistics")


def print_sample_contacts(records, logger, limit=5):
    """Print sample contacts."""
    logger.info("")
    logger.info(f"Sample Contacts (first {min(limit, len(records))}):")

    for i, record in enumerate(records[:limit], 1):
        name = record.get(FULL_NAME) or " ".join(
            record[key] for key in (FIRST_NAME, LAST_NAME) if key in record
        ) or "N/A"
        logger.info(f"{i}. {name} ({len(record)} fields)")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog='vcard-csv',
        description='Convert vCard (.vcf) contact files into a single CSV table',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        'paths',
        nargs='+',
        help='vCard files or directories containing .vcf files'
    )

    parser.add_argument(
        '--output', '-o',
        choices=['csv', 'json'],
        default='csv',
        help='Output format (default: csv)'
    )

    parser.add_argument(
        '--output-dir',
        default='output',
        help='Output directory (default: output)'
    )

    parser.add_argument(
        '--prefix',
        default='contacts',
        help='Output filename prefix (default: contacts)'
    )

    parser.add_argument(
        '--duplicates',
        choices=DUPLICATE_POLICIES,
        default=DEFAULT_DUPLICATE_POLICY,
        help='Repeated phone/email/address types: overwrite the earlier value '
             'or move the later one to a numbered column (default: overwrite)'
    )

    parser.add_argument(
        '--max-files',
        type=int,
        default=MAX_DOCUMENTS,
        help=f'Maximum number of files per batch (default: {MAX_DOCUMENTS})'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARN', 'ERROR'],
        default='INFO',
        help='Logging level (default: INFO)'
    )

    parser.add_argument(
        '--log-dir',
        default='logs',
        help='Log file directory (default: logs)'
    )

    return parser


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    logger = setup_logger(level=args.log_level, log_dir=args.log_dir)

    print_banner(logger)

    logger.info(f"Inputs: {len(args.paths)}")
    logger.info(f"Output format: {args.output}")
    logger.info(f"Duplicate types: {args.duplicates}")
    logger.info("")

    try:
        logger.info("Reading files...")
        documents = load_documents(args.paths, max_documents=args.max_files)
        logger.info(f"Read {len(documents)} files")

        result = parse_documents(
            documents,
            duplicate_policy=args.duplicates,
            max_documents=args.max_files,
            logger=logger
        )

        if result.contact_count == 0:
            logger.warning("No contacts found in the given files; nothing to export")
            return 0

        if args.output == 'json':
            output_path = write_json(
                result.records,
                [d.filename for d in documents],
                output_dir=args.output_dir,
                prefix=args.prefix
            )
            logger.info(f"JSON output saved: {output_path}")
        else:
            output_path = write_csv(result.records, output_dir=args.output_dir, prefix=args.prefix)
            logger.info(f"CSV output saved: {output_path}")

        print_summary(result, logger)
        print_sample_contacts(result.records, logger)

        logger.info("")
        logger.info("Conversion completed successfully")

        return 0

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130

    except ConverterError as e:
        logger.error(f"Error processing files: {e}")
        return 1

    except Exception as e:
        logger.error(f"Conversion failed: {e}", exc_info=True)
        return 1


if __name__ == '__main__':
    sys.exit(main())
