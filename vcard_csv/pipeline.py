"""
Batch conversion: recognise, read and parse documents, then serialize once.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .exceptions import BatchTooLargeError, UnsupportedFormatError
from .logging_setup import log_progress
from .models import ConversionResult, Document, DEFAULT_DUPLICATE_POLICY
from .parser import CARD_START, parse_vcards, validate_duplicate_policy
from .writer import serialize_records


VCARD_EXTENSION = '.vcf'

# Upper bound on documents per batch (input-size guard only)
MAX_DOCUMENTS = 3000


def is_supported_document(filename: str, text: str) -> bool:
    """
    Check whether a document can be parsed as vCard.

    Args:
        filename: Originating file name
        text: Document text

    Returns:
        True if the name ends in .vcf or the text contains a card
    """
    return filename.lower().endswith(VCARD_EXTENSION) or CARD_START in text


def collect_paths(paths: Iterable[Union[str, Path]]) -> List[Path]:
    """
    Expand directories to the .vcf files they contain.

    Args:
        paths: Files and/or directories, in submission order

    Returns:
        File paths; directory contents are sorted by name
    """
    collected = []
    for path in map(Path, paths):
        if path.is_dir():
            collected.extend(sorted(
                p for p in path.iterdir()
                if p.is_file() and p.suffix.lower() == VCARD_EXTENSION
            ))
        else:
            collected.append(path)
    return collected


def read_document(path: Union[str, Path]) -> Document:
    """
    Read a file as a UTF-8 document.

    Args:
        path: File path

    Returns:
        Document with the file's name and text
    """
    path = Path(path)
    return Document(filename=path.name, text=path.read_text(encoding='utf-8'))


def check_batch_size(count: int, max_documents: int = MAX_DOCUMENTS) -> None:
    """
    Reject batches above the configured bound.

    Raises:
        ValueError: If max_documents is not positive
        BatchTooLargeError: If count exceeds max_documents
    """
    if max_documents <= 0:
        raise ValueError(f"max_documents must be positive, got {max_documents}")
    if count > max_documents:
        raise BatchTooLargeError(count, max_documents)


def parse_documents(
    documents: List[Document],
    duplicate_policy: str = DEFAULT_DUPLICATE_POLICY,
    max_documents: int = MAX_DOCUMENTS,
    logger: Optional[logging.Logger] = None
) -> ConversionResult:
    """
    Parse every document of a batch into one record set.

    Documents are processed in submission order. The first unsupported
    document aborts the whole batch; no partial result is returned.

    Args:
        documents: Documents to convert
        duplicate_policy: 'overwrite' or 'overflow' for repeated qualifiers
        max_documents: Maximum number of documents accepted
        logger: Logger instance

    Returns:
        ConversionResult with all records

    Raises:
        BatchTooLargeError: Too many documents
        UnsupportedFormatError: A document is not a vCard
    """
    logger = logger or logging.getLogger(__name__)
    validate_duplicate_policy(duplicate_policy)
    check_batch_size(len(documents), max_documents)

    records = []
    total = len(documents)

    for i, document in enumerate(documents, 1):
        if not is_supported_document(document.filename, document.text):
            raise UnsupportedFormatError(document.filename)

        parsed = parse_vcards(document.text, duplicate_policy)
        logger.debug(f"{document.filename}: {len(parsed)} contacts")
        records.extend(parsed)

        log_progress(logger, i, total, "Parsing files")

    return ConversionResult(records=records, document_count=total)


def load_documents(
    paths: Iterable[Union[str, Path]],
    max_documents: int = MAX_DOCUMENTS
) -> List[Document]:
    """
    Read all files of a batch.

    Args:
        paths: Files and/or directories
        max_documents: Maximum number of documents accepted

    Returns:
        Documents in submission order

    Raises:
        BatchTooLargeError: Too many files
        OSError: A file could not be read
    """
    files = collect_paths(paths)
    check_batch_size(len(files), max_documents)
    return [read_document(path) for path in files]


def convert_documents(
    documents: List[Document],
    duplicate_policy: str = DEFAULT_DUPLICATE_POLICY,
    max_documents: int = MAX_DOCUMENTS,
    delimiter: str = ',',
    logger: Optional[logging.Logger] = None
) -> str:
    """
    Convert a batch of documents to a single CSV table.

    Args:
        documents: Documents to convert
        duplicate_policy: 'overwrite' or 'overflow' for repeated qualifiers
        max_documents: Maximum number of documents accepted
        delimiter: CSV field delimiter
        logger: Logger instance

    Returns:
        CSV text (header plus one row per contact)
    """
    result = parse_documents(
        documents,
        duplicate_policy=duplicate_policy,
        max_documents=max_documents,
        logger=logger
    )
    return serialize_records(result.records, delimiter=delimiter)
