"""
vCard to CSV converter.
Parses contact cards into flat records and exports them as one table.
"""

__version__ = "1.0.0"

from .models import ContactRecord, Document, ConversionResult
from .exceptions import ConverterError, UnsupportedFormatError, BatchTooLargeError
from .parser import parse_vcards, parse_card, split_cards
from .writer import serialize_records, write_csv, write_json
from .pipeline import parse_documents, convert_documents, read_document, load_documents

__all__ = [
    "ContactRecord",
    "Document",
    "ConversionResult",
    "ConverterError",
    "UnsupportedFormatError",
    "BatchTooLargeError",
    "parse_vcards",
    "parse_card",
    "split_cards",
    "serialize_records",
    "write_csv",
    "write_json",
    "parse_documents",
    "convert_documents",
    "read_document",
    "load_documents",
]
