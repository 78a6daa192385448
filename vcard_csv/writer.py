"""
Table serializer and output file writers (CSV and JSON).
"""

import io
import csv
import json
from pathlib import Path
from datetime import datetime, timezone
from typing import List, Dict, Any, Iterable
from collections import Counter

from .models import ContactRecord, has_name, has_phone, has_email, has_address


def collect_columns(records: Iterable[ContactRecord]) -> List[str]:
    """
    Compute the union of field names in first-seen order.

    Args:
        records: Contact records, in record-set order

    Returns:
        Header column names
    """
    # dict preserves insertion order and ignores repeats
    columns: Dict[str, None] = {}
    for record in records:
        for key in record:
            columns.setdefault(key, None)
    return list(columns)


def build_rows(records: Iterable[ContactRecord], columns: List[str]) -> List[List[str]]:
    """
    Build one rectangular row per record.

    Args:
        records: Contact records
        columns: Header column names

    Returns:
        Rows with exactly len(columns) cells; absent fields are empty strings
    """
    return [[record.get(column, '') for column in columns] for record in records]


def serialize_records(records: List[ContactRecord], delimiter: str = ',') -> str:
    """
    Render a record set as delimited text.

    Cells containing the delimiter, a quote or a line break are quoted with
    inner quotes doubled; everything else is written as is.

    Args:
        records: Contact records, in record-set order
        delimiter: Field delimiter

    Returns:
        Header line followed by one line per record, or an empty string
        when no record carries any field
    """
    columns = collect_columns(records)
    if not columns:
        return ''

    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=delimiter, quoting=csv.QUOTE_MINIMAL)
    writer.writerow(columns)

    for row in build_rows(records, columns):
        if any(row):
            writer.writerow(row)
        else:
            # csv quotes a lone empty field; an all-empty row is just delimiters
            buffer.write(delimiter * (len(columns) - 1) + writer.dialect.lineterminator)

    return buffer.getvalue()


def calculate_field_stats(records: List[ContactRecord]) -> Dict[str, Any]:
    """
    Calculate field coverage statistics.

    Args:
        records: Contact records

    Returns:
        Field statistics dictionary
    """
    field_counts = Counter()
    for record in records:
        field_counts.update(record.keys())

    total = len(records)
    top_fields = [
        {
            "field": name,
            "count": count,
            "percentage": f"{(count / total * 100):.1f}" if total > 0 else "0.0"
        }
        for name, count in field_counts.most_common(10)
    ]

    return {
        "totalContacts": total,
        "uniqueFields": len(field_counts),
        "withNames": sum(1 for r in records if has_name(r)),
        "withPhones": sum(1 for r in records if has_phone(r)),
        "withEmails": sum(1 for r in records if has_email(r)),
        "withAddresses": sum(1 for r in records if has_address(r)),
        "topFields": top_fields,
    }


def _output_path(output_dir: str, prefix: str, extension: str) -> Path:
    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S-%f")[:-3] + "Z"
    return out_dir / f"{prefix}-{timestamp}.{extension}"


def write_csv(
    records: List[ContactRecord],
    output_dir: str = "output",
    prefix: str = "contacts",
    delimiter: str = ','
) -> str:
    """
    Write contacts to CSV file.

    Args:
        records: Contact records
        output_dir: Output directory
        prefix: Filename prefix
        delimiter: Field delimiter

    Returns:
        Path to output file
    """
    output_path = _output_path(output_dir, prefix, "csv")

    # newline='' keeps the csv module's \r\n line endings intact
    with open(output_path, 'w', newline='', encoding='utf-8') as f:
        f.write(serialize_records(records, delimiter=delimiter))

    return str(output_path)


def write_json(
    records: List[ContactRecord],
    sources: List[str],
    output_dir: str = "output",
    prefix: str = "contacts"
) -> str:
    """
    Write contacts to JSON file.

    Args:
        records: Contact records
        sources: Names of the converted documents
        output_dir: Output directory
        prefix: Filename prefix

    Returns:
        Path to output file
    """
    output_path = _output_path(output_dir, prefix, "json")

    output = {
        "metadata": {
            "convertedAt": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "sources": list(sources),
            "totalContacts": len(records),
            "columns": collect_columns(records),
            "fieldStats": calculate_field_stats(records)
        },
        "contacts": records
    }

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(output, f, indent=2, ensure_ascii=False)

    return str(output_path)
