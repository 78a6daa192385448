"""
Data models and field vocabulary for the vCard converter.
"""

from dataclasses import dataclass, field
from typing import Dict, List

# A parsed contact: field name -> non-empty string value
ContactRecord = Dict[str, str]

# Structured name (N) components, in positional order
LAST_NAME = 'lastName'
FIRST_NAME = 'firstName'
MIDDLE_NAME = 'middleName'
PREFIX = 'prefix'
SUFFIX = 'suffix'
NAME_FIELDS = (LAST_NAME, FIRST_NAME, MIDDLE_NAME, PREFIX, SUFFIX)

FULL_NAME = 'fullName'

# Qualified phone and email keys
MOBILE_PHONE = 'mobilePhone'
WORK_PHONE = 'workPhone'
HOME_PHONE = 'homePhone'
WORK_EMAIL = 'workEmail'
HOME_EMAIL = 'homeEmail'

# Overflow stems, suffixed with a 1-based counter (phone1, email2, address1...)
PHONE_STEM = 'phone'
EMAIL_STEM = 'email'
ADDRESS_STEM = 'address'

# Address key prefixes for qualified addresses
WORK_ADDRESS = 'work'
HOME_ADDRESS = 'home'

# Address (ADR) component suffixes, in positional order
ADDRESS_PARTS = (
    'PoBox',
    'ExtAddr',
    'Street',
    'City',
    'Region',
    'PostalCode',
    'Country',
)

ORGANIZATION = 'organization'
DEPARTMENT = 'department'
JOB_TITLE = 'jobTitle'
NOTES = 'notes'
WEBSITE = 'website'
BIRTHDAY = 'birthday'

# What to do when a qualifier repeats within one card
OVERWRITE = 'overwrite'
OVERFLOW = 'overflow'
DUPLICATE_POLICIES = (OVERWRITE, OVERFLOW)
DEFAULT_DUPLICATE_POLICY = OVERWRITE


def overflow_key(stem: str, counter: int) -> str:
    """Build a numbered overflow key such as ``phone2``."""
    return f"{stem}{counter}"


def has_name(record: ContactRecord) -> bool:
    """Check if record carries any kind of name."""
    return any(key in record for key in NAME_FIELDS + (FULL_NAME,))


def has_phone(record: ContactRecord) -> bool:
    """Check if record carries at least one phone number."""
    return any(
        key in (MOBILE_PHONE, WORK_PHONE, HOME_PHONE) or _is_overflow(key, PHONE_STEM)
        for key in record
    )


def has_email(record: ContactRecord) -> bool:
    """Check if record carries at least one email address."""
    return any(
        key in (WORK_EMAIL, HOME_EMAIL) or _is_overflow(key, EMAIL_STEM)
        for key in record
    )


def has_address(record: ContactRecord) -> bool:
    """Check if record carries any address component."""
    return any(key.endswith(ADDRESS_PARTS) for key in record)


def _is_overflow(key: str, stem: str) -> bool:
    return key.startswith(stem) and key[len(stem):].isdigit()


@dataclass
class Document:
    """Raw text submitted for conversion."""
    filename: str
    text: str


@dataclass
class ConversionResult:
    """Ordered record set produced from one batch of documents."""
    records: List[ContactRecord] = field(default_factory=list)
    document_count: int = 0

    @property
    def contact_count(self) -> int:
        """Number of parsed contacts."""
        return len(self.records)
