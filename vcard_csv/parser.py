"""
Card parser: splits vCard text into cards and extracts a flat record per card.

Matching is deliberately simple pattern matching over single lines. Folded
lines, escaped delimiters and charset parameters are not interpreted.
"""

import re
import logging
from typing import List, Optional

from .models import (
    ContactRecord,
    NAME_FIELDS,
    FULL_NAME,
    MOBILE_PHONE,
    WORK_PHONE,
    HOME_PHONE,
    WORK_EMAIL,
    HOME_EMAIL,
    PHONE_STEM,
    EMAIL_STEM,
    ADDRESS_STEM,
    WORK_ADDRESS,
    HOME_ADDRESS,
    ADDRESS_PARTS,
    ORGANIZATION,
    DEPARTMENT,
    JOB_TITLE,
    NOTES,
    WEBSITE,
    BIRTHDAY,
    OVERFLOW,
    DUPLICATE_POLICIES,
    DEFAULT_DUPLICATE_POLICY,
    overflow_key,
)

logger = logging.getLogger(__name__)

CARD_START = 'BEGIN:VCARD'

# Optional vCard group name, e.g. "item1." in "item1.EMAIL:..."
_GROUP = r'^(?:[A-Za-z0-9-]+\.)?'
_VALUE = r'([^\r\n]*)'
_PART = r'([^;\r\n]*)'

NAME_PATTERN = re.compile(
    _GROUP + r'N:' + _PART
    + r'(?:;' + _PART + r')?'
    + r'(?:;' + _PART + r')?'
    + r'(?:;' + _PART + r')?'
    + r'(?:;' + _VALUE + r')?',
    re.MULTILINE,
)
FULL_NAME_PATTERN = re.compile(_GROUP + r'FN:' + _VALUE, re.MULTILINE)
PHONE_PATTERN = re.compile(_GROUP + r'TEL(;[^:\r\n]*)?:' + _VALUE, re.MULTILINE)
EMAIL_PATTERN = re.compile(_GROUP + r'EMAIL(;[^:\r\n]*)?:' + _VALUE, re.MULTILINE)
ADDRESS_PATTERN = re.compile(
    _GROUP + r'ADR(;[^:\r\n]*)?:' + ';'.join([_PART] * 6) + ';' + _VALUE,
    re.MULTILINE,
)
ORG_PATTERN = re.compile(_GROUP + r'ORG:' + _VALUE, re.MULTILINE)

# Single-occurrence fields: only the first match in a card is used
SINGLE_VALUE_PATTERNS = (
    (JOB_TITLE, re.compile(_GROUP + r'TITLE:' + _VALUE, re.MULTILINE)),
    (NOTES, re.compile(_GROUP + r'NOTE:' + _VALUE, re.MULTILINE)),
    (WEBSITE, re.compile(_GROUP + r'URL:' + _VALUE, re.MULTILINE)),
    (BIRTHDAY, re.compile(_GROUP + r'BDAY:' + _VALUE, re.MULTILINE)),
)

# Qualifier substrings checked in priority order, mapped to canonical keys
PHONE_QUALIFIERS = (
    (('cell', 'mobile'), MOBILE_PHONE),
    (('work',), WORK_PHONE),
    (('home',), HOME_PHONE),
)
EMAIL_QUALIFIERS = (
    (('work',), WORK_EMAIL),
    (('home',), HOME_EMAIL),
)
ADDRESS_QUALIFIERS = (
    (('work',), WORK_ADDRESS),
    (('home',), HOME_ADDRESS),
)


def validate_duplicate_policy(policy: str) -> str:
    """
    Check a duplicate-qualifier policy name.

    Args:
        policy: 'overwrite' or 'overflow'

    Returns:
        The policy, unchanged

    Raises:
        ValueError: If the policy is unknown
    """
    if policy not in DUPLICATE_POLICIES:
        raise ValueError(
            f"Unknown duplicate policy '{policy}' "
            f"(expected one of: {', '.join(DUPLICATE_POLICIES)})"
        )
    return policy


def match_qualifier(params: Optional[str], qualifiers) -> Optional[str]:
    """
    Resolve a type qualifier to its canonical key.

    Args:
        params: Raw parameter text between tag and colon (e.g. ';TYPE=WORK')
        qualifiers: Sequence of (substrings, key) pairs, in priority order

    Returns:
        Canonical key of the first matching qualifier, or None
    """
    if not params:
        return None

    params_lower = params.lower()
    for substrings, key in qualifiers:
        if any(s in params_lower for s in substrings):
            return key
    return None


def split_cards(text: str) -> List[str]:
    """
    Split document text into card blocks.

    Every fragment following a start marker is one card, re-prefixed with
    the marker. Text before the first marker and whitespace-only fragments
    are dropped. End markers play no part in splitting.

    Args:
        text: Raw document text

    Returns:
        List of card texts
    """
    fragments = text.split(CARD_START)
    return [
        CARD_START + fragment
        for fragment in fragments[1:]
        if fragment.strip()
    ]


def _first_value(pattern, card: str) -> Optional[str]:
    match = pattern.search(card)
    if not match:
        return None
    return match.group(1).strip() or None


def _extract_name(card: str, contact: ContactRecord) -> None:
    match = NAME_PATTERN.search(card)
    if not match:
        return

    for key, value in zip(NAME_FIELDS, match.groups()):
        if value and value.strip():
            contact[key] = value.strip()


def _extract_keyed(
    pattern,
    qualifiers,
    stem: str,
    card: str,
    contact: ContactRecord,
    policy: str,
) -> None:
    """Shared extraction for repeatable single-value fields (TEL, EMAIL)."""
    counter = 1
    for match in pattern.finditer(card):
        value = match.group(2).strip()
        if not value:
            continue

        key = match_qualifier(match.group(1), qualifiers)
        if key and policy == OVERFLOW and key in contact:
            key = None

        if key is None:
            key = overflow_key(stem, counter)
            counter += 1

        contact[key] = value


def _extract_addresses(card: str, contact: ContactRecord, policy: str) -> None:
    counter = 1
    taken = set()

    for match in ADDRESS_PATTERN.finditer(card):
        parts = [part.strip() for part in match.groups()[1:]]
        if not any(parts):
            continue

        prefix = match_qualifier(match.group(1), ADDRESS_QUALIFIERS)
        if prefix and policy == OVERFLOW and prefix in taken:
            prefix = None

        if prefix is None:
            prefix = overflow_key(ADDRESS_STEM, counter)
            counter += 1
        taken.add(prefix)

        for suffix, value in zip(ADDRESS_PARTS, parts):
            if value:
                contact[f"{prefix}{suffix}"] = value


def _extract_organization(card: str, contact: ContactRecord) -> None:
    match = ORG_PATTERN.search(card)
    if not match:
        return

    parts = match.group(1).split(';')
    organization = parts[0].strip()
    department = parts[1].strip() if len(parts) > 1 else ''

    if organization:
        contact[ORGANIZATION] = organization
    if department:
        contact[DEPARTMENT] = department


def parse_card(card: str, duplicate_policy: str = DEFAULT_DUPLICATE_POLICY) -> ContactRecord:
    """
    Extract a flat contact record from one card.

    Each field is extracted independently; a field that does not match is
    simply absent from the record.

    Args:
        card: Text of a single card, starting with BEGIN:VCARD
        duplicate_policy: 'overwrite' or 'overflow' for repeated qualifiers

    Returns:
        Contact record (field name -> value)
    """
    validate_duplicate_policy(duplicate_policy)
    contact: ContactRecord = {}

    _extract_name(card, contact)

    full_name = _first_value(FULL_NAME_PATTERN, card)
    if full_name:
        contact[FULL_NAME] = full_name

    _extract_keyed(PHONE_PATTERN, PHONE_QUALIFIERS, PHONE_STEM, card, contact, duplicate_policy)
    _extract_keyed(EMAIL_PATTERN, EMAIL_QUALIFIERS, EMAIL_STEM, card, contact, duplicate_policy)
    _extract_addresses(card, contact, duplicate_policy)
    _extract_organization(card, contact)

    for key, pattern in SINGLE_VALUE_PATTERNS:
        value = _first_value(pattern, card)
        if value:
            contact[key] = value

    return contact


def parse_vcards(text: str, duplicate_policy: str = DEFAULT_DUPLICATE_POLICY) -> List[ContactRecord]:
    """
    Parse all cards in a document.

    Never raises for malformed content. A document without any
    BEGIN:VCARD marker yields no records.

    Args:
        text: Raw document text
        duplicate_policy: 'overwrite' or 'overflow' for repeated qualifiers

    Returns:
        Contact records in card order
    """
    validate_duplicate_policy(duplicate_policy)
    cards = split_cards(text)
    logger.debug(f"Found {len(cards)} cards")
    return [parse_card(card, duplicate_policy) for card in cards]
