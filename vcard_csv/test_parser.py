"""
Tests for the card parser.
"""

import pytest

from .parser import parse_card, parse_vcards, split_cards, match_qualifier, PHONE_QUALIFIERS


SAMPLE = (
    "BEGIN:VCARD\r\n"
    "VERSION:3.0\r\n"
    "N:Doe;John;;;\r\n"
    "FN:John Doe\r\n"
    "ORG:Acme Corp;Research\r\n"
    "TITLE:Engineer\r\n"
    "TEL;TYPE=cell:555-0001\r\n"
    "TEL;TYPE=WORK,VOICE:555-0002\r\n"
    "TEL:555-0003\r\n"
    "TEL:555-0004\r\n"
    "EMAIL;TYPE=INTERNET,HOME:john@example.com\r\n"
    "EMAIL:jd@example.org\r\n"
    "ADR;TYPE=home:;;123 Main St;Springfield;IL;62704;USA\r\n"
    "NOTE:Met at conference\r\n"
    "URL:https://example.com\r\n"
    "BDAY:1980-01-31\r\n"
    "END:VCARD\r\n"
)


def card(*lines):
    return "BEGIN:VCARD\nVERSION:3.0\n" + "\n".join(lines) + "\nEND:VCARD\n"


def test_document_without_marker_yields_nothing():
    assert parse_vcards("") == []
    assert parse_vcards("N:Doe;John\nFN:John Doe\n") == []
    assert parse_vcards("   \n\t") == []


def test_full_sample():
    [record] = parse_vcards(SAMPLE)

    assert record == {
        "lastName": "Doe",
        "firstName": "John",
        "fullName": "John Doe",
        "mobilePhone": "555-0001",
        "workPhone": "555-0002",
        "phone1": "555-0003",
        "phone2": "555-0004",
        "homeEmail": "john@example.com",
        "email1": "jd@example.org",
        "homeStreet": "123 Main St",
        "homeCity": "Springfield",
        "homeRegion": "IL",
        "homePostalCode": "62704",
        "homeCountry": "USA",
        "organization": "Acme Corp",
        "department": "Research",
        "jobTitle": "Engineer",
        "notes": "Met at conference",
        "website": "https://example.com",
        "birthday": "1980-01-31",
    }


def test_structured_name_omits_missing_components():
    [record] = parse_vcards(card("N:Doe;John;;;"))

    assert record["lastName"] == "Doe"
    assert record["firstName"] == "John"
    for key in ("middleName", "prefix", "suffix"):
        assert key not in record


def test_structured_name_all_components_trimmed():
    [record] = parse_vcards(card("N: Smith ; Jane ; Q ; Dr. ; PhD "))

    assert record == {
        "lastName": "Smith",
        "firstName": "Jane",
        "middleName": "Q",
        "prefix": "Dr.",
        "suffix": "PhD",
    }


def test_version_and_display_name_are_not_structured_name():
    [record] = parse_vcards(card("FN:Only Display"))

    assert record == {"fullName": "Only Display"}


def test_untyped_phones_get_overflow_keys_in_order():
    [record] = parse_vcards(card("TEL:111", "TEL:222"))

    assert record == {"phone1": "111", "phone2": "222"}


def test_cell_phone_is_mobile():
    [record] = parse_vcards(card("TEL;TYPE=cell:555-0001"))

    assert record == {"mobilePhone": "555-0001"}
    assert "phone1" not in record


def test_qualified_phone_does_not_consume_counter():
    [record] = parse_vcards(card("TEL:111", "TEL;TYPE=HOME:222", "TEL:333"))

    assert record == {"phone1": "111", "homePhone": "222", "phone2": "333"}


def test_qualifier_priority():
    # mobile beats work, work beats home
    assert match_qualifier(";TYPE=WORK;TYPE=CELL", PHONE_QUALIFIERS) == "mobilePhone"
    assert match_qualifier(";type=home,work", PHONE_QUALIFIERS) == "workPhone"
    assert match_qualifier(";TYPE=MOBILE", PHONE_QUALIFIERS) == "mobilePhone"
    assert match_qualifier(";TYPE=FAX", PHONE_QUALIFIERS) is None
    assert match_qualifier(None, PHONE_QUALIFIERS) is None


def test_vcard21_bare_qualifier():
    [record] = parse_vcards(card("TEL;CELL:0600", "EMAIL;WORK:w@example.com"))

    assert record == {"mobilePhone": "0600", "workEmail": "w@example.com"}


def test_repeated_qualifier_overwrites_by_default():
    [record] = parse_vcards(card("TEL;TYPE=work:111", "TEL;TYPE=work:222"))

    assert record == {"workPhone": "222"}


def test_repeated_qualifier_overflow_policy():
    text = card(
        "TEL;TYPE=work:111",
        "TEL:222",
        "TEL;TYPE=work:333",
        "EMAIL;TYPE=home:a@example.com",
        "EMAIL;TYPE=home:b@example.com",
    )
    [record] = parse_vcards(text, duplicate_policy="overflow")

    assert record == {
        "workPhone": "111",
        "phone1": "222",
        "phone2": "333",
        "homeEmail": "a@example.com",
        "email1": "b@example.com",
    }


def test_unknown_policy_rejected():
    with pytest.raises(ValueError):
        parse_vcards(SAMPLE, duplicate_policy="merge")


def test_empty_values_are_skipped():
    [record] = parse_vcards(card("TEL:", "TEL:  ", "TEL:999", "EMAIL:", "NOTE:  ", "FN:"))

    assert record == {"phone1": "999"}


def test_grouped_properties():
    [record] = parse_vcards(card(
        "item1.EMAIL;type=INTERNET;type=WORK:pro@example.com",
        "item2.URL:https://example.org",
    ))

    assert record == {"workEmail": "pro@example.com", "website": "https://example.org"}


def test_home_address_omits_empty_components():
    [record] = parse_vcards(card("ADR;TYPE=home:;;123 Main St;Springfield;IL;62704;USA"))

    assert record == {
        "homeStreet": "123 Main St",
        "homeCity": "Springfield",
        "homeRegion": "IL",
        "homePostalCode": "62704",
        "homeCountry": "USA",
    }
    assert "homePoBox" not in record
    assert "homeExtAddr" not in record


def test_untyped_addresses_numbered():
    [record] = parse_vcards(card(
        "ADR:PO 1;Suite 2;1 First St;Alpha;;;",
        "ADR;TYPE=work:;;9 Office Rd;Beta;;;",
        "ADR:;;2 Second St;Gamma;;;",
    ))

    assert record == {
        "address1PoBox": "PO 1",
        "address1ExtAddr": "Suite 2",
        "address1Street": "1 First St",
        "address1City": "Alpha",
        "workStreet": "9 Office Rd",
        "workCity": "Beta",
        "address2Street": "2 Second St",
        "address2City": "Gamma",
    }


def test_address_with_too_few_components_ignored():
    [record] = parse_vcards(card("ADR;TYPE=home:;;123 Main St;Springfield"))

    assert record == {}


def test_repeated_address_type_overflow_policy():
    text = card(
        "ADR;TYPE=home:;;1 A St;X;;;",
        "ADR;TYPE=home:;;2 B St;Y;;;",
    )

    [overwritten] = parse_vcards(text)
    [kept] = parse_vcards(text, duplicate_policy="overflow")

    assert overwritten == {"homeStreet": "2 B St", "homeCity": "Y"}
    assert kept == {
        "homeStreet": "1 A St",
        "homeCity": "X",
        "address1Street": "2 B St",
        "address1City": "Y",
    }


def test_organization_without_department():
    [record] = parse_vcards(card("ORG:Acme"))

    assert record == {"organization": "Acme"}


def test_single_value_fields_use_first_match():
    [record] = parse_vcards(card("TITLE:First", "TITLE:Second", "NOTE:a", "NOTE:b"))

    assert record == {"jobTitle": "First", "notes": "a"}


def test_unrecognized_tags_ignored():
    [record] = parse_vcards(card("X-CUSTOM:value", "PHOTO;ENCODING=b:abcd", "FN:Ann"))

    assert record == {"fullName": "Ann"}


def test_split_on_start_marker_only():
    text = (
        "junk before\n"
        "BEGIN:VCARD\nFN:One\n"
        "BEGIN:VCARD\nFN:Two\nEND:VCARD\n"
        "BEGIN:VCARD\nFN:Three"
    )

    cards = split_cards(text)

    assert len(cards) == 3
    assert all(c.startswith("BEGIN:VCARD") for c in cards)
    assert [r["fullName"] for r in parse_vcards(text)] == ["One", "Two", "Three"]


def test_whitespace_only_fragments_dropped():
    assert split_cards("  \nBEGIN:VCARD\n\nBEGIN:VCARD\nFN:A\n") == ["BEGIN:VCARD\nFN:A\n"]


def test_fields_do_not_leak_between_cards():
    text = card("FN:First", "TEL:111") + card("FN:Second")

    first, second = parse_vcards(text)

    assert first == {"fullName": "First", "phone1": "111"}
    assert second == {"fullName": "Second"}


def test_value_stays_on_its_line():
    record = parse_card("BEGIN:VCARD\nN:Doe\nFN:J Doe\n")

    assert record == {"lastName": "Doe", "fullName": "J Doe"}


def test_parsing_is_deterministic():
    first = parse_vcards(SAMPLE * 3)
    second = parse_vcards(SAMPLE * 3)

    assert first == second
    assert len(first) == 3
