from keyword_maps import KEYWORD_MAP
from text_locators import LEFT_COLUMN, RIGHT_COLUMN, column_of, scan_block_for_value, scan_line_for_value


TWO_COLUMN_HEADER = """BUYER NAME AND ADDRESS                          SELLER NAME AND ADDRESS
Acme Motors Inc                                 Widget Parts GmbH
100 Main Street                                 Industriestrasse 5
Detroit, MI 48201 USA                           80331 München

Payment Terms: Net 30
"""


def test_scan_line_same_line_value():
    text = "Header\nPayment Terms: Net 45 days\nFooter"
    assert scan_line_for_value(text, KEYWORD_MAP["paymentTerms"]) == "Net 45 days"


def test_scan_line_label_only_reads_next_line():
    text = "Payment Terms:\nNet 45 days\n"
    assert scan_line_for_value(text, ["Payment Terms"]) == "Net 45 days"


def test_scan_line_lookahead_skips_labelled_lines():
    text = "Payment Terms:\nFax: 555-0100\n2% 10 Net 30\n"
    assert scan_line_for_value(text, ["Payment Terms"]) == "2% 10 Net 30"


def test_scan_line_honours_key_priority():
    text = "Unit Price: 3.10\nBase Price: 2.95\n"
    assert scan_line_for_value(text, KEYWORD_MAP["price"]) == "2.95"


def test_scan_line_applies_accept_predicate():
    text = "Contract No: see attached schedule\nOrder No: 88123\n"
    value = scan_line_for_value(text, KEYWORD_MAP["contract"], accept=lambda v: " " not in v)
    assert value == "88123"


def test_scan_line_returns_empty_string_when_missing():
    assert scan_line_for_value("nothing to see", ["Payment Terms"]) == ""


def test_column_of():
    assert column_of("Buyer", 0) == LEFT_COLUMN
    assert column_of("Acme Inc    Seller", 12) == RIGHT_COLUMN
    assert column_of(" " * 35 + "Seller", 35) == RIGHT_COLUMN


def test_two_column_layout_keeps_buyer_and_seller_apart():
    buyer = scan_block_for_value(TWO_COLUMN_HEADER, KEYWORD_MAP["buyer"], max_lines=12)
    seller = scan_block_for_value(TWO_COLUMN_HEADER, KEYWORD_MAP["seller"], max_lines=12)

    assert buyer == "Acme Motors Inc\n100 Main Street\nDetroit, MI 48201 USA"
    assert seller == "Widget Parts GmbH\nIndustriestrasse 5\n80331 München"
    assert "Widget" not in buyer
    assert "Acme" not in seller


def test_block_stops_at_next_section_header():
    text = "Ship To:\nPlant 7\nDock 4\nPayment Terms: Net 30\nMore text\n"
    assert scan_block_for_value(text, ["Ship To"]) == "Plant 7\nDock 4"


def test_block_stops_at_legal_text():
    text = "Ship To:\nPlant 7\nSeller shall honour the warranty below\nDock 4\n"
    assert scan_block_for_value(text, ["Ship To"]) == "Plant 7"


def test_block_strips_duns_numbers():
    text = "SELLER NAME AND ADDRESS\nWidget Parts GmbH\nDUNS: 123456789\n80331 München\n"
    assert scan_block_for_value(text, KEYWORD_MAP["seller"]) == "Widget Parts GmbH\n80331 München"


def test_block_returns_empty_string_when_missing():
    assert scan_block_for_value("nothing here", ["Ship To"]) == ""


def test_block_skips_occurrence_that_runs_into_another_section():
    text = "Ship To: Payment Terms net 30\nDock 1\n\nShip To:\nPlant 9\n"
    assert scan_block_for_value(text, ["Ship To"]) == "Plant 9"
