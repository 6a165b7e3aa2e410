import pytest

from normalizers import extract_country, format_date


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("15.03.2024", "2024-03-15"),
        ("03/15/2024", "2024-03-15"),
        ("15/03/2024", "2024-03-15"),
        ("March 15, 2024", "2024-03-15"),
        ("15. März 2024", "2024-03-15"),
        ("15-Mar-24", "2024-03-15"),
        ("2024-03-15", "2024-03-15"),
        ("7 diciembre 2023", "2023-12-07"),
    ],
)
def test_format_date_normalizes_locales(raw, expected):
    assert format_date(raw) == expected


def test_format_date_empty_and_sentinel():
    assert format_date("") == "N/A"
    assert format_date("N/A") == "N/A"


def test_format_date_returns_unparseable_text_unchanged():
    assert format_date("upon signature") == "upon signature"
    assert format_date("garbage") == "garbage"


def test_extract_country_from_city_on_last_line():
    assert extract_country("Widget Parts GmbH\nIndustriestrasse 5\n80331 München") == "Germany"
    assert extract_country("Acme GmbH\nHauptstr. 1\n80331 München") == "Germany"
    assert extract_country("Acme Motors Inc\nDetroit, MI 48201") == "United States"


def test_extract_country_matches_whole_words_only():
    # "Kukatpally" contains "UK" but is not the United Kingdom
    assert extract_country("Plot 12\nKukatpally") == "Kukatpally"


def test_extract_country_falls_back_to_last_line():
    assert extract_country("Some Company\nAtlantis") == "Atlantis"
    assert extract_country("Street 1\n12345") == "N/A"
    assert extract_country("N/A") == "N/A"
    assert extract_country("") == "N/A"
