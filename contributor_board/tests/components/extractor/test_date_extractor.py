from datetime import datetime

import pytest

from contributor_board.components.extractor.date_extractor import (
    MONTH_NAMES,
    abbreviate_month,
    current_month,
    current_year,
    extract_date,
    input_to_month_year,
    month_year_to_input,
)
from contributor_board.components.extractor.records import DateInfo
from contributor_board.components.extractor.signals import StructuralSignals


def caption(text):
    return f'<div><span dir="auto">Top contributors</span><span dir="auto">{text}</span></div>'


@pytest.mark.parametrize("text, month, year", [
    ("Last updated on December 5, 2025", "Dec", "2025"),
    ("Last updated on Dec 5, 2025", "Dec", "2025"),
    ("Last updated on september 30, 2024", "Sep", "2024"),
    ("Last updated on MAY 1, 2023", "May", "2023"),
    ("Last updated on jan 15, 2026", "Jan", "2026"),
    ("Last updated on Sept 9, 2025", "Sep", "2025"),   # unknown long word: first three letters
    ("Last updated on Brumaire 2, 1799", "Bru", "1799"),
])
def test_extract_date_normalizes_month(text, month, year):
    assert extract_date(caption(text)) == DateInfo(month=month, year=year)


@pytest.mark.parametrize("markup", [
    "",
    "<div>No caption here</div>",
    caption("Last updated recently"),
    caption("Last updated on December 2025"),
    '<div>Last updated on December 5, 2025</div>',   # not inside a text leaf
])
def test_extract_date_absent(markup):
    assert extract_date(markup) is None


def test_extract_date_uses_first_caption():
    markup = caption("Last updated on March 3, 2024") + caption("Last updated on April 4, 2025")
    assert extract_date(markup) == DateInfo(month="Mar", year="2024")


def test_extract_date_reads_configured_text_leaves():
    markup = '<div><span dir="ltr">Last updated on July 14, 2025</span></div>'
    assert extract_date(markup) is None
    assert extract_date(markup, signals=StructuralSignals(text_leaf_dir="ltr")) == DateInfo(month="Jul", year="2025")


def test_abbreviate_month():
    assert abbreviate_month("dec") == "Dec"
    assert abbreviate_month("DEC") == "Dec"
    assert abbreviate_month("November") == "Nov"
    assert abbreviate_month("Octobre") == "Oct"


def test_current_month_and_year():
    now = datetime(2025, 2, 14)
    assert current_month(now) == "Feb"
    assert current_year(now) == "2025"
    assert current_month() in MONTH_NAMES


def test_month_year_to_input():
    now = datetime(2025, 7, 1)
    assert month_year_to_input("Dec", "2025", now) == "2025-12"
    assert month_year_to_input("Jan", "2024", now) == "2024-01"
    assert month_year_to_input("Foo", "2024", now) == "2024-07"
    assert month_year_to_input("Mar", "", now) == "2025-03"


def test_input_to_month_year():
    now = datetime(2025, 7, 1)
    assert input_to_month_year("2025-12", now) == DateInfo(month="Dec", year="2025")
    assert input_to_month_year("2024-01", now) == DateInfo(month="Jan", year="2024")
    assert input_to_month_year("2024-13", now) == DateInfo(month="Jul", year="2024")
    assert input_to_month_year("", now) is None
