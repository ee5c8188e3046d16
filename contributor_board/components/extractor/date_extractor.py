"""
"Last updated on <Month> <Day>, <Year>" caption extraction, plus the month/year
helpers used to default and edit the board's date badge.
"""
import re
from datetime import datetime
from typing import Optional

from contributor_board.components.extractor.markup_parser import MarkupParser
from contributor_board.components.extractor.records import DateInfo
from contributor_board.components.extractor.signals import StructuralSignals
from contributor_board.core.logger import get_logger

logger = get_logger(__name__)

CAPTION_PHRASE = "Last updated on"

_CAPTION_PATTERN = re.compile(r"Last updated on\s+(\w+)\s+\d+,\s+(\d{4})", re.IGNORECASE)

MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_MONTH_ABBREVIATIONS = {
    "january": "Jan",
    "february": "Feb",
    "march": "Mar",
    "april": "Apr",
    "may": "May",
    "june": "Jun",
    "july": "Jul",
    "august": "Aug",
    "september": "Sep",
    "october": "Oct",
    "november": "Nov",
    "december": "Dec",
}


def abbreviate_month(word: str) -> str:
    """Short words are kept with a leading capital; full names map to their 3-letter form."""
    if len(word) <= 3:
        return word.capitalize()
    return _MONTH_ABBREVIATIONS.get(word.lower(), word[:3])


def extract_date(markup: str, signals: Optional[StructuralSignals] = None) -> Optional[DateInfo]:
    """
    Finds the widget's "Last updated on" caption and normalizes it.

    Args:
        markup (str): The widget's outer markup.
        signals (Optional[StructuralSignals]): Text-leaf predicates; the caption is looked
            up among the same spans the contributor extractor reads.

    Returns:
        Optional[DateInfo]: Month abbreviation and year, or None when no caption matches.

    Raises:
        MarkupParseError: If the markup cannot be parsed into a tree at all.
    """
    parser = MarkupParser(markup, signals=signals)
    caption = next((text for text in parser.texts() if CAPTION_PHRASE in text), None)
    if caption is None:
        logger.debug("No 'Last updated on' caption found in markup.")
        return None

    match = _CAPTION_PATTERN.search(caption)
    if not match:
        logger.debug(f"Caption {caption!r} does not hold a '<Month> <Day>, <Year>' date.")
        return None

    return DateInfo(month=abbreviate_month(match.group(1)), year=match.group(2))


def current_month(now: Optional[datetime] = None) -> str:
    return MONTH_NAMES[(now or datetime.now()).month - 1]


def current_year(now: Optional[datetime] = None) -> str:
    return str((now or datetime.now()).year)


def month_year_to_input(month: str, year: str, now: Optional[datetime] = None) -> str:
    """
    Formats a month abbreviation and year as a "YYYY-MM" month-picker value.

    Unknown months fall back to the current month, a blank year to the current year.
    """
    if month in MONTH_NAMES:
        month_number = MONTH_NAMES.index(month) + 1
    else:
        month_number = (now or datetime.now()).month
    return f"{year or current_year(now)}-{month_number:02d}"


def input_to_month_year(value: str, now: Optional[datetime] = None) -> Optional[DateInfo]:
    """
    Parses a "YYYY-MM" month-picker value back into a DateInfo.

    Returns None for blank input; an unknown month number falls back to the current month.
    """
    if not value:
        return None
    year, _, month_number = value.partition("-")
    try:
        index = int(month_number) - 1
    except ValueError:
        index = -1
    month = MONTH_NAMES[index] if 0 <= index < len(MONTH_NAMES) else current_month(now)
    return DateInfo(month=month, year=year)
