"""
Extractor component for the Contributor Board service.

This sub-package turns the markup of a Top Contributors widget into structured
data: ten ranked contributor records and the "Last updated on" caption date.
"""
from .records import ContributorRecord, ContributorBoard, DateInfo, BADGE_PHRASES, BOARD_SIZE
from .numeric import normalize
from .signals import StructuralSignals
from .markup_parser import MarkupParser
from .card_locator import CardLocator, Counters
from .contributor_extractor import ContributorExtractor, extract
from .date_extractor import extract_date
from .extractor_manager import ExtractorManager, ParsedBoard

__all__ = [
    "ContributorRecord",
    "ContributorBoard",
    "DateInfo",
    "BADGE_PHRASES",
    "BOARD_SIZE",
    "normalize",
    "StructuralSignals",
    "MarkupParser",
    "CardLocator",
    "Counters",
    "ContributorExtractor",
    "extract",
    "extract_date",
    "ExtractorManager",
    "ParsedBoard",
]
