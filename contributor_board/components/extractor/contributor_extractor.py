"""
Top Contributors extraction.

`ContributorExtractor.extract` turns the outer markup of the widget into exactly
ten `ContributorRecord`s, one per rank. Each contributor card is wrapped in a
profile link; a link only counts as a card when it carries both a rank number and
an inline avatar image, since either signal alone shows up in unrelated parts of
the page. Fields that cannot be recovered stay empty, and ranks that were never
seen are filled with placeholder records.
"""
import re
from operator import attrgetter
from typing import List, Optional

from bs4 import Tag

from contributor_board.components.extractor.card_locator import CardLocator, Counters
from contributor_board.components.extractor.markup_parser import DEFAULT_PROFILE_DOMAIN, MarkupParser
from contributor_board.components.extractor.records import BADGE_PHRASES, BOARD_SIZE, ContributorRecord
from contributor_board.components.extractor.signals import StructuralSignals, is_rank_marker, parse_rank
from contributor_board.core.logger import get_logger

logger = get_logger(__name__)

_DIGITS_ONLY = re.compile(r"\d+", re.ASCII)
_LEADING_UPPERCASE = re.compile(r"[A-Z]")

# Texts containing these are captions ("Joined 3 years ago", "Top contributor"), never names.
NAME_EXCLUDED_WORDS = ("joined", "contributor", "ago")
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50


def looks_like_name(text: str) -> bool:
    """Heuristic for a display name: 3..49 chars, not a number, no caption words, leading capital."""
    if not NAME_MIN_LENGTH < len(text) < NAME_MAX_LENGTH:
        return False
    if _DIGITS_ONLY.fullmatch(text):
        return False
    lowered = text.lower()
    if any(word in lowered for word in NAME_EXCLUDED_WORDS):
        return False
    return bool(_LEADING_UPPERCASE.match(text))


def match_badge(text: str) -> Optional[str]:
    """Returns the badge phrase contained in `text` (case-insensitive), or None."""
    lowered = text.strip().lower()
    for phrase in BADGE_PHRASES:
        if phrase in lowered:
            return phrase
    return None


class ContributorExtractor:
    """
    Extracts the ranked contributor list from widget markup.

    Attributes:
        signals (StructuralSignals): Structural predicates shared with the locator.
        profile_domain (str): Domain substring of the profile links that wrap each card.
        locator (CardLocator): Finds card scopes and stats blocks.
    """
    def __init__(self, signals: Optional[StructuralSignals] = None, profile_domain: str = DEFAULT_PROFILE_DOMAIN):
        self.signals = signals or StructuralSignals()
        self.profile_domain = profile_domain
        self.locator = CardLocator(self.signals)

    def extract(self, markup: str) -> List[ContributorRecord]:
        """
        Extracts exactly ten contributor records ordered by rank.

        Args:
            markup (str): The widget's outer markup.

        Returns:
            List[ContributorRecord]: Records for ranks 1..10; unseen ranks are placeholders.

        Raises:
            MarkupParseError: If the markup cannot be parsed into a tree at all.
        """
        parser = MarkupParser(markup, signals=self.signals, profile_domain=self.profile_domain)

        records: List[ContributorRecord] = []
        for anchor in self._candidate_cards(parser):
            record = self._extract_record(parser, anchor)
            if record is not None:
                records.append(record)

        board = self._complete_board(records)
        logger.info(f"Extracted {len(records)} contributor cards; {sum(1 for r in board if r.name)} of {BOARD_SIZE} ranks named.")
        return board

    def _candidate_cards(self, parser: MarkupParser) -> List[Tag]:
        candidates = []
        for link in parser.profile_links():
            has_rank = any(is_rank_marker(text) for text in parser.texts(link))
            has_avatar = link.find(self.signals.is_avatar_image) is not None
            if has_rank and has_avatar:
                candidates.append(link)
        logger.debug(f"{len(candidates)} profile links qualify as contributor cards.")
        return candidates

    def _extract_record(self, parser: MarkupParser, anchor: Tag) -> Optional[ContributorRecord]:
        leaves = parser.leaf_text_nodes(anchor)

        rank_node = None
        rank = None
        for leaf in leaves:
            rank = parse_rank(leaf.get_text())
            if rank is not None:
                rank_node = leaf
                break
        if rank_node is None:
            logger.debug("Skipping candidate card without a canonical rank number.")
            return None

        texts = [leaf.get_text().strip() for leaf in leaves if leaf is not rank_node]
        name = next((text for text in texts if looks_like_name(text)), "")
        badge = next((found for found in map(match_badge, texts) if found), None)
        counters = self._extract_counters(anchor, rank, rank_node)

        logger.debug(
            f"Rank {rank}: name={name!r}, badge={badge}, posts={counters.posts}, "
            f"comments={counters.comments}, reactions={counters.reactions}"
        )
        return ContributorRecord(
            rank=rank,
            name=name,
            avatar_url=self._avatar_reference(anchor),
            posts=counters.posts,
            comments=counters.comments,
            reactions=counters.reactions,
            badge=badge,
        )

    @staticmethod
    def _avatar_reference(anchor: Tag) -> str:
        svg = anchor.find("svg")
        if svg is None:
            return ""
        image = svg.find("image")
        if image is None:
            return ""
        return image.get("xlink:href") or image.get("href") or ""

    def _extract_counters(self, anchor: Tag, rank: int, rank_node: Tag) -> Counters:
        container = self.locator.find_stats_block(anchor)
        counters = self.locator.read_counters(container) if container is not None else None
        if counters is not None:
            return counters

        counters = self.locator.fallback_counters(anchor, rank_node)
        logger.warning(
            f"Rank {rank}: no stats block found, using trailing numbers "
            f"posts={counters.posts}, comments={counters.comments}, reactions={counters.reactions}"
        )
        return counters

    @staticmethod
    def _complete_board(records: List[ContributorRecord]) -> List[ContributorRecord]:
        # sorted() is stable, so the first card in document order wins a rank collision.
        by_rank = {}
        for record in sorted(records, key=attrgetter("rank")):
            if record.rank in by_rank:
                logger.debug(f"Discarding duplicate card for rank {record.rank}.")
                continue
            by_rank[record.rank] = record
        return [
            by_rank[rank] if rank in by_rank else ContributorRecord.placeholder(rank)
            for rank in range(1, BOARD_SIZE + 1)
        ]


def extract(markup: str) -> List[ContributorRecord]:
    """Extracts ten contributor records with the default widget signals."""
    return ContributorExtractor().extract(markup)
