"""
Card and stats-block location heuristics.

A contributor card shows three counters (posts, comments, reactions) in a fixed
visual order, without any machine-readable label. `CardLocator` finds the block
holding them by trying a chain of strategies from most to least specific, and
falls back to scraping the last three counter-shaped texts of the card when no
block can be found at all.
"""
from typing import Callable, List, NamedTuple, Optional, Sequence, Tuple

from bs4 import Tag

from contributor_board.components.extractor.numeric import is_stat_text, normalize
from contributor_board.components.extractor.signals import StructuralSignals
from contributor_board.core.logger import get_logger

logger = get_logger(__name__)

# Upper bound on parent hops when searching for the card around a profile link.
MAX_CARD_ASCENT = 15


class Counters(NamedTuple):
    posts: int = 0
    comments: int = 0
    reactions: int = 0


class CardLocator:
    """
    Locates the card scope and the stats block that belong to a profile link.

    Attributes:
        signals (StructuralSignals): The structural predicates used for every lookup.
    """
    def __init__(self, signals: Optional[StructuralSignals] = None):
        self.signals = signals or StructuralSignals()
        self._strategies: Sequence[Tuple[str, Callable[[Tag], Optional[Tag]]]] = (
            ("stats wrapper", self._from_stats_wrapper),
            ("link scan", self._from_link),
            ("card scope scan", self._from_card_scope),
        )

    def find_card_scope(self, anchor: Tag) -> Tag:
        """
        Returns the element that represents the whole card around `anchor`.

        The nearest ancestor with a list/row/article role wins. Otherwise the first
        ancestor (at most MAX_CARD_ASCENT levels up) whose subtree holds three counter
        values is used, then the anchor's parent, then the anchor itself.
        """
        role_hit = anchor.find_parent(self.signals.is_card_role)
        if role_hit is not None:
            return role_hit

        current = anchor.parent
        for _ in range(MAX_CARD_ASCENT):
            if current is None:
                break
            if len(self.signals.counter_leaves(current)) >= 3:
                return current
            current = current.parent
        return anchor.parent if anchor.parent is not None else anchor

    def find_stats_block(self, anchor: Tag) -> Optional[Tag]:
        """
        Runs the strategy chain and returns the first stats container found, or None.
        """
        for label, strategy in self._strategies:
            container = strategy(anchor)
            if container is not None:
                logger.debug(f"Stats block located via {label}.")
                return container
        return None

    def stat_groups(self, container: Tag) -> List[Tag]:
        return self.signals.stat_groups(container)

    def read_counters(self, container: Tag) -> Optional[Counters]:
        """
        Reads posts, comments and reactions from the first three counter groups, by position.

        Positions without a group or without a value stay 0. Returns None when no
        value at all could be read, which callers treat as a structural miss.
        """
        groups = self.stat_groups(container)
        if len(groups) < 3:
            logger.debug(f"Stats block has {len(groups)} counter groups, expected 3.")

        values = [0, 0, 0]
        found = 0
        for index, group in enumerate(groups[:3]):
            leaves = self.signals.counter_leaves(group)
            if not leaves:
                logger.debug(f"Counter group {index} holds no value.")
                continue
            values[index] = normalize(leaves[0].get_text())
            found += 1

        if not found:
            return None
        return Counters(*values)

    def fallback_counters(self, anchor: Tag, rank_node: Optional[Tag] = None) -> Counters:
        """
        Lowest-confidence read: the last three counter-shaped texts in the card scope.

        The rank span is skipped by identity so the rank digit never lands in a counter.
        """
        scope = self.find_card_scope(anchor)
        texts = [
            leaf.get_text().strip()
            for leaf in self.signals.text_leaves(scope)
            if leaf is not rank_node
        ]
        stat_texts = [text for text in texts if is_stat_text(text)][-3:]
        values = [normalize(text) for text in stat_texts]
        values += [0] * (3 - len(values))
        return Counters(*values)

    # --- strategies ---

    def _qualifying_container(self, scope: Tag) -> Optional[Tag]:
        for container in scope.find_all(self.signals.is_stats_container):
            if len(self.stat_groups(container)) >= 3:
                return container
        return None

    def _from_stats_wrapper(self, anchor: Tag) -> Optional[Tag]:
        wrapper = anchor.find(self.signals.is_stats_wrapper)
        if wrapper is None:
            return None
        containers = wrapper.find_all(self.signals.is_stats_container)
        if not containers:
            return None
        # The wrapper is card-specific, so a partial container inside it is still trusted.
        return self._qualifying_container(wrapper) or containers[0]

    def _from_link(self, anchor: Tag) -> Optional[Tag]:
        return self._qualifying_container(anchor)

    def _from_card_scope(self, anchor: Tag) -> Optional[Tag]:
        return self._qualifying_container(self.find_card_scope(anchor))
