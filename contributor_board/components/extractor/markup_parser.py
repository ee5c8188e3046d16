"""
Markup parsing utility using BeautifulSoup.

This module provides the `MarkupParser` class, which wraps BeautifulSoup to turn
the outer markup copied from the Top Contributors widget into a traversable tree
and to offer the two lookups every extractor starts from: the visible text leaves
and the profile links that wrap each contributor card.
"""
import re
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from contributor_board.components.extractor.signals import StructuralSignals
from contributor_board.core.exceptions import MarkupParseError

DEFAULT_PROFILE_DOMAIN = "facebook.com"


class MarkupParser:
    """
    Parses widget markup leniently (malformed tags are auto-closed or ignored).

    Attributes:
        soup (BeautifulSoup): The parsed element tree.
        signals (StructuralSignals): Predicates used to recognise text leaves.
        profile_domain (str): Domain substring identifying contributor profile links.
    """
    def __init__(
        self,
        markup: str,
        signals: Optional[StructuralSignals] = None,
        profile_domain: str = DEFAULT_PROFILE_DOMAIN,
    ):
        """
        Initializes the MarkupParser with the provided markup.

        Args:
            markup (str): The widget's outer markup.
            signals (Optional[StructuralSignals]): Structural predicates; defaults are used if None.
            profile_domain (str): Domain substring that profile link targets contain.

        Raises:
            MarkupParseError: If `markup` is None or not a string, or if BeautifulSoup
                              cannot build a tree from it.
        """
        if markup is None:
            raise MarkupParseError("Markup cannot be None.")
        if not isinstance(markup, str):
            raise MarkupParseError(f"Markup must be a string, got {type(markup).__name__}.")

        self.signals = signals or StructuralSignals()
        self.profile_domain = profile_domain

        try:
            # html.parser is lenient and needs no C extension.
            self.soup = BeautifulSoup(markup, "html.parser")
        except Exception as e:
            raise MarkupParseError(f"Failed to parse markup into an element tree: {e}")

    def leaf_text_nodes(self, root: Optional[Tag] = None) -> List[Tag]:
        """
        Returns the visible text spans under `root` (the whole document by default), in document order.
        """
        return self.signals.text_leaves(root if root is not None else self.soup)

    def profile_links(self) -> List[Tag]:
        """
        Returns every `<a>` whose href contains the profile domain, in document order.
        """
        return self.soup.find_all("a", href=re.compile(re.escape(self.profile_domain)))

    def texts(self, root: Optional[Tag] = None) -> List[str]:
        """Trimmed text of each visible text span under `root`."""
        return [leaf.get_text().strip() for leaf in self.leaf_text_nodes(root)]
