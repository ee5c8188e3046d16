"""
Structural signal predicates for the Top Contributors widget markup.

The widget has no stable schema: its class names are obfuscated build artefacts
and its nesting drifts between releases. Every guess about which element plays
which role lives here, behind small named predicates, so the traversal code in
`card_locator` and `contributor_extractor` never mentions a class name.

The marker class names can be overridden from configuration under
`components.extractor.signals` when the widget is rebuilt.
"""
import re
from typing import TYPE_CHECKING, Iterable, List, Optional

from bs4 import Tag

if TYPE_CHECKING:
    from contributor_board.core.config import ConfigurationManager

_DIGITS = re.compile(r"\d+", re.ASCII)

MIN_RANK = 1
MAX_RANK = 10


def is_rank_marker(text: str) -> bool:
    """True when the whole trimmed text is an integer between 1 and 10 (used to qualify a card)."""
    candidate = (text or "").strip()
    return bool(_DIGITS.fullmatch(candidate)) and MIN_RANK <= int(candidate) <= MAX_RANK


def parse_rank(text: str) -> Optional[int]:
    """
    Returns the rank when the trimmed text is exactly the canonical digits of 1..10.

    Stricter than `is_rank_marker`: "01" qualifies a card but is not read as a rank.
    """
    candidate = (text or "").strip()
    if not is_rank_marker(candidate):
        return None
    rank = int(candidate)
    return rank if str(rank) == candidate else None


def _class_list(tag: Tag) -> List[str]:
    classes = tag.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    return list(classes)


class StructuralSignals:
    """
    Named predicates over widget elements.

    Attributes:
        text_leaf_dir (str): `dir` attribute value of the spans that hold visible text.
        stats_wrapper_class (str): Class of the wrapper around one card's counters.
        stats_container_class (str): Class of the container whose children are the counter groups.
        stat_group_class (str): Class fragment carried by each counter group.
        stat_value_class (str): Class of the box holding a counter's number.
        card_roles (tuple): ARIA roles marking one contributor row.
    """
    DEFAULT_TEXT_LEAF_DIR = "auto"
    DEFAULT_STATS_WRAPPER_CLASS = "xamitd3"
    DEFAULT_STATS_CONTAINER_CLASS = "x1qughib"
    DEFAULT_STAT_GROUP_CLASS = "x1q0g3np"
    DEFAULT_STAT_VALUE_CLASS = "xyqm7xq"
    DEFAULT_CARD_ROLES = ("listitem", "row", "article")

    def __init__(
        self,
        text_leaf_dir: str = DEFAULT_TEXT_LEAF_DIR,
        stats_wrapper_class: str = DEFAULT_STATS_WRAPPER_CLASS,
        stats_container_class: str = DEFAULT_STATS_CONTAINER_CLASS,
        stat_group_class: str = DEFAULT_STAT_GROUP_CLASS,
        stat_value_class: str = DEFAULT_STAT_VALUE_CLASS,
        card_roles: Iterable[str] = DEFAULT_CARD_ROLES,
    ):
        self.text_leaf_dir = text_leaf_dir
        self.stats_wrapper_class = stats_wrapper_class
        self.stats_container_class = stats_container_class
        self.stat_group_class = stat_group_class
        self.stat_value_class = stat_value_class
        self.card_roles = tuple(card_roles)

    @classmethod
    def from_config(cls, config: Optional['ConfigurationManager']) -> 'StructuralSignals':
        """Builds signals from `components.extractor.signals`, keeping defaults for missing keys."""
        if config is None:
            return cls()
        overrides = config.get("components.extractor.signals") or {}
        known = ("text_leaf_dir", "stats_wrapper_class", "stats_container_class",
                 "stat_group_class", "stat_value_class", "card_roles")
        return cls(**{key: value for key, value in overrides.items() if key in known})

    # --- element predicates ---

    def is_text_leaf(self, tag: Tag) -> bool:
        return tag.name == "span" and tag.get("dir") == self.text_leaf_dir

    def is_stats_wrapper(self, tag: Tag) -> bool:
        return tag.name == "div" and self.stats_wrapper_class in _class_list(tag)

    def is_stats_container(self, tag: Tag) -> bool:
        return tag.name == "div" and self.stats_container_class in _class_list(tag)

    def is_stat_group(self, tag: Tag) -> bool:
        # Substring match on the raw class attribute, the group class is sometimes fused with a suffix.
        return tag.name == "div" and self.stat_group_class in " ".join(_class_list(tag))

    def is_stat_value_box(self, tag: Tag) -> bool:
        return tag.name == "div" and self.stat_value_class in _class_list(tag)

    def is_card_role(self, tag: Tag) -> bool:
        return tag.name == "div" and tag.get("role") in self.card_roles

    @staticmethod
    def is_avatar_image(tag: Tag) -> bool:
        """An `<image>` inside an inline `<svg>` that references a bitmap."""
        if tag.name != "image":
            return False
        if not (tag.get("xlink:href") or tag.get("href")):
            return False
        return tag.find_parent("svg") is not None

    # --- collections ---

    def text_leaves(self, root: Tag) -> List[Tag]:
        """Visible text spans under `root`, in document order."""
        return root.find_all(self.is_text_leaf)

    def counter_leaves(self, root: Tag) -> List[Tag]:
        """Text spans under `root` that sit inside a counter value box."""
        return [
            leaf for leaf in self.text_leaves(root)
            if leaf.find_parent(self.is_stat_value_box) is not None
        ]

    def stat_groups(self, container: Tag) -> List[Tag]:
        """Direct children of a stats container that are counter groups, in visual order."""
        return container.find_all(self.is_stat_group, recursive=False)
