from typing import NamedTuple, Optional, TYPE_CHECKING

from contributor_board.components.extractor.contributor_extractor import ContributorExtractor
from contributor_board.components.extractor.date_extractor import current_month, current_year, extract_date
from contributor_board.components.extractor.markup_parser import DEFAULT_PROFILE_DOMAIN
from contributor_board.components.extractor.records import BOARD_SIZE, DEFAULT_GROUP_NAME, ContributorBoard
from contributor_board.components.extractor.signals import StructuralSignals
from contributor_board.core.exceptions import ExtractorError
from contributor_board.core.logger import get_logger

if TYPE_CHECKING:
    from contributor_board.core.config import ConfigurationManager

logger = get_logger(__name__)

class ParsedBoard(NamedTuple):
    """A parsed board and whether its month and year came from the widget caption."""
    board: ContributorBoard
    date_found: bool

class ExtractorManager:
    """
    Runs the parse step: contributor extraction and caption date extraction over
    the same markup, assembled into an editable `ContributorBoard`.
    """
    def __init__(self, config: Optional['ConfigurationManager'] = None):
        """
        Initializes the ExtractorManager.

        Structural signals and the profile domain come from `components.extractor.*`;
        the default board title comes from `board.default_title`.

        Args:
            config (Optional[ConfigurationManager]): The application's configuration manager.
                                                     If None, built-in defaults are used.
        """
        self.config = config
        if config:
            profile_domain = config.get('components.extractor.profile_domain', DEFAULT_PROFILE_DOMAIN)
            self.default_title = config.get('board.default_title', DEFAULT_GROUP_NAME)
        else:
            profile_domain = DEFAULT_PROFILE_DOMAIN
            self.default_title = DEFAULT_GROUP_NAME

        self.signals = StructuralSignals.from_config(config)
        self.contributor_extractor = ContributorExtractor(signals=self.signals, profile_domain=profile_domain)
        logger.info(f"ExtractorManager configured for profile domain '{profile_domain}'.")

    def parse_board(self, markup: str) -> ContributorBoard:
        """Parses widget markup into a board. See `parse_markup`."""
        return self.parse_markup(markup).board

    def parse_markup(self, markup: str) -> ParsedBoard:
        """
        Parses widget markup into a board and reports whether the caption date was found.

        Month and year default to the current date when the markup has no
        "Last updated on" caption.

        Args:
            markup (str): The outer markup copied from the Top Contributors widget.

        Returns:
            ParsedBoard: Ten ranked contributors plus title and date caption, and
                         whether the date came from the markup.

        Raises:
            ExtractorError: If the markup is empty.
            MarkupParseError: If the markup cannot be parsed into a tree.
        """
        if markup is None or (isinstance(markup, str) and not markup.strip()):
            logger.warning("parse_markup called with empty markup.")
            raise ExtractorError("Markup is empty. Paste the outer HTML of the Top Contributors widget.")

        contributors = self.contributor_extractor.extract(markup)
        logger.info(f"Parsed contributor cards from {len(markup)} characters of markup.")
        date_info = extract_date(markup, signals=self.signals)

        board = ContributorBoard(
            contributors=contributors,
            title=self.default_title,
            month=date_info.month if date_info else current_month(),
            year=date_info.year if date_info else current_year(),
        )

        if board.is_complete:
            logger.info(f"Parsed all {BOARD_SIZE} contributors.")
        else:
            logger.warning(
                f"Incomplete board: only {board.filled_count} of {BOARD_SIZE} contributors have a name. "
                "Missing entries need manual editing."
            )
        return ParsedBoard(board=board, date_found=date_info is not None)
