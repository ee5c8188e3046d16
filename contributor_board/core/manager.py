import asyncio
from typing import Dict, Optional, Tuple, TYPE_CHECKING

from contributor_board.core.logger import get_logger
from contributor_board.components.extractor.extractor_manager import ExtractorManager, ParsedBoard
from contributor_board.components.extractor.records import ContributorBoard, ContributorRecord
from contributor_board.components.relay.image_relay import ImageRelay, fallback_avatar_url, needs_relay
from contributor_board.components.renderer.board_template import BOARD_HEIGHT, BOARD_WIDTH, render_board_html
from contributor_board.components.renderer.playwright_manager import PlaywrightManager
from contributor_board.components.storage.file_storage import FileStorage, export_filename
from contributor_board.core.exceptions import (
    BoardRenderError,
    RelayError,
    RendererError,
    StorageError,
    TaskManagementError,
)

if TYPE_CHECKING:
    from contributor_board.core.config import ConfigurationManager

logger = get_logger(__name__)

class BoardManager:
    """
    Orchestrates the board workflow: parsing pasted widget markup, fetching the
    remote images a board refers to, rasterizing it and saving the export.
    """
    def __init__(self, config: 'ConfigurationManager'):
        """
        Initializes the BoardManager and its underlying components.

        Args:
            config (ConfigurationManager): The application's configuration manager instance.

        Raises:
            TaskManagementError: If a component cannot be set up, which indicates a
                                 configuration problem (e.g. an unsupported browser type
                                 or an unwritable export directory).
        """
        self.config = config
        logger.info("BoardManager initializing with provided configuration.")

        self.width = int(config.get('board.width', BOARD_WIDTH))
        self.height = int(config.get('board.height', BOARD_HEIGHT))
        self.device_scale_factor = float(config.get('board.device_scale_factor', 2))

        self.extractor_manager = ExtractorManager(config=self.config)

        try:
            self.playwright_manager = PlaywrightManager(config=self.config)
        except RendererError as e:
            logger.error(f"Error initializing PlaywrightManager in BoardManager: {e}", exc_info=True)
            raise TaskManagementError(f"Failed to initialize PlaywrightManager: {e}")

        try:
            self.image_relay = ImageRelay(config=self.config)
        except RelayError as e:
            logger.error(f"Error initializing ImageRelay in BoardManager: {e}", exc_info=True)
            raise TaskManagementError(f"Failed to initialize ImageRelay: {e}")

        try:
            self.file_storage = FileStorage(config=self.config)
        except StorageError as e:
            logger.error(f"Error initializing FileStorage in BoardManager: {e}", exc_info=True)
            raise TaskManagementError(f"Failed to initialize FileStorage: {e}")

        logger.info("BoardManager initialized successfully.")

    def parse(self, markup: str) -> ContributorBoard:
        """Parses widget markup into an editable board. See `ExtractorManager.parse_board`."""
        return self.extractor_manager.parse_board(markup)

    def parse_markup(self, markup: str) -> ParsedBoard:
        """Parses widget markup and reports whether the caption date was found."""
        return self.extractor_manager.parse_markup(markup)

    async def _avatar_source(self, record: ContributorRecord) -> Optional[str]:
        if not record.avatar_url:
            return None
        if not needs_relay(record.avatar_url):
            return record.avatar_url
        try:
            image = await self.image_relay.fetch(record.avatar_url)
            return image.to_data_uri()
        except RelayError as e:
            logger.warning(f"Avatar for rank {record.rank} could not be relayed, using generated avatar: {e}")
            return fallback_avatar_url(record.display_name)

    async def _background_source(self, board: ContributorBoard) -> Optional[str]:
        reference = board.background_image
        if not reference or not needs_relay(reference):
            return reference
        try:
            image = await self.image_relay.fetch(reference)
            return image.to_data_uri()
        except RelayError as e:
            logger.warning(f"Background image could not be relayed, linking it directly: {e}")
            return reference

    async def materialize_images(self, board: ContributorBoard) -> Tuple[Dict[int, str], Optional[str]]:
        """
        Fetches every remote image on the board concurrently.

        Failures never abort the render: an avatar falls back to a generated
        initials image and the background falls back to its direct URL.

        Returns:
            Tuple[Dict[int, str], Optional[str]]: Avatar sources keyed by rank (ranks
            without an avatar are omitted) and the background source.
        """
        records = list(board.contributors)
        *avatar_sources, background = await asyncio.gather(
            *(self._avatar_source(record) for record in records),
            self._background_source(board),
        )
        avatars = {record.rank: source for record, source in zip(records, avatar_sources) if source}
        logger.debug(f"Materialized {len(avatars)} avatars; background {'set' if background else 'absent'}.")
        return avatars, background

    async def render(self, board: ContributorBoard) -> bytes:
        """
        Renders the board to PNG bytes.

        Raises:
            BoardRenderError: If the headless browser cannot start or capture the board.
        """
        logger.info(f"Rendering board '{board.title}' for {board.month} {board.year}.")
        avatars, background = await self.materialize_images(board)
        html = render_board_html(board, avatars=avatars, background=background,
                                 width=self.width, height=self.height)
        try:
            async with self.playwright_manager as pm:
                return await pm.render_html_to_png(
                    html,
                    width=self.width,
                    height=self.height,
                    device_scale_factor=self.device_scale_factor,
                )
        except RendererError as e:
            logger.error(f"Board rendering failed: {e}")
            raise BoardRenderError(f"Failed to render board: {e.message}")

    async def export(self, board: ContributorBoard) -> str:
        """
        Renders the board and saves it as `top-contributors-<month>-<year>.png`.

        Returns:
            str: Path of the written PNG.

        Raises:
            BoardRenderError: If rendering fails.
            TaskManagementError: If the image cannot be written.
        """
        image = await self.render(board)
        try:
            path = self.file_storage.save_bytes(image, filename=export_filename(board.month, board.year), extension=".png")
        except StorageError as e:
            logger.error(f"Saving exported board failed: {e}")
            raise TaskManagementError(f"Failed to save exported board: {e.message}")
        logger.info(f"Board exported to {path}")
        return path
