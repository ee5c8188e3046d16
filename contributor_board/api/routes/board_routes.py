"""
API routes for contributor boards.

This module defines the FastAPI routes of the board workflow: parsing pasted
widget markup, rendering and exporting boards, relaying remote images for the
browser preview, and serving sample markup.
"""
import os

from fastapi import APIRouter, HTTPException, Response, status
from fastapi.responses import PlainTextResponse
from typing import Optional

from contributor_board.api.models import ExportResponse, ParseRequest, ParseResponse
from contributor_board.components.extractor.records import ContributorBoard
from contributor_board.components.relay.image_relay import ImageRelay
from contributor_board.core.config import config_manager
from contributor_board.core.exceptions import (
    BoardRenderError,
    ExtractorError,
    RelayError,
    RelayUpstreamError,
    TaskManagementError,
)
from contributor_board.core.logger import get_logger
from contributor_board.core.manager import BoardManager

logger = get_logger(__name__)

# api/routes/board_routes.py -> contributor_board/data/sample.html
SAMPLE_MARKUP_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "data", "sample.html"))

RELAY_RESPONSE_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Cross-Origin-Resource-Policy": "cross-origin",
    "Cache-Control": "public, max-age=86400",
}

router = APIRouter()

# BoardManager is instantiated per request, as it reads the global config_manager
# and holds no state between requests.


@router.post(
    "/parse",
    response_model=ParseResponse,
    summary="Parse Top Contributors markup into a board",
    description="Accepts the outer HTML of a group's Top Contributors widget and returns ten ranked "
                "contributor records plus the caption month and year. Ranks that cannot be "
                "recognized come back as empty placeholders."
)
async def parse_board_endpoint(request: ParseRequest):
    """
    Raises:
        HTTPException:
            - 422 Unprocessable Entity: If the markup is empty or cannot be parsed at all.
    """
    try:
        board_manager = BoardManager(config=config_manager)
        parsed = board_manager.parse_markup(request.markup)
    except ExtractorError as e:
        logger.warning(f"Markup rejected: {e.message}")
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message)

    board = parsed.board
    return ParseResponse(
        board=board,
        filled_count=board.filled_count,
        complete=board.is_complete,
        date_found=parsed.date_found,
    )


@router.post(
    "/render",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}}},
    summary="Render a board to PNG",
)
async def render_board_endpoint(board: ContributorBoard):
    """
    Renders the (possibly edited) board and returns the PNG bytes.

    Raises:
        HTTPException:
            - 503 Service Unavailable: If the headless browser cannot render, typically because
                                       browser binaries are missing ('playwright install').
    """
    try:
        board_manager = BoardManager(config=config_manager)
        image = await board_manager.render(board)
    except BoardRenderError as e:
        logger.error(f"Render failed for board '{board.title}': {e.message}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Board rendering unavailable. Ensure browser binaries are installed ('playwright install'). Error: {e.message}"
        )
    return Response(content=image, media_type="image/png")


@router.post(
    "/export",
    response_model=ExportResponse,
    summary="Render a board and save it on the server",
)
async def export_board_endpoint(board: ContributorBoard):
    """
    Raises:
        HTTPException:
            - 503 Service Unavailable: If rendering fails.
            - 500 Internal Server Error: If the image cannot be saved.
    """
    try:
        board_manager = BoardManager(config=config_manager)
        output_path = await board_manager.export(board)
    except BoardRenderError as e:
        logger.error(f"Export failed while rendering: {e.message}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message)
    except TaskManagementError as e:
        logger.error(f"Export failed: {e.message}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)

    return ExportResponse(message="Board exported successfully.", output_path=output_path)


@router.get(
    "/proxy",
    summary="Relay a remote image",
    description="Fetches an image server side, retrying transient failures, and returns it with "
                "permissive cross-origin headers so the browser preview can draw it."
)
async def proxy_image_endpoint(url: Optional[str] = None):
    if not url:
        return PlainTextResponse("Missing URL parameter", status_code=status.HTTP_400_BAD_REQUEST)

    try:
        image = await ImageRelay(config=config_manager).fetch(url)
    except RelayUpstreamError as e:
        logger.error(f"Relay upstream failure for {url}: {e.status_code}")
        return PlainTextResponse(e.message, status_code=e.status_code)
    except RelayError as e:
        logger.error(f"Relay failed for {url}: {e.message}")
        return PlainTextResponse(f"Internal Server Error: {e.message}", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response(content=image.content, media_type=image.content_type, headers=RELAY_RESPONSE_HEADERS)


@router.get("/sample", response_class=PlainTextResponse, summary="Sample widget markup")
async def sample_markup_endpoint():
    """Returns bundled example markup for trying the parser."""
    if not os.path.exists(SAMPLE_MARKUP_PATH):
        return PlainTextResponse("Sample file not found", status_code=status.HTTP_404_NOT_FOUND)

    with open(SAMPLE_MARKUP_PATH, 'r', encoding='utf-8') as f:
        content = f.read()
    return Response(content=content, media_type="text/html")
