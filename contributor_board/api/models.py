from typing import Optional

from pydantic import BaseModel, Field

from contributor_board.components.extractor.records import ContributorBoard

# --- Request Models ---

class ParseRequest(BaseModel):
    """
    Request model for the `/parse` endpoint: the outer HTML copied from the
    Top Contributors widget.
    """
    markup: str = Field(..., description="Outer HTML of the Top Contributors widget.")


# --- Response Models ---

class ParseResponse(BaseModel):
    """
    Result of parsing widget markup.

    `complete` is False when fewer than ten contributors were recognized; the
    missing ranks are placeholders the user is expected to edit.
    """
    board: ContributorBoard
    filled_count: int
    complete: bool
    date_found: bool


class ExportResponse(BaseModel):
    """Response model for a board export written on the server."""
    message: str
    output_path: Optional[str] = None
