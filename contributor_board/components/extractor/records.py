"""
Data model for contributor boards.

`ContributorRecord` and `DateInfo` are the plain values produced by the
extractors. `ContributorBoard` is the editable board that carries a ranked list of
records plus the caption and background settings through the parse, edit and
export steps. All models are immutable; editing returns a new board.
"""
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

BOARD_SIZE = 10

DEFAULT_GROUP_NAME = "Visual Novel Lovers"

BadgeType = Literal["all-star contributor", "top contributor", "rising contributor"]

# Check order matters: "all-star contributor" must win over its "top"/"rising" neighbours.
BADGE_PHRASES: tuple = ("all-star contributor", "top contributor", "rising contributor")


class ContributorRecord(BaseModel):
    """One ranked contributor as recovered from the widget markup."""
    model_config = ConfigDict(frozen=True)

    rank: int = Field(ge=1, le=BOARD_SIZE)
    name: str = ""
    avatar_url: str = ""
    posts: int = Field(default=0, ge=0)
    comments: int = Field(default=0, ge=0)
    reactions: int = Field(default=0, ge=0)
    badge: Optional[BadgeType] = None

    @classmethod
    def placeholder(cls, rank: int) -> 'ContributorRecord':
        """Empty record used for ranks that could not be found in the markup."""
        return cls(rank=rank)

    @property
    def display_name(self) -> str:
        """Name shown on the rendered board; blank names become 'Contributor <rank>'."""
        return self.name.strip() or f"Contributor {self.rank}"

    @property
    def is_placeholder(self) -> bool:
        return (
            not self.name
            and not self.avatar_url
            and self.posts == 0
            and self.comments == 0
            and self.reactions == 0
            and self.badge is None
        )


class DateInfo(BaseModel):
    """Month abbreviation (e.g. 'Dec') and four digit year taken from the widget caption."""
    model_config = ConfigDict(frozen=True)

    month: str
    year: str


class BackgroundPosition(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0


class ContributorBoard(BaseModel):
    """
    The board rendered into the shareable image.

    Attributes:
        contributors (List[ContributorRecord]): Exactly ten records ordered by rank 1..10.
        title (str): Group name shown in the header.
        month (str): Three letter month abbreviation for the date badge.
        year (str): Year for the date badge.
        background_image (Optional[str]): URL or data URI of the background picture.
        background_scale (float): Zoom applied to the background picture.
        background_position (BackgroundPosition): Pan offset of the background picture in pixels.
    """
    model_config = ConfigDict(frozen=True)

    contributors: List[ContributorRecord]
    title: str = DEFAULT_GROUP_NAME
    month: str
    year: str
    background_image: Optional[str] = None
    background_scale: float = Field(default=1.0, gt=0)
    background_position: BackgroundPosition = BackgroundPosition()

    @field_validator("contributors")
    @classmethod
    def _ranks_cover_board(cls, contributors: List[ContributorRecord]) -> List[ContributorRecord]:
        ranks = [c.rank for c in contributors]
        if ranks != list(range(1, BOARD_SIZE + 1)):
            raise ValueError(f"contributors must hold ranks 1..{BOARD_SIZE} in order, got {ranks}")
        return contributors

    @property
    def filled_count(self) -> int:
        """Number of contributors that carry a non-blank name."""
        return sum(1 for c in self.contributors if c.name.strip())

    @property
    def is_complete(self) -> bool:
        return self.filled_count >= BOARD_SIZE

    def contributor(self, rank: int) -> ContributorRecord:
        return self.contributors[rank - 1]

    def with_contributor(self, rank: int, /, **changes: Any) -> 'ContributorBoard':
        """
        Returns a copy of the board with one contributor's fields replaced.

        Args:
            rank (int): Rank (1..10) of the contributor to edit.
            **changes: Field values to replace (name, avatar_url, posts, comments, reactions, badge).
                A `rank` keyword is rejected; ranks are fixed by position.

        Raises:
            ValueError: If the rank is out of range or the changes do not validate.
        """
        if not 1 <= rank <= BOARD_SIZE:
            raise ValueError(f"rank must be between 1 and {BOARD_SIZE}, got {rank}")
        if "rank" in changes:
            raise ValueError("the rank of a contributor cannot be edited")
        current = self.contributor(rank)
        updated = ContributorRecord.model_validate({**current.model_dump(), **changes})
        contributors = list(self.contributors)
        contributors[rank - 1] = updated
        return self.model_copy(update={"contributors": contributors})

    def with_fields(self, **changes: Any) -> 'ContributorBoard':
        """Returns a copy of the board with board-level fields (title, month, background...) replaced."""
        if "contributors" in changes:
            raise ValueError("use with_contributor() to edit contributors")
        return ContributorBoard.model_validate({**self.model_dump(), **changes})
