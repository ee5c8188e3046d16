"""
HTML layout of the shareable contributor board.

`render_board_html` produces a self-contained document sized exactly to the
board's pixel dimensions. Rank 1 gets a hero card, ranks 2 and 3 a pair of
podium cards, ranks 4 to 10 a compact list. Every piece of user text is escaped.
"""
from html import escape
from typing import Dict, List, Optional

from contributor_board.components.extractor.records import ContributorBoard, ContributorRecord

BOARD_WIDTH = 1080
BOARD_HEIGHT = 1350

BADGE_STYLES: Dict[str, str] = {
    "all-star contributor": "background:rgba(234,179,8,.2);color:#facc15;border-color:rgba(234,179,8,.3);",
    "top contributor": "background:rgba(59,130,246,.2);color:#60a5fa;border-color:rgba(59,130,246,.3);",
    "rising contributor": "background:rgba(34,197,94,.2);color:#4ade80;border-color:rgba(34,197,94,.3);",
}
DEFAULT_BADGE_STYLE = "background:rgba(51,65,85,.2);color:#94a3b8;border-color:rgba(71,85,105,.3);"

BADGE_ICONS = {
    "all-star contributor": "&#9733;",
    "top contributor": "&#127942;",
    "rising contributor": "&#8599;",
}

PODIUM_ACCENTS = {1: "#eab308", 2: "#94a3b8", 3: "#d97706"}

_STYLESHEET = """
* { box-sizing: border-box; margin: 0; padding: 0; }
html, body { width: %(width)dpx; height: %(height)dpx; overflow: hidden; }
body { font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Helvetica, Arial, sans-serif;
       background: linear-gradient(135deg, #0f172a 0%%, #1e293b 50%%, #0f172a 100%%); color: #fff; }
.board { position: relative; width: %(width)dpx; height: %(height)dpx; overflow: hidden; }
.background { position: absolute; inset: 0; overflow: hidden; }
.background img { position: absolute; inset: 0; width: 100%%; height: 100%%; object-fit: contain; transform-origin: center; }
.background .shade { position: absolute; inset: 0;
       background: linear-gradient(to bottom, rgba(15,23,42,.85), rgba(15,23,42,.75), rgba(15,23,42,.85)); }
.content { position: relative; z-index: 1; height: 100%%; display: flex; flex-direction: column; padding: 24px 32px; }
.date { position: absolute; top: 24px; right: 24px; padding: 12px 16px; border-radius: 16px;
        background: rgba(30,41,59,.8); border: 1px solid rgba(71,85,105,.5); text-align: left; }
.date .month { display: block; font-size: 12px; font-weight: 600; color: #cbd5e1; text-transform: uppercase; letter-spacing: .05em; }
.date .year { display: block; font-size: 18px; font-weight: 700; }
.header { text-align: center; margin-bottom: 24px; font-size: 30px; font-weight: 700; }
.header .accent { margin-left: 12px; font-weight: 800; color: #c084fc; }
.card { display: flex; align-items: center; gap: 20px; border-radius: 24px; padding: 20px;
        background: rgba(30,41,59,.6); border: 1px solid rgba(71,85,105,.4); }
.hero { margin-bottom: 20px; padding: 24px; background: rgba(234,179,8,.12); border-color: rgba(234,179,8,.25); }
.podium { display: flex; gap: 20px; margin-bottom: 20px; }
.podium .card { flex: 1; }
.avatar { position: relative; flex-shrink: 0; }
.avatar img, .avatar .initial { width: 96px; height: 96px; border-radius: 18px; object-fit: cover; }
.hero .avatar img, .hero .avatar .initial { width: 128px; height: 128px; }
.list .avatar img, .list .avatar .initial { width: 56px; height: 56px; border-radius: 12px; }
.avatar .initial { display: flex; align-items: center; justify-content: center; font-size: 40px; font-weight: 700;
        background: linear-gradient(135deg, #475569, #1e293b); }
.rank { position: absolute; top: -8px; right: -8px; min-width: 40px; height: 40px; padding: 0 6px; border-radius: 12px;
        display: flex; align-items: center; justify-content: center; font-weight: 900; font-size: 16px; }
.details { flex: 1; min-width: 0; }
.name { font-size: 24px; font-weight: 700; white-space: nowrap; overflow: hidden; text-overflow: ellipsis; }
.hero .name { font-size: 32px; }
.badge { display: inline-block; margin-top: 6px; padding: 2px 10px; border-radius: 999px; border: 1px solid; font-size: 13px; text-transform: capitalize; }
.stats { display: flex; gap: 16px; margin-top: 10px; font-size: 15px; color: #cbd5e1; }
.stats b { color: #fff; margin-right: 4px; }
.list { display: flex; flex-direction: column; gap: 10px; }
.list .card { padding: 10px 16px; border-radius: 16px; }
.list .name { font-size: 19px; }
.list .rank { position: static; background: rgba(51,65,85,.8); }
"""


def _avatar_html(record: ContributorRecord, source: Optional[str], rank_style: str = "") -> str:
    if source:
        picture = f'<img src="{escape(source, quote=True)}" alt="{escape(record.display_name, quote=True)}">'
    else:
        initial = record.name.strip()[:1].upper() or "?"
        picture = f'<div class="initial">{escape(initial)}</div>'
    rank_badge = f'<div class="rank" style="{rank_style}">#{record.rank}</div>' if rank_style else ""
    return f'<div class="avatar">{picture}{rank_badge}</div>'


def _badge_html(record: ContributorRecord) -> str:
    if record.badge is None:
        return ""
    style = BADGE_STYLES.get(record.badge, DEFAULT_BADGE_STYLE)
    icon = BADGE_ICONS.get(record.badge, "")
    return f'<span class="badge" style="{style}">{icon} {escape(record.badge)}</span>'


def _stats_html(record: ContributorRecord) -> str:
    return (
        '<div class="stats">'
        f'<span><b>{record.posts:,}</b>posts</span>'
        f'<span><b>{record.comments:,}</b>comments</span>'
        f'<span><b>{record.reactions:,}</b>reactions</span>'
        '</div>'
    )


def _card_html(record: ContributorRecord, avatar: Optional[str], css_class: str) -> str:
    accent = PODIUM_ACCENTS.get(record.rank)
    rank_style = f"background:{accent};color:#fff;" if accent else "background:rgba(51,65,85,.8);"
    if css_class == "list-item":
        return (
            '<div class="card">'
            f'<div class="rank">#{record.rank}</div>'
            f'{_avatar_html(record, avatar)}'
            f'<div class="details"><div class="name">{escape(record.display_name)}</div>{_badge_html(record)}</div>'
            f'{_stats_html(record)}'
            '</div>'
        )
    return (
        f'<div class="card {css_class}">'
        f'{_avatar_html(record, avatar, rank_style)}'
        f'<div class="details"><div class="name">{escape(record.display_name)}</div>'
        f'{_badge_html(record)}{_stats_html(record)}</div>'
        '</div>'
    )


def _background_html(board: ContributorBoard, background: Optional[str]) -> str:
    source = background or board.background_image
    if not source:
        return ""
    position = board.background_position
    transform = f"translate({position.x}px, {position.y}px) scale({board.background_scale})"
    return (
        '<div class="background">'
        f'<img src="{escape(source, quote=True)}" alt="" style="transform:{transform};">'
        '<div class="shade"></div>'
        '</div>'
    )


def render_board_html(
    board: ContributorBoard,
    avatars: Optional[Dict[int, str]] = None,
    background: Optional[str] = None,
    width: int = BOARD_WIDTH,
    height: int = BOARD_HEIGHT,
) -> str:
    """
    Builds the board document.

    Args:
        board (ContributorBoard): The board to lay out.
        avatars (Optional[Dict[int, str]]): Image sources keyed by rank, usually data URIs
            produced by the relay. Ranks missing here use the record's own avatar_url.
        background (Optional[str]): Image source replacing `board.background_image`.
        width (int): Board width in CSS pixels.
        height (int): Board height in CSS pixels.

    Returns:
        str: A complete HTML document.
    """
    avatars = avatars or {}

    def avatar_for(record: ContributorRecord) -> Optional[str]:
        return avatars.get(record.rank) or record.avatar_url or None

    stylesheet = _STYLESHEET % {'width': width, 'height': height}
    contributors: List[ContributorRecord] = list(board.contributors)
    hero = contributors[0]
    podium = contributors[1:3]
    remaining = contributors[3:]

    podium_html = "".join(_card_html(record, avatar_for(record), "podium-card") for record in podium)
    list_html = "".join(_card_html(record, avatar_for(record), "list-item") for record in remaining)

    return (
        "<!DOCTYPE html>"
        '<html><head><meta charset="utf-8">'
        f"<title>{escape(board.title)} Top Contributors</title>"
        f"<style>{stylesheet}</style>"
        "</head><body>"
        '<div class="board">'
        f"{_background_html(board, background)}"
        '<div class="content">'
        f'<div class="date"><span class="month">{escape(board.month)}</span>'
        f'<span class="year">{escape(board.year)}</span></div>'
        f'<div class="header">{escape(board.title)}<span class="accent">Top Contributors</span></div>'
        f"{_card_html(hero, avatar_for(hero), 'hero')}"
        f'<div class="podium">{podium_html}</div>'
        f'<div class="list">{list_html}</div>'
        "</div></div>"
        "</body></html>"
    )
