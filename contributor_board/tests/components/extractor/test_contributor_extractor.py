import os

import pytest

from contributor_board.components.extractor.contributor_extractor import (
    ContributorExtractor,
    extract,
    looks_like_name,
    match_badge,
)
from contributor_board.components.extractor.records import BOARD_SIZE, ContributorRecord
from contributor_board.core.exceptions import MarkupParseError

SAMPLE_PATH = os.path.join(os.path.dirname(__file__), "..", "..", "..", "data", "sample.html")


def card(rank, name="", avatar="https://cdn.example.net/avatar.jpg", stats=("120", "45", "980"),
         badge=None, extra_texts=(), href="https://www.facebook.com/groups/g/user/1/"):
    """Builds one contributor card the way the widget lays it out."""
    avatar_html = f'<svg><g><image xlink:href="{avatar}"></image></g></svg>' if avatar else ""
    name_html = f'<span dir="auto">{name}</span>' if name else ""
    badge_html = f'<span dir="auto">{badge}</span>' if badge else ""
    extra_html = "".join(f'<span dir="auto">{text}</span>' for text in extra_texts)
    stats_html = ""
    if stats is not None:
        groups = "".join(
            f'<div class="x78zum5 x1q0g3np"><div class="xyqm7xq"><span dir="auto">{value}</span></div></div>'
            for value in stats
        )
        stats_html = f'<div class="xamitd3"><div class="x1qughib">{groups}</div></div>'
    return (
        f'<div role="listitem"><a href="{href}">'
        f'<span dir="auto">{rank}</span>{avatar_html}{name_html}{badge_html}{extra_html}{stats_html}'
        '</a></div>'
    )


def page(*cards):
    return '<div role="list">' + "".join(cards) + '</div>'


def assert_well_formed(records):
    assert len(records) == BOARD_SIZE
    assert [r.rank for r in records] == list(range(1, BOARD_SIZE + 1))


# --- name / badge heuristics ---

@pytest.mark.parametrize("text, expected", [
    ("Alice Smith", True),
    ("Bob", True),
    ("Al", False),                      # too short
    ("A" * 50, False),                  # too long
    ("A" * 49, True),
    ("12345", False),                   # purely numeric
    ("Joined 3 years ago", False),
    ("Top contributor", False),
    ("Posted 2 days Ago", False),
    ("alice smith", False),             # lowercase start
    ("Élodie Martin", False),           # leading capital must be A-Z
])
def test_looks_like_name(text, expected):
    assert looks_like_name(text) is expected


@pytest.mark.parametrize("text, expected", [
    ("Top Contributor", "top contributor"),
    ("TOP CONTRIBUTOR", "top contributor"),
    ("All-star contributor", "all-star contributor"),
    ("  Rising contributor  ", "rising contributor"),
    ("Contributor", None),
    ("", None),
])
def test_match_badge_is_case_insensitive(text, expected):
    assert match_badge(text) == expected


# --- extract ---

def test_single_contributor_scenario():
    markup = page(card(1, name="Alice Smith", stats=("120", "45", "980")))
    records = extract(markup)

    assert_well_formed(records)
    first = records[0]
    assert first.name == "Alice Smith"
    assert first.avatar_url == "https://cdn.example.net/avatar.jpg"
    assert (first.posts, first.comments, first.reactions) == (120, 45, 980)
    assert all(record.is_placeholder for record in records[1:])


@pytest.mark.parametrize("stats, extra_texts", [
    (("9" * 5000, "1" * 30 + "k", "7"), ()),      # structured stats block
    (None, ("9" * 5000, "1" * 30 + "k", "7")),    # last-three fallback
])
def test_oversized_counter_text_does_not_break_extraction(stats, extra_texts):
    markup = page(card(1, name="Alice Smith", stats=stats, extra_texts=extra_texts))
    records = extract(markup)

    assert_well_formed(records)
    first = records[0]
    assert first.name == "Alice Smith"
    assert (first.posts, first.comments, first.reactions) == (0, int("1" * 30) * 1000, 7)


@pytest.mark.parametrize("markup", [
    "",
    "plain text, no tags",
    "<div><span dir='auto'>5</span></div>",
    "<a href='https://www.facebook.com/x'><span dir='auto'>5</span></a>",   # rank but no avatar
    "<a href='https://www.facebook.com/x'><svg><image href='a.jpg'></image></svg></a>",  # avatar but no rank
    "<a href='https://example.com/x'><span dir='auto'>5</span><svg><image href='a.jpg'></image></svg></a>",
    "<div><span dir='auto'>1</div></a></span><p>",
])
def test_arbitrary_input_yields_ten_placeholders(markup):
    records = extract(markup)
    assert_well_formed(records)
    assert all(record == ContributorRecord.placeholder(record.rank) for record in records)


def test_none_markup_is_a_parse_error():
    with pytest.raises(MarkupParseError):
        extract(None)


def test_extract_is_idempotent():
    markup = page(
        card(2, name="Bob Jones", badge="Top contributor"),
        card(1, name="Alice Smith", badge="All-star contributor"),
    )
    assert extract(markup) == extract(markup)


def test_records_are_sorted_by_rank():
    markup = page(card(5, name="Eve Adams"), card(2, name="Bob Jones"), card(9, name="Ivan Petrov"))
    records = extract(markup)
    assert_well_formed(records)
    assert records[1].name == "Bob Jones"
    assert records[4].name == "Eve Adams"
    assert records[8].name == "Ivan Petrov"


def test_duplicate_rank_keeps_first_in_document_order():
    markup = page(card(3, name="First Three"), card(1, name="Alice Smith"), card(3, name="Second Three"))
    records = extract(markup)
    assert_well_formed(records)
    assert records[2].name == "First Three"
    assert sum(1 for r in records if r.name in ("First Three", "Second Three")) == 1


def test_rank_digit_never_leaks_into_counters():
    # No stats block at all: the fallback reads trailing numbers but never the rank span.
    markup = page(card(7, name="Grace Hopper", stats=None, extra_texts=("31", "1,500")))
    record = extract(markup)[6]
    assert (record.posts, record.comments, record.reactions) == (31, 1500, 0)


def test_two_stat_values_leave_third_at_zero():
    markup = page(card(4, name="Dana White", stats=("12", "34"), extra_texts=("56",)))
    record = extract(markup)[3]
    assert (record.posts, record.comments, record.reactions) == (12, 34, 0)


def test_badge_extraction_and_case():
    markup = page(
        card(1, name="Alice Smith", badge="TOP CONTRIBUTOR"),
        card(2, name="Bob Jones", badge="Rising Contributor"),
        card(3, name="Carol King"),
    )
    records = extract(markup)
    assert records[0].badge == "top contributor"
    assert records[1].badge == "rising contributor"
    assert records[2].badge is None


def test_name_skips_caption_texts():
    markup = page(card(1, badge="Top contributor", extra_texts=("Joined 2 years ago", "Alice Smith")))
    assert extract(markup)[0].name == "Alice Smith"


def test_missing_name_stays_empty():
    markup = page(card(6, extra_texts=("joined recently",)))
    record = extract(markup)[5]
    assert record.name == ""
    assert record.display_name == "Contributor 6"


def test_avatar_from_plain_href_attribute():
    markup = (
        '<a href="https://www.facebook.com/u/1"><span dir="auto">1</span>'
        '<svg><image href="https://cdn.example.net/plain.jpg"></image></svg>'
        '<span dir="auto">Alice Smith</span></a>'
    )
    assert extract(markup)[0].avatar_url == "https://cdn.example.net/plain.jpg"


def test_non_canonical_rank_qualifies_but_is_skipped():
    markup = page(card("01", name="Zero One"), card(2, name="Bob Jones"))
    records = extract(markup)
    assert records[0].is_placeholder
    assert records[1].name == "Bob Jones"


def test_suffix_counters_are_normalized():
    markup = page(card(1, name="Alice Smith", stats=("1.2K", "3,412", "2.5M")))
    record = extract(markup)[0]
    assert (record.posts, record.comments, record.reactions) == (1200, 3412, 2500000)


def test_custom_profile_domain():
    markup = page(card(1, name="Alice Smith", href="https://social.example.org/u/alice"))
    assert extract(markup)[0].is_placeholder
    records = ContributorExtractor(profile_domain="social.example.org").extract(markup)
    assert records[0].name == "Alice Smith"


def test_bundled_sample_parses_completely():
    with open(SAMPLE_PATH, "r", encoding="utf-8") as f:
        markup = f.read()
    records = extract(markup)
    assert_well_formed(records)
    assert all(record.name for record in records)
    assert records[0].name == "Hana Takahashi"
    assert records[0].badge == "all-star contributor"
    assert (records[0].posts, records[0].comments, records[0].reactions) == (1200, 3412, 12000)
    assert records[9].name == "Mei Chen"
    assert all(record.avatar_url.startswith("https://") for record in records)
