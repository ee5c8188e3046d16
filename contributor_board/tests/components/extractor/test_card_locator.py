import pytest
from bs4 import BeautifulSoup

from contributor_board.components.extractor.card_locator import CardLocator, Counters
from contributor_board.components.extractor.signals import StructuralSignals

AVATAR = '<svg><image xlink:href="https://cdn.example.net/a.jpg"></image></svg>'


def stat_group(value):
    if value is None:
        return '<div class="x1q0g3np"><span>label</span></div>'
    return f'<div class="x1q0g3np"><div class="xyqm7xq"><span dir="auto">{value}</span></div><span>label</span></div>'


def stats_container(*values):
    return '<div class="x1qughib">' + "".join(stat_group(v) for v in values) + '</div>'


def first_link(markup):
    return BeautifulSoup(markup, "html.parser").find("a")


@pytest.fixture
def locator():
    return CardLocator(StructuralSignals())


def test_stats_wrapper_inside_link(locator):
    anchor = first_link(
        '<div role="listitem"><a href="https://facebook.com/u/1"><span dir="auto">1</span>'
        f'{AVATAR}<div class="xamitd3">{stats_container("120", "45", "980")}</div></a></div>'
    )
    container = locator.find_stats_block(anchor)
    assert container is not None
    assert locator.read_counters(container) == Counters(120, 45, 980)


def test_stats_container_inside_link_without_wrapper(locator):
    anchor = first_link(
        f'<a href="https://facebook.com/u/1"><span dir="auto">1</span>{AVATAR}'
        f'<div>{stats_container("1,234", "2.5K", "3M")}</div></a>'
    )
    assert locator.read_counters(locator.find_stats_block(anchor)) == Counters(1234, 2500, 3000000)


def test_link_scan_skips_containers_with_fewer_than_three_groups(locator):
    anchor = first_link(
        f'<a href="https://facebook.com/u/1">{stats_container("1", "2")}{stats_container("10", "20", "30")}</a>'
    )
    assert locator.read_counters(locator.find_stats_block(anchor)) == Counters(10, 20, 30)


def test_stats_block_in_card_scope_sibling(locator):
    anchor = first_link(
        '<div role="listitem"><div><a href="https://facebook.com/u/4"><span dir="auto">4</span>'
        f'{AVATAR}</a></div><div class="xamitd3">{stats_container("7", "8", "9")}</div></div>'
    )
    container = locator.find_stats_block(anchor)
    assert locator.read_counters(container) == Counters(7, 8, 9)


def test_card_scope_prefers_role_ancestor(locator):
    doc = BeautifulSoup(
        '<div role="list"><div role="listitem" id="card"><div><a href="https://facebook.com/u/1">x</a></div></div></div>',
        "html.parser",
    )
    scope = locator.find_card_scope(doc.find("a"))
    assert scope.get("id") == "card"


def test_card_scope_ascends_to_subtree_with_three_counters(locator):
    doc = BeautifulSoup(
        '<div id="outer"><div id="inner"><a href="https://facebook.com/u/1">x</a></div>'
        f'{stats_container("1", "2", "3")}</div>',
        "html.parser",
    )
    anchor = doc.find("a")
    assert locator.find_card_scope(anchor).get("id") == "outer"
    assert locator.read_counters(locator.find_stats_block(anchor)) == Counters(1, 2, 3)


def test_card_scope_defaults_to_parent(locator):
    doc = BeautifulSoup('<div id="parent"><a href="https://facebook.com/u/1">x</a></div>', "html.parser")
    assert locator.find_card_scope(doc.find("a")).get("id") == "parent"


def test_card_scope_ascent_is_capped():
    signals = StructuralSignals()
    locator = CardLocator(signals)
    nested = '<div>' * 20 + '<a href="https://facebook.com/u/1">x</a>' + '</div>' * 20
    doc = BeautifulSoup(f'<div id="top">{nested}{stats_container("1", "2", "3")}</div>', "html.parser")
    anchor = doc.find("a")
    # The counters sit 21 levels above the link, beyond the ascent limit.
    assert locator.find_card_scope(anchor) is anchor.parent


def test_two_values_keep_third_counter_at_zero(locator):
    anchor = first_link(
        f'<a href="https://facebook.com/u/1"><span dir="auto">2</span>{AVATAR}'
        f'<div class="xamitd3">{stats_container("15", "30", None)}</div>'
        '<span dir="auto">99</span></a>'
    )
    container = locator.find_stats_block(anchor)
    assert locator.read_counters(container) == Counters(15, 30, 0)


def test_wrapper_with_two_groups_reads_two_values(locator):
    anchor = first_link(
        f'<a href="https://facebook.com/u/1"><div class="xamitd3">{stats_container("5", "6")}</div></a>'
    )
    assert locator.read_counters(locator.find_stats_block(anchor)) == Counters(5, 6, 0)


def test_read_counters_without_any_value_is_none(locator):
    doc = BeautifulSoup(stats_container(None, None, None), "html.parser")
    assert locator.read_counters(doc.find("div")) is None


def test_no_stats_block_found(locator):
    anchor = first_link('<div role="listitem"><a href="https://facebook.com/u/1"><span dir="auto">1</span></a></div>')
    assert locator.find_stats_block(anchor) is None


def test_fallback_uses_last_three_stat_texts_excluding_rank(locator):
    doc = BeautifulSoup(
        '<div role="listitem"><a href="https://facebook.com/u/3"><span dir="auto">3</span>'
        '<span dir="auto">Jane Doe</span></a>'
        '<span dir="auto">7</span><span dir="auto">120</span><span dir="auto">Posts</span>'
        '<span dir="auto">45</span><span dir="auto">1.2K</span></div>',
        "html.parser",
    )
    anchor = doc.find("a")
    rank_node = anchor.find("span")
    assert locator.fallback_counters(anchor, rank_node) == Counters(120, 45, 1200)


def test_fallback_pads_missing_values_with_zero(locator):
    doc = BeautifulSoup(
        '<div role="listitem"><a href="https://facebook.com/u/5"><span dir="auto">5</span>'
        '<span dir="auto">12</span></a></div>',
        "html.parser",
    )
    anchor = doc.find("a")
    assert locator.fallback_counters(anchor, anchor.find("span")) == Counters(12, 0, 0)


def test_fallback_excludes_rank_node_by_identity(locator):
    # Two spans with identical text: only the rank node itself is skipped.
    doc = BeautifulSoup(
        '<div role="listitem"><a href="https://facebook.com/u/2"><span dir="auto">2</span></a>'
        '<span dir="auto">2</span></div>',
        "html.parser",
    )
    anchor = doc.find("a")
    assert locator.fallback_counters(anchor, anchor.find("span")) == Counters(2, 0, 0)
