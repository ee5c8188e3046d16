from contributor_board.components.extractor.records import BOARD_SIZE, ContributorBoard, ContributorRecord
from contributor_board.components.renderer.board_template import render_board_html


def make_board(**fields):
    contributors = [ContributorRecord.placeholder(rank) for rank in range(1, BOARD_SIZE + 1)]
    board = ContributorBoard(contributors=contributors, title="Visual Novel Lovers", month="Dec", year="2025")
    return board.with_fields(**fields) if fields else board


def test_render_contains_caption_and_header():
    html = render_board_html(make_board())
    assert html.startswith("<!DOCTYPE html>")
    assert "Visual Novel Lovers" in html
    assert "Top Contributors" in html
    assert '<span class="month">Dec</span>' in html
    assert '<span class="year">2025</span>' in html
    assert "width: 1080px" in html
    assert "height: 1350px" in html


def test_render_shows_every_rank_with_placeholder_names():
    html = render_board_html(make_board())
    for rank in range(1, BOARD_SIZE + 1):
        assert f"#{rank}<" in html
        assert f"Contributor {rank}<" in html


def test_render_contributor_fields_and_badge():
    board = make_board().with_contributor(
        1, name="Alice Smith", posts=1200, comments=45, reactions=980, badge="all-star contributor"
    )
    html = render_board_html(board)
    assert "Alice Smith" in html
    assert "<b>1,200</b>posts" in html
    assert "<b>45</b>comments" in html
    assert "<b>980</b>reactions" in html
    assert "all-star contributor" in html


def test_render_escapes_user_text():
    board = make_board(title="<script>alert(1)</script>").with_contributor(2, name='Bob "The" <b>Bold</b>')
    html = render_board_html(board)
    assert "<script>alert(1)</script>" not in html
    assert "&lt;script&gt;" in html
    assert "&lt;b&gt;Bold&lt;/b&gt;" in html


def test_render_prefers_relayed_avatar_over_record_url():
    board = (
        make_board()
        .with_contributor(1, name="Alice Smith", avatar_url="https://cdn.example.net/a.jpg")
        .with_contributor(2, name="Bob Jones", avatar_url="https://cdn.example.net/b.jpg")
    )
    html = render_board_html(board, avatars={1: "data:image/png;base64,AAAA"})
    assert 'src="data:image/png;base64,AAAA"' in html
    assert "https://cdn.example.net/a.jpg" not in html
    assert 'src="https://cdn.example.net/b.jpg"' in html


def test_render_initial_when_no_avatar():
    board = make_board().with_contributor(3, name="carol king")
    html = render_board_html(board)
    assert '<div class="initial">C</div>' in html


def test_render_background_with_transform():
    board = make_board(
        background_image="https://cdn.example.net/bg.jpg",
        background_scale=1.5,
        background_position={"x": 10, "y": -20},
    )
    html = render_board_html(board)
    assert 'src="https://cdn.example.net/bg.jpg"' in html
    assert "translate(10.0px, -20.0px) scale(1.5)" in html

    relayed = render_board_html(board, background="data:image/jpeg;base64,BBBB")
    assert 'src="data:image/jpeg;base64,BBBB"' in relayed
    assert "bg.jpg" not in relayed


def test_render_without_background():
    assert 'class="background"' not in render_board_html(make_board())


def test_render_custom_dimensions():
    html = render_board_html(make_board(), width=540, height=675)
    assert "width: 540px" in html
    assert "height: 675px" in html
