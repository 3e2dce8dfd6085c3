import io

import pytest

from console import Console, ScriptedInput
from errors import ValidationError
from paginator import Paginator, browse


def rows(count):
    return [(f"P{i:03d}", f"Player {i}") for i in range(1, count + 1)]


@pytest.mark.parametrize(
    "count, page_size, expected",
    [(0, 20, 1), (1, 20, 1), (20, 20, 1), (21, 20, 2), (45, 20, 3), (40, 10, 4), (7, 1, 7)],
)
def test_total_pages(count, page_size, expected):
    """total_pages == max(1, ceil(count / page_size))"""
    assert Paginator(rows(count), page_size).total_pages == expected


def test_page_size_must_be_positive():
    with pytest.raises(ValueError):
        Paginator(rows(3), 0)


def test_next_and_previous_stop_at_the_edges():
    pager = Paginator(rows(45), 20)
    assert pager.previous_page() == 1
    assert pager.next_page() == 2
    assert pager.next_page() == 3
    assert pager.next_page() == 3
    assert pager.previous_page() == 2


def test_jump_out_of_range_keeps_current_page():
    pager = Paginator(rows(45), 20)
    pager.jump(2)
    for page in (0, 4, -1):
        with pytest.raises(ValidationError, match="between 1 and 3"):
            pager.jump(page)
        assert pager.current_page == 2


def test_navigate_tokens_are_case_insensitive():
    pager = Paginator(rows(45), 20)
    assert pager.navigate("N") is True
    assert pager.current_page == 2
    assert pager.navigate(" P ") is True
    assert pager.current_page == 1
    assert pager.navigate("3") is True
    assert pager.current_page == 3
    assert pager.navigate("Q") is False
    assert pager.navigate("quit") is False


def test_navigate_rejects_other_tokens():
    pager = Paginator(rows(45), 20)
    with pytest.raises(ValidationError, match="'n', 'p', or 'q'"):
        pager.navigate("next")
    assert pager.current_page == 1


def test_bounds_of_last_partial_page():
    pager = Paginator(rows(45), 20)
    pager.jump(3)
    assert pager.bounds() == (40, 45)
    assert pager.page_items() == rows(45)[40:45]


def test_forty_five_players_n_n_p_lands_on_page_two():
    """45 rows, page size 20: n, n, p shows rows 21-40."""
    pager = Paginator(rows(45), 20)
    for token in ("n", "n", "p"):
        pager.navigate(token)
    assert pager.current_page == 2
    assert pager.bounds() == (20, 40)
    assert pager.page_items()[0] == ("P021", "Player 21")
    assert pager.page_items()[-1] == ("P040", "Player 40")


def make_console(*lines):
    out, err = io.StringIO(), io.StringIO()
    return Console(ScriptedInput(lines), out=out, err=err), out, err


def test_browse_renders_absolute_row_numbers():
    console, out, _ = make_console("n", "n", "p", "q")
    pager = browse(console, ["PLAYER_ID", "DISPLAY_NAME"], rows(45), 20, "players")

    assert pager.current_page == 2
    text = out.getvalue()
    assert "Displaying Page 2 (Rows 21 to 40)" in text
    assert " 21| P021" in text
    assert " 40| P040" in text
    assert "Total players: 45. Total pages: 3 (Size: 20 players/page)" in text


def test_browse_reports_bad_input_and_keeps_going():
    console, out, err = make_console("7", "zz", "3", "q")
    pager = browse(console, ["PLAYER_ID", "DISPLAY_NAME"], rows(45), 20, "players")

    assert pager.current_page == 3
    assert "Invalid page number. Must be between 1 and 3." in err.getvalue()
    assert "Invalid input. Enter a number or 'n', 'p', or 'q'." in err.getvalue()
    assert "Displaying Page 3 (Rows 41 to 45)" in out.getvalue()


def test_browse_empty_listing_never_prompts():
    console, out, _ = make_console("n")
    assert browse(console, ["ABBR"], [], 10, "teams") is None
    assert out.getvalue().count("No teams found in the database.") == 1
    assert console.source.prompts == []


def test_browse_ends_when_input_closes():
    console, out, _ = make_console("n")
    pager = browse(console, ["PLAYER_ID", "DISPLAY_NAME"], rows(45), 20, "players")
    assert pager.current_page == 2
    assert len(console.source.prompts) == 2
