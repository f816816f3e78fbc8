import io

import pytest
from PIL import Image

from chatplugins.wordle import (
    LengthNotEnough,
    Mark,
    Outcome,
    UnknownWord,
    WordleError,
    WordleGame,
    level_of,
    load_word_list,
)

DICTIONARY = ["apple", "paper", "house", "mouse", "horse", "route", "world"]


@pytest.fixture
def game():
    return WordleGame("apple", DICTIONARY)


def _open(data):
    return Image.open(io.BytesIO(data)).convert("RGB")


def test_correct_guess_wins_case_insensitive(game):
    assert game.guess("APPLE") is Outcome.WON
    assert game.marks() == [[Mark.MATCH] * 5]


def test_wrong_length_rejected(game):
    with pytest.raises(LengthNotEnough):
        game.guess("pear")
    assert game.marks() == []


def test_unknown_word_rejected(game):
    with pytest.raises(UnknownWord):
        game.guess("zzzzz")
    assert game.marks() == []


def test_errors_catchable_as_base(game):
    with pytest.raises(WordleError):
        game.guess("pear")
    with pytest.raises(WordleError):
        game.guess("zzzzz")
    assert game.marks() == []


def test_marks_of_guess(game):
    assert game.guess("paper") is Outcome.CONTINUE
    assert game.marks() == [
        [Mark.EXIST, Mark.EXIST, Mark.MATCH, Mark.EXIST, Mark.NOT_EXIST]
    ]


def test_running_out_of_chances(game):
    words = ["house", "mouse", "horse", "route", "world", "paper"]
    outcomes = [game.guess(word) for word in words]
    assert outcomes[:-1] == [Outcome.CONTINUE] * 5
    assert outcomes[-1] is Outcome.LOST
    assert len(game.marks()) == game.chances
    with pytest.raises(WordleError):
        game.guess("apple")


def test_win_on_last_chance_is_a_win(game):
    for word in ["house", "mouse", "horse", "route", "world"]:
        game.guess(word)
    assert game.guess("apple") is Outcome.WON


def test_render_empty_board(game):
    data = game.render()
    assert data[:8] == b"\x89PNG\r\n\x1a\n"
    image = _open(data)
    width, height = image.size
    assert height > width
    assert image.getpixel((11, 11)) == Mark.UNDONE.color
    assert image.getpixel((0, 0)) == (255, 255, 255)


def test_render_after_guess(game):
    game.guess("paper")
    image = _open(game.render())
    assert image.getpixel((11, 11)) == Mark.EXIST.color
    assert image.getpixel((11 + 2 * 24, 11)) == Mark.MATCH.color
    assert image.getpixel((11, 11 + 24)) == Mark.UNDONE.color


def test_load_word_list_sorts():
    assert load_word_list("pear\napple\nfig") == ["apple", "fig", "pear"]


def test_level_of():
    assert level_of("") == 5
    assert level_of("五阶") == 5
    assert level_of("六阶") == 6
    assert level_of("七阶") == 7
    with pytest.raises(ValueError):
        level_of("八阶")