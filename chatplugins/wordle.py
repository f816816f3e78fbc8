"""The word-guessing game: rules, marking and board rendering."""

from __future__ import annotations

import io
from collections.abc import Iterable
from enum import Enum

from PIL import Image, ImageDraw, ImageFont

_SIDE = 20
_SPACE = 10
_WHITE = (255, 255, 255)

_LEVELS = {"": 5, "五阶": 5, "六阶": 6, "七阶": 7}


class WordleError(Exception):
    """A guess that the game cannot accept."""


class LengthNotEnough(WordleError):
    """The guess does not have the target's length."""

    def __init__(self) -> None:
        super().__init__("length not enough")


class UnknownWord(WordleError):
    """The guess is not in the dictionary."""

    def __init__(self) -> None:
        super().__init__("unknown word")


class Mark(Enum):
    """How a letter of a guess relates to the target; the value is its colour."""

    MATCH = (125, 166, 108)
    EXIST = (199, 183, 96)
    NOT_EXIST = (123, 123, 123)
    UNDONE = (219, 219, 219)

    @property
    def color(self) -> tuple[int, int, int]:
        return self.value


class Outcome(Enum):
    """State of the game after a guess."""

    CONTINUE = "continue"
    WON = "won"
    LOST = "lost"


class WordleGame:
    """One round: a target word and the guesses made so far."""

    def __init__(self, target: str, dictionary: Iterable[str]) -> None:
        self.target = target
        self.chances = len(target) + 1
        self._dictionary = frozenset(dictionary)
        self._record: list[str] = []
        self._finished = False

    def guess(self, word: str) -> Outcome:
        """Play a guess; raise a WordleError if it cannot be counted."""
        if self._finished:
            raise WordleError("the game is already over")
        word = word.lower()
        won = word == self.target
        if not won:
            if len(word) != len(self.target):
                raise LengthNotEnough()
            if word not in self._dictionary:
                raise UnknownWord()
        self._record.append(word)
        if won:
            self._finished = True
            return Outcome.WON
        if len(self._record) >= self.chances:
            self._finished = True
            return Outcome.LOST
        return Outcome.CONTINUE

    def marks(self) -> list[list[Mark]]:
        """Return the marks of each guess made so far."""
        return [
            [self._mark(position, letter) for position, letter in enumerate(word)]
            for word in self._record
        ]

    def _mark(self, position: int, letter: str) -> Mark:
        if letter == self.target[position]:
            return Mark.MATCH
        if letter in self.target:
            return Mark.EXIST
        return Mark.NOT_EXIST

    def render(self) -> bytes:
        """Draw the board as a PNG image."""
        size = len(self.target)
        step = _SIDE + 4
        width = step * size + _SPACE * 2 - 4
        height = step * (size + 1) + _SPACE * 2 - 4
        image = Image.new("RGB", (width, height), _WHITE)
        draw = ImageDraw.Draw(image)
        font = ImageFont.load_default()
        marks = self.marks()
        for row in range(size + 1):
            for column in range(size):
                left = _SPACE + column * step
                top = _SPACE + row * step
                if row < len(marks):
                    draw.rectangle(
                        [left, top, left + _SIDE - 1, top + _SIDE - 1],
                        fill=marks[row][column].color,
                    )
                    draw.text(
                        (left + 7, top + 4),
                        self._record[row][column].upper(),
                        fill=_WHITE,
                        font=font,
                    )
                else:
                    draw.rectangle(
                        [left + 1, top + 1, left + _SIDE - 2, top + _SIDE - 2],
                        outline=Mark.UNDONE.color,
                        width=1,
                    )
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()


def load_word_list(text: str) -> list[str]:
    """Split a newline-separated word file into a sorted list."""
    return sorted(text.split("\n"))


def level_of(name: str) -> int:
    """Return the word length for a level name such as 六阶."""
    try:
        return _LEVELS[name]
    except KeyError:
        raise ValueError(f"unknown level: {name!r}") from None