"""Tarot cards: the deck, single and multiple draws, spreads and meanings."""

from __future__ import annotations

import json
import random
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

BED = "https://gitcode.net/shudorcl/zbp-tarot/-/raw/master/"
REVERSE_DIR = "Reverse/"
POSITIONS = ("『正位』", "『逆位』")
REASONS = ("您抽到的是~\n", "锵锵锵，塔罗牌的预言是~\n", "诶，让我看看您抽到了~\n")
MAX_DRAW = 20
MAJOR_COUNT = 22
MINOR_COUNT = 55

_MINOR_LIST = "[圣杯|星币|宝剑|权杖] [0-10|侍从|骑士|王后|国王]"


@dataclass(frozen=True)
class Card:
    """One card with its upright and reversed meanings."""

    name: str
    description: str = ""
    reverse_description: str = ""
    img_url: str = ""


@dataclass(frozen=True)
class Formation:
    """A spread: how many cards it takes and what each place stands for."""

    name: str
    cards_num: int
    is_cut: bool = False
    represent: list[list[str]] = field(default_factory=list)


@dataclass(frozen=True)
class DrawnCard:
    """A card as it came out of the deck, upright or reversed."""

    card: Card
    reversed: bool
    represent: str = ""

    @property
    def position(self) -> str:
        return POSITIONS[1] if self.reversed else POSITIONS[0]

    @property
    def description(self) -> str:
        return self.card.reverse_description if self.reversed else self.card.description

    @property
    def image_name(self) -> str:
        """Name of the cached picture; reversed cards get their own."""
        prefix = REVERSE_DIR[:-1] if self.reversed else ""
        return prefix + self.card.name

    @property
    def image_url(self) -> str:
        return image_url(self.card, self.reversed)

    @property
    def summary(self) -> str:
        """The card's line in a spread reading."""
        return (
            f"{self.represent}:{self.position}的『{self.card.name}』\n"
            f"其释义为: \n{self.description}\n"
        )


def image_url(card: Card, reversed_: bool) -> str:
    """Return where the card's picture is hosted."""
    return BED + (REVERSE_DIR if reversed_ else "") + card.img_url


def parse_draw_count(match: str) -> int:
    """Turn the "n张" part of a draw command into a card count."""
    if not match:
        return 1
    n = int(match.removesuffix("张"))
    _check_count(n)
    return n


def _check_count(n: int) -> None:
    if n <= 0:
        raise ValueError("张数必须为正")
    if n > MAX_DRAW:
        raise ValueError("抽取张数过多")


def _load(data: str | bytes | Mapping[str, Any]) -> Mapping[str, Any]:
    if isinstance(data, Mapping):
        return data
    return json.loads(data)


class Deck:
    """The full deck keyed by card number, together with the known spreads."""

    def __init__(
        self, cards: Mapping[str, Card], formations: Mapping[str, Formation]
    ) -> None:
        self.cards = dict(cards)
        self.formations = dict(formations)
        self.by_name = {card.name: card for card in self.cards.values()}
        self.major_arcana = [
            self.cards[str(i)].name if str(i) in self.cards else ""
            for i in range(MAJOR_COUNT)
        ]

    @classmethod
    def from_json(
        cls,
        cards_json: str | bytes | Mapping[str, Any],
        formations_json: str | bytes | Mapping[str, Any],
    ) -> Deck:
        """Build a deck from the card and spread files."""
        cards = {}
        for key, entry in _load(cards_json).items():
            info = entry.get("info") or {}
            cards[key] = Card(
                name=entry.get("name", ""),
                description=info.get("description", ""),
                reverse_description=info.get("reverseDescription", ""),
                img_url=info.get("imgUrl", ""),
            )
        formations = {
            name: Formation(
                name=name,
                cards_num=entry.get("cards_num", 0),
                is_cut=entry.get("is_cut", False),
                represent=[list(row) for row in entry.get("represent") or []],
            )
            for name, entry in _load(formations_json).items()
        }
        return cls(cards, formations)

    def range_for(self, kind: str) -> tuple[int, int]:
        """Return (first card number, number of cards) for a kind of draw."""
        if "小" in kind:
            return MAJOR_COUNT, MINOR_COUNT
        if kind == "混合":
            return 0, MAJOR_COUNT + MINOR_COUNT
        return 0, MAJOR_COUNT

    def _pick(self, count: int, kind: str, rng: random.Random) -> list[tuple[Card, bool]]:
        start, length = self.range_for(kind)
        picked = []
        for offset in rng.sample(range(length), count):
            reversed_ = rng.randrange(2) == 1
            picked.append((self.cards[str(start + offset)], reversed_))
        return picked

    def draw(
        self, n: int, kind: str, rng: random.Random | None = None
    ) -> list[DrawnCard]:
        """Draw ``n`` distinct cards of the given kind."""
        _check_count(n)
        return [
            DrawnCard(card, reversed_)
            for card, reversed_ in self._pick(n, kind, rng or random.Random())
        ]

    def spread(
        self, formation_name: str, kind: str, rng: random.Random | None = None
    ) -> list[DrawnCard]:
        """Lay out a spread; raise KeyError if there is no such spread."""
        try:
            formation = self.formations[formation_name]
        except KeyError:
            raise KeyError(
                f"没有找到{formation_name}噢~\n现有牌阵列表: \n"
                + self.formation_list_text()
            ) from None
        places = formation.represent[0] if formation.represent else []
        picked = self._pick(formation.cards_num, kind, rng or random.Random())
        return [
            DrawnCard(card, reversed_, places[i] if i < len(places) else "")
            for i, (card, reversed_) in enumerate(picked)
        ]

    def describe(self, name: str) -> str:
        """Return both meanings of the card called ``name``; KeyError if unknown."""
        card = self.by_name.get(name)
        if card is None:
            raise KeyError(f"没有找到{name}噢~")
        return (
            f"\n{name}的含义是~\n『正位』:{card.description}"
            f"\n『逆位』:{card.reverse_description}"
        )

    def card_list_text(self) -> str:
        """Return the list of card names shown when a lookup fails."""
        major = self.major_arcana
        return (
            "塔罗牌列表\n大阿尔卡纳:\n"
            + " ".join(major[:7])
            + "\n"
            + " ".join(major[7:14])
            + "\n"
            + " ".join(major[14:22])
            + "\n小阿尔卡纳:\n"
            + _MINOR_LIST
        )

    def formation_list_text(self) -> str:
        return "\n".join(self.formations)