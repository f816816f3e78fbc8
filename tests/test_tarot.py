import json
import random

import pytest

from chatplugins.tarot import (
    BED,
    Card,
    Deck,
    DrawnCard,
    Formation,
    image_url,
    parse_draw_count,
)


def _cards_json():
    return {
        str(i): {
            "name": f"card{i}",
            "info": {
                "description": f"up{i}",
                "reverseDescription": f"down{i}",
                "imgUrl": f"img{i}.png",
            },
        }
        for i in range(77)
    }


def _formations_json():
    return {
        "spreadA": {"cards_num": 3, "is_cut": False, "represent": [["p1", "p2", "p3"]]},
        "spreadB": {"cards_num": 2, "is_cut": True, "represent": [["q1", "q2"]]},
    }


@pytest.fixture
def deck():
    return Deck.from_json(json.dumps(_cards_json()), json.dumps(_formations_json()))


def test_from_json_reads_cards(deck):
    card = deck.cards["5"]
    assert card == Card("card5", "up5", "down5", "img5.png")
    assert deck.by_name["card5"] is card


def test_from_json_reads_formations(deck):
    assert deck.formations["spreadB"] == Formation("spreadB", 2, True, [["q1", "q2"]])


def test_range_for_kinds(deck):
    assert deck.range_for("塔罗牌") == (0, 22)
    assert deck.range_for("大阿卡纳") == (0, 22)
    assert deck.range_for("小阿尔卡纳") == (22, 55)
    assert deck.range_for("混合") == (0, 77)


def test_draw_major_is_distinct_and_in_range(deck):
    drawn = deck.draw(20, "大阿卡纳", random.Random(1))
    names = [d.card.name for d in drawn]
    assert len(names) == 20
    assert len(set(names)) == 20
    assert all(int(n.removeprefix("card")) < 22 for n in names)


def test_draw_minor_in_range(deck):
    drawn = deck.draw(5, "小阿卡纳", random.Random(2))
    assert all(22 <= int(d.card.name.removeprefix("card")) < 77 for d in drawn)


@pytest.mark.parametrize("n", [0, -1, 21])
def test_draw_rejects_bad_count(deck, n):
    with pytest.raises(ValueError):
        deck.draw(n, "塔罗牌", random.Random(0))


def test_drawn_card_reversed_uses_reverse_meaning():
    card = Card("星星", "up", "down", "x.png")
    upright = DrawnCard(card, False)
    reversed_ = DrawnCard(card, True)
    assert upright.description == "up"
    assert reversed_.description == "down"
    assert upright.position == "『正位』"
    assert reversed_.position == "『逆位』"
    assert upright.image_name == "星星"
    assert reversed_.image_name == "Reverse星星"


def test_image_url():
    card = Card("a", img_url="x.png")
    assert image_url(card, False) == BED + "x.png"
    assert image_url(card, True) == BED + "Reverse/x.png"


def test_spread_assigns_places(deck):
    drawn = deck.spread("spreadA", "混合", random.Random(3))
    assert [d.represent for d in drawn] == ["p1", "p2", "p3"]
    assert len({d.card.name for d in drawn}) == 3
    first = drawn[0]
    assert first.summary.startswith("p1:" + first.position)
    assert first.description in first.summary


def test_spread_unknown_lists_formations(deck):
    with pytest.raises(KeyError) as info:
        deck.spread("missing", "塔罗", random.Random(0))
    assert "spreadA\nspreadB" in str(info.value)


def test_describe(deck):
    text = deck.describe("card3")
    assert "『正位』:up3" in text
    assert "『逆位』:down3" in text
    with pytest.raises(KeyError):
        deck.describe("nothing")


def test_card_list_text(deck):
    text = deck.card_list_text()
    lines = text.split("\n")
    assert lines[2] == " ".join(f"card{i}" for i in range(7))
    assert lines[3] == " ".join(f"card{i}" for i in range(7, 14))
    assert lines[4] == " ".join(f"card{i}" for i in range(14, 22))


def test_formation_list_text(deck):
    assert deck.formation_list_text() == "spreadA\nspreadB"


def test_parse_draw_count():
    assert parse_draw_count("") == 1
    assert parse_draw_count("3张") == 3
    with pytest.raises(ValueError):
        parse_draw_count("0张")
    with pytest.raises(ValueError):
        parse_draw_count("21张")