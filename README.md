# chatplugins

The logic behind a set of group-chat bot features. Each module works on its
own and needs no chat framework. State is kept in SQLite files. The few
network lookups use `requests`, HTML pages are parsed with `lxml`, and the
word-game board is drawn with Pillow.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `chatplugins.score`: daily sign-in with levels and ranks.
  `ScoreStore(path)` keeps scores (`get_score`, `set_score`, `top_scores`)
  and sign-in counters (`get_sign_in`, `set_sign_in_count`).
  `sign_in(store, uid, now)` allows one sign-in per calendar day. It adds
  one point of experience, capped at `SCORE_MAX` (1200), and returns a
  `SignInResult` with the level, the rank, the score needed for the next
  rank, a random coin reward, a greeting for the hour and the date as
  `MM/DD`. A second sign-in on the same day returns a result with
  `already_signed=True`. The helpers are `rank_of`, `next_rank_score` and
  `hour_greeting`.
- `chatplugins.sleep`: good-night and good-morning tracking for each group.
  `SleepStore.sleep(gid, uid, now)` and `SleepStore.get_up(gid, uid, now)`
  return the member's place in line and the time since their last entry.
  `is_morning` and `is_evening` give the hours in which each greeting counts.
  `split_duration` splits a duration into hours, minutes and seconds.
  `morning_reply` and `evening_reply` format the answers.
- `chatplugins.wordle`: the word-guessing game. `WordleGame(target,
  dictionary)` allows one guess more than the word's length.
  `guess(word)` returns an `Outcome` (`CONTINUE`, `WON` or `LOST`). It raises
  `LengthNotEnough` or `UnknownWord`, both subclasses of `WordleError`, for
  guesses that do not count. `marks()` gives the `Mark` of every letter
  guessed so far, and `render()` draws the board as PNG bytes.
  `load_word_list` and `level_of` help set up a round.
- `chatplugins.wtf`: a catalogue (`TABLE`) of quiz generators hosted by a
  remote service. `lookup(index)` returns a `Wtf` or `None`, and
  `list_text()` gives the numbered list. `Wtf.predict(*names)` runs a quiz
  over HTTP. It raises `RuntimeError` with the service's message when the
  run fails.
- `chatplugins.vtb`: `VtbStore(path)` is a database of VTuber voice quotes
  in three levels: streamers, quote groups and quotes. It has numbered
  menus for each level, `get_third_category`, `random_vtb` and
  `get_first_category_by_uid`. `store_vtb_list` and `store_vtb_page` load
  parsed JSON, and `update_from_web()` refreshes everything from the
  quote site.
- `chatplugins.vtbmenu`: `QuotationSession(store, store_dir)` walks a member
  through the three menus. `start()` opens it, and each `handle(text)`
  returns a `Reply`. The session gives up after three wrong inputs. Once a
  quote is chosen, its recording is downloaded into `store_dir`
  (`record_path`, `download_record`, `escape_record_url`).
- `chatplugins.tarot`: `Deck.from_json(cards_json, formations_json)` builds
  a deck. `draw(n, kind)` draws up to 20 distinct cards, upright or
  reversed. `spread(name, kind)` lays out a named spread. `describe(name)`
  gives both meanings of a card. `card_list_text()` and
  `formation_list_text()` list what is known. `parse_draw_count` reads
  the "n张" part of a draw command.
- `chatplugins.wordcount`: hot-word counting. `load_stopwords` reads a
  stopword list. `count_words` counts the Chinese words among
  already-segmented slices that are not stopwords. `top_words` /
  `rank_by_word_count` order them. `clamp_message_count` applies the
  10000-message limit and the default of 1000.
- `chatplugins.ymgal`: `YmgalStore(path)` stores galgame CG and sticker
  picture sets, with `upsert`, `get_by_id`, `random(picture_type)` and
  `search(picture_type, key)`. The parsers `parse_page_count`,
  `parse_picset_ids`, `parse_cg_picset` and `parse_emoticon_picset` read
  the site's pages. `update_pictures(store)` fetches sets newer than the
  stored ones. `forward_texts(record)` gives the lines to send, and raises
  `LookupError` when there is nothing to show.

## Examples

```python
from datetime import datetime
from chatplugins.score import ScoreStore, sign_in

with ScoreStore("score.db") as store:
    result = sign_in(store, 10001, datetime.now())
    print(result.level, result.rank, result.reward)
```

```python
from chatplugins.wordle import WordleGame

game = WordleGame("apple", ["apple", "angle", "ample"])
outcome = game.guess("angle")
print(outcome, game.marks())
png = game.render()
```

## What this package does not do

- It has no chat bot and no commands. It does not connect to any chat
  service, match messages or send replies. You call the functions yourself
  and deliver the text, menus and images they return.
- It ships no data files. Tarot card and spread JSON, wordle word lists,
  stopword lists and prepared databases must be provided by the caller.
- Sign-in rewards are only returned. No coin wallet is kept, and the
  sign-in picture and ranking charts are not drawn.
- Hot-word counting does not fetch chat history or segment text into
  words. It works on the slices you give it.
- Tarot draws return cards and image URLs. The pictures are not downloaded.