"""Daily sign-in, experience levels and the score database behind them."""

from __future__ import annotations

import random
import sqlite3
from dataclasses import dataclass
from datetime import datetime
from os import PathLike

SIGNIN_MAX = 1
SCORE_MAX = 1200
RANKS = (0, 10, 20, 50, 100, 200, 350, 550, 750, 1000, 1200)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS score (
    uid INTEGER PRIMARY KEY,
    score INTEGER NOT NULL DEFAULT 0
);
CREATE TABLE IF NOT EXISTS sign_in (
    uid INTEGER PRIMARY KEY,
    count INTEGER NOT NULL DEFAULT 0,
    updated_at TEXT NOT NULL
);
"""


@dataclass(frozen=True)
class ScoreRow:
    """A user's accumulated experience."""

    uid: int
    score: int = 0


@dataclass(frozen=True)
class SignInRow:
    """How many times a user signed in on the day of ``updated_at``."""

    uid: int
    count: int
    updated_at: datetime


@dataclass(frozen=True)
class SignInResult:
    """Outcome of one sign-in attempt."""

    already_signed: bool
    level: int
    rank: int
    next_rank_score: int
    reward: int = 0
    capped: bool = False
    greeting: str = ""
    date_text: str = ""


class ScoreStore:
    """SQLite-backed store of scores and sign-in counters."""

    def __init__(self, path: str | PathLike[str]) -> None:
        self._conn = sqlite3.connect(str(path))
        self._conn.executescript(_SCHEMA)
        self._conn.commit()

    def __enter__(self) -> ScoreStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._conn.close()

    def get_score(self, uid: int) -> ScoreRow:
        """Return the user's score, creating a zero row if there is none."""
        row = self._conn.execute(
            "SELECT uid, score FROM score WHERE uid = ?", (uid,)
        ).fetchone()
        if row is None:
            with self._conn:
                self._conn.execute("INSERT INTO score (uid, score) VALUES (?, 0)", (uid,))
            return ScoreRow(uid, 0)
        return ScoreRow(*row)

    def set_score(self, uid: int, score: int) -> None:
        with self._conn:
            self._conn.execute(
                "INSERT INTO score (uid, score) VALUES (?, ?) "
                "ON CONFLICT(uid) DO UPDATE SET score = excluded.score",
                (uid, score),
            )

    def get_sign_in(self, uid: int) -> SignInRow:
        """Return the user's sign-in row, creating one stamped now if missing."""
        return self._sign_in_row(uid, datetime.now())

    def set_sign_in_count(self, uid: int, count: int) -> None:
        self._write_sign_in(uid, count, datetime.now())

    def top_scores(self, n: int) -> list[ScoreRow]:
        """Return up to ``n`` rows, highest score first."""
        rows = self._conn.execute(
            "SELECT uid, score FROM score ORDER BY score DESC LIMIT ?", (n,)
        ).fetchall()
        return [ScoreRow(*row) for row in rows]

    def _sign_in_row(self, uid: int, now: datetime) -> SignInRow:
        row = self._conn.execute(
            "SELECT uid, count, updated_at FROM sign_in WHERE uid = ?", (uid,)
        ).fetchone()
        if row is None:
            with self._conn:
                self._conn.execute(
                    "INSERT INTO sign_in (uid, count, updated_at) VALUES (?, 0, ?)",
                    (uid, now.isoformat()),
                )
            return SignInRow(uid, 0, now)
        return SignInRow(row[0], row[1], datetime.fromisoformat(row[2]))

    def _write_sign_in(self, uid: int, count: int, when: datetime) -> None:
        with self._conn:
            self._conn.execute(
                "INSERT INTO sign_in (uid, count, updated_at) VALUES (?, ?, ?) "
                "ON CONFLICT(uid) DO UPDATE SET count = excluded.count, "
                "updated_at = excluded.updated_at",
                (uid, count, when.isoformat()),
            )


def rank_of(score: int) -> int:
    """Return the rank index for a score, or -1 above the last threshold."""
    for rank, threshold in enumerate(RANKS):
        if score == threshold:
            return rank
        if score < threshold:
            return rank - 1
    return -1


def next_rank_score(rank: int) -> int:
    """Return the score needed for the rank after ``rank``."""
    if rank < len(RANKS) - 1:
        return RANKS[rank + 1]
    return SCORE_MAX


def hour_greeting(hour: int) -> str:
    if 6 <= hour < 12:
        return "早上好"
    if 12 <= hour < 14:
        return "中午好"
    if 14 <= hour < 19:
        return "下午好"
    if 19 <= hour < 24:
        return "晚上好"
    if 0 <= hour < 6:
        return "凌晨好"
    return ""


def sign_in(store: ScoreStore, uid: int, now: datetime) -> SignInResult:
    """Sign a user in at ``now``, raising their level and granting a reward."""
    today = now.strftime("%Y%m%d")
    record = store._sign_in_row(uid, now)
    same_day = record.updated_at.strftime("%Y%m%d") == today

    if record.count >= SIGNIN_MAX and same_day:
        level = store.get_score(uid).score
        rank = rank_of(level)
        return SignInResult(
            already_signed=True,
            level=level,
            rank=rank,
            next_rank_score=next_rank_score(rank),
        )
    if not same_day:
        store._write_sign_in(uid, 0, now)
    store._write_sign_in(uid, record.count + 1, now)

    level = store.get_score(uid).score + 1
    capped = level > SCORE_MAX
    if capped:
        level = SCORE_MAX
    store.set_score(uid, level)

    rank = rank_of(level)
    reward = 1 + random.randrange(10) + rank * 5
    return SignInResult(
        already_signed=False,
        level=level,
        rank=rank,
        next_rank_score=next_rank_score(rank),
        reward=reward,
        capped=capped,
        greeting=hour_greeting(now.hour),
        date_text=now.strftime("%m/%d"),
    )