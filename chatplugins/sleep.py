"""Good-night and good-morning tracking per group."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta
from os import PathLike

_SCHEMA = """
CREATE TABLE IF NOT EXISTS sleep_manage (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    group_id INTEGER NOT NULL,
    user_id INTEGER NOT NULL,
    sleep_time TEXT NOT NULL
);
"""

_MICROS_PER_SECOND = 1_000_000
_MICROS_PER_MINUTE = 60 * _MICROS_PER_SECOND
_MICROS_PER_HOUR = 60 * _MICROS_PER_MINUTE


def _stamp(moment: datetime) -> str:
    return moment.isoformat(sep=" ", timespec="microseconds")


def _clear_clock(now: datetime, anchor_hour: int) -> datetime:
    """Shift ``now`` back to ``anchor_hour`` o'clock, keeping sub-second digits."""
    return now - timedelta(
        hours=now.hour - anchor_hour, minutes=now.minute, seconds=now.second
    )


class SleepStore:
    """SQLite-backed record of the last sleep or wake-up time of each member."""

    def __init__(self, path: str | PathLike[str]) -> None:
        self._conn = sqlite3.connect(str(path))
        self._conn.executescript(_SCHEMA)
        self._conn.commit()

    def __enter__(self) -> SleepStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._conn.close()

    def sleep(self, gid: int, uid: int, now: datetime) -> tuple[int, timedelta]:
        """Record a good-night; return the member's place tonight and time awake."""
        if now.hour >= 21:
            since = _clear_clock(now, 21)
        elif now.hour <= 3:
            since = now - timedelta(
                hours=3 + now.hour, minutes=now.minute, seconds=now.second
            )
        else:
            since = datetime.min
        return self._record(gid, uid, now, since)

    def get_up(self, gid: int, uid: int, now: datetime) -> tuple[int, timedelta]:
        """Record a good-morning; return the member's place today and time asleep."""
        return self._record(gid, uid, now, _clear_clock(now, 6))

    def _record(
        self, gid: int, uid: int, now: datetime, since: datetime
    ) -> tuple[int, timedelta]:
        row = self._conn.execute(
            "SELECT sleep_time FROM sleep_manage WHERE group_id = ? AND user_id = ? "
            "ORDER BY id LIMIT 1",
            (gid, uid),
        ).fetchone()
        elapsed = timedelta(0)
        with self._conn:
            if row is None:
                self._conn.execute(
                    "INSERT INTO sleep_manage (group_id, user_id, sleep_time) "
                    "VALUES (?, ?, ?)",
                    (gid, uid, _stamp(now)),
                )
            else:
                elapsed = now - datetime.fromisoformat(row[0])
                self._conn.execute(
                    "UPDATE sleep_manage SET sleep_time = ? "
                    "WHERE group_id = ? AND user_id = ?",
                    (_stamp(now), gid, uid),
                )
        (position,) = self._conn.execute(
            "SELECT COUNT(*) FROM sleep_manage "
            "WHERE group_id = ? AND sleep_time <= ? AND sleep_time >= ?",
            (gid, _stamp(now), _stamp(since)),
        ).fetchone()
        return position, elapsed


def _truncated_div(value: int, divisor: int) -> int:
    quotient = abs(value) // divisor
    return -quotient if value < 0 else quotient


def split_duration(duration: timedelta) -> tuple[int, int, int]:
    """Split a duration into whole hours, minutes and seconds, truncating."""
    total = duration // timedelta(microseconds=1)
    hours = _truncated_div(total, _MICROS_PER_HOUR)
    total -= hours * _MICROS_PER_HOUR
    minutes = _truncated_div(total, _MICROS_PER_MINUTE)
    total -= minutes * _MICROS_PER_MINUTE
    seconds = _truncated_div(total, _MICROS_PER_SECOND)
    return hours, minutes, seconds


def is_morning(hour: int) -> bool:
    """Good-mornings count from 6 to 12 o'clock."""
    return 6 <= hour <= 12


def is_evening(hour: int) -> bool:
    """Good-nights count from 21 o'clock to 3 in the morning."""
    return hour >= 21 or hour <= 3


def _meaningless(hours: int, minutes: int, seconds: int) -> bool:
    return (hours == 0 and minutes == 0 and seconds == 0) or hours >= 24


def morning_reply(position: int, duration: timedelta) -> str:
    hours, minutes, seconds = split_duration(duration)
    if _meaningless(hours, minutes, seconds):
        return f"早安成功！你是今天第{position}个起床的"
    return (
        f"早安成功！你的睡眠时长为{hours}时{minutes}分{seconds}秒,"
        f"你是今天第{position}个起床的"
    )


def evening_reply(position: int, duration: timedelta) -> str:
    hours, minutes, seconds = split_duration(duration)
    if _meaningless(hours, minutes, seconds):
        return f"晚安成功！你是今天第{position}个睡觉的"
    return (
        f"晚安成功！你的清醒时长为{hours}时{minutes}分{seconds}秒,"
        f"你是今天第{position}个睡觉的"
    )