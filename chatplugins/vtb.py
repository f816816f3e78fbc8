"""The database of virtual streamers' voice quotations."""

from __future__ import annotations

import json
import random
import re
import sqlite3
from dataclasses import dataclass
from os import PathLike
from typing import Any

import requests

VTB_LIST_URL = "https://vtbkeyboard.moe/api/get_vtb_list"
VTB_PAGE_URL = "https://vtbkeyboard.moe/api/get_vtb_page?uid="
_TIMEOUT = 30

_USER_AGENTS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/96.0.4664.110 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/15.1 Safari/605.1.15",
    "Mozilla/5.0 (X11; Linux x86_64; rv:95.0) Gecko/20100101 Firefox/95.0",
)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS first_category (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    first_category_index BIGINT,
    first_category_name VARCHAR(255),
    first_category_uid VARCHAR(255),
    first_category_description VARCHAR(1024),
    first_category_icon_path VARCHAR(255)
);
CREATE TABLE IF NOT EXISTS second_category (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    second_category_index BIGINT,
    first_category_uid VARCHAR(255),
    second_category_name VARCHAR(255),
    second_category_author VARCHAR(255),
    second_category_description VARCHAR(255)
);
CREATE TABLE IF NOT EXISTS third_category (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    third_category_index BIGINT,
    second_category_index BIGINT,
    first_category_uid VARCHAR(255),
    third_category_name VARCHAR(255),
    third_category_path VARCHAR(255),
    third_category_author VARCHAR(255),
    third_category_description VARCHAR(255)
);
"""

_FIRST_COLUMNS = (
    "first_category_index, first_category_name, first_category_uid, "
    "first_category_description, first_category_icon_path"
)
_THIRD_COLUMNS = (
    "third_category_index, second_category_index, first_category_uid, "
    "third_category_name, third_category_path, third_category_author, "
    "third_category_description"
)

_UNICODE_ESCAPE = re.compile(r"\\u([0-9a-fA-F]{4})")


@dataclass(frozen=True)
class FirstCategory:
    """A streamer."""

    index: int
    name: str
    uid: str
    description: str = ""
    icon_path: str = ""


@dataclass(frozen=True)
class SecondCategory:
    """A group of quotations of one streamer."""

    index: int
    first_uid: str
    name: str
    author: str = ""
    description: str = ""


@dataclass(frozen=True)
class ThirdCategory:
    """A single quotation with the path of its recording."""

    index: int
    second_index: int
    first_uid: str
    name: str
    path: str = ""
    author: str = ""
    description: str = ""


def _text(node: Any, *path: str) -> str:
    for key in path:
        if not isinstance(node, dict) or key not in node:
            return ""
        node = node[key]
    if node is None:
        return ""
    if isinstance(node, str):
        return node
    return json.dumps(node, ensure_ascii=False)


def _decode_unicode_escapes(text: str) -> str:
    replaced = _UNICODE_ESCAPE.sub(lambda m: chr(int(m.group(1), 16)), text)
    return replaced.encode("utf-16", "surrogatepass").decode("utf-16", "replace")


def fetch_json(url: str) -> Any:
    """Fetch ``url`` and parse it as JSON, unfolding literal \\uXXXX escapes."""
    response = requests.get(
        url, headers={"User-Agent": random.choice(_USER_AGENTS)}, timeout=_TIMEOUT
    )
    response.raise_for_status()
    text = response.content.decode("utf-8", "replace")
    return json.loads(_decode_unicode_escapes(text))


class VtbStore:
    """SQLite-backed store of streamers, quotation groups and quotations."""

    def __init__(self, path: str | PathLike[str]) -> None:
        self._conn = sqlite3.connect(str(path))
        self._conn.executescript(_SCHEMA)
        self._conn.commit()

    def __enter__(self) -> VtbStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._conn.close()

    def _first_uid_by_index(self, first_index: int) -> str:
        row = self._conn.execute(
            "SELECT first_category_uid FROM first_category "
            "WHERE first_category_index = ? ORDER BY id LIMIT 1",
            (first_index,),
        ).fetchone()
        return row[0] if row else ""

    def first_category_menu(self) -> str:
        """Return the numbered list of all streamers."""
        rows = self._conn.execute(
            "SELECT first_category_index, first_category_name "
            "FROM first_category ORDER BY id"
        ).fetchall()
        return "请选择一个vtb并发送序号:\n" + "".join(
            f"{index}. {name}\n" for index, name in rows
        )

    def second_category_menu(self, first_index: int) -> str:
        """Return the numbered quotation groups of a streamer, or "" if none."""
        uid = self._first_uid_by_index(first_index)
        rows = self._conn.execute(
            "SELECT second_category_index, second_category_name "
            "FROM second_category WHERE first_category_uid = ? ORDER BY id",
            (uid,),
        ).fetchall()
        if not rows:
            return ""
        return "请选择一个语录类别并发送序号:\n" + "".join(
            f"{index}. {name}\n" for index, name in rows
        )

    def third_category_menu(self, first_index: int, second_index: int) -> str:
        """Return the numbered quotations of one group, or "" if none."""
        uid = self._first_uid_by_index(first_index)
        rows = self._conn.execute(
            "SELECT third_category_index, third_category_name FROM third_category "
            "WHERE first_category_uid = ? AND second_category_index = ? ORDER BY id",
            (uid, second_index),
        ).fetchall()
        if not rows:
            return ""
        return "请选择一个语录并发送序号:\n" + "".join(
            f"{index}. {name}\n" for index, name in rows
        )

    def get_third_category(
        self, first_index: int, second_index: int, third_index: int
    ) -> ThirdCategory | None:
        """Return the quotation chosen by its three menu numbers, or None."""
        uid = self._first_uid_by_index(first_index)
        row = self._conn.execute(
            f"SELECT {_THIRD_COLUMNS} FROM third_category "
            "WHERE first_category_uid = ? AND second_category_index = ? "
            "AND third_category_index = ? ORDER BY id LIMIT 1",
            (uid, second_index, third_index),
        ).fetchone()
        return ThirdCategory(*row) if row else None

    def random_vtb(self, rng: random.Random | None = None) -> ThirdCategory | None:
        """Return a random quotation, or None if there are none."""
        (count,) = self._conn.execute("SELECT COUNT(*) FROM third_category").fetchone()
        if count == 0:
            return None
        offset = (rng or random).randrange(count)
        row = self._conn.execute(
            f"SELECT {_THIRD_COLUMNS} FROM third_category ORDER BY id LIMIT 1 OFFSET ?",
            (offset,),
        ).fetchone()
        return ThirdCategory(*row)

    def get_first_category_by_uid(self, uid: str) -> FirstCategory | None:
        row = self._conn.execute(
            f"SELECT {_FIRST_COLUMNS} FROM first_category "
            "WHERE first_category_uid = ? ORDER BY id LIMIT 1",
            (uid,),
        ).fetchone()
        return FirstCategory(*row) if row else None

    def store_vtb_list(self, items: Any) -> list[str]:
        """Insert or update the streamers of a parsed list; return their uids."""
        if not isinstance(items, list):
            items = []
        uids: list[str] = []
        with self._conn:
            for index, item in enumerate(items):
                uid = _text(item, "uid")
                values = (
                    index,
                    _text(item, "name"),
                    _text(item, "description"),
                    _text(item, "icon_path"),
                )
                exists = self._conn.execute(
                    "SELECT 1 FROM first_category WHERE first_category_uid = ?", (uid,)
                ).fetchone()
                if exists is None:
                    self._conn.execute(
                        "INSERT INTO first_category (first_category_index, "
                        "first_category_name, first_category_description, "
                        "first_category_icon_path, first_category_uid) "
                        "VALUES (?, ?, ?, ?, ?)",
                        (*values, uid),
                    )
                else:
                    self._conn.execute(
                        "UPDATE first_category SET first_category_index = ?, "
                        "first_category_name = ?, first_category_description = ?, "
                        "first_category_icon_path = ? WHERE first_category_uid = ?",
                        (*values, uid),
                    )
                uids.append(uid)
        return uids

    def store_vtb_page(self, uid: str, page: Any) -> None:
        """Insert or update the quotation groups and quotations of one streamer."""
        voices = page.get("data", {}).get("voices") if isinstance(page, dict) else None
        if not isinstance(voices, list):
            voices = []
        with self._conn:
            for second_index, second in enumerate(voices):
                self._upsert_second(uid, second_index, second)
                voice_list = second.get("voiceList") if isinstance(second, dict) else None
                if not isinstance(voice_list, list):
                    continue
                for third_index, third in enumerate(voice_list):
                    self._upsert_third(uid, second_index, third_index, third)

    def _upsert_second(self, uid: str, second_index: int, item: Any) -> None:
        values = (
            _text(item, "categoryName"),
            _text(item, "author"),
            _text(item, "categoryDescription", "zh-CN"),
        )
        key = (uid, second_index)
        exists = self._conn.execute(
            "SELECT 1 FROM second_category "
            "WHERE first_category_uid = ? AND second_category_index = ?",
            key,
        ).fetchone()
        if exists is None:
            self._conn.execute(
                "INSERT INTO second_category (second_category_name, "
                "second_category_author, second_category_description, "
                "first_category_uid, second_category_index) VALUES (?, ?, ?, ?, ?)",
                (*values, *key),
            )
        else:
            self._conn.execute(
                "UPDATE second_category SET second_category_name = ?, "
                "second_category_author = ?, second_category_description = ? "
                "WHERE first_category_uid = ? AND second_category_index = ?",
                (*values, *key),
            )

    def _upsert_third(
        self, uid: str, second_index: int, third_index: int, item: Any
    ) -> None:
        values = (
            _text(item, "name"),
            _text(item, "description", "zh-CN"),
            _text(item, "path"),
            _text(item, "author"),
        )
        key = (uid, second_index, third_index)
        exists = self._conn.execute(
            "SELECT 1 FROM third_category WHERE first_category_uid = ? "
            "AND second_category_index = ? AND third_category_index = ?",
            key,
        ).fetchone()
        if exists is None:
            self._conn.execute(
                "INSERT INTO third_category (third_category_name, "
                "third_category_description, third_category_path, "
                "third_category_author, first_category_uid, second_category_index, "
                "third_category_index) VALUES (?, ?, ?, ?, ?, ?, ?)",
                (*values, *key),
            )
        else:
            self._conn.execute(
                "UPDATE third_category SET third_category_name = ?, "
                "third_category_description = ?, third_category_path = ?, "
                "third_category_author = ? WHERE first_category_uid = ? "
                "AND second_category_index = ? AND third_category_index = ?",
                (*values, *key),
            )

    def update_from_web(self) -> None:
        """Refresh the whole database from the quotation site."""
        for uid in self.store_vtb_list(fetch_json(VTB_LIST_URL)):
            self.store_vtb_page(uid, fetch_json(VTB_PAGE_URL + uid))