"""Galgame CG and sticker sets: the local database and the site scraper."""

from __future__ import annotations

import random as _random
import re
import sqlite3
import time
from dataclasses import dataclass
from os import PathLike
from urllib.parse import quote_plus

import lxml.html
import requests

WEB_URL = "https://www.ymgal.games"
CG_TYPE = "Gal CG"
EMOTICON_TYPE = "其他"
WEB_PIC_URL = WEB_URL + "/co/picset/"
CG_URL = (
    WEB_URL + "/search?type=picset&sort=default&category=" + quote_plus(CG_TYPE) + "&page="
)
EMOTICON_URL = (
    WEB_URL
    + "/search?type=picset&sort=default&category="
    + quote_plus(EMOTICON_TYPE)
    + "&page="
)
NO_PICTURE = "暂时没有这样的图呢"

_PAGE_NUMBER_XPATH = (
    "//*[@id='pager-box']/div/a[@class='icon item pager-next']"
    "/preceding-sibling::a[1]/text()"
)
_PICSET_LINK_XPATH = "//*[@id='picset-result-list']/ul/div/div[1]/a"
_PICTURE_COUNT_XPATH = (
    "//div[@class='meta-info']/div[@class='meta-right']/span[2]/text()"
)
_CG_PICTURE_XPATH = (
    "//*[@id='main-picset-warp']/div/div[2]/div/div[@class='swiper-wrapper']/div[{}]"
)
_EMOTICON_PICTURE_XPATH = (
    "//*[@id='main-picset-warp']/div/div[@class='stream-list']/div[{}]/img"
)
_NUMBER = re.compile(r"\d+")
_TIMEOUT = 30
_PAUSE = 0.5

_SCHEMA = """
CREATE TABLE IF NOT EXISTS ymgal (
    id INTEGER PRIMARY KEY,
    title VARCHAR(255),
    picture_type VARCHAR(255),
    picture_description VARCHAR(1024),
    picture_list VARCHAR(20000)
);
"""
_COLUMNS = "id, title, picture_type, picture_description, picture_list"


@dataclass(frozen=True)
class Ymgal:
    """One picture set: its title, kind, description and comma-joined URLs."""

    id: int
    title: str = ""
    picture_type: str = ""
    picture_description: str = ""
    picture_list: str = ""

    @property
    def pictures(self) -> list[str]:
        return self.picture_list.split(",") if self.picture_list else []


def _row(row: tuple | None) -> Ymgal | None:
    if row is None:
        return None
    return Ymgal(*(value if value is not None else "" for value in row))


class YmgalStore:
    """SQLite-backed store of picture sets."""

    def __init__(self, path: str | PathLike[str]) -> None:
        self._conn = sqlite3.connect(str(path))
        self._conn.executescript(_SCHEMA)
        self._conn.commit()

    def __enter__(self) -> YmgalStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._conn.close()

    def upsert(
        self,
        id: int,
        title: str,
        picture_type: str,
        description: str,
        picture_list: str,
    ) -> None:
        """Insert the set, or overwrite the one stored under the same id."""
        values = (title, picture_type, description, picture_list, id)
        with self._conn:
            exists = self._conn.execute(
                "SELECT 1 FROM ymgal WHERE id = ?", (id,)
            ).fetchone()
            if exists is None:
                self._conn.execute(
                    "INSERT INTO ymgal (title, picture_type, picture_description, "
                    "picture_list, id) VALUES (?, ?, ?, ?, ?)",
                    values,
                )
            else:
                self._conn.execute(
                    "UPDATE ymgal SET title = ?, picture_type = ?, "
                    "picture_description = ?, picture_list = ? WHERE id = ?",
                    values,
                )

    def get_by_id(self, id: int | str) -> Ymgal | None:
        row = self._conn.execute(
            f"SELECT {_COLUMNS} FROM ymgal WHERE id = ? LIMIT 1", (id,)
        ).fetchone()
        return _row(row)

    def _pick(
        self, where: str, params: tuple, rng: _random.Random | None
    ) -> Ymgal | None:
        (count,) = self._conn.execute(
            f"SELECT COUNT(*) FROM ymgal WHERE {where}", params
        ).fetchone()
        if count == 0:
            return None
        offset = (rng or _random).randrange(count)
        row = self._conn.execute(
            f"SELECT {_COLUMNS} FROM ymgal WHERE {where} "
            "ORDER BY rowid LIMIT 1 OFFSET ?",
            (*params, offset),
        ).fetchone()
        return _row(row)

    def random(
        self, picture_type: str, rng: _random.Random | None = None
    ) -> Ymgal | None:
        """Return a random set of the given kind, or None if there is none."""
        return self._pick("picture_type = ?", (picture_type,), rng)

    def search(
        self, picture_type: str, key: str, rng: _random.Random | None = None
    ) -> Ymgal | None:
        """Return a random set of the kind whose title or description holds ``key``."""
        pattern = f"%{key}%"
        return self._pick(
            "picture_type = ? AND (picture_description LIKE ? OR title LIKE ?)",
            (picture_type, pattern, pattern),
            rng,
        )


def _document(html: str | bytes):
    if isinstance(html, bytes):
        html = html.decode("utf-8", "replace")
    return lxml.html.fromstring(html)


def _find_one(doc, xpath: str):
    found = doc.xpath(xpath)
    if not found:
        raise ValueError(f"nothing found at {xpath}")
    return found[0]


def _attr(element, position: int) -> str:
    values = list(element.attrib.values())
    if len(values) <= position:
        raise ValueError(f"<{element.tag}> has no attribute number {position + 1}")
    return values[position]


def _number(text: str) -> int:
    match = _NUMBER.search(text)
    if match is None:
        raise ValueError(f"no number in {text!r}")
    return int(match.group())


def parse_page_count(html: str | bytes) -> int:
    """Return the number of the last result page of a search page."""
    text = str(_find_one(_document(html), _PAGE_NUMBER_XPATH)).strip()
    try:
        return int(text)
    except ValueError:
        raise ValueError(f"not a page number: {text!r}") from None


def parse_picset_ids(html: str | bytes) -> list[str]:
    """Return the picture-set ids linked from a search page, in page order."""
    ids = []
    for link in _document(html).xpath(_PICSET_LINK_XPATH):
        match = _NUMBER.search(_attr(link, 0))
        ids.append(match.group() if match else "")
    return ids


def _parse_picset(html: str | bytes, picture_xpath: str) -> tuple[str, str, list[str]]:
    doc = _document(html)
    title = _attr(_find_one(doc, "//meta[@name='name']"), 1)
    description = _attr(_find_one(doc, "//meta[@name='description']"), 1)
    count = _number(str(_find_one(doc, _PICTURE_COUNT_XPATH)))
    pictures = [
        _attr(_find_one(doc, picture_xpath.format(i)), 1) for i in range(1, count + 1)
    ]
    return title, description, pictures


def parse_cg_picset(html: str | bytes) -> tuple[str, str, list[str]]:
    """Return (title, description, picture URLs) of a CG set page."""
    return _parse_picset(html, _CG_PICTURE_XPATH)


def parse_emoticon_picset(html: str | bytes) -> tuple[str, str, list[str]]:
    """Return (title, description, picture URLs) of a sticker set page."""
    return _parse_picset(html, _EMOTICON_PICTURE_XPATH)


def forward_texts(record: Ymgal | None) -> list[str]:
    """Return the title, the description if any, then each picture URL.

    Raises LookupError when there is no set or it holds no pictures.
    """
    if record is None or not record.picture_list:
        raise LookupError(NO_PICTURE)
    texts = [record.title]
    if record.picture_description:
        texts.append(record.picture_description)
    texts.extend(record.picture_list.split(","))
    return texts


def _fetch(url: str) -> str:
    response = requests.get(url, timeout=_TIMEOUT)
    response.raise_for_status()
    return response.content.decode("utf-8", "replace")


def _collect_ids(base_url: str) -> list[str]:
    pages = parse_page_count(_fetch(base_url + "1"))
    ids: list[str] = []
    for page in range(1, pages + 1):
        ids.extend(parse_picset_ids(_fetch(base_url + str(page))))
        time.sleep(_PAUSE)
    return ids


def _store_new(store: YmgalStore, ids: list[str], picture_type: str, parse) -> None:
    for picset_id in reversed(ids):
        known = store.get_by_id(picset_id)
        if known is not None and known.picture_list:
            break
        number = int(picset_id)
        title, description, pictures = parse(_fetch(WEB_PIC_URL + picset_id))
        store.upsert(number, title, picture_type, description, ",".join(pictures))
        time.sleep(_PAUSE)


def update_pictures(store: YmgalStore) -> None:
    """Fetch the sets listed on the site that are newer than the stored ones."""
    cg_ids = _collect_ids(CG_URL)
    emoticon_ids = _collect_ids(EMOTICON_URL)
    _store_new(store, cg_ids, CG_TYPE, parse_cg_picset)
    _store_new(store, emoticon_ids, EMOTICON_TYPE, parse_emoticon_picset)