"""The three-step menu that leads a member to one recorded quotation."""

from __future__ import annotations

import re
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from urllib.parse import quote_plus

import requests

from chatplugins.vtb import VtbStore

MAX_ERRORS = 3
TIMEOUT_TEXT = "vtb语录指令过期"
TOO_MANY_ERRORS = "输入错误太多,请重新发指令"
BAD_NUMBER = "请输入正确的序号，三次输入错误，指令可退出重输"
EMPTY_CHOICE = "你选择的序号没有内容，请重新选择，三次输入错误，指令可退出重输"
NO_QUOTATION = "没有内容请重新选择，三次输入错误，指令可退出重输"

_USER_AGENT = "Mozilla/5.0 (Windows NT 6.1; WOW64; rv:6.0) Gecko/20100101 Firefox/6.0"
_TIMEOUT = 30
_LAST_SEGMENT = re.compile(r".*/(.*)")
_NUMBER = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class Reply:
    """What the bot answers to one step of the menu.

    ``menu`` is a menu listing to show, ``record`` the local file of the chosen
    quotation, and ``finished`` tells whether the session has ended.
    """

    text: str = ""
    menu: str = ""
    record: Path | None = None
    finished: bool = False


def escape_record_url(url: str) -> str:
    """Percent-encode the last path segment of a recording's URL."""
    match = _LAST_SEGMENT.search(url)
    if match is None:
        return url
    segment = match.group(1)
    url = url.replace(segment, quote_plus(segment, safe=""))
    return url.replace("+", "%20")


def _extension(url: str) -> str:
    name = url.rsplit("/", 1)[-1]
    dot = name.rfind(".")
    return name[dot:] if dot >= 0 else ""


def record_path(
    store_dir: str | PathLike[str], first: int, second: int, third: int, url: str
) -> Path:
    """Return where the recording chosen by three menu numbers is cached."""
    return Path(store_dir) / f"{first}-{second}-{third}{_extension(url)}"


def download_record(path: str | PathLike[str], url: str) -> Path:
    """Fetch the recording at ``url`` into ``path`` unless it is already there."""
    target = Path(path)
    if not target.exists():
        response = requests.get(
            url,
            headers={
                "Content-Type": "application/x-www-form-urlencoded",
                "User-Agent": _USER_AGENT,
            },
            timeout=_TIMEOUT,
        )
        target.write_bytes(response.content)
    return target


class QuotationSession:
    """One member walking through streamer, group and quotation menus."""

    def __init__(self, store: VtbStore, store_dir: str | PathLike[str]) -> None:
        self.store = store
        self.store_dir = Path(store_dir)
        self.step = 0
        self.errors = 0
        self.finished = False
        self._indexes = [0, 0, 0]

    def start(self) -> Reply:
        """Open the session with the list of streamers."""
        return Reply(menu=self.store.first_category_menu())

    def handle(self, text: str) -> Reply:
        """Take the member's next message and answer it."""
        if self.finished:
            raise RuntimeError("the quotation session is over")
        if self.errors >= MAX_ERRORS:
            self.finished = True
            return Reply(text=TOO_MANY_ERRORS, finished=True)
        text = text.strip()
        if not _NUMBER.fullmatch(text):
            self.errors += 1
            return Reply(text=BAD_NUMBER)
        number = int(text)
        if self.step == 0:
            return self._choose_streamer(number)
        if self.step == 1:
            return self._choose_group(number)
        return self._choose_quotation(number)

    def _choose_streamer(self, number: int) -> Reply:
        self._indexes[0] = number
        menu = self.store.second_category_menu(number)
        if not menu:
            self.errors += 1
            return Reply(text=EMPTY_CHOICE, menu=self.store.first_category_menu())
        self.step = 1
        return Reply(menu=menu)

    def _choose_group(self, number: int) -> Reply:
        self._indexes[1] = number
        menu = self.store.third_category_menu(self._indexes[0], number)
        if not menu:
            self.errors += 1
            return Reply(
                text=EMPTY_CHOICE,
                menu=self.store.second_category_menu(self._indexes[0]),
            )
        self.step = 2
        return Reply(menu=menu)

    def _choose_quotation(self, number: int) -> Reply:
        self._indexes[2] = number
        first, second, third = self._indexes
        quotation = self.store.get_third_category(first, second, third)
        if quotation is None or not quotation.path:
            self.errors += 1
            self.step = 1
            return Reply(text=NO_QUOTATION, menu=self.store.first_category_menu())
        self.finished = True
        url = escape_record_url(quotation.path)
        path = record_path(self.store_dir, first, second, third, url)
        download_record(path, url)
        return Reply(text=f"请欣赏《{quotation.name}》", record=path, finished=True)