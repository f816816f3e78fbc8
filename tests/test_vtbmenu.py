from unittest import mock

import pytest

from chatplugins.vtb import VtbStore
from chatplugins.vtbmenu import (
    BAD_NUMBER,
    EMPTY_CHOICE,
    NO_QUOTATION,
    TOO_MANY_ERRORS,
    QuotationSession,
    download_record,
    escape_record_url,
    record_path,
)

VOICE_URL = "https://example.com/voices/good morning.mp3"


@pytest.fixture
def store(tmp_path):
    db = VtbStore(tmp_path / "vtb.db")
    db.store_vtb_list([{"uid": "u1", "name": "Alice"}])
    db.store_vtb_page(
        "u1",
        {
            "data": {
                "voices": [
                    {
                        "categoryName": "日常",
                        "voiceList": [{"name": "早安", "path": VOICE_URL}],
                    }
                ]
            }
        },
    )
    yield db
    db.close()


@pytest.fixture
def session(store, tmp_path):
    records = tmp_path / "store"
    records.mkdir()
    return QuotationSession(store, records)


def test_escape_record_url_encodes_space():
    assert escape_record_url(VOICE_URL) == "https://example.com/voices/good%20morning.mp3"


def test_escape_record_url_keeps_plain_url():
    url = "https://example.com/voices/plain.mp3"
    assert escape_record_url(url) == url


def test_record_path_uses_indexes_and_extension(tmp_path):
    path = record_path(tmp_path, 1, 2, 3, "https://example.com/a/b.mp3")
    assert path == tmp_path / "1-2-3.mp3"


def test_record_path_without_extension(tmp_path):
    path = record_path(tmp_path, 0, 0, 0, "https://example.com/a.b/voice")
    assert path.name == "0-0-0"


def test_download_record_skips_existing_file(tmp_path):
    target = tmp_path / "x.mp3"
    target.write_bytes(b"cached")
    with mock.patch("chatplugins.vtbmenu.requests.get") as get:
        result = download_record(target, "https://example.com/x.mp3")
    assert result == target
    assert target.read_bytes() == b"cached"
    get.assert_not_called()


def test_download_record_writes_fetched_bytes(tmp_path):
    target = tmp_path / "y.mp3"
    with mock.patch("chatplugins.vtbmenu.requests.get") as get:
        get.return_value.content = b"audio"
        download_record(target, "https://example.com/y.mp3")
    assert target.read_bytes() == b"audio"
    assert get.call_args.args[0] == "https://example.com/y.mp3"


def test_start_shows_streamers(session, store):
    reply = session.start()
    assert reply.menu == store.first_category_menu()
    assert "Alice" in reply.menu


def test_full_walk_to_cached_record(session, store, tmp_path):
    url = escape_record_url(VOICE_URL)
    cached = record_path(tmp_path / "store", 0, 0, 0, url)
    cached.write_bytes(b"voice")

    second = session.handle("0")
    assert second.menu == store.second_category_menu(0)
    third = session.handle("0")
    assert third.menu == store.third_category_menu(0, 0)
    with mock.patch("chatplugins.vtbmenu.requests.get") as get:
        final = session.handle("0")
    get.assert_not_called()
    assert final.text == "请欣赏《早安》"
    assert final.record == cached
    assert final.finished
    with pytest.raises(RuntimeError):
        session.handle("0")


def test_bad_number_counts_error(session):
    reply = session.handle("abc")
    assert reply.text == BAD_NUMBER
    assert session.errors == 1
    assert session.step == 0


def test_empty_streamer_reshows_first_menu(session, store):
    reply = session.handle("9")
    assert reply.text == EMPTY_CHOICE
    assert reply.menu == store.first_category_menu()
    assert session.step == 0


def test_empty_group_reshows_second_menu(session, store):
    session.handle("0")
    reply = session.handle("7")
    assert reply.text == EMPTY_CHOICE
    assert reply.menu == store.second_category_menu(0)
    assert session.step == 1


def test_missing_quotation_goes_back_a_step(session, store):
    session.handle("0")
    session.handle("0")
    reply = session.handle("5")
    assert reply.text == NO_QUOTATION
    assert reply.menu == store.first_category_menu()
    assert session.step == 1
    again = session.handle("0")
    assert again.menu == store.third_category_menu(0, 0)


def test_three_errors_end_session(session):
    for _ in range(3):
        session.handle("x")
    reply = session.handle("0")
    assert reply.text == TOO_MANY_ERRORS
    assert reply.finished
    assert session.finished