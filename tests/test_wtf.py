import json
from unittest.mock import MagicMock, patch

import pytest

from chatplugins.wtf import API_PREFIX, TABLE, Wtf, list_text, lookup


def test_lookup_first_entry():
    entry = lookup(0)
    assert entry.name == "你的意义是什么?"
    assert entry.path == "mRIFuS"


def test_lookup_last_entry():
    assert lookup(len(TABLE) - 1).name == "你的蘿莉控程度全國排名"


@pytest.mark.parametrize("index", [-1, len(TABLE), len(TABLE) + 5])
def test_lookup_out_of_range(index):
    assert lookup(index) is None


def test_list_text_has_one_line_per_quiz():
    lines = list_text().splitlines()
    assert len(lines) == len(TABLE)
    assert lines[0] == "00. 你的意义是什么?"
    assert lines[10].startswith("10. ")


def test_build_url_without_names():
    entry = Wtf("demo", "abc")
    assert entry.build_url() == API_PREFIX + "abc"


def test_build_url_escapes_names():
    entry = Wtf("demo", "abc")
    assert entry.build_url("a b", "c/d") == API_PREFIX + "abc/a+b/c%2Fd"


def test_parse_result_ok():
    entry = Wtf("demo", "abc")
    data = json.dumps({"text": "hello", "ok": True, "msg": ""}).encode()
    assert entry.parse_result(data) == "> demo\nhello"


def test_parse_result_failure_raises_message():
    entry = Wtf("demo", "abc")
    data = json.dumps({"text": "", "ok": False, "msg": "bad request"})
    with pytest.raises(RuntimeError, match="bad request"):
        entry.parse_result(data)


def test_parse_result_invalid_json():
    with pytest.raises(ValueError):
        Wtf("demo", "abc").parse_result(b"not json")


def test_predict_requests_and_parses():
    response = MagicMock()
    response.content = json.dumps({"text": "result", "ok": True}).encode()
    entry = Wtf("demo", "abc")
    with patch("chatplugins.wtf.requests.get", return_value=response) as mock_get:
        result = entry.predict("alice", "bob")
    assert result == "> demo\nresult"
    assert mock_get.call_args[0][0] == API_PREFIX + "abc/alice/bob"