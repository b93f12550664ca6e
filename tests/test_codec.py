import json

import pytest

from termchat.codec import (
    FALLBACK_TEXT,
    Reply,
    decode_messages,
    encode_request,
    escape_json,
    extract_reply,
    find_string_end,
    unescape_json,
)
from termchat.history import ChatMessage, MessageHistory, Role


def test_escape_special_characters():
    assert escape_json('a\\b"c\nd\re\tf') == 'a\\\\b\\"c\\nd\\re\\tf'


def test_escape_does_not_double_escape():
    assert escape_json("\n") == "\\n"
    assert escape_json('"') == '\\"'


def test_escape_none_is_empty():
    assert escape_json(None) == ""
    assert unescape_json(None) == ""


def test_escape_leaves_other_text_alone():
    assert escape_json("héllo / wörld {}") == "héllo / wörld {}"


def test_unescape_reverses_escape():
    original = 'He said "hi"\n\tC:\\Temp\r'
    assert unescape_json(escape_json(original)) == original


def test_sequential_unescape_collapses_escaped_backslash_before_n():
    # A literal backslash followed by "n" comes back as a newline.
    assert unescape_json(escape_json("\\n")) == "\n"


def test_encode_single_turn_exact():
    history = MessageHistory("Be nice")
    history.add_user_message("Hello")

    body = encode_request(history.snapshot(), "test/model")

    assert body == (
        '{"model": "test/model","messages": ['
        '{"role": "system","content": "Be nice"},'
        '{"role": "user","content": "Hello"}'
        '],"max_tokens": 1000,"temperature": 0.7}'
    )
    assert '"role": "user","content": "Hello"}]' in body


def test_encode_produces_valid_json_in_order():
    history = MessageHistory("sys")
    for i in range(4):
        history.add_user_message(f'question "{i}"\nline two')
        history.add_assistant_message(f"answer\t{i}")

    parsed = json.loads(encode_request(history.snapshot(), "m", max_tokens=50, temperature=0.2))

    assert parsed["model"] == "m"
    assert parsed["max_tokens"] == 50
    assert parsed["temperature"] == 0.2
    assert len(parsed["messages"]) == len(history)
    assert [m["content"] for m in parsed["messages"]] == [m.content for m in history]


def test_encode_has_no_trailing_comma():
    history = MessageHistory("sys")
    history.add_user_message("only")
    body = encode_request(history.snapshot(), "m")
    assert ",]" not in body
    assert body.count('{"role": ') == 2


def test_decode_messages_round_trip():
    history = MessageHistory('System with "quotes"')
    history.add_user_message("tabs\tand\nnewlines\r\nand a path C:\\new\\table")
    history.add_assistant_message("")
    history.add_user_message('\\"tricky\\"')

    assert decode_messages(encode_request(history.snapshot(), "m")) == list(history.snapshot())


def test_decode_messages_requires_messages_array():
    with pytest.raises(ValueError):
        decode_messages('{"model": "m"}')


def test_decode_messages_rejects_missing_content():
    with pytest.raises(ValueError):
        decode_messages('{"messages": [{"role": "user"}]}')


@pytest.mark.parametrize(
    "text,start,expected",
    [
        ('ab\\"cd"ef', 0, 6),
        ('ab\\\\"x', 0, 4),
        ('"', 0, 0),
        ("no quote here", 0, -1),
        ('x\\"', 0, -1),
    ],
)
def test_find_string_end(text, start, expected):
    assert find_string_end(text, start) == expected


def test_extract_reply_simple():
    body = '{"id":"gen-1","choices":[{"message":{"role":"assistant","content":"Hi there!"}}]}'
    assert extract_reply(body) == Reply("Hi there!", parsed=True)


def test_extract_reply_unescapes_content():
    body = '{"choices":[{"message":{"content":"Line one\\nShe said \\"ok\\""}}]}'
    assert extract_reply(body).text == 'Line one\nShe said "ok"'


def test_extract_reply_empty_content():
    reply = extract_reply('{"choices":[{"message":{"content":""}}]}')
    assert reply.text == ""
    assert reply.parsed


def test_extract_reply_missing_marker_falls_back():
    reply = extract_reply('{"error":{"message":"bad"}}')
    assert reply == Reply(FALLBACK_TEXT, parsed=False)


def test_extract_reply_spaced_marker_is_not_found():
    reply = extract_reply('{"choices":[{"message":{"content": "spaced"}}]}')
    assert not reply.parsed


def test_extract_reply_unterminated_falls_back():
    reply = extract_reply('{"choices":[{"message":{"content":"never ends')
    assert reply == Reply(FALLBACK_TEXT, parsed=False)


def test_extract_reply_takes_first_marker():
    body = '{"meta":{"content":"first"},"choices":[{"message":{"content":"second"}}]}'
    assert extract_reply(body).text == "first"


def test_message_equality_uses_role_enum():
    assert ChatMessage.create("assistant", "x") == ChatMessage(Role.ASSISTANT, "x")
