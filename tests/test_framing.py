from __future__ import annotations

from twitchplay.irc.framing import LineFramer


def test_complete_lines_pass_through():  # type: ignore[no-untyped-def]
    framer = LineFramer()
    assert framer.feed(b"a\r\nb\r\n") == "a\r\nb\r\n"
    assert framer.pending == ""


def test_partial_line_is_held_until_terminated():  # type: ignore[no-untyped-def]
    framer = LineFramer()
    assert framer.feed(b"first\r\nsec") == "first\r\n"
    assert framer.pending == "sec"
    assert framer.feed(b"ond") == ""
    assert framer.feed(b"\r\n") == "second\r\n"
    assert framer.pending == ""


def test_split_utf8_sequence():  # type: ignore[no-untyped-def]
    data = "héllo\n".encode()
    framer = LineFramer()
    # Cut inside the two-byte 'é'
    assert framer.feed(data[:2]) == ""
    assert framer.feed(data[2:]) == "héllo\n"


def test_invalid_bytes_are_replaced():  # type: ignore[no-untyped-def]
    framer = LineFramer()
    assert framer.feed(b"bad \xff byte\n") == "bad � byte\n"


def test_flush_returns_unterminated_tail():  # type: ignore[no-untyped-def]
    framer = LineFramer()
    framer.feed(b"no newline")
    assert framer.flush() == "no newline"
    assert framer.pending == ""
    assert framer.feed(b"next\n") == "next\n"
