from sgacrawl.utils.normalize import is_blank, unescape_whitespace


def test_unescape_whitespace_sequences() -> None:
    assert unescape_whitespace("\\t") == "\t"
    assert unescape_whitespace("\\n") == "\n"
    assert unescape_whitespace("\\r\\n  ") == "\r\n  "
    assert unescape_whitespace("a\\tb") == "a\tb"


def test_unescape_whitespace_is_noop_on_real_whitespace() -> None:
    value = unescape_whitespace("\\t\\n")
    assert unescape_whitespace(value) == value


def test_is_blank() -> None:
    assert is_blank("")
    assert is_blank(" \t\r\n")
    assert not is_blank(" x ")
