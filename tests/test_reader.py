import io

from jsfxkit.reader import StreamTextReader, StringTextReader


def test_string_reader_mixed_line_endings():
    reader = StringTextReader("a\r\nb\rc\nd")
    assert list(reader) == ["a", "b", "c", "d"]


def test_string_reader_empty_lines_preserved():
    reader = StringTextReader("a\n\nb\n")
    assert list(reader) == ["a", "", "b"]


def test_string_reader_empty_input_has_no_lines():
    reader = StringTextReader("")
    assert reader.read_next_line() is None
    assert list(StringTextReader(None)) == []


def test_string_reader_stops_at_nul():
    reader = StringTextReader("abc\0def\nghi")
    assert reader.read_next_line() == "abc"
    assert reader.read_next_line() is None


def test_peek_does_not_consume():
    reader = StringTextReader("xy")
    assert reader.peek_next_char() == "x"
    assert reader.read_next_char() == "x"
    assert reader.read_next_char() == "y"
    assert reader.read_next_char() == ""


def test_read_next_line_after_end_returns_none_repeatedly():
    reader = StringTextReader("only")
    assert reader.read_next_line() == "only"
    assert reader.read_next_line() is None
    assert reader.read_next_line() is None


def test_stream_reader_text_stream():
    reader = StreamTextReader(io.StringIO("one\r\ntwo\rthree"))
    assert list(reader) == ["one", "two", "three"]


def test_stream_reader_binary_stream_latin1():
    reader = StreamTextReader(io.BytesIO(b"caf\xe9\nx"))
    assert list(reader) == ["caf\xe9", "x"]


def test_stream_reader_peek_then_read():
    reader = StreamTextReader(io.StringIO("pq"))
    assert reader.peek_next_char() == "p"
    assert reader.peek_next_char() == "p"
    assert reader.read_next_char() == "p"
    assert reader.read_next_char() == "q"
    assert reader.peek_next_char() == ""


def test_stream_reader_without_stream():
    reader = StreamTextReader(None)
    assert reader.read_next_line() is None


def test_stream_and_string_agree():
    text = "line 1\r\n\r\nline 3\nline 4\r"
    assert list(StreamTextReader(io.StringIO(text))) == list(StringTextReader(text))