import pytest

from jsfxkit.gfx_input import (
    MAX_INPUT,
    GfxInput,
    Modifier,
    SpecialKey,
    latin1_tolower,
    translate_special_key,
)


def packed(name: bytes) -> int:
    return int.from_bytes(name.ljust(4, b"\0"), "little")


@pytest.mark.parametrize(
    "key,name",
    [
        (SpecialKey.DELETE, b"del"),
        (SpecialKey.F1, b"f1"),
        (SpecialKey.F10, b"f10"),
        (SpecialKey.LEFT, b"left"),
        (SpecialKey.RIGHT, b"rght"),
        (SpecialKey.PAGE_DOWN, b"pgdn"),
        (SpecialKey.INSERT, b"ins"),
    ],
)
def test_translate_special_key(key, name):
    assert translate_special_key(key) == packed(name)


def test_translate_regular_key_is_none():
    assert translate_special_key(ord("a")) is None


def test_latin1_tolower():
    assert latin1_tolower(ord("A")) == ord("a")
    assert latin1_tolower(ord("z")) == ord("z")
    assert latin1_tolower(ord("À")) == ord("à")
    assert latin1_tolower(0xD7) == 0xD7
    assert latin1_tolower(ord("1")) == ord("1")


def test_press_queues_and_pops():
    gfx = GfxInput()
    gfx.add_key(Modifier.NONE, ord("a"), True)
    assert gfx.getchar(0) == ord("a")
    assert gfx.getchar(0) == 0


def test_key_down_status_is_case_insensitive():
    gfx = GfxInput()
    gfx.add_key(Modifier.SHIFT, ord("A"), True)
    assert gfx.getchar(0) == ord("A")
    assert gfx.getchar(ord("a")) == 1.0
    assert gfx.getchar(ord("A")) == 1.0
    gfx.add_key(Modifier.NONE, ord("a"), False)
    assert gfx.getchar(ord("a")) == 0.0


def test_release_does_not_queue():
    gfx = GfxInput()
    gfx.add_key(Modifier.NONE, ord("b"), False)
    assert gfx.getchar(0) == 0


def test_ctrl_letter_code():
    gfx = GfxInput()
    gfx.add_key(Modifier.CTRL, ord("a"), True)
    assert gfx.getchar(0) == 257
    assert gfx.getchar(ord("a")) == 1.0


def test_special_key_press():
    gfx = GfxInput()
    gfx.add_key(Modifier.NONE, SpecialKey.LEFT, True)
    assert gfx.getchar(0) == packed(b"left")
    assert gfx.getchar(SpecialKey.LEFT) == 1.0
    assert gfx.getchar(SpecialKey.RIGHT) == 0.0


def test_unsupported_keys_ignored():
    gfx = GfxInput()
    gfx.add_key(Modifier.NONE, 0, True)
    gfx.add_key(Modifier.NONE, 0x100, True)
    assert gfx.getchar(0) == 0
    assert gfx.getchar(0x100) == 0.0


def test_window_flags_query_returns_zero():
    gfx = GfxInput()
    gfx.add_key(Modifier.NONE, ord("a"), True)
    assert gfx.getchar(65536) == 0.0


def test_queue_is_bounded():
    gfx = GfxInput()
    for _ in range(MAX_INPUT + 50):
        gfx.add_key(Modifier.NONE, ord("x"), True)
    results = [gfx.getchar(0) for _ in range(MAX_INPUT + 1)]
    assert results == [ord("x")] * MAX_INPUT + [0]


def test_queue_drops_oldest():
    gfx = GfxInput()
    gfx.add_key(Modifier.NONE, ord("q"), True)
    for _ in range(MAX_INPUT):
        gfx.add_key(Modifier.NONE, ord("w"), True)
    assert gfx.getchar(0) == ord("w")


def test_reset_clears_state():
    gfx = GfxInput()
    gfx.add_key(Modifier.NONE, ord("a"), True)
    gfx.reset()
    assert gfx.getchar(0) == 0
    assert gfx.getchar(ord("a")) == 0.0


def test_show_menu_without_callback():
    gfx = GfxInput()
    assert gfx.show_menu("one|two", 1, 2) == 0


def test_show_menu_calls_host():
    gfx = GfxInput()
    calls = []

    def host(desc, x, y):
        calls.append((desc, x, y))
        return 2

    gfx.show_menu_callback = host
    assert gfx.show_menu("", 1, 2) == 0
    assert calls == []
    assert gfx.show_menu("one|two", 10.7, 20.2) == 2
    assert calls == [("one|two", 10, 20)]


def test_set_cursor_passes_integer():
    gfx = GfxInput()
    seen = []
    gfx.set_cursor_callback = seen.append
    gfx.set_cursor(32512.0)
    assert seen == [32512]


def test_get_drop_file():
    gfx = GfxInput()
    assert gfx.get_drop_file(0) is None

    files = ["a.wav"]
    requests = []

    def host(index):
        requests.append(index)
        return files[index] if 0 <= index < len(files) else None

    gfx.get_drop_file_callback = host
    assert gfx.get_drop_file(0) == "a.wav"
    assert gfx.get_drop_file(1) is None
    assert gfx.get_drop_file(-5) is None
    assert requests == [0, 1, -1]