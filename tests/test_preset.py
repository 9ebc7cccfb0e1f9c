import struct

import pytest

from jsfxkit.preset import (
    BankFormatError,
    SliderValue,
    load_bank,
    load_bank_from_text,
    parse_preset_blob,
    tokenize_line,
)

RPL_TEXT = (
    "<REAPER_PRESET_LIBRARY \"JS: TestCaseRPL\"\n"
    "  <PRESET `1.defaults`\n"
    "    MCAwIC0gMCAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0g\n"
    "    LSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAxLmRlZmF1bHRzAAAAAAAAAAAAAAAAAA==\n"
    "  >\n"
    "  <PRESET `2.a preset with spaces in the name`\n"
    "    MC4zNCAwLjc1IC0gMC42MiAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAt\n"
    "    IC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAiMi5hIHByZXNldCB3aXRoIHNwYWNlcyBpbiB0aGUgbmFtZSIAUrgePwAAQD97FK4+\n"
    "  >\n"
    "  <PRESET `3.a preset with \"quotes\" in the name`\n"
    "    MC44NiAwLjA3IC0gMC4yNSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAt\n"
    "    IC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAnMy5hIHByZXNldCB3aXRoICJxdW90ZXMiIGluIHRoZSBuYW1lJwAAAIA+KVyPPfYoXD8=\n"
    "  >\n"
    "  <PRESET `>`\n"
    "    MSAwLjkgLSAwLjggLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0g\n"
    "    LSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gLSAtIC0gPgDNzEw/ZmZmPwAAgD8=\n"
    "  >\n"
    ">\n"
)


def _floats(data):
    return list(struct.unpack(f"<{len(data) // 4}f", data))


@pytest.fixture
def bank(tmp_path):
    path = tmp_path / "example.jsfx.rpl"
    path.write_bytes(RPL_TEXT.encode("utf-8"))
    return load_bank(str(path))


def test_bank_name_and_count(bank):
    assert bank.name == "JS: TestCaseRPL"
    assert len(bank.presets) == 4


def test_defaults_preset(bank):
    preset = bank.presets[0]
    assert preset.name == "1.defaults"
    assert preset.state.sliders == [
        SliderValue(0, 0.0), SliderValue(1, 0.0), SliderValue(3, 0.0)
    ]
    assert len(preset.state.data) == 3 * 4
    assert _floats(preset.state.data) == [0.0, 0.0, 0.0]


@pytest.mark.parametrize(
    "index, name, values",
    [
        (1, "2.a preset with spaces in the name", (0.34, 0.75, 0.62)),
        (2, '3.a preset with "quotes" in the name', (0.86, 0.07, 0.25)),
        (3, ">", (1.0, 0.9, 0.8)),
    ],
)
def test_named_presets(bank, index, name, values):
    preset = bank.presets[index]
    assert preset.name == name
    sliders = preset.state.sliders
    assert [slider.index for slider in sliders] == [0, 1, 3]
    assert [slider.value for slider in sliders] == pytest.approx(list(values))
    assert len(preset.state.data) == 3 * 4
    assert _floats(preset.state.data) == pytest.approx(list(reversed(values)))


def test_tokenize_line_quotes():
    assert tokenize_line("a \"b c\" `d 'e'` 'f'") == ["a", "b c", "d 'e'", "f"]
    assert tokenize_line("  \t ") == []
    assert tokenize_line('""') == [""]


def test_tokenize_line_unterminated_quote():
    with pytest.raises(ValueError):
        tokenize_line("a `b")


def test_parse_preset_blob_missing_tokens_default_to_zero():
    preset = parse_preset_blob("p", b"0.5 -\0\x01\x02")
    assert preset.name == "p"
    assert preset.state.data == b"\x01\x02"
    assert len(preset.state.sliders) == 63
    assert preset.state.sliders[0] == SliderValue(0, 0.5)
    assert preset.state.sliders[1] == SliderValue(2, 0.0)


def test_parse_preset_blob_without_nul_has_no_data():
    preset = parse_preset_blob("p", b"1 2")
    assert preset.state.data == b""
    assert preset.state.sliders[:2] == [SliderValue(0, 1.0), SliderValue(1, 2.0)]


def test_not_a_library_raises():
    with pytest.raises(BankFormatError):
        load_bank_from_text("<SOMETHING_ELSE x")
    with pytest.raises(BankFormatError):
        load_bank_from_text("")


def test_unterminated_quote_in_library_raises():
    with pytest.raises(BankFormatError):
        load_bank_from_text("<REAPER_PRESET_LIBRARY \"open")


def test_empty_library():
    bank = load_bank_from_text("<REAPER_PRESET_LIBRARY `empty` >")
    assert bank.name == "empty"
    assert bank.presets == []