# jsfxkit

A pure-Python toolkit for JSFX effect files and the data that goes with them.
It has no dependencies outside the standard library.

## Modules

- `jsfxkit.reader`: line readers. `StringTextReader` reads from a string.
  `StreamTextReader` reads from a text or binary stream and decodes bytes as
  Latin-1. Both accept `\n`, `\r` and `\r\n` line endings, and iterating over a
  reader yields its lines.
- `jsfxkit.parse`: `parse_toplevel` splits a source into its header and
  `@init`, `@slider`, `@block`, `@sample`, `@serialize` and `@gfx` sections. It
  also reads the optional `@gfx` width and height, and raises
  `SectionParseError` on an unknown section. `parse_header` reads `desc:`,
  `author:`, `tags:`, `in_pin:`/`out_pin:`, `options:`, `import`, `filename:`
  and slider lines. `parse_slider` handles normal, enumerated and path sliders,
  and `parse_filename` handles `filename:` lines.
- `jsfxkit.midi`: `MidiBuffer` stores `MidiEvent`s on up to 16 buses. It can
  be read in order (`get_next`) or per bus (`get_next_from_bus`).
  `begin_push` returns a `MidiPush` that writes an event piece by piece.
  A fixed-capacity buffer raises `MidiOverflowError` when an event does not
  fit. `midi_sizeof` returns the message length for a status byte.
- `jsfxkit.menu`: `parse_menu` turns a `gfx_showmenu` description into a flat
  list of `MenuInstruction`s: items, separators and submenu start and end
  markers. `format_menu` renders that list as text.
- `jsfxkit.audio_wav`: `WavFormat` and `WavReader` read 8/16/24/32-bit PCM and
  32/64-bit float WAV files as interleaved float samples. Unsupported files
  raise `WavFormatError`.
- `jsfxkit.config`: `Config` holds the import and data roots, registered audio
  formats and a log reporter. `guess_file_roots` searches upward from a
  source file for a directory that holds both `Effects/` and `Data/`.
- `jsfxkit.preset`: `load_bank` and `load_bank_from_text` read REAPER preset
  libraries (`.rpl`) into a `Bank` of `Preset`s. Each preset has a `State`
  with slider values and raw serialized data. Malformed libraries raise
  `BankFormatError`.
- `jsfxkit.gfx_input`: `GfxInput` keeps a key queue and the set of keys held
  down, following `gfx_getchar` semantics. It also forwards menu, cursor and
  dropped-file requests to callbacks set by the host.

## Installation

```
pip install jsfxkit
```

## Examples

Split a source into sections and parse its header:

```python
from jsfxkit.reader import StringTextReader
from jsfxkit.parse import parse_toplevel, parse_header

text = "desc:My effect\nslider1:0<0,1,0.01>Gain\n@sample\nspl0 *= slider1;\n"
toplevel = parse_toplevel(StringTextReader(text))
header = parse_header(toplevel.header)
print(header.desc)                # My effect
print(header.sliders[0].desc)     # Gain
```

Store and read MIDI events:

```python
from jsfxkit.midi import MidiBuffer, MidiEvent

buffer = MidiBuffer()
buffer.push(MidiEvent(bus=0, offset=10, data=bytes([0x90, 60, 0x40])))
event = buffer.get_next_from_bus(0)
print(event.offset, event.data.hex())   # 10 903c40
```

Load a preset bank:

```python
from jsfxkit.preset import load_bank

bank = load_bank("effect.jsfx.rpl")
for preset in bank.presets:
    print(preset.name, [(s.index, s.value) for s in preset.state.sliders])
```

Read a WAV file:

```python
from jsfxkit.audio_wav import WavFormat

with WavFormat().open("sound.wav") as reader:
    info = reader.info()
    samples = reader.read(reader.avail())
```

## Command line

`jsfx-parse-menu` prints the structure of a menu description:

```
jsfx-parse-menu "File|>Recent|one|<two|#Disabled|!Checked"
```

It exits with status 1 unless exactly one argument is given.

## What it does not do

jsfxkit reads and describes effect files and their data. It does not compile
or run effect code: there is no script interpreter, so nothing processes
audio or MIDI, and no `@gfx` drawing is done. `GfxInput` covers keyboard
input and host callbacks only. WAV is the only audio file format it can read.
Preset banks can be loaded but not written.

## Running the tests

```
pip install jsfxkit[test]
pytest
```