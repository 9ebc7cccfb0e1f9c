"""Parsing and data tools for JSFX audio effects: sources, menus, MIDI, WAV, presets."""

__version__ = "0.1.0"

__all__ = [
    "audio_wav",
    "config",
    "gfx_input",
    "menu",
    "midi",
    "parse",
    "preset",
    "reader",
]