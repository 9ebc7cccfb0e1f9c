"""Parser for the compact popup-menu description strings used by gfx_showmenu."""

from __future__ import annotations

import enum
import sys
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

_MAX_DEPTH = 8
_PREFIX_CHARS = ">#!<"


class MenuOpcode(enum.Enum):
    ITEM = enum.auto()
    SEPARATOR = enum.auto()
    SUB = enum.auto()
    ENDSUB = enum.auto()


class MenuItemFlags(enum.IntFlag):
    NONE = 0
    DISABLED = 1
    CHECKED = 2


@dataclass
class MenuInstruction:
    """One step in building a menu: an item, a separator, or a submenu boundary."""

    opcode: MenuOpcode
    id: int = 0
    name: Optional[str] = None
    item_flags: MenuItemFlags = MenuItemFlags.NONE


def _build_menu(
    insns: List[MenuInstruction], text: str, pos: int, next_id: int, depth: int
) -> Tuple[bool, int, int]:
    if depth >= _MAX_DEPTH:
        return False, pos, next_id

    count_at_start = len(insns)
    entries = 0
    sep = text.find("|", pos)

    while sep >= 0 or pos < len(text):
        end = sep if sep >= 0 else len(text)
        entry = text[pos:end]
        pos = end
        if sep >= 0:
            pos += 1
            sep = text.find("|", pos)

        q = 0
        is_sub = False
        count_at_sub = 0
        done = False
        flags = MenuItemFlags.NONE
        while q < len(entry) and entry[q] in _PREFIX_CHARS:
            char = entry[q]
            if char == ">" and not is_sub:
                count_at_sub = len(insns)
                insns.append(MenuInstruction(MenuOpcode.SUB))
                is_sub, pos, next_id = _build_menu(insns, text, pos, next_id, depth + 1)
                insns.append(MenuInstruction(MenuOpcode.ENDSUB))
                sep = text.find("|", pos)
            elif char == "#":
                flags |= MenuItemFlags.DISABLED
            elif char == "!":
                flags |= MenuItemFlags.CHECKED
            elif char == "<":
                done = True
            q += 1

        label = entry[q:]
        if label:
            if is_sub:
                for insn in (insns[count_at_sub], insns[-1]):
                    insn.name = label
                    insn.item_flags = flags
            else:
                insns.append(MenuInstruction(MenuOpcode.ITEM, next_id, label, flags))
                next_id += 1
        else:
            if is_sub:
                del insns[count_at_sub:]
            if not done:
                insns.append(MenuInstruction(MenuOpcode.SEPARATOR))

        entries += 1
        if done:
            break

    if entries == 0:
        del insns[count_at_start:]
        return False, pos, next_id
    return True, pos, next_id


def parse_menu(text: str) -> List[MenuInstruction]:
    """Parse a ``|``-separated menu description into instructions.

    Prefixes on an entry: ``>`` opens a submenu, ``<`` closes the current one
    after this entry, ``#`` disables and ``!`` checks the item. An empty entry
    is a separator. Item ids are numbered from 1.
    """
    insns: List[MenuInstruction] = []
    _build_menu(insns, text, 0, 1, 0)
    return insns


_YES_NO = {True: "yes", False: "no"}


def format_menu(instructions: Sequence[MenuInstruction]) -> str:
    """Render instructions as an indented, human-readable listing."""
    lines: List[str] = []
    level = 0

    def emit(text: str) -> None:
        lines.append("\t" * level + text)

    def describe(insn: MenuInstruction) -> None:
        name = insn.name if insn.name is not None else "(null)"
        disabled = _YES_NO[bool(insn.item_flags & MenuItemFlags.DISABLED)]
        checked = _YES_NO[bool(insn.item_flags & MenuItemFlags.CHECKED)]
        emit(f"| Name: {name}")
        emit(f"| Disabled: {disabled}")
        emit(f"| Checked: {checked}")

    for insn in instructions:
        if insn.opcode is MenuOpcode.ITEM:
            emit("+ Item")
            emit(f"| ID: {insn.id}")
            describe(insn)
        elif insn.opcode is MenuOpcode.SEPARATOR:
            emit("+ Separator")
        elif insn.opcode is MenuOpcode.SUB:
            emit("+ Submenu start")
            describe(insn)
            level += 1
        elif insn.opcode is MenuOpcode.ENDSUB:
            level -= 1
            emit("+ Submenu end")
            describe(insn)

    return "".join(line + "\n" for line in lines)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Print the structure of the menu description given as the only argument."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        return 1
    sys.stdout.write(format_menu(parse_menu(args[0])))
    return 0