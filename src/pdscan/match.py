"""Pattern matchers classifying records of a patch.

Objects on a canvas are declared as::

    #X obj <x> <y> <command> <command-args...>;

``parse_obj`` checks the structural part of that form and ``parse_cmd``
additionally pulls out the command symbol. A record of any other shape is
"no match" (``None``), never an error.
"""

import math
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from .ast import Patch, PdAtom, PdFloat, PdSymbol, Record

# Integer ranges of the converted coordinates (C int / unsigned)
INT_MIN = -(2**31)
INT_MAX = 2**31 - 1
UINT_MAX = 2**32 - 1


def _to_integral(value: float, lower: int, upper: int) -> Optional[int]:
    if not math.isfinite(value) or value != math.trunc(value):
        return None
    if value < lower or value > upper:
        return None
    return int(value)


def to_int(value: float) -> Optional[int]:
    """Convert a float losslessly to a signed integer, or return None."""
    return _to_integral(value, INT_MIN, INT_MAX)


def to_uint(value: float) -> Optional[int]:
    """Convert a float losslessly to an unsigned integer, or return None."""
    return _to_integral(value, 0, UINT_MAX)


def symbol_of(atom: PdAtom) -> Optional[str]:
    """Return the text of a symbol atom, None for other atoms."""
    if isinstance(atom, PdSymbol):
        return atom.text
    return None


@dataclass(frozen=True)
class ObjMatch:
    """Fields of a ``#X obj`` record.

    ``args`` holds the atoms following the coordinates.
    """

    x: int
    y: int
    args: Tuple[PdAtom, ...]


@dataclass(frozen=True)
class CmdMatch:
    """Fields of a ``#X obj`` record whose first argument is a symbol.

    ``args`` holds the atoms following the command.
    """

    x: int
    y: int
    command: str
    args: Tuple[PdAtom, ...]


def parse_obj(record: Record) -> Optional[ObjMatch]:
    """Match a ``#X obj x y ...`` record.

    Parameters
    ----------
    record : Record
        The record to classify

    Returns
    -------
    ObjMatch or None
        The integer coordinates and the remaining atoms, or None if the
        record has another shape or the coordinates are not integral
    """
    if len(record) < 4:
        return None
    head, kind, x_atom, y_atom = record[:4]
    if symbol_of(head) != "#X" or symbol_of(kind) != "obj":
        return None
    if not isinstance(x_atom, PdFloat) or not isinstance(y_atom, PdFloat):
        return None

    x = to_int(x_atom.value)
    y = to_int(y_atom.value)
    if x is None or y is None:
        return None
    return ObjMatch(x, y, record[4:])


def parse_cmd(record: Record) -> Optional[CmdMatch]:
    """Match a ``#X obj x y command ...`` record.

    Returns
    -------
    CmdMatch or None
        The coordinates, command symbol and the atoms after it, or None if
        ``parse_obj`` does not match or the first argument is not a symbol
    """
    obj = parse_obj(record)
    if obj is None or not obj.args:
        return None
    command = symbol_of(obj.args[0])
    if command is None:
        return None
    return CmdMatch(obj.x, obj.y, command, obj.args[1:])


def iter_commands(patch: Patch) -> Iterator[CmdMatch]:
    """Yield the command match of every matching record, in patch order."""
    for record in patch:
        cmd = parse_cmd(record)
        if cmd is not None:
            yield cmd
