"""
Record-level representation of PureData patches.

This module provides:
- Immutable atom classes (null, float, symbol) produced by tokenization
- A symbol table interning every symbol text of a patch once
- Records (one per ``;``-terminated statement) and the Patch holding them
- A tokenizer reading the .pd save format into a Patch

Example usage:
    >>> from pdscan.ast import parse_file
    >>> patch = parse_file('patch.pd')
    >>> print(patch)
         0:   #s(#N) #s(canvas) #f(0) #f(50) #f(450) #f(300) #f(10)
"""

import logging
import math
import re
from dataclasses import dataclass, field
from typing import BinaryIO, Dict, Iterator, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

# Tokenizer character classes (byte values)
WHITESPACE = frozenset(b" \r\n")
TERMINATOR = ord(";")
ESCAPE = ord("\\")

# Bytes allowed after a backslash: space and ASCII punctuation
ESCAPABLE = frozenset(
    list(range(32, 48)) + list(range(58, 65)) + list(range(91, 97)) + list(range(123, 127))
)

# Whole-token float syntax, as accepted by C strtod
_FLOAT_SPACE = " \t\n\v\f\r"
_DECIMAL_RE = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?)",
    re.IGNORECASE | re.ASCII,
)
_HEX_RE = re.compile(
    r"[+-]?0x(?:[0-9a-f]+\.?[0-9a-f]*|\.[0-9a-f]+)(?:p[+-]?\d+)?",
    re.IGNORECASE | re.ASCII,
)
_NAN_RE = re.compile(r"[+-]?nan(?:\([0-9a-z_]*\))?", re.IGNORECASE | re.ASCII)


# Atom types


@dataclass(frozen=True)
class PdNull:
    """An absent atom value.

    Never produced by the tokenizer: a record without tokens holds no atoms.
    """

    def to_text(self) -> str:
        return ""

    def __str__(self) -> str:
        return "#n()"


@dataclass(frozen=True)
class PdFloat:
    """A numeric atom."""

    value: float

    def to_text(self) -> str:
        if self.value.is_integer():
            return str(int(self.value))
        return repr(self.value)

    def __str__(self) -> str:
        return f"#f({self.value:g})"


@dataclass(frozen=True)
class PdSymbol:
    """A symbolic atom.

    ``text`` is the instance stored in the owning patch's symbol table,
    with escape sequences already resolved.
    """

    text: str

    def to_text(self) -> str:
        return escape(self.text)

    def __str__(self) -> str:
        return f"#s({self.text})"


# Union type for all atom values
PdAtom = Union[PdNull, PdFloat, PdSymbol]


def escape(text: str) -> str:
    """Escape a symbol so it reads back as a single token.

    Whitespace, ``;``, ``,``, the backslash and similar punctuation are
    prefixed with a backslash. Characters common in object names
    (``#$-+.~``) are written bare.
    """
    out = []
    for char in text:
        code = ord(char)
        if code < 128 and (code in ESCAPABLE or code in WHITESPACE) and char not in "#$-+.~":
            out.append("\\")
        out.append(char)
    return "".join(out)


class SymbolTable:
    """Deduplicating store of the symbol texts of one patch.

    Interning equal text twice returns the same string object, so identity
    may be used as a fast equality check. Symbols are never removed.
    """

    def __init__(self) -> None:
        self._symbols: Dict[str, str] = {}

    def intern(self, text: str) -> str:
        """Return the stored instance equal to ``text``, adding it if new."""
        return self._symbols.setdefault(text, text)

    def __contains__(self, text: object) -> bool:
        return text in self._symbols

    def __iter__(self) -> Iterator[str]:
        return iter(self._symbols)

    def __len__(self) -> int:
        return len(self._symbols)

    def __repr__(self) -> str:
        return f"SymbolTable({len(self._symbols)} symbols)"


@dataclass(frozen=True)
class Record:
    """One ``;``-terminated statement: an ordered sequence of atoms."""

    atoms: Tuple[PdAtom, ...] = ()

    def __len__(self) -> int:
        return len(self.atoms)

    def __iter__(self) -> Iterator[PdAtom]:
        return iter(self.atoms)

    def __getitem__(self, index):
        return self.atoms[index]

    def to_text(self) -> str:
        """Render the record as save-format text, including the terminator."""
        texts = [atom.to_text() for atom in self.atoms if not isinstance(atom, PdNull)]
        return " ".join(texts) + ";"

    def __str__(self) -> str:
        return " ".join(str(atom) for atom in self.atoms)


@dataclass(frozen=True)
class Patch:
    """A parsed patch: its records in file order and their symbol table.

    The first record is conventionally the root ``#N canvas`` declaration.
    """

    records: Tuple[Record, ...] = ()
    symbols: SymbolTable = field(default_factory=SymbolTable, compare=False)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    def __getitem__(self, index: int) -> Record:
        return self.records[index]

    def to_text(self) -> str:
        """Render all records as save-format text, one per line."""
        return "".join(rec.to_text() + "\n" for rec in self.records)

    def __str__(self) -> str:
        return "".join(f"{i:6d}:   {rec}\n" for i, rec in enumerate(self.records))


# Parser


class ParseError(Exception):
    """Raised when reading a PureData patch fails."""

    pass


class PatchReadError(ParseError):
    """Raised when the input stream fails while reading a patch."""

    pass


class MalformedPatchError(ParseError):
    """Raised on a bad escape sequence or an unterminated final record.

    Attributes
    ----------
    offset : int
        Byte offset in the input where the problem was detected.
    """

    def __init__(self, message: str, offset: int) -> None:
        super().__init__(f"{message} (at byte {offset})")
        self.offset = offset


def _parse_float(text: str) -> Optional[float]:
    """Parse a whole token as a float the way C strtod does, or return None.

    Leading whitespace is skipped; trailing characters reject the token.
    """
    text = text.lstrip(_FLOAT_SPACE)
    if _DECIMAL_RE.fullmatch(text):
        return float(text)
    if _NAN_RE.fullmatch(text):
        return math.copysign(math.nan, -1.0 if text.startswith("-") else 1.0)
    if _HEX_RE.fullmatch(text):
        try:
            return float.fromhex(text)
        except OverflowError:
            return -math.inf if text.startswith("-") else math.inf
    return None


def _make_atom(token: bytearray, symbols: SymbolTable) -> PdAtom:
    """Convert a finished token to a float atom, or intern it as a symbol.

    Bytes that are not valid UTF-8 are kept as lone surrogates, so distinct
    tokens always give distinct symbols.
    """
    text = token.decode("utf-8", errors="surrogateescape")
    value = _parse_float(text)
    if value is not None:
        return PdFloat(value)
    return PdSymbol(symbols.intern(text))



def _skip_ws(data: bytes, i: int) -> int:
    """Return the index of the first non-whitespace byte at or after ``i``."""
    n = len(data)
    while i < n and data[i] in WHITESPACE:
        i += 1
    return i


def _tokenize(data: bytes) -> Patch:
    """Split raw patch bytes into records of atoms."""
    symbols = SymbolTable()
    records: List[Record] = []
    atoms: List[PdAtom] = []
    token = bytearray()
    n = len(data)
    i = _skip_ws(data, 0)

    while i < n:
        ch = data[i]
        i += 1
        if ch == TERMINATOR:
            if token:
                atoms.append(_make_atom(token, symbols))
                token = bytearray()
            records.append(Record(tuple(atoms)))
            atoms = []
            i = _skip_ws(data, i)
        elif ch in WHITESPACE:
            # only reached after a token byte: leading whitespace is skipped
            atoms.append(_make_atom(token, symbols))
            token = bytearray()
            i = _skip_ws(data, i)
        else:
            if ch == ESCAPE:
                if i >= n:
                    raise MalformedPatchError("Premature end reading pd patch", i)
                ch = data[i]
                if ch not in ESCAPABLE:
                    raise MalformedPatchError("Unrecognized escape sequence reading pd patch", i)
                i += 1
            token.append(ch)

    if token or atoms:
        raise MalformedPatchError("Premature end reading pd patch", n)

    logger.debug("read %d records, %d symbols", len(records), len(symbols))
    return Patch(tuple(records), symbols)


def read_patch(stream: BinaryIO) -> Patch:
    """Read a PureData patch from a binary stream.

    The stream is consumed to its end; it is not closed.

    Parameters
    ----------
    stream : BinaryIO
        A readable binary file-like object

    Returns
    -------
    Patch
        The parsed records and their symbol table

    Raises
    ------
    PatchReadError
        If reading from the stream fails
    MalformedPatchError
        If the content contains a bad escape or an unterminated record
    """
    try:
        data = stream.read()
    except OSError as e:
        raise PatchReadError(f"Input error reading pd patch: {e}") from e
    if isinstance(data, str):
        raise TypeError("read_patch expects a binary stream")
    return _tokenize(bytes(data))


def parse(content: Union[str, bytes]) -> Patch:
    """Parse PureData patch content held in memory.

    Parameters
    ----------
    content : str or bytes
        The content of a .pd file. Text is encoded as UTF-8, with lone
        surrogates mapped back to the raw bytes they stand for.

    Returns
    -------
    Patch
        The parsed patch
    """
    if isinstance(content, str):
        content = content.encode("utf-8", errors="surrogateescape")
    return _tokenize(content)


def parse_file(filepath: str) -> Patch:
    """Parse a PureData file.

    Parameters
    ----------
    filepath : str
        Path to the .pd file

    Returns
    -------
    Patch
        The parsed patch

    Raises
    ------
    PatchReadError
        If the file cannot be opened or read
    MalformedPatchError
        If the file content is malformed
    """
    try:
        f = open(filepath, "rb")
    except OSError as e:
        raise PatchReadError(f"Input error reading pd patch: {e}") from e
    with f:
        return read_patch(f)
