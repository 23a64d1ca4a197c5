"""Patch-level facts derived from the records of a patch.

Every extractor scans the whole patch (except ``root_canvas``, which only
looks at the first record) and aggregates with "maximum wins" or "any
wins". Records that do not match are ignored.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from .ast import Patch, PdAtom, PdFloat
from .match import iter_commands, symbol_of, to_int, to_uint

# Channel count of an adc~/dac~ without arguments (stereo)
DEFAULT_CHANNELS = 2

MIDI_IN_COMMANDS = frozenset(
    {
        "notein",
        "ctlin",
        "pgmin",
        "bendin",
        "touchin",
        "polytouchin",
        "midiin",
        "sysexin",
        "midirealtimein",
        "midiclkin",
    }
)

MIDI_OUT_COMMANDS = frozenset(
    {
        "noteout",
        "ctlout",
        "pgmout",
        "bendout",
        "touchout",
        "polytouchout",
        "midiout",
    }
)


@dataclass(frozen=True)
class Position:
    """2D position in the patch canvas."""

    x: int
    y: int

    def __str__(self) -> str:
        return f"{self.x} {self.y}"


@dataclass(frozen=True)
class RootCanvas:
    """Geometry of the root ``#N canvas`` declaration."""

    position: Position
    width: int
    height: int
    font_size: int

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)


def channel_count(args: Sequence[PdAtom]) -> int:
    """Return the highest channel index referenced by adc~/dac~ arguments.

    No arguments means the default stereo pair. If any argument is not a
    positive integral number the whole object counts as 0.
    """
    if not args:
        return DEFAULT_CHANNELS

    channels = []
    for atom in args:
        if not isinstance(atom, PdFloat):
            return 0
        channel = to_uint(atom.value)
        if channel is None or channel == 0:
            return 0
        channels.append(channel)
    return max(channels)


def command_channels(patch: Patch, command: str) -> int:
    """Return the maximum channel count over all objects named ``command``."""
    channels = 0
    for cmd in iter_commands(patch):
        if cmd.command == command:
            channels = max(channels, channel_count(cmd.args))
    return channels


def adc_channels(patch: Patch) -> int:
    """Number of audio input channels used by the patch (0 if none)."""
    return command_channels(patch, "adc~")


def dac_channels(patch: Patch) -> int:
    """Number of audio output channels used by the patch (0 if none)."""
    return command_channels(patch, "dac~")


def uses_any(patch: Patch, commands: Iterable[str]) -> bool:
    """Return True if any object in the patch is one of ``commands``."""
    names = frozenset(commands)
    return any(cmd.command in names for cmd in iter_commands(patch))


def midi_in(patch: Patch) -> bool:
    """Return True if the patch contains a MIDI input object."""
    return uses_any(patch, MIDI_IN_COMMANDS)


def midi_out(patch: Patch) -> bool:
    """Return True if the patch contains a MIDI output object."""
    return uses_any(patch, MIDI_OUT_COMMANDS)


def root_canvas(patch: Patch) -> Optional[RootCanvas]:
    """Read the root canvas geometry from the first record.

    The record must be exactly ``#N canvas x y width height font_size``.
    Later records are never consulted.

    Parameters
    ----------
    patch : Patch
        A parsed patch

    Returns
    -------
    RootCanvas or None
        The canvas geometry, or None if the patch is empty or its first
        record is not a root canvas declaration
    """
    if not patch.records:
        return None
    record = patch.records[0]
    if len(record) != 7:
        return None
    if symbol_of(record[0]) != "#N" or symbol_of(record[1]) != "canvas":
        return None

    numbers = record[2:]
    if not all(isinstance(atom, PdFloat) for atom in numbers):
        return None
    x, y, width, height, font_size = (atom.value for atom in numbers)

    converted = [to_int(x), to_int(y), to_uint(width), to_uint(height), to_uint(font_size)]
    if any(value is None for value in converted):
        return None
    cx, cy, cwidth, cheight, cfont = converted
    return RootCanvas(Position(cx, cy), cwidth, cheight, cfont)


@dataclass(frozen=True)
class PatchInfo:
    """All facts extracted from one patch."""

    adc_channels: int
    dac_channels: int
    midi_in: bool
    midi_out: bool
    canvas: Optional[RootCanvas] = None

    def report_lines(self) -> List[str]:
        """Format the facts as indented report lines."""
        lines = [
            f"   -- adc channels: {self.adc_channels}",
            f"   -- dac channels: {self.dac_channels}",
            f"   -- midi in: {'yes' if self.midi_in else 'no'}",
            f"   -- midi out: {'yes' if self.midi_out else 'no'}",
        ]
        if self.canvas is not None:
            width, height = self.canvas.size
            lines.extend(
                [
                    f"   -- root canvas position: {self.canvas.position}",
                    f"   -- root canvas size: {width} {height}",
                    f"   -- root canvas font: {self.canvas.font_size}",
                ]
            )
        return lines


def describe(patch: Patch) -> PatchInfo:
    """Extract every known fact from a patch."""
    return PatchInfo(
        adc_channels=adc_channels(patch),
        dac_channels=dac_channels(patch),
        midi_in=midi_in(patch),
        midi_out=midi_out(patch),
        canvas=root_canvas(patch),
    )
