"""
pdscan - PureData patch scanner
===============================

Read PureData patches into typed records and extract what a host needs to
know about them: audio channel counts, MIDI usage, root canvas geometry.

Example:
  >>> from pdscan import parse_file, adc_channels, dac_channels, root_canvas
  >>> patch = parse_file('synth.pd')
  >>> dac_channels(patch)
  2
  >>> canvas = root_canvas(patch)
  >>> canvas.size
  (450, 300)
  >>> print(patch)  # one line per record
"""

# Records and parser
from .ast import (
    PdNull as PdNull,
    PdFloat as PdFloat,
    PdSymbol as PdSymbol,
    PdAtom as PdAtom,
    SymbolTable as SymbolTable,
    Record as Record,
    Patch as Patch,
    read_patch as read_patch,
    parse as parse,
    parse_file as parse_file,
    ParseError as ParseError,
    PatchReadError as PatchReadError,
    MalformedPatchError as MalformedPatchError,
)

# Pattern matchers
from .match import (
    ObjMatch as ObjMatch,
    CmdMatch as CmdMatch,
    parse_obj as parse_obj,
    parse_cmd as parse_cmd,
    iter_commands as iter_commands,
)

# Extractors
from .extract import (
    Position as Position,
    RootCanvas as RootCanvas,
    PatchInfo as PatchInfo,
    MIDI_IN_COMMANDS as MIDI_IN_COMMANDS,
    MIDI_OUT_COMMANDS as MIDI_OUT_COMMANDS,
    adc_channels as adc_channels,
    dac_channels as dac_channels,
    midi_in as midi_in,
    midi_out as midi_out,
    root_canvas as root_canvas,
    describe as describe,
)

from .discover import find_patches as find_patches

__version__ = "0.1.0"
