"""Tests for pdscan.extract module."""

import pytest

from pdscan import (
    MIDI_IN_COMMANDS,
    MIDI_OUT_COMMANDS,
    PatchInfo,
    PdFloat,
    PdSymbol,
    Position,
    RootCanvas,
    adc_channels,
    dac_channels,
    describe,
    midi_in,
    midi_out,
    parse,
    root_canvas,
)
from pdscan.extract import DEFAULT_CHANNELS, channel_count, command_channels, uses_any


class TestChannelCount:
    """Tests for the channel-count rule."""

    def test_no_args_is_stereo(self):
        assert channel_count(()) == DEFAULT_CHANNELS == 2

    def test_highest_index(self):
        assert channel_count((PdFloat(1.0), PdFloat(3.0))) == 3
        assert channel_count((PdFloat(4.0), PdFloat(2.0))) == 4

    def test_zero_index_invalidates(self):
        assert channel_count((PdFloat(0.0),)) == 0
        assert channel_count((PdFloat(5.0), PdFloat(0.0))) == 0

    def test_negative_invalidates(self):
        assert channel_count((PdFloat(-1.0),)) == 0

    def test_fraction_invalidates(self):
        assert channel_count((PdFloat(1.5),)) == 0

    def test_symbol_invalidates(self):
        assert channel_count((PdFloat(2.0), PdSymbol("x"))) == 0


class TestAudioChannels:
    """Tests for adc_channels and dac_channels."""

    def test_adc_scenario(self):
        patch = parse("#N canvas 0 0 400 300 12; #X obj 10 10 adc~ 1 3;")
        assert adc_channels(patch) == 3
        assert dac_channels(patch) == 0

    def test_dac_default_stereo(self):
        assert dac_channels(parse("#X obj 0 0 dac~;")) == 2

    def test_invalid_channel_contributes_zero(self):
        assert adc_channels(parse("#X obj 0 0 adc~ 0;")) == 0

    def test_maximum_over_records(self):
        patch = parse("#X obj 0 0 dac~ 1; #X obj 0 0 dac~ 4 2; #X obj 0 0 dac~ 3;")
        assert dac_channels(patch) == 4

    def test_invalid_record_does_not_reset(self):
        patch = parse("#X obj 0 0 adc~ 6; #X obj 0 0 adc~ 0;")
        assert adc_channels(patch) == 6

    def test_default_mixed_with_explicit(self):
        patch = parse("#X obj 0 0 dac~ 1; #X obj 0 0 dac~;")
        assert dac_channels(patch) == 2

    def test_none_found(self):
        assert adc_channels(parse("#X obj 0 0 osc~ 440;")) == 0
        assert dac_channels(parse("")) == 0

    def test_ignores_non_obj_records(self):
        patch = parse("#X msg 0 0 dac~ 8; ;#X text 0 0 adc~ 4;")
        assert dac_channels(patch) == 0
        assert adc_channels(patch) == 0

    def test_ignores_bad_coordinates(self):
        assert dac_channels(parse("#X obj 0.5 0 dac~ 8;")) == 0

    def test_command_channels_generic(self):
        patch = parse("#X obj 0 0 adc~ 1 7;")
        assert command_channels(patch, "adc~") == 7
        assert command_channels(patch, "dac~") == 0


class TestMidi:
    """Tests for midi_in and midi_out."""

    def test_notein_scenario(self):
        patch = parse("#X obj 0 0 notein;")
        assert midi_in(patch) is True
        assert midi_out(patch) is False

    def test_out(self):
        patch = parse("#X obj 0 0 ctlout 7;")
        assert midi_in(patch) is False
        assert midi_out(patch) is True

    @pytest.mark.parametrize("command", sorted(MIDI_IN_COMMANDS))
    def test_every_in_command(self, command):
        assert midi_in(parse(f"#X obj 0 0 {command};"))

    @pytest.mark.parametrize("command", sorted(MIDI_OUT_COMMANDS))
    def test_every_out_command(self, command):
        assert midi_out(parse(f"#X obj 0 0 {command};"))

    def test_command_sets(self):
        assert len(MIDI_IN_COMMANDS) == 10
        assert len(MIDI_OUT_COMMANDS) == 7
        assert not MIDI_IN_COMMANDS & MIDI_OUT_COMMANDS

    def test_message_box_not_counted(self):
        patch = parse("#X msg 0 0 notein; #X text 0 0 noteout;")
        assert not midi_in(patch)
        assert not midi_out(patch)

    def test_later_record_found(self):
        patch = parse("#N canvas 0 0 400 300 12; #X obj 0 0 osc~; #X obj 9 9 midiout;")
        assert midi_out(patch)

    def test_uses_any(self):
        patch = parse("#X obj 0 0 metro 100;")
        assert uses_any(patch, ["metro", "line"])
        assert not uses_any(patch, [])


class TestRootCanvas:
    """Tests for root_canvas."""

    def test_scenario(self):
        canvas = root_canvas(parse("#N canvas 0 0 400 300 12; #X obj 10 10 adc~ 1 3;"))
        assert canvas == RootCanvas(Position(0, 0), 400, 300, 12)
        assert canvas.size == (400, 300)

    def test_negative_position(self):
        canvas = root_canvas(parse("#N canvas -20 -4 800 600 10;"))
        assert canvas.position == Position(-20, -4)

    def test_empty_patch(self):
        assert root_canvas(parse("")) is None

    def test_empty_first_record(self):
        assert root_canvas(parse("; #N canvas 0 0 400 300 12;")) is None

    def test_only_first_record_consulted(self):
        patch = parse("#X obj 0 0 f; #N canvas 0 0 400 300 12;")
        assert root_canvas(patch) is None

    def test_subpatch_form_rejected(self):
        assert root_canvas(parse("#N canvas 0 0 300 200 sub 0;")) is None

    def test_wrong_length(self):
        assert root_canvas(parse("#N canvas 0 0 400 300;")) is None
        assert root_canvas(parse("#N canvas 0 0 400 300 12 1;")) is None

    def test_wrong_keywords(self):
        assert root_canvas(parse("#X canvas 0 0 400 300 12;")) is None
        assert root_canvas(parse("#N graph 0 0 400 300 12;")) is None

    def test_negative_size_rejected(self):
        assert root_canvas(parse("#N canvas 0 0 -400 300 12;")) is None

    def test_fractional_font_rejected(self):
        assert root_canvas(parse("#N canvas 0 0 400 300 12.5;")) is None

    def test_position_out_of_int_range(self):
        assert root_canvas(parse("#N canvas 3e9 0 400 300 12;")) is None

    def test_size_above_int_range_accepted(self):
        canvas = root_canvas(parse("#N canvas 0 0 3000000000 300 12;"))
        assert canvas.width == 3000000000


class TestDescribe:
    """Tests for describe and PatchInfo."""

    def test_describe(self):
        patch = parse("#N canvas 0 0 400 300 12; #X obj 10 10 adc~ 1 3; #X obj 0 0 notein;")
        info = describe(patch)
        assert info == PatchInfo(
            adc_channels=3,
            dac_channels=0,
            midi_in=True,
            midi_out=False,
            canvas=RootCanvas(Position(0, 0), 400, 300, 12),
        )

    def test_report_lines(self):
        info = describe(parse("#N canvas 5 6 400 300 12; #X obj 0 0 dac~;"))
        assert info.report_lines() == [
            "   -- adc channels: 0",
            "   -- dac channels: 2",
            "   -- midi in: no",
            "   -- midi out: no",
            "   -- root canvas position: 5 6",
            "   -- root canvas size: 400 300",
            "   -- root canvas font: 12",
        ]

    def test_report_without_canvas(self):
        info = describe(parse("#X obj 0 0 noteout;"))
        lines = info.report_lines()
        assert len(lines) == 4
        assert lines[3] == "   -- midi out: yes"
