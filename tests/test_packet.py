"""Tests for v2xsim.packet: the 72-byte V2X wire layout."""

from __future__ import annotations

import struct

import pytest

from v2xsim.interpolate import Tick
from v2xsim.packet import (
    FLAG_DRL,
    FLAG_EEBL,
    FLAG_LIGHT_BAR,
    PACKET_SIZE,
    decode,
    encode,
    flags_for,
)
from v2xsim.schema import V2XState

pytestmark = pytest.mark.unit


def _tick(lat=39.925, lng=32.866, speed=60.0, heading=45.0, **v2x) -> Tick:
    return Tick(lat=lat, lng=lng, speed=speed, heading=heading, v2x=V2XState(**v2x), interval_ms=100.0)


class TestLayout:
    def test_packet_is_72_bytes(self):
        assert PACKET_SIZE == 72
        assert len(encode(_tick())) == 72

    def test_all_flags_set_is_still_72_bytes(self):
        pkt = encode(_tick(eebl=True, light_bar=True, siren=True, flasher=True,
                           foglight=True, drl=True, wiper=255, left_signal=True, right_signal=True))
        assert len(pkt) == 72

    def test_lat_lng_little_endian(self):
        pkt = encode(_tick(lat=39.925, lng=32.866))
        lat, = struct.unpack_from("<d", pkt, 0)
        lng, = struct.unpack_from("<d", pkt, 8)
        assert abs(lat - 39.925) < 1e-10
        assert abs(lng - 32.866) < 1e-10

    def test_speed_heading_timestamp(self):
        pkt = encode(_tick(speed=72.5, heading=271.25), timestamp_ms=1_700_000_000_123.0)
        assert struct.unpack_from("<d", pkt, 16)[0] == 72.5
        assert struct.unpack_from("<d", pkt, 24)[0] == 271.25
        assert struct.unpack_from("<d", pkt, 32)[0] == 1_700_000_000_123.0

    def test_timestamp_defaults_to_wall_clock(self, monkeypatch):
        import v2xsim.packet as packet_mod
        monkeypatch.setattr(packet_mod.time, "time", lambda: 1234.5)
        pkt = encode(_tick())
        assert struct.unpack_from("<d", pkt, 32)[0] == 1_234_500.0

    def test_signal_and_wiper_bytes(self):
        pkt = encode(_tick(wiper=3, left_signal=True, right_signal=False))
        assert pkt[42] == 3
        assert pkt[43] == 1
        assert pkt[44] == 0

    def test_reserved_tail_is_zero(self):
        pkt = encode(_tick(eebl=True, wiper=7, right_signal=True))
        assert pkt[45:] == bytes(27)


class TestFlags:
    def test_documented_example(self):
        pkt = encode(_tick(eebl=True, light_bar=True, drl=True))
        assert struct.unpack_from("<H", pkt, 40)[0] == 1 | 2 | 32 == 35

    def test_all_off(self):
        pkt = encode(_tick())
        assert struct.unpack_from("<H", pkt, 40)[0] == 0

    @pytest.mark.parametrize("field,bit", [
        ("eebl", 1), ("light_bar", 2), ("siren", 4),
        ("flasher", 8), ("foglight", 16), ("drl", 32),
    ])
    def test_single_flag(self, field, bit):
        assert flags_for(V2XState(**{field: True})) == bit

    def test_flags_for_none(self):
        assert flags_for(None) == 0

    def test_constants(self):
        assert (FLAG_EEBL, FLAG_LIGHT_BAR, FLAG_DRL) == (1, 2, 32)


class TestDecode:
    def test_decode_reads_back_fields(self):
        pkt = encode(_tick(lat=-33.5, lng=151.25, speed=12.0, heading=90.0,
                           siren=True, wiper=2, right_signal=True), timestamp_ms=42.0)
        d = decode(pkt)
        assert d["lat"] == -33.5
        assert d["lng"] == 151.25
        assert d["timestamp"] == 42.0
        assert d["siren"] is True
        assert d["eebl"] is False
        assert d["wiper"] == 2
        assert d["right_signal"] is True
        assert d["left_signal"] is False

    def test_decode_rejects_wrong_size(self):
        with pytest.raises(ValueError):
            decode(b"\x00" * 71)
