"""Tests for BSSID validation and record normalization."""

import re

import pytest

from wifiviewer.scanner.base import (
    ProbeAttempt,
    WifiRecord,
    is_valid_bssid,
    normalize_bssid,
)

_REFERENCE = re.compile(r"^[0-9A-Fa-f]{2}(:[0-9A-Fa-f]{2}){5}\Z")


class TestIsValidBssid:
    @pytest.mark.parametrize(
        "candidate",
        ["AA:BB:CC:DD:EE:FF", "aa:bb:cc:dd:ee:ff", "00:1a:2B:3c:4D:5e", "12:34:56:78:9A:bc"],
    )
    def test_valid(self, candidate):
        assert is_valid_bssid(candidate) is True

    @pytest.mark.parametrize(
        "candidate",
        [
            "",
            "AA:BB:CC:DD:EE",
            "AA:BB:CC:DD:EE:FF:00",
            "AA-BB-CC-DD-EE-FF",
            "AABBCCDDEEFF",
            "AA:BB:CC:DD:EE:FG",
            "AAA:B:CC:DD:EE:FF",
            "AA:BB:CC:DD:EE:FF\n",
            " AA:BB:CC:DD:EE:F",
            "AA:BB:CC:DD::EEF",
            "not-a-mac",
            "٠٠:BB:CC:DD:EE:FF",  # non-ASCII digits
        ],
    )
    def test_invalid(self, candidate):
        assert is_valid_bssid(candidate) is False

    def test_non_string_is_invalid(self):
        assert is_valid_bssid(None) is False  # type: ignore[arg-type]
        assert is_valid_bssid(123) is False  # type: ignore[arg-type]

    def test_agrees_with_reference_pattern(self):
        samples = [
            "AA:BB:CC:DD:EE:FF",
            "aa:bb:cc:dd:ee:f",
            "aa:bb:cc:dd:ee:ff ",
            "zz:bb:cc:dd:ee:ff",
            "aa:bb:cc:dd:ee:ff",
            "aa.bb.cc.dd.ee.ff",
            "0a:0b:0c:0d:0e:0f",
        ]
        for s in samples:
            assert is_valid_bssid(s) == bool(_REFERENCE.match(s)), s

    def test_does_not_normalize(self):
        # Validation accepts lowercase but leaves the value untouched
        value = "aa:bb:cc:dd:ee:ff"
        assert is_valid_bssid(value)
        assert value == "aa:bb:cc:dd:ee:ff"


class TestNormalizeBssid:
    def test_uppercases(self):
        assert normalize_bssid("aa:bb:cc:dd:ee:ff") == "AA:BB:CC:DD:EE:FF"

    def test_strips_whitespace(self):
        assert normalize_bssid("  aa:bb:cc:dd:ee:ff\n") == "AA:BB:CC:DD:EE:FF"


class TestModels:
    def test_record_is_hashable_value(self):
        a = WifiRecord(ssid="Home", bssid="AA:BB:CC:DD:EE:FF", signal="-45")
        b = WifiRecord(ssid="Home", bssid="AA:BB:CC:DD:EE:FF", signal="-45")
        assert a == b
        assert len({a, b}) == 1

    def test_not_applicable_attempt(self):
        attempt = ProbeAttempt.not_applicable("netsh", "linux")
        assert attempt.applicable is False
        assert attempt.invoked is False
        assert attempt.exit_succeeded is False
        assert "linux" in attempt.raw_error
