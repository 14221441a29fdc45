"""Tests for record aggregation and deduplication."""

from wifiviewer.scanner.aggregate import aggregate_records
from wifiviewer.scanner.base import WifiRecord


def _r(bssid: str, ssid: str = "", signal: str = "") -> WifiRecord:
    return WifiRecord(ssid=ssid, bssid=bssid, signal=signal)


class TestAggregateRecords:
    def test_sorted_by_bssid(self):
        out = aggregate_records([_r("CC:00:00:00:00:00"), _r("AA:00:00:00:00:00"), _r("BB:00:00:00:00:00")])
        assert [r.bssid for r in out] == [
            "AA:00:00:00:00:00",
            "BB:00:00:00:00:00",
            "CC:00:00:00:00:00",
        ]

    def test_case_insensitive_dedup(self):
        records = [
            _r("aa:bb:cc:dd:ee:ff", "one"),
            _r("AA:BB:CC:DD:EE:FF", "two"),
            _r("11:22:33:44:55:66", "three"),
            _r("Aa:Bb:Cc:Dd:Ee:Ff", "four"),
        ]
        out = aggregate_records(records)
        distinct = {r.bssid.upper() for r in records}
        assert len(out) == len(distinct) == 2
        assert len({r.bssid for r in out}) == len(out)

    def test_first_encountered_wins_over_stronger_signal(self):
        out = aggregate_records(
            [
                _r("AA:BB:CC:DD:EE:FF", "first", "-80"),
                _r("AA:BB:CC:DD:EE:FF", "second", "-30"),
            ]
        )
        assert out == [_r("AA:BB:CC:DD:EE:FF", "first", "-80")]

    def test_output_is_uppercase(self):
        out = aggregate_records([_r("aa:bb:cc:dd:ee:ff", "x", "1")])
        assert out == [_r("AA:BB:CC:DD:EE:FF", "x", "1")]

    def test_invalid_bssids_dropped(self):
        out = aggregate_records([_r("not-a-mac"), _r("AA:BB:CC:DD:EE:FF"), _r("")])
        assert [r.bssid for r in out] == ["AA:BB:CC:DD:EE:FF"]

    def test_deterministic(self):
        records = [_r("BB:00:00:00:00:00", "b"), _r("aa:00:00:00:00:00", "a"), _r("AA:00:00:00:00:00", "A")]
        assert aggregate_records(records) == aggregate_records(list(records))
        assert aggregate_records(records)[0].ssid == "a"

    def test_empty(self):
        assert aggregate_records([]) == []
