"""Tests for the freshness comparator."""

from __future__ import annotations

import pytest

from conftest import slot_record
from idl_guard.comparator import (
    REASON_NO_IDL_HISTORY,
    REASON_NO_PROGRAM_HISTORY,
    assess,
    compare,
)
from idl_guard.models import ChangeRecord, Verdict


class TestCompare:

    def test_program_newer_is_outdated(self):
        assert compare(slot_record(1000), slot_record(999)) == Verdict.OUTDATED

    def test_idl_newer_is_ok(self):
        assert compare(slot_record(999), slot_record(1000)) == Verdict.OK

    @pytest.mark.parametrize("order", [0, 1, 1000, 2**40])
    def test_tie_is_ok(self, order):
        assert compare(slot_record(order), slot_record(order)) == Verdict.OK

    def test_monotonic_in_program_order(self):
        idl = slot_record(500)
        rank = {Verdict.OK: 0, Verdict.OUTDATED: 1}
        verdicts = [compare(slot_record(o), idl) for o in range(490, 511)]
        ranks = [rank[v] for v in verdicts]
        assert ranks == sorted(ranks)
        assert verdicts[0] == Verdict.OK
        assert verdicts[-1] == Verdict.OUTDATED

    @pytest.mark.parametrize("other", [None, slot_record(0), slot_record(10**9)])
    def test_missing_side_is_indeterminate(self, other):
        assert compare(None, other) == Verdict.INDETERMINATE
        assert compare(other, None) == Verdict.INDETERMINATE


class TestAssess:

    def test_missing_program_reason(self):
        result = assess(None, slot_record(1))
        assert result.reason == REASON_NO_PROGRAM_HISTORY

    def test_missing_idl_reason(self):
        result = assess(slot_record(1), None)
        assert result.reason == REASON_NO_IDL_HISTORY

    def test_mixed_units_rejected(self):
        by_time = ChangeRecord(signature="s", order=1_700_000_000, unit="timestamp")
        with pytest.raises(ValueError):
            assess(slot_record(5), by_time)

    def test_timestamp_records_compare(self):
        older = ChangeRecord(signature="a", order=1_700_000_000, unit="timestamp")
        newer = ChangeRecord(signature="b", order=1_700_000_100, unit="timestamp")
        assert assess(newer, older).verdict == Verdict.OUTDATED
        assert assess(older, newer).verdict == Verdict.OK
