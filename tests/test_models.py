"""Unit tests for Pydantic models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from idl_guard.models import Assessment, ChangeRecord, CheckConfig, CheckOutcome, Verdict


class TestCheckConfig:
    def test_defaults(self):
        c = CheckConfig(program_id="abc", rpc_url="https://rpc")
        assert c.on_missing_program_history == "fail"
        assert c.on_unexpected_owner == "skip"
        assert c.history_page_size == 1
        assert c.source_kind == "rpc"

    def test_helius_source_kind(self):
        c = CheckConfig(program_id="abc", helius_api_key="k", cluster="devnet")
        assert c.source_kind == "helius"

    def test_frozen(self):
        c = CheckConfig(program_id="abc", rpc_url="https://rpc")
        with pytest.raises(ValidationError):
            c.program_id = "other"

    def test_rejects_unknown_policy(self):
        with pytest.raises(ValidationError):
            CheckConfig(program_id="abc", rpc_url="x", on_missing_program_history="ignore")


class TestChangeRecord:
    def test_minimal(self):
        r = ChangeRecord(signature="sig", order=10)
        assert r.unit == "slot"
        assert r.block_time is None
        assert r.slot is None

    def test_rejects_unknown_unit(self):
        with pytest.raises(ValidationError):
            ChangeRecord(signature="sig", order=10, unit="epoch")


class TestCheckOutcome:
    def test_exit_code_bounds(self):
        with pytest.raises(ValidationError):
            CheckOutcome(status="ok", exit_code=2)

    def test_verdict_serialises_as_string(self):
        a = Assessment(verdict=Verdict.OUTDATED)
        assert a.model_dump(mode="json")["verdict"] == "OUTDATED"
