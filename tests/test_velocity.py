"""Tests for the velocity snapshot composer."""

import json
from collections.abc import Callable
from datetime import datetime

from claim_velocity.schema import ClaimRecord, SupplementRecord
from claim_velocity.velocity import calculate_velocity_snapshot


class TestScenario:
    def test_headline_metrics(self, scenario_claims: list[ClaimRecord], now: datetime) -> None:
        snapshot = calculate_velocity_snapshot(scenario_claims, 90, now)
        assert snapshot.avg_claim_velocity_days == 10.0
        assert snapshot.median_claim_velocity_days == 10.0
        assert snapshot.avg_supplement_response_days == 3.0
        assert snapshot.revenue_per_day == 56
        assert snapshot.claims_analyzed == 2
        assert snapshot.closed_in_period == 1
        assert snapshot.generated_at == now

    def test_carriers_and_bottlenecks(
        self, scenario_claims: list[ClaimRecord], now: datetime
    ) -> None:
        snapshot = calculate_velocity_snapshot(scenario_claims, 90, now)
        carriers = {b.carrier: b for b in snapshot.carrier_benchmarks}
        assert carriers["USAA"].claim_count == 1
        assert carriers["USAA"].avg_days_to_close == 10.0
        assert carriers["Unknown"].claim_count == 0
        assert [b.stage for b in snapshot.bottlenecks] == ["INSPECTION", "INTAKE"]


class TestPeriodFiltering:
    def test_revenue_per_day(self, make_claim: Callable[..., ClaimRecord], now: datetime) -> None:
        claims = [
            make_claim("1", created=0, closed=5, total_value=1000),
            make_claim("2", created=0, closed=6, total_value=2000),
            make_claim("3", created=0, closed=7, total_value=3000),
        ]
        snapshot = calculate_velocity_snapshot(claims, 90, now)
        assert snapshot.revenue_per_day == 67

    def test_headline_uses_current_window_only(
        self, make_claim: Callable[..., ClaimRecord], day: Callable[[float], datetime]
    ) -> None:
        now = day(200)
        claims = [
            make_claim("recent", created=150, closed=160, total_value=900),
            make_claim("old", created=0, closed=50, total_value=100_000),
        ]
        snapshot = calculate_velocity_snapshot(claims, 90, now)
        assert snapshot.avg_claim_velocity_days == 10.0
        assert snapshot.revenue_per_day == 10

    def test_supplement_response_not_period_filtered(
        self, make_claim: Callable[..., ClaimRecord], day: Callable[[float], datetime]
    ) -> None:
        now = day(400)
        old_claim = make_claim(
            "old",
            created=0,
            closed=30,
            supplements=[SupplementRecord(submitted_at=day(1), responded_at=day(9))],
        )
        snapshot = calculate_velocity_snapshot([old_claim], 90, now)
        assert snapshot.closed_in_period == 0
        assert snapshot.avg_claim_velocity_days == 0.0
        assert snapshot.avg_supplement_response_days == 8.0

    def test_median(self, make_claim: Callable[..., ClaimRecord], now: datetime) -> None:
        claims = [
            make_claim("1", created=0, closed=1),
            make_claim("2", created=0, closed=2),
            make_claim("3", created=0, closed=3),
            make_claim("4", created=0, closed=4),
        ]
        snapshot = calculate_velocity_snapshot(claims, 90, now)
        assert snapshot.median_claim_velocity_days == 2.5
        assert snapshot.avg_claim_velocity_days == 2.5

    def test_zero_period_days(self, make_claim: Callable[..., ClaimRecord], now: datetime) -> None:
        claims = [make_claim("1", created=0, closed=20, total_value=500)]
        snapshot = calculate_velocity_snapshot(claims, 0, now)
        assert snapshot.revenue_per_day == 0


class TestZeroSafety:
    def test_empty_collection(self, now: datetime) -> None:
        snapshot = calculate_velocity_snapshot([], now=now)
        assert snapshot.avg_claim_velocity_days == 0.0
        assert snapshot.median_claim_velocity_days == 0.0
        assert snapshot.avg_supplement_response_days == 0.0
        assert snapshot.revenue_per_day == 0
        assert snapshot.carrier_benchmarks == []
        assert snapshot.bottlenecks == []
        assert snapshot.trend.direction == "stable"
        assert snapshot.trend.change_percent == 0.0

    def test_default_now(self, scenario_claims: list[ClaimRecord]) -> None:
        snapshot = calculate_velocity_snapshot(scenario_claims)
        assert snapshot.generated_at is not None
        assert snapshot.period_days == 90

    def test_very_long_window(
        self, make_claim: Callable[..., ClaimRecord], day: Callable[[float], datetime]
    ) -> None:
        snapshot = calculate_velocity_snapshot(
            [make_claim("1", created=0, closed=10)], 1_000_000, day(20)
        )
        assert snapshot.avg_claim_velocity_days == 10.0
        assert snapshot.trend.current_period_claims == 1
        assert snapshot.revenue_per_day == 0


class TestDeterminism:
    def test_identical_output_for_fixed_now(
        self, generated_claims: list[ClaimRecord]
    ) -> None:
        now = datetime(2025, 6, 30)
        first = calculate_velocity_snapshot(generated_claims, 90, now)
        second = calculate_velocity_snapshot(generated_claims, 90, now)
        assert first == second
        assert first.to_json() == second.to_json()


class TestSerialization:
    def test_camel_case_json(self, scenario_claims: list[ClaimRecord], now: datetime) -> None:
        payload = json.loads(calculate_velocity_snapshot(scenario_claims, 90, now).to_json())
        assert payload["avgClaimVelocityDays"] == 10.0
        assert payload["revenuePerDay"] == 56
        assert payload["carrierBenchmarks"][0]["claimCount"] == 1
        assert payload["bottlenecks"][0]["percentOfTotal"] == 79
        assert payload["trend"]["direction"] == "stable"
        assert "changePercent" in payload["trend"]
