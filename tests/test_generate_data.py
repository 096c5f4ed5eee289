"""Tests for synthetic claim generation."""

from claim_velocity.config import PipelineConfig
from claim_velocity.generate_data import generate_claims
from claim_velocity.schema import ClaimRecord


class TestGenerateClaims:
    def test_deterministic_output(self) -> None:
        """Same seed produces identical claim collections."""
        config = PipelineConfig(seed=7, num_claims=100)
        assert generate_claims(config) == generate_claims(config)

    def test_claim_count(self, generated_claims: list[ClaimRecord], config: PipelineConfig) -> None:
        assert len(generated_claims) == config.num_claims
        assert len({c.id for c in generated_claims}) == config.num_claims

    def test_mix_of_open_closed_and_unknown_carrier(
        self, generated_claims: list[ClaimRecord]
    ) -> None:
        assert any(c.closed_at is None for c in generated_claims)
        assert any(c.closed_at is not None for c in generated_claims)
        assert any(c.carrier is None for c in generated_claims)
        assert any(c.supplements for c in generated_claims)

    def test_nothing_after_as_of(
        self, generated_claims: list[ClaimRecord], config: PipelineConfig
    ) -> None:
        for claim in generated_claims:
            assert claim.created_at <= config.as_of
            if claim.closed_at is not None:
                assert claim.closed_at <= config.as_of
            for s in claim.supplements:
                if s.responded_at is not None:
                    assert s.responded_at <= config.as_of

    def test_stage_chronology(self, generated_claims: list[ClaimRecord]) -> None:
        for claim in generated_claims:
            assert claim.stages
            assert claim.stages[0].stage == "INTAKE"
            assert claim.stages[0].entered_at == claim.created_at
            for prev, nxt in zip(claim.stages, claim.stages[1:]):
                assert prev.exited_at == nxt.entered_at

    def test_open_claims_end_in_open_stage(self, generated_claims: list[ClaimRecord]) -> None:
        for claim in generated_claims:
            if claim.closed_at is None:
                assert claim.stages[-1].exited_at is None
            else:
                assert claim.stages[-1].stage == "CLOSED"
                assert claim.status == "CLOSED"

    def test_no_carriers_configured(self) -> None:
        config = PipelineConfig(seed=1, num_claims=10, carriers=[])
        assert all(c.carrier is None for c in generate_claims(config))
