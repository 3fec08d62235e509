"""Tests for what-if simulation."""

from datetime import datetime, timezone

import pytest

from funnel_landing.funnel import calculate_landing, fetch_dataset
from funnel_landing.funnel.dataset import build_dataset
from funnel_landing.funnel.simulation import (
    compare_landings,
    discover_opportunity_stages,
    discover_quotation_statuses,
    merge_weights,
    simulate,
)
from funnel_landing.models.landing import LandingReport, LandingResult
from funnel_landing.models.period import PeriodFilter
from tests.conftest import FakeSource, make_opportunity, make_quotation

PERIOD = PeriodFilter(year=2026)


class TestMergeWeights:
    """Tests for merge_weights."""

    def test_overrides_win(self) -> None:
        assert merge_weights({"12": 0.9}, {"12": 0.5, "13": 0.2}) == {"12": 0.9, "13": 0.2}

    def test_no_base(self) -> None:
        assert merge_weights({"12": 0.9}) == {"12": 0.9}

    def test_does_not_mutate_base(self) -> None:
        base = {"12": 0.5}
        merge_weights({"12": 0.9}, base)
        assert base == {"12": 0.5}


class TestSimulate:
    """Tests for simulate."""

    def test_matches_live_calculation(self, fake_source: FakeSource) -> None:
        """Same weights give exactly the live landing."""
        weights_q, weights_o = {"12": 0.5}, {"3": 0.25}
        live = calculate_landing(fetch_dataset(fake_source, PERIOD), weights_q, weights_o)
        simulated = simulate(PERIOD, weights_q, weights_o, source=fake_source)
        assert simulated == live
        assert simulated.landing_total == 14500.0

    def test_raising_quotation_weight(self, fake_source: FakeSource) -> None:
        simulated = simulate(PERIOD, {"12": 0.8}, {"3": 0.25}, source=fake_source)
        assert simulated.quotations_weighted_total == pytest.approx(4000.0)
        assert simulated.landing_total == pytest.approx(16000.0)

    def test_unmapped_codes_use_defaults(self, fake_source: FakeSource) -> None:
        simulated = simulate(PERIOD, {}, {}, source=fake_source)
        assert simulated.quotations_weighted_total == 2500.0
        assert simulated.opportunities_weighted_total == pytest.approx(2400.0)

    def test_base_fills_missing_codes(self, fake_source: FakeSource) -> None:
        simulated = simulate(PERIOD, {}, {}, source=fake_source, opportunity_base={"3": 0.25})
        assert simulated.opportunities_weighted_total == 2000.0

    def test_reuses_dataset_without_fetching(self, fake_source: FakeSource) -> None:
        dataset = fetch_dataset(fake_source, PERIOD)
        calls = fake_source.calls
        simulate(PERIOD, {"12": 1.0}, {}, dataset=dataset)
        assert fake_source.calls == calls

    def test_needs_source_or_dataset(self) -> None:
        with pytest.raises(ValueError, match="dataset or a source"):
            simulate(PERIOD, {}, {})

    def test_dataset_period_mismatch(self) -> None:
        dataset = build_dataset(PeriodFilter(year=2025), [], [], [])
        with pytest.raises(ValueError, match="not 2026"):
            simulate(PERIOD, {}, {}, dataset=dataset)


class TestCompareLandings:
    """Tests for compare_landings."""

    def test_deltas(self) -> None:
        current = LandingResult(landing_total=100.0, quotations_weighted_total=40.0)
        simulated = LandingResult(landing_total=130.0, quotations_weighted_total=70.0)
        comparison = compare_landings(current, simulated)
        assert comparison.deltas["landing_total"] == 30.0
        assert comparison.deltas["quotations_weighted_total"] == 30.0
        assert comparison.deltas["orders_total"] == 0.0

    def test_strips_report_fields(self) -> None:
        """Subclass payloads (records, provenance) are not carried into the comparison."""
        report = LandingReport(period=PERIOD, landing_total=5.0, last_sync=datetime.now(timezone.utc), from_cache=True)
        comparison = compare_landings(report, LandingResult(landing_total=7.0))
        assert type(comparison.current) is LandingResult
        assert "period" not in comparison.model_dump()["current"]


class TestDiscovery:
    """Tests for status / stage discovery."""

    def test_quotation_statuses_first_seen(self) -> None:
        quotations = [
            make_quotation(1, status="16", status_label="Accepté"),
            make_quotation(2, status="12", status_label="Envoyé au client"),
            make_quotation(3, status="16", status_label="Accepté"),
            make_quotation(4, status="0"),
        ]
        options = discover_quotation_statuses(quotations)
        assert [(o.code, o.label) for o in options] == [("16", "Accepté"), ("12", "Envoyé au client")]

    def test_opportunity_stage_label_fallback(self) -> None:
        options = discover_opportunity_stages([make_opportunity(1, stage="42")])
        assert options[0].label == "Étape 42"
