"""Landing service: cached landing figures, forced sync and simulation.

Snapshots are cached per (data_type, year). A snapshot younger than the
staleness threshold is served as-is; anything older, or missing, is
recomputed from the CRM and written back. A source failure leaves the stored
snapshot alone and propagates. If the cache itself is unreachable the service
keeps answering by recomputing on every call.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Mapping, Optional

from pydantic import ValidationError

from funnel_landing.connectors.base import CrmDataSource
from funnel_landing.errors import CacheUnavailableError
from funnel_landing.funnel import (
    calculate_landing,
    compare_landings,
    discover_opportunity_stages,
    discover_quotation_statuses,
    fetch_dataset,
)
from funnel_landing.funnel import simulate as run_simulation
from funnel_landing.models.landing import FunnelSnapshot, LandingComparison, LandingReport, LandingResult
from funnel_landing.models.period import PeriodFilter
from funnel_landing.status_maps import DEFAULT_STATUS_MAPS, StatusMaps
from funnel_landing.store.snapshot_store import CachedSnapshot, SnapshotStore
from funnel_landing.store.weight_store import WeightStore

logger = logging.getLogger(__name__)

CACHE_MAX_AGE = timedelta(minutes=30)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LandingService:
    """Entry point for callers wanting landing figures for a period."""

    def __init__(
        self,
        source: CrmDataSource,
        weights: WeightStore,
        snapshots: Optional[SnapshotStore] = None,
        *,
        cache_max_age: timedelta = CACHE_MAX_AGE,
        status_maps: StatusMaps = DEFAULT_STATUS_MAPS,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """
        Args:
            source: CRM data source
            weights: Store the live path reads weights from
            snapshots: Snapshot cache; None means recompute on every call
            clock: Injected for tests; must return aware datetimes
        """
        self.source = source
        self.weights = weights
        self.snapshots = snapshots
        self.cache_max_age = cache_max_age
        self._status_maps = status_maps
        self._clock = clock

    def compute_snapshot(self, period: PeriodFilter) -> FunnelSnapshot:
        """Fetch, filter, deduplicate and weight with the stored weights. No caching."""
        dataset = fetch_dataset(self.source, period)
        landing = calculate_landing(
            dataset,
            self.weights.get_quotation_weights(),
            self.weights.get_opportunity_weights(),
        )
        return FunnelSnapshot(
            **landing.model_dump(),
            period=period,
            orders=dataset.orders,
            quotations=dataset.unique_quotations,
            opportunities=dataset.unique_opportunities,
            quotation_statuses=discover_quotation_statuses(dataset.all_quotations),
            opportunity_stages=discover_opportunity_stages(dataset.all_opportunities),
        )

    def _read_cached(self, period: PeriodFilter) -> Optional[CachedSnapshot]:
        if self.snapshots is None:
            return None
        try:
            return self.snapshots.get(period.cache_data_type, period.year)
        except CacheUnavailableError as e:
            logger.warning("Snapshot cache unavailable, recomputing %s: %s", period.label(), e)
            return None

    def _write_cached(self, snapshot: FunnelSnapshot, synced_at: datetime) -> None:
        if self.snapshots is None:
            return
        period = snapshot.period
        try:
            self.snapshots.set(
                period.cache_data_type,
                period.year,
                snapshot.model_dump(mode="json"),
                synced_at=synced_at,
            )
        except CacheUnavailableError as e:
            logger.warning("Could not save snapshot for %s: %s", period.label(), e)

    def _is_fresh(self, cached: CachedSnapshot) -> bool:
        return self._clock() - cached.synced_at < self.cache_max_age

    def get_landing(self, period: PeriodFilter) -> LandingReport:
        """Landing for the period, from a fresh snapshot when there is one."""
        cached = self._read_cached(period)
        if cached is not None and cached.data and self._is_fresh(cached):
            try:
                snapshot = FunnelSnapshot.model_validate(cached.data)
            except ValidationError as e:
                logger.warning("Discarding unreadable snapshot for %s: %s", period.label(), e)
            else:
                return LandingReport(
                    **snapshot.model_dump(),
                    last_sync=cached.synced_at,
                    from_cache=True,
                )
        return self.force_sync(period)

    def force_sync(self, period: PeriodFilter) -> LandingReport:
        """Recompute from the CRM regardless of cache state, then store the snapshot."""
        logger.info("Syncing funnel for %s", period.label())
        snapshot = self.compute_snapshot(period)
        synced_at = self._clock()
        self._write_cached(snapshot, synced_at)
        return LandingReport(**snapshot.model_dump(), last_sync=synced_at, from_cache=False)

    def last_sync(self, period: PeriodFilter) -> Optional[datetime]:
        """When the period's snapshot was last stored, or None."""
        if self.snapshots is None:
            return None
        try:
            return self.snapshots.last_synced_at(period.cache_data_type, period.year)
        except CacheUnavailableError as e:
            logger.warning("Snapshot cache unavailable: %s", e)
            return None

    def simulate(
        self,
        period: PeriodFilter,
        quotation_overrides: Mapping[str, float],
        opportunity_overrides: Mapping[str, float],
        *,
        merge_stored: bool = False,
    ) -> LandingResult:
        """
        Landing under hypothetical weights. Reads the CRM (and, with
        merge_stored, the stored weights) but writes nothing.
        """
        return run_simulation(
            period,
            quotation_overrides,
            opportunity_overrides,
            source=self.source,
            quotation_base=self.weights.get_quotation_weights() if merge_stored else None,
            opportunity_base=self.weights.get_opportunity_weights() if merge_stored else None,
        )

    def compare(
        self,
        period: PeriodFilter,
        quotation_overrides: Mapping[str, float],
        opportunity_overrides: Mapping[str, float],
        *,
        merge_stored: bool = False,
    ) -> LandingComparison:
        """
        Current landing (stored weights) next to the simulated one, both from a
        single CRM fetch. Bypasses the snapshot cache entirely and writes nothing.
        """
        dataset = fetch_dataset(self.source, period)
        q_stored = self.weights.get_quotation_weights()
        o_stored = self.weights.get_opportunity_weights()
        current = calculate_landing(dataset, q_stored, o_stored)
        simulated = run_simulation(
            period,
            quotation_overrides,
            opportunity_overrides,
            dataset=dataset,
            quotation_base=q_stored if merge_stored else None,
            opportunity_base=o_stored if merge_stored else None,
        )
        return compare_landings(current, simulated)

    def status_maps(self) -> StatusMaps:
        return self._status_maps
