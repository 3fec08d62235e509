"""Unit tests for TTLCache."""

from funnel_landing.connectors.reference_cache import TTLCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestTTLCache:
    """Tests for expiry and loading."""

    def test_empty(self) -> None:
        assert TTLCache(60).get() is None

    def test_load_once_while_fresh(self) -> None:
        clock = FakeClock()
        cache: TTLCache[dict] = TTLCache(600, clock=clock)
        loads = []

        def loader() -> dict:
            loads.append(1)
            return {"n": len(loads)}

        assert cache.get_or_load(loader) == {"n": 1}
        clock.now += 599
        assert cache.get_or_load(loader) == {"n": 1}
        assert len(loads) == 1

    def test_reload_after_ttl(self) -> None:
        clock = FakeClock()
        cache: TTLCache[dict] = TTLCache(600, clock=clock)
        cache.get_or_load(lambda: {"v": "old"})
        clock.now += 600
        assert cache.get() is None
        assert cache.get_or_load(lambda: {"v": "new"}) == {"v": "new"}

    def test_failed_load_keeps_nothing(self) -> None:
        cache: TTLCache[dict] = TTLCache(600, clock=FakeClock())

        def loader() -> dict:
            raise RuntimeError("down")

        try:
            cache.get_or_load(loader)
        except RuntimeError:
            pass
        assert cache.get() is None
