from datetime import timedelta

import pytest

from app.config import Settings
from app.services.freshness import CachedResource, FreshnessPolicy


def _policy() -> FreshnessPolicy:
    return FreshnessPolicy(
        Settings(
            live_match_ttl_seconds=300,
            fixture_ttl_seconds=6 * 3600,
            finished_match_ttl_seconds=24 * 3600,
            default_ttl_seconds=3600,
            lineup_ttl_seconds=12 * 3600,
            news_ttl_seconds=1800,
        )
    )


class TestTtlFor:
    def test_phase_ttls(self):
        policy = _policy()
        assert policy.ttl_for("1H") == timedelta(minutes=5)
        assert policy.ttl_for("NS") == timedelta(hours=6)
        assert policy.ttl_for("FT") == timedelta(hours=24)

    @pytest.mark.parametrize("status", ["PST", "CANC", "AWD"])
    def test_called_off_matches_use_fixture_ttl(self, status):
        assert _policy().ttl_for(status) == timedelta(hours=6)

    def test_unknown_status_uses_default(self):
        assert _policy().ttl_for("XYZ") == timedelta(hours=1)
        assert _policy().ttl_for(None) == timedelta(hours=1)


class TestTtlForCollection:
    def test_most_volatile_item_wins(self):
        policy = _policy()
        assert policy.ttl_for_collection(["2H", "FT"]) == policy.ttl_for("2H")

    def test_never_exceeds_default(self):
        assert _policy().ttl_for_collection(["FT", "FT", "NS"]) == timedelta(hours=1)

    def test_empty_collection_gets_default(self):
        assert _policy().ttl_for_collection([]) == timedelta(hours=1)

    def test_explicit_ceiling(self):
        policy = _policy()
        assert policy.ttl_for_collection(["FT"], ceiling=timedelta(days=2)) == timedelta(hours=24)


class TestTtlForResource:
    def test_resource_ceiling_without_statuses(self):
        policy = _policy()
        assert policy.ttl_for_resource(CachedResource.lineup) == timedelta(hours=12)
        assert policy.ttl_for_resource(CachedResource.news) == timedelta(minutes=30)

    def test_live_match_caps_resource_ttl(self):
        assert _policy().ttl_for_resource(CachedResource.lineup, ["HT"]) == timedelta(minutes=5)

    def test_finished_match_keeps_resource_ceiling(self):
        assert _policy().ttl_for_resource(CachedResource.lineup, ["FT"]) == timedelta(hours=12)
