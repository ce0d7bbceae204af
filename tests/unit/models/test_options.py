"""Unit tests for RecentMediaOptions."""

import pytest
from pydantic import ValidationError

from ragamints.models import RecentMediaOptions


class TestRecentMediaOptions:
    """Test option validation and listing parameters."""

    def test_defaults(self):
        options = RecentMediaOptions()
        assert options.count is None
        assert options.sequential is False
        assert options.include_videos is False
        assert options.listing_params() == {}
        assert options.has_bounds is False

    def test_listing_params_only_supplied_fields(self):
        """Test iteration flags never reach the listing parameters."""
        options = RecentMediaOptions(count=10, max_id="123_456", sequential=True, include_videos=True)
        assert options.listing_params() == {"count": 10, "max_id": "123_456"}
        assert options.has_bounds is True

    def test_filters_without_count_are_bounds(self):
        assert RecentMediaOptions(min_timestamp=0).has_bounds is True

    @pytest.mark.parametrize("count", [0, -1])
    def test_count_must_be_positive(self, count):
        with pytest.raises(ValidationError):
            RecentMediaOptions(count=count)

    def test_timestamps_non_negative(self):
        with pytest.raises(ValidationError):
            RecentMediaOptions(min_timestamp=-1)

    def test_frozen(self):
        options = RecentMediaOptions(count=3)
        with pytest.raises(ValidationError):
            options.count = 4

    def test_ids_stripped(self):
        assert RecentMediaOptions(min_id="  42_1 ").min_id == "42_1"
