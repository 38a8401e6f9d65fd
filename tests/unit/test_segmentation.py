"""
Unit Tests - Segmentation Rules
"""
from datetime import date

import polars as pl
import pytest

from gold_analytics.analytics.segmentation import (
    AgeGroup,
    CostRange,
    CustomerSegment,
    ProductSegment,
    SegmentationRules,
    age_group,
    cost_range,
    customer_segment,
    months_between,
    product_segment,
    resolve_as_of,
    years_between,
)


class TestCalendarDifferences:
    """Tests for month and year boundary counting"""

    def test_months_between_counts_boundaries(self):
        df = pl.DataFrame({
            "start": [date(2011, 1, 31), date(2012, 12, 31), date(2013, 5, 1)],
            "end": [date(2011, 2, 1), date(2013, 1, 1), date(2013, 5, 31)],
        })

        result = df.select(months_between(pl.col("start"), pl.col("end")).alias("m"))["m"].to_list()

        assert result == [1, 1, 0]

    def test_months_between_accepts_dates(self):
        df = pl.DataFrame({"d": [date(2012, 3, 5)]})

        result = df.select(months_between(pl.col("d"), date(2014, 6, 15)).alias("m")).item()

        assert result == 27

    def test_years_between_ignores_birthday(self):
        df = pl.DataFrame({"birthdate": [date(1971, 10, 6), date(1971, 1, 1)]})

        result = df.select(years_between(pl.col("birthdate"), date(2014, 6, 15)).alias("age"))["age"].to_list()

        assert result == [43, 43]

    def test_null_dates_give_null(self):
        df = pl.DataFrame({"d": [None]}, schema={"d": pl.Date})

        result = df.select(months_between(pl.col("d"), date(2014, 6, 15)).alias("m")).item()

        assert result is None


class TestCustomerSegment:
    """Tests for VIP / Regular / New classification"""

    @pytest.mark.parametrize(
        "lifespan,total,expected",
        [
            (12, 5000.01, CustomerSegment.VIP),
            (12, 5000.0, CustomerSegment.REGULAR),
            (30, 10.0, CustomerSegment.REGULAR),
            (11, 99999.0, CustomerSegment.NEW),
            (0, 0.0, CustomerSegment.NEW),
        ],
    )
    def test_thresholds(self, lifespan, total, expected):
        df = pl.DataFrame({"lifespan": [lifespan], "total": [total]})

        result = df.select(customer_segment(pl.col("lifespan"), pl.col("total")).alias("s")).item()

        assert result == expected.value

    def test_null_lifespan_is_new(self):
        df = pl.DataFrame({"lifespan": [None], "total": [9000.0]}, schema={"lifespan": pl.Int64, "total": pl.Float64})

        result = df.select(customer_segment(pl.col("lifespan"), pl.col("total")).alias("s")).item()

        assert result == CustomerSegment.NEW.value

    def test_custom_rules(self):
        rules = SegmentationRules(vip_min_lifespan_months=3, vip_spend_threshold=100)
        df = pl.DataFrame({"lifespan": [3], "total": [150.0]})

        result = df.select(customer_segment(pl.col("lifespan"), pl.col("total"), rules).alias("s")).item()

        assert result == CustomerSegment.VIP.value


class TestProductSegment:
    """Tests for product performance tiers"""

    def test_tiers(self):
        df = pl.DataFrame({"sales": [50000.01, 50000.0, 10000.0, 9999.99, None]})

        result = df.select(product_segment(pl.col("sales")).alias("s"))["s"].to_list()

        assert result == [
            ProductSegment.HIGH.value,
            ProductSegment.MID.value,
            ProductSegment.MID.value,
            ProductSegment.LOW.value,
            ProductSegment.LOW.value,
        ]


class TestBuckets:
    """Tests for cost ranges and age groups"""

    def test_cost_range_bounds(self):
        df = pl.DataFrame({"cost": [99.99, 100.0, 500.0, 500.5, 1000.0, 1000.01, None]})

        result = df.select(cost_range(pl.col("cost")).alias("r"))["r"].to_list()

        assert result == [
            CostRange.BELOW_100.value,
            CostRange.FROM_100_TO_500.value,
            CostRange.FROM_100_TO_500.value,
            CostRange.FROM_500_TO_1000.value,
            CostRange.FROM_500_TO_1000.value,
            CostRange.ABOVE_1000.value,
            CostRange.ABOVE_1000.value,
        ]

    def test_age_groups(self):
        df = pl.DataFrame({"age": [6, 20, 29, 30, 45, 50, 80, None]}, schema={"age": pl.Int64})

        result = df.select(age_group(pl.col("age")).alias("g"))["g"].to_list()

        assert result == [
            AgeGroup.UNDER_20.value,
            AgeGroup.TWENTIES.value,
            AgeGroup.TWENTIES.value,
            AgeGroup.THIRTIES.value,
            AgeGroup.FORTIES.value,
            AgeGroup.FIFTY_PLUS.value,
            AgeGroup.FIFTY_PLUS.value,
            AgeGroup.FIFTY_PLUS.value,
        ]


class TestResolveAsOf:
    def test_explicit_date_wins(self):
        assert resolve_as_of(date(2014, 6, 15)) == date(2014, 6, 15)

    def test_defaults_to_today(self, monkeypatch):
        from gold_analytics.config import settings as settings_module

        monkeypatch.delenv("ANALYTICS_AS_OF_DATE", raising=False)
        settings_module.get_settings.cache_clear()
        try:
            assert resolve_as_of() == date.today()
        finally:
            settings_module.get_settings.cache_clear()

    def test_configured_date(self, monkeypatch):
        from gold_analytics.config import settings as settings_module

        monkeypatch.setenv("ANALYTICS_AS_OF_DATE", "2013-01-01")
        settings_module.get_settings.cache_clear()
        try:
            assert resolve_as_of() == date(2013, 1, 1)
        finally:
            settings_module.get_settings.cache_clear()
