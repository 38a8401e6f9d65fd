"""
Unit Tests - Data Exploration
"""
from datetime import date

import pytest

from gold_analytics.analytics.exploration import DataExplorer


class TestDimensionExploration:
    def test_distinct_countries(self, gold, as_of):
        result = DataExplorer(gold, as_of=as_of).distinct_countries()

        assert result["country"].to_list() == ["Australia", "Germany", "United States"]

    def test_product_hierarchy(self, gold, as_of):
        result = DataExplorer(gold, as_of=as_of).product_hierarchy()

        assert result.columns == ["category", "subcategory", "product_name"]
        assert result.height == 5
        assert result.row(0) == ("Accessories", "Helmets", "Sport-100 Helmet")


class TestTemporalExploration:
    def test_order_date_range(self, gold, as_of):
        result = DataExplorer(gold, as_of=as_of).order_date_range().row(0, named=True)

        assert result == {
            "first_order": date(2011, 1, 10),
            "last_order": date(2013, 12, 1),
            "sales_years": 2,
            "sales_months": 35,
        }

    def test_customer_age_range(self, gold, as_of):
        result = DataExplorer(gold, as_of=as_of).customer_age_range().row(0, named=True)

        assert result["oldest_bday"] == date(1971, 10, 6)
        assert result["oldest_age"] == 43
        assert result["youngest_bday"] == date(2008, 2, 9)
        assert result["youngest_age"] == 6

    def test_empty_fact_table(self, empty_gold, as_of):
        result = DataExplorer(empty_gold, as_of=as_of).order_date_range().row(0, named=True)

        assert result["first_order"] is None
        assert result["sales_months"] is None


class TestMeasures:
    def test_measures(self, gold, as_of):
        measures = DataExplorer(gold, as_of=as_of).measures()

        assert measures["total_sales"] == pytest.approx(11525.0)
        assert measures["total_quantity"] == 10
        assert measures["avg_price"] == pytest.approx(1440.625)
        assert measures["total_orders"] == 7
        assert measures["total_products"] == 5
        assert measures["total_products_fact"] == 8
        assert measures["total_customers"] == 4
        assert measures["customers_with_orders"] == 4

    def test_key_metrics_report(self, gold, as_of):
        result = DataExplorer(gold, as_of=as_of).key_metrics()

        assert result.columns == ["measure_name", "measure_value"]
        assert result["measure_name"].to_list() == [
            "Total Sales",
            "Total Quantity",
            "Average Price",
            "Total Orders",
            "Total Products",
            "Total Customers",
        ]
        assert result["measure_value"].to_list() == pytest.approx([11525.0, 10.0, 1440.625, 7.0, 5.0, 4.0])

    def test_sample_sales(self, gold, as_of):
        explorer = DataExplorer(gold, as_of=as_of)

        assert explorer.sample_sales(3).height == 3
        assert explorer.sample_sales(100).height == 8

        with pytest.raises(ValueError):
            explorer.sample_sales(-1)
