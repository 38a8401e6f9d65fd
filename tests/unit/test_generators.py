"""
Unit Tests - Synthetic Gold Layer
"""
from datetime import date

from gold_analytics.analytics.gold_layer import CUSTOMERS_SCHEMA, FACT_SALES_SCHEMA, PRODUCTS_SCHEMA
from gold_analytics.data.generators import GoldLayerGenerator
from gold_analytics.quality.validators import ValidationStatus, overall_status, validate_gold_layer


class TestGoldLayerGenerator:
    def test_schemas(self):
        gold = GoldLayerGenerator(seed=1).generate(customers=50, products=10, orders=200)

        assert dict(gold.fact_sales.schema) == FACT_SALES_SCHEMA
        assert dict(gold.customers.schema) == CUSTOMERS_SCHEMA
        assert dict(gold.products.schema) == PRODUCTS_SCHEMA
        assert gold.row_counts["dim_customers"] == 50
        assert gold.row_counts["dim_products"] == 10

    def test_reproducible(self):
        first = GoldLayerGenerator(seed=7).generate(customers=20, products=5, orders=50)
        second = GoldLayerGenerator(seed=7).generate(customers=20, products=5, orders=50)

        assert first.fact_sales.equals(second.fact_sales)
        assert first.customers.equals(second.customers)

    def test_dates_within_range(self):
        generator = GoldLayerGenerator(seed=3)
        gold = generator.generate(customers=30, products=8, orders=300)

        dated = gold.dated_sales()
        assert dated["order_date"].min() >= date(2010, 12, 29)
        assert dated["order_date"].max() <= date(2014, 1, 28)

    def test_generated_layer_is_usable(self):
        gold = GoldLayerGenerator(seed=5, undated_share=0.0, orphan_share=0.0).generate(
            customers=40, products=12, orders=400
        )

        assert overall_status(validate_gold_layer(gold)) == ValidationStatus.PASSED
