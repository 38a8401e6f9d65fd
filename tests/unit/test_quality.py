"""
Unit Tests - Data Quality
"""
import polars as pl
import pytest

from gold_analytics.quality.validators import (
    DataValidator,
    ValidationSeverity,
    ValidationStatus,
    create_customers_validator,
    create_fact_sales_validator,
    create_products_validator,
    overall_status,
    validate_gold_layer,
)


class TestDataValidator:
    """Tests for DataValidator"""

    def test_not_null_check_passes(self):
        df = pl.DataFrame({"id": [1, 2, 3], "name": ["a", "b", "c"]})

        result = DataValidator().add_not_null_check("id").validate(df)

        assert result.status == ValidationStatus.PASSED
        assert result.passed_checks == 1

    def test_not_null_check_fails(self):
        df = pl.DataFrame({"id": [1, None, 3]})

        result = DataValidator().add_not_null_check("id").validate(df)

        assert result.status == ValidationStatus.FAILED
        assert result.failed_checks == 1
        assert result.checks[0].failed_rows == 1

    def test_unique_check_on_composite_key(self):
        df = pl.DataFrame({"order_number": ["SO1", "SO1", "SO1"], "product_key": [1, 2, 2]})

        single = DataValidator().add_unique_check(["order_number", "product_key"]).validate(df)

        assert single.status == ValidationStatus.FAILED
        assert single.checks[0].name == "unique_order_number_product_key"
        assert single.checks[0].failed_rows == 1

    def test_range_check_ignores_nulls(self):
        df = pl.DataFrame({"price": [10.0, None, 250.0]})

        result = DataValidator().add_range_check("price", min_value=0, max_value=200).validate(df)

        assert result.status == ValidationStatus.FAILED
        assert result.checks[0].details["out_of_range_count"] == 1

    def test_warning_gives_partial(self):
        df = pl.DataFrame({"quantity": [1, 0, 2]})

        result = (
            DataValidator()
            .add_positive_check("quantity", allow_zero=False, severity=ValidationSeverity.WARNING)
            .validate(df)
        )

        assert result.status == ValidationStatus.PARTIAL
        assert result.warning_count == 1

    def test_strict_mode_fails_on_warning(self):
        df = pl.DataFrame({"quantity": [0]})

        result = (
            DataValidator(strict_mode=True)
            .add_positive_check("quantity", allow_zero=False, severity=ValidationSeverity.WARNING)
            .validate(df)
        )

        assert result.status == ValidationStatus.FAILED

    def test_enum_check(self):
        df = pl.DataFrame({"gender": ["Male", "Female", "Other", None]})

        result = DataValidator().add_enum_check("gender", ["Male", "Female"]).validate(df)

        assert result.checks[0].failed_rows == 1

    def test_pattern_check(self):
        df = pl.DataFrame({"customer_number": ["AW00011000", "XX1", None]})

        result = DataValidator().add_pattern_check("customer_number", r"^AW\d+$").validate(df)

        assert result.checks[0].failed_rows == 1
        assert result.checks[0].total_rows == 2

    def test_custom_check(self):
        df = pl.DataFrame({"a": [1, 2], "b": [2, 1]})

        result = (
            DataValidator()
            .add_custom_check("a_below_b", lambda d: (d["a"] < d["b"]).all(), "a must be below b")
            .validate(df)
        )

        assert result.status == ValidationStatus.FAILED
        assert result.checks[0].message == "a must be below b"

    def test_missing_column(self):
        result = DataValidator().add_not_null_check("missing").validate(pl.DataFrame({"a": [1]}))

        assert result.status == ValidationStatus.FAILED
        assert "not found" in result.checks[0].message

    def test_referential_integrity(self):
        facts = pl.DataFrame({"customer_key": [1, 2, 99, None]})
        dims = pl.DataFrame({"customer_key": [1, 2]})

        result = (
            DataValidator()
            .add_referential_integrity_check("customer_key", dims, "customer_key")
            .validate(facts)
        )

        assert result.checks[0].failed_rows == 1

    def test_summary(self):
        result = DataValidator().add_not_null_check("id").validate(pl.DataFrame({"id": [None, 1]}))

        summary = result.summary()

        assert summary["status"] == "failed"
        assert summary["success_rate"] == 0.0
        assert summary["failures"][0]["name"] == "not_null_id"


class TestGoldLayerValidation:
    """Tests for the pre-built Gold Layer validators"""

    def test_fact_sales_tolerated_gaps_are_warnings(self, gold):
        result = create_fact_sales_validator(gold.customers, gold.products).validate(gold.fact_sales)

        assert result.status == ValidationStatus.PARTIAL
        failed = {c.name for c in result.checks if not c.passed}
        assert failed == {"not_null_order_date", "ref_integrity_customer_key"}

    def test_dimensions_pass(self, gold):
        assert create_customers_validator().validate(gold.customers).status == ValidationStatus.PASSED
        assert create_products_validator().validate(gold.products).status == ValidationStatus.PASSED

    def test_duplicate_dimension_key_fails(self, gold):
        customers = pl.concat([gold.customers, gold.customers.head(1)])

        result = create_customers_validator().validate(customers)

        assert result.status == ValidationStatus.FAILED

    def test_overall_status(self, gold):
        results = validate_gold_layer(gold)

        assert set(results) == {"fact_sales", "dim_customers", "dim_products"}
        assert overall_status(results) == ValidationStatus.PARTIAL

    def test_negative_price_fails(self, gold):
        broken = gold.fact_sales.with_columns(
            pl.when(pl.col("order_number") == "SO1")
            .then(-1.0)
            .otherwise(pl.col("sales_price"))
            .alias("sales_price")
        )

        result = create_fact_sales_validator(gold.customers, gold.products).validate(broken)

        assert result.status == ValidationStatus.FAILED


@pytest.mark.parametrize("status", list(ValidationStatus))
def test_overall_status_single(status):
    from gold_analytics.quality.validators import ValidationResult

    result = ValidationResult(status=status, total_checks=0, passed_checks=0, failed_checks=0, warning_count=0)

    assert overall_status({"t": result}) == status
