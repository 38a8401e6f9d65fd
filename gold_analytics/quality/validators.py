"""
Gold Layer Data Quality

Rule-based profiling of the star schema before reporting. The analyses
tolerate orphan dimension keys, null order dates and zero quantities, so
those surface as warnings; structural problems (missing keys, duplicate
dimension keys) are errors.

Every rule reduces to "how many rows in scope violate it"; a rule passes
when that count is zero.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import polars as pl
import structlog

from gold_analytics.analytics.gold_layer import GoldLayer

logger = structlog.get_logger(__name__)

# (violations, rows in scope, details)
Violations = Tuple[int, int, Dict[str, Any]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ValidationSeverity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ValidationStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    PARTIAL = "partial"


@dataclass
class ValidationCheck:
    """Outcome of one rule against one table"""
    name: str
    passed: bool
    severity: ValidationSeverity
    message: str
    details: Optional[Dict[str, Any]] = None
    failed_rows: int = 0
    total_rows: int = 0


@dataclass
class ValidationResult:
    """All rule outcomes for one table, rolled up into a status"""
    status: ValidationStatus
    total_checks: int
    passed_checks: int
    failed_checks: int
    warning_count: int
    checks: List[ValidationCheck] = field(default_factory=list)
    started_at: datetime = field(default_factory=_utcnow)
    completed_at: Optional[datetime] = None

    @property
    def success_rate(self) -> float:
        if self.total_checks == 0:
            return 100.0
        return self.passed_checks * 100 / self.total_checks

    def summary(self) -> Dict[str, Any]:
        """JSON-friendly digest used by the CLI and the /quality endpoint"""
        failures = [c for c in self.checks if not c.passed]
        return {
            "status": self.status.value,
            "total_checks": self.total_checks,
            "passed_checks": self.passed_checks,
            "failed_checks": self.failed_checks,
            "warning_count": self.warning_count,
            "success_rate": round(self.success_rate, 2),
            "failures": [
                {"name": c.name, "severity": c.severity.value, "message": c.message}
                for c in failures
            ],
        }


class DataValidator:
    """
    Chainable rule set for one polars DataFrame.

    Example:
        result = (
            DataValidator("fact_sales")
            .add_not_null_check("order_number")
            .add_range_check("sales_price", min_value=0)
            .validate(gold.fact_sales)
        )
    """

    def __init__(self, name: str = "dataset", strict_mode: bool = False):
        self.name = name
        # Warnings count as failures
        self.strict_mode = strict_mode
        self._checks: List[Callable[[pl.DataFrame], ValidationCheck]] = []

    def _register(
        self,
        name: str,
        columns: Sequence[str],
        severity: ValidationSeverity,
        count: Callable[[pl.DataFrame], Violations],
        describe: str,
    ) -> "DataValidator":
        def check(df: pl.DataFrame) -> ValidationCheck:
            absent = [c for c in columns if c not in df.columns]
            if absent:
                return ValidationCheck(
                    name=name,
                    passed=False,
                    severity=severity,
                    message=f"Column '{absent[0]}' not found in {self.name}",
                )

            bad, scope, details = count(df)
            return ValidationCheck(
                name=name,
                passed=bad == 0,
                severity=severity,
                message=f"{bad} of {scope} rows {describe}" if bad else "ok",
                details=details,
                failed_rows=bad,
                total_rows=scope,
            )

        self._checks.append(check)
        return self

    def add_not_null_check(
        self,
        column: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        def count(df: pl.DataFrame) -> Violations:
            nulls = df[column].null_count()
            share = nulls * 100 / df.height if df.height else 0
            return nulls, df.height, {"null_count": nulls, "null_percentage": share}

        return self._register(f"not_null_{column}", [column], severity, count, f"have no {column}")

    def add_unique_check(
        self,
        columns: List[str],
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """The combination of ``columns`` must identify each row"""
        def count(df: pl.DataFrame) -> Violations:
            duplicates = df.height - df.select(columns).unique().height
            return duplicates, df.height, {"duplicate_count": duplicates}

        label = "_".join(columns)
        return self._register(f"unique_{label}", columns, severity, count, f"repeat a {label} value")

    def add_range_check(
        self,
        column: str,
        min_value: Optional[float] = None,
        max_value: Optional[float] = None,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Values must lie in [min_value, max_value]; nulls are not checked"""
        bounds = []
        if min_value is not None:
            bounds.append(pl.col(column) < min_value)
        if max_value is not None:
            bounds.append(pl.col(column) > max_value)

        def count(df: pl.DataFrame) -> Violations:
            outside = df.filter(pl.any_horizontal(bounds)).height if bounds else 0
            return outside, df.height, {"min": min_value, "max": max_value, "out_of_range_count": outside}

        return self._register(
            f"range_{column}", [column], severity, count, f"have {column} outside [{min_value}, {max_value}]"
        )

    def add_positive_check(
        self,
        column: str,
        allow_zero: bool = True,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        return self.add_range_check(column, min_value=0 if allow_zero else 1e-9, severity=severity)

    def add_pattern_check(
        self,
        column: str,
        pattern: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Non-null string values must match the regex ``pattern``"""
        def count(df: pl.DataFrame) -> Violations:
            present = df.get_column(column).drop_nulls()
            mismatches = int((~present.str.contains(pattern)).sum())
            return mismatches, present.len(), {"pattern": pattern, "non_matching_count": mismatches}

        return self._register(f"pattern_{column}", [column], severity, count, f"have {column} not matching {pattern!r}")

    def add_enum_check(
        self,
        column: str,
        allowed_values: List[Any],
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        def count(df: pl.DataFrame) -> Violations:
            invalid = df.filter(
                pl.col(column).is_not_null() & ~pl.col(column).is_in(allowed_values)
            ).height
            return invalid, df.height, {"allowed_values": allowed_values, "invalid_count": invalid}

        return self._register(f"enum_{column}", [column], severity, count, f"have an unexpected {column}")

    def add_referential_integrity_check(
        self,
        column: str,
        reference_df: pl.DataFrame,
        reference_column: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Non-null keys in ``column`` must exist in ``reference_df[reference_column]``"""
        known = reference_df.get_column(reference_column).drop_nulls().unique().to_list()

        def count(df: pl.DataFrame) -> Violations:
            orphans = df.filter(pl.col(column).is_not_null() & ~pl.col(column).is_in(known)).height
            return orphans, df.height, {"orphan_count": orphans}

        return self._register(
            f"ref_integrity_{column}", [column], severity, count, f"reference an unknown {column}"
        )

    def add_custom_check(
        self,
        name: str,
        check_func: Callable[[pl.DataFrame], bool],
        message_on_fail: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Whole-table predicate; an exception raised by ``check_func`` counts as a failure"""
        def check(df: pl.DataFrame) -> ValidationCheck:
            try:
                passed = bool(check_func(df))
                message = "ok" if passed else message_on_fail
            except Exception as e:
                passed, message = False, f"Check raised {type(e).__name__}: {e}"
            return ValidationCheck(
                name=name,
                passed=passed,
                severity=severity,
                message=message,
                total_rows=df.height,
            )

        self._checks.append(check)
        return self

    def _status(self, errors: int, warnings: int) -> ValidationStatus:
        if errors or (warnings and self.strict_mode):
            return ValidationStatus.FAILED
        if warnings:
            return ValidationStatus.PARTIAL
        return ValidationStatus.PASSED

    def validate(self, df: pl.DataFrame) -> ValidationResult:
        """Run every registered rule against ``df``"""
        started_at = _utcnow()
        checks = [check(df) for check in self._checks]

        for failed in (c for c in checks if not c.passed):
            logger.warning(
                "Validation check failed",
                dataset=self.name,
                check=failed.name,
                severity=failed.severity.value,
                failed_rows=failed.failed_rows,
            )

        def failing(severity: ValidationSeverity) -> int:
            return sum(1 for c in checks if not c.passed and c.severity == severity)

        errors = failing(ValidationSeverity.ERROR)
        warnings = failing(ValidationSeverity.WARNING)
        status = self._status(errors, warnings)

        logger.info("Validation complete", dataset=self.name, status=status.value, rows=df.height)

        return ValidationResult(
            status=status,
            total_checks=len(checks),
            passed_checks=sum(1 for c in checks if c.passed),
            failed_checks=errors,
            warning_count=warnings,
            checks=checks,
            started_at=started_at,
            completed_at=_utcnow(),
        )


# Pre-built validators for the Gold Layer tables
def create_fact_sales_validator(customers: pl.DataFrame, products: pl.DataFrame) -> DataValidator:
    """Validator for fact_sales; dimension gaps are tolerated by every analysis"""
    warn = ValidationSeverity.WARNING
    return (
        DataValidator(name="fact_sales")
        .add_not_null_check("order_number")
        .add_not_null_check("order_date", severity=warn)
        .add_not_null_check("customer_key", severity=warn)
        .add_not_null_check("product_key", severity=warn)
        .add_positive_check("sales_price")
        .add_positive_check("sales_quantity", allow_zero=False, severity=warn)
        .add_referential_integrity_check("customer_key", customers, "customer_key", severity=warn)
        .add_referential_integrity_check("product_key", products, "product_key", severity=warn)
    )


def create_customers_validator() -> DataValidator:
    """Validator for dim_customers"""
    return (
        DataValidator(name="dim_customers")
        .add_not_null_check("customer_key")
        .add_unique_check(["customer_key"])
        .add_pattern_check("customer_number", r"^AW\d+$", severity=ValidationSeverity.INFO)
        .add_enum_check("gender", ["Male", "Female", "n/a"], severity=ValidationSeverity.INFO)
        .add_not_null_check("birthdate", severity=ValidationSeverity.INFO)
    )


def create_products_validator() -> DataValidator:
    """Validator for dim_products"""
    return (
        DataValidator(name="dim_products")
        .add_not_null_check("product_key")
        .add_unique_check(["product_key"])
        .add_positive_check("cost", severity=ValidationSeverity.WARNING)
    )


def validate_gold_layer(gold: GoldLayer) -> Dict[str, ValidationResult]:
    """Validate all three Gold Layer tables"""
    return {
        "fact_sales": create_fact_sales_validator(gold.customers, gold.products).validate(gold.fact_sales),
        "dim_customers": create_customers_validator().validate(gold.customers),
        "dim_products": create_products_validator().validate(gold.products),
    }


def overall_status(results: Dict[str, ValidationResult]) -> ValidationStatus:
    """Worst status across a set of validation results"""
    statuses = {r.status for r in results.values()}
    if ValidationStatus.FAILED in statuses:
        return ValidationStatus.FAILED
    if ValidationStatus.PARTIAL in statuses:
        return ValidationStatus.PARTIAL
    return ValidationStatus.PASSED
