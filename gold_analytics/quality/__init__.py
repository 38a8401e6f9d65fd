"""
Data Quality Module
"""
from .validators import DataValidator, ValidationResult, ValidationStatus, validate_gold_layer

__all__ = [
    "DataValidator",
    "ValidationResult",
    "ValidationStatus",
    "validate_gold_layer",
]
