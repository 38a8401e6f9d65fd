"""
Data Quality Endpoint
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from gold_analytics.analytics.gold_layer import GoldLayer
from gold_analytics.quality.validators import overall_status, validate_gold_layer
from gold_analytics.serving.api.dependencies import get_gold_layer

router = APIRouter()


@router.get("")
async def data_quality(gold: GoldLayer = Depends(get_gold_layer)) -> Dict[str, Any]:
    """Validation summary per Gold Layer table"""
    results = validate_gold_layer(gold)
    return {
        "status": overall_status(results).value,
        "row_counts": gold.row_counts,
        "tables": {name: result.summary() for name, result in results.items()},
    }
