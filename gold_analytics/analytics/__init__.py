"""
Analytics Module
"""
from .business import BusinessReporter
from .exploration import DataExplorer
from .gold_layer import GoldLayer
from .segmentation import SegmentationRules
from .trends import TrendAnalyzer

__all__ = [
    "BusinessReporter",
    "DataExplorer",
    "GoldLayer",
    "SegmentationRules",
    "TrendAnalyzer",
]
