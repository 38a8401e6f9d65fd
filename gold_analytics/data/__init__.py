"""
Synthetic Data Module
"""
from .generators import GoldLayerGenerator

__all__ = ["GoldLayerGenerator"]
