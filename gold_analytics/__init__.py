"""
Gold Layer Analytics

Descriptive statistics, trends, segmentation and reporting views over a
star-schema data warehouse.
"""

__version__ = "1.0.0"
