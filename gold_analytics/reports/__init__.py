"""
Reporting Views Module
"""
from .customer_report import CUSTOMER_REPORT_COLUMNS, build_customer_report
from .exporter import ExportResult, ReportExporter
from .product_report import PRODUCT_REPORT_COLUMNS, build_product_report

__all__ = [
    "CUSTOMER_REPORT_COLUMNS",
    "PRODUCT_REPORT_COLUMNS",
    "build_customer_report",
    "build_product_report",
    "ExportResult",
    "ReportExporter",
]
