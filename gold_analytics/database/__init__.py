"""
Database Module
"""
from .connection import init_database, close_database, get_db, get_db_dependency
from .models import Base, DimCustomer, DimProduct, FactSales
from .repository import GoldRepository

__all__ = [
    "init_database",
    "close_database",
    "get_db",
    "get_db_dependency",
    "Base",
    "DimCustomer",
    "DimProduct",
    "FactSales",
    "GoldRepository",
]
