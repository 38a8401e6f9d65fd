"""
Synthetic Gold Layer Generator

Generates a realistic star schema for demos and local development:
- Customers with demographics across a handful of countries
- Products in a category / subcategory hierarchy with unit costs
- Sales lines spread over several years, including a share of
  undated lines and lines pointing at unknown customers
"""

import random
from datetime import date, timedelta
from typing import List, Optional, Tuple

import numpy as np
import polars as pl
from faker import Faker

from gold_analytics.analytics.gold_layer import (
    CUSTOMERS_SCHEMA,
    FACT_SALES_SCHEMA,
    PRODUCTS_SCHEMA,
    GoldLayer,
)

# =============================================================================
# CONFIGURATION
# =============================================================================

CATEGORIES: List[Tuple[str, List[str], Tuple[float, float]]] = [
    ("Bikes", ["Road Bikes", "Mountain Bikes", "Touring Bikes"], (300.0, 2200.0)),
    ("Components", ["Frames", "Wheels", "Handlebars", "Brakes"], (20.0, 800.0)),
    ("Clothing", ["Jerseys", "Shorts", "Gloves", "Caps"], (3.0, 60.0)),
    ("Accessories", ["Helmets", "Bottles and Cages", "Tires and Tubes", "Locks"], (1.0, 40.0)),
]

COUNTRIES = ["United States", "Australia", "United Kingdom", "Germany", "France", "Canada"]
GENDERS = ["Male", "Female", None]


class GoldLayerGenerator:
    """
    Generate a seeded, reproducible Gold Layer.

    Example:
        gold = GoldLayerGenerator(seed=42).generate(customers=500, products=80, orders=5000)
    """

    def __init__(
        self,
        seed: int = 42,
        start_date: date = date(2010, 12, 29),
        end_date: date = date(2014, 1, 28),
        undated_share: float = 0.01,
        orphan_share: float = 0.005,
    ):
        self.seed = seed
        self.start_date = start_date
        self.end_date = end_date
        self.undated_share = undated_share
        self.orphan_share = orphan_share

        self.fake = Faker()
        self.fake.seed_instance(seed)
        self.rng = np.random.default_rng(seed)
        self.random = random.Random(seed)

    def generate_customers(self, n: int = 1000) -> pl.DataFrame:
        """Generate n customers keyed 1..n"""
        customers = []
        for key in range(1, n + 1):
            birthdate: Optional[date] = self.fake.date_of_birth(minimum_age=16, maximum_age=90)
            if self.random.random() < 0.01:
                birthdate = None

            customers.append({
                "customer_key": key,
                "customer_number": f"AW{11000 + key:08d}",
                "first_name": self.fake.first_name(),
                "last_name": self.fake.last_name(),
                "birthdate": birthdate,
                "gender": self.random.choice(GENDERS),
                "country": self.random.choice(COUNTRIES),
            })

        return pl.DataFrame(customers, schema=CUSTOMERS_SCHEMA)

    def generate_products(self, n: int = 100) -> pl.DataFrame:
        """Generate n products keyed 1..n"""
        products = []
        for key in range(1, n + 1):
            category, subcategories, (low, high) = self.random.choice(CATEGORIES)
            subcategory = self.random.choice(subcategories)
            products.append({
                "product_key": key,
                "product_id": 200 + key,
                "product_name": f"{subcategory.split()[0]} {self.fake.word().title()}-{key}",
                "category": category,
                "subcategory": subcategory,
                "cost": round(float(self.rng.uniform(low, high)), 2),
            })

        return pl.DataFrame(products, schema=PRODUCTS_SCHEMA)

    def generate_sales(
        self,
        n_orders: int,
        customers: pl.DataFrame,
        products: pl.DataFrame,
    ) -> pl.DataFrame:
        """Generate sales lines for n_orders orders of 1-3 distinct products"""
        customer_keys = customers["customer_key"].to_list()
        product_keys = products["product_key"].to_list()
        costs = dict(zip(product_keys, products["cost"].to_list()))
        unknown_customer = max(customer_keys, default=0) + 1

        span_days = (self.end_date - self.start_date).days
        lines = []

        for i in range(n_orders):
            order_number = f"SO{43697 + i}"
            order_date: Optional[date] = self.start_date + timedelta(days=int(self.rng.integers(0, span_days + 1)))
            if self.random.random() < self.undated_share:
                order_date = None

            customer_key = self.random.choice(customer_keys)
            if self.random.random() < self.orphan_share:
                customer_key = unknown_customer

            line_count = min(len(product_keys), int(self.rng.integers(1, 4)))
            for product_key in self.random.sample(product_keys, line_count):
                quantity = int(self.rng.integers(1, 4))
                markup = float(self.rng.uniform(1.1, 1.8))
                lines.append({
                    "order_number": order_number,
                    "order_date": order_date,
                    "customer_key": customer_key,
                    "product_key": product_key,
                    "sales_price": round(costs[product_key] * markup * quantity, 2),
                    "sales_quantity": quantity,
                })

        return pl.DataFrame(lines, schema=FACT_SALES_SCHEMA)

    def generate(self, customers: int = 1000, products: int = 100, orders: int = 10000) -> GoldLayer:
        customers_df = self.generate_customers(customers)
        products_df = self.generate_products(products)
        sales_df = self.generate_sales(orders, customers_df, products_df)
        return GoldLayer(fact_sales=sales_df, customers=customers_df, products=products_df)
