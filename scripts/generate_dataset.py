"""
Gold Layer Dataset Generator

Writes a synthetic star schema as CSV files that
``python -m gold_analytics.database.seed`` loads into a scratch warehouse.

Usage:
    python scripts/generate_dataset.py --customers 2000 --orders 20000
"""

import argparse
from pathlib import Path

from gold_analytics.data.generators import GoldLayerGenerator

OUTPUT_DIR = Path(__file__).parent.parent / "data" / "generated"


def main():
    parser = argparse.ArgumentParser(description="Generate a synthetic Gold Layer")
    parser.add_argument("--customers", type=int, default=1000)
    parser.add_argument("--products", type=int, default=100)
    parser.add_argument("--orders", type=int, default=10000)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--output", type=Path, default=OUTPUT_DIR)
    args = parser.parse_args()

    args.output.mkdir(parents=True, exist_ok=True)

    print(f"Generating {args.customers:,} customers, {args.products:,} products, {args.orders:,} orders...")
    gold = GoldLayerGenerator(seed=args.seed).generate(
        customers=args.customers,
        products=args.products,
        orders=args.orders,
    )

    gold.fact_sales.write_csv(args.output / "fact_sales.csv")
    gold.customers.write_csv(args.output / "dim_customers.csv")
    gold.products.write_csv(args.output / "dim_products.csv")

    for table, rows in gold.row_counts.items():
        print(f"   {table}.csv: {rows:,} rows")
    print(f"Output: {args.output}")


if __name__ == "__main__":
    main()
