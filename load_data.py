# load_data.py
"""
Load the seed CSV files into the configured database.

Same procedure as POST /api/seed, for use from the command line.
"""

import sys

from app.config import load_settings
from app.db.engine import Database
from app.db.seed import SeedError, parse_seed_data, load_into_db


def main():
    settings = load_settings()
    data_dir = sys.argv[1] if len(sys.argv) > 1 else settings.seed_data_dir

    try:
        records, stats = parse_seed_data(data_dir)
    except SeedError as e:
        print(f"Seed failed: {e}")
        sys.exit(1)

    load_into_db(Database.from_settings(settings), records)

    print("Load complete.")
    print(f"Total CSV rows read:   {stats['n_rows']}")
    print(f"Customers:             {stats['n_customers']}")
    print(f"Platforms:             {stats['n_platforms']}")
    print(f"Invoices:              {stats['n_invoices']}")
    print(f"Transactions:          {stats['n_transactions']}")
    print(f"Rows with errors:      {stats['n_errors']}")


if __name__ == "__main__":
    main()
