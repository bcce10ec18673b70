# parse_data.py
"""
Parse the seed CSV files and print basic stats without touching the database.
"""

import sys

from app.config import load_settings
from app.db.seed import parse_seed_data


def main():
    data_dir = sys.argv[1] if len(sys.argv) > 1 else load_settings().seed_data_dir
    records, stats = parse_seed_data(data_dir)

    print(f"Total CSV rows read:   {stats['n_rows']}")
    for table_name, rows in records.items():
        print(f"{table_name + ':':<22} {len(rows)}")
    print(f"Rows with errors:      {stats['n_errors']}")

    if stats["error_examples"]:
        print("\nExample errors:")
        for ex in stats["error_examples"]:
            print(f"- {ex['file']} line {ex['line']}: {ex['error']}")


if __name__ == "__main__":
    main()
