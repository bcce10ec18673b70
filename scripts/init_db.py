"""
Create the tables on the configured database (local development only).

Production databases are provisioned outside this service.
"""

import argparse

from app.config import load_settings
from app.db.engine import build_engine
from app.db.schema import metadata


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--drop", action="store_true", help="drop existing tables first")
    args = parser.parse_args()

    engine = build_engine(load_settings())
    if args.drop:
        metadata.drop_all(engine)
    metadata.create_all(engine)
    print("DB schema created.")

if __name__ == "__main__":
    main()
