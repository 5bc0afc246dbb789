# migrate.py
import argparse

import config
from catalog import LATEST_VERSION, apply_migrations


def main(argv=None):
    parser = argparse.ArgumentParser(description="Apply catalog schema migrations.")
    parser.add_argument("--db", default=config.DB_PATH, help="SQLite catalog path")
    parser.add_argument("--target", type=int, default=LATEST_VERSION, help="schema version to migrate to")
    args = parser.parse_args(argv)

    version = apply_migrations(args.db, target=args.target)
    print(f"Catalog {args.db} is at schema version {version}")
    return version


if __name__ == "__main__":
    main()
