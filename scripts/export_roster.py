#!/usr/bin/env python3
"""
export_roster.py: Dump the stored roster to CSV.

One row per match (players without matches get a single row with empty stats),
so the data can leave local storage and be opened in a spreadsheet.

Usage:
  python scripts/export_roster.py data/roster.csv
"""

import sys
import os
import logging
import argparse

# Ensure project root is on path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

import pandas as pd

from config import DB_PATH
from roster.store import RosterStore
from utils.constants import STAT_FIELDS

logger = logging.getLogger("export_roster")

EXPORT_COLUMNS = ["player", "match_id", "date"] + STAT_FIELDS


def roster_to_frame(roster: dict) -> pd.DataFrame:
    """Flatten {name: [match, ...]} into one row per match, players in name order."""
    rows = []
    for name in sorted(roster):
        matches = roster[name]
        if not matches:
            rows.append({"player": name})
            continue
        for m in matches:
            rows.append({
                "player": name,
                "match_id": m["id"],
                "date": m["date"],
                **{field: m[field] for field in STAT_FIELDS},
            })
    df = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
    for field in STAT_FIELDS:
        df[field] = pd.to_numeric(df[field]).astype("Int64")
    return df


def export_roster(store: RosterStore, path: str) -> int:
    """Write the roster to `path`. Returns the number of rows written."""
    df = roster_to_frame(store.snapshot())
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    df.to_csv(path, index=False)
    logger.info(f"Exported {len(df)} rows to {path}")
    return len(df)


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    parser = argparse.ArgumentParser(description="Export the roster to CSV")
    parser.add_argument("path", help="Destination CSV file")
    parser.add_argument("--db", default=DB_PATH, help="Local storage file (default: %(default)s)")
    args = parser.parse_args()

    store = RosterStore.create(args.db)
    try:
        export_roster(store, args.path)
    finally:
        store.teardown()


if __name__ == "__main__":
    main()
