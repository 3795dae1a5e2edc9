"""CLI entry point for the roster stats tracker."""

import sys
import os
import logging
import argparse

# Ensure project root is on path
sys.path.insert(0, os.path.dirname(__file__))

from config import DB_PATH, ROSTER_BOOTSTRAP, BOOTSTRAP_MODES, TREND_UP, TREND_DOWN
from roster.store import RosterStore
from roster.errors import RosterError, CorruptStoreError
from analysis.player_stats import compute_stats, roster_summary, recent_matches
from db.connection import table_row_count

logger = logging.getLogger(__name__)

TREND_MARKERS = {TREND_UP: "↑", TREND_DOWN: "↓"}


def confirm(prompt: str, assume_yes: bool = False) -> bool:
    """Ask before a destructive operation. --yes skips the question."""
    if assume_yes:
        return True
    answer = input(f"{prompt} [y/N] ").strip().lower()
    return answer in ("y", "yes")


def show_players(store: RosterStore):
    """Roster table: one line per player with averages and trend."""
    summary = roster_summary(store.snapshot())
    if summary.empty:
        print("\nNo players registered.\n")
        return
    print(f"\n=== Roster ({len(summary)} players) ===")
    for _, row in summary.iterrows():
        marker = TREND_MARKERS.get(row["trend"], "-")
        print(
            f"  {row['name']:.<30} {row['matches']:>3} matches  "
            f"PTS {row['avg_points']:>5.1f}  REB {row['avg_rebounds']:>5.1f}  "
            f"AST {row['avg_assists']:>5.1f}  {marker}"
        )
    print()


def show_stats(store: RosterStore, name: str):
    """Averages, trend and match history (newest first) for one player."""
    matches = store.get_matches(name)
    stats = compute_stats(matches)
    print(f"\n=== {name} ===")
    print(
        f"  PTS {stats['avg_points']:.1f}  REB {stats['avg_rebounds']:.1f}  "
        f"AST {stats['avg_assists']:.1f}  trend: {stats['trend']}"
    )
    if not matches:
        print("  No matches recorded.")
    for m in recent_matches(matches):
        print(
            f"  {m['date']}  [{m['id']}]  "
            f"{m['points']:>3} pts {m['rebounds']:>3} reb {m['assists']:>3} ast"
        )
    print()


def show_status(store: RosterStore):
    """Show local storage status."""
    total_matches = sum(len(m) for m in store.snapshot().values())
    print("\n=== Storage Status ===")
    print(f"  {'file':.<20} {store.db_path}")
    print(f"  {'key':.<20} {store.storage_key}")
    print(f"  {'stored keys':.<20} {table_row_count('local_storage', store.db_path):>8}")
    print(f"  {'players':.<20} {len(store):>8}")
    print(f"  {'matches':.<20} {total_matches:>8}")
    print()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Basketball roster stats tracker")
    parser.add_argument("--db", default=DB_PATH, help="Local storage file (default: %(default)s)")
    parser.add_argument(
        "--bootstrap",
        choices=BOOTSTRAP_MODES,
        default=ROSTER_BOOTSTRAP,
        help="Roster to start from when storage is empty (default: %(default)s)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("players", help="List the roster with averages")
    sub.add_parser("status", help="Show storage status")

    p = sub.add_parser("add-player", help="Create a player profile")
    p.add_argument("name")

    p = sub.add_parser("delete-player", help="Delete a player and all their matches")
    p.add_argument("name")
    p.add_argument("--yes", action="store_true", help="Skip confirmation")

    for cmd, help_text in (("add-match", "Record a match"), ("edit-match", "Edit a recorded match")):
        p = sub.add_parser(cmd, help=help_text)
        p.add_argument("name")
        if cmd == "edit-match":
            p.add_argument("match_id")
        p.add_argument("--date", required=cmd == "add-match", help="YYYY-MM-DD")
        p.add_argument("--points", default=None)
        p.add_argument("--rebounds", default=None)
        p.add_argument("--assists", default=None)

    p = sub.add_parser("delete-match", help="Delete one match")
    p.add_argument("name")
    p.add_argument("match_id")
    p.add_argument("--yes", action="store_true", help="Skip confirmation")

    p = sub.add_parser("reset-player", help="Clear a player's match history")
    p.add_argument("name")
    p.add_argument("--yes", action="store_true", help="Skip confirmation")

    p = sub.add_parser("reset-all", help="Delete every player and match")
    p.add_argument("--yes", action="store_true", help="Skip confirmation")

    p = sub.add_parser("load-defaults", help="Install the official roster")
    p.add_argument("--merge", action="store_true",
                   help="Only add missing names, keep existing histories")
    p.add_argument("--yes", action="store_true", help="Skip confirmation")

    p = sub.add_parser("stats", help="Show one player's averages and history")
    p.add_argument("name")

    p = sub.add_parser("export-csv", help="Export the roster to CSV")
    p.add_argument("path")

    return parser


def run_command(store: RosterStore, args):
    """Dispatch one sub-command against an open store."""
    if args.command == "players":
        show_players(store)
    elif args.command == "status":
        show_status(store)
    elif args.command == "stats":
        show_stats(store, args.name)
    elif args.command == "add-player":
        store.add_player(args.name)
    elif args.command == "delete-player":
        if confirm(f"Permanently delete {args.name} and all of their stats?", args.yes):
            store.delete_player(args.name)
    elif args.command == "add-match":
        match = store.add_match(args.name, args.date, args.points, args.rebounds, args.assists)
        print(match["id"])
    elif args.command == "edit-match":
        current = store.get_match(args.name, args.match_id)
        store.update_match(
            args.name, args.match_id,
            args.date if args.date is not None else current["date"],
            args.points if args.points is not None else current["points"],
            args.rebounds if args.rebounds is not None else current["rebounds"],
            args.assists if args.assists is not None else current["assists"],
        )
    elif args.command == "delete-match":
        if confirm("Delete this match from the history?", args.yes):
            store.delete_match(args.name, args.match_id)
    elif args.command == "reset-player":
        if confirm(f"Reset all stats for {args.name}? Every match will be deleted.", args.yes):
            store.reset_player_stats(args.name)
    elif args.command == "reset-all":
        if confirm("Reset the WHOLE system? All data will be lost.", args.yes):
            store.reset_all()
    elif args.command == "load-defaults":
        if args.merge:
            store.merge_default_roster()
        elif confirm("Replace the current roster with the official one?", args.yes):
            store.load_default_roster()
    elif args.command == "export-csv":
        from scripts.export_roster import export_roster
        export_roster(store, args.path)


def main(argv=None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    args = build_parser().parse_args(argv)

    # A corrupt store can still be wiped; anything else needs a loaded roster
    try:
        store = RosterStore.create(args.db, bootstrap=args.bootstrap)
    except CorruptStoreError as e:
        if args.command == "reset-all" and confirm("Stored roster is unreadable. Reset it?", args.yes):
            store = RosterStore(args.db, bootstrap=args.bootstrap)
            store.reset_all()
            return 0
        logger.error(f"{e}. Run 'reset-all' to start over.")
        return 1

    try:
        run_command(store, args)
    except RosterError as e:
        logger.error(str(e))
        return 1
    finally:
        store.teardown()
    return 0


if __name__ == "__main__":
    sys.exit(main())
