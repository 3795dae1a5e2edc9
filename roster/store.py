"""Roster store: the player -> match history mapping and every mutation on it."""

import copy
import json
import logging
import random
import string

from config import DB_PATH, STORAGE_KEY, ROSTER_BOOTSTRAP, BOOTSTRAP_MODES, MATCH_ID_LENGTH
from db.schema import create_all_tables
from db.local_storage import get_item, set_item, remove_item
from roster.errors import ValidationError, DuplicateError, NotFoundError, CorruptStoreError
from utils.constants import DEFAULT_ROSTER, STAT_FIELDS, MATCH_KEYS
from utils.stats_math import parse_count_or_zero, parse_match_date

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def sort_matches(matches: list[dict]) -> list[dict]:
    """Ascending by date. sorted() is stable, so same-day matches keep their order."""
    return sorted(matches, key=lambda m: m["date"])


def serialize_roster(roster: dict) -> str:
    """Encode the roster exactly as it is stored: {name: [match, ...]}."""
    return json.dumps(roster, ensure_ascii=False)


def deserialize_roster(blob: str) -> dict:
    """
    Decode a stored roster blob.
    Raises CorruptStoreError if the blob is not JSON or does not have the
    {name: [{id, date, points, rebounds, assists}, ...]} shape.
    """
    try:
        data = json.loads(blob)
    except (TypeError, ValueError) as e:
        raise CorruptStoreError(f"Stored roster is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise CorruptStoreError(
            f"Stored roster must be an object, got {type(data).__name__}"
        )

    roster = {}
    for name, matches in data.items():
        if not name or name != name.strip():
            raise CorruptStoreError(f"Invalid player name in stored roster: {name!r}")
        if not isinstance(matches, list):
            raise CorruptStoreError(f"Match list for {name} is not a list")

        seen_ids = set()
        clean = []
        for m in matches:
            if not isinstance(m, dict) or any(k not in m for k in MATCH_KEYS):
                raise CorruptStoreError(f"Malformed match record for {name}: {m!r}")
            if not isinstance(m["id"], str) or m["id"] in seen_ids:
                raise CorruptStoreError(f"Bad or duplicate match id for {name}: {m['id']!r}")
            seen_ids.add(m["id"])
            try:
                match_date = parse_match_date(m["date"])
            except ValueError as e:
                raise CorruptStoreError(f"Bad match date for {name}: {m['date']!r}") from e
            record = {"id": m["id"], "date": match_date}
            for field in STAT_FIELDS:
                value = m[field]
                if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                    raise CorruptStoreError(f"Bad {field} value for {name}: {value!r}")
                record[field] = value
            clean.append(record)

        roster[name] = sort_matches(clean)
    return roster


class RosterStore:
    """
    Authoritative roster for one session.

    Lifecycle: create() -> load() -> mutations (each one persisted) -> teardown().
    Every mutation works on a copy, writes the full snapshot to local storage,
    and only then replaces the in-memory roster, so a failed write changes nothing.
    """

    def __init__(self, db_path: str = DB_PATH, storage_key: str = STORAGE_KEY,
                 bootstrap: str = ROSTER_BOOTSTRAP):
        if bootstrap not in BOOTSTRAP_MODES:
            raise ValueError(
                f"Unknown bootstrap mode {bootstrap!r}, expected one of {BOOTSTRAP_MODES}"
            )
        self.db_path = db_path
        self.storage_key = storage_key
        self.bootstrap = bootstrap
        self._roster = None

    @classmethod
    def create(cls, db_path: str = DB_PATH, storage_key: str = STORAGE_KEY,
               bootstrap: str = ROSTER_BOOTSTRAP) -> "RosterStore":
        """Build a store, make sure local storage exists, and load the roster."""
        store = cls(db_path, storage_key, bootstrap)
        create_all_tables(db_path)
        store.load()
        return store

    # ── Lifecycle ────────────────────────────────────────────────────

    def load(self):
        """Rehydrate from local storage, or bootstrap when nothing is stored."""
        blob = get_item(self.storage_key, self.db_path)
        if blob is None:
            roster = self._bootstrap_roster()
            logger.info(
                f"No stored roster under '{self.storage_key}', "
                f"starting with {len(roster)} players ({self.bootstrap})"
            )
            self._write(roster)
        else:
            roster = deserialize_roster(blob)
            logger.info(f"Loaded roster: {len(roster)} players")
        self._roster = roster

    def save(self):
        """Overwrite the stored snapshot with the current roster."""
        self._write(self._require_loaded())

    def teardown(self):
        """Drop the in-memory roster. The stored copy is left as is."""
        self._roster = None

    def _bootstrap_roster(self) -> dict:
        if self.bootstrap == "defaults":
            return {name: [] for name in DEFAULT_ROSTER}
        return {}

    def _write(self, roster: dict):
        set_item(self.storage_key, serialize_roster(roster), self.db_path)

    def _require_loaded(self) -> dict:
        if self._roster is None:
            raise RuntimeError("Roster store is not loaded")
        return self._roster

    def _commit(self, roster: dict):
        self._write(roster)
        self._roster = roster

    # ── Read views ───────────────────────────────────────────────────

    def __contains__(self, name) -> bool:
        return name in self._require_loaded()

    def __len__(self) -> int:
        return len(self._require_loaded())

    def player_names(self) -> list[str]:
        """All player names, sorted."""
        return sorted(self._require_loaded())

    def snapshot(self) -> dict:
        """Deep copy of the roster mapping."""
        return copy.deepcopy(self._require_loaded())

    def get_matches(self, name: str) -> list[dict]:
        """Copy of a player's match list, oldest first."""
        roster = self._require_loaded()
        if name not in roster:
            raise NotFoundError(f"Unknown player: {name}")
        return copy.deepcopy(roster[name])

    def get_match(self, name: str, match_id: str) -> dict:
        for m in self.get_matches(name):
            if m["id"] == match_id:
                return m
        raise NotFoundError(f"No match {match_id} for {name}")

    # ── Players ──────────────────────────────────────────────────────

    def add_player(self, name: str) -> str:
        """Create an empty profile. Returns the stored (trimmed) name."""
        name = (name or "").strip()
        if not name:
            raise ValidationError("Player name is required")
        try:
            name.encode("utf-8")
        except UnicodeEncodeError as e:
            raise ValidationError(f"Player name is not valid text: {name!r}") from e
        roster = self.snapshot()
        if name in roster:
            raise DuplicateError(f"Player already exists: {name}")

        roster[name] = []
        self._commit(roster)
        logger.info(f"Created profile for {name}")
        return name

    def delete_player(self, name: str):
        """Remove a player and all of their matches. Caller has already confirmed."""
        roster = self.snapshot()
        if name not in roster:
            raise NotFoundError(f"Unknown player: {name}")

        removed = roster.pop(name)
        self._commit(roster)
        logger.info(f"Deleted {name} ({len(removed)} matches)")

    # ── Matches ──────────────────────────────────────────────────────

    def add_match(self, name: str, date, points=None, rebounds=None, assists=None) -> dict:
        """Record a match for `name`. Counts that don't parse are stored as 0."""
        if not name:
            raise ValidationError("Select a player and a date")
        roster = self.snapshot()
        if name not in roster:
            raise ValidationError(f"Unknown player: {name}")
        match_date = self._validate_date(date)

        matches = roster[name]
        match = {
            "id": self._new_match_id(matches),
            "date": match_date,
            "points": parse_count_or_zero(points),
            "rebounds": parse_count_or_zero(rebounds),
            "assists": parse_count_or_zero(assists),
        }
        roster[name] = sort_matches(matches + [match])
        self._commit(roster)
        logger.info(
            f"Recorded match for {name} on {match_date}: "
            f"{match['points']} pts / {match['rebounds']} reb / {match['assists']} ast"
        )
        return copy.deepcopy(match)

    def update_match(self, name: str, match_id: str, date,
                     points=None, rebounds=None, assists=None) -> dict:
        """Replace date and counts of an existing match. The id is kept."""
        roster = self.snapshot()
        if name not in roster:
            raise NotFoundError(f"Unknown player: {name}")
        matches = roster[name]
        target = next((m for m in matches if m["id"] == match_id), None)
        if target is None:
            raise NotFoundError(f"No match {match_id} for {name}")

        target["date"] = self._validate_date(date)
        target["points"] = parse_count_or_zero(points)
        target["rebounds"] = parse_count_or_zero(rebounds)
        target["assists"] = parse_count_or_zero(assists)
        roster[name] = sort_matches(matches)
        self._commit(roster)
        logger.info(f"Updated match {match_id} for {name}")
        return copy.deepcopy(target)

    def delete_match(self, name: str, match_id: str) -> bool:
        """Remove one match. Returns False (and changes nothing) if the id is absent."""
        roster = self.snapshot()
        if name not in roster:
            raise NotFoundError(f"Unknown player: {name}")

        remaining = [m for m in roster[name] if m["id"] != match_id]
        if len(remaining) == len(roster[name]):
            logger.debug(f"Match {match_id} not found for {name}, nothing to delete")
            return False
        roster[name] = remaining
        self._commit(roster)
        logger.info(f"Deleted match {match_id} for {name}")
        return True

    # ── Resets & defaults ────────────────────────────────────────────

    def reset_player_stats(self, name: str):
        """Clear a player's match history; the profile stays."""
        roster = self.snapshot()
        if name not in roster:
            raise NotFoundError(f"Unknown player: {name}")

        roster[name] = []
        self._commit(roster)
        logger.info(f"Reset stats for {name}")

    def reset_all(self):
        """Empty the roster and purge the stored copy."""
        remove_item(self.storage_key, self.db_path)
        # Store the empty roster so the next load does not bootstrap again
        self._commit({})
        logger.warning("Roster reset: all players and matches removed")

    def load_default_roster(self):
        """Replace the whole roster with the default names, no matches."""
        roster = {name: [] for name in DEFAULT_ROSTER}
        self._commit(roster)
        logger.info(f"Loaded default roster ({len(roster)} players, previous data discarded)")

    def merge_default_roster(self) -> list[str]:
        """Add the default names that are missing. Existing histories are untouched."""
        roster = self.snapshot()
        added = [name for name in DEFAULT_ROSTER if name not in roster]
        for name in added:
            roster[name] = []
        if added:
            self._commit(roster)
        logger.info(f"Merged default roster: {len(added)} players added")
        return added

    # ── Helpers ──────────────────────────────────────────────────────

    @staticmethod
    def _validate_date(value) -> str:
        try:
            return parse_match_date(value)
        except ValueError as e:
            raise ValidationError(f"Invalid match date {value!r}: expected YYYY-MM-DD") from e

    @staticmethod
    def _new_match_id(matches: list[dict]) -> str:
        taken = {m["id"] for m in matches}
        while True:
            match_id = "".join(random.choices(_ID_ALPHABET, k=MATCH_ID_LENGTH))
            if match_id not in taken:
                return match_id
