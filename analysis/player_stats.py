"""Per-player averages and trend, plus the roster table and chart series built on them."""

import logging

import pandas as pd

from config import STATS_DECIMALS, TREND_UP, TREND_DOWN, TREND_NONE
from utils.constants import STAT_FIELDS, AVERAGE_FIELDS
from utils.stats_math import rounded_mean

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = ["name", "matches"] + list(AVERAGE_FIELDS.values()) + ["trend"]


def compute_trend(matches: list[dict]) -> str:
    """
    Compare the last two matches (list is date-sorted).
    A tie counts as "up".
    """
    if len(matches) < 2:
        return TREND_NONE
    last, previous = matches[-1], matches[-2]
    return TREND_UP if last["points"] >= previous["points"] else TREND_DOWN


def compute_stats(matches: list[dict]) -> dict:
    """
    Averages over the full history, rounded to one decimal, and the trend.
    An empty history gives 0.0 averages and trend "none".
    """
    stats = {
        AVERAGE_FIELDS[field]: rounded_mean([m[field] for m in matches], STATS_DECIMALS)
        for field in STAT_FIELDS
    }
    stats["trend"] = compute_trend(matches)
    return stats


def roster_summary(roster: dict) -> pd.DataFrame:
    """One row per player (name order) with match count, averages and trend."""
    rows = []
    for name in sorted(roster):
        matches = roster[name]
        rows.append({"name": name, "matches": len(matches), **compute_stats(matches)})
    logger.debug(f"Built summary for {len(rows)} players")
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def match_series(matches: list[dict]) -> pd.DataFrame:
    """Date-indexed points/rebounds/assists, oldest first. Feeds the chart."""
    if not matches:
        return pd.DataFrame(
            columns=STAT_FIELDS, index=pd.DatetimeIndex([], name="date")
        ).astype(int)
    df = pd.DataFrame(matches)
    df["date"] = pd.to_datetime(df["date"], format="%Y-%m-%d")
    return df.set_index("date")[STAT_FIELDS].astype(int)


def recent_matches(matches: list[dict]) -> list[dict]:
    """Match history newest first, as shown under the chart."""
    return list(reversed(matches))
