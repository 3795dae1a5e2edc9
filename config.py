import os
from dotenv import load_dotenv

load_dotenv()

# Local storage (SQLite file standing in for the browser's localStorage)
DB_PATH = os.getenv(
    "ROSTER_DB_PATH",
    os.path.join(os.path.dirname(__file__), "db", "roster.db"),
)

# Single well-known key holding the serialized roster
STORAGE_KEY = "ibaa_espoirs_v2"

# What an empty store starts with: "defaults" (official roster) or "empty"
ROSTER_BOOTSTRAP = os.getenv("ROSTER_BOOTSTRAP", "defaults")
BOOTSTRAP_MODES = ("defaults", "empty")

# Averages are shown with one decimal
STATS_DECIMALS = 1

# Match ids: short lowercase base-36 tokens
MATCH_ID_LENGTH = 9

# Trend labels
TREND_UP = "up"
TREND_DOWN = "down"
TREND_NONE = "none"
