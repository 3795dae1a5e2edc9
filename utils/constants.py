"""Default roster names and stat field definitions."""

# Official roster installed when local storage is empty
DEFAULT_ROSTER = [
    "VEH ELIE", "COULIBALY ISMAEL", "KOFFI DANIEL", "KOUADIO STEVEN",
    "YAYA", "KOUAKOU MALLY", "KOUMAN CHRIST", "EBOH EVRAD",
    "KOUASSI MOISE", "KADIO SAMUEL", "KONAN KONAN", "ANAS",
    "SOUALIO", "AUREL", "PAUL",
]

# Counting stats recorded per match (order matters - matches the export columns)
STAT_FIELDS = ["points", "rebounds", "assists"]

# Average column for each counting stat
AVERAGE_FIELDS = {
    "points": "avg_points",
    "rebounds": "avg_rebounds",
    "assists": "avg_assists",
}

# Keys every stored match record must carry
MATCH_KEYS = ["id", "date"] + STAT_FIELDS

DATE_FORMAT = "%Y-%m-%d"
