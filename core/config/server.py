"""Server configuration constants."""

DEFAULT_API_PORT = 8080
DEFAULT_ROSTER_SIZE = 20

# Broadcast budget warnings (milliseconds)
SERIALIZE_BUDGET_MS = 10
BROADCAST_BUDGET_MS = 100

# Seconds between tick-rate status lines
STATUS_LOG_INTERVAL_SECONDS = 10

# Seconds between background roster flushes
ROSTER_AUTOSAVE_SECONDS = 5
