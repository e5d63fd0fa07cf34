from pathlib import Path

GRID_WIDTH = 8

# Palette order doubles as the refill choice sequence.
PALETTE_COLORS = {
    'red':    (214, 58, 58),
    'orange': (232, 140, 48),
    'yellow': (236, 210, 72),
    'green':  (78, 176, 84),
    'blue':   (64, 116, 214),
    'purple': (150, 84, 196),
}
PALETTE = list(PALETTE_COLORS.keys())

# Scoring: every cleared token is worth POINTS_PER_TOKEN, and each cascade step
# adds COMBO_BONUS_POINTS for every two steps already chained in the turn.
POINTS_PER_TOKEN = 10
COMBO_BONUS_POINTS = 10

# Upper bound on matched cascade steps in one turn before the board is respawned.
MAX_CASCADE_STEPS = 256
BOARD_GENERATION_ATTEMPTS = 200

# Reporting & persistence
REPORT_HISTORY_LIMIT = 10
# High scores live under the user's home unless CRUSH_DATA_DIR points elsewhere.
DATA_DIR_ENV = "CRUSH_DATA_DIR"
DEFAULT_DATA_DIR = Path.home() / ".crush"
HIGH_SCORE_FILENAME = "high_scores.json"
DEFAULT_PLAYER_KEY = "local"

# Window & layout
WINDOW_WIDTH = 640
WINDOW_HEIGHT = 720
BOTTOM_MARGIN = 40
HUD_HEIGHT = 120

# Seconds between released cascade stages in the window (0 resolves instantly).
STAGE_DELAY = 0.2
