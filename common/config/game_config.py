"""
Configuration settings for the Discord Memory Match Game.
"""

# --- Bot Configuration ---
COMMAND_PREFIX = '!'

# --- Game Configuration ---
EMOJI_BACK = "❓"  # The emoji shown for face-down cards

# Face identifiers in catalog order; a game uses the first N of them
FACE_CATALOG = [
    "lion", "tiger", "elephant", "giraffe", "monkey",
    "zebra", "panda", "fox", "koala", "penguin",
    "frog", "owl",
]

# How each face is drawn on a card button
FACE_EMOJIS = {
    "lion": "🦁",
    "tiger": "🐯",
    "elephant": "🐘",
    "giraffe": "🦒",
    "monkey": "🐵",
    "zebra": "🦓",
    "panda": "🐼",
    "fox": "🦊",
    "koala": "🐨",
    "penguin": "🐧",
    "frog": "🐸",
    "owl": "🦉",
}

# Number of distinct pairs in play per difficulty
DIFFICULTY_PAIRS = {
    "easy": 4,
    "medium": 7,
    "hard": 10,
}
DEFAULT_DIFFICULTY = "easy"

# Time (in seconds) both flipped cards stay visible before the pair is resolved
REVEAL_DELAY_SECONDS = 2.0

# --- Scoring ---
# One of: "decayed", "flat", "flat_penalty"
DEFAULT_SCORING_POLICY = "decayed"
MATCH_POINTS = 10
MISMATCH_PENALTY = 2

# AFK timeout (in seconds) - 5 minutes
AFK_TIMEOUT_SECONDS = 300.0

# --- Sounds ---
SOUNDS_ENABLED = True  # Overridden by the SOUNDS_ENABLED env var
SOUND_DIR = "assets/sounds"
SUCCESS_SOUND = "success.mp3"
FAILURE_SOUND = "failure.mp3"
WELCOME_SOUND = "welcome.mp3"

# --- Settings storage ---
SETTINGS_DB_FILE = "game_settings.db"
WELCOME_SOUND_FLAG = "welcome_sound_played"
