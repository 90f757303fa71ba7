"""
Database module for the Memory Match bot.
Keeps small key-value settings in SQLite.
"""
import sqlite3
import os
import logging

from common.config import SETTINGS_DB_FILE

logger = logging.getLogger("discord_bot")

# Database file
DB_FILE = SETTINGS_DB_FILE

# Ensure the database exists and has the necessary tables
def init_db(db_file=None):
    """Initialize the database and create tables if they don't exist."""
    db_file = db_file or DB_FILE
    try:
        db_exists = os.path.exists(db_file)

        conn = sqlite3.connect(db_file)
        cursor = conn.cursor()

        cursor.execute('''
        CREATE TABLE IF NOT EXISTS settings (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        )
        ''')

        conn.commit()

        if db_exists:
            logger.info(f"Connected to existing settings database {db_file}")
        else:
            logger.info(f"Created new settings database {db_file}")

        conn.close()

    except Exception as e:
        logger.error(f"Error initializing database: {e}")
        raise

def get_setting(key, default=None, db_file=None):
    """
    Read a raw setting value.

    Args:
        key: Setting name
        default: Value returned when the key is missing or the read fails
        db_file: Optional database path (defaults to DB_FILE)

    Returns:
        The stored string, or default
    """
    try:
        conn = sqlite3.connect(db_file or DB_FILE)
        cursor = conn.cursor()
        cursor.execute("SELECT value FROM settings WHERE key = ?", (key,))
        result = cursor.fetchone()
        conn.close()

        if result is None:
            return default
        return result[0]

    except Exception as e:
        logger.error(f"Error reading setting '{key}': {e}")
        return default

def set_setting(key, value, db_file=None):
    """Write a raw setting value, replacing any previous one."""
    try:
        conn = sqlite3.connect(db_file or DB_FILE)
        cursor = conn.cursor()
        cursor.execute(
            "INSERT INTO settings (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
            (key, str(value))
        )
        conn.commit()
        conn.close()

        logger.info(f"Setting '{key}' updated")

    except Exception as e:
        logger.error(f"Error writing setting '{key}': {e}")

def get_flag(key, default=False, db_file=None):
    """Read a boolean setting."""
    value = get_setting(key, None, db_file)
    if value is None:
        return default
    return value == "1"

def set_flag(key, value, db_file=None):
    """Store a boolean setting."""
    set_setting(key, "1" if value else "0", db_file)
