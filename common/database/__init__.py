"""
Settings storage for the Memory Match bot.
"""
from common.database.database import (
    init_db, get_setting, set_setting, get_flag, set_flag
)

# Function table used by the rest of the bot
database = {
    "init_db": init_db,
    "get_setting": get_setting,
    "set_setting": set_setting,
    "get_flag": get_flag,
    "set_flag": set_flag,
}
