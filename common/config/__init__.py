"""
Configuration package for the Memory Match bot.
"""
from common.config.game_config import *  # noqa: F401,F403
