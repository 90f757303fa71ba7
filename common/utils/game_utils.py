"""
Utility functions shared by the game modules.
"""
import logging
import time

logger = logging.getLogger("discord_bot")

# Active games tracking - dictionary of dictionaries: {game_id: {channel_id: game_view}}
active_games = {}

def get_active_game(game_id, channel_id):
    """Return the running game view for a channel, or None."""
    return active_games.get(game_id, {}).get(channel_id)

def register_game(game_id, channel_id, game_view):
    if game_id not in active_games:
        active_games[game_id] = {}
    active_games[game_id][channel_id] = game_view

def remove_game(game_id, channel_id):
    """Forget a game. Returns the removed view, or None."""
    return active_games.get(game_id, {}).pop(channel_id, None)

async def end_inactive_games(game_id, afk_timeout, end_game_func, now=None):
    """
    End every game of one type that has been idle for too long.

    Args:
        game_id: The game identifier
        afk_timeout: Timeout in seconds
        end_game_func: Coroutine function called as end_game_func(channel_id, game_view, reason)
        now: Current time, defaults to time.time()

    Returns:
        list: Channel IDs whose games were ended
    """
    current_time = now if now is not None else time.time()
    ended = []

    for channel_id, game_view in list(active_games.get(game_id, {}).items()):
        try:
            if current_time - game_view.last_activity_time > afk_timeout:
                await end_game_func(
                    channel_id,
                    game_view,
                    f"Game ended due to inactivity (no moves for {int(afk_timeout/60)} minutes)."
                )
                ended.append(channel_id)
        except Exception as e:
            logger.error(f"Error in AFK check for channel {channel_id}: {e}")

    return ended
