"""
Tests for the active game registry and inactivity cleanup.
"""
import pytest
from unittest.mock import AsyncMock, MagicMock

from common.utils.game_utils import (
    active_games, get_active_game, register_game, remove_game, end_inactive_games
)
from games.game_1001_matching.game_1001 import GAME_ID
from games.game_1001_matching.commands_1001 import create_game_view, end_game_internal


pytestmark = pytest.mark.asyncio


@pytest.fixture(autouse=True)
def clean_registry():
    active_games.clear()
    yield
    active_games.clear()


async def test_register_and_remove():
    game_view = MagicMock()
    register_game(GAME_ID, 1, game_view)

    assert get_active_game(GAME_ID, 1) is game_view
    assert remove_game(GAME_ID, 1) is game_view
    assert get_active_game(GAME_ID, 1) is None
    assert remove_game(GAME_ID, 1) is None


async def test_only_idle_games_are_ended():
    idle, busy = MagicMock(last_activity_time=0), MagicMock(last_activity_time=950)
    register_game(GAME_ID, 1, idle)
    register_game(GAME_ID, 2, busy)
    end_game = AsyncMock()

    ended = await end_inactive_games(GAME_ID, 300, end_game, now=1000)

    assert ended == [1]
    end_game.assert_awaited_once()
    channel_id, game_view, reason = end_game.call_args.args
    assert (channel_id, game_view) == (1, idle)
    assert "inactivity" in reason


async def test_end_errors_do_not_stop_the_sweep():
    register_game(GAME_ID, 1, MagicMock(last_activity_time=0))
    register_game(GAME_ID, 2, MagicMock(last_activity_time=0))
    end_game = AsyncMock(side_effect=[RuntimeError("gone"), None])

    ended = await end_inactive_games(GAME_ID, 300, end_game, now=1000)

    assert ended == [2]


async def test_end_game_internal_posts_final_score(owner, channel):
    game_view = create_game_view(owner, channel, "medium", "flat", reveal_delay=0.01)
    register_game(GAME_ID, channel.id, game_view)

    await end_game_internal(channel.id, game_view, "Ended by Player.")

    assert get_active_game(GAME_ID, channel.id) is None
    assert game_view.is_finished()
    embed = channel.send.call_args.kwargs["embed"]
    assert embed.title == "Memory Match Game Ended"
    assert [field.value for field in embed.fields][1:] == ["0", "0/7", "Medium"]


async def test_end_game_internal_ignores_unknown_game(owner, channel):
    game_view = create_game_view(owner, channel)

    await end_game_internal(channel.id, game_view, "late")

    channel.send.assert_not_called()
