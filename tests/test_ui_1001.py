"""
Tests for the Memory Match Discord view (games/game_1001_matching/ui_1001.py).
"""
import asyncio

import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, MagicMock

from common.config import EMOJI_BACK
from games.game_1001_matching.game_1001 import MemoryGame, Difficulty
from games.game_1001_matching.ui_1001 import (
    GameView, CardButton, RestartButton, DifficultyButton, CONTROL_ROW
)
from conftest import UnshuffledRandom


pytestmark = pytest.mark.asyncio


def make_interaction(user_id):
    interaction = MagicMock()
    interaction.user.id = user_id
    interaction.response.edit_message = AsyncMock()
    interaction.response.defer = AsyncMock()
    interaction.response.send_message = AsyncMock()
    interaction.response.is_done = MagicMock(return_value=False)
    return interaction


@pytest_asyncio.fixture
async def view(scheduler, owner, channel):
    game = MemoryGame("easy", scheduler=scheduler, rng=UnshuffledRandom())
    return GameView(game, owner, channel)


def card_buttons(view):
    return [item for item in view.children if isinstance(item, CardButton)]


async def test_one_button_per_card_plus_controls(view):
    cards = card_buttons(view)

    assert len(cards) == 8
    assert all(str(button.emoji) == EMOJI_BACK for button in cards)
    assert sum(isinstance(item, RestartButton) for item in view.children) == 1
    assert sum(isinstance(item, DifficultyButton) for item in view.children) == len(Difficulty)
    assert all(item.row == CONTROL_ROW for item in view.children if not isinstance(item, CardButton))


async def test_hard_deck_fits_in_four_rows(scheduler, owner, channel):
    game = MemoryGame("hard", scheduler=scheduler)
    view = GameView(game, owner, channel)

    rows = {button.row for button in card_buttons(view)}
    assert len(card_buttons(view)) == 20
    assert rows == {0, 1, 2, 3}


async def test_card_button_flips_and_redraws(view, owner):
    interaction = make_interaction(owner.id)
    button = card_buttons(view)[0]

    await button.callback(interaction)

    assert view.game.cards[0].is_face_up
    interaction.response.edit_message.assert_awaited_once()
    assert str(card_buttons(view)[0].emoji) == "🦁"


async def test_ignored_flip_is_silent(view, owner):
    await card_buttons(view)[0].callback(make_interaction(owner.id))

    interaction = make_interaction(owner.id)
    await card_buttons(view)[0].callback(interaction)

    interaction.response.defer.assert_awaited_once()
    interaction.response.send_message.assert_not_called()


async def test_cards_disabled_while_locked(view, owner):
    await card_buttons(view)[0].callback(make_interaction(owner.id))
    await card_buttons(view)[1].callback(make_interaction(owner.id))

    assert view.game.is_locked
    assert all(button.disabled for button in card_buttons(view))


async def test_other_users_are_turned_away(view):
    interaction = make_interaction(user_id=42)

    assert await view.interaction_check(interaction) is False
    interaction.response.send_message.assert_awaited_once()
    assert interaction.response.send_message.call_args.kwargs["ephemeral"] is True


async def test_owner_passes_check(view, owner):
    assert await view.interaction_check(make_interaction(owner.id)) is True


async def test_resolution_refreshes_board(view, owner, scheduler):
    view.message = MagicMock()
    view.message.edit = AsyncMock()
    await card_buttons(view)[0].callback(make_interaction(owner.id))
    await card_buttons(view)[1].callback(make_interaction(owner.id))

    scheduler.fire()
    await asyncio.sleep(0)

    view.message.edit.assert_awaited_once()
    embed = view.message.edit.call_args.kwargs["embed"]
    assert "No match" in embed.description


async def test_difficulty_button_redeals(view, owner):
    hard = next(item for item in view.children
                if isinstance(item, DifficultyButton) and item.difficulty is Difficulty.HARD)
    interaction = make_interaction(owner.id)

    await hard.callback(interaction)

    assert view.game.difficulty is Difficulty.HARD
    assert len(card_buttons(view)) == 20
    interaction.response.edit_message.assert_awaited_once()


async def test_restart_becomes_play_again_when_cleared(view, owner, scheduler):
    for i in range(4):
        await card_buttons(view)[i].callback(make_interaction(owner.id))
        await card_buttons(view)[i + 4].callback(make_interaction(owner.id))
        scheduler.fire()
    view.rebuild()

    restart = next(item for item in view.children if isinstance(item, RestartButton))
    assert restart.label == "Play Again"
    assert view.build_embed().fields[1].value == "4/4"


async def test_end_freezes_board(view, owner, scheduler):
    view.message = MagicMock()
    view.message.edit = AsyncMock()
    await card_buttons(view)[0].callback(make_interaction(owner.id))
    await card_buttons(view)[1].callback(make_interaction(owner.id))

    await view.end("Done.")

    assert scheduler.pending == []
    assert all(item.disabled for item in view.children)
    assert view.is_finished()


async def test_queued_refresh_does_not_reopen_ended_board(view, owner, scheduler):
    view.message = MagicMock()
    view.message.edit = AsyncMock()
    await card_buttons(view)[0].callback(make_interaction(owner.id))
    await card_buttons(view)[1].callback(make_interaction(owner.id))
    scheduler.fire()  # Queues a redraw that has not run yet

    await view.end("Done.")
    await asyncio.sleep(0)
    await asyncio.sleep(0)

    view.message.edit.assert_awaited_once()
    last = view.message.edit.call_args.kwargs
    assert last["embed"].description == "Done."
    assert all(item.disabled for item in view.children)


async def test_refresh_after_end_is_noop(view):
    view.message = MagicMock()
    view.message.edit = AsyncMock()
    await view.end("Done.")

    await view.refresh("late")

    view.message.edit.assert_awaited_once()
    assert view.status_message == "Done."
