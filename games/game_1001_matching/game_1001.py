"""
Game logic for the Discord Memory Match Game (ID: 1001).

The MemoryGame object is the single owner of a game's state. The Discord
layer only calls reset()/flip() and re-renders from snapshot(); everything
it needs to know about a state change arrives through subscribe().
"""
import asyncio
import enum
import logging
import random
import traceback
from typing import NamedTuple, Tuple

from common.config import (
    FACE_CATALOG, FACE_EMOJIS, EMOJI_BACK, DIFFICULTY_PAIRS, DEFAULT_DIFFICULTY, REVEAL_DELAY_SECONDS,
    DEFAULT_SCORING_POLICY, MATCH_POINTS, MISMATCH_PENALTY
)
from utils.card import Card

logger = logging.getLogger("discord_bot")

GAME_ID = "1001"

# Events sent to subscribers
EVENT_RESET = "reset"
EVENT_FLIP = "flip"
EVENT_MATCH = "match"
EVENT_MISMATCH = "mismatch"
EVENT_COMPLETE = "complete"


class Difficulty(enum.Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def pair_count(self):
        return DIFFICULTY_PAIRS[self.value]

    @property
    def label(self):
        return self.value.capitalize()

    @classmethod
    def parse(cls, value):
        """Accepts a Difficulty or its name in any case."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(d.value for d in cls)
            raise ValueError(f"Unknown difficulty '{value}'. Choose one of: {choices}") from None


# --- Scoring policies ---

class ScoringPolicy:
    """Decides how many points a match earns and a mismatch costs."""
    name = "flat"

    def __init__(self, match_points=MATCH_POINTS, mismatch_penalty=0):
        self.match_points = match_points
        self.mismatch_penalty = mismatch_penalty

    def match_reward(self, first_card, second_card):
        return self.match_points

    def __repr__(self):
        return f"{type(self).__name__}(name='{self.name}', penalty={self.mismatch_penalty})"


class DecayedScoringPolicy(ScoringPolicy):
    """Each card of the pair is worth less the more often it was revealed."""
    name = "decayed"

    def card_reward(self, card):
        return max(self.match_points - card.flip_count + 1, 1)

    def match_reward(self, first_card, second_card):
        return self.card_reward(first_card) + self.card_reward(second_card)


class FlatPenaltyScoringPolicy(ScoringPolicy):
    name = "flat_penalty"

    def __init__(self, match_points=MATCH_POINTS, mismatch_penalty=MISMATCH_PENALTY):
        super().__init__(match_points, mismatch_penalty)


SCORING_POLICIES = {
    DecayedScoringPolicy.name: DecayedScoringPolicy,
    ScoringPolicy.name: ScoringPolicy,
    FlatPenaltyScoringPolicy.name: FlatPenaltyScoringPolicy,
}


def get_scoring_policy(policy=None):
    """Returns a policy instance for a name, or the policy itself if one is passed."""
    if isinstance(policy, ScoringPolicy):
        return policy
    name = (policy or DEFAULT_SCORING_POLICY).strip().lower()
    if name not in SCORING_POLICIES:
        choices = ", ".join(SCORING_POLICIES)
        raise ValueError(f"Unknown scoring policy '{policy}'. Choose one of: {choices}")
    return SCORING_POLICIES[name]()


# --- Feedback hooks ---

class FeedbackHooks:
    """Side effects fired when a pair is resolved. The defaults do nothing."""

    def play_success_cue(self):
        pass

    def play_failure_cue(self):
        pass

    def trigger_haptic(self, kind):
        pass


# --- Snapshots ---

class CardSnapshot(NamedTuple):
    id: str
    face: str
    is_face_up: bool
    is_matched: bool
    flip_count: int

    @property
    def display(self):
        """Emoji for the card: its face once revealed or matched, the back otherwise."""
        if self.is_face_up or self.is_matched:
            return FACE_EMOJIS.get(self.face, EMOJI_BACK)
        return EMOJI_BACK


class GameSnapshot(NamedTuple):
    cards: Tuple[CardSnapshot, ...]
    score: int
    is_locked: bool
    difficulty: Difficulty
    generation: int
    matched_pairs: int
    total_pairs: int

    @property
    def is_complete(self):
        return self.matched_pairs == self.total_pairs


def _call_later(delay, callback, *args):
    """Default scheduler: run callback on the running event loop after delay."""
    loop = asyncio.get_running_loop()
    return loop.call_later(delay, callback, *args)


class MemoryGame:
    """Single-player Memory Match state: cards, score, pending pair and lock."""

    def __init__(self, difficulty=DEFAULT_DIFFICULTY, scoring_policy=None, feedback=None,
                 reveal_delay=REVEAL_DELAY_SECONDS, scheduler=None, rng=None):
        self.difficulty = Difficulty.parse(difficulty)
        self.scoring_policy = get_scoring_policy(scoring_policy)
        self.feedback = feedback or FeedbackHooks()
        self.reveal_delay = reveal_delay
        self._schedule = scheduler or _call_later
        self._rng = rng or random.Random()

        self.cards = []
        self.score = 0
        self.is_locked = False
        self.generation = 0
        self._pending = []
        self._resolve_handle = None
        self._listeners = []

        self.reset()

    # --- Observers ---

    def subscribe(self, callback):
        """Register callback(event, snapshot). Returns a function that unsubscribes it."""
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _notify(self, event):
        snapshot = self.snapshot()
        for callback in list(self._listeners):
            try:
                callback(event, snapshot)
            except Exception as e:
                logger.error(f"Error in Memory Match listener for '{event}': {e}\n{traceback.format_exc()}")

    # --- State ---

    @property
    def pending_cards(self):
        return tuple(self._pending)

    @property
    def total_pairs(self):
        return len(self.cards) // 2

    @property
    def matched_pairs(self):
        return sum(1 for card in self.cards if card.is_matched) // 2

    @property
    def is_complete(self):
        return bool(self.cards) and all(card.is_matched for card in self.cards)

    def get_card(self, card_id):
        """Gets the card with the given id, or None."""
        for card in self.cards:
            if card.id == card_id:
                return card
        return None

    def snapshot(self):
        """Read-only copy of the current state."""
        return GameSnapshot(
            cards=tuple(
                CardSnapshot(card.id, card.face, card.is_face_up, card.is_matched, card.flip_count)
                for card in self.cards
            ),
            score=self.score,
            is_locked=self.is_locked,
            difficulty=self.difficulty,
            generation=self.generation,
            matched_pairs=self.matched_pairs,
            total_pairs=self.total_pairs,
        )

    # --- Operations ---

    def reset(self, difficulty=None):
        """Deal a fresh shuffled deck for the given (or current) difficulty."""
        if difficulty is not None:
            self.difficulty = Difficulty.parse(difficulty)

        self.cancel_pending()
        self.generation += 1

        faces = FACE_CATALOG[:self.difficulty.pair_count] * 2
        self._rng.shuffle(faces)
        self.cards = [Card(face) for face in faces]

        self.score = 0
        self._pending = []
        self.is_locked = False

        logger.info(f"Memory Match deck dealt: {self.difficulty.value}, {len(self.cards)} cards (generation {self.generation})")
        self._notify(EVENT_RESET)
        return self.snapshot()

    def flip(self, card_id):
        """Turn a card face up. Returns False when the flip is ignored."""
        if self.is_locked:
            logger.debug(f"Flip of {card_id} ignored: a pair is being resolved")
            return False

        card = self.get_card(card_id)
        if card is None or card.is_face_up or card.is_matched:
            logger.debug(f"Flip of {card_id} ignored")
            return False

        card.reveal()
        self._pending.append(card)

        if len(self._pending) == 2:
            self.is_locked = True
            self._resolve_handle = self._schedule(self.reveal_delay, self.resolve_pending, self.generation)

        self._notify(EVENT_FLIP)
        return True

    def resolve_pending(self, generation=None):
        """Compare the two face-up cards. Called by the timer set up in flip()."""
        if generation is not None and generation != self.generation:
            logger.info(f"Ignoring stale resolution for generation {generation} (current {self.generation})")
            return

        self._resolve_handle = None

        if len(self._pending) != 2:
            # A lone face-up card stays pending so it can still be paired
            self.is_locked = False
            return

        first_card, second_card = self._pending

        if first_card.matches(second_card):
            first_card.is_matched = True
            second_card.is_matched = True
            reward = self.scoring_policy.match_reward(first_card, second_card)
            self.score += reward
            event = EVENT_MATCH
            logger.info(f"Match on '{first_card.face}' for {reward} points. Score: {self.score}")
        else:
            first_card.hide()
            second_card.hide()
            self.score -= self.scoring_policy.mismatch_penalty
            event = EVENT_MISMATCH
            logger.info(f"No match: '{first_card.face}' vs '{second_card.face}'. Score: {self.score}")

        self._pending = []
        self.is_locked = False

        self._fire_feedback(event == EVENT_MATCH)
        self._notify(event)
        if event == EVENT_MATCH and self.is_complete:
            logger.info(f"Memory Match cleared on {self.difficulty.value} with score {self.score}")
            self._notify(EVENT_COMPLETE)

    def cancel_pending(self):
        """Cancel a scheduled resolution, if any."""
        if self._resolve_handle is not None:
            self._resolve_handle.cancel()
            self._resolve_handle = None

    def _fire_feedback(self, success):
        try:
            if success:
                self.feedback.play_success_cue()
                self.feedback.trigger_haptic("success")
            else:
                self.feedback.play_failure_cue()
                self.feedback.trigger_haptic("error")
        except Exception as e:
            logger.error(f"Error in Memory Match feedback hook: {e}\n{traceback.format_exc()}")
