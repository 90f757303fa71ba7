"""
Defines the Card class for the Memory Match game.
"""
import uuid

class Card:
    """Represents a single card in a memory deck."""
    def __init__(self, face, card_id=None):
        self._id = card_id or uuid.uuid4().hex
        self._face = face
        self.is_face_up = False
        self.is_matched = False
        self.flip_count = 0  # Times this card has been revealed

    @property
    def id(self):
        return self._id

    @property
    def face(self):
        """Face identifier shared by the two cards of a pair."""
        return self._face

    def reveal(self):
        """Turn the card face up and count the reveal."""
        self.is_face_up = True
        self.flip_count += 1

    def hide(self):
        self.is_face_up = False

    def matches(self, other_card):
        """Checks if this card forms a pair with another card."""
        if not isinstance(other_card, Card):
            return False
        if self is other_card:  # Cannot match itself
            return False
        return self._face == other_card.face

    def __str__(self):
        return self._face

    def __repr__(self):
        return (f"Card(id='{self._id}', face='{self._face}', face_up={self.is_face_up}, "
                f"matched={self.is_matched}, flips={self.flip_count})")

    def __eq__(self, other):
        if not isinstance(other, Card):
            return NotImplemented
        return self._id == other.id

    def __hash__(self):
        return hash(self._id)
