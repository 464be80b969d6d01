"""
Draft rating store.

Holds the unsaved rating choices of the conversation currently on screen.
The store is discarded whenever the reviewer navigates or a submission
completes; nothing in it is durable until a record snapshots it.
"""

from typing import Dict, Optional

from .rating import RATING_OPTIONS, RatingKey


class DraftRatingStore:
    """
    Mapping of RatingKey to a Likert rating for one conversation.

    Attributes:
        conversation_id: Conversation the draft belongs to (informational)
    """

    def __init__(self, conversation_id: Optional[str] = None):
        self.conversation_id = conversation_id
        self._ratings: Dict[RatingKey, str] = {}

    def set(self, key: RatingKey, rating: str):
        """
        Insert or overwrite the rating for key.

        Raises:
            ValueError: If key is not a RatingKey or rating is not a Likert option
        """
        if not isinstance(key, RatingKey):
            raise ValueError(f"Rating keys must be RatingKey instances, got {type(key).__name__}")
        if rating not in RATING_OPTIONS:
            raise ValueError(
                f"Invalid rating: {rating!r}. Must be one of {RATING_OPTIONS}"
            )
        self._ratings[key] = rating

    def get(self, key: RatingKey) -> Optional[str]:
        """Return the stored rating, or None if the key was never set."""
        return self._ratings.get(key)

    def clear(self, conversation_id: Optional[str] = None):
        """Drop every draft rating and rebind the store to conversation_id."""
        self._ratings.clear()
        self.conversation_id = conversation_id

    def __len__(self) -> int:
        return len(self._ratings)

    def __contains__(self, key: object) -> bool:
        return key in self._ratings
