"""
Conversation corpus models for the BDI Annotation Workbench.

These records are built once by the corpus loader and never change
afterwards. BDI items are stored in canonical form only.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple


BDI_TYPES = ("belief", "desire", "intention")

DEFAULT_STRATUM = "Unknown"


@dataclass(frozen=True)
class BDIItem:
    """A belief, desire or intention statement attributed to a turn."""

    type: str
    text: str


@dataclass(frozen=True)
class AttackMapping:
    """
    Claim that a Human turn attacks an earlier BDI item.

    Attributes:
        target_bdi_type: Claimed type of the attacked item
        attack_strategy: Named strategy used by the attack
        explanation: Free-text justification
        target_bdi_id: Reference such as "A2_belief"; None for corpus
            variants that do not carry it
        carries_target_bdi_id: Whether the source object had a
            target_bdi_id key, even an explicit null
    """

    target_bdi_type: Optional[str]
    attack_strategy: Optional[str]
    explanation: Optional[str]
    target_bdi_id: Optional[str] = None
    carries_target_bdi_id: bool = False

    def __post_init__(self):
        if self.target_bdi_id is not None:
            object.__setattr__(self, "carries_target_bdi_id", True)


@dataclass(frozen=True)
class Turn:
    """
    One turn of a conversation.

    Attributes:
        turn_id: Identifier unique within the conversation (not necessarily contiguous)
        role: Role as written in the source ("Human", "assistant", ...)
        text: Display text
        bdi: Canonical BDI items
        attack_mappings: Attack mapping claims (Human turns only)
    """

    turn_id: int
    role: str
    text: str
    bdi: Tuple[BDIItem, ...] = field(default_factory=tuple)
    attack_mappings: Tuple[AttackMapping, ...] = field(default_factory=tuple)

    @property
    def normalized_role(self) -> str:
        return (self.role or "").strip().lower()

    @property
    def is_human(self) -> bool:
        return self.normalized_role == "human"

    @property
    def is_assistant(self) -> bool:
        return self.normalized_role == "assistant"


@dataclass(frozen=True)
class Conversation:
    """A reviewable conversation with its corpus-assigned stratum."""

    conversation_id: str
    stratum: str = DEFAULT_STRATUM
    turns: Tuple[Turn, ...] = field(default_factory=tuple)

    def get_turn(self, turn_id: int, role: Optional[str] = None) -> Optional[Turn]:
        """
        Find a turn by id, optionally also matching role case-insensitively.

        Returns:
            The first matching Turn or None
        """
        wanted_role = role.strip().lower() if role else None
        for turn in self.turns:
            if turn.turn_id != turn_id:
                continue
            if wanted_role is None or turn.normalized_role == wanted_role:
                return turn
        return None
