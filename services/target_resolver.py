"""
Attack target reference resolution.

An attack mapping may name its target as "<role letter><turn>_<bdi type>",
e.g. "A2_belief" for the belief of Assistant turn 2. Resolution is a
display aid: any failure yields None and the caller shows the raw id.
"""

import re
from dataclasses import dataclass
from typing import Any, Optional

from models.conversation import AttackMapping, Conversation

TARGET_ID_PATTERN = re.compile(r"^([AH])(\d+)_(belief|desire|intention)$", re.IGNORECASE)

ROLE_LETTERS = {"A": "Assistant", "H": "Human"}


@dataclass(frozen=True)
class TargetReference:
    """Parsed target id."""

    role: str
    turn: int
    bdi: str


@dataclass(frozen=True)
class ResolvedTarget:
    """Target id resolved to the text of the item it names."""

    role: str
    turn: int
    bdi: str
    text: str


def parse_target_id(raw: Any) -> Optional[TargetReference]:
    """
    Parse a target id such as "A2_belief" or "h5_Intention".

    Returns:
        TargetReference, or None if raw does not match the pattern
    """
    if not isinstance(raw, str):
        return None

    match = TARGET_ID_PATTERN.match(raw.strip())
    if not match:
        return None

    letter, turn, bdi = match.groups()
    return TargetReference(
        role=ROLE_LETTERS[letter.upper()],
        turn=int(turn),
        bdi=bdi.lower(),
    )


def resolve_target(conversation: Conversation, raw_id: Any) -> Optional[ResolvedTarget]:
    """
    Find the BDI item a target id points at.

    Args:
        conversation: Conversation that owns the attack mapping
        raw_id: Target id string as found in the corpus

    Returns:
        ResolvedTarget with the item's text, or None if the id is malformed,
        the turn does not exist or it has no item of that type
    """
    reference = parse_target_id(raw_id)
    if reference is None:
        return None

    turn = conversation.get_turn(reference.turn, role=reference.role)
    if turn is None:
        return None

    for item in turn.bdi:
        if isinstance(item.type, str) and item.type.lower() == reference.bdi:
            return ResolvedTarget(
                role=reference.role,
                turn=reference.turn,
                bdi=reference.bdi,
                text=item.text,
            )
    return None


def describe_target(conversation: Conversation, mapping: AttackMapping) -> str:
    """Display text for an attack target: resolved item text, else the raw id, else the type."""
    if mapping.target_bdi_id is None:
        return mapping.target_bdi_type or ""

    resolved = resolve_target(conversation, mapping.target_bdi_id)
    if resolved is None:
        return mapping.target_bdi_id
    return resolved.text
