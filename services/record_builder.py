"""
Annotation record builder.

Turns a conversation plus the current draft into an immutable
AnnotationRecord. Unset BDI and attack-mapping ratings default to
"Neutral"; an unset stratum rating stays None (not yet reviewed).
"""

from dataclasses import dataclass
from typing import List

from models.annotation import (
    AnnotationRecord,
    AttackMappingRating,
    BDIRating,
    BDIRatings,
    TurnAnnotation,
)
from models.conversation import Conversation, Turn
from models.draft_store import DraftRatingStore
from models.rating import DEFAULT_RATING, RatingKey
from utils.performance import monitor_performance


@dataclass(frozen=True)
class RatingTarget:
    """A rateable element of a conversation and its picker label."""

    key: RatingKey
    label: str


def _rated_mappings(turn: Turn) -> bool:
    return turn.is_human and len(turn.attack_mappings) > 0


def _build_turn_annotation(turn: Turn, store: DraftRatingStore) -> TurnAnnotation:
    bdi_ratings = {}
    for item in turn.bdi:
        rating = store.get(RatingKey.bdi(turn.turn_id, item.text)) or DEFAULT_RATING
        bdi_ratings[item.text] = BDIRating(rating=rating, type=item.type)

    attack_ratings = []
    if _rated_mappings(turn):
        for index, mapping in enumerate(turn.attack_mappings):
            target_type_rating = store.get(RatingKey.attack(turn.turn_id, index, "target_type"))
            strategy_rating = store.get(RatingKey.attack(turn.turn_id, index, "strategy"))
            attack_ratings.append(AttackMappingRating(
                target_bdi_type=mapping.target_bdi_type,
                attack_strategy=mapping.attack_strategy,
                target_type_rating=target_type_rating or DEFAULT_RATING,
                strategy_rating=strategy_rating or DEFAULT_RATING,
                explanation=mapping.explanation,
                target_bdi_id=mapping.target_bdi_id,
                carries_target_bdi_id=mapping.carries_target_bdi_id,
            ))

    return TurnAnnotation(
        turn_id=turn.turn_id,
        role=turn.role,
        bdi_ratings=BDIRatings(bdi_ratings),
        attack_mapping_ratings=tuple(attack_ratings),
    )


@monitor_performance("build_record")
def build_record(conversation: Conversation, store: DraftRatingStore) -> AnnotationRecord:
    """
    Snapshot the draft ratings of a conversation into a record.

    Args:
        conversation: Conversation being annotated
        store: Draft ratings for that conversation

    Returns:
        AnnotationRecord covering every turn, BDI item and attack mapping
    """
    return AnnotationRecord(
        conversation_id=conversation.conversation_id,
        stratum=conversation.stratum,
        stratum_rating=store.get(RatingKey.stratum()),
        turn_annotations=tuple(
            _build_turn_annotation(turn, store) for turn in conversation.turns
        ),
    )


def rating_targets(conversation: Conversation) -> List[RatingTarget]:
    """
    Every key build_record() reads for this conversation, in display order.
    """
    targets = [RatingTarget(
        key=RatingKey.stratum(),
        label=f"Stratum: {conversation.stratum}",
    )]

    for turn in conversation.turns:
        for item in turn.bdi:
            targets.append(RatingTarget(
                key=RatingKey.bdi(turn.turn_id, item.text),
                label=f"Turn {turn.turn_id} {item.type}: {item.text}",
            ))
        if not _rated_mappings(turn):
            continue
        for index, mapping in enumerate(turn.attack_mappings):
            targets.append(RatingTarget(
                key=RatingKey.attack(turn.turn_id, index, "target_type"),
                label=f"Turn {turn.turn_id} attack #{index + 1} target type: {mapping.target_bdi_type}",
            ))
            targets.append(RatingTarget(
                key=RatingKey.attack(turn.turn_id, index, "strategy"),
                label=f"Turn {turn.turn_id} attack #{index + 1} strategy: {mapping.attack_strategy}",
            ))
    return targets
