"""
Annotation record models for the BDI Annotation Workbench.

An AnnotationRecord is one finalized submission for one conversation.
Records are immutable; to_dict()/from_dict() give the exported JSON shape.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, Tuple


@dataclass(frozen=True)
class BDIRating:
    """Rating given to one BDI item."""

    rating: str
    type: str

    def to_dict(self) -> Dict[str, Any]:
        return {"rating": self.rating, "type": self.type}


class BDIRatings(Mapping):
    """Read-only, insertion-ordered mapping of BDI item text to BDIRating."""

    def __init__(self, items: Optional[Mapping] = None):
        self._items: Dict[str, BDIRating] = dict(items or {})

    def __getitem__(self, text: str) -> BDIRating:
        return self._items[text]

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"BDIRatings({self._items!r})"


@dataclass(frozen=True)
class AttackMappingRating:
    """
    Ratings for one attack mapping claim, with the claim fields copied through.

    target_bdi_id is only exported when the source claim carried the key,
    in which case an explicit null is exported as null.
    """

    target_bdi_type: Optional[str]
    attack_strategy: Optional[str]
    target_type_rating: str
    strategy_rating: str
    explanation: Optional[str]
    target_bdi_id: Optional[str] = None
    carries_target_bdi_id: bool = False

    def __post_init__(self):
        if self.target_bdi_id is not None:
            object.__setattr__(self, "carries_target_bdi_id", True)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.carries_target_bdi_id:
            data["target_bdi_id"] = self.target_bdi_id
        data.update({
            "target_bdi_type": self.target_bdi_type,
            "attack_strategy": self.attack_strategy,
            "target_type_rating": self.target_type_rating,
            "strategy_rating": self.strategy_rating,
            "explanation": self.explanation,
        })
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AttackMappingRating":
        return cls(
            target_bdi_type=data.get("target_bdi_type"),
            attack_strategy=data.get("attack_strategy"),
            target_type_rating=data["target_type_rating"],
            strategy_rating=data["strategy_rating"],
            explanation=data.get("explanation"),
            target_bdi_id=data.get("target_bdi_id"),
            carries_target_bdi_id="target_bdi_id" in data,
        )


@dataclass(frozen=True)
class TurnAnnotation:
    """All ratings given within one turn."""

    turn_id: int
    role: str
    bdi_ratings: BDIRatings = field(default_factory=BDIRatings)
    attack_mapping_ratings: Tuple[AttackMappingRating, ...] = field(default_factory=tuple)

    def __post_init__(self):
        """Freeze plain dicts and lists handed in by callers."""
        if not isinstance(self.bdi_ratings, BDIRatings):
            object.__setattr__(self, "bdi_ratings", BDIRatings(self.bdi_ratings))
        if not isinstance(self.attack_mapping_ratings, tuple):
            object.__setattr__(self, "attack_mapping_ratings", tuple(self.attack_mapping_ratings))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "turn_id": self.turn_id,
            "role": self.role,
            "bdi_ratings": {
                text: rating.to_dict() for text, rating in self.bdi_ratings.items()
            },
            "attack_mapping_ratings": [
                mapping.to_dict() for mapping in self.attack_mapping_ratings
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TurnAnnotation":
        return cls(
            turn_id=data["turn_id"],
            role=data["role"],
            bdi_ratings=BDIRatings({
                text: BDIRating(rating=value["rating"], type=value["type"])
                for text, value in data.get("bdi_ratings", {}).items()
            }),
            attack_mapping_ratings=tuple(
                AttackMappingRating.from_dict(item)
                for item in data.get("attack_mapping_ratings", [])
            ),
        )


@dataclass(frozen=True)
class AnnotationRecord:
    """
    One finalized annotation of a conversation.

    Attributes:
        conversation_id: Id of the annotated conversation
        stratum: Stratum label as assigned in the corpus
        stratum_rating: Reviewer rating of the stratum, None if never set
        turn_annotations: Per-turn ratings in turn order
    """

    conversation_id: str
    stratum: str
    stratum_rating: Optional[str]
    turn_annotations: Tuple[TurnAnnotation, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not isinstance(self.turn_annotations, tuple):
            object.__setattr__(self, "turn_annotations", tuple(self.turn_annotations))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "conversation_id": self.conversation_id,
            "stratum": self.stratum,
            "stratum_rating": self.stratum_rating,
            "turn_annotations": [turn.to_dict() for turn in self.turn_annotations],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnnotationRecord":
        """
        Rebuild a record from its exported form.

        Raises:
            ValueError: If data is not a record-shaped mapping
        """
        if not isinstance(data, dict):
            raise ValueError(f"Annotation record must be an object, got {type(data).__name__}")
        try:
            return cls(
                conversation_id=data["conversation_id"],
                stratum=data["stratum"],
                stratum_rating=data.get("stratum_rating"),
                turn_annotations=tuple(
                    TurnAnnotation.from_dict(turn)
                    for turn in data.get("turn_annotations", [])
                ),
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Malformed annotation record: {e}") from e
