"""
Likert rating scale and rating keys for the BDI Annotation Workbench.

A RatingKey addresses one rateable target inside a single conversation:
the stratum label, one BDI item of a turn, or one field of an attack
mapping claim.
"""

import json
from dataclasses import dataclass
from typing import Optional, Tuple, Union


RATING_OPTIONS = [
    "Strongly Disagree",
    "Disagree",
    "Neutral",
    "Agree",
    "Strongly Agree",
]

DEFAULT_RATING = "Neutral"

ATTACK_FIELDS = ("target_type", "strategy")


@dataclass(frozen=True)
class RatingKey:
    """
    Structured, value-compared key for one rating target.

    Attributes:
        kind: "stratum", "bdi" or "attack"
        turn_id: Owning turn (None for the stratum key)
        item_text: BDI item text (bdi keys only)
        mapping_index: Position of the attack mapping in its turn (attack keys only)
        field: "target_type" or "strategy" (attack keys only)
    """

    kind: str
    turn_id: Optional[int] = None
    item_text: Optional[str] = None
    mapping_index: Optional[int] = None
    field: Optional[str] = None

    @classmethod
    def stratum(cls) -> "RatingKey":
        return cls(kind="stratum")

    @classmethod
    def bdi(cls, turn_id: int, item_text: str) -> "RatingKey":
        return cls(kind="bdi", turn_id=turn_id, item_text=item_text)

    @classmethod
    def attack(cls, turn_id: int, mapping_index: int, field: str) -> "RatingKey":
        if field not in ATTACK_FIELDS:
            raise ValueError(
                f"Invalid attack field: {field!r}. Must be one of {list(ATTACK_FIELDS)}"
            )
        return cls(kind="attack", turn_id=turn_id, mapping_index=mapping_index, field=field)

    def parts(self) -> Tuple[Union[int, str], ...]:
        """Ordered composite identifier, e.g. (3, "bdi", "I am safe")."""
        if self.kind == "stratum":
            return ("stratum",)
        if self.kind == "bdi":
            return (self.turn_id, "bdi", self.item_text)
        return (self.turn_id, "attack", self.mapping_index, self.field)

    def encode(self) -> str:
        """
        Opaque string form of the key.

        The parts are written as a JSON array, so quoting and escaping keep
        the encoding injective for any item text.
        """
        return json.dumps(list(self.parts()), ensure_ascii=False)

    @classmethod
    def decode(cls, encoded: str) -> "RatingKey":
        """
        Rebuild a key from encode() output.

        Raises:
            ValueError: If the string is not a valid encoded key
        """
        try:
            parts = json.loads(encoded)
        except (TypeError, json.JSONDecodeError) as e:
            raise ValueError(f"Invalid rating key: {encoded!r}") from e

        if parts == ["stratum"]:
            return cls.stratum()
        if isinstance(parts, list) and len(parts) == 3 and parts[1] == "bdi":
            return cls.bdi(parts[0], parts[2])
        if isinstance(parts, list) and len(parts) == 4 and parts[1] == "attack":
            return cls.attack(parts[0], parts[2], parts[3])
        raise ValueError(f"Invalid rating key: {encoded!r}")
