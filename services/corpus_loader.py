"""
Corpus loading for the BDI Annotation Workbench.

Parses a JSON Lines corpus (one conversation object per line) into
immutable Conversation records. A malformed line aborts the whole load.
"""

import json
import logging
import os
from typing import Any, Dict, Iterable, List, Optional

from models.conversation import DEFAULT_STRATUM, AttackMapping, Conversation, Turn
from services.bdi_normalizer import normalize_bdi
from utils.performance import monitor_performance

logger = logging.getLogger(__name__)


class CorpusLoadError(ValueError):
    """Raised when a corpus line cannot be turned into a Conversation."""

    def __init__(self, line_number: int, reason: str):
        self.line_number = line_number
        self.reason = reason
        super().__init__(f"Line {line_number}: {reason}")


def _parse_turn_id(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"turn_id must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    raise ValueError(f"turn_id must be an integer, got {value!r}")


def _parse_attack_mapping(data: Any) -> AttackMapping:
    if not isinstance(data, dict):
        raise ValueError(f"attack mapping must be an object, got {type(data).__name__}")
    return AttackMapping(
        target_bdi_type=data.get("target_bdi_type"),
        attack_strategy=data.get("attack_strategy"),
        explanation=data.get("explanation"),
        target_bdi_id=data.get("target_bdi_id"),
        carries_target_bdi_id="target_bdi_id" in data,
    )


def _parse_turn(data: Any) -> Turn:
    if not isinstance(data, dict):
        raise ValueError(f"turn must be an object, got {type(data).__name__}")
    if "turn_id" not in data:
        raise ValueError("turn is missing 'turn_id'")

    attack_mappings = data.get("attack_mappings") or []
    if not isinstance(attack_mappings, list):
        raise ValueError("'attack_mappings' must be a list")

    return Turn(
        turn_id=_parse_turn_id(data["turn_id"]),
        role=str(data.get("role", "")),
        text=data.get("text") or "",
        bdi=tuple(normalize_bdi(data.get("bdi"))),
        attack_mappings=tuple(_parse_attack_mapping(item) for item in attack_mappings),
    )


def parse_conversation(data: Dict[str, Any]) -> Conversation:
    """
    Build a Conversation from one decoded corpus object.

    Raises:
        ValueError: If required fields are missing or have the wrong shape
    """
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    if data.get("conversation_id") is None:
        raise ValueError("missing 'conversation_id'")

    turns = data.get("turns")
    if not isinstance(turns, list):
        raise ValueError("'turns' must be a list")

    stratum = data.get("stratum")
    return Conversation(
        conversation_id=str(data["conversation_id"]),
        stratum=DEFAULT_STRATUM if stratum is None else str(stratum),
        turns=tuple(_parse_turn(turn) for turn in turns),
    )


def parse_corpus_lines(lines: Iterable[str]) -> List[Conversation]:
    """
    Parse corpus lines into conversations.

    Blank lines are skipped. The first bad line raises; nothing is returned
    for a partially valid corpus.

    Raises:
        CorpusLoadError: On the first line that is not a valid conversation
    """
    conversations = []
    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            data = json.loads(line)
        except json.JSONDecodeError as e:
            raise CorpusLoadError(line_number, f"invalid JSON ({e.msg})") from e
        try:
            conversations.append(parse_conversation(data))
        except ValueError as e:
            raise CorpusLoadError(line_number, str(e)) from e
    return conversations


@monitor_performance("load_corpus")
def load_corpus(path: str) -> List[Conversation]:
    """
    Load every conversation from a JSONL corpus file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        CorpusLoadError: If any line is malformed
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Corpus file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        conversations = parse_corpus_lines(f)

    logger.info("Loaded %d conversations from %s", len(conversations), path)
    return conversations


class CorpusLoader:
    """
    Read-only access to a loaded corpus.

    Attributes:
        corpus_path: Path of the JSONL corpus
        conversations: Conversations in file order
    """

    def __init__(self, corpus_path: str):
        """
        Load the corpus at corpus_path.

        Raises:
            FileNotFoundError: If the file doesn't exist
            CorpusLoadError: If any line is malformed
        """
        self.corpus_path = corpus_path
        self.conversations: List[Conversation] = load_corpus(corpus_path)

    @property
    def total(self) -> int:
        return len(self.conversations)

    def get_conversation(self, index: int) -> Optional[Conversation]:
        """Conversation at index, or None if out of bounds."""
        if 0 <= index < len(self.conversations):
            return self.conversations[index]
        return None

    def find(self, conversation_id: str) -> Optional[Conversation]:
        for conversation in self.conversations:
            if conversation.conversation_id == conversation_id:
                return conversation
        return None
