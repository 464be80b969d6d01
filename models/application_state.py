"""
Application state model for the BDI Annotation Workbench.

Holds one reviewer session: the loaded corpus, the active conversation
index, the draft ratings of that conversation and the annotation log.
"""

from dataclasses import dataclass, field
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from services.annotation_log import AnnotationLog

from .annotation import AnnotationRecord
from .conversation import Conversation
from .draft_store import DraftRatingStore

DEFAULT_CORPUS_PATH = "data/review_conversations.jsonl"
DEFAULT_STORAGE_DIR = ".annotations"
DEFAULT_EXPORT_DIR = "exports"


@dataclass
class ApplicationState:
    """
    Session state container.

    Attributes:
        current_index: Index of the conversation on screen
        conversations: Loaded corpus, in file order
        draft: Unsaved ratings for the conversation on screen
        annotation_log: Durable log of submitted records
        corpus_path: Path the corpus was loaded from
        storage_dir: Directory holding the durable log
        export_dir: Directory export files are written to
    """

    current_index: int = 0
    conversations: List[Conversation] = field(default_factory=list)
    draft: DraftRatingStore = field(default_factory=DraftRatingStore)
    annotation_log: Optional["AnnotationLog"] = None
    corpus_path: str = DEFAULT_CORPUS_PATH
    storage_dir: str = DEFAULT_STORAGE_DIR
    export_dir: str = DEFAULT_EXPORT_DIR

    def get_current_conversation(self) -> Optional[Conversation]:
        """Get the conversation currently on screen."""
        if 0 <= self.current_index < len(self.conversations):
            return self.conversations[self.current_index]
        return None

    def get_total(self) -> int:
        return len(self.conversations)

    def get_saved_count(self) -> int:
        """Number of records in the annotation log."""
        return len(self.annotation_log) if self.annotation_log is not None else 0

    def go_to(self, index: int) -> bool:
        """
        Move to a conversation, clamped to the corpus bounds.

        The draft is discarded only when the active conversation changes;
        a move clamped to the current index keeps it.

        Returns:
            True if the index changed
        """
        if not self.conversations:
            return False
        new_index = max(0, min(index, len(self.conversations) - 1))
        if new_index == self.current_index:
            return False
        self.current_index = new_index
        self.draft.clear(self.conversations[new_index].conversation_id)
        return True

    def go_next(self) -> bool:
        return self.go_to(self.current_index + 1)

    def go_previous(self) -> bool:
        return self.go_to(self.current_index - 1)

    def submit(self, advance: bool = True) -> AnnotationRecord:
        """
        Build a record from the draft, append it to the log, then clear the draft.

        The draft is left untouched if the append fails.

        Args:
            advance: Also move to the next conversation after a successful append

        Raises:
            ValueError: If no conversation is loaded or the log is missing
            OSError: If the log cannot be persisted
        """
        from services.record_builder import build_record

        conversation = self.get_current_conversation()
        if conversation is None:
            raise ValueError("No conversation to submit")
        if self.annotation_log is None:
            raise ValueError("Annotation log is not initialized")

        record = build_record(conversation, self.draft)
        self.annotation_log.append(record)

        if not (advance and self.go_next()):
            self.draft.clear(conversation.conversation_id)
        return record
