"""
Event handlers for UI components.

Each handler takes the session's ApplicationState, calls into the
annotation engine and returns plain values for the Gradio outputs.
"""

import html
import json
import logging
from typing import List, Optional, Tuple

import gradio as gr

from models import ApplicationState, RatingKey, DraftRatingStore
from models.application_state import DEFAULT_EXPORT_DIR, DEFAULT_STORAGE_DIR
from services import (
    AnnotationLog,
    CorpusLoadError,
    EmptyLogSignal,
    ExportManager,
    describe_target,
    group_bdi_items,
    load_corpus,
    rating_targets,
)
from utils.performance import measure_time
from utils.validation import (
    validate_export_preconditions,
    validate_rating,
    validate_rating_target,
)

logger = logging.getLogger(__name__)

NO_DATA_HTML = (
    '<div class="card"><h2>No conversations found in the data file.</h2>'
    '<p>Check that the corpus path points to a valid JSONL file.</p></div>'
)


def generate_status_html(status_text: str, state: Optional[ApplicationState] = None) -> str:
    """
    Two-line status: a message, then the position in the corpus.
    """
    line1 = status_text or "Ready"
    if state is not None and state.get_total() > 0:
        line2 = f"Conversation {state.current_index + 1} / {state.get_total()}"
    else:
        line2 = "Conversation - / -"
    return f'<div class="load-status">{html.escape(line1)}<br>{line2}</div>'


def generate_saved_count_html(state: Optional[ApplicationState]) -> str:
    count = state.get_saved_count() if state is not None else 0
    return f'<div class="annotation-count">Saved annotations: <strong>{count}</strong></div>'


def generate_preview_json(state: Optional[ApplicationState]) -> str:
    """Pretty JSON of the latest submission, or a placeholder."""
    if state is None or state.annotation_log is None:
        return "No submissions yet"
    latest = state.annotation_log.latest()
    if latest is None:
        return "No submissions yet"
    return json.dumps(latest.to_dict(), ensure_ascii=False, indent=2)


def _rating_badge(draft: DraftRatingStore, key: RatingKey) -> str:
    rating = draft.get(key)
    if rating is None:
        return '<span class="rating-badge unset">not rated</span>'
    return f'<span class="rating-badge selected">{html.escape(rating)}</span>'


def render_conversation_html(state: Optional[ApplicationState]) -> str:
    """
    Render the active conversation with its draft ratings.

    Attack targets are shown as the resolved BDI text when the target id
    resolves, otherwise as the raw id.
    """
    conversation = state.get_current_conversation() if state is not None else None
    if conversation is None:
        return NO_DATA_HTML

    with measure_time("render_conversation"):
        draft = state.draft
        parts = [
            '<div class="conv-meta">',
            f'<strong>Conversation {state.current_index + 1}/{state.get_total()}</strong> ',
            f'<span class="stratum">{html.escape(conversation.stratum)}</span>',
            f'<div class="conv-id">ID: <code>{html.escape(conversation.conversation_id)}</code></div>',
            '</div>',
            '<div class="card">',
            '<div class="bdi-label">Stratum Rating</div>',
            f'<div class="bdi-text">Is the assigned stratum <strong>{html.escape(conversation.stratum)}</strong> '
            f'correct for this conversation? {_rating_badge(draft, RatingKey.stratum())}</div>',
            '</div>',
        ]

        for turn in conversation.turns:
            card_class = "human-card" if turn.is_human else "assistant-card"
            speaker = "👤 Human" if turn.is_human else "🤖 Assistant"
            parts.append(f'<div class="card {card_class}">')
            parts.append(f'<div class="turn-header"><strong>{speaker} (Turn {turn.turn_id})</strong></div>')
            parts.append(f'<div class="turn-text">{html.escape(turn.text)}</div>')

            for bdi_type, items in group_bdi_items(turn.bdi).items():
                if not items:
                    continue
                parts.append(f'<div class="bdi-group"><div class="bdi-label">{bdi_type.capitalize()}s</div>')
                for item in items:
                    key = RatingKey.bdi(turn.turn_id, item.text)
                    parts.append(
                        f'<div class="bdi-text">{html.escape(item.text)} {_rating_badge(draft, key)}</div>'
                    )
                parts.append('</div>')

            if turn.is_human and turn.attack_mappings:
                parts.append('<div class="attack-group"><div class="bdi-label">Attack Mapping Ratings</div>')
                for index, mapping in enumerate(turn.attack_mappings):
                    target = describe_target(conversation, mapping)
                    type_key = RatingKey.attack(turn.turn_id, index, "target_type")
                    strategy_key = RatingKey.attack(turn.turn_id, index, "strategy")
                    parts.append(
                        '<div class="attack-item">'
                        f'<strong>Target:</strong> {html.escape(target)}<br>'
                        f'<strong>Target BDI Type:</strong> <code>{html.escape(str(mapping.target_bdi_type))}</code> '
                        f'{_rating_badge(draft, type_key)}<br>'
                        f'<strong>Attack Strategy:</strong> <code>{html.escape(str(mapping.attack_strategy))}</code> '
                        f'{_rating_badge(draft, strategy_key)}<br>'
                        f'<em>{html.escape(mapping.explanation or "")}</em>'
                        '</div>'
                    )
                parts.append('</div>')

            parts.append('</div>')

    return "".join(parts)


def rating_target_choices(state: Optional[ApplicationState]) -> List[Tuple[str, str]]:
    """Dropdown choices as (label, encoded key) pairs for the active conversation."""
    conversation = state.get_current_conversation() if state is not None else None
    if conversation is None:
        return []
    return [(target.label, target.key.encode()) for target in rating_targets(conversation)]


def create_session(
    corpus_path: str,
    storage_dir: str = DEFAULT_STORAGE_DIR,
    export_dir: str = DEFAULT_EXPORT_DIR,
) -> Tuple[ApplicationState, str]:
    """
    Load the corpus and the saved annotations into a fresh session.

    A corpus that cannot be loaded leaves the session empty; the message
    explains why.

    Returns:
        Tuple of (app_state, status_message)
    """
    annotation_log = AnnotationLog(storage_dir)
    annotation_log.load()
    state = ApplicationState(
        annotation_log=annotation_log,
        corpus_path=corpus_path,
        storage_dir=storage_dir,
        export_dir=export_dir,
    )

    try:
        state.conversations = load_corpus(corpus_path)
    except FileNotFoundError as e:
        logger.error("%s", e)
        return state, f"❌ File not found: {e}"
    except CorpusLoadError as e:
        logger.error("Corpus load failed: %s", e)
        return state, f"❌ Corpus format error: {e}"

    if not state.conversations:
        return state, "⚠️ The corpus is empty"

    state.draft.clear(state.conversations[0].conversation_id)
    message = f"✅ Loaded {len(state.conversations)} conversations"
    if annotation_log.load_warning:
        gr.Warning(annotation_log.load_warning)
        message += f" (⚠️ {annotation_log.load_warning})"
    return state, message


def load_conversation_to_ui(
    state: Optional[ApplicationState], status_text: str = ""
) -> Tuple[str, List[Tuple[str, str]], str]:
    """
    Returns:
        Tuple of (conversation_html, rating_target_choices, status_html)
    """
    return (
        render_conversation_html(state),
        rating_target_choices(state),
        generate_status_html(status_text, state),
    )


def handle_set_rating(
    encoded_key: Optional[str], rating: Optional[str], state: Optional[ApplicationState]
) -> Tuple[Optional[ApplicationState], str, str]:
    """
    Store a draft rating for the selected target.

    Returns:
        Tuple of (app_state, conversation_html, status_html)
    """
    if state is None or state.get_current_conversation() is None:
        gr.Warning("No conversation loaded")
        return state, NO_DATA_HTML, generate_status_html("⚠️ No conversation loaded")

    for is_valid, error_msg in (validate_rating_target(encoded_key), validate_rating(rating)):
        if not is_valid:
            gr.Warning(error_msg)
            return state, render_conversation_html(state), generate_status_html(f"⚠️ {error_msg}", state)

    try:
        state.draft.set(RatingKey.decode(encoded_key), rating)
    except ValueError as e:
        gr.Warning(str(e))
        return state, render_conversation_html(state), generate_status_html(f"⚠️ {e}", state)

    return state, render_conversation_html(state), generate_status_html(f"Rated: {rating}", state)


def handle_navigation(
    direction: str, state: Optional[ApplicationState]
) -> Tuple[Optional[ApplicationState], str, List[Tuple[str, str]], str]:
    """
    Handle previous/next navigation. Moving discards the draft.

    Returns:
        Tuple of (app_state, conversation_html, rating_target_choices, status_html)
    """
    if state is None or not state.conversations:
        gr.Warning("No conversations to navigate")
        return (state,) + load_conversation_to_ui(state, "⚠️ No conversations to navigate")

    if direction not in ("prev", "next"):
        gr.Warning(f"Invalid navigation direction: {direction}")
        return (state,) + load_conversation_to_ui(state, f"❌ Invalid navigation direction: {direction}")

    moved = state.go_previous() if direction == "prev" else state.go_next()
    if not moved:
        edge = "first" if direction == "prev" else "last"
        gr.Info(f"Already at the {edge} conversation")

    return (state,) + load_conversation_to_ui(state)


def handle_submit(
    advance: bool, state: Optional[ApplicationState]
) -> Tuple[Optional[ApplicationState], str, List[Tuple[str, str]], str, str, str]:
    """
    Submit the draft of the active conversation.

    Returns:
        Tuple of (app_state, conversation_html, rating_target_choices,
        status_html, preview_json, saved_count_html)
    """
    if state is None or state.get_current_conversation() is None:
        gr.Warning("No conversation to submit")
        return (state,) + load_conversation_to_ui(state, "⚠️ No conversation to submit") + (
            generate_preview_json(state), generate_saved_count_html(state)
        )

    try:
        record = state.submit(advance=advance)
    except (OSError, ValueError) as e:
        logger.error("Submit failed: %s", e)
        gr.Warning(f"Submit failed: {e}")
        return (state,) + load_conversation_to_ui(state, f"❌ Submit failed: {e}") + (
            generate_preview_json(state), generate_saved_count_html(state)
        )

    message = f"✅ Saved annotation for {record.conversation_id}"
    return (state,) + load_conversation_to_ui(state, message) + (
        generate_preview_json(state), generate_saved_count_html(state)
    )


def handle_export(state: Optional[ApplicationState], table: bool = False) -> Tuple[Optional[str], str]:
    """
    Export the annotation log as JSONL (or as a CSV rating table).

    Returns:
        Tuple of (file_path or None, status_html)
    """
    if state is None or state.annotation_log is None:
        return None, generate_status_html("❌ Annotation log not initialized", state)

    is_valid, error_msg = validate_export_preconditions(state.get_saved_count())
    if not is_valid:
        gr.Warning(error_msg)
        return None, generate_status_html(f"⚠️ {error_msg}", state)

    export_manager = ExportManager(state.annotation_log, output_dir=state.export_dir)
    try:
        result = export_manager.export_to_csv() if table else export_manager.export_to_jsonl()
    except OSError as e:
        logger.error("Export failed: %s", e)
        gr.Warning(f"Export failed: {e}")
        return None, generate_status_html(f"❌ Export failed: {e}", state)

    if isinstance(result, EmptyLogSignal):
        gr.Warning(result.message)
        return None, generate_status_html(f"⚠️ {result.message}", state)

    gr.Info(f"Exported {export_manager.get_record_count()} annotations")
    return result, generate_status_html(f"✅ Exported to: {result}", state)


def handle_clear_saved(
    confirmed: bool, state: Optional[ApplicationState]
) -> Tuple[Optional[ApplicationState], str, str, str]:
    """
    Clear every saved annotation, only when the reviewer confirmed.

    Returns:
        Tuple of (app_state, status_html, preview_json, saved_count_html)
    """
    if state is None or state.annotation_log is None:
        return state, generate_status_html("❌ Annotation log not initialized", state), \
            generate_preview_json(state), generate_saved_count_html(state)

    if not confirmed:
        gr.Warning("Tick the confirmation box to clear saved annotations")
        return state, generate_status_html("⚠️ Clear not confirmed", state), \
            generate_preview_json(state), generate_saved_count_html(state)

    try:
        state.annotation_log.clear()
    except OSError as e:
        logger.error("Clearing saved annotations failed: %s", e)
        gr.Warning(f"Clear failed: {e}")
        return state, generate_status_html(f"❌ Clear failed: {e}", state), \
            generate_preview_json(state), generate_saved_count_html(state)

    gr.Info("Saved annotations cleared")
    return state, generate_status_html("🗑️ Saved annotations cleared", state), \
        generate_preview_json(state), generate_saved_count_html(state)
