"""UI components for the BDI Annotation Workbench."""

from .layout import create_layout, get_global_css
from .event_handlers import (
    generate_status_html,
    generate_saved_count_html,
    generate_preview_json,
    render_conversation_html,
    rating_target_choices,
    create_session,
    load_conversation_to_ui,
    handle_set_rating,
    handle_navigation,
    handle_submit,
    handle_export,
    handle_clear_saved
)

__all__ = [
    "create_layout",
    "get_global_css",
    "generate_status_html",
    "generate_saved_count_html",
    "generate_preview_json",
    "render_conversation_html",
    "rating_target_choices",
    "create_session",
    "load_conversation_to_ui",
    "handle_set_rating",
    "handle_navigation",
    "handle_submit",
    "handle_export",
    "handle_clear_saved"
]
