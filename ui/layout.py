"""
UI layout components for the BDI Annotation Workbench.

Builds the single-column Gradio layout: conversation view, rating
controls, submit/navigation buttons, export and saved-annotation panel.
"""

from typing import Any, Dict

import gradio as gr

from models.rating import RATING_OPTIONS


GLOBAL_CSS = """
.card {
    border: 1px solid #d0d7de;
    border-radius: 8px;
    padding: 12px 15px;
    margin: 10px 0;
}
.human-card { background: #f3f8ff; border-left: 4px solid #1976d2; }
.assistant-card { background: #f7f7f7; border-left: 4px solid #9e9e9e; }
.turn-header { margin-bottom: 6px; }
.turn-text { white-space: pre-wrap; margin-bottom: 10px; line-height: 1.6; }
.bdi-label { font-weight: bold; text-decoration: underline; margin-top: 8px; }
.bdi-text { margin: 4px 0 4px 10px; }
.attack-item { margin: 6px 0 6px 10px; padding: 6px; border-top: 1px dashed #ccc; }
.stratum { background: #e3f2fd; color: #1976d2; padding: 2px 8px; border-radius: 4px; }
.conv-id { font-size: 14px; color: #666; }
.rating-badge { font-size: 13px; padding: 1px 6px; border-radius: 4px; margin-left: 6px; }
.rating-badge.selected { background: #4caf50; color: white; }
.rating-badge.unset { background: #eeeeee; color: #757575; }
.load-status { font-size: 16px; padding: 6px 0; }
.annotation-count { font-size: 16px; }
"""


def get_global_css() -> str:
    return GLOBAL_CSS


def create_header() -> None:
    gr.Markdown("# 🎯 BDI & Attack Mapping Annotation Tool")
    with gr.Accordion("📖 How to use", open=False):
        gr.Markdown(
            "1. Read the conversation and its BDI / attack mapping claims.\n"
            "2. Pick an item in **Item to rate**, choose a rating and press **Set rating**.\n"
            "3. Unrated BDI and attack items are saved as *Neutral*; an unrated stratum is saved as empty.\n"
            "4. **Submit & Next** saves and moves on; **Submit (Stay)** saves and keeps the conversation.\n"
            "5. Ratings reset when switching conversations. Saved annotations survive restarts."
        )


def create_navigation_row(components: Dict[str, Any]) -> None:
    with gr.Row():
        components['status_display'] = gr.HTML('<div class="load-status">Loading corpus...</div>')
        components['prev_btn'] = gr.Button("⬅️ Prev", size="sm")
        components['next_btn'] = gr.Button("Next ➡️", size="sm")


def create_rating_controls(components: Dict[str, Any]) -> None:
    with gr.Group():
        components['rating_target'] = gr.Dropdown(
            label="Item to rate",
            choices=[],
            value=None,
            interactive=True,
        )
        components['rating_choice'] = gr.Radio(
            label="Rating",
            choices=RATING_OPTIONS,
            value=None,
            interactive=True,
        )
        components['set_rating_btn'] = gr.Button("✔️ Set rating", variant="secondary")


def create_submit_row(components: Dict[str, Any]) -> None:
    with gr.Row():
        components['submit_next_btn'] = gr.Button("💾 Submit & Next", variant="primary")
        components['submit_stay_btn'] = gr.Button("💾 Submit (Stay)")
    gr.Markdown("Annotations auto-save locally. Ratings reset when switching conversations.")


def create_saved_panel(components: Dict[str, Any]) -> None:
    with gr.Row():
        components['export_btn'] = gr.Button("📥 Download annotations.jsonl")
        components['export_csv_btn'] = gr.Button("📊 Download rating table (CSV)")
        components['confirm_clear'] = gr.Checkbox(label="I understand clearing cannot be undone", value=False)
        components['clear_btn'] = gr.Button("🗑️ Clear Saved", variant="stop")
    components['saved_count'] = gr.HTML('<div class="annotation-count">Saved annotations: <strong>0</strong></div>')
    components['export_file'] = gr.File(label="Export file", visible=False, interactive=False)
    with gr.Accordion("Latest submission (preview)", open=False):
        components['preview'] = gr.Code(value="No submissions yet", language="json", interactive=False)


def create_layout() -> Dict[str, Any]:
    """
    Create every component of the workbench.

    Returns:
        Dictionary of components keyed by name, for wiring in app.py
    """
    components: Dict[str, Any] = {}

    create_header()
    create_navigation_row(components)
    gr.HTML('<hr>')

    with gr.Row():
        with gr.Column(scale=3):
            components['conversation_display'] = gr.HTML(
                '<div class="card">Loading...</div>', elem_id="conversation_display"
            )
        with gr.Column(scale=2):
            create_rating_controls(components)
            create_submit_row(components)

    gr.HTML('<hr>')
    create_saved_panel(components)

    return components
