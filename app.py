"""
BDI Annotation Workbench

Main entry point for the Gradio application.

Environment overrides:
    BDI_CORPUS_PATH: JSONL corpus to review
    BDI_STORAGE_DIR: Directory holding saved annotations
    BDI_EXPORT_DIR: Directory export files are written to
"""

import os

import gradio as gr

from models.application_state import (
    DEFAULT_CORPUS_PATH,
    DEFAULT_EXPORT_DIR,
    DEFAULT_STORAGE_DIR,
)
from ui.layout import create_layout, get_global_css
from ui.event_handlers import (
    create_session,
    generate_preview_json,
    generate_saved_count_html,
    handle_clear_saved,
    handle_export,
    handle_navigation,
    handle_set_rating,
    handle_submit,
    load_conversation_to_ui,
)


def main(corpus_path: str = None, storage_dir: str = None, export_dir: str = None):
    """Build the application."""
    corpus_path = corpus_path or os.environ.get("BDI_CORPUS_PATH", DEFAULT_CORPUS_PATH)
    storage_dir = storage_dir or os.environ.get("BDI_STORAGE_DIR", DEFAULT_STORAGE_DIR)
    export_dir = export_dir or os.environ.get("BDI_EXPORT_DIR", DEFAULT_EXPORT_DIR)

    with gr.Blocks(title="BDI Annotation Workbench", css=get_global_css()) as app:

        # Session state (ApplicationState), created when the page loads
        app_state = gr.State(None)

        components = create_layout()

        conversation_outputs = [
            app_state,
            components['conversation_display'],
            components['rating_target'],
            components['status_display'],
        ]

        # ========== Event Handlers ==========

        def on_load():
            state, message = create_session(corpus_path, storage_dir, export_dir)
            conversation_html, choices, status_html = load_conversation_to_ui(state, message)
            return (
                state, conversation_html,
                gr.update(choices=choices, value=None),
                status_html,
                generate_preview_json(state),
                generate_saved_count_html(state)
            )

        app.load(
            fn=on_load,
            inputs=[],
            outputs=conversation_outputs + [components['preview'], components['saved_count']]
        )

        # Navigation Handlers
        def on_navigation(direction, state):
            state, conversation_html, choices, status_html = handle_navigation(direction, state)
            return state, conversation_html, gr.update(choices=choices, value=None), status_html

        components['prev_btn'].click(
            fn=lambda state: on_navigation("prev", state),
            inputs=[app_state],
            outputs=conversation_outputs
        )

        components['next_btn'].click(
            fn=lambda state: on_navigation("next", state),
            inputs=[app_state],
            outputs=conversation_outputs
        )

        # Set Rating Handler
        components['set_rating_btn'].click(
            fn=handle_set_rating,
            inputs=[components['rating_target'], components['rating_choice'], app_state],
            outputs=[app_state, components['conversation_display'], components['status_display']]
        )

        # Submit Handlers
        def on_submit(advance, state):
            state, conversation_html, choices, status_html, preview, saved_count = handle_submit(advance, state)
            return (
                state, conversation_html,
                gr.update(choices=choices, value=None),
                status_html, preview, saved_count
            )

        submit_outputs = conversation_outputs + [components['preview'], components['saved_count']]

        components['submit_next_btn'].click(
            fn=lambda state: on_submit(True, state),
            inputs=[app_state],
            outputs=submit_outputs
        )

        components['submit_stay_btn'].click(
            fn=lambda state: on_submit(False, state),
            inputs=[app_state],
            outputs=submit_outputs
        )

        # Export Handlers
        def on_export(state, table=False):
            file_path, status_html = handle_export(state, table=table)
            if file_path:
                return gr.update(value=file_path, visible=True), status_html
            return gr.update(value=None, visible=False), status_html

        components['export_btn'].click(
            fn=lambda state: on_export(state),
            inputs=[app_state],
            outputs=[components['export_file'], components['status_display']]
        )

        components['export_csv_btn'].click(
            fn=lambda state: on_export(state, table=True),
            inputs=[app_state],
            outputs=[components['export_file'], components['status_display']]
        )

        # Clear Saved Handler
        def on_clear(confirmed, state):
            state, status_html, preview, saved_count = handle_clear_saved(confirmed, state)
            return state, status_html, preview, saved_count, False

        components['clear_btn'].click(
            fn=on_clear,
            inputs=[components['confirm_clear'], app_state],
            outputs=[
                app_state,
                components['status_display'],
                components['preview'],
                components['saved_count'],
                components['confirm_clear']
            ]
        )

    return app


if __name__ == "__main__":
    app = main()
    app.launch(show_error=True)
