from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable

os.environ.setdefault("GRADIO_ANALYTICS_ENABLED", "False")

import gradio as gr

from jimaku.config import Settings, get_settings
from jimaku.errors import JimakuError
from jimaku.services import JimakuService

logger = logging.getLogger(__name__)

ServiceFactory = Callable[[Settings], JimakuService]


def generate_subtitles(
    audio_path: str | None,
    reference_path: str | None,
    model: str,
    *,
    service_factory: ServiceFactory = JimakuService,
) -> tuple[str, str, str | None]:
    """Return `(srt_text, status_message, download_path)` for the Generate button."""

    if not audio_path:
        return "", "Upload an audio file first.", None

    settings = get_settings()
    if model.strip():
        settings = settings.model_copy(update={"model": model.strip()})
    try:
        service = service_factory(settings)
        outcome = service.transcribe_file(
            Path(audio_path),
            reference_file=Path(reference_path) if reference_path else None,
        )
        download = service.export(outcome)
    except (JimakuError, OSError) as exc:
        logger.warning("Subtitle generation failed: %s", exc)
        return "", f"Transcription failed: {exc}", None

    status = f"{outcome.segment_count} segments from {outcome.model}"
    if reference_path:
        status += " (corrected with reference text)"
    return outcome.srt, status, str(download)


def build_app() -> gr.Blocks:
    default_model = get_settings().model

    with gr.Blocks(title="jimaku - audio to SRT", analytics_enabled=False) as demo:
        gr.Markdown("# jimaku - audio to SRT")
        gr.Markdown("Upload audio -> (optional) reference text -> generate -> download .srt")

        audio_input = gr.File(label="Audio file", type="filepath", file_types=["audio"])
        reference_input = gr.File(
            label="Reference text (optional)",
            type="filepath",
            file_types=[".txt"],
        )
        model = gr.Textbox(value=default_model, label="Gemini model")
        generate_button = gr.Button("Generate SRT", variant="primary")
        status = gr.Textbox(label="Status", interactive=False)
        srt_preview = gr.Textbox(label="SRT preview", lines=16)
        download = gr.File(label="Download", interactive=False)

        generate_button.click(
            generate_subtitles,
            inputs=[audio_input, reference_input, model],
            outputs=[srt_preview, status, download],
        )

    return demo
