"""NiceGUI chat page driving the streaming ingestor."""

import logging
from datetime import date

from nicegui import Client, events, ui

from src.client.ingestor import StreamIngestor
from src.models.schemas import Attachment, ChatEntry, EntryRole, ExchangeState

logger = logging.getLogger(__name__)

WELCOME_MESSAGES = (
    "Hoy es un gran día para aprender algo nuevo!",
    "Bienvenido, ¿qué vas a crear hoy?",
    "Prepárate para explorar nuevas ideas.",
    "Cada día es una oportunidad para mejorar.",
    "Listo para generar documentos y más!",
    "Inspírate y crea algo asombroso hoy.",
    "¡Hora de ser productivo y creativo!",
)

# accept filter and capture attribute per attachment source
ATTACHMENT_SOURCES: dict[str, tuple[str, str | None]] = {
    "gallery": ("image/*", None),
    "camera": ("image/*", "environment"),
    "file": (".pdf,.docx", None),
}

CUSTOM_CSS = """
<style>
    body { background: linear-gradient(to bottom, #111827, #1f2937); min-height: 100vh; }

    .message-user { background: #4f46e5; color: white; border-radius: 0.5rem; }
    .message-bot { background: #374151; color: white; border-radius: 0.5rem; }
    .message-error { background: #7f1d1d; color: white; border-radius: 0.5rem; }
    .message-provisional { opacity: 0.85; }

    .typing-dot {
        width: 8px; height: 8px;
        background: #9ca3af;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.15s; }
    .typing-dot:nth-child(3) { animation-delay: 0.3s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .welcome { animation: fade-in 0.8s ease-in; }
    @keyframes fade-in { from { opacity: 0; } to { opacity: 1; } }
</style>
"""


def pick_welcome_message(today: date | None = None) -> str:
    """Pick the welcome phrase for the given day of the month."""
    today = today or date.today()
    return WELCOME_MESSAGES[today.day % len(WELCOME_MESSAGES)]


def bubble_classes(entry: ChatEntry) -> str:
    """CSS classes for the bubble of an entry."""
    if entry.role is EntryRole.USER:
        return "self-end message-user"
    if entry.role is EntryRole.BOT_ERROR:
        return "self-start message-error"
    if entry.role is EntryRole.BOT_PROVISIONAL:
        return "self-start message-bot message-provisional"
    return "self-start message-bot"


def bind_ingestor_lifetime(client: Client, ingestor: StreamIngestor) -> None:
    """Close the ingestor when the page client is deleted.

    A disconnect alone may be followed by a reconnect, so an exchange still
    streaming must not lose its HTTP client then.
    """
    client.on_delete(ingestor.aclose)


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)
    ingestor = StreamIngestor()
    pending_files: list[Attachment] = []

    messages_container: ui.column
    thinking_row: ui.row
    welcome_label: ui.label
    input_field: ui.input
    send_btn: ui.button
    uploader: ui.upload
    files_label: ui.label

    def hide_welcome() -> None:
        welcome_label.set_visibility(False)

    def render_entry(entry: ChatEntry) -> None:
        with ui.element("div").classes(f"max-w-[75%] p-3 {bubble_classes(entry)}"):
            ui.label(entry.text).classes("whitespace-pre-wrap text-sm")

    def refresh_messages(entries: tuple[ChatEntry, ...]) -> None:
        messages_container.clear()
        with messages_container:
            for entry in entries:
                render_entry(entry)

    def on_state(state: ExchangeState) -> None:
        thinking_row.set_visibility(ingestor.is_busy())
        send_btn.set_enabled(not ingestor.is_busy())

    def refresh_files() -> None:
        names = ", ".join(f.filename for f in pending_files)
        files_label.set_text(f"📎 {names}" if names else "")

    async def handle_upload(e: events.UploadEventArguments) -> None:
        content = await e.file.read()
        pending_files.append(
            Attachment(filename=e.file.name, content=content, content_type=e.file.content_type)
        )
        logger.info(f"Attached {e.file.name} ({len(content)} bytes)")
        refresh_files()

    def open_picker(source: str) -> None:
        accept, capture = ATTACHMENT_SOURCES[source]
        uploader.props(f'accept="{accept}"')
        if capture:
            uploader.props(f'capture="{capture}"')
        else:
            uploader.props(remove="capture")
        menu.close()
        uploader.run_method("pickFiles")

    async def send_message() -> None:
        text = input_field.value or ""
        files = list(pending_files)
        if not text.strip() and not files:
            return
        if ingestor.is_busy():
            ui.notify("Espera a que termine la respuesta actual", type="warning")
            return

        input_field.value = ""
        pending_files.clear()
        uploader.reset()
        refresh_files()
        hide_welcome()

        await ingestor.submit(text, files)

    def on_input_change(e: events.ValueChangeEventArguments) -> None:
        if (e.value or "").strip():
            hide_welcome()

    ingestor.on_store_changed(refresh_messages)
    ingestor.on_state_changed(on_state)
    bind_ingestor_lifetime(ui.context.client, ingestor)

    # === UI Layout ===
    with ui.column().classes("w-full max-w-3xl mx-auto text-white").style("height: 100vh"):
        # Header
        with ui.row().classes("w-full p-4 bg-gray-900 items-center justify-between"):
            ui.label("X-AI").classes("text-xl font-bold")
            with ui.button("📂").props("flat color=white"):
                with ui.menu() as menu:
                    ui.menu_item("Galería", on_click=lambda: open_picker("gallery"))
                    ui.menu_item("Cámara", on_click=lambda: open_picker("camera"))
                    ui.menu_item("Archivos (PDF/Word)", on_click=lambda: open_picker("file"))

        # Messages
        with ui.scroll_area().classes("flex-grow w-full"):
            welcome_label = ui.label(pick_welcome_message()).classes(
                "w-full text-center text-gray-500 mt-24 welcome"
            )
            messages_container = ui.column().classes("w-full p-4 gap-4")
            with ui.row().classes("gap-1 px-4") as thinking_row:
                for _ in range(3):
                    ui.element("div").classes("typing-dot")
            thinking_row.set_visibility(False)

        # Input
        files_label = ui.label("").classes("px-4 text-xs text-gray-400")
        with ui.row().classes("w-full p-2 bg-gray-900 gap-2 items-center no-wrap"):
            ui.button("📎", on_click=lambda: open_picker("gallery")).props("flat color=white")
            input_field = (
                ui.input(placeholder="Escribe un mensaje...", on_change=on_input_change)
                .props("dark dense borderless")
                .classes("flex-grow bg-gray-800 rounded px-2")
                .on("keydown.enter", send_message)
            )
            send_btn = ui.button("➡️", on_click=send_message).props("color=green")

        uploader = ui.upload(multiple=True, auto_upload=True, on_upload=handle_upload).classes(
            "hidden"
        )
