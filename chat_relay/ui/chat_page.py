"""NiceGUI chat interface with multiple conversations and streamed replies."""

import os

from nicegui import ui

from chat_relay.chat import ChatController, ConversationStore, RelayClient, SendState
from chat_relay.chat.client import DEFAULT_TIMEOUT
from chat_relay.models import ChatMessage

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
RELAY_TIMEOUT = float(os.getenv("RELAY_TIMEOUT", str(DEFAULT_TIMEOUT)))

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: linear-gradient(135deg, #020617 0%, #3b0764 50%, #0f172a 100%); }

    .sidebar {
        background: rgba(15, 23, 42, 0.5);
        border-right: 1px solid rgba(168, 85, 247, 0.2);
    }

    .conv-item { border: 1px solid transparent; border-radius: 12px; cursor: pointer; }
    .conv-item:hover { background: rgba(30, 41, 59, 0.8); }
    .conv-active {
        background: linear-gradient(90deg, rgba(147, 51, 234, 0.3), rgba(219, 39, 119, 0.3));
        border-color: rgba(168, 85, 247, 0.5);
    }

    .new-chat-btn { background: linear-gradient(90deg, #9333ea, #db2777) !important; }

    .message-user {
        background: linear-gradient(90deg, #9333ea, #db2777);
        color: white;
        border-radius: 18px 18px 4px 18px;
        white-space: pre-wrap;
    }

    .message-assistant {
        background: rgba(30, 41, 59, 0.8);
        color: #f1f5f9;
        border: 1px solid rgba(168, 85, 247, 0.3);
        border-radius: 18px 18px 18px 4px;
    }

    .typing-dot {
        width: 8px; height: 8px;
        background: #c084fc;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.1s; }
    .typing-dot:nth-child(3) { animation-delay: 0.2s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .message-assistant pre { margin: 0.5rem 0; }
    .message-assistant code { font-family: 'Menlo', 'Monaco', monospace; }
</style>
"""


@ui.page("/")
def chat_page() -> None:
    """Main chat page.

    Each page visit owns its own store; conversations are lost on reload.
    """
    ui.add_head_html(CUSTOM_CSS)
    controller = ChatController(
        ConversationStore(),
        RelayClient(API_BASE_URL, timeout=RELAY_TIMEOUT),
    )

    sidebar_container: ui.column
    messages_container: ui.column
    input_field: ui.input
    send_btn: ui.button
    # Markdown element of the streaming reply, if it is on screen
    reply_view: ui.markdown | None = None
    rendered_count = 0

    def render_message(msg: ChatMessage) -> ui.markdown | None:
        is_user = msg.role == "user"
        align = "justify-end" if is_user else "justify-start"
        with ui.row().classes(f"w-full {align}"):
            if is_user:
                ui.label(msg.content).classes("message-user max-w-[75%] px-4 py-3")
                return None
            with ui.element("div").classes("message-assistant max-w-[75%] px-4 py-3"):
                return ui.markdown(msg.content).classes("text-sm leading-relaxed")

    def render_typing_indicator() -> None:
        with (
            ui.row().classes("w-full justify-start"),
            ui.element("div").classes("message-assistant px-4 py-3"),
            ui.row().classes("gap-1"),
        ):
            for _ in range(3):
                ui.element("div").classes("typing-dot")

    def refresh_messages() -> None:
        nonlocal reply_view, rendered_count
        messages = controller.messages
        reply_view = None
        rendered_count = len(messages)
        messages_container.clear()
        with messages_container:
            if not messages:
                with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                    ui.icon("forum").classes("text-5xl text-purple-300")
                    ui.label("Start a conversation").classes("text-2xl font-bold text-white")
                    ui.label(
                        "Ask me anything! I'm here to help with your questions, ideas, and projects."
                    ).classes("text-slate-400")
                return
            for msg in messages:
                view = render_message(msg)
            if controller.sending_id == controller.active_id:
                if messages[-1].role == "user":
                    render_typing_indicator()
                else:
                    reply_view = view

    def refresh_sidebar() -> None:
        sidebar_container.clear()
        with sidebar_container:
            for conv in controller.store.conversations:
                active = conv.id == controller.active_id
                with (
                    ui.row()
                    .classes(f"conv-item w-full p-3 items-start no-wrap {'conv-active' if active else ''}")
                    .on("click", lambda cid=conv.id: switch_conversation(cid))
                ):
                    with ui.column().classes("flex-grow min-w-0 gap-1"):
                        with ui.row().classes("items-center gap-2 no-wrap"):
                            ui.icon("chat_bubble_outline").classes(
                                "text-purple-400" if active else "text-slate-400"
                            )
                            ui.label(conv.title).classes(
                                f"font-medium truncate {'text-white' if active else 'text-slate-300'}"
                            )
                        ui.label(conv.timestamp).classes("text-xs text-slate-500")
                    ui.button(icon="delete").props("flat round dense color=red-4").on(
                        "click.stop", lambda cid=conv.id: delete_conversation(cid)
                    )
            count = len(controller.store)
            ui.label(f"{count} conversation{'' if count == 1 else 's'}").classes(
                "w-full text-xs text-slate-400 text-center pt-2"
            )

    def handle_change(conversation_id: int) -> None:
        """Re-render for a store change; streams into other conversations stay off screen."""
        if controller.state is not SendState.STREAMING:
            refresh_sidebar()
        if conversation_id != controller.active_id:
            return
        messages = controller.messages
        if (
            controller.state is SendState.STREAMING
            and reply_view is not None
            and len(messages) == rendered_count
        ):
            reply_view.set_content(messages[-1].content)
        else:
            refresh_messages()

    controller.on_change = handle_change

    def sync_send_button() -> None:
        send_btn.set_enabled(controller.can_send(input_field.value or ""))

    def set_busy(busy: bool) -> None:
        input_field.set_enabled(not busy)
        send_btn.set_text("Sending..." if busy else "Send")
        sync_send_button()

    async def send_message() -> None:
        text = input_field.value or ""
        if not controller.can_send(text):
            return
        input_field.value = ""
        set_busy(True)
        try:
            await controller.send(text)
        finally:
            set_busy(False)
        if controller.last_error:
            ui.notify(f"Request failed: {controller.last_error}", type="negative")

    def new_chat() -> None:
        controller.new_chat()
        refresh_sidebar()
        refresh_messages()

    def switch_conversation(conversation_id: int) -> None:
        controller.switch(conversation_id)
        refresh_sidebar()
        refresh_messages()

    def delete_conversation(conversation_id: int) -> None:
        controller.delete(conversation_id)
        refresh_sidebar()
        refresh_messages()

    # === UI Layout ===
    with ui.row().classes("w-full no-wrap gap-0").style("height: 100vh"):
        # Sidebar
        with ui.column().classes("sidebar w-80 h-full p-0 gap-0") as sidebar:
            with ui.element("div").classes("w-full p-6"):
                ui.button("New Chat", icon="add", on_click=new_chat).classes(
                    "new-chat-btn w-full text-white rounded-xl"
                ).props("unelevated no-caps")
            with ui.scroll_area().classes("flex-grow w-full"):
                sidebar_container = ui.column().classes("w-full p-4 gap-2")

        # Chat area
        with ui.column().classes("flex-grow h-full gap-0"):
            with ui.row().classes("w-full p-4 items-center justify-between"):
                ui.button(
                    icon="menu",
                    on_click=lambda: sidebar.set_visibility(not sidebar.visible),
                ).props("flat round color=purple-4")
                ui.label("AI Assistant").classes("text-2xl font-bold text-purple-300")
                ui.element("div").classes("w-10")

            with (
                ui.scroll_area().classes("flex-grow w-full"),
                ui.column().classes("w-full p-6"),
            ):
                messages_container = ui.column().classes("w-full gap-4")

            with ui.row().classes("w-full p-6 gap-3 items-center no-wrap max-w-4xl mx-auto"):
                input_field = (
                    ui.input(
                        placeholder="Type your message here...",
                        on_change=lambda _: sync_send_button(),
                    )
                    .props("outlined dark rounded")
                    .classes("flex-grow")
                    .on("keydown.enter", send_message)
                )
                send_btn = (
                    ui.button("Send", on_click=send_message)
                    .props("unelevated no-caps")
                    .classes("new-chat-btn text-white rounded-xl px-8 py-4")
                )

    refresh_sidebar()
    refresh_messages()
    sync_send_button()

