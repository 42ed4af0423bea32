"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Conversation sidebar: create, switch, delete
    - Message display with streaming support
    - Input disabled while a reply is in flight

Contains no business logic. Delegates all state changes to ChatController.
"""
