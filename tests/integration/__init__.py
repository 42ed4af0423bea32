"""Integration tests for components working together as a system.

Coverage:
    - Relay endpoint validation, error bodies and streaming
    - RelayClient and ChatController against the real FastAPI app

Requests go through httpx's ASGITransport; only the provider is faked.
"""
