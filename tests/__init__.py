"""Test package for Chat Relay.

Structure:
    - unit/: Store, controller, and agent tests in isolation
    - integration/: Relay endpoint and client round trips over ASGI

The LLM provider is always replaced by a fake agent service, so no API key
or network access is needed.
"""
