"""Unit tests for individual components in isolation.

Coverage:
    - agent/: Provider configuration and Agno event filtering
    - chat/: Conversation store and send state machine
"""
