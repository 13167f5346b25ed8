"""
Chat module for server-side relay functionality.

Handles:
- Display name registry
- Per-connection session lifecycle
- Broadcast and whisper routing
"""
