"""
Server package for the chat relay.

This package contains all server-side functionality including:
- Connection listener
- Session registry and routing
- Configuration and utilities
"""
