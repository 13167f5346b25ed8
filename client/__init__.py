"""
Client package for the chat relay.

This package contains the console client:
- Connection handling
- Line forwarding between console and server
- Configuration and utilities
"""
