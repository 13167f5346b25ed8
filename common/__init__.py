"""
Common package for the chat relay.

Holds the constants and line formats shared by client and server.
"""
