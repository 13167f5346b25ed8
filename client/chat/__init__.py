"""
Chat module for the console client.

Handles:
- Sending console lines to the relay
- Printing lines received from the relay
"""
