"""
Server utilities: configuration, logging and the event sink.
"""
