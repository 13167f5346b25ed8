"""
Client utilities: configuration and logging.
"""
