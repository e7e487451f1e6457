"""
HTTP API for deck search.
"""
