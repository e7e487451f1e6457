"""
Deck ingestion: manifest, per-deck slide files and the case-study index.
"""

from .loader import DeckLoader, LoadedDecks

__all__ = ["DeckLoader", "LoadedDecks"]
