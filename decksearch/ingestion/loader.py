"""
Deck loader.
Reads the deck manifest, every deck file it lists, and the optional
case-study index, producing raw slides grouped by deck.

Deck files are read concurrently and joined; a single failed read aborts
the whole load so a partial deck set is never returned.
"""
import asyncio
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import TypeAdapter, ValidationError

from ..config import Settings, settings as default_settings
from ..data_models import DeckDescriptor, DeckFile, IndexRecord, RawSlide
from ..errors import ConfigurationError, DeckLoadError

logger = logging.getLogger(__name__)

_MANIFEST_ADAPTER = TypeAdapter(List[DeckDescriptor])
_INDEX_ADAPTER = TypeAdapter(List[IndexRecord])


@dataclass
class LoadedDecks:
    """Everything read from disk for one session, before enrichment."""
    decks: List[DeckDescriptor] = field(default_factory=list)
    slides_by_deck: List[Tuple[DeckDescriptor, List[RawSlide]]] = field(default_factory=list)
    index: Dict[int, IndexRecord] = field(default_factory=dict)

    @property
    def total_slides(self) -> int:
        return sum(len(slides) for _, slides in self.slides_by_deck)


def _read_json(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


class DeckLoader:
    """Loads the manifest, deck files and index from a decks directory."""

    def __init__(
        self,
        decks_dir: Optional[Path] = None,
        manifest_file: Optional[str] = None,
        index_file: Optional[str] = None,
        config: Optional[Settings] = None,
    ):
        config = config or default_settings
        self.decks_dir = Path(decks_dir) if decks_dir is not None else config.data_dir
        self.manifest_file = manifest_file or config.manifest_file
        self.index_file = index_file or config.index_file

    async def load(self) -> LoadedDecks:
        """Load the full deck set. Raises on any manifest or deck failure."""
        decks = await asyncio.to_thread(self.load_manifest)
        index = await asyncio.to_thread(self.load_index)

        tasks = [self._load_deck(deck) for deck in decks]
        slides_by_deck = await asyncio.gather(*tasks)

        loaded = LoadedDecks(
            decks=decks,
            slides_by_deck=list(zip(decks, slides_by_deck)),
            index=index,
        )
        logger.info(
            f"Loaded {loaded.total_slides} slides from {len(decks)} decks"
            f" ({len(index)} index records)"
        )
        return loaded

    def load_manifest(self) -> List[DeckDescriptor]:
        manifest_path = self.decks_dir / self.manifest_file
        if not manifest_path.is_file():
            logger.error(f"Deck manifest not found: {manifest_path}")
            raise ConfigurationError(f"Could not load {self.manifest_file} configuration.")

        try:
            data = _read_json(manifest_path)
            return _MANIFEST_ADAPTER.validate_python(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Malformed deck manifest {manifest_path}: {e}")
            raise DeckLoadError(f"Malformed manifest {self.manifest_file}", source=self.manifest_file) from e

    def load_index(self) -> Dict[int, IndexRecord]:
        """Slide number -> index record. Missing or unreadable index means no index data."""
        index_path = self.decks_dir / self.index_file
        try:
            records = _INDEX_ADAPTER.validate_python(_read_json(index_path))
        except FileNotFoundError:
            logger.info("No index file found, proceeding without index data")
            return {}
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.info(f"Index file {self.index_file} unreadable, proceeding without index data: {e}")
            return {}

        index: Dict[int, IndexRecord] = {}
        for record in records:
            index.setdefault(record.slide_number, record)
        return index

    async def _load_deck(self, deck: DeckDescriptor) -> List[RawSlide]:
        path = self.decks_dir / deck.file_name
        try:
            data = await asyncio.to_thread(_read_json, path)
            return DeckFile.model_validate(data).slides
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Failed to load {deck.file_name}: {e}")
            raise DeckLoadError(f"Failed to load {deck.file_name}", source=deck.file_name) from e
