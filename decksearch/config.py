"""
Application configuration.
Loads settings from environment variables and .env file.
"""
from pathlib import Path
from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):

    # Deck sources. The index file only ever joins onto one deck.
    decks_dir: Path = Field(default=Path("public"), alias="DECKS_DIR")
    manifest_file: str = Field(default="decks.json", alias="DECKS_MANIFEST")
    index_file: str = Field(default="global-case-studies-index.json", alias="INDEX_FILE")
    indexed_deck_file: str = Field(default="global-case-studies.json", alias="INDEXED_DECK_FILE")

    gemini_api_key: Optional[str] = Field(default=None, alias="GEMINI_API_KEY")
    gemini_model: str = Field(default="gemini-2.5-flash", alias="GEMINI_MODEL")

    # Local ranking. threshold is the worst per-field score still counted as a match
    search_threshold: float = Field(default=0.4, alias="SEARCH_THRESHOLD")
    min_match_char_length: int = Field(default=2, alias="MIN_MATCH_CHAR_LENGTH")
    search_limit: int = Field(default=50, alias="SEARCH_LIMIT")
    browse_limit: int = Field(default=10, alias="BROWSE_LIMIT")
    suggestion_limit: int = Field(default=5, alias="SUGGESTION_LIMIT")
    suggestion_length: int = Field(default=60, alias="SUGGESTION_LENGTH")

    api_host: str = Field(default="0.0.0.0", alias="API_HOST")
    api_port: int = Field(default=8000, alias="API_PORT")

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

    @property
    def project_root(self) -> Path:
        return Path(__file__).parents[1]

    @property
    def data_dir(self) -> Path:
        if self.decks_dir.is_absolute():
            return self.decks_dir
        return self.project_root / self.decks_dir

    @property
    def manifest_path(self) -> Path:
        return self.data_dir / self.manifest_file

    @property
    def logs_dir(self) -> Path:
        return self.project_root / "logs"

    def ensure_directories(self) -> None:
        self.logs_dir.mkdir(parents=True, exist_ok=True)


settings = Settings()
