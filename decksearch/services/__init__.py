"""
Services layer: search engine, user sessions and the AI ranker.
"""
from .remote_ranker import (
    RemoteRanker,
    RemoteRankResult,
    extract_reply_text,
    parse_references,
    resolve_references,
    strip_code_fences,
)
from .search import SearchService, SearchSession

__all__ = [
    "RemoteRanker",
    "RemoteRankResult",
    "extract_reply_text",
    "parse_references",
    "resolve_references",
    "strip_code_fences",
    "SearchService",
    "SearchSession",
]
