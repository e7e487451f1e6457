"""
Display helpers for slide text.
"""
import re

_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


def summarize_text(text: str, max_length: int = 200) -> str:
    """
    Shorten ``text`` at sentence boundaries to roughly ``max_length`` chars.

    The first sentence is always kept; "..." marks a cut.
    """
    if not text or len(text) <= max_length:
        return text

    sentences = _SENTENCE_SPLIT_RE.split(text)
    summary = sentences[0]
    for sentence in sentences[1:]:
        if len(summary + sentence) > max_length:
            break
        summary += sentence + "."

    summary = summary.strip()
    return summary + ("..." if len(summary) < len(text) else "")
