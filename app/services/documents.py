"""Bundled base documents.

Each document is read from ``app/documents/`` the first time it is needed and
kept for the life of the process.  Callers only ever transform copies, so the
cached text is never modified.
"""

from functools import lru_cache
from pathlib import Path

DOCUMENTS_DIR = Path(__file__).resolve().parent.parent / "documents"


@lru_cache(maxsize=None)
def load_document(name: str) -> str:
    return (DOCUMENTS_DIR / name).read_text(encoding="utf-8")


def documentation_document() -> str:
    """Documentation page with detection meta tags and OS badges."""
    return load_document("documentation.html")


def silent_documentation_document() -> str:
    """Documentation page with no trace of the personalization."""
    return load_document("documentation_silent.html")


def demo_fallback_document() -> str:
    """Served on the demo routes when the remote demo cannot be fetched."""
    return load_document("demo_fallback.html")
