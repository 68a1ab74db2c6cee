# shopsense/domain/repositories/translation_cache_repo.py
"""
Note:
    - Entries are keyed by (original text, language) and never expire.
    - Identical (text, language) pairs are assumed to always translate the same way;
      a prompt or model change will keep serving old translations until clear() is called.
"""
from __future__ import annotations
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple
import threading

from pydantic import BaseModel

class TranslationCacheEntry(BaseModel):
    original_text: str
    language: str
    translated_text: str
    translated_at: datetime
    model_config = {"frozen": True}

class TranslationCache:
    """
    Process-local translation cache, passed explicitly to whoever needs it.
    Read-through from the caller's side; concurrent writes to the same key
    are last-write-wins.
    """
    def __init__(self):
        self._lock = threading.Lock()
        self._entries: Dict[Tuple[str, str], TranslationCacheEntry] = {}

    @staticmethod
    def key(text: str, language: str) -> Tuple[str, str]:
        return (text, language)

    def get(self, text: str, language: str) -> Optional[TranslationCacheEntry]:
        """Returns None if not cached."""
        return self._entries.get(self.key(text, language))

    def set(self, text: str, language: str, translated_text: str) -> TranslationCacheEntry:
        entry = TranslationCacheEntry(
            original_text=text,
            language=language,
            translated_text=translated_text,
            translated_at=datetime.now(timezone.utc),
        )
        with self._lock:
            self._entries[self.key(text, language)] = entry
        return entry

    def clear(self) -> int:
        """Drop every entry. Returns how many were removed."""
        with self._lock:
            n = len(self._entries)
            self._entries = {}
        return n

    def __len__(self) -> int:
        return len(self._entries)
