# cache.py

import os
import json
import hashlib
import threading
import filelock
from pathlib import Path
from typing import Optional, Dict, Any

from .config import log, LOCK_TIMEOUT, CACHE_ENTRIES_DIR, get_cache_dir
from .errors import CacheError
from .styler import SyntaxStyler


def cache_key(lang: str, text: str) -> str:
    """Key identifying one rendering of ``text`` as ``lang``."""
    return f"{lang}:{text}"


def acquire_lock(lock_path: str) -> filelock.FileLock:
    """Acquires a file lock, creating parent directory if needed."""
    lock_file = Path(f"{lock_path}.lock")
    try:
        lock_file.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        log.error(f"Could not create directory for lock file {lock_file}: {e}")
        raise CacheError(f"Failed to create directory for lock {lock_path}") from e

    lock = filelock.FileLock(str(lock_file), timeout=LOCK_TIMEOUT)
    try:
        lock.acquire()
        log.debug(f"Acquired lock: {lock_file}")
        return lock
    except filelock.Timeout as e:
        log.error(f"Timeout acquiring lock: {lock_file}")
        raise CacheError(f"Could not acquire lock for {lock_path}") from e


def release_lock(lock: Optional[filelock.FileLock]):
    """Releases a file lock if it's held."""
    if lock and lock.is_locked:
        lock.release()
        log.debug(f"Released lock: {lock.lock_file}")


class HighlightCache:
    """
    Cache of rendered markup keyed by language and text.

    Entries live in memory and, when a cache directory is configured, also as
    one JSON file per entry so repeated runs over static content skip
    tokenization. Disk access is serialized across processes with file locks.
    """

    def __init__(
        self,
        syntax_styler: SyntaxStyler,
        cache_dir: Optional[str] = None,
        max_entries: int = 1024,
    ):
        """
        Initialize the cache.

        Args:
            syntax_styler: Styler used on cache misses
            cache_dir: Directory for persistent entries; defaults to
                ``SYNTAX_STYLER_CACHE_DIR``, memory only when unset
            max_entries: Upper bound on in-memory entries
        """
        self.syntax_styler = syntax_styler
        self.cache_dir = Path(cache_dir) if cache_dir else None
        if self.cache_dir is None and get_cache_dir():
            self.cache_dir = Path(get_cache_dir())
        self.max_entries = max_entries
        self._entries: Dict[str, str] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def _entry_path(self, key: str) -> Path:
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self.cache_dir / CACHE_ENTRIES_DIR / f"{digest}.json"

    def _read_entry(self, key: str) -> Optional[str]:
        path = self._entry_path(key)
        if not path.is_file():
            return None
        lock = acquire_lock(str(path))
        try:
            with open(path, "r", encoding="utf-8") as f:
                entry = json.load(f)
        except (IOError, json.JSONDecodeError) as e:
            log.warning(f"Ignoring unreadable cache entry {path}: {e}")
            return None
        finally:
            release_lock(lock)
        if not isinstance(entry, dict):
            log.warning(f"Ignoring malformed cache entry {path}")
            return None
        if entry.get("key") != key:
            return None
        return entry.get("html")

    def _write_entry(self, key: str, html: str) -> None:
        path = self._entry_path(key)
        temp_path = path.with_suffix(".tmp")
        lock = acquire_lock(str(path))
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump({"key": key, "html": html}, f, separators=(",", ":"))
            # Atomic rename/replace
            os.replace(temp_path, path)
        except IOError as e:
            log.error(f"Error writing cache entry {path}: {e}")
            if temp_path.exists():
                os.remove(temp_path)
            raise CacheError(f"Could not write cache entry: {path}") from e
        finally:
            release_lock(lock)

    def get(self, lang: str, text: str) -> Optional[str]:
        """Returns cached markup, or None on a miss."""
        key = cache_key(lang, text)
        with self._lock:
            html = self._entries.get(key)
        if html is None and self.cache_dir is not None:
            html = self._read_entry(key)
            if html is not None:
                self._remember(key, html)
        return html

    def put(self, lang: str, text: str, html: str) -> None:
        key = cache_key(lang, text)
        self._remember(key, html)
        if self.cache_dir is not None:
            self._write_entry(key, html)

    def _remember(self, key: str, html: str) -> None:
        with self._lock:
            if key not in self._entries and len(self._entries) >= self.max_entries:
                # Evict the oldest entry
                self._entries.pop(next(iter(self._entries)))
            self._entries[key] = html

    def stylize(self, text: str, lang: str) -> str:
        """
        Render text as markup, reusing a cached rendering when available.

        Raises:
            UnsupportedLanguageError: If ``lang`` is not registered
            CacheError: If a persistent entry cannot be written
        """
        html = self.get(lang, text)
        if html is not None:
            self.hits += 1
            log.debug(f"Cache hit: {lang} ({len(text)} chars)")
            return html
        self.misses += 1
        log.debug(f"Cache miss: {lang} ({len(text)} chars)")
        html = self.syntax_styler.stylize(text, lang)
        self.put(lang, text, html)
        return html

    def clear(self) -> int:
        """
        Remove all entries, in memory and on disk.

        Returns:
            Number of persistent entries removed
        """
        with self._lock:
            self._entries.clear()
        removed = 0
        if self.cache_dir is None:
            return removed
        entries_dir = self.cache_dir / CACHE_ENTRIES_DIR
        if not entries_dir.is_dir():
            return removed
        for path in entries_dir.glob("*.json"):
            try:
                path.unlink()
                removed += 1
            except OSError as e:
                log.warning(f"Could not remove cache entry {path}: {e}")
        log.info(f"Cleared {removed} cache entries from {entries_dir}")
        return removed

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            size = len(self._entries)
        return {
            "entries": size,
            "hits": self.hits,
            "misses": self.misses,
            "cache_dir": str(self.cache_dir) if self.cache_dir else None,
        }
