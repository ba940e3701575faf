#!/usr/bin/env python3
"""
Registry of dictionaries and their solver indexes.

Each dictionary is loaded and indexed the first time it is requested and the
result is reused afterwards. Concurrent requests for a dictionary that is not
built yet wait for a single build instead of each building their own.
"""

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from index_mask_dictionary import (
    MIN_WORD_LENGTH,
    Dictionary,
    SolverIndex,
    build_solver_index,
    load_dictionary,
)


DEFAULT_DICT_ID = "ubuntu-wamerican"
DICTIONARY_NAMES = {
    # http://manpages.ubuntu.com/manpages/bionic/man5/american-english.5.html
    "ubuntu-wamerican": "Ubuntu standard dictionary, American English",
}

Loader = Callable[[], Union[Dictionary, Sequence[str]]]


class UnknownDictionaryError(KeyError):
    def __init__(self, dictionary_id: str):
        self.dictionary_id = dictionary_id
        super().__init__(dictionary_id)

    def __str__(self):
        return f"Unknown dictionary: {self.dictionary_id}"


@dataclass(frozen=True)
class DictionaryWithIndex:
    dictionary: Dictionary
    index: SolverIndex

    @property
    def id(self) -> str:
        return self.dictionary.id

    @property
    def name(self) -> str:
        return self.dictionary.name

    @property
    def words(self) -> Tuple[str, ...]:
        return self.dictionary.words


class DictionaryRegistry:
    """Build-once cache of dictionaries keyed by id."""

    def __init__(self, min_len: int = MIN_WORD_LENGTH):
        self.min_len = min_len
        self._lock = threading.Lock()
        self._loaders: Dict[str, Tuple[str, Loader]] = {}
        self._build_locks: Dict[str, threading.Lock] = {}
        self._entries: Dict[str, DictionaryWithIndex] = {}

    def register(self, dictionary_id: str, name: str, loader: Loader) -> None:
        """Register a loader returning a Dictionary or a sequence of words."""
        with self._lock:
            if dictionary_id in self._loaders:
                raise ValueError(f"Dictionary already registered: {dictionary_id}")
            self._loaders[dictionary_id] = (name, loader)
            self._build_locks[dictionary_id] = threading.Lock()

    def register_file(self, path: Path, dictionary_id: Optional[str] = None, name: Optional[str] = None) -> str:
        path = Path(path)
        dictionary_id = dictionary_id or path.stem
        name = name or DICTIONARY_NAMES.get(dictionary_id, dictionary_id)
        self.register(dictionary_id, name, lambda: load_dictionary(path, dictionary_id, name))
        return dictionary_id

    def register_dictionary(self, dictionary: Dictionary) -> None:
        self.register(dictionary.id, dictionary.name, lambda: dictionary)

    def exists(self, dictionary_id: str) -> bool:
        with self._lock:
            return dictionary_id in self._loaders

    def ids(self) -> List[str]:
        with self._lock:
            return list(self._loaders)

    def is_built(self, dictionary_id: str) -> bool:
        with self._lock:
            return dictionary_id in self._entries

    def get(self, dictionary_id: str) -> DictionaryWithIndex:
        """Return the dictionary and its index, building them on first use."""
        with self._lock:
            if dictionary_id not in self._loaders:
                raise UnknownDictionaryError(dictionary_id)
            entry = self._entries.get(dictionary_id)
            if entry is not None:
                return entry
            name, loader = self._loaders[dictionary_id]
            build_lock = self._build_locks[dictionary_id]

        with build_lock:
            with self._lock:
                entry = self._entries.get(dictionary_id)
            if entry is not None:
                return entry

            entry = self._build(dictionary_id, name, loader)
            with self._lock:
                # evict()/clear() may have dropped the registration meanwhile
                if dictionary_id in self._loaders:
                    self._entries[dictionary_id] = entry
            return entry

    def _build(self, dictionary_id: str, name: str, loader: Loader) -> DictionaryWithIndex:
        loaded = loader()
        if isinstance(loaded, Dictionary):
            dictionary = loaded
        else:
            dictionary = Dictionary(id=dictionary_id, name=name, words=tuple(loaded))
        print(f"Building mask index for '{dictionary_id}' ({len(dictionary.words)} words)...")
        index = build_solver_index(dictionary.words, min_len=self.min_len)
        print(f"Indexed {index.indexed_count} words")
        return DictionaryWithIndex(dictionary=dictionary, index=index)

    def evict(self, dictionary_id: str) -> None:
        """Drop the built index; the next get() rebuilds it."""
        with self._lock:
            self._entries.pop(dictionary_id, None)

    def clear(self) -> None:
        """Drop every registration and built index."""
        with self._lock:
            self._entries.clear()
            self._loaders.clear()
            self._build_locks.clear()


def registry_from_directory(dictionary_dir: Path, min_len: int = MIN_WORD_LENGTH) -> DictionaryRegistry:
    """Register every .txt and .json word list in a directory, keyed by file stem."""
    registry = DictionaryRegistry(min_len=min_len)
    dictionary_dir = Path(dictionary_dir)
    if not dictionary_dir.is_dir():
        return registry
    for path in sorted(dictionary_dir.iterdir()):
        if path.suffix.lower() in (".txt", ".json"):
            registry.register_file(path)
    return registry
