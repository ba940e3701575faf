#!/usr/bin/env python3
"""
Dictionary loading and the letter-mask solver index used by the Spelling Bee
helpers.

Words are bucketed by the exact set of letters they use. A puzzle with one
required letter and k optional letters is solved by looking up each of the
2**k letter sets it allows, so query cost depends on the puzzle, not on the
size of the dictionary.

Usage:
    words, dict_data = load_words_from_json(DICTIONARY_PATH)
    mask_index = build_solver_index(words)
    all_words_for_seed("sunflow", "n", mask_index)
"""

import json
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from letter_masks import (
    check_mask,
    is_alphabetic,
    lowest_bit,
    mask_to_letters,
    pop_count,
    without_lowest_bit,
    word_to_mask,
)


# Configuration
DICTIONARY_PATH = Path(__file__).parent / "data" / "dictionaries" / "ubuntu-wamerican.txt"
MIN_WORD_LENGTH = 4
TOTAL_UNIQUE_LETTERS = 7


class DisjointnessError(ValueError):
    """Raised when the required and optional letter sets share letters."""

    def __init__(self, required: int, optional: int):
        self.overlap = required & optional
        super().__init__(
            f"Required and optional letters must be disjoint; "
            f"both contain: {mask_to_letters(self.overlap)}"
        )


@dataclass(frozen=True)
class Puzzle:
    """A required letter set plus an optional letter set, as masks."""
    required: int
    optional: int

    def __post_init__(self):
        check_mask(self.required)
        check_mask(self.optional)
        if self.required & self.optional:
            raise DisjointnessError(self.required, self.optional)

    @classmethod
    def from_letters(cls, required: str, optional: str) -> "Puzzle":
        return cls(word_to_mask(required), word_to_mask(optional))

    @property
    def letters(self) -> int:
        return self.required | self.optional


@dataclass(frozen=True)
class Dictionary:
    """An immutable word list with an identifier and display name."""
    id: str
    name: str
    words: Tuple[str, ...]
    definitions: Mapping[str, str] = field(default_factory=dict, compare=False, repr=False)

    def to_dict(self) -> Dict[str, object]:
        return {"id": self.id, "name": self.name, "words": list(self.words)}


def load_words_from_text(path: Path) -> List[str]:
    """Return the words from a text file with one word per line."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Dictionary file not found: {path}")
    with path.open("r", encoding="utf-8", errors="ignore") as f:
        return [line.strip() for line in f if line.strip()]


def load_words_from_json(path: Path) -> Tuple[List[str], Dict[str, str]]:
    """
    Load words from a JSON list of words or a JSON object mapping
    word -> definition.

    Returns:
        Tuple of (words, definitions). definitions is empty for a plain list.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Dictionary file not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, list):
        return [str(word).strip() for word in data], {}
    if isinstance(data, dict):
        definitions = {str(word).strip(): str(definition) for word, definition in data.items()}
        return list(definitions.keys()), definitions

    raise ValueError("Dictionary JSON must be either a list of words or a dict.")


def load_dictionary(path: Path, dictionary_id: Optional[str] = None, name: Optional[str] = None) -> Dictionary:
    """Load a Dictionary from a .json or plain text word list."""
    path = Path(path)
    if path.suffix.lower() == ".json":
        words, definitions = load_words_from_json(path)
    else:
        words, definitions = load_words_from_text(path), {}
    dictionary_id = dictionary_id or path.stem
    return Dictionary(
        id=dictionary_id,
        name=name or dictionary_id,
        words=tuple(words),
        definitions=definitions,
    )


class SolverIndex:
    """
    Words of a dictionary bucketed by letter-set mask.

    Only words with at least min_len characters, only letters a-z and at most
    TOTAL_UNIQUE_LETTERS distinct letters are indexed. The index is never
    modified after construction, so queries can run from many threads.
    """

    def __init__(self, words: Iterable[str], min_len: int = MIN_WORD_LENGTH):
        self.min_len = min_len
        kept: List[str] = []
        buckets: Dict[int, List[str]] = defaultdict(list)
        pangram_masks: Set[int] = set()

        for word in words:
            if len(word) < min_len or not is_alphabetic(word):
                continue
            word = word.lower()
            mask = word_to_mask(word)
            distinct = pop_count(mask)
            if distinct > TOTAL_UNIQUE_LETTERS:
                continue
            kept.append(word)
            buckets[mask].append(word)
            if distinct == TOTAL_UNIQUE_LETTERS:
                pangram_masks.add(mask)

        self.words: Tuple[str, ...] = tuple(kept)
        self.buckets: Dict[int, Tuple[str, ...]] = {k: tuple(v) for k, v in buckets.items()}
        self.pangram_masks = frozenset(pangram_masks)

    def __len__(self):
        return len(self.words)

    @property
    def indexed_count(self) -> int:
        return len(self.words)

    def basis_words(self) -> List[str]:
        """Indexed words with exactly TOTAL_UNIQUE_LETTERS distinct letters."""
        return [w for w in self.words if word_to_mask(w) in self.pangram_masks]

    def _bucket(self, mask: int) -> Tuple[str, ...]:
        return self.buckets.get(mask, ())

    def solutions_for(self, required: int, optional: int) -> Set[str]:
        """
        Return every indexed word whose letter set is `required` plus any
        subset of `optional`.

        Raises DisjointnessError if the two masks share a letter.
        """
        check_mask(required)
        check_mask(optional)
        if required & optional:
            raise DisjointnessError(required, optional)
        result: Set[str] = set()
        self._add_solutions(result, required, optional)
        return result

    def solutions_to(self, puzzle: Puzzle) -> Set[str]:
        return self.solutions_for(puzzle.required, puzzle.optional)

    def _add_solutions(self, result: Set[str], required: int, optional: int) -> None:
        if not optional:
            result.update(self._bucket(required))
            return
        bit = lowest_bit(optional)
        rest = without_lowest_bit(optional)
        self._add_solutions(result, required, rest)
        self._add_solutions(result, required | bit, rest)


def build_solver_index(words: Iterable[str], min_len: int = MIN_WORD_LENGTH) -> SolverIndex:
    """Build the solver index for a word list. Expensive; build once and reuse."""
    return SolverIndex(words, min_len=min_len)


def all_words_for_seed(
    seed: str,
    center_letter: str,
    mask_index: SolverIndex,
    min_len: int = MIN_WORD_LENGTH
) -> List[str]:
    """
    Find all indexed words spelled from the letters of `seed` that contain
    `center_letter`, sorted alphabetically.
    """
    seed_mask = word_to_mask(seed)
    if pop_count(seed_mask) > TOTAL_UNIQUE_LETTERS:
        raise ValueError(
            f"Seed '{seed}' has {pop_count(seed_mask)} distinct letters; "
            f"at most {TOTAL_UNIQUE_LETTERS} are allowed"
        )
    if len(center_letter) != 1:
        raise ValueError("Center must be a single letter")
    center_mask = word_to_mask(center_letter)
    if not center_mask & seed_mask:
        raise ValueError(f"Center letter '{center_letter}' is not in seed '{seed}'")

    solutions = mask_index.solutions_for(center_mask, seed_mask ^ center_mask)
    return sorted(w for w in solutions if len(w) >= min_len)


def is_pangram(word: str, letters: Sequence[str]) -> bool:
    """True if `word` uses every one of `letters`."""
    return word_to_mask(word) == word_to_mask("".join(letters))
