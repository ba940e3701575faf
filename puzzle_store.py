#!/usr/bin/env python3
"""
Puzzle records stored as one JSON file per puzzle.

A record is the generated puzzle plus an id and timestamps:
    {
        "id": "2024-03-01",
        "createdOn": "2024-03-01T09:30:00-08:00",
        "updatedOn": null,
        "basisWord": "pinwheel",
        "distinctLetters": ["w", "h", "p", "e", "i", "n", "l"],
        "requiredLetter": "e",
        "optionalLetters": ["w", "h", "p", "i", "n", "l"],
        "dictionaryId": "ubuntu-wamerican",
        "solutions": ["pinwheel", ...]
    }
"""

import json
import random
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence
from zoneinfo import ZoneInfo

from dictionary_registry import DictionaryRegistry, DictionaryWithIndex
from generate_spelling_bee_puzzle import NoSolutionsError, build_puzzle_from_basis
from index_mask_dictionary import MIN_WORD_LENGTH, TOTAL_UNIQUE_LETTERS
from letter_masks import word_to_mask


TIME_ZONE = ZoneInfo("America/Los_Angeles")
DEFAULT_LIST_LIMIT = 7


class PuzzleStoreError(Exception):
    pass


class PuzzleUpdateError(PuzzleStoreError):
    pass


def now() -> datetime:
    return datetime.now(TIME_ZONE)


def puzzle_id_for_date(date: datetime) -> str:
    """Puzzle-of-the-day id, e.g. 2024-03-01."""
    return date.strftime("%Y-%m-%d")


def is_puzzle_data(value: Any) -> bool:
    """True if `value` looks like a complete, consistent puzzle record."""
    if not isinstance(value, dict):
        return False
    try:
        basis_word = value["basisWord"]
        required = value["requiredLetter"]
        distinct = value["distinctLetters"]
        optional = value["optionalLetters"]
        if not (
            isinstance(value["id"], str)
            and isinstance(value["createdOn"], str)
            and isinstance(basis_word, str)
            and isinstance(required, str)
            and isinstance(distinct, list)
            and isinstance(optional, list)
        ):
            return False
    except KeyError:
        return False

    if len(basis_word) < MIN_WORD_LENGTH or len(required) != 1:
        return False
    if len(set(distinct)) != TOTAL_UNIQUE_LETTERS or len(distinct) != TOTAL_UNIQUE_LETTERS:
        return False
    if required in optional or set(optional) | {required} != set(distinct):
        return False
    return set(distinct) == set(basis_word.lower())


class PuzzleStore:
    """Reads and writes puzzle records under `data_dir`."""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)
        self._lock = threading.Lock()

    def _path(self, puzzle_id: str) -> Path:
        if (
            not isinstance(puzzle_id, str)
            or not puzzle_id
            or "/" in puzzle_id
            or "\\" in puzzle_id
            or puzzle_id.startswith(".")
        ):
            raise PuzzleStoreError(f"Invalid puzzle id: {puzzle_id!r}")
        return self.data_dir / f"{puzzle_id}.json"

    def _write(self, record: Dict[str, Any]) -> None:
        path = self._path(record["id"])
        with self._lock:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(record, f, indent=2, ensure_ascii=False)

    def create_puzzle(
        self,
        entry: DictionaryWithIndex,
        basis_word: str,
        created_on: Optional[datetime] = None,
        puzzle_id: Optional[str] = None,
        rng: Optional[random.Random] = None
    ) -> Dict[str, Any]:
        """Generate a puzzle from `basis_word` and save it, overwriting any record with the same id."""
        created_on = created_on or now()
        puzzle_id = puzzle_id or puzzle_id_for_date(created_on)
        puzzle = build_puzzle_from_basis(basis_word, entry.index, rng=rng, dictionary_id=entry.id)

        record = {
            "id": puzzle_id,
            "createdOn": created_on.isoformat(),
            "updatedOn": None,
            **puzzle.to_dict(),
        }
        if not is_puzzle_data(record):
            raise PuzzleStoreError("Invalid puzzle data")
        self._write(record)
        return record

    def get_puzzle(self, puzzle_id: str) -> Optional[Dict[str, Any]]:
        path = self._path(puzzle_id)
        if not path.exists():
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError:
            return None
        return data if is_puzzle_data(data) else None

    def list_puzzles(self, limit: int = DEFAULT_LIST_LIMIT) -> List[Dict[str, Any]]:
        if not self.data_dir.is_dir():
            return []
        puzzles = []
        for path in sorted(self.data_dir.glob("*.json")):
            if len(puzzles) >= limit:
                break
            record = self.get_puzzle(path.stem)
            if record is not None:
                puzzles.append(record)
        return puzzles

    def update_puzzle(
        self,
        puzzle_id: str,
        registry: DictionaryRegistry,
        basis_word: Optional[str] = None,
        required_letter: Optional[str] = None,
        optional_letters: Optional[Sequence[str]] = None,
        rng: Optional[random.Random] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Change the basis word, or the required/optional split, of a stored
        puzzle and recompute its solutions. Returns None if no such puzzle.
        """
        existing = self.get_puzzle(puzzle_id)
        if existing is None:
            return None

        if basis_word is not None:
            if not isinstance(basis_word, str) or not basis_word.strip():
                raise PuzzleUpdateError("Missing basis word")
            if basis_word.strip().lower() == existing["basisWord"]:
                return existing
            entry = registry.get(existing["dictionaryId"])
            puzzle = build_puzzle_from_basis(basis_word, entry.index, rng=rng, dictionary_id=entry.id)
            record = {
                "id": puzzle_id,
                "createdOn": existing["createdOn"],
                "updatedOn": now().isoformat(),
                **puzzle.to_dict(),
            }
            self._write(record)
            return record

        distinct = existing["distinctLetters"]
        required = existing["requiredLetter"]
        if required_letter is not None:
            if not isinstance(required_letter, str) or not required_letter.strip():
                raise PuzzleUpdateError("Missing required letter")
            required_letter = required_letter.strip().lower()
            if len(required_letter) != 1 or required_letter not in distinct:
                raise PuzzleUpdateError("Invalid required letter. Required letter must be one letter of the basis word")
            required = required_letter

        allowed = [letter for letter in distinct if letter != required]
        if optional_letters is not None:
            if not isinstance(optional_letters, (list, tuple)) or not all(isinstance(l, str) for l in optional_letters):
                raise PuzzleUpdateError("Invalid optional letters. Expected a list of letters.")
            optional_letters = [letter.lower() for letter in optional_letters]
            if required in optional_letters:
                raise PuzzleUpdateError(
                    "Invalid optional letters. Required letter must not be in the optional letters."
                )
            if sorted(optional_letters) != sorted(allowed):
                raise PuzzleUpdateError(
                    "Invalid optional letters. Optional letters must be the distinct letters "
                    "of the basis word without the required letter."
                )
            optional = list(optional_letters)
        elif required_letter is not None:
            optional = allowed
        else:
            return existing

        entry = registry.get(existing["dictionaryId"])
        solutions = entry.index.solutions_for(word_to_mask(required), word_to_mask("".join(optional)))
        if not solutions:
            raise NoSolutionsError(existing["basisWord"], required)

        record = dict(existing)
        record.update({
            "requiredLetter": required,
            "optionalLetters": optional,
            "solutions": list(solutions),
            "updatedOn": now().isoformat(),
        })
        self._write(record)
        return record
