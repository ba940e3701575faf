#!/usr/bin/env python3
"""
Generate a Spelling Bee puzzle from a dictionary.
Picks a random basis word with exactly 7 distinct letters (or uses the one
given on the command line), picks a required letter from it, and finds all
valid words with the solver index from index_mask_dictionary.py.
"""

import argparse
import json
import random
import sys
import threading
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Any, Optional, Sequence, Tuple

from wordfreq import word_frequency

from index_mask_dictionary import (
    DICTIONARY_PATH,
    MIN_WORD_LENGTH,
    TOTAL_UNIQUE_LETTERS,
    SolverIndex,
    build_solver_index,
    load_dictionary,
)
from letter_masks import is_alphabetic, pop_count, word_to_mask


# Configuration
MIN_WORDS_REQUIRED = 20
DEFAULT_MAX_ATTEMPTS = 100_000
DEFAULT_MAX_PUZZLE_ATTEMPTS = 50
PANGRAM_BONUS = 7
OUTPUT_DIR = Path(__file__).parent / "generated_jsons"


class PuzzleGenerationError(Exception):
    """Base class for puzzle generation failures."""


class InvalidBasisWordError(PuzzleGenerationError):
    def __init__(self, basis_word: str, distinct_count: int):
        self.basis_word = basis_word
        self.distinct_count = distinct_count
        super().__init__(
            f"Invalid basis word: {basis_word}. This word has {distinct_count} distinct letters, "
            f"but the puzzle must have {TOTAL_UNIQUE_LETTERS}."
        )


class NoSolutionsError(PuzzleGenerationError):
    def __init__(self, basis_word: str, required_letter: str):
        self.basis_word = basis_word
        self.required_letter = required_letter
        super().__init__(
            f"No solutions found for puzzle with basis word {basis_word} "
            f"and required letter {required_letter}."
        )


class NoQualifyingWordError(PuzzleGenerationError):
    def __init__(self, attempts: int, reason: str = "retry budget exhausted"):
        self.attempts = attempts
        super().__init__(f"No qualifying basis word found after {attempts} attempt(s): {reason}")


@dataclass(frozen=True)
class PuzzleCore:
    """A generated puzzle without the id and timestamps added by storage."""
    basis_word: str
    distinct_letters: Tuple[str, ...]
    required_letter: str
    optional_letters: Tuple[str, ...]
    dictionary_id: Optional[str]
    solutions: Tuple[str, ...]

    @property
    def letters(self) -> str:
        return self.required_letter + "".join(self.optional_letters)

    @property
    def pangrams(self) -> List[str]:
        target = word_to_mask(self.letters)
        return [w for w in self.solutions if word_to_mask(w) == target]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "basisWord": self.basis_word,
            "distinctLetters": list(self.distinct_letters),
            "requiredLetter": self.required_letter,
            "optionalLetters": list(self.optional_letters),
            "dictionaryId": self.dictionary_id,
            "solutions": list(self.solutions),
        }


def qualifies_as_basis(word: str, min_len: int = MIN_WORD_LENGTH) -> bool:
    """True if the word is long enough and has exactly 7 distinct letters."""
    return (
        len(word) >= min_len
        and is_alphabetic(word)
        and pop_count(word_to_mask(word)) == TOTAL_UNIQUE_LETTERS
    )


def pick_random_basis_word(
    words: Sequence[str],
    rng: Optional[random.Random] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    timeout: Optional[float] = None,
    cancel_event: Optional[threading.Event] = None
) -> str:
    """
    Sample random words until one qualifies as a basis word.

    Sampling stops with NoQualifyingWordError after max_attempts draws, once
    `timeout` seconds have passed, or when cancel_event is set.
    """
    rng = rng or random
    if not words:
        raise NoQualifyingWordError(0, "word list is empty")

    deadline = time.monotonic() + timeout if timeout is not None else None
    for attempt in range(max_attempts):
        if cancel_event is not None and cancel_event.is_set():
            raise NoQualifyingWordError(attempt, "cancelled")
        if deadline is not None and time.monotonic() >= deadline:
            raise NoQualifyingWordError(attempt, f"timed out after {timeout} seconds")

        word = words[rng.randrange(len(words))]
        if qualifies_as_basis(word):
            return word.lower()

    raise NoQualifyingWordError(max_attempts)


def build_puzzle_from_basis(
    basis_word: str,
    index: SolverIndex,
    rng: Optional[random.Random] = None,
    dictionary_id: Optional[str] = None
) -> PuzzleCore:
    """
    Build a puzzle from a basis word with exactly 7 distinct letters.

    The required letter is drawn from the word's characters, so repeated
    letters are proportionally more likely. The distinct letters are returned
    in shuffled order.
    """
    rng = rng or random
    basis_word = basis_word.strip().lower()
    if not is_alphabetic(basis_word):
        raise InvalidBasisWordError(basis_word, len(set(basis_word)))
    distinct_count = pop_count(word_to_mask(basis_word))
    if distinct_count != TOTAL_UNIQUE_LETTERS:
        raise InvalidBasisWordError(basis_word, distinct_count)

    required_letter = rng.choice(basis_word)
    distinct_letters = list(dict.fromkeys(basis_word))
    rng.shuffle(distinct_letters)
    optional_letters = [letter for letter in distinct_letters if letter != required_letter]

    solutions = index.solutions_for(
        word_to_mask(required_letter),
        word_to_mask("".join(optional_letters)),
    )
    if not solutions:
        raise NoSolutionsError(basis_word, required_letter)

    return PuzzleCore(
        basis_word=basis_word,
        distinct_letters=tuple(distinct_letters),
        required_letter=required_letter,
        optional_letters=tuple(optional_letters),
        dictionary_id=dictionary_id,
        solutions=tuple(solutions),
    )


def generate_random_puzzle(
    words: Sequence[str],
    index: SolverIndex,
    rng: Optional[random.Random] = None,
    min_solutions: int = 1,
    max_puzzle_attempts: int = DEFAULT_MAX_PUZZLE_ATTEMPTS,
    dictionary_id: Optional[str] = None,
    timeout: Optional[float] = None,
    cancel_event: Optional[threading.Event] = None
) -> PuzzleCore:
    """
    Pick random basis words until one yields a puzzle with at least
    `min_solutions` solutions.
    """
    deadline = time.monotonic() + timeout if timeout is not None else None

    for attempt in range(max_puzzle_attempts):
        remaining = None
        if deadline is not None:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise NoQualifyingWordError(attempt, f"timed out after {timeout} seconds")

        basis_word = pick_random_basis_word(words, rng=rng, timeout=remaining, cancel_event=cancel_event)
        try:
            puzzle = build_puzzle_from_basis(basis_word, index, rng=rng, dictionary_id=dictionary_id)
        except NoSolutionsError:
            continue
        if len(puzzle.solutions) >= min_solutions:
            return puzzle

    raise NoQualifyingWordError(
        max_puzzle_attempts,
        f"no basis word produced >= {min_solutions} solutions"
    )


def word_points(word: str, is_pangram: bool = False) -> int:
    """4-letter words score 1, longer words score their length, pangrams +7."""
    points = 1 if len(word) == 4 else len(word)
    if is_pangram:
        points += PANGRAM_BONUS
    return points


def max_score(puzzle: PuzzleCore) -> int:
    pangrams = set(puzzle.pangrams)
    return sum(word_points(word, word in pangrams) for word in puzzle.solutions)


def generate_puzzle_json(
    puzzle: PuzzleCore,
    dict_data: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    """
    Build the puzzle JSON with words sorted by frequency (high to low).

    Args:
        puzzle: The generated puzzle
        dict_data: Optional word -> definition mapping

    Returns:
        Dictionary with puzzle data
    """
    dict_data = dict_data or {}
    pangrams = set(puzzle.pangrams)

    words_with_freq = [(word, word_frequency(word, 'en')) for word in puzzle.solutions]
    # Sort by frequency (descending), then alphabetically
    words_with_freq.sort(key=lambda x: (-x[1], x[0]))

    word_entries = []
    for word, freq in words_with_freq:
        word_entries.append({
            "word": word,
            "frequency": freq,
            "definition": dict_data.get(word, "No definition available"),
            "is_pangram": word in pangrams,
            "points": word_points(word, word in pangrams)
        })

    result = puzzle.to_dict()
    result["solutions"] = [entry["word"] for entry in word_entries]
    result.update({
        "pangrams": sorted(pangrams),
        "total_words": len(word_entries),
        "max_score": max_score(puzzle),
        "words": word_entries
    })
    return result


def main():
    """Main function."""
    parser = argparse.ArgumentParser(
        description='Generate a Spelling Bee puzzle from a dictionary word list',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python generate_spelling_bee_puzzle.py --dictionary words.txt
  python generate_spelling_bee_puzzle.py --dictionary words.txt --seed 42
  python generate_spelling_bee_puzzle.py --dictionary words.txt --basis-word pinwheel
        """
    )
    parser.add_argument(
        '--dictionary',
        type=str,
        default=str(DICTIONARY_PATH),
        help=f'Path to dictionary file, .txt or .json (default: {DICTIONARY_PATH})'
    )
    parser.add_argument(
        '--dictionary-id',
        type=str,
        default=None,
        help='Identifier recorded in the puzzle (default: dictionary file name)'
    )
    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help='Random seed for reproducible results'
    )
    parser.add_argument(
        '--basis-word',
        type=str,
        default=None,
        help='Use this word (exactly 7 distinct letters) instead of a random one'
    )
    parser.add_argument(
        '--min-words',
        type=int,
        default=MIN_WORDS_REQUIRED,
        help=f'Minimum number of words required (default: {MIN_WORDS_REQUIRED})'
    )
    parser.add_argument(
        '--max-attempts',
        type=int,
        default=DEFAULT_MAX_PUZZLE_ATTEMPTS,
        help=f'Random basis words to try before giving up (default: {DEFAULT_MAX_PUZZLE_ATTEMPTS})'
    )
    parser.add_argument(
        '--output', '-o',
        type=str,
        default=None,
        help='Output filename (default: auto-generated with timestamp)'
    )
    parser.add_argument(
        '--output-dir',
        type=str,
        default=str(OUTPUT_DIR),
        help=f'Directory for generated puzzles (default: {OUTPUT_DIR})'
    )

    args = parser.parse_args()

    rng = random.Random(args.seed)
    if args.seed is not None:
        print(f"Using random seed: {args.seed}")

    print("=" * 80)
    print("Spelling Bee Puzzle Generator")
    print("=" * 80)
    print()

    # Load dictionary
    print(f"Loading dictionary from: {args.dictionary}")
    try:
        dictionary = load_dictionary(Path(args.dictionary), dictionary_id=args.dictionary_id)
    except (FileNotFoundError, ValueError, json.JSONDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"✓ Loaded {len(dictionary.words)} words from dictionary")
    print()

    # Build solver index
    print("Building mask index (this may take a moment)...")
    mask_index = build_solver_index(dictionary.words)
    print(f"✓ Indexed {mask_index.indexed_count} words (length >= {MIN_WORD_LENGTH})")
    print()

    try:
        if args.basis_word:
            print(f"Attempting to build puzzle using provided basis word: '{args.basis_word}'")
            puzzle = build_puzzle_from_basis(args.basis_word, mask_index, rng=rng, dictionary_id=dictionary.id)
            if len(puzzle.solutions) < args.min_words:
                print(
                    f"\nERROR: Basis word '{args.basis_word}' with required letter "
                    f"'{puzzle.required_letter}' only produces {len(puzzle.solutions)} words "
                    f"(need {args.min_words}).",
                    file=sys.stderr
                )
                print("Consider lowering --min-words or choosing a different basis word.", file=sys.stderr)
                sys.exit(1)
        else:
            print(f"Searching for a basis word with >= {args.min_words} valid words...")
            puzzle = generate_random_puzzle(
                dictionary.words,
                mask_index,
                rng=rng,
                min_solutions=args.min_words,
                max_puzzle_attempts=args.max_attempts,
                dictionary_id=dictionary.id
            )
    except PuzzleGenerationError as e:
        print(f"\nERROR: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"✓ Found {len(puzzle.solutions)} words for basis word '{puzzle.basis_word}' "
          f"with required letter '{puzzle.required_letter}'")
    print()

    print("Generating puzzle JSON with word frequencies...")
    puzzle_data = generate_puzzle_json(puzzle, dictionary.definitions)

    # Determine output filename
    if args.output:
        output_filename = args.output
        if not output_filename.endswith('.json'):
            output_filename += '.json'
    else:
        timestamp = datetime.now().strftime("%Y-%m-%d-%H-%M")
        output_filename = f"spelling_bee_puzzle_{puzzle.basis_word}_{timestamp}.json"

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / output_filename

    print(f"Saving puzzle to: {output_path}")
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(puzzle_data, f, indent=2, ensure_ascii=False)
    print("✓ Saved puzzle JSON")
    print()

    # Display summary
    print("=" * 80)
    print("PUZZLE SUMMARY:")
    print("=" * 80)
    print(f"Basis word: {puzzle.basis_word}")
    print(f"Distinct letters: {', '.join(puzzle.distinct_letters)}")
    print(f"Required letter: {puzzle.required_letter} (required in all words)")
    print(f"Total valid words: {puzzle_data['total_words']}")
    print(f"Pangrams: {', '.join(puzzle_data['pangrams'])}")
    print(f"Maximum score: {puzzle_data['max_score']}")
    print()
    print("Top 10 words by frequency:")
    for i, entry in enumerate(puzzle_data['words'][:10], 1):
        print(f"  {i:2}. {entry['word']:20} (freq: {entry['frequency']:.2e})")
    print()
    print(f"\nFull path to generated JSON: {output_path.resolve()}\n")


if __name__ == "__main__":
    main()
