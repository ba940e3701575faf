#!/usr/bin/env python3
"""
Randomly print candidate basis words that:
  1. Contain exactly 7 distinct letters (letters may repeat).
  2. Have a wordfreq.word_frequency score above the threshold.

The candidates are pulled from the same dictionary the puzzle generator uses.
"""

import argparse
import random
from pathlib import Path
from typing import Iterable, List

from wordfreq import word_frequency

from index_mask_dictionary import DICTIONARY_PATH, load_dictionary
from generate_spelling_bee_puzzle import qualifies_as_basis


FREQUENCY_THRESHOLD = 7e-6
NUM_CANDIDATES = 10


def has_seven_distinct_letters(word: str) -> bool:
    """True if the word only has letters, is long enough and has exactly 7 unique ones."""
    return qualifies_as_basis(word)


def filter_candidates(words: Iterable[str], threshold: float = FREQUENCY_THRESHOLD) -> List[str]:
    """Filter to words that satisfy the letter and frequency constraints."""
    candidates: List[str] = []
    seen = set()

    for word in words:
        if not has_seven_distinct_letters(word):
            continue

        lowered = word.lower()
        if lowered in seen:
            continue
        if word_frequency(lowered, "en") > threshold:
            seen.add(lowered)
            candidates.append(lowered)

    return candidates


def main() -> None:
    parser = argparse.ArgumentParser(description="List random Spelling Bee basis word candidates")
    parser.add_argument("--dictionary", type=str, default=str(DICTIONARY_PATH))
    parser.add_argument("--count", type=int, default=NUM_CANDIDATES)
    parser.add_argument("--threshold", type=float, default=FREQUENCY_THRESHOLD)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()

    rng = random.Random(args.seed)
    dictionary = load_dictionary(Path(args.dictionary))
    candidates = filter_candidates(dictionary.words, args.threshold)

    if len(candidates) < args.count:
        raise RuntimeError(
            f"Only found {len(candidates)} candidates; need {args.count}."
        )

    chosen = rng.sample(candidates, args.count)

    print(f"Random {args.count} candidates (freq > {args.threshold}):")
    for word in chosen:
        freq = word_frequency(word, "en")
        print(f"- {word} (freq: {freq:.6f})")

    final_pick = rng.choice(chosen)
    print(f"\nRandomly selected candidate: {final_pick}")


if __name__ == "__main__":
    main()
