#!/usr/bin/env python3
"""
Letter-set bit masks over the 26 lowercase letters.

Bit i of a mask is set iff the i-th letter of the alphabet ('a' = bit 0) is
present. Masks ignore letter order and repetition, so "teeth" and "thet" map
to the same value.
"""

import re


ALPHABET = "abcdefghijklmnopqrstuvwxyz"
ALPHABET_SIZE = len(ALPHABET)
ALL_LETTERS_MASK = (1 << ALPHABET_SIZE) - 1

_ALPHA_RE = re.compile(r"[a-z]+")
_ORD_A = ord("a")


def is_alphabetic(word: str) -> bool:
    """True if the case-folded word is non-empty and only uses a-z."""
    return bool(_ALPHA_RE.fullmatch(word.lower()))


def word_to_mask(word: str) -> int:
    """Return the letter-set mask for a word (case-insensitive).

    Raises ValueError on any character outside a-z; callers that handle
    arbitrary dictionary entries should check is_alphabetic() first.
    """
    mask = 0
    for ch in word.lower():
        offset = ord(ch) - _ORD_A
        if offset < 0 or offset >= ALPHABET_SIZE:
            raise ValueError(f"Unsupported character {ch!r} in {word!r} (use a-z)")
        mask |= 1 << offset
    return mask


def mask_to_letters(mask: int) -> str:
    """Return the letters in a mask, ascending, each exactly once."""
    check_mask(mask)
    letters = []
    while mask:
        bit = lowest_bit(mask)
        letters.append(ALPHABET[bit.bit_length() - 1])
        mask ^= bit
    return "".join(letters)


def check_mask(mask: int) -> None:
    if mask < 0 or mask & ~ALL_LETTERS_MASK:
        raise ValueError(f"Mask {mask:#x} has bits outside the {ALPHABET_SIZE}-letter alphabet")


def pop_count(mask: int) -> int:
    return mask.bit_count()


def lowest_bit(mask: int) -> int:
    """Isolate the lowest set bit (0 for an empty mask)."""
    return mask & -mask


def without_lowest_bit(mask: int) -> int:
    return mask ^ lowest_bit(mask)
