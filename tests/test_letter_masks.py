import random

import pytest

from letter_masks import (
    ALL_LETTERS_MASK,
    is_alphabetic,
    lowest_bit,
    mask_to_letters,
    pop_count,
    without_lowest_bit,
    word_to_mask,
)


def test_word_to_mask_sets_one_bit_per_letter():
    assert word_to_mask("a") == 1
    assert word_to_mask("z") == 1 << 25
    assert word_to_mask("abc") == 0b111
    assert word_to_mask("") == 0


def test_word_to_mask_ignores_order_case_and_repeats():
    rng = random.Random(7)
    for word in ["pinwheel", "strengths", "abcdefg", "mississippi"]:
        letters = list(word)
        rng.shuffle(letters)
        assert word_to_mask(word) == word_to_mask("".join(letters))
        assert word_to_mask(word) == word_to_mask(word + word[0] * 3)
        assert word_to_mask(word) == word_to_mask(word.upper())


def test_word_to_mask_rejects_non_letters():
    for word in ["don't", "café", "abc1", "two words"]:
        with pytest.raises(ValueError):
            word_to_mask(word)


def test_mask_to_letters_is_sorted_and_distinct():
    assert mask_to_letters(word_to_mask("pinwheel")) == "ehilnpw"
    assert mask_to_letters(0) == ""
    assert mask_to_letters(ALL_LETTERS_MASK) == "abcdefghijklmnopqrstuvwxyz"


def test_mask_round_trip_and_pop_count():
    rng = random.Random(3)
    for _ in range(200):
        mask = rng.getrandbits(26)
        letters = mask_to_letters(mask)
        assert pop_count(mask) == len(letters)
        assert word_to_mask(letters) == mask


def test_mask_to_letters_rejects_bits_outside_alphabet():
    with pytest.raises(ValueError):
        mask_to_letters(1 << 26)
    with pytest.raises(ValueError):
        mask_to_letters(-1)


def test_lowest_bit_helpers():
    mask = word_to_mask("dgk")
    assert lowest_bit(mask) == word_to_mask("d")
    assert without_lowest_bit(mask) == word_to_mask("gk")
    assert lowest_bit(0) == 0
    assert without_lowest_bit(0) == 0


def test_is_alphabetic():
    assert is_alphabetic("Pinwheel")
    assert not is_alphabetic("")
    assert not is_alphabetic("don't")
    assert not is_alphabetic("naïve")


def test_is_alphabetic_rejects_trailing_newline():
    assert not is_alphabetic("abc\n")
    assert not is_alphabetic("\nabc")
    assert not is_alphabetic("ab\nc")
