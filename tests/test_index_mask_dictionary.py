import json
from unittest import mock

import pytest

from index_mask_dictionary import (
    DisjointnessError,
    Puzzle,
    all_words_for_seed,
    build_solver_index,
    is_pangram,
    load_dictionary,
    load_words_from_json,
    load_words_from_text,
)
from letter_masks import word_to_mask


def test_filters_short_non_alpha_and_wide_words(index):
    assert "abcdefg" in index.words
    assert "bdfg" in index.words
    assert "xyz" not in index.words
    assert "ab" not in index.words
    assert "don't" not in index.words
    # 8 distinct letters
    assert build_solver_index(["abcdefgh"]).words == ()


def test_indexed_words_are_lowercased(index):
    assert "apple" in index.words
    assert "Apple" not in index.words


def test_small_dictionary_example():
    index = build_solver_index(["abcdefg", "bdfg", "xyz"])
    assert index.words == ("abcdefg", "bdfg")
    assert set(index.buckets) == {word_to_mask("abcdefg"), word_to_mask("bdfg")}
    assert index.pangram_masks == frozenset({word_to_mask("abcdefg")})


def test_buckets_keep_duplicates_in_order():
    index = build_solver_index(["stop", "pots", "tops", "stop"])
    assert index.buckets[word_to_mask("stop")] == ("stop", "pots", "tops", "stop")


def test_solutions_require_the_required_letter():
    index = build_solver_index(["abcdefg", "bdfg", "xyz"])
    assert index.solutions_for(word_to_mask("a"), word_to_mask("bcdefg")) == {"abcdefg"}


def test_solutions_exclude_words_with_letters_outside_the_puzzle():
    index = build_solver_index(["abcdefg", "bdfg", "xyz"])
    assert index.solutions_for(word_to_mask("b"), word_to_mask("defg")) == {"bdfg"}


def test_solutions_for_pinwheel(index):
    solutions = index.solutions_for(word_to_mask("w"), word_to_mask("pinhel"))
    assert solutions == {"pinwheel", "wheel", "whine", "while", "hewn", "whip"}


def test_solutions_to_puzzle(index):
    puzzle = Puzzle.from_letters("e", "pinwhl")
    assert index.solutions_to(puzzle) == {
        "pinwheel", "wheel", "whine", "while", "pine", "line", "nine", "peel", "heel", "hewn",
    }


def test_multi_letter_required_set(index):
    assert index.solutions_for(word_to_mask("wh"), word_to_mask("el")) == {"wheel"}


def test_overlapping_letter_sets_are_rejected(index):
    with pytest.raises(DisjointnessError) as excinfo:
        index.solutions_for(word_to_mask("e"), word_to_mask("eln"))
    assert excinfo.value.overlap == word_to_mask("e")
    with pytest.raises(DisjointnessError):
        Puzzle.from_letters("e", "ep")


def test_masks_outside_alphabet_are_rejected(index):
    with pytest.raises(ValueError):
        index.solutions_for(1 << 26, 0)


def test_one_bucket_lookup_per_optional_subset(index):
    with mock.patch.object(index, "_bucket", wraps=index._bucket) as bucket:
        index.solutions_for(word_to_mask("e"), word_to_mask("pinwhl"))
    assert bucket.call_count == 2 ** 6

    bigger = build_solver_index(list(index.words) * 50 + ["zebra", "quartz", "jumping"])
    with mock.patch.object(bigger, "_bucket", wraps=bigger._bucket) as bucket:
        bigger.solutions_for(word_to_mask("e"), word_to_mask("pinwhl"))
    assert bucket.call_count == 2 ** 6

    with mock.patch.object(index, "_bucket", wraps=index._bucket) as bucket:
        index.solutions_for(word_to_mask("e"), 0)
    assert bucket.call_count == 1


def test_building_twice_gives_equal_buckets(words):
    first = build_solver_index(words)
    second = build_solver_index(words)
    assert first.buckets == second.buckets
    assert first.pangram_masks == second.pangram_masks


def test_basis_words(index):
    assert index.basis_words() == ["pinwheel", "abcdefg", "strengths"]


def test_all_words_for_seed(index):
    assert all_words_for_seed("pinwheel", "w", index) == ["hewn", "pinwheel", "wheel", "while", "whine", "whip"]
    assert all_words_for_seed("pinwheel", "w", index, min_len=6) == ["pinwheel"]
    with pytest.raises(ValueError):
        all_words_for_seed("pinwheel", "z", index)
    with pytest.raises(ValueError):
        all_words_for_seed("abcdefgh", "a", index)


def test_is_pangram():
    assert is_pangram("pinwheel", ["p", "i", "n", "w", "h", "e", "l"])
    assert not is_pangram("wheel", "pinwhel")


def test_load_words_from_text(tmp_path):
    path = tmp_path / "words.txt"
    path.write_text("apple\n\n  banana \ncherry\n", encoding="utf-8")
    assert load_words_from_text(path) == ["apple", "banana", "cherry"]


def test_load_words_from_json(tmp_path):
    list_path = tmp_path / "list.json"
    list_path.write_text(json.dumps(["apple", "banana"]), encoding="utf-8")
    assert load_words_from_json(list_path) == (["apple", "banana"], {})

    dict_path = tmp_path / "defs.json"
    dict_path.write_text(json.dumps({"apple": "a fruit"}), encoding="utf-8")
    assert load_words_from_json(dict_path) == (["apple"], {"apple": "a fruit"})

    bad_path = tmp_path / "bad.json"
    bad_path.write_text("42", encoding="utf-8")
    with pytest.raises(ValueError):
        load_words_from_json(bad_path)


def test_load_dictionary(tmp_path):
    path = tmp_path / "ubuntu-wamerican.txt"
    path.write_text("pinwheel\nwheel\n", encoding="utf-8")
    dictionary = load_dictionary(path)
    assert dictionary.id == "ubuntu-wamerican"
    assert dictionary.words == ("pinwheel", "wheel")
    assert dictionary.to_dict() == {
        "id": "ubuntu-wamerican", "name": "ubuntu-wamerican", "words": ["pinwheel", "wheel"],
    }

    with pytest.raises(FileNotFoundError):
        load_dictionary(tmp_path / "missing.txt")


def test_unstripped_words_are_skipped_not_fatal():
    index = build_solver_index(["wheel\n", "pinwheel", "line\r"])
    assert index.words == ("pinwheel",)
