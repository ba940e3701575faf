import pytest

from index_mask_dictionary import Dictionary, build_solver_index


WORDS = [
    "pinwheel", "wheel", "whine", "while", "pine", "line", "nine",
    "peel", "heel", "hewn", "whip", "Apple", "abcdefg", "bdfg",
    "strengths", "don't", "xyz", "ab",
]


@pytest.fixture
def words():
    return list(WORDS)


@pytest.fixture
def index(words):
    return build_solver_index(words)


@pytest.fixture
def dictionary(words):
    return Dictionary(id="test-dict", name="Test dictionary", words=tuple(words))
