import random
from collections import Counter

from geo_quiz.sampler import sample, shuffle


def test_shuffle_is_a_permutation() -> None:
    rng = random.Random(7)
    items = ["a", "b", "b", "c", "d", "e"]
    for _ in range(50):
        result = shuffle(items, rng)
        assert len(result) == len(items)
        assert Counter(result) == Counter(items)


def test_shuffle_does_not_mutate_input() -> None:
    items = [1, 2, 3, 4, 5]
    shuffle(items, random.Random(1))
    assert items == [1, 2, 3, 4, 5]


def test_shuffle_handles_empty_and_single() -> None:
    assert shuffle([]) == []
    assert shuffle(["only"]) == ["only"]


def test_shuffle_positions_are_roughly_uniform() -> None:
    rng = random.Random(1234)
    trials = 6000
    counts = {pos: Counter() for pos in range(3)}
    for _ in range(trials):
        for pos, item in enumerate(shuffle(["x", "y", "z"], rng)):
            counts[pos][item] += 1

    expected = trials / 3
    for pos in range(3):
        for item in ("x", "y", "z"):
            assert abs(counts[pos][item] - expected) < expected * 0.1


def test_shuffle_reaches_every_permutation() -> None:
    rng = random.Random(99)
    seen = {tuple(shuffle([1, 2, 3], rng)) for _ in range(500)}
    assert len(seen) == 6


def test_sample_truncates_to_n() -> None:
    items = list(range(20))
    result = sample(items, 5, random.Random(3))
    assert len(result) == 5
    assert len(set(result)) == 5
    assert set(result) <= set(items)


def test_sample_larger_than_input_returns_everything() -> None:
    items = ["a", "b", "c"]
    result = sample(items, 10, random.Random(3))
    assert sorted(result) == items


def test_sample_non_positive_n_is_empty() -> None:
    assert sample([1, 2, 3], 0) == []
    assert sample([1, 2, 3], -2) == []
