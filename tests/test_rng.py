import pytest

from delve.rng import Mulberry32, choice, create_rng, derive_seed, rand_int, seed_from, shuffle, weighted_choice


def test_mulberry_is_deterministic_and_in_range():
    a = Mulberry32(42)
    b = Mulberry32(42)
    draws = [a() for _ in range(200)]
    assert draws == [b() for _ in range(200)]
    assert all(0.0 <= d < 1.0 for d in draws)
    assert draws != [Mulberry32(43)() for _ in range(200)]


def test_state_resumes_stream():
    a = Mulberry32(9)
    for _ in range(5):
        a()
    resumed = Mulberry32(a.state)
    assert [a() for _ in range(10)] == [resumed() for _ in range(10)]


def test_create_rng_without_seed_still_returns_floats():
    rng = create_rng(None)
    assert 0.0 <= rng() < 1.0


def test_derived_and_drawn_seeds_are_32_bit():
    assert 0 <= derive_seed(2**40 + 5, 0xDEADBEEF) < 2**32
    assert 0 <= seed_from(Mulberry32(1)) < 2**32


def test_rand_int_bounds(seq):
    assert rand_int(seq(0.0), 6) == 0
    assert rand_int(seq(0.9999999), 6) == 5
    assert rand_int(seq(0.5), 1) == 0
    assert rand_int(seq(0.5), 0) == 0


def test_shuffle_is_a_permutation():
    items = list(range(10))
    shuffle(Mulberry32(3), items)
    assert sorted(items) == list(range(10))


def test_choice_and_weighted_choice(seq):
    assert choice(seq(0.5), ["a", "b", "c"]) == "b"
    with pytest.raises(IndexError):
        choice(seq(0.5), [])
    assert weighted_choice(seq(0.0), [("x", 0), ("y", 1)]) == "y"
    assert weighted_choice(seq(0.99), [("x", 1), ("y", 1)]) == "y"
    with pytest.raises(ValueError):
        weighted_choice(seq(0.5), [("x", 0)])
    with pytest.raises(ValueError):
        weighted_choice(seq(0.5), [("x", -1)])
