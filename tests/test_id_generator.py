from __future__ import annotations

import itertools

import pytest

from jsrefactor.id_generator import (
    ADJECTIVES,
    NOUNS,
    BaseIdGenerator,
    IdResult,
    MemorableIdGenerator,
    to_base36,
)


def test_base36_encoding() -> None:
    assert to_base36(0) == "0"
    assert to_base36(35) == "z"
    assert to_base36(36) == "10"
    with pytest.raises(ValueError):
        to_base36(-1)


def test_base_generator_counts_from_seed() -> None:
    gen = BaseIdGenerator(10)
    assert gen.step() == IdResult("a", False)
    assert next(gen) == "b"
    assert gen.counter == 12


def test_memorable_names_are_adjective_noun() -> None:
    gen = MemorableIdGenerator(1)
    value = gen.step().value
    split = next(index for index, char in enumerate(value) if char.isupper())
    adjective, noun = value[:split], value[split:]
    assert adjective in ADJECTIVES
    assert noun.lower() in NOUNS


def test_same_seed_gives_same_sequence() -> None:
    first = list(itertools.islice(MemorableIdGenerator(10), 20))
    second = list(itertools.islice(MemorableIdGenerator(10), 20))
    assert first == second
    assert first != list(itertools.islice(MemorableIdGenerator(11), 20))


def test_names_are_unique_across_cycles() -> None:
    gen = MemorableIdGenerator(0)
    names = [next(gen) for _ in range(len(ADJECTIVES) * len(NOUNS) + 50)]
    assert len(set(names)) == len(names)
    # The second lap carries a cycle suffix.
    assert names[-1][-1].isdigit()
    assert not names[0][-1].isdigit()


def test_generated_names_are_identifiers() -> None:
    gen = MemorableIdGenerator(3)
    for _ in range(200):
        assert gen.step().value.isidentifier()


def test_negative_seed_rejected() -> None:
    with pytest.raises(ValueError):
        MemorableIdGenerator(-1)
