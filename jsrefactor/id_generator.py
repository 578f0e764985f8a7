"""Deterministic identifier generators used by the renaming passes.

Generators are infinite, non-restartable iterators driven by an internal
counter that starts at the construction seed.  Every emitted value is a pure
function of ``seed`` and the number of previous calls, so two generators built
with the same seed produce identical sequences.
"""

from __future__ import annotations

import string
from typing import Iterator, NamedTuple, Tuple

_DIGITS = string.digits + string.ascii_lowercase

ADJECTIVES: Tuple[str, ...] = (
    "amber", "ancient", "autumn", "billowing", "bitter", "black", "blue", "bold",
    "brave", "breezy", "bright", "broad", "calm", "clever", "cold", "cool",
    "crimson", "curly", "damp", "dark", "dawn", "delicate", "divine", "dry",
    "eager", "empty", "falling", "fancy", "flat", "floral", "fragrant", "frosty",
    "gentle", "green", "hidden", "holy", "icy", "jolly", "late", "lingering",
    "little", "lively", "long", "lucky", "misty", "morning", "muddy", "mute",
    "nameless", "noisy", "odd", "old", "orange", "patient", "plain", "polished",
    "proud", "purple", "quiet", "rapid", "raspy", "red", "restless", "rough",
)

NOUNS: Tuple[str, ...] = (
    "waterfall", "river", "breeze", "moon", "rain", "wind", "sea", "morning",
    "snow", "lake", "sunset", "pine", "shadow", "leaf", "dawn", "glitter",
    "forest", "hill", "cloud", "meadow", "sun", "glade", "bird", "brook",
    "butterfly", "bush", "dew", "dust", "field", "fire", "flower", "firefly",
    "feather", "grass", "haze", "mountain", "night", "pond", "darkness", "snowflake",
    "silence", "sound", "sky", "shape", "surf", "thunder", "violet", "water",
    "wildflower", "wave", "resonance", "dream", "cherry", "tree", "fog", "frost",
    "voice", "paper", "frog", "smoke", "star", "otter", "falcon", "harbor",
)

WORD_SPACE = len(ADJECTIVES) * len(NOUNS)
# Any multiplier coprime with WORD_SPACE makes the scramble a permutation.
SCRAMBLE_MULTIPLIER = 2017
SCRAMBLE_OFFSET = 1493


class IdResult(NamedTuple):
    value: str
    done: bool = False


def to_base36(value: int) -> str:
    if value < 0:
        raise ValueError("counter values are non-negative")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_DIGITS[remainder])
    return "".join(reversed(digits))


class BaseIdGenerator:
    """Emit the base-36 text of an incrementing counter."""

    def __init__(self, seed: int = 1) -> None:
        if seed < 0:
            raise ValueError("seed must be non-negative")
        self.counter = seed

    def _token(self, counter: int) -> str:
        return to_base36(counter)

    def step(self) -> IdResult:
        token = self._token(self.counter)
        self.counter += 1
        return IdResult(token)

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        return self.step().value


class MemorableIdGenerator(BaseIdGenerator):
    """Emit ``adjectiveNoun`` tokens, suffixed with a cycle number after the first lap.

    The counter is split into a cycle number and a word index; the index is
    passed through an affine permutation of the word space so consecutive
    counters give unrelated looking names.  Adjectives are lowercase and nouns
    capitalised, which keeps the concatenation unambiguous.
    """

    def _token(self, counter: int) -> str:
        cycle, index = divmod(counter, WORD_SPACE)
        scrambled = (index * SCRAMBLE_MULTIPLIER + SCRAMBLE_OFFSET) % WORD_SPACE
        adjective, noun = divmod(scrambled, len(NOUNS))
        token = ADJECTIVES[adjective] + NOUNS[noun].capitalize()
        return f"{token}{cycle}" if cycle else token


__all__ = [
    "ADJECTIVES",
    "BaseIdGenerator",
    "IdResult",
    "MemorableIdGenerator",
    "NOUNS",
    "to_base36",
]
