"""Seeded random streams for level generation.

A master seed fans out into named streams, one per generation concern. Each
stream's seed is derived from ``"{master}:{domain}"`` alone, so a level is
reproducible from (master seed, depth) and a preset that draws more numbers
never shifts the levels generated at other depths.

Streams are ordinary ``random.Random`` objects. Stages never fetch one: the
caller hands a single stream to ``BuilderChain.build_map`` and the chain passes
it to every stage in order::

    provider = RNGProvider(config.RANDOM_SEED)
    chain.build_map(provider.level(depth))

Domains used here:
    - ``map.level.<depth>``  one stream per dungeon depth
"""

from __future__ import annotations

import zlib
from random import Random
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from undercroft.types import RandomSeed

# Every stage takes its randomness through this alias.
RNG: TypeAlias = Random


def derive_seed(master_seed: RandomSeed, domain: str) -> int | None:
    """Seed for ``domain`` under ``master_seed``; None means system entropy.

    crc32 is stable across processes, unlike the salted builtin hash().
    """
    if master_seed is None:
        return None
    return zlib.crc32(f"{master_seed}:{domain}".encode())


class RNGStream(Random):
    """A Random seeded for one domain of a master seed."""

    def __new__(cls, domain: str = "", master_seed: RandomSeed = None) -> RNGStream:
        # The C base only accepts a single seed argument.
        return super().__new__(cls)

    def __init__(self, domain: str = "", master_seed: RandomSeed = None) -> None:
        self.domain = domain
        super().__init__(derive_seed(master_seed, domain))


def roll_dice(rng: RNG, n: int, sides: int) -> int:
    """Roll ``n`` dice with ``sides`` faces each and return the total.

    A die with fewer than one side always rolls 0, so a size derived from a
    zero-width room still rolls.
    """
    if sides < 1:
        return 0
    return sum(rng.randint(1, sides) for _ in range(n))


class RNGProvider:
    """Hands out one stream per domain, all derived from a master seed.

    A stream is created on first request and the same object is returned
    afterwards, so a caller that comes back to a depth continues its stream.
    """

    def __init__(self, master_seed: RandomSeed = None) -> None:
        self.master_seed = master_seed
        self._streams: dict[str, RNGStream] = {}

    def get(self, domain: str) -> RNGStream:
        stream = self._streams.get(domain)
        if stream is None:
            stream = self._streams[domain] = RNGStream(domain, self.master_seed)
        return stream

    def level(self, depth: int) -> RNGStream:
        """The stream every stage of the level at ``depth`` draws from."""
        return self.get(f"map.level.{depth}")
