#!/usr/bin/env python3
"""Generate levels and print them as ASCII.

Usage:
    uv run python scripts/preview_mapgen.py --chain cellular_automata --depth 3
    uv run python scripts/preview_mapgen.py --seed 42 --history
    uv run python scripts/preview_mapgen.py --depth 1 --levels 5

Without --chain the preset is picked at random for each depth, exactly as the
game would pick it. Every depth draws from its own stream of one RNGProvider,
so a level printed here matches build_level(depth, seed).
"""

# ruff: noqa: E402  # Allow path setup before importing project modules

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

# Add the project root to Python path so running as a script works.
project_root = Path(__file__).resolve().parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from undercroft import config
from undercroft.environment.generators import BuilderChain, BuilderChains, create_chain
from undercroft.environment.generators.factory import random_builder
from undercroft.util.rng import RNGProvider


def _parse_seed(value: str) -> int | str:
    try:
        return int(value)
    except ValueError:
        return value


def _print_level(chain: BuilderChain, depth: int, elapsed_ms: float, history: bool) -> None:
    if history:
        for i, snapshot in enumerate(chain.history):
            print(f"--- snapshot {i + 1}/{len(chain.history)} ---")
            print(snapshot.to_ascii())
            print()

    print(chain.map.to_ascii(start=chain.start))
    print()
    print(f"Depth {depth}, built in {elapsed_ms:.1f} ms")
    print(f"Start: {chain.start}")
    print(f"Spawns ({len(chain.spawn_list)}):")
    for idx, name in chain.spawn_list:
        print(f"  {chain.map.idx_xy(idx)}: {name}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Preview procedural level generation.")
    parser.add_argument(
        "--chain",
        choices=[member.value for member in BuilderChains],
        help="Preset to build (default: random per depth)",
    )
    parser.add_argument("--depth", type=int, default=1, help="First dungeon depth")
    parser.add_argument(
        "--levels", type=int, default=1, help="Number of consecutive depths to build"
    )
    parser.add_argument(
        "--seed",
        type=_parse_seed,
        default=config.RANDOM_SEED,
        help="Master seed (int or string)",
    )
    parser.add_argument(
        "--history",
        action="store_true",
        help="Print every snapshot taken during generation",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    provider = RNGProvider(args.seed)
    print(f"Master seed {args.seed!r}")
    for depth in range(args.depth, args.depth + args.levels):
        rng = provider.level(depth)
        if args.chain is None:
            chain = random_builder(depth, rng, record_history=args.history)
        else:
            chain = create_chain(args.chain, depth, record_history=args.history)

        start = time.perf_counter()
        chain.build_map(rng)
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        _print_level(chain, depth, elapsed_ms, args.history)
        print()


if __name__ == "__main__":
    main()
