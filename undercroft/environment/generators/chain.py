"""Stage interfaces and the BuilderChain orchestrator.

A chain is exactly one initial stage followed by zero or more meta stages.
Every stage implements ``build_map(rng, build_data)`` and mutates the shared
BuildData in place. The chain itself holds no generation logic: it only
enforces the assembly rules and runs the stages in registration order.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from undercroft import config

from .build_data import BuildData

if TYPE_CHECKING:
    from undercroft.environment.map import Map
    from undercroft.types import SpawnEntry, WorldTilePos
    from undercroft.util.rng import RNG

    from .spawning import EntitySpawner

logger = logging.getLogger(__name__)


# =============================================================================
# Errors
# =============================================================================


class MapBuilderError(Exception):
    """Base class for invalid pipeline assembly.

    These indicate a programming error in how a chain was put together, not
    bad luck during generation, and abort the run.
    """


class BuilderChainConfigError(MapBuilderError, ValueError):
    """Raised for a second initial stage, or a chain with none."""


class MissingRoomsError(MapBuilderError):
    """Raised when a room-based stage runs but no stage produced rooms."""


class MissingStartError(MapBuilderError):
    """Raised when a stage needs a start position and none was chosen."""


class NoValidStartError(MapBuilderError):
    """Raised when no floor tile exists to start on."""


# =============================================================================
# Stage interfaces
# =============================================================================


class InitialMapBuilder(ABC):
    """A stage that creates the base layout. Exactly one per chain."""

    @abstractmethod
    def build_map(self, rng: RNG, build_data: BuildData) -> None:
        """Generate the level layout into ``build_data.map``."""
        raise NotImplementedError


class MetaMapBuilder(ABC):
    """A post-processing stage. Any number per chain, order significant."""

    @abstractmethod
    def build_map(self, rng: RNG, build_data: BuildData) -> None:
        """Refine the build data left by earlier stages."""
        raise NotImplementedError


# =============================================================================
# Orchestrator
# =============================================================================


class BuilderChain:
    """Runs one initial stage and its meta stages against shared BuildData.

    Example:
        chain = (
            BuilderChain(depth=1)
            .start_with(CellularAutomataBuilder())
            .with_(AreaStartingPosition(XStart.CENTER, YStart.CENTER))
            .with_(CullUnreachable())
            .with_(DistantExit())
        )
        chain.build_map(rng)
        game_map, start = chain.map, chain.start

    Attributes:
        build_data: The state being built. Valid output once build_map returns.
    """

    def __init__(
        self,
        depth: int,
        width: int = config.MAP_WIDTH,
        height: int = config.MAP_HEIGHT,
        record_history: bool = config.SHOW_MAPGEN_VISUALIZER,
    ) -> None:
        """Initialize an empty chain.

        Args:
            depth: Dungeon depth of the level being generated.
            width: Map width in tiles.
            height: Map height in tiles.
            record_history: Record map snapshots for visualization.
        """
        self.starter: InitialMapBuilder | None = None
        self.builders: list[MetaMapBuilder] = []
        self.build_data = BuildData.create_empty(
            depth, width, height, record_history=record_history
        )

    def start_with(self, starter: InitialMapBuilder) -> BuilderChain:
        """Set the initial stage.

        Raises:
            BuilderChainConfigError: If an initial stage was already set, or
                ``starter`` is not an InitialMapBuilder.
        """
        if self.starter is not None:
            raise BuilderChainConfigError(
                "BuilderChain can only accept a single starting builder"
            )
        if not isinstance(starter, InitialMapBuilder):
            raise BuilderChainConfigError(
                f"{type(starter).__name__} is not an initial map builder"
            )
        self.starter = starter
        return self

    def with_(self, metabuilder: MetaMapBuilder) -> BuilderChain:
        """Append a meta stage. Stages run in the order they are added.

        Raises:
            BuilderChainConfigError: If ``metabuilder`` is not a MetaMapBuilder.
        """
        if not isinstance(metabuilder, MetaMapBuilder):
            raise BuilderChainConfigError(
                f"{type(metabuilder).__name__} is not a meta map builder"
            )
        self.builders.append(metabuilder)
        return self

    def build_map(self, rng: RNG) -> None:
        """Run the initial stage, then every meta stage, once each.

        Raises:
            BuilderChainConfigError: If no initial stage was set.
        """
        if self.starter is None:
            raise BuilderChainConfigError("Cannot run a BuilderChain without a starter")

        logger.debug("Running initial stage %s", type(self.starter).__name__)
        self.starter.build_map(rng, self.build_data)

        for metabuilder in self.builders:
            logger.debug("Running meta stage %s", type(metabuilder).__name__)
            metabuilder.build_map(rng, self.build_data)

        logger.info(
            "Built depth %d level: %d floor tiles, %d spawns, %d snapshots",
            self.build_data.map.depth,
            self.build_data.map.count_floor_tiles(),
            len(self.build_data.spawn_list),
            len(self.build_data.history),
        )

    def spawn_entities(self, spawner: EntitySpawner) -> None:
        """Hand every pending spawn to the game's spawner."""
        for idx, name in self.build_data.spawn_list:
            spawner(idx, name)

    # -------------------------------------------------------------------------
    # Output accessors
    # -------------------------------------------------------------------------

    @property
    def map(self) -> Map:
        return self.build_data.map

    @property
    def start(self) -> WorldTilePos | None:
        return self.build_data.start

    @property
    def spawn_list(self) -> list[SpawnEntry]:
        return self.build_data.spawn_list

    @property
    def history(self) -> list[Map]:
        return self.build_data.history
