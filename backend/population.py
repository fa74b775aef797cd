"""
Population Engine

Advances the living population by one tick (one simulated month).
Rates are per 1000 people per year, scaled by the fraction of the year a
tick covers. Deaths and births are both computed from the pre-tick
population; deaths move into the due pile for harvesting.
"""

import logging
import math
from typing import Callable, Optional, Tuple

import numpy as np

from catalog import ItemSpec
from config import CONFIG, SimulationConfig
from instances import CustomerKind, World
from units import Souls

logger = logging.getLogger(__name__)


class PopulationEngine:
    def __init__(self, config: Optional[SimulationConfig] = None):
        self.config = config or CONFIG

    def _modifier_sum(self, world: World, modifier_of: Callable[[ItemSpec], Optional[float]]) -> float:
        """Sum of modifier * quantity over owned items that carry the modifier."""
        owned = [
            item for item in world.items.values()
            if item.quantity > 0 and modifier_of(item.spec) is not None
        ]
        if not owned:
            return 0.0
        modifiers = np.array([modifier_of(item.spec) for item in owned], dtype=np.float64)
        quantities = np.array([item.quantity for item in owned], dtype=np.float64)
        return float(np.dot(modifiers, quantities))

    def effective_birth_rate(self, world: World) -> float:
        bonus = self._modifier_sum(world, lambda spec: spec.birth_rate_modifier)
        return world.birth_rate * (1.0 + bonus)

    def effective_death_rate(self, world: World) -> float:
        bonus = self._modifier_sum(world, lambda spec: spec.death_rate_modifier)
        return world.death_rate * (1.0 + bonus)

    def _per_tick(self, alive: Souls, rate: float) -> Souls:
        """ceil(alive / 1000 * rate / days_per_year * days_per_tick), never negative."""
        time = self.config.time
        count = math.ceil(
            float(alive) / self.config.population.per_mille * rate
            / time.days_per_year * time.days_per_tick
        )
        return Souls(max(0, count))

    def deaths_per_tick(self, world: World) -> Souls:
        return min(world.alive, self._per_tick(world.alive, self.effective_death_rate(world)))

    def births_per_tick(self, world: World) -> Souls:
        return self._per_tick(world.alive, self.effective_birth_rate(world))

    def advance(self, world: World) -> Tuple[Souls, Souls]:
        """
        Apply one month of deaths then births.

        Returns:
            (deaths, births) applied this tick
        """
        deaths = self.deaths_per_tick(world)
        births = self.births_per_tick(world)

        if self.config.ledger.split_deaths_by_goodness:
            self._split_deaths(world, deaths)

        world.due += deaths
        world.alive -= deaths
        world.alive += births
        world.month += 1
        return deaths, births

    def _split_deaths(self, world: World, deaths: Souls) -> None:
        """
        Bill Heaven for the virtuous share of deaths and Hell for the rest.

        Heaven's share is rounded up each tick; the rounding surplus is carried
        and paid back one whole soul at a time.
        """
        heaven_float = float(deaths) * world.goodness
        heaven_ceil = math.ceil(heaven_float)
        world.heaven_offset += heaven_ceil - heaven_float
        heaven_deaths = Souls(heaven_ceil)
        if world.heaven_offset >= 1.0:
            heaven_deaths -= Souls(int(world.heaven_offset))
            world.heaven_offset -= math.floor(world.heaven_offset)
        hell_deaths = deaths - heaven_deaths

        world.customer(CustomerKind.HEAVEN).bill(heaven_deaths)
        world.customer(CustomerKind.HELL).bill(hell_deaths)
