"""
Economy Engine

Prices, yields and the money-moving transactions of the simulation:
unit and bulk cost growth, effective per-click and per-tick yield,
item and upgrade purchases (with their one-time population effects),
harvest and remit, and reveal thresholds.

All behavior is deterministic - no randomness, I/O, or side effects beyond
the World passed in.

Performance optimizations:
- Uses NumPy vectorization to aggregate yields across owned items
"""

import logging
import math
from typing import Callable, List, Optional

import numpy as np

from catalog import Catalog, ItemSpec
from config import CONFIG, SimulationConfig
from instances import CustomerKind, EventInstance, ItemInstance, World
from units import Souls

logger = logging.getLogger(__name__)


class Economy:
    """
    Stateless rules engine over a World.

    Holds the catalog (for event triggers) and config (for cost growth and
    click baseline); every mutable number lives in the World.
    """

    def __init__(self, catalog: Catalog, config: Optional[SimulationConfig] = None):
        self.catalog = catalog
        self.config = config or CONFIG

    # ------------------------------------------------------------------
    # Costs
    # ------------------------------------------------------------------

    def unit_cost(self, spec: ItemSpec, i: int) -> Souls:
        """Cost of the i-th unit (0-indexed): floor(base_cost * growth^i)."""
        growth = self.config.economy.cost_growth_factor
        return Souls(math.floor(spec.base_cost.value * growth ** i))

    def bulk_cost(self, spec: ItemSpec, quantity: int, n: int) -> Souls:
        """Cost of buying n units starting from `quantity` owned, summed term by term."""
        total = Souls.ZERO
        for k in range(n):
            total += self.unit_cost(spec, quantity + k)
        return total

    def next_cost(self, item: ItemInstance) -> Souls:
        return self.unit_cost(item.spec, item.quantity)

    # ------------------------------------------------------------------
    # Yields
    # ------------------------------------------------------------------

    def click_contribution(self, world: World, item: ItemInstance) -> Souls:
        """floor(base per-click yield * bonus factor) * quantity for one item."""
        if item.spec.souls_per_click is None:
            return Souls.ZERO
        bonus = world.effects.per_click_bonus(item.spec.id)
        return item.spec.souls_per_click.scale(bonus) * item.quantity

    def tick_contribution(self, world: World, item: ItemInstance) -> Souls:
        if item.spec.souls_per_tick is None:
            return Souls.ZERO
        bonus = world.effects.per_tick_bonus(item.spec.id)
        return item.spec.souls_per_tick.scale(bonus) * item.quantity

    def click_yield(self, world: World) -> Souls:
        """Souls harvested by one click: the baseline plus every item's contribution."""
        baseline = Souls(self.config.economy.click_baseline)
        return baseline + self._batch_yield(
            world,
            lambda spec: spec.souls_per_click,
            world.effects.per_click_bonus,
        )

    def tick_yield(self, world: World) -> Souls:
        """Souls auto-harvested each tick. There is no baseline."""
        return self._batch_yield(
            world,
            lambda spec: spec.souls_per_tick,
            world.effects.per_tick_bonus,
        )

    def _batch_yield(
        self,
        world: World,
        base_of: Callable[[ItemSpec], Optional[Souls]],
        bonus_of: Callable[[int], float],
    ) -> Souls:
        """
        Vectorized sum of floor(base * bonus) * quantity over owned items.

        Gives identical results to summing click_contribution()/tick_contribution()
        item by item.
        """
        owned: List[ItemInstance] = [
            item for item in world.items.values()
            if item.quantity > 0 and base_of(item.spec) is not None
        ]
        if not owned:
            return Souls.ZERO

        base = np.array([base_of(item.spec).value for item in owned], dtype=np.float64)
        bonus = np.array([bonus_of(item.spec.id) for item in owned], dtype=np.float64)
        quantity = np.array([item.quantity for item in owned], dtype=np.int64)

        per_unit = np.floor(base * bonus).astype(np.int64)
        return Souls(int(np.sum(per_unit * quantity)))

    # ------------------------------------------------------------------
    # Purchases
    # ------------------------------------------------------------------

    def favor_met(self, world: World, spec: ItemSpec) -> bool:
        """Check the optional Heaven/Hell favor gates of an item."""
        if spec.min_heaven_favor is not None:
            if world.customer(CustomerKind.HEAVEN).given < spec.min_heaven_favor:
                return False
        if spec.min_hell_favor is not None:
            if world.customer(CustomerKind.HELL).given < spec.min_hell_favor:
                return False
        return True

    def purchase(self, world: World, item_id: int, quantity: int) -> int:
        """
        Buy up to `quantity` units of an item, one at a time.

        Stops silently at the first unit the balance cannot cover, or once a
        unique item is owned. Each unit bought applies the spec's one-time
        population effects.

        Returns:
            Number of units actually bought
        """
        if quantity < 1:
            raise ValueError(f"quantity must be at least 1, got {quantity}")
        item = world.item(item_id)
        if not self.favor_met(world, item.spec):
            return 0

        bought = 0
        for _ in range(quantity):
            if item.sold_out:
                break
            cost = self.next_cost(item)
            if cost > world.souls:
                break
            world.souls -= cost
            item.add(1)
            bought += 1
            self._apply_buy_effects(world, item.spec)
            if item.quantity == 1:
                self._fire_trigger(world, item.spec)
        return bought

    def _apply_buy_effects(self, world: World, spec: ItemSpec) -> None:
        if spec.pop_multiplier is not None:
            before = world.alive
            world.alive = max(Souls.ZERO, world.alive.scale(spec.pop_multiplier))
            logger.info(f"{spec.name}: population {before} -> {world.alive}")
        if spec.pop_kill_ratio is not None:
            deaths = min(world.alive, world.alive.scale(spec.pop_kill_ratio))
            world.alive -= deaths
            world.due += deaths
            logger.info(f"{spec.name}: killed {deaths}, {world.alive} remain")

    def _fire_trigger(self, world: World, spec: ItemSpec) -> None:
        event_id = self.catalog.event_triggers.get(spec.id)
        if event_id is None:
            return
        event_spec = self.catalog.event(event_id)
        # Keyed by event id, so a repeat trigger replaces rather than duplicates
        world.events[event_id] = EventInstance(spec=event_spec)
        logger.info(f"Event triggered: {event_spec.name}")

    def buy_upgrade(self, world: World, upgrade_id: int) -> bool:
        """
        Buy an upgrade and activate its effects.

        No-op (returns False) if the upgrade is already bought or unaffordable.
        """
        upgrade = world.upgrade(upgrade_id)
        if upgrade.bought:
            return False
        if upgrade.spec.cost > world.souls:
            return False
        world.souls -= upgrade.spec.cost
        upgrade.buy()
        world.effects.apply(upgrade.spec)
        return True

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def harvest(self, world: World, amount: Souls) -> Souls:
        """Move up to `amount` souls from the due pile into the balance."""
        harvested = min(world.due, max(Souls.ZERO, amount))
        world.due -= harvested
        world.souls += harvested
        return harvested

    def remit(self, world: World, amount: Souls, destination: CustomerKind) -> Souls:
        """Pay up to `amount` souls from the balance to a customer."""
        remitted = min(world.souls, max(Souls.ZERO, amount))
        world.souls -= remitted
        world.customer(destination).receive(remitted)
        return remitted

    # ------------------------------------------------------------------
    # Visibility
    # ------------------------------------------------------------------

    def update_reveals(self, world: World) -> None:
        """Reveal anything the player owns or can half afford. Never hides."""
        for item in world.items.values():
            if item.revealed:
                continue
            if item.quantity > 0:
                item.reveal()
            elif world.souls >= self.next_cost(item) / 2 and self.favor_met(world, item.spec):
                item.reveal()

        for upgrade in world.upgrades.values():
            if not upgrade.revealed and world.souls >= upgrade.spec.cost / 2:
                upgrade.reveal()
