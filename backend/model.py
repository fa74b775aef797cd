"""
Simulation Controller

Owns the World and the engines that act on it, and processes one command at
a time to completion. External drivers (a timer, a UI, the CLI in
run_simulation.py) send commands in and read snapshot() back out; they never
touch the World directly.

While any narrative event is pending, Tick commands are ignored until the
player consumes the event.
"""

import logging
from typing import Dict, Optional, Union

from catalog import Catalog, build_default_catalog
from commands import BuyUpgrade, Command, ConsumeEvent, Harvest, Purchase, Remit, Tick
from config import CONFIG, SimulationConfig
from economy import Economy
from instances import CustomerKind, EventInstance, ItemInstance, UpgradeInstance, World
from population import PopulationEngine
from units import Souls

logger = logging.getLogger(__name__)


def cheat_enabled(fragment: Optional[str]) -> bool:
    """Read the cheat flag from a deep-link fragment such as '#cheat'."""
    if not fragment:
        return False
    return "cheat" in fragment.lstrip("#").lower().split("&")


class Model:
    """
    Main simulation coordinator.

    Args:
        catalog: Game content; defaults to build_default_catalog()
        config: Tunables; defaults to the module-level CONFIG
        cheat: Make every click harvest config.economy.cheat_harvest souls
    """

    def __init__(
        self,
        catalog: Optional[Catalog] = None,
        config: Optional[SimulationConfig] = None,
        cheat: bool = False,
    ):
        self.catalog = catalog if catalog is not None else build_default_catalog()
        self.config = config or CONFIG
        self.cheat = cheat

        self.economy = Economy(self.catalog, self.config)
        self.population = PopulationEngine(self.config)

        pop = self.config.population
        self.world = World(
            alive=Souls(pop.initial_alive),
            due=Souls(pop.initial_due),
            souls=Souls(pop.initial_souls),
            birth_rate=pop.birth_rate,
            death_rate=pop.death_rate,
            goodness=pop.goodness,
        )
        for spec in self.catalog.items.values():
            quantity = self.catalog.starting_quantities.get(spec.id, 0)
            self.world.items[spec.id] = ItemInstance(spec=spec, quantity=quantity)
        for spec in self.catalog.upgrades.values():
            self.world.upgrades[spec.id] = UpgradeInstance(spec=spec)
        if self.catalog.welcome_event_id is not None:
            welcome = self.catalog.event(self.catalog.welcome_event_id)
            self.world.events[welcome.id] = EventInstance(spec=welcome)

        self.economy.update_reveals(self.world)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def alive(self) -> Souls:
        return self.world.alive

    @property
    def due(self) -> Souls:
        return self.world.due

    @property
    def souls(self) -> Souls:
        return self.world.souls

    @property
    def month(self) -> int:
        return self.world.month

    @property
    def effects(self):
        return self.world.effects

    def item(self, spec_id: int) -> ItemInstance:
        return self.world.item(spec_id)

    def upgrade(self, spec_id: int) -> UpgradeInstance:
        return self.world.upgrade(spec_id)

    def click_yield(self) -> Souls:
        if self.cheat:
            return Souls(self.config.economy.cheat_harvest)
        return self.economy.click_yield(self.world)

    def tick_yield(self) -> Souls:
        return self.economy.tick_yield(self.world)

    def deaths_per_tick(self) -> Souls:
        return self.population.deaths_per_tick(self.world)

    def births_per_tick(self) -> Souls:
        return self.population.births_per_tick(self.world)

    def item_cost(self, spec_id: int, n: int = 1) -> Souls:
        """Price of the next n units of an item."""
        item = self.world.item(spec_id)
        return self.economy.bulk_cost(item.spec, item.quantity, n)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def process(self, command: Command) -> object:
        """Run one command to completion and return its handler's result."""
        if self.config.debug.log_commands:
            logger.debug(f"Processing {command!r}")

        if isinstance(command, Tick):
            return self.tick()
        if isinstance(command, Harvest):
            return self.harvest()
        if isinstance(command, Remit):
            return self.remit(Souls(command.amount), command.destination)
        if isinstance(command, Purchase):
            return self.purchase(command.item_spec_id, command.quantity)
        if isinstance(command, BuyUpgrade):
            return self.buy_upgrade(command.upgrade_spec_id)
        if isinstance(command, ConsumeEvent):
            return self.consume_event(command.event_spec_id)
        raise ValueError(f"unsupported command {command!r}")

    def tick(self) -> bool:
        """
        Advance one month: population update, then auto-harvest.

        Returns:
            False if the tick was refused because an event is pending
        """
        if self.world.has_pending_events:
            logger.debug("Tick ignored: events pending")
            return False

        deaths, births = self.population.advance(self.world)
        harvested = self.economy.harvest(self.world, self.tick_yield())
        self.economy.update_reveals(self.world)
        logger.debug(
            f"Month {self.world.month}: {deaths} deaths, {births} births, "
            f"{harvested} auto-harvested"
        )
        return True

    def harvest(self) -> Souls:
        harvested = self.economy.harvest(self.world, self.click_yield())
        self.economy.update_reveals(self.world)
        return harvested

    def remit(self, amount: Union[Souls, int], destination: Union[CustomerKind, str]) -> Souls:
        if not isinstance(amount, Souls):
            amount = Souls(amount)
        remitted = self.economy.remit(self.world, amount, CustomerKind(destination))
        self.economy.update_reveals(self.world)
        return remitted

    def purchase(self, item_spec_id: int, quantity: int = 1) -> int:
        bought = self.economy.purchase(self.world, item_spec_id, quantity)
        self.economy.update_reveals(self.world)
        return bought

    def buy_upgrade(self, upgrade_spec_id: int) -> bool:
        applied = self.economy.buy_upgrade(self.world, upgrade_spec_id)
        self.economy.update_reveals(self.world)
        return applied

    def consume_event(self, event_spec_id: int) -> bool:
        """Acknowledge a pending event. Unknown or already consumed events are a no-op."""
        self.catalog.event(event_spec_id)
        event = self.world.events.get(event_spec_id)
        if event is None:
            return False
        return event.consume()

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def snapshot(self) -> Dict[str, object]:
        """
        Plain-data view of the whole simulation for rendering.

        Computing it never mutates state.
        """
        world = self.world
        return {
            "month": world.month,
            "tick_unit": self.config.time.tick_unit,
            "alive": world.alive.value,
            "due": world.due.value,
            "souls": world.souls.value,
            "goodness": world.goodness,
            "birth_rate": self.population.effective_birth_rate(world),
            "death_rate": self.population.effective_death_rate(world),
            "births_per_tick": self.births_per_tick().value,
            "deaths_per_tick": self.deaths_per_tick().value,
            "click_yield": self.click_yield().value,
            "tick_yield": self.tick_yield().value,
            "cheat": self.cheat,
            "customers": {kind.value: c.to_dict() for kind, c in world.customers.items()},
            "items": [
                {**item.to_dict(), "cost": self.economy.next_cost(item).value}
                for item in world.items.values()
            ],
            "upgrades": [upgrade.to_dict() for upgrade in world.upgrades.values()],
            "pending_events": [event.to_dict() for event in world.pending_events()],
            "effects": world.effects.to_dict(),
        }
