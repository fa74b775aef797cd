"""
Death Inc. Catalog

Immutable specifications for everything the player can own: items,
upgrades and narrative events. Every specification gets a stable integer id
from the catalog that registers it, and specs compare and hash by that id
alone, so two specs with identical fields remain distinct.

The catalog is an explicit object handed to the simulation at construction;
build_default_catalog() assembles the shipped game content.
"""

import itertools
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, Optional, Tuple

from units import Souls


class ItemCategory(str, Enum):
    HARVEST = "harvest"
    FINANCE = "finance"
    INITIATIVE = "initiative"
    EVENT = "event"


class _IdentifiedSpec:
    """Equality and hashing by spec id."""

    __slots__ = ()

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.id))


@dataclass(frozen=True, eq=False)
class ItemSpec(_IdentifiedSpec):
    """
    A purchasable item.

    Yields are per unit owned; rate modifiers are per unit owned and add to
    the base rate factor. pop_multiplier and pop_kill_ratio fire once per
    unit bought.
    """

    id: int
    name: str
    base_cost: Souls
    category: ItemCategory = ItemCategory.HARVEST
    description: str = ""
    souls_per_click: Optional[Souls] = None
    souls_per_tick: Optional[Souls] = None
    birth_rate_modifier: Optional[float] = None
    death_rate_modifier: Optional[float] = None
    pop_multiplier: Optional[float] = None
    pop_kill_ratio: Optional[float] = None
    unique: bool = False
    min_hell_favor: Optional[Souls] = None
    min_heaven_favor: Optional[Souls] = None

    def __post_init__(self):
        """Validate invariants after initialization."""
        if self.base_cost < Souls.ZERO:
            raise ValueError(f"base_cost cannot be negative, got {self.base_cost.value}")
        if self.pop_multiplier is not None and self.pop_multiplier < 0:
            raise ValueError(f"pop_multiplier cannot be negative, got {self.pop_multiplier}")
        if self.pop_kill_ratio is not None and not (0.0 <= self.pop_kill_ratio <= 1.0):
            raise ValueError(f"pop_kill_ratio must be in [0,1], got {self.pop_kill_ratio}")

    @property
    def has_buy_effect(self) -> bool:
        return self.pop_multiplier is not None or self.pop_kill_ratio is not None


@dataclass(frozen=True)
class UpgradeEffect:
    """Additive yield modifiers an upgrade grants to one item."""

    item_id: int
    per_click_modifier: Optional[float] = None
    per_tick_modifier: Optional[float] = None


@dataclass(frozen=True, eq=False)
class UpgradeSpec(_IdentifiedSpec):
    id: int
    name: str
    cost: Souls
    description: str = ""
    effects: Tuple[UpgradeEffect, ...] = ()

    def __post_init__(self):
        if self.cost < Souls.ZERO:
            raise ValueError(f"cost cannot be negative, got {self.cost.value}")


@dataclass(frozen=True, eq=False)
class EventSpec(_IdentifiedSpec):
    id: int
    name: str
    description: str = ""


class Catalog:
    """
    Registry of item, upgrade and event specifications.

    Ids are assigned sequentially from a single counter shared by all spec
    kinds, starting at 1. Each collection preserves registration order.
    """

    def __init__(self):
        self._next_id = itertools.count(1)
        self.items: Dict[int, ItemSpec] = {}
        self.upgrades: Dict[int, UpgradeSpec] = {}
        self.events: Dict[int, EventSpec] = {}

        # item spec id -> event spec id fired when the item's quantity first hits 1
        self.event_triggers: Dict[int, int] = {}
        # item spec id -> quantity owned at simulation start
        self.starting_quantities: Dict[int, int] = {}
        self.welcome_event_id: Optional[int] = None

    def add_item(self, name: str, base_cost: Souls, **fields) -> ItemSpec:
        spec = ItemSpec(id=next(self._next_id), name=name, base_cost=base_cost, **fields)
        self.items[spec.id] = spec
        return spec

    def add_upgrade(
        self,
        name: str,
        cost: Souls,
        effects: Tuple[UpgradeEffect, ...] = (),
        description: str = "",
    ) -> UpgradeSpec:
        for effect in effects:
            if effect.item_id not in self.items:
                raise ValueError(f"upgrade {name!r} targets unknown item id {effect.item_id}")
        spec = UpgradeSpec(
            id=next(self._next_id),
            name=name,
            cost=cost,
            description=description,
            effects=tuple(effects),
        )
        self.upgrades[spec.id] = spec
        return spec

    def add_event(self, name: str, description: str = "", welcome: bool = False) -> EventSpec:
        spec = EventSpec(id=next(self._next_id), name=name, description=description)
        self.events[spec.id] = spec
        if welcome:
            self.welcome_event_id = spec.id
        return spec

    def trigger_on_first(self, item: ItemSpec, event: EventSpec) -> None:
        """Fire `event` the moment the player owns exactly one `item`."""
        self.item(item.id)
        self.event(event.id)
        self.event_triggers[item.id] = event.id

    def seed(self, item: ItemSpec, quantity: int) -> None:
        if quantity < 0:
            raise ValueError(f"seed quantity cannot be negative, got {quantity}")
        if item.unique and quantity > 1:
            raise ValueError(f"unique item {item.name!r} cannot be seeded with {quantity} units")
        self.item(item.id)
        self.starting_quantities[item.id] = quantity

    def item(self, spec_id: int) -> ItemSpec:
        try:
            return self.items[spec_id]
        except KeyError:
            raise ValueError(f"unknown item spec id {spec_id}") from None

    def upgrade(self, spec_id: int) -> UpgradeSpec:
        try:
            return self.upgrades[spec_id]
        except KeyError:
            raise ValueError(f"unknown upgrade spec id {spec_id}") from None

    def event(self, spec_id: int) -> EventSpec:
        try:
            return self.events[spec_id]
        except KeyError:
            raise ValueError(f"unknown event spec id {spec_id}") from None

    def find_item(self, name: str) -> ItemSpec:
        """Look an item up by display name (first match)."""
        for spec in self.items.values():
            if spec.name == name:
                return spec
        raise ValueError(f"no item named {name!r}")

    def __iter__(self) -> Iterator[ItemSpec]:
        return iter(self.items.values())


def build_default_catalog() -> Catalog:
    """Assemble the shipped Death Inc. content."""
    catalog = Catalog()

    # Harvest
    sickle = catalog.add_item(
        "Sickle",
        Souls(15),
        description="The simplest tools are sometimes the most effective.",
        souls_per_click=Souls(1),
    )
    intern = catalog.add_item(
        "Intern",
        Souls(100),
        description="Unpaid, unmotivated, but they do carry a scythe.",
        souls_per_click=Souls(5),
    )
    bailiff = catalog.add_item(
        "Bailiff",
        Souls(280),
        description="Collecting souls was a logical next career step.",
        souls_per_tick=Souls(30),
    )

    # Finance
    catalog.add_item(
        "Collection agency",
        Souls(5_000),
        category=ItemCategory.FINANCE,
        description="Sharing a coffee machine cuts down costs. It's about the small efficiencies!",
        souls_per_tick=Souls(800),
    )
    catalog.add_item(
        "Collection multinational",
        Souls(100_000),
        category=ItemCategory.FINANCE,
        description="Very efficient at collecting souls.",
        souls_per_tick=Souls(25_000),
    )

    # Initiatives
    catalog.add_item(
        "Fertility rates",
        Souls(250),
        category=ItemCategory.INITIATIVE,
        description="More people in, more people out.",
        birth_rate_modifier=0.01,
    )
    catalog.add_item(
        "Killer instinct",
        Souls(100),
        category=ItemCategory.INITIATIVE,
        description="A little nudge towards the edge.",
        death_rate_modifier=0.01,
    )

    # One-shot events
    catalog.add_item(
        "Soul fission",
        Souls(400),
        category=ItemCategory.EVENT,
        description="Double the population.",
        pop_multiplier=2.0,
        unique=True,
    )
    catalog.add_item(
        "Soul fission 2",
        Souls.M,
        category=ItemCategory.EVENT,
        description="Double the population. Again.",
        pop_multiplier=2.0,
        unique=True,
    )
    catalog.add_item(
        "Small plague",
        Souls(400),
        category=ItemCategory.EVENT,
        description="Kill 90% of the population.",
        pop_kill_ratio=0.9,
        unique=True,
    )
    catalog.add_item(
        "Large plague",
        Souls.M.times(2),
        category=ItemCategory.EVENT,
        description="Kill 99% of the population.",
        pop_kill_ratio=0.99,
        unique=True,
    )

    # Upgrades
    catalog.add_upgrade(
        "Paid interns",
        Souls.K,
        effects=(UpgradeEffect(item_id=intern.id, per_click_modifier=0.5),),
        description=(
            "It's not like you have a fiber of morality in your ethereal body, but.. "
            "interns do work at least 50% harder when paid."
        ),
    )
    catalog.add_upgrade(
        "Double intern pay",
        Souls.K.times(10),
        effects=(UpgradeEffect(item_id=intern.id, per_click_modifier=0.5),),
        description="Twice the pay, half the complaints.",
    )
    catalog.add_upgrade(
        "Armed bailiffs",
        Souls.K.times(50),
        effects=(UpgradeEffect(item_id=bailiff.id, per_tick_modifier=0.5),),
        description="Bailiffs come armed with shotguns, increasing efficiency by 50%.",
    )

    # Events
    catalog.add_event(
        "Welcome to Death Inc.",
        "Congratulations on your new position. Humans die; you collect. "
        "Harvest their souls and keep the customers happy.",
        welcome=True,
    )
    hello_from_hell = catalog.add_event(
        "Hello from hell",
        "Hi! Dark Lord here, we've noticed some humans have started straying from "
        "the path of light. No biggie, just send them straight to us.",
    )
    catalog.trigger_on_first(intern, hello_from_hell)

    catalog.seed(sickle, 1)
    return catalog
