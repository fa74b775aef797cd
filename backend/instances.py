"""
Mutable per-specification state.

Each one-shot flag is a tiny state machine with a single forward transition:
items and upgrades go HIDDEN -> REVEALED, upgrades go AVAILABLE -> BOUGHT,
events go PENDING -> CONSUMED. The state lives in a private field and the only
way to change it is the forward method, so nothing can flip it back.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List

from catalog import EventSpec, ItemSpec, UpgradeSpec
from effects import EffectRegistry
from units import Souls


class Visibility(Enum):
    HIDDEN = "hidden"
    REVEALED = "revealed"


class PurchaseState(Enum):
    AVAILABLE = "available"
    BOUGHT = "bought"


class EventState(Enum):
    PENDING = "pending"
    CONSUMED = "consumed"


@dataclass(slots=True)
class ItemInstance:
    """Owned quantity and visibility of one item spec."""

    spec: ItemSpec
    quantity: int = 0
    _visibility: Visibility = field(default=Visibility.HIDDEN, init=False, repr=False)

    def __post_init__(self):
        """Validate invariants after initialization."""
        if self.quantity < 0:
            raise ValueError(f"quantity cannot be negative, got {self.quantity}")
        if self.spec.unique and self.quantity > 1:
            raise ValueError(f"unique item {self.spec.name!r} cannot hold {self.quantity} units")
        if self.quantity > 0:
            self._visibility = Visibility.REVEALED

    @property
    def visibility(self) -> Visibility:
        return self._visibility

    @property
    def revealed(self) -> bool:
        return self._visibility is Visibility.REVEALED

    @property
    def sold_out(self) -> bool:
        return self.spec.unique and self.quantity >= 1

    def reveal(self) -> bool:
        """Reveal the item. Returns True only on the first call."""
        if self._visibility is Visibility.REVEALED:
            return False
        self._visibility = Visibility.REVEALED
        return True

    def add(self, count: int = 1) -> None:
        if count < 0:
            raise ValueError(f"cannot remove items, got count {count}")
        if self.spec.unique and self.quantity + count > 1:
            raise ValueError(f"unique item {self.spec.name!r} can only be owned once")
        self.quantity += count

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.spec.id,
            "name": self.spec.name,
            "category": self.spec.category.value,
            "quantity": self.quantity,
            "revealed": self.revealed,
        }


@dataclass(slots=True)
class UpgradeInstance:
    """Visibility and purchase state of one upgrade spec."""

    spec: UpgradeSpec
    _visibility: Visibility = field(default=Visibility.HIDDEN, init=False, repr=False)
    _purchase: PurchaseState = field(default=PurchaseState.AVAILABLE, init=False, repr=False)

    @property
    def revealed(self) -> bool:
        return self._visibility is Visibility.REVEALED

    @property
    def bought(self) -> bool:
        return self._purchase is PurchaseState.BOUGHT

    def reveal(self) -> bool:
        if self._visibility is Visibility.REVEALED:
            return False
        self._visibility = Visibility.REVEALED
        return True

    def buy(self) -> bool:
        """Latch the upgrade as bought. Returns False if it already was."""
        if self._purchase is PurchaseState.BOUGHT:
            return False
        self._purchase = PurchaseState.BOUGHT
        return True

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.spec.id,
            "name": self.spec.name,
            "cost": self.spec.cost.value,
            "revealed": self.revealed,
            "bought": self.bought,
        }


@dataclass(slots=True)
class EventInstance:
    """A triggered narrative event awaiting acknowledgement."""

    spec: EventSpec
    _state: EventState = field(default=EventState.PENDING, init=False, repr=False)

    @property
    def state(self) -> EventState:
        return self._state

    @property
    def pending(self) -> bool:
        return self._state is EventState.PENDING

    @property
    def consumed(self) -> bool:
        return self._state is EventState.CONSUMED

    def consume(self) -> bool:
        if self._state is EventState.CONSUMED:
            return False
        self._state = EventState.CONSUMED
        return True

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.spec.id,
            "name": self.spec.name,
            "description": self.spec.description,
            "consumed": self.consumed,
        }


class CustomerKind(str, Enum):
    HEAVEN = "heaven"
    HELL = "hell"


@dataclass(slots=True)
class Customer:
    """
    A remittance destination.

    `given` only ever grows. `owed` accrues from the goodness split of deaths
    and is paid down by remittances, never below zero.
    """

    kind: CustomerKind
    name: str
    sign: str
    owed: Souls = Souls.ZERO
    given: Souls = Souls.ZERO

    def bill(self, amount: Souls) -> None:
        self.owed = self.owed + max(Souls.ZERO, amount)

    def receive(self, amount: Souls) -> None:
        if amount < Souls.ZERO:
            raise ValueError(f"cannot receive a negative remittance, got {amount.value}")
        self.given = self.given + amount
        self.owed = max(Souls.ZERO, self.owed - amount)

    def to_dict(self) -> Dict[str, object]:
        return {
            "kind": self.kind.value,
            "name": self.name,
            "sign": self.sign,
            "owed": self.owed.value,
            "given": self.given.value,
        }


def make_customers() -> Dict[CustomerKind, Customer]:
    return {
        CustomerKind.HEAVEN: Customer(kind=CustomerKind.HEAVEN, name="Heaven", sign="✝️"),
        CustomerKind.HELL: Customer(kind=CustomerKind.HELL, name="Hell", sign="⛧️"),
    }


@dataclass
class World:
    """
    Everything the simulation mutates.

    Collections are insertion-ordered and keyed by spec id, so iteration is
    deterministic for rendering and testing.
    """

    alive: Souls
    due: Souls
    souls: Souls
    birth_rate: float
    death_rate: float
    goodness: float
    month: int = 0
    heaven_offset: float = 0.0  # Rounding surplus carried by the goodness split
    customers: Dict[CustomerKind, Customer] = field(default_factory=make_customers)
    items: Dict[int, ItemInstance] = field(default_factory=dict)
    upgrades: Dict[int, UpgradeInstance] = field(default_factory=dict)
    events: Dict[int, EventInstance] = field(default_factory=dict)
    effects: EffectRegistry = field(default_factory=EffectRegistry)

    def customer(self, kind: CustomerKind) -> Customer:
        return self.customers[CustomerKind(kind)]

    def item(self, spec_id: int) -> ItemInstance:
        try:
            return self.items[spec_id]
        except KeyError:
            raise ValueError(f"unknown item spec id {spec_id}") from None

    def upgrade(self, spec_id: int) -> UpgradeInstance:
        try:
            return self.upgrades[spec_id]
        except KeyError:
            raise ValueError(f"unknown upgrade spec id {spec_id}") from None

    def pending_events(self) -> List[EventInstance]:
        return [event for event in self.events.values() if event.pending]

    @property
    def has_pending_events(self) -> bool:
        return any(event.pending for event in self.events.values())
