"""
Commands accepted by the simulation.

Each command is a small pydantic model tagged by `kind`, so a driver can send
plain dicts (e.g. decoded JSON) through parse_command() and get validation
for free.
"""

from typing import Annotated, Any, Dict, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

from instances import CustomerKind


class Tick(BaseModel):
    kind: Literal["tick"] = "tick"


class Harvest(BaseModel):
    kind: Literal["harvest"] = "harvest"


class Remit(BaseModel):
    kind: Literal["remit"] = "remit"
    amount: int = Field(..., ge=0, description="Souls to remit")
    destination: CustomerKind


class Purchase(BaseModel):
    kind: Literal["purchase"] = "purchase"
    item_spec_id: int
    quantity: int = Field(1, ge=1, description="Units to buy")


class BuyUpgrade(BaseModel):
    kind: Literal["buy_upgrade"] = "buy_upgrade"
    upgrade_spec_id: int


class ConsumeEvent(BaseModel):
    kind: Literal["consume_event"] = "consume_event"
    event_spec_id: int


Command = Annotated[
    Union[Tick, Harvest, Remit, Purchase, BuyUpgrade, ConsumeEvent],
    Field(discriminator="kind"),
]

_command_adapter = TypeAdapter(Command)


def parse_command(payload: Dict[str, Any]) -> Command:
    """Validate a plain mapping into a command. Raises pydantic.ValidationError."""
    return _command_adapter.validate_python(payload)
