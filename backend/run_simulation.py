"""
Run a headless Death Inc. game.

Plays the simulation for a number of months with a simple greedy policy:
acknowledge events, click-harvest a few times, buy affordable upgrades, then
buy the cheapest revealed item the balance covers. Progress is printed every
few ticks to monitor the economy.
"""

import argparse
import logging
import time

from config import CONFIG
from model import Model, cheat_enabled

logger = logging.getLogger(__name__)


def play_turn(model: Model, clicks: int) -> bool:
    """
    One driver turn: events, clicks, shopping, then the tick itself.

    Returns False when a purchase this turn raised an event that held the tick back.
    """
    for event in model.world.pending_events():
        logger.info(f"Event: {event.spec.name} - {event.spec.description}")
        model.consume_event(event.spec.id)

    for _ in range(clicks):
        model.harvest()

    for upgrade in model.world.upgrades.values():
        if upgrade.revealed and not upgrade.bought:
            model.buy_upgrade(upgrade.spec.id)

    while True:
        affordable = [
            item for item in model.world.items.values()
            if item.revealed and not item.sold_out
            and model.item_cost(item.spec.id) <= model.souls
        ]
        if not affordable:
            break
        cheapest = min(affordable, key=lambda item: model.item_cost(item.spec.id))
        if model.purchase(cheapest.spec.id) == 0:
            break

    return model.tick()


def main(
    num_ticks: int = 120,
    clicks_per_tick: int = 5,
    report_every: int = 12,
    cheat: bool = False,
):
    """Run the game for `num_ticks` months."""
    print("=" * 80)
    print(f"DEATH INC. SIMULATION ({num_ticks} {CONFIG.time.tick_unit}s, {clicks_per_tick} clicks each)")
    print("=" * 80)
    print()

    model = Model(cheat=cheat)

    print("Month |        Alive |          Due |        Souls | Click | Tick")
    print("-" * 80)

    start_time = time.time()
    for _ in range(num_ticks):
        advanced = play_turn(model, clicks_per_tick)
        if advanced and model.month % report_every == 0:
            print(
                f"{model.month:5d} | {str(model.alive):>12} | {str(model.due):>12} | "
                f"{str(model.souls):>12} | {str(model.click_yield()):>5} | {model.tick_yield()}"
            )
    elapsed = time.time() - start_time

    print()
    print(f"Finished {model.month} months in {elapsed:.2f} seconds")
    for item in model.world.items.values():
        if item.quantity:
            print(f"  {item.spec.name:<28} x{item.quantity}")
    for upgrade in model.world.upgrades.values():
        if upgrade.bought:
            print(f"  {upgrade.spec.name:<28} (upgrade)")
    return model


def cli():
    parser = argparse.ArgumentParser(description="Run a headless Death Inc. game.")
    parser.add_argument("--ticks", type=int, default=120, help="Months to simulate")
    parser.add_argument("--clicks", type=int, default=5, help="Harvest clicks per month")
    parser.add_argument("--report-every", type=int, default=12, help="Progress interval (months)")
    parser.add_argument(
        "--fragment",
        default="",
        help="Deep-link fragment, e.g. '#cheat' to enable the cheat harvest",
    )
    parser.add_argument("--verbose", action="store_true", help="Log every command")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    main(
        num_ticks=args.ticks,
        clicks_per_tick=args.clicks,
        report_every=max(1, args.report_every),
        cheat=cheat_enabled(args.fragment),
    )


if __name__ == "__main__":
    cli()
