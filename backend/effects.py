"""
Effect registry: which upgrade effects are active against which item.

Buckets are keyed by item spec id and keep purchase order. The registry is
append-only; nothing is ever removed once an upgrade has been applied.
"""

from typing import Dict, Iterator, List, Tuple

from catalog import UpgradeEffect, UpgradeSpec


class EffectRegistry:
    def __init__(self):
        self._buckets: Dict[int, List[UpgradeEffect]] = {}

    def apply(self, upgrade: UpgradeSpec) -> None:
        """Append every effect of `upgrade` to its target item's bucket."""
        for effect in upgrade.effects:
            self._buckets.setdefault(effect.item_id, []).append(effect)

    def effects_for(self, item_id: int) -> Tuple[UpgradeEffect, ...]:
        return tuple(self._buckets.get(item_id, ()))

    def per_click_bonus(self, item_id: int) -> float:
        """1 + the sum of per-click modifiers active on the item."""
        return 1.0 + sum(
            effect.per_click_modifier
            for effect in self._buckets.get(item_id, ())
            if effect.per_click_modifier is not None
        )

    def per_tick_bonus(self, item_id: int) -> float:
        """1 + the sum of per-tick modifiers active on the item."""
        return 1.0 + sum(
            effect.per_tick_modifier
            for effect in self._buckets.get(item_id, ())
            if effect.per_tick_modifier is not None
        )

    def __contains__(self, item_id: int) -> bool:
        return item_id in self._buckets

    def __iter__(self) -> Iterator[int]:
        return iter(self._buckets)

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._buckets.values())

    def to_dict(self) -> Dict[int, List[Dict[str, object]]]:
        return {
            item_id: [
                {
                    "per_click_modifier": effect.per_click_modifier,
                    "per_tick_modifier": effect.per_tick_modifier,
                }
                for effect in bucket
            ]
            for item_id, bucket in self._buckets.items()
        }
