"""Prize pool for the wheel.

Prize templates are expanded into one instance per unit of stock and
shuffled once. The resulting sequence is the wheel: one slice per
instance, in order. Winning removes exactly one instance and never
reorders the rest.
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Sequence

from luckywheel.core.errors import EmptyPoolError

logger = logging.getLogger(__name__)


# Slice colors, cycled by template position
COLORS = [
    "#f59e0b", "#3b82f6", "#ef4444", "#ec4899", "#8b5cf6", "#10b981",
]


class PrizeCategory(Enum):
    """Prize categories."""

    FOOD = "food"
    TECH = "tech"
    MONEY = "money"


@dataclass(frozen=True)
class PrizeTemplate:
    """Operator-configured prize with its stock count."""

    name: str
    image: str = ""
    color: str = ""
    category: PrizeCategory = PrizeCategory.FOOD
    description: str = ""
    count: int = 1


@dataclass(frozen=True)
class PrizeInstance:
    """A single awardable unit, one wheel slice."""

    id: str
    name: str
    image: str
    color: str
    category: PrizeCategory
    description: str


@dataclass(frozen=True)
class InventoryEntry:
    """Remaining stock of one prize name, for display."""

    name: str
    count: int
    image: str
    color: str


def build_instances(
    templates: Sequence[PrizeTemplate],
    rng: Optional[random.Random] = None,
    generation: int = 0,
) -> List[PrizeInstance]:
    """Expand templates into shuffled prize instances.

    Args:
        templates: Prize templates in configuration order
        rng: Random source for the shuffle (module random if omitted)
        generation: Rebuild counter, keeps ids unique across rebuilds

    Returns:
        Uniformly shuffled list of instances

    Raises:
        EmptyPoolError: If the templates hold no stock at all
    """
    rng = rng or random.Random()
    instances: List[PrizeInstance] = []

    for idx, template in enumerate(templates):
        color = COLORS[idx % len(COLORS)]
        for seq in range(max(0, template.count)):
            instances.append(PrizeInstance(
                id=f"prize-{idx}-{seq}-{generation}",
                name=template.name,
                image=template.image,
                color=color,
                category=template.category,
                description=template.description,
            ))

    if not instances:
        raise EmptyPoolError("Prize templates contain no stock")

    rng.shuffle(instances)
    return instances


class Inventory:
    """Ordered pool of prize instances currently on the wheel."""

    def __init__(self, instances: Iterable[PrizeInstance] = ()) -> None:
        self._items: List[PrizeInstance] = list(instances)
        ids = [p.id for p in self._items]
        if len(ids) != len(set(ids)):
            raise ValueError("Duplicate prize instance ids")

    @classmethod
    def from_templates(
        cls,
        templates: Sequence[PrizeTemplate],
        rng: Optional[random.Random] = None,
        generation: int = 0,
    ) -> "Inventory":
        """Build a shuffled inventory (raises EmptyPoolError on zero stock)."""
        inventory = cls(build_instances(templates, rng, generation))
        logger.info(f"Inventory built: {len(inventory)} slices from {len(templates)} templates")
        return inventory

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[PrizeInstance]:
        return iter(self._items)

    def __getitem__(self, index: int) -> PrizeInstance:
        return self._items[index]

    @property
    def is_empty(self) -> bool:
        return not self._items

    def names(self) -> List[str]:
        """Prize names in slice order."""
        return [p.name for p in self._items]

    def remove(self, instance_id: str) -> Optional[PrizeInstance]:
        """Remove one instance by id.

        Unknown ids are ignored: the caller may be mid-transition.

        Returns:
            The removed instance, or None if it was not in the pool
        """
        for i, prize in enumerate(self._items):
            if prize.id == instance_id:
                del self._items[i]
                logger.debug(f"Removed {instance_id}, {len(self._items)} slices left")
                return prize

        logger.warning(f"Prize instance not in inventory: {instance_id}")
        return None

    def snapshot(self) -> List[InventoryEntry]:
        """Remaining stock grouped by name.

        Sorted by descending count; ties keep first-appearance order.
        """
        counts: dict[str, int] = {}
        first: dict[str, PrizeInstance] = {}
        for prize in self._items:
            if prize.name not in counts:
                counts[prize.name] = 0
                first[prize.name] = prize
            counts[prize.name] += 1

        entries = [
            InventoryEntry(name, count, first[name].image, first[name].color)
            for name, count in counts.items()
        ]
        # sorted() is stable, so equal counts stay in first-appearance order
        return sorted(entries, key=lambda e: -e.count)
