"""Prize wheel: inventory, winner resolution, commentary and the spin controller."""

from luckywheel.wheel.inventory import (
    Inventory,
    InventoryEntry,
    PrizeCategory,
    PrizeInstance,
    PrizeTemplate,
    build_instances,
)
from luckywheel.wheel.resolver import POINTER_ANGLE, resolve_winner, slice_width
from luckywheel.wheel.commentary import (
    DEFAULT_TEMPLATE,
    CommentaryCoordinator,
    EnrichmentStatus,
    SpinRecord,
    render_message,
)
from luckywheel.wheel.controller import SpinController

__all__ = [
    # Inventory
    "Inventory",
    "InventoryEntry",
    "PrizeCategory",
    "PrizeInstance",
    "PrizeTemplate",
    "build_instances",
    # Resolver
    "POINTER_ANGLE",
    "resolve_winner",
    "slice_width",
    # Commentary
    "DEFAULT_TEMPLATE",
    "CommentaryCoordinator",
    "EnrichmentStatus",
    "SpinRecord",
    "render_message",
    # Controller
    "SpinController",
]
