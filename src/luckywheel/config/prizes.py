"""
Prize template loading.

Templates come from a YAML file of the form::

    prizes:
      - name: 5 Thùng Bia 333
        image: https://example.com/beer.png
        category: food
        description: Cheers!
        count: 5

or from the built-in defaults.
"""

from pathlib import Path
from typing import Any

import yaml

from luckywheel.core.errors import ValidationError
from luckywheel.wheel.inventory import PrizeCategory, PrizeTemplate


DEFAULT_PRIZES: list[PrizeTemplate] = [
    PrizeTemplate(
        name="10 Chai Nước Tăng Lực",
        image="https://cdn-icons-png.flaticon.com/512/3041/3041130.png",
        color="#f59e0b",
        category=PrizeCategory.FOOD,
        description="Năng lượng bùng nổ, quẩy xuyên màn đêm!",
        count=10,
    ),
    PrizeTemplate(
        name="5 Thùng Mì Tôm",
        image="https://cdn-icons-png.flaticon.com/512/3448/3448099.png",
        color="#ef4444",
        category=PrizeCategory.FOOD,
        description="Cứu tinh cho những đêm cày game đói bụng!",
        count=5,
    ),
    PrizeTemplate(
        name="5 Thùng Bia 333",
        image="https://cdn-icons-png.flaticon.com/512/931/931949.png",
        color="#ef4444",
        category=PrizeCategory.FOOD,
        description="Đậm đà hương vị Việt, cuộc vui thêm trọn vẹn!",
        count=5,
    ),
    PrizeTemplate(
        name="5 Chai Nước Mắm",
        image="https://cdn-icons-png.flaticon.com/512/3295/3295777.png",
        color="#8b5cf6",
        category=PrizeCategory.FOOD,
        description="Gia vị quốc hồn quốc túy cho bữa cơm gia đình!",
        count=5,
    ),
]


def template_from_dict(data: dict[str, Any]) -> PrizeTemplate:
    """Create a prize template from YAML data."""
    if not isinstance(data, dict):
        raise ValidationError(f"Prize entry must be a mapping, got {data!r}")
    name = str(data.get("name", "")).strip()
    if not name:
        raise ValidationError("Prize template needs a name")

    try:
        category = PrizeCategory(data.get("category", "food"))
    except ValueError:
        raise ValidationError(f"Unknown prize category for {name}: {data.get('category')}")

    try:
        count = int(data.get("count", 1))
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid count for {name}: {data.get('count')}")
    if count < 0:
        raise ValidationError(f"Negative count for {name}: {count}")

    return PrizeTemplate(
        name=name,
        image=str(data.get("image", "")),
        color=str(data.get("color", "")),
        category=category,
        description=str(data.get("description", "")),
        count=count,
    )


def load_prizes(prizes_file: Path | None = None) -> list[PrizeTemplate]:
    """
    Load prize templates from a YAML file.

    Args:
        prizes_file: Path to the YAML file, built-in defaults if None

    Returns:
        Templates in file order
    """
    if prizes_file is None:
        return list(DEFAULT_PRIZES)

    with open(prizes_file, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    entries = data.get("prizes", []) if isinstance(data, dict) else data
    if not isinstance(entries, list):
        raise ValidationError(f"{prizes_file}: expected a list of prizes")

    return [template_from_dict(entry) for entry in entries]
