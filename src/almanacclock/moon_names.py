"""Traditional full-moon names by calendar month."""

from almanacclock.errors import InvalidInputError
from almanacclock.models import TraditionalMoon

_MOONS: dict[int, TraditionalMoon] = {
    1: TraditionalMoon(
        "Wolf Moon",
        "Deep-winter full moon of January.",
        "Named for wolves heard howling near villages in the cold and hungry midwinter.",
    ),
    2: TraditionalMoon(
        "Snow Moon",
        "Full moon of February, usually the snowiest month.",
        "Also called the Hunger Moon, as hunting grew hard under heavy snow.",
    ),
    3: TraditionalMoon(
        "Worm Moon",
        "Last full moon of winter.",
        "Thawing ground brings earthworms and the birds that follow them.",
    ),
    4: TraditionalMoon(
        "Pink Moon",
        "Full moon of April.",
        "Named for the early-blooming pink wild ground phlox.",
    ),
    5: TraditionalMoon(
        "Flower Moon",
        "Full moon of May.",
        "Flowers bloom in abundance across the fields.",
    ),
    6: TraditionalMoon(
        "Strawberry Moon",
        "Full moon of June, low in the summer sky.",
        "Marks the short season for gathering ripening wild strawberries.",
    ),
    7: TraditionalMoon(
        "Buck Moon",
        "Full moon of July.",
        "Male deer are regrowing their antlers in velvet at this time.",
    ),
    8: TraditionalMoon(
        "Sturgeon Moon",
        "Full moon of August.",
        "Sturgeon were most readily caught in the lakes during late summer.",
    ),
    9: TraditionalMoon(
        "Harvest Moon",
        "Full moon of September, nearest the autumn equinox.",
        "Its early rising gave farmers extra light to bring in the crops.",
    ),
    10: TraditionalMoon(
        "Hunter's Moon",
        "Full moon of October.",
        "Bright autumn nights for hunting before winter set in.",
    ),
    11: TraditionalMoon(
        "Beaver Moon",
        "Full moon of November.",
        "Beavers shelter in their lodges and traps were set before the swamps froze.",
    ),
    12: TraditionalMoon(
        "Cold Moon",
        "Full moon of December, near the winter solstice.",
        "Rides high and long through the longest nights of the year.",
    ),
}


def name_for_month(month: int) -> TraditionalMoon:
    """Traditional name and lore for the full moon of `month` (1-12)."""
    try:
        return _MOONS[month]
    except KeyError:
        raise InvalidInputError(f"month must be in 1..12, got {month}") from None
