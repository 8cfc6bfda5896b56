from __future__ import annotations

from typing import Dict, Tuple

from blockfall.game.pieces import color_for


RGB = Tuple[int, int, int]

EMPTY_RGB: RGB = (20, 20, 26)
CLEARING_RGB: RGB = (250, 250, 250)

COLOR_RGB: Dict[str, RGB] = {
    "cyan": (0, 240, 240),
    "blue": (0, 0, 240),
    "orange": (240, 160, 0),
    "yellow": (240, 240, 0),
    "green": (0, 240, 0),
    "purple": (160, 0, 240),
    "red": (240, 0, 0),
}


def color_for_value(v: int) -> RGB:
    """RGB for a grid value; negative values (falling piece) use the same colour."""
    if v == 0:
        return EMPTY_RGB
    return COLOR_RGB.get(color_for(v), (200, 200, 200))
