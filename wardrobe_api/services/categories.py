"""Enumerations describing clothing categories and outfit slots."""

from enum import Enum


class ClothingCategory(str, Enum):
    """Fixed set of categories a wardrobe item can belong to."""

    TOP = "top"
    BOTTOM = "bottom"
    DRESS = "dress"
    OUTERWEAR = "outerwear"
    SHOES = "shoes"
    ACCESSORIES = "accessories"
    SCARF = "scarf"
    HAT = "hat"
    ACTIVEWEAR = "activewear"
    INTIMATES = "intimates"


ACCESSORIES_SLOT = ClothingCategory.ACCESSORIES.value