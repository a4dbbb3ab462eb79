"""Static factlet corpus and its data model."""

from .collection import CORPUS, get_factlet, random_factlet
from .models import Category, Factlet, Level

__all__ = [
    "CORPUS",
    "Category",
    "Factlet",
    "Level",
    "get_factlet",
    "random_factlet",
]
