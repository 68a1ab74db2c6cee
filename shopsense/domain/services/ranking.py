"""Deterministic picks over a retrieved candidate list."""

from typing import NamedTuple, Sequence

from shopsense.domain.models.product import Product
from shopsense.domain.services.constants import UNRATED_EFFECTIVE_RATING


class Picks(NamedTuple):
    best_value: Product
    top_rated: Product


def effective_rating(product: Product) -> float:
    """Rating used for value math only; an unrated (0) product counts as 1."""
    return product.rating if product.rating > 0 else UNRATED_EFFECTIVE_RATING


def value_ratio(product: Product) -> float:
    """Price paid per rating point. Lower is better value."""
    return product.price / effective_rating(product)


def select_top_rated(products: Sequence[Product]) -> Product:
    """Highest rating; the earliest product wins ties."""
    if not products:
        raise ValueError("select_top_rated() needs at least one product")
    best = products[0]
    for p in products[1:]:
        if p.rating > best.rating:
            best = p
    return best


def select_best_value(products: Sequence[Product]) -> Product:
    """Lowest price/effective_rating; the earliest product wins ties."""
    if not products:
        raise ValueError("select_best_value() needs at least one product")
    best = products[0]
    best_ratio = value_ratio(best)
    for p in products[1:]:
        ratio = value_ratio(p)
        if ratio < best_ratio:
            best, best_ratio = p, ratio
    return best


def select_picks(products: Sequence[Product]) -> Picks:
    return Picks(best_value=select_best_value(products), top_rated=select_top_rated(products))
