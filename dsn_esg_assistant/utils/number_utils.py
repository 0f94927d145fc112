"""Utilitaires pour le traitement des nombres affiches dans les reponses."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

Nombre = Union[int, float, Decimal]


def arrondir_entier(valeur: Nombre) -> int:
    """Arrondi a l'entier le plus proche, demi vers le haut (12.5 -> 13)."""
    return int(Decimal(str(valeur)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def arrondir_decimale(valeur: Nombre, decimales: int = 1) -> float:
    """Arrondi demi vers le haut a ``decimales`` chiffres."""
    pas = Decimal(1).scaleb(-decimales)
    return float(Decimal(str(valeur)).quantize(pas, rounding=ROUND_HALF_UP))


def formater_nombre(valeur: Nombre) -> str:
    """Formate un nombre sans decimale inutile : 1.0 -> "1", 1.5 -> "1.5"."""
    if isinstance(valeur, float) and valeur.is_integer():
        return str(int(valeur))
    return str(valeur)


def pluriel(nombre: int, mot: str) -> str:
    return mot if nombre == 1 else f"{mot}s"
