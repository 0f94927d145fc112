"""Resultat commun des strategies de calcul."""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class ResultatMetrique:
    """Valeur calculee et explication lisible pour l'audit."""
    value: Union[int, float]
    explanation: str
