"""Regroupement des salaries par dimension pour les tableaux ESRS.

Les valeurs absentes ou vides sont regroupees sous "unknown". L'ordre des
groupes est celui de la premiere apparition dans la liste.
"""

from typing import Callable, Optional

from dsn_esg_assistant.config.constants import CLE_INCONNUE
from dsn_esg_assistant.models.declaration import Employe

Dimension = Callable[[Employe], Optional[str]]


def _cle(valeur: Optional[str]) -> str:
    if valeur is None or not valeur.strip():
        return CLE_INCONNUE
    return valeur


def regrouper(employes: list[Employe], dimension: Dimension) -> dict[str, list[Employe]]:
    groupes: dict[str, list[Employe]] = {}
    for employe in employes:
        groupes.setdefault(_cle(dimension(employe)), []).append(employe)
    return groupes


def par_pays(employe: Employe) -> Optional[str]:
    return employe.pays


def par_categorie(employe: Employe) -> Optional[str]:
    return employe.pcs_ese


def par_genre_et_categorie(employe: Employe) -> str:
    """Cle composite "{genre}_{pcs}" ("M_3855", "F_unknown", ...)."""
    return f"{_cle(employe.genre)}_{_cle(employe.pcs_ese)}"
