"""Extraction de la periode de declaration (S20.G00.05.005).

La rubrique "mois" contient soit AAAAMM (ex. "202511"), soit AAAAMMJJ
(ex. "20251130"). Dans les deux cas seul le mois compte : le jour est
ignore et la periode couvre le mois calendaire complet.

    "202511"   -> 2025-11-01 .. 2025-11-30
    "20240229" -> 2024-02-01 .. 2024-02-29
"""

import re
from datetime import date
from typing import Optional

from dsn_esg_assistant.config.constants import ANNEE_MIN, ANNEE_MAX, RUBRIQUES_DECLARATION
from dsn_esg_assistant.core.exceptions import PeriodError
from dsn_esg_assistant.models.declaration import DateRange, Declaration
from dsn_esg_assistant.utils.date_utils import dernier_jour_mois, premier_jour_mois

_MOIS_DSN = re.compile(r"^(\d{6}|\d{8})$")

# Abreviations anglaises, independantes de la locale
MOIS_ABREGES = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

RUBRIQUE_MOIS = RUBRIQUES_DECLARATION["mois"]


def _annee_mois(mois: str) -> tuple[int, int]:
    aaaamm = mois[:6]
    return int(aaaamm[0:4]), int(aaaamm[4:6])


def extraire_periode(declaration: Declaration) -> DateRange:
    """Retourne le mois declare sous forme de plage [premier jour, dernier jour]."""
    mois = declaration.mois
    if mois is None:
        raise PeriodError(
            f"Periode de declaration absente de la DSN ({RUBRIQUE_MOIS}) : "
            "rubrique introuvable dans la declaration."
        )

    if not _MOIS_DSN.match(mois):
        raise PeriodError(
            f"Format de periode invalide dans la DSN ({RUBRIQUE_MOIS}) : "
            f'AAAAMM ou AAAAMMJJ attendu, "{mois}" trouve.'
        )

    annee, numero_mois = _annee_mois(mois)
    if not (ANNEE_MIN <= annee <= ANNEE_MAX) or not (1 <= numero_mois <= 12):
        raise PeriodError(
            f'Periode invalide dans la DSN : "{mois}" (annee : {annee}, mois : {numero_mois})'
        )

    return DateRange(
        debut=premier_jour_mois(annee, numero_mois),
        fin=dernier_jour_mois(annee, numero_mois),
    )


def formater_date_declaration(mois: Optional[str]) -> str:
    """Libelle de la date declaree pour l'affichage ("30 Nov 2025").

    Le jour vaut 01 pour un mois AAAAMM ; "Unknown" si la valeur est inutilisable.
    """
    if not mois or not re.match(r"^\d{6,8}$", mois):
        return "Unknown"
    annee, numero_mois = _annee_mois(mois)
    jour = int(mois[6:8]) if len(mois) == 8 else 1
    try:
        d = date(annee, numero_mois, jour)
    except ValueError:
        return "Unknown"
    return f"{d.day:02d} {MOIS_ABREGES[d.month - 1]} {d.year}"
