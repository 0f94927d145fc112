"""Utilitaires de parsing et manipulation de dates DSN."""

import calendar
import re
from datetime import date
from typing import Optional

_DATE_DSN = re.compile(r"^\d{8}$")


def parser_date_dsn(valeur: Optional[str]) -> Optional[date]:
    """Parse une date DSN au format AAAAMMJJ.

    Retourne None si le jeton n'a pas 8 chiffres ou si la date n'existe
    pas dans le calendrier (ex. 20250230).
    """
    if not valeur or not _DATE_DSN.match(valeur):
        return None
    annee = int(valeur[0:4])
    mois = int(valeur[4:6])
    jour = int(valeur[6:8])
    try:
        d = date(annee, mois, jour)
    except ValueError:
        return None
    if (d.year, d.month, d.day) != (annee, mois, jour):
        return None
    return d


def premier_jour_mois(annee: int, mois: int) -> date:
    return date(annee, mois, 1)


def dernier_jour_mois(annee: int, mois: int) -> date:
    """Dernier jour du mois (annees bissextiles comprises)."""
    return date(annee, mois, calendar.monthrange(annee, mois)[1])


def formater_date_iso(d: date) -> str:
    return d.isoformat()
