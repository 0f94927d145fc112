"""Controle de conformite leger d'un fichier DSN.

Verifie uniquement la presence des blocs obligatoires (S10, S20, S21) avant
le parsing complet. Ni la structure ni le contenu des blocs ne sont valides.
"""

from dsn_esg_assistant.config.constants import BLOCS_OBLIGATOIRES
from dsn_esg_assistant.core.exceptions import ConformityError


def blocs_manquants(contenu: str) -> list[str]:
    """Retourne les prefixes obligatoires absents du contenu."""
    presents = set()
    for ligne in contenu.split("\n"):
        for prefixe in BLOCS_OBLIGATOIRES:
            if ligne.startswith(prefixe):
                presents.add(prefixe)
        if len(presents) == len(BLOCS_OBLIGATOIRES):
            break
    return [p.rstrip(".") for p in BLOCS_OBLIGATOIRES if p not in presents]


def verifier_blocs_obligatoires(contenu: str) -> None:
    manquants = blocs_manquants(contenu)
    if manquants:
        raise ConformityError(
            "DSN invalide : bloc(s) obligatoire(s) absent(s) : "
            f"{', '.join(manquants)} (S10, S20 et S21 requis)."
        )
