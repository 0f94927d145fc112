"""Controles de depot d'un fichier DSN avant parsing."""

import logging
from pathlib import Path
from typing import Optional

from dsn_esg_assistant.config.constants import EXTENSIONS_DEPOT, TAILLE_MAX_DEPOT_OCTETS
from dsn_esg_assistant.core.exceptions import IntakeError

logger = logging.getLogger("dsn_esg_assistant.api")

ENCODAGES_ACCEPTES = ("utf-8-sig", "cp1252")


def _decoder(donnees: bytes) -> str:
    if b"\x00" in donnees:
        raise IntakeError("Le fichier semble binaire : un fichier texte DSN (.txt) est attendu.")
    for encodage in ENCODAGES_ACCEPTES:
        try:
            return donnees.decode(encodage)
        except UnicodeDecodeError:
            continue
    raise IntakeError("Impossible de decoder le fichier : un fichier texte DSN (.txt) est attendu.")


def verifier_depot(
    nom_fichier: Optional[str],
    donnees: Optional[bytes],
    max_octets: int = TAILLE_MAX_DEPOT_OCTETS,
) -> str:
    """Valide le fichier depose et retourne son texte decode.

    Refuse un fichier absent ou vide, trop volumineux, d'extension autre que
    .txt, ou dont le contenu n'est pas du texte.
    """
    if not nom_fichier or not donnees:
        raise IntakeError("Please upload a DSN file (.txt).")

    if len(donnees) > max_octets:
        raise IntakeError(f"File too large (Maximum size {max_octets // 1_000_000}MB)")

    extension = Path(nom_fichier).suffix.lower()
    if extension not in EXTENSIONS_DEPOT:
        raise IntakeError(
            f"Format '{extension or nom_fichier}' non supporte. Please upload a DSN file (.txt)."
        )

    texte = _decoder(donnees)
    logger.debug("Depot accepte : %s (%d octets)", nom_fichier, len(donnees))
    return texte
