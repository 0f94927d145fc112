"""Parseur des fichiers DSN (Declaration Sociale Nominative) au format texte.

Seuls les blocs utiles aux indicateurs d'effectif sont decodes :
- S20.G00.05 : Envoi / declaration (mois declare)
- S21.G00.06 : Entreprise
- S21.G00.11 : Etablissement (pays d'emploi)
- S21.G00.30 : Individu
- S21.G00.40 : Contrat
- S21.G00.62 : Fin du contrat
"""

import logging
from pathlib import Path
from typing import Any

from dsn_esg_assistant.core.exceptions import ParseError
from dsn_esg_assistant.models.declaration import Declaration
from dsn_esg_assistant.parsers.conformity import verifier_blocs_obligatoires
from dsn_esg_assistant.parsers.dsn_reader import (
    DSN_LINE_PATTERN, construire_declaration, lire_lignes_dsn,
)

logger = logging.getLogger("dsn_esg_assistant.dsn")


class DSNParser:
    """Parse les fichiers DSN en format texte structure."""

    def extraire_metadata(self, contenu: str) -> dict[str, Any]:
        """Nombre de lignes reconnues par code bloc, pour la tracabilite."""
        metadata = {"format": "dsn", "sous_format": "texte_structure"}

        # Compter les lignes par bloc
        blocs = {}
        for ligne in contenu.replace("\r", "").split("\n"):
            if DSN_LINE_PATTERN.match(ligne):
                code = ligne[0:10]
                blocs[code] = blocs.get(code, 0) + 1
        metadata["blocs"] = blocs
        return metadata

    def parser(self, chemin: Path) -> Declaration:
        return self.parser_contenu(self._lire_fichier(chemin))

    def parser_contenu(self, contenu: str) -> Declaration:
        """Controle de conformite puis parsing complet du texte DSN."""
        verifier_blocs_obligatoires(contenu)

        lignes = lire_lignes_dsn(contenu)
        declaration = construire_declaration(lignes)
        logger.info(
            "DSN lue : %d ligne(s), %d etablissement(s), %d individu(s)",
            len(lignes), len(declaration.etablissements), declaration.nb_individus,
        )

        if not declaration.valide:
            raise ParseError(
                "La DSN contient des erreurs structurelles : " + "; ".join(declaration.anomalies)
            )
        return declaration

    def _lire_fichier(self, chemin: Path) -> str:
        """Lit le fichier DSN avec detection d'encodage."""
        for encoding in ("utf-8", "cp1252", "latin-1"):
            try:
                with open(chemin, "r", encoding=encoding) as f:
                    return f.read()
            except UnicodeDecodeError:
                continue
            except OSError as e:
                raise ParseError(f"Impossible de lire le fichier DSN {chemin}: {e}") from e
        raise ParseError(f"Impossible de decoder le fichier DSN {chemin}")
