"""Journal d'audit append-only des traitements DSN."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

logger = logging.getLogger("dsn_esg_assistant.audit")


class AuditLogger:
    """Journalise chaque etape d'une session au format JSON lines."""

    def __init__(self, log_path: Path):
        self.log_path = log_path
        self.log_path.parent.mkdir(parents=True, exist_ok=True)

    def log(
        self,
        operation: str,
        session_id: str,
        *,
        details: Optional[dict] = None,
        fichier: Optional[str] = None,
        hash_fichier: Optional[str] = None,
        resultat: str = "succes",
    ) -> None:
        """Ajoute une entree au journal.

        Une erreur d'ecriture est journalisee sans interrompre le traitement.
        """
        entry = {
            "timestamp": datetime.now().isoformat(),
            "session_id": session_id,
            "operation": operation,
            "resultat": resultat,
        }
        if fichier:
            entry["fichier"] = fichier
        if hash_fichier:
            entry["hash_fichier"] = hash_fichier
        if details:
            entry["details"] = details

        line = json.dumps(entry, ensure_ascii=False)
        try:
            with open(self.log_path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            logger.error("Impossible d'ecrire dans le journal d'audit: %s", e)

    def log_reception(self, session_id: str, fichier: str, hash_fichier: str, taille: int) -> None:
        self.log(
            "reception_dsn", session_id,
            fichier=fichier, hash_fichier=hash_fichier, details={"taille_octets": taille},
        )

    def log_parsing(
        self, session_id: str, nb_individus: int, nb_anomalies: int,
        blocs: Optional[dict[str, int]] = None,
    ) -> None:
        details = {"nb_individus": nb_individus, "nb_anomalies": nb_anomalies}
        if blocs:
            details["blocs"] = blocs
        self.log("parsing_dsn", session_id, details=details)

    def log_modification(self, session_id: str, cle: str, valeur, explication: str) -> None:
        self.log(
            "modification_reponse", session_id,
            details={"cle": cle, "valeur": valeur, "explication": explication},
        )

    def log_calcul(self, session_id: str, nb_reponses: int, nb_manuelles: int) -> None:
        self.log(
            "calcul_reponses", session_id,
            details={"nb_reponses": nb_reponses, "nb_manuelles": nb_manuelles},
        )

    def log_export(self, session_id: str, format_export: str, chemin: str) -> None:
        self.log("export", session_id, details={"format": format_export, "chemin": chemin})

    def log_erreur(self, session_id: str, operation: str, erreur: str) -> None:
        self.log(operation, session_id, details={"erreur": erreur}, resultat="echec")

    def lire_journal(self) -> list[dict]:
        """Lit toutes les entrees du journal."""
        if not self.log_path.exists():
            return []
        entries = []
        with open(self.log_path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line:
                    entries.append(json.loads(line))
        return entries
