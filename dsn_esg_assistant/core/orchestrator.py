"""Orchestrateur du traitement d'une DSN.

Coordonne l'ensemble du workflow :
1. Controle du depot et empreinte SHA-256
2. Parsing de la DSN et extraction de la periode
3. Chargement du catalogue de questions
4. Calcul des reponses
5. Export (HTML ou JSON) a la demande
6. Modification manuelle d'une reponse, avec conservation de la valeur calculee
"""

import logging
from pathlib import Path
from typing import Optional

from dsn_esg_assistant.config.settings import AppConfig
from dsn_esg_assistant.core.exceptions import IntakeError, InternalError, StructuralInputError
from dsn_esg_assistant.matching.engine import calculer_reponses
from dsn_esg_assistant.matching.normalize import normaliser_employes
from dsn_esg_assistant.matching.periode import extraire_periode, formater_date_declaration
from dsn_esg_assistant.models.questionnaire import ReponseSuivie, ResultatQuestionnaire, ValeurReponse
from dsn_esg_assistant.parsers.dsn_parser import DSNParser
from dsn_esg_assistant.questions.loader import charger_questions
from dsn_esg_assistant.reporting.report_generator import ReportGenerator
from dsn_esg_assistant.reporting.suivi import modifier_reponse, restaurer_suivi
from dsn_esg_assistant.security.audit_logger import AuditLogger
from dsn_esg_assistant.security.intake import verifier_depot
from dsn_esg_assistant.security.integrity import calculer_hash_sha256

logger = logging.getLogger("dsn_esg_assistant")

MESSAGE_ERREUR_INTERNE = "Une erreur interne est survenue lors du traitement de la DSN."


class Orchestrator:
    """Coordonne le traitement d'un fichier DSN jusqu'aux reponses ESRS."""

    def __init__(self, config: AppConfig | None = None):
        self.config = config or AppConfig()
        self.parser = DSNParser()
        self.report_generator = ReportGenerator(self.config.report)
        self.audit = AuditLogger(self.config.audit_log_path)

    def traiter_contenu(
        self,
        nom_fichier: Optional[str],
        donnees: Optional[bytes],
        chemin_questions: Optional[Path] = None,
    ) -> ResultatQuestionnaire:
        """Point d'entree principal : un fichier depose -> reponses calculees.

        Les erreurs de contenu (StructuralInputError) remontent telles quelles ;
        toute autre erreur est journalisee puis convertie en InternalError.
        """
        resultat = ResultatQuestionnaire(nom_fichier=nom_fichier or "")
        session_id = resultat.session_id
        logger.info("Traitement de %s - Session %s", nom_fichier, session_id)

        try:
            self._traiter(resultat, donnees, chemin_questions)
        except StructuralInputError as e:
            logger.warning("DSN refusee (%s) : %s", nom_fichier, e)
            self.audit.log_erreur(session_id, "traitement", str(e))
            raise
        except Exception as e:
            logger.exception("Erreur inattendue lors du traitement de %s", nom_fichier)
            self.audit.log_erreur(session_id, "traitement", f"{type(e).__name__}: {e}")
            raise InternalError(MESSAGE_ERREUR_INTERNE) from e

        return resultat

    def _traiter(
        self,
        resultat: ResultatQuestionnaire,
        donnees: Optional[bytes],
        chemin_questions: Optional[Path],
    ) -> None:
        session_id = resultat.session_id

        # --- Phase 1 : Depot ---
        texte = verifier_depot(resultat.nom_fichier, donnees, self.config.intake.max_octets)
        resultat.hash_sha256 = calculer_hash_sha256(donnees)
        self.audit.log_reception(session_id, resultat.nom_fichier, resultat.hash_sha256, len(donnees))

        # --- Phase 2 : Parsing ---
        declaration = self.parser.parser_contenu(texte)
        resultat.anomalies = list(declaration.anomalies)
        resultat.declaration_date = formater_date_declaration(declaration.mois)
        resultat.periode = extraire_periode(declaration)
        resultat.nb_employes = len(normaliser_employes(declaration))
        metadata = self.parser.extraire_metadata(texte)
        self.audit.log_parsing(
            session_id, declaration.nb_individus, len(declaration.anomalies), metadata["blocs"],
        )

        # --- Phase 3 : Questions ---
        resultat.question_tree = charger_questions(chemin_questions, self.config.questions)

        # --- Phase 4 : Reponses ---
        resultat.answers = calculer_reponses(declaration, resultat.question_tree, resultat.periode)
        self.audit.log_calcul(session_id, len(resultat.answers), resultat.nb_reponses_manuelles)
        logger.info(
            "Session %s : %d reponse(s) calculee(s), %d a saisir",
            session_id, resultat.nb_reponses_calculees, resultat.nb_reponses_manuelles,
        )

    def analyser_fichier(self, chemin: Path, chemin_questions: Optional[Path] = None) -> ResultatQuestionnaire:
        """Traite un fichier DSN present sur disque."""
        chemin = Path(chemin)
        try:
            donnees = chemin.read_bytes()
        except OSError as e:
            raise IntakeError(f"Impossible de lire le fichier {chemin}: {e}") from e
        return self.traiter_contenu(chemin.name, donnees, chemin_questions)

    def exporter(
        self,
        resultat: ResultatQuestionnaire,
        format_rapport: Optional[str] = None,
        dossier: Optional[Path] = None,
    ) -> Path:
        """Ecrit le rapport dans ``dossier`` (par defaut le repertoire des rapports)."""
        format_rapport = format_rapport or self.config.report.format_defaut
        dossier = Path(dossier) if dossier else self.config.reports_dir
        timestamp = resultat.date_traitement.strftime("%Y%m%d_%H%M%S")

        if format_rapport == "json":
            chemin = self.report_generator.generer_json(resultat, dossier / f"esrs_s1-6_{timestamp}.json")
        else:
            chemin = self.report_generator.generer_html(resultat, dossier / f"esrs_s1-6_{timestamp}.html")

        self.audit.log_export(resultat.session_id, format_rapport, str(chemin))
        logger.info("Rapport genere : %s", chemin)
        return chemin

    def modifier_reponse(
        self,
        reponses: dict[str, dict],
        cle: str,
        valeur: ValeurReponse,
        explication: str = "",
        session_id: str = "",
    ) -> dict[str, ReponseSuivie]:
        """Applique une saisie manuelle et retourne les reponses suivies.

        ``reponses`` est la forme JSON des reponses (brutes ou deja suivies).
        Une cle inconnue leve AnswerEditError.
        """
        suivies = modifier_reponse(restaurer_suivi(reponses), cle, valeur, explication)
        self.audit.log_modification(session_id, cle, valeur, suivies[cle].explanation)
        logger.info("Reponse %s modifiee", cle)
        return suivies
