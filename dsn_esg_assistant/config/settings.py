"""Configuration globale de l'application."""

import os
from pathlib import Path
from dataclasses import dataclass, field

from dsn_esg_assistant.config.constants import TAILLE_MAX_DEPOT_OCTETS

PACKAGE_DIR = Path(__file__).parent.parent
CATALOGUE_PAR_DEFAUT = PACKAGE_DIR / "data" / "questions.csv"


def _chemin_catalogue_defaut() -> Path:
    env = os.getenv("QUESTIONS_CSV_PATH")
    return Path(env) if env else CATALOGUE_PAR_DEFAUT


@dataclass
class IntakeConfig:
    """Configuration du depot de fichiers DSN."""
    max_octets: int = TAILLE_MAX_DEPOT_OCTETS


@dataclass
class QuestionsConfig:
    """Configuration du catalogue de questions."""
    chemin_catalogue: Path = field(default_factory=_chemin_catalogue_defaut)


@dataclass
class ReportConfig:
    """Configuration rapports."""
    format_defaut: str = "html"
    libelle_absent: str = "Not provided"
    langue: str = "en"


@dataclass
class AppConfig:
    """Configuration principale de l'application."""
    base_dir: Path = field(default_factory=lambda: Path(__file__).parent.parent.parent)
    data_dir: Path = field(default=None)
    reports_dir: Path = field(default=None)
    audit_log_path: Path = field(default=None)

    intake: IntakeConfig = field(default_factory=IntakeConfig)
    questions: QuestionsConfig = field(default_factory=QuestionsConfig)
    report: ReportConfig = field(default_factory=ReportConfig)

    def __post_init__(self):
        if self.data_dir is None:
            self.data_dir = self.base_dir / "data"
        if self.reports_dir is None:
            self.reports_dir = self.data_dir / "reports"
        if self.audit_log_path is None:
            self.audit_log_path = self.data_dir / "audit.log"

        # Creer les repertoires si necessaire
        for d in [self.data_dir, self.reports_dir]:
            d.mkdir(parents=True, exist_ok=True)
