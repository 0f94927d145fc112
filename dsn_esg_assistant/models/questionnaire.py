"""Modeles du questionnaire ESRS : noeuds de questions et reponses."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from dsn_esg_assistant.config.constants import TypeContenu
from dsn_esg_assistant.models.declaration import DateRange


ValeurReponse = Union[int, float, str, None]


class QuestionNode(BaseModel):
    """Noeud de l'arbre de questions.

    - content "" : section (conteneur titre, jamais de reponse)
    - content "Table" : tableau eclate par dimension (pays, genre, categorie)
    - content "number" / "enum" / "Text" : question feuille

    ``children`` est toujours une liste (vide pour une feuille).
    """
    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    label_en: str
    label_fr: Optional[str] = None
    content: TypeContenu
    parent_id: Optional[str] = None
    order: int = 0
    unit: Optional[str] = None
    enum_en: Optional[list[str]] = None
    enum_fr: Optional[list[str]] = None
    children: list[QuestionNode] = Field(default_factory=list)

    @property
    def est_section(self) -> bool:
        return self.content == TypeContenu.SECTION

    @property
    def est_table(self) -> bool:
        return self.content == TypeContenu.TABLE

    @property
    def est_feuille(self) -> bool:
        return not (self.est_section or self.est_table)


QuestionNode.model_rebuild()


class Reponse(BaseModel):
    """Reponse avec sa provenance et une explication d'audit."""
    model_config = ConfigDict(frozen=True)

    value: ValeurReponse = None
    source: Literal["computed", "manual"]
    explanation: str = ""


class ReponseSuivie(Reponse):
    """Reponse suivie par la couche de saisie.

    La valeur calculee d'origine est conservee a cote de la valeur saisie.
    """
    is_modified: bool = False
    original_value: ValeurReponse = None
    original_explanation: str = ""


@dataclass
class ResultatQuestionnaire:
    """Resultat complet du traitement d'un fichier DSN."""
    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    date_traitement: datetime = field(default_factory=datetime.now)
    nom_fichier: str = ""
    hash_sha256: str = ""
    declaration_date: str = "Unknown"
    periode: Optional[DateRange] = None
    question_tree: list[QuestionNode] = field(default_factory=list)
    answers: dict[str, Reponse] = field(default_factory=dict)
    anomalies: list[str] = field(default_factory=list)
    nb_employes: int = 0

    @property
    def nb_reponses_calculees(self) -> int:
        return sum(1 for r in self.answers.values() if r.source == "computed")

    @property
    def nb_reponses_manuelles(self) -> int:
        return sum(1 for r in self.answers.values() if r.source == "manual")

    def to_dict(self) -> dict:
        return {
            "declaration_date": self.declaration_date,
            "question_tree": [n.model_dump(mode="json") for n in self.question_tree],
            "answers": {k: r.model_dump(mode="json") for k, r in self.answers.items()},
        }
