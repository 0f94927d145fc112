"""Tests du suivi des modifications et des exports."""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import json
from datetime import date

import pytest

from dsn_esg_assistant.config.constants import TypeContenu
from dsn_esg_assistant.config.settings import ReportConfig
from dsn_esg_assistant.core.exceptions import AnswerEditError
from dsn_esg_assistant.matching.engine import calculer_reponses
from dsn_esg_assistant.matching.periode import extraire_periode
from dsn_esg_assistant.models.declaration import DateRange
from dsn_esg_assistant.models.questionnaire import QuestionNode, Reponse, ResultatQuestionnaire
from dsn_esg_assistant.parsers.dsn_parser import DSNParser
from dsn_esg_assistant.questions.loader import charger_questions
from dsn_esg_assistant.reporting.report_generator import ReportGenerator
from dsn_esg_assistant.reporting.suivi import (
    annuler_modification, modifier_reponse, restaurer_suivi, suivre_reponses,
)

FIXTURES = Path(__file__).parent.parent / "fixtures"


def _resultat() -> ResultatQuestionnaire:
    declaration = DSNParser().parser(FIXTURES / "dsn-global-minimal.txt")
    arbre = charger_questions(FIXTURES / "questions-valid.csv")
    return ResultatQuestionnaire(
        nom_fichier="dsn-global-minimal.txt",
        declaration_date="30 Nov 2025",
        periode=extraire_periode(declaration),
        question_tree=arbre,
        answers=calculer_reponses(declaration, arbre),
        nb_employes=5,
    )


class TestSuiviReponses:

    def setup_method(self):
        self.suivies = suivre_reponses({
            "S1-6_02": Reponse(value=4, source="computed", explanation="4 employees"),
            "S1-6_16": Reponse(value=None, source="manual", explanation=""),
        })

    def test_suivi_initial(self):
        reponse = self.suivies["S1-6_02"]
        assert reponse.is_modified is False
        assert reponse.original_value == 4
        assert reponse.original_explanation == "4 employees"

    def test_modification_sans_ecrasement(self):
        modifiees = modifier_reponse(self.suivies, "S1-6_02", 5, "Corrige apres revue RH")

        assert modifiees is not self.suivies
        assert self.suivies["S1-6_02"].value == 4
        assert self.suivies["S1-6_02"].is_modified is False

        reponse = modifiees["S1-6_02"]
        assert reponse.value == 5
        assert reponse.is_modified is True
        assert reponse.source == "computed"
        assert reponse.original_value == 4
        assert reponse.explanation == "Corrige apres revue RH"
        assert modifiees["S1-6_16"] is self.suivies["S1-6_16"]

    def test_saisie_manuelle(self):
        modifiees = modifier_reponse(self.suivies, "S1-6_16", "Head-count at period end")
        assert modifiees["S1-6_16"].value == "Head-count at period end"
        assert modifiees["S1-6_16"].original_value is None

    def test_annulation(self):
        modifiees = modifier_reponse(self.suivies, "S1-6_02", 5)
        restaurees = annuler_modification(modifiees, "S1-6_02")
        assert restaurees["S1-6_02"].value == 4
        assert restaurees["S1-6_02"].explanation == "4 employees"
        assert restaurees["S1-6_02"].is_modified is False

    def test_cle_inconnue(self):
        with pytest.raises(AnswerEditError):
            modifier_reponse(self.suivies, "S1-6_99", 1)
        with pytest.raises(AnswerEditError):
            annuler_modification(self.suivies, "S1-6_99")

    def test_restauration_depuis_json(self):
        brutes = {"S1-6_02": {"value": 4, "source": "computed", "explanation": "4 employees"}}
        suivies = restaurer_suivi(brutes)
        assert suivies["S1-6_02"].original_value == 4
        assert suivies["S1-6_02"].is_modified is False

        modifiees = modifier_reponse(suivies, "S1-6_02", 5)
        json_suivi = {k: r.model_dump(mode="json") for k, r in modifiees.items()}
        relues = restaurer_suivi(json_suivi)
        assert relues["S1-6_02"].value == 5
        assert relues["S1-6_02"].original_value == 4
        assert relues["S1-6_02"].is_modified is True


class TestReportGenerator:

    def setup_method(self):
        self.generator = ReportGenerator()
        self.resultat = _resultat()

    def test_html(self):
        html = self.generator.construire_html(self.resultat)
        assert "<!DOCTYPE html>" in html
        assert "30 Nov 2025" in html
        assert "Employees by country" in html
        assert "<td>IR</td>" in html
        assert "3.5" in html
        assert "Turnover rate: 20%" in html

    def test_reponses_manuelles_non_renseignees(self):
        html = self.generator.construire_html(self.resultat)
        assert "Not provided" in html

    def test_reponses_absentes(self):
        self.resultat.answers = {}
        html = self.generator.construire_html(self.resultat)
        assert "Key figures on employees" in html
        assert "Not provided" in html

    def test_echappement(self):
        self.resultat.question_tree = [
            QuestionNode(id="X", label_en="<script>alert(1)</script>", content=TypeContenu.TEXTE),
        ]
        html = self.generator.construire_html(self.resultat)
        assert "<script>alert(1)</script>" not in html
        assert "&lt;script&gt;" in html

    def test_libelles_francais(self):
        generator = ReportGenerator(ReportConfig(langue="fr"))
        html = generator.construire_html(self.resultat)
        assert "Salaries par pays" in html

    def test_generer_html(self, tmp_path):
        chemin = self.generator.generer_html(self.resultat, tmp_path / "out" / "rapport.html")
        assert chemin.exists()
        assert "ESRS S1-6" in chemin.read_text(encoding="utf-8")

    def test_generer_json(self, tmp_path):
        chemin = self.generator.generer_json(self.resultat, tmp_path / "rapport.json")
        data = json.loads(chemin.read_text(encoding="utf-8"))

        assert data["declaration_date"] == "30 Nov 2025"
        assert data["question_tree"][0]["id"] == "S1-6_01"
        assert data["question_tree"][0]["content"] == "Table"
        assert data["answers"]["S1-6_02"] == {
            "value": 4,
            "source": "computed",
            "explanation": "4 employees with active contracts as of 2025-11-30",
        }
        assert data["answers"]["S1-6_14"]["value"] is None
        assert data["metadata"]["periode"] == {"debut": "2025-11-01", "fin": "2025-11-30"}
        assert data["metadata"]["nb_reponses_manuelles"] == 4

    def test_json_sans_periode(self):
        resultat = ResultatQuestionnaire(periode=None)
        assert self.generator.construire_json(resultat)["metadata"]["periode"] is None


class TestResultatQuestionnaire:

    def test_compteurs(self):
        resultat = _resultat()
        assert resultat.nb_reponses_manuelles == 4
        assert resultat.nb_reponses_calculees == 20
        assert resultat.periode == DateRange(date(2025, 11, 1), date(2025, 11, 30))
