"""Tests du moteur de calcul des reponses ESRS S1-6."""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from datetime import date

import pytest

from dsn_esg_assistant.config.constants import TypeContenu
from dsn_esg_assistant.core.exceptions import PeriodError
from dsn_esg_assistant.matching.engine import calculer_reponses, calculer_reponses_employes
from dsn_esg_assistant.matching.tables import TypeTableau
from dsn_esg_assistant.models.declaration import DateRange, Declaration, Employe
from dsn_esg_assistant.models.questionnaire import QuestionNode, Reponse
from dsn_esg_assistant.parsers.dsn_parser import DSNParser
from dsn_esg_assistant.questions.loader import charger_questions

FIXTURES = Path(__file__).parent.parent / "fixtures"

NOVEMBRE = DateRange(debut=date(2025, 11, 1), fin=date(2025, 11, 30))


def _noeud(id_, content, *enfants) -> QuestionNode:
    return QuestionNode(id=id_, label_en=id_, content=content, children=list(enfants))


def _calcule(value, explanation) -> Reponse:
    return Reponse(value=value, source="computed", explanation=explanation)


class TestCalculReponses:

    def setup_method(self):
        self.declaration = DSNParser().parser(FIXTURES / "dsn-global-minimal.txt")
        arbre = charger_questions(FIXTURES / "questions-valid.csv")
        self.reponses = calculer_reponses(self.declaration, arbre)

    def test_indicateurs_globaux(self):
        assert self.reponses["S1-6_02"] == _calcule(
            4, "4 employees with active contracts as of 2025-11-30")
        assert self.reponses["S1-6_03"] == _calcule(
            4.5, "Average employees: (5 + 4) / 2 = 4.5")
        assert self.reponses["S1-6_11"] == _calcule(
            1, "1 employee left between 2025-11-01 and 2025-11-30")
        assert self.reponses["S1-6_12"] == _calcule(
            20, "Turnover rate: 20% (1 leavers / 5 employees at period start)")

    def test_effectif_fin_borne_par_les_individus(self):
        assert self.reponses["S1-6_02"].value <= self.declaration.nb_individus

    def test_par_pays(self):
        assert self.reponses["S1-6_05_FR"] == _calcule(1, "Employees in country FR: 1")
        assert self.reponses["S1-6_06_FR"] == _calcule(1, "Average employees in country FR: 1")
        assert self.reponses["S1-6_05_IR"] == _calcule(3, "Employees in country IR: 3")
        assert self.reponses["S1-6_06_IR"] == _calcule(3.5, "Average employees in country IR: 3.5")

    def test_par_region(self):
        assert self.reponses["S1-6_09_IR"] == _calcule(
            3, "Employees in region IR (country-level fallback per ESRS S1-6-3): 3")
        assert self.reponses["S1-6_10_FR"] == _calcule(
            1, "Average employees in region FR (country-level fallback): 1")

    def test_par_genre_et_categorie(self):
        assert self.reponses["K_718_M_3855"] == _calcule(2, "Employees with gender/contract M_3855: 2")
        assert self.reponses["K_719_M_3855"] == _calcule(2, "Average employees with gender/contract M_3855: 2")
        assert self.reponses["K_718_F_6220"] == _calcule(1, "Employees with gender/contract F_6220: 1")
        assert self.reponses["K_719_F_6220"] == _calcule(
            1.5, "Average employees with gender/contract F_6220: 1.5")
        assert "K_718_unknown_unknown" not in self.reponses

    def test_par_categorie(self):
        assert self.reponses["S1-6_19_3855"] == _calcule(2, "Employees in professional category 3855: 2")
        assert self.reponses["S1-6_20_6220"] == _calcule(
            1.5, "Average employees in professional category 6220: 1.5")
        assert "S1-6_19_unknown" not in self.reponses

    def test_questions_manuelles(self):
        for id_question in ("S1-6_14", "S1-6_15", "S1-6_16", "S1-6_17"):
            assert self.reponses[id_question] == Reponse(value=None, source="manual", explanation="")

    def test_tableaux_et_sections_sans_reponse(self):
        for id_question in ("S1-6_01", "S1-6_04", "S1-6_07", "S1-6_08", "S1-6_13", "S1-6_18"):
            assert id_question not in self.reponses

    def test_enfants_de_tableau_sans_reponse_scalaire(self):
        assert "S1-6_05" not in self.reponses
        assert "K_718" not in self.reponses

    def test_nombre_de_reponses(self):
        # 4 globales + 4 tableaux x 2 groupes x 2 colonnes + 4 manuelles
        assert len(self.reponses) == 24

    def test_periode_absente(self):
        with pytest.raises(PeriodError):
            calculer_reponses(Declaration(), [])


class TestDispatchTableaux:

    def test_types_de_tableaux(self):
        assert TypeTableau.depuis_id("S1-6_01") is TypeTableau.GLOBAL
        assert TypeTableau.depuis_id("S1-6_04") is TypeTableau.PAYS
        assert TypeTableau.depuis_id("S1-6_07") is TypeTableau.GENRE_CATEGORIE
        assert TypeTableau.depuis_id("S1-6_08") is TypeTableau.REGION
        assert TypeTableau.depuis_id("S1-6_18") is TypeTableau.CATEGORIE
        assert TypeTableau.depuis_id("S1-6_99") is None

    def test_tableau_inconnu_signale(self, caplog):
        arbre = [_noeud("S1-6_99", TypeContenu.TABLE, _noeud("S1-6_05", TypeContenu.NOMBRE))]
        reponses = calculer_reponses_employes([Employe(pays="FR", debut_contrat=date(2020, 1, 1))], NOVEMBRE, arbre)
        assert reponses == {}
        assert "S1-6_99" in caplog.text

    def test_cle_composite_partielle_conservee(self):
        employes = [
            Employe(genre="M", pcs_ese=None, debut_contrat=date(2020, 1, 1)),
            Employe(genre=None, pcs_ese=None, debut_contrat=date(2020, 1, 1)),
        ]
        arbre = [_noeud("S1-6_07", TypeContenu.TABLE, _noeud("K_718", TypeContenu.NOMBRE))]
        reponses = calculer_reponses_employes(employes, NOVEMBRE, arbre)
        assert list(reponses) == ["K_718_M_unknown"]

    def test_colonne_sans_strategie(self):
        employes = [Employe(pays="FR", debut_contrat=date(2020, 1, 1))]
        arbre = [_noeud("S1-6_04", TypeContenu.TABLE,
                        _noeud("S1-6_05", TypeContenu.NOMBRE),
                        _noeud("S1-6_xx", TypeContenu.TEXTE))]
        reponses = calculer_reponses_employes(employes, NOVEMBRE, arbre)
        assert list(reponses) == ["S1-6_05_FR"]

    def test_recursion_sous_une_section(self):
        employes = [Employe(pays="FR", debut_contrat=date(2020, 1, 1))]
        arbre = [_noeud("S", TypeContenu.SECTION,
                        _noeud("S1-6_02", TypeContenu.NOMBRE),
                        _noeud("S1-6_14", TypeContenu.ENUMERATION))]
        reponses = calculer_reponses_employes(employes, NOVEMBRE, arbre)
        assert reponses["S1-6_02"].value == 1
        assert reponses["S1-6_14"].source == "manual"

    def test_aucun_salarie(self):
        arbre = charger_questions(FIXTURES / "questions-valid.csv")
        reponses = calculer_reponses_employes([], NOVEMBRE, arbre)
        assert reponses["S1-6_02"].value == 0
        assert reponses["S1-6_12"] == _calcule(0, "Turnover rate: 0% (no starting headcount)")
        assert not any(k.startswith("S1-6_05_") for k in reponses)


class TestEffectifFinPeriode:

    def setup_method(self):
        self.arbre = [_noeud("S1-6_02", TypeContenu.NOMBRE)]

    def test_contrats_posterieurs_a_la_periode(self):
        employes = [
            Employe(id="1", debut_contrat=date(2020, 1, 1)),
            Employe(id="2", debut_contrat=date(2025, 11, 30)),
            Employe(id="3", debut_contrat=date(2025, 12, 1)),
            Employe(id="4", debut_contrat=date(2026, 1, 15)),
            Employe(id="5", debut_contrat=None),
        ]
        reponse = calculer_reponses_employes(employes, NOVEMBRE, self.arbre)["S1-6_02"]
        assert reponse.value == 2
        assert reponse.value <= len(employes)

    def test_contrats_termines(self):
        employes = [
            Employe(id="1", debut_contrat=date(2020, 1, 1), fin_contrat=date(2025, 11, 30)),
            Employe(id="2", debut_contrat=date(2020, 1, 1), fin_contrat=date(2025, 12, 31)),
        ]
        reponse = calculer_reponses_employes(employes, NOVEMBRE, self.arbre)["S1-6_02"]
        assert reponse.value == 1
