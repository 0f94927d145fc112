"""Moteur de calcul des reponses du questionnaire ESRS S1-6.

Parcours en profondeur de l'arbre de questions (parent avant enfants, les
enfants sont toujours visites) :
- tableau : eclatement par dimension, reponses sous ``{idEnfant}_{cle}`` ;
- section : aucune reponse ;
- feuille : reponse manuelle vide ou indicateur global calcule.
"""

import logging
from typing import Callable, Optional

from dsn_esg_assistant.config.constants import (
    QUESTIONS_MANUELLES, Q_EFFECTIF_FIN, Q_EFFECTIF_MOYEN, Q_SORTIES,
    Q_TAUX_ROTATION, SourceReponse,
)
from dsn_esg_assistant.matching.normalize import normaliser_employes
from dsn_esg_assistant.matching.periode import extraire_periode
from dsn_esg_assistant.matching.strategies.average_headcount import calculer_effectif_moyen
from dsn_esg_assistant.matching.strategies.group_by_attribute import regrouper
from dsn_esg_assistant.matching.strategies.headcount_at_period_end import calculer_effectif_fin_periode
from dsn_esg_assistant.matching.strategies.leavers import calculer_sorties
from dsn_esg_assistant.matching.strategies.resultat import ResultatMetrique
from dsn_esg_assistant.matching.strategies.turnover_rate import calculer_taux_rotation
from dsn_esg_assistant.matching.tables import EFFECTIF_FIN, EFFECTIF_MOYEN, TypeTableau
from dsn_esg_assistant.models.declaration import DateRange, Declaration, Employe
from dsn_esg_assistant.models.questionnaire import QuestionNode, Reponse
from dsn_esg_assistant.utils.number_utils import formater_nombre

logger = logging.getLogger("dsn_esg_assistant.engine")

Metrique = Callable[[list[Employe], DateRange], ResultatMetrique]

METRIQUES_GLOBALES: dict[str, Metrique] = {
    Q_EFFECTIF_FIN: lambda employes, periode: calculer_effectif_fin_periode(employes, periode.fin),
    Q_EFFECTIF_MOYEN: calculer_effectif_moyen,
    Q_SORTIES: calculer_sorties,
    Q_TAUX_ROTATION: calculer_taux_rotation,
}

METRIQUES_TABLEAU: dict[str, Metrique] = {
    EFFECTIF_FIN: METRIQUES_GLOBALES[Q_EFFECTIF_FIN],
    EFFECTIF_MOYEN: calculer_effectif_moyen,
}


class MoteurReponses:
    """Calcule les reponses d'un arbre pour une liste de salaries et une periode."""

    def __init__(self, employes: list[Employe], periode: DateRange):
        self.employes = employes
        self.periode = periode
        self.reponses: dict[str, Reponse] = {}

    def calculer(self, arbre: list[QuestionNode]) -> dict[str, Reponse]:
        for noeud in arbre:
            self._visiter(noeud)
        return self.reponses

    def _visiter(self, noeud: QuestionNode) -> None:
        if noeud.est_table:
            self._traiter_tableau(noeud)
        elif noeud.est_feuille:
            self._traiter_feuille(noeud)

        for enfant in noeud.children:
            self._visiter(enfant)

    def _traiter_feuille(self, noeud: QuestionNode) -> None:
        if noeud.id in QUESTIONS_MANUELLES:
            self.reponses[noeud.id] = Reponse(value=None, source=SourceReponse.MANUELLE.value, explanation="")
            return

        metrique = METRIQUES_GLOBALES.get(noeud.id)
        if metrique is None:
            logger.debug("Question %s : aucune strategie de calcul", noeud.id)
            return

        resultat = metrique(self.employes, self.periode)
        self.reponses[noeud.id] = Reponse(
            value=resultat.value,
            source=SourceReponse.CALCULEE.value,
            explanation=resultat.explanation,
        )

    def _traiter_tableau(self, noeud: QuestionNode) -> None:
        type_tableau = TypeTableau.depuis_id(noeud.id)
        if type_tableau is None:
            logger.warning("Tableau %s non reconnu : aucune reponse calculee", noeud.id)
            return

        definition = type_tableau.definition
        if not definition.est_groupe:
            return

        groupes = regrouper(self.employes, definition.dimension)
        for cle, employes in groupes.items():
            if cle in definition.cles_ignorees:
                continue
            for enfant in noeud.children:
                nom_metrique = definition.metriques.get(enfant.id)
                if nom_metrique is None:
                    logger.debug("Tableau %s : colonne %s sans strategie", noeud.id, enfant.id)
                    continue
                valeur = METRIQUES_TABLEAU[nom_metrique](employes, self.periode).value
                self.reponses[f"{enfant.id}_{cle}"] = Reponse(
                    value=valeur,
                    source=SourceReponse.CALCULEE.value,
                    explanation=definition.expliquer(nom_metrique, cle, formater_nombre(valeur)),
                )

        logger.debug("Tableau %s : %d groupe(s)", noeud.id, len(groupes))


def calculer_reponses_employes(
    employes: list[Employe], periode: DateRange, arbre: list[QuestionNode]
) -> dict[str, Reponse]:
    return MoteurReponses(employes, periode).calculer(arbre)


def calculer_reponses(
    declaration: Declaration,
    arbre: list[QuestionNode],
    periode: Optional[DateRange] = None,
) -> dict[str, Reponse]:
    """Point d'entree : normalise la declaration puis calcule toutes les reponses.

    Leve PeriodError si la periode ne peut etre determinee.
    """
    if periode is None:
        periode = extraire_periode(declaration)
    employes = normaliser_employes(declaration)
    reponses = calculer_reponses_employes(employes, periode, arbre)
    logger.info(
        "%d reponse(s) produite(s) pour %d salarie(s), periode %s - %s",
        len(reponses), len(employes), periode.debut, periode.fin,
    )
    return reponses
