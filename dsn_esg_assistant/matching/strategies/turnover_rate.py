"""Taux de rotation (S1-6_12) en pourcentage entier.

Formule : sorties / effectif en debut de periode * 100, arrondi a l'entier.
Le denominateur est l'effectif de debut de periode et non l'effectif moyen
(voir DESIGN.md). Sans effectif initial, le taux vaut 0.
"""

from dsn_esg_assistant.models.declaration import DateRange, Employe
from dsn_esg_assistant.matching.strategies.headcount_at_period_start import calculer_effectif_debut_periode
from dsn_esg_assistant.matching.strategies.leavers import calculer_sorties
from dsn_esg_assistant.matching.strategies.resultat import ResultatMetrique
from dsn_esg_assistant.utils.number_utils import arrondir_entier


def calculer_taux_rotation(employes: list[Employe], periode: DateRange) -> ResultatMetrique:
    sorties = calculer_sorties(employes, periode).value
    effectif_debut = calculer_effectif_debut_periode(employes, periode.debut).value

    if effectif_debut == 0:
        return ResultatMetrique(value=0, explanation="Turnover rate: 0% (no starting headcount)")

    taux = arrondir_entier(sorties / effectif_debut * 100)
    return ResultatMetrique(
        value=taux,
        explanation=(
            f"Turnover rate: {taux}% ({sorties} leavers / "
            f"{effectif_debut} employees at period start)"
        ),
    )
