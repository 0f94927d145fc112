"""Effectif en debut de periode (denominateur du taux de rotation)."""

from datetime import date

from dsn_esg_assistant.models.declaration import Employe
from dsn_esg_assistant.matching.strategies.headcount_at_period_end import compter_actifs
from dsn_esg_assistant.matching.strategies.resultat import ResultatMetrique
from dsn_esg_assistant.utils.date_utils import formater_date_iso
from dsn_esg_assistant.utils.number_utils import pluriel


def calculer_effectif_debut_periode(employes: list[Employe], debut_periode: date) -> ResultatMetrique:
    nombre = compter_actifs(employes, debut_periode)
    return ResultatMetrique(
        value=nombre,
        explanation=(
            f"{nombre} {pluriel(nombre, 'employee')} with active contracts "
            f"as of {formater_date_iso(debut_periode)}"
        ),
    )
