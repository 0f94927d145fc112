"""Sorties de la periode (S1-6_11).

Un salarie est sortant si la date de fin de son contrat tombe dans
[debut, fin] de la periode, bornes incluses.
"""

from dsn_esg_assistant.models.declaration import DateRange, Employe
from dsn_esg_assistant.matching.strategies.resultat import ResultatMetrique
from dsn_esg_assistant.utils.date_utils import formater_date_iso
from dsn_esg_assistant.utils.number_utils import pluriel


def est_sortant(employe: Employe, periode: DateRange) -> bool:
    if employe.fin_contrat is None:
        return False
    return periode.debut <= employe.fin_contrat <= periode.fin


def calculer_sorties(employes: list[Employe], periode: DateRange) -> ResultatMetrique:
    nombre = sum(1 for e in employes if est_sortant(e, periode))
    return ResultatMetrique(
        value=nombre,
        explanation=(
            f"{nombre} {pluriel(nombre, 'employee')} left between "
            f"{formater_date_iso(periode.debut)} and {formater_date_iso(periode.fin)}"
        ),
    )
