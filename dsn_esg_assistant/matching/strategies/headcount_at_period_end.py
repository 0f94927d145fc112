"""Effectif en fin de periode.

Questions concernees :
  - S1-6_02 : Number of employees (end of period)
  - S1-6_05 / S1-6_09 : par pays / par region
  - K_718   : par genre et categorie
  - S1-6_19 : par categorie professionnelle
"""

from datetime import date

from dsn_esg_assistant.models.declaration import Employe
from dsn_esg_assistant.matching.strategies.resultat import ResultatMetrique
from dsn_esg_assistant.utils.date_utils import formater_date_iso
from dsn_esg_assistant.utils.number_utils import pluriel


def est_actif(employe: Employe, jour: date) -> bool:
    """Contrat commence au plus tard ``jour`` et non termine a cette date."""
    if employe.debut_contrat is None or employe.debut_contrat > jour:
        return False
    return employe.fin_contrat is None or employe.fin_contrat > jour


def compter_actifs(employes: list[Employe], jour: date) -> int:
    return sum(1 for e in employes if est_actif(e, jour))


def calculer_effectif_fin_periode(employes: list[Employe], fin_periode: date) -> ResultatMetrique:
    nombre = compter_actifs(employes, fin_periode)
    return ResultatMetrique(
        value=nombre,
        explanation=(
            f"{nombre} {pluriel(nombre, 'employee')} with active contracts "
            f"as of {formater_date_iso(fin_periode)}"
        ),
    )
