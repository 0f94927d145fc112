"""Effectif moyen selon la methode CSRD : (debut + fin) / 2.

Un salarie est compte a une date s'il a une date de debut de contrat, que
celle-ci precede ou egale la date, et que son contrat n'est pas termine a
cette date (pas de date de fin = toujours en poste).

S'applique aussi bien a l'ensemble des salaries qu'aux sous-ensembles d'un
tableau (pays, genre/categorie, categorie). Le resultat est arrondi a une
decimale.
"""

from dsn_esg_assistant.models.declaration import DateRange, Employe
from dsn_esg_assistant.matching.strategies.headcount_at_period_end import compter_actifs
from dsn_esg_assistant.matching.strategies.resultat import ResultatMetrique
from dsn_esg_assistant.utils.number_utils import arrondir_decimale, formater_nombre


def calculer_effectif_moyen(employes: list[Employe], periode: DateRange) -> ResultatMetrique:
    debut = compter_actifs(employes, periode.debut)
    fin = compter_actifs(employes, periode.fin)
    moyenne = arrondir_decimale((debut + fin) / 2, 1)
    return ResultatMetrique(
        value=moyenne,
        explanation=f"Average employees: ({debut} + {fin}) / 2 = {formater_nombre(moyenne)}",
    )
