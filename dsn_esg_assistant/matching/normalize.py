"""Normalisation de la declaration DSN en salaries a plat."""

from typing import Optional

from dsn_esg_assistant.config.constants import CODES_SEXE
from dsn_esg_assistant.models.declaration import Declaration, Employe
from dsn_esg_assistant.utils.date_utils import parser_date_dsn


def parser_genre(code_sexe: Optional[str]) -> Optional[str]:
    """Code sexe DSN ("1"/"01" -> "M", "2"/"02" -> "F"), sinon None."""
    if not code_sexe:
        return None
    return CODES_SEXE.get(code_sexe.zfill(2))


def normaliser_employes(declaration: Declaration) -> list[Employe]:
    """Un salarie par individu, avec son dernier contrat emis.

    Le pays est celui de l'etablissement d'affectation (S21.G00.11.015).
    """
    employes = []
    for etablissement in declaration.etablissements:
        for individu in etablissement.individus:
            contrat = individu.contrats[-1] if individu.contrats else None
            employes.append(Employe(
                id=individu.identifiant or "",
                pays=etablissement.code_pays or None,
                pays_naissance=individu.pays_naissance or None,
                genre=parser_genre(individu.sexe),
                debut_contrat=parser_date_dsn(contrat.date_debut) if contrat else None,
                fin_contrat=parser_date_dsn(contrat.date_fin) if contrat else None,
                pcs_ese=(contrat.pcs_ese or None) if contrat else None,
            ))
    return employes
