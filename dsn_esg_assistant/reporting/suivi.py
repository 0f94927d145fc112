"""Suivi des modifications manuelles des reponses.

Les reponses calculees ne sont jamais ecrasees : chaque modification
produit un nouveau dictionnaire ou l'entree modifiee conserve la valeur et
l'explication d'origine.
"""

from dsn_esg_assistant.core.exceptions import AnswerEditError
from dsn_esg_assistant.models.questionnaire import Reponse, ReponseSuivie, ValeurReponse


def suivre_reponses(reponses: dict[str, Reponse]) -> dict[str, ReponseSuivie]:
    return {
        cle: ReponseSuivie(
            value=r.value,
            source=r.source,
            explanation=r.explanation,
            original_value=r.value,
            original_explanation=r.explanation,
        )
        for cle, r in reponses.items()
    }


def modifier_reponse(
    suivies: dict[str, ReponseSuivie],
    cle: str,
    valeur: ValeurReponse,
    explication: str = "",
) -> dict[str, ReponseSuivie]:
    if cle not in suivies:
        raise AnswerEditError(f'Reponse inconnue : "{cle}"')

    courante = suivies[cle]
    modifiee = courante.model_copy(update={
        "value": valeur,
        "explanation": explication or courante.explanation,
        "is_modified": True,
    })
    return {**suivies, cle: modifiee}


def annuler_modification(suivies: dict[str, ReponseSuivie], cle: str) -> dict[str, ReponseSuivie]:
    """Restaure la valeur d'origine d'une reponse."""
    if cle not in suivies:
        raise AnswerEditError(f'Reponse inconnue : "{cle}"')

    courante = suivies[cle]
    restauree = courante.model_copy(update={
        "value": courante.original_value,
        "explanation": courante.original_explanation,
        "is_modified": False,
    })
    return {**suivies, cle: restauree}


def restaurer_suivi(donnees: dict[str, dict]) -> dict[str, ReponseSuivie]:
    """Reconstruit les reponses suivies a partir de leur forme JSON.

    Une entree sans ``original_value`` est une reponse brute, telle que
    renvoyee par l'analyse : elle est mise sous suivi a cet instant.
    """
    suivies = {}
    for cle, entree in donnees.items():
        if "original_value" in entree:
            suivies[cle] = ReponseSuivie.model_validate(entree)
        else:
            suivies[cle] = suivre_reponses({cle: Reponse.model_validate(entree)})[cle]
    return suivies
