"""Tableaux ESRS S1-6 eclates par dimension.

Chaque tableau connu est une variante de ``TypeTableau`` : identifiant de la
question tableau, fonction de regroupement, metrique par question enfant et
libelles d'explication. Ajouter un tableau = ajouter une variante.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from dsn_esg_assistant.config.constants import CLE_INCONNUE
from dsn_esg_assistant.matching.strategies.group_by_attribute import (
    Dimension, par_categorie, par_genre_et_categorie, par_pays,
)

# Metriques applicables aux enfants d'un tableau
EFFECTIF_FIN = "effectif_fin"
EFFECTIF_MOYEN = "effectif_moyen"


@dataclass(frozen=True, eq=False)
class DefinitionTableau:
    id_question: Optional[str]
    dimension: Optional[Dimension] = None
    metriques: dict[str, str] = field(default_factory=dict)
    libelles: dict[str, str] = field(default_factory=dict)
    cles_ignorees: frozenset[str] = frozenset({CLE_INCONNUE})

    @property
    def est_groupe(self) -> bool:
        return self.dimension is not None

    def expliquer(self, metrique: str, cle: str, valeur: str) -> str:
        return self.libelles[metrique].format(cle=cle, valeur=valeur)


class TypeTableau(Enum):
    """Tableaux reconnus du questionnaire S1-6."""

    # Indicateurs globaux : les enfants sont des questions scalaires
    GLOBAL = DefinitionTableau(id_question="S1-6_01")

    PAYS = DefinitionTableau(
        id_question="S1-6_04",
        dimension=par_pays,
        metriques={"S1-6_05": EFFECTIF_FIN, "S1-6_06": EFFECTIF_MOYEN},
        libelles={
            EFFECTIF_FIN: "Employees in country {cle}: {valeur}",
            EFFECTIF_MOYEN: "Average employees in country {cle}: {valeur}",
        },
    )

    GENRE_CATEGORIE = DefinitionTableau(
        id_question="S1-6_07",
        dimension=par_genre_et_categorie,
        metriques={"K_718": EFFECTIF_FIN, "K_719": EFFECTIF_MOYEN},
        libelles={
            EFFECTIF_FIN: "Employees with gender/contract {cle}: {valeur}",
            EFFECTIF_MOYEN: "Average employees with gender/contract {cle}: {valeur}",
        },
        cles_ignorees=frozenset({f"{CLE_INCONNUE}_{CLE_INCONNUE}"}),
    )

    # Seul le pays est disponible dans la DSN (repli ESRS S1-6-3)
    REGION = DefinitionTableau(
        id_question="S1-6_08",
        dimension=par_pays,
        metriques={"S1-6_09": EFFECTIF_FIN, "S1-6_10": EFFECTIF_MOYEN},
        libelles={
            EFFECTIF_FIN: "Employees in region {cle} (country-level fallback per ESRS S1-6-3): {valeur}",
            EFFECTIF_MOYEN: "Average employees in region {cle} (country-level fallback): {valeur}",
        },
    )

    CATEGORIE = DefinitionTableau(
        id_question="S1-6_18",
        dimension=par_categorie,
        metriques={"S1-6_19": EFFECTIF_FIN, "S1-6_20": EFFECTIF_MOYEN},
        libelles={
            EFFECTIF_FIN: "Employees in professional category {cle}: {valeur}",
            EFFECTIF_MOYEN: "Average employees in professional category {cle}: {valeur}",
        },
    )

    @property
    def definition(self) -> DefinitionTableau:
        return self.value

    @classmethod
    def depuis_id(cls, id_question: str) -> Optional["TypeTableau"]:
        for type_tableau in cls:
            if type_tableau.value.id_question == id_question:
                return type_tableau
        return None
