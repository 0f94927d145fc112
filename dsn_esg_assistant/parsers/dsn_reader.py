"""Lecture du format texte DSN : lignes, blocs et arborescence de la declaration.

Chaque ligne reconnue a la forme ``S21.G00.30.001,'valeur'`` :
- ``S21.G00.30``     : code bloc
- ``S21.G00.30.001`` : code rubrique
- ``001``            : numero de rubrique, utilise comme code de sequence

Un bloc est une suite contigue de lignes du meme code bloc dont la sequence
ne decroit pas ; une sequence qui redescend ouvre une nouvelle occurrence du
bloc (deux contrats consecutifs, par exemple).

Les blocs enfants sont rattaches au dernier parent cree : le format DSN
emet chaque individu juste apres son etablissement, chaque contrat juste
apres son individu.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional

from dsn_esg_assistant.config.constants import (
    BLOC_DECLARATION, BLOC_ENTREPRISE, BLOC_ETABLISSEMENT, BLOC_INDIVIDU,
    BLOC_CONTRAT, BLOC_FIN_CONTRAT, SEQUENCE_PAR_DEFAUT,
    RUBRIQUES_DECLARATION, RUBRIQUES_ENTREPRISE, RUBRIQUES_ETABLISSEMENT,
    RUBRIQUES_INDIVIDU, RUBRIQUES_CONTRAT, RUBRIQUE_DATE_FIN_CONTRAT,
)
from dsn_esg_assistant.models.declaration import (
    Contrat, Declaration, Entreprise, Etablissement, Individu, LigneDSN,
)

logger = logging.getLogger("dsn_esg_assistant.dsn")

# Ex. S20.G00.05.002,'01'
DSN_LINE_PATTERN = re.compile(r"^S\d{2}\.G\d{2}\.\d{2}\.\d{3},'.*'")

LONGUEUR_PREFIXE = 16  # "S21.G00.30.001,'"


def lire_lignes_dsn(contenu: str) -> list[LigneDSN]:
    """Decoupe le texte DSN en lignes typees, dans l'ordre du fichier.

    Les lignes non conformes (en-tetes, pieds, lignes tronquees) sont
    ignorees sans erreur.
    """
    lignes = []
    for brute in contenu.replace("\r", "").split("\n"):
        if not DSN_LINE_PATTERN.match(brute):
            continue
        lignes.append(LigneDSN(
            code_bloc=brute[0:10],
            code_rubrique=brute[0:14],
            code_sequence=brute[11:14],
            valeur=brute[LONGUEUR_PREFIXE:-1],
        ))
    return lignes


def _sequence(ligne: LigneDSN) -> int:
    return int(ligne.code_sequence or SEQUENCE_PAR_DEFAUT)


def extraire_bloc(
    lignes: list[LigneDSN], index: int, code_bloc: str
) -> tuple[dict[str, str], int]:
    """Agrege une occurrence de bloc a partir de ``index``.

    Retourne le bloc (code rubrique -> valeur) et l'index de la premiere
    ligne non consommee.
    """
    bloc: dict[str, str] = {}
    if index >= len(lignes):
        return bloc, index

    sequence = _sequence(lignes[index])
    courant = index
    while (
        courant < len(lignes)
        and lignes[courant].code_bloc == code_bloc
        and _sequence(lignes[courant]) >= sequence
    ):
        ligne = lignes[courant]
        bloc[ligne.code_rubrique] = ligne.valeur
        sequence = _sequence(ligne)
        courant += 1

    return bloc, courant


@dataclass
class CurseurDeclaration:
    """Position courante dans l'arborescence en cours de construction.

    Les index designent l'etablissement, l'individu et le contrat actifs dans
    leurs listes respectives. Ouvrir un parent referme ses descendants.
    """
    etablissement: Optional[int] = None
    individu: Optional[int] = None
    contrat: Optional[int] = None

    def ouvrir_etablissement(self, index: int) -> None:
        self.etablissement = index
        self.individu = None
        self.contrat = None

    def ouvrir_individu(self, index: int) -> None:
        self.individu = index
        self.contrat = None

    def ouvrir_contrat(self, index: int) -> None:
        self.contrat = index

    def etablissement_actif(self, declaration: Declaration) -> Optional[Etablissement]:
        if self.etablissement is None or declaration.entreprise is None:
            return None
        return declaration.entreprise.etablissements[self.etablissement]

    def individu_actif(self, declaration: Declaration) -> Optional[Individu]:
        etablissement = self.etablissement_actif(declaration)
        if etablissement is None or self.individu is None:
            return None
        return etablissement.individus[self.individu]

    def contrat_actif(self, declaration: Declaration) -> Optional[Contrat]:
        individu = self.individu_actif(declaration)
        if individu is None or self.contrat is None:
            return None
        return individu.contrats[self.contrat]


def _remplir(cible: object, bloc: dict[str, str], rubriques: dict[str, str]) -> None:
    for attribut, code in rubriques.items():
        setattr(cible, attribut, bloc.get(code))


class ConstructeurDeclaration:
    """Construit la declaration en un seul parcours des lignes DSN."""

    def __init__(self):
        self.declaration = Declaration()
        self.curseur = CurseurDeclaration()
        self._traitements: dict[str, Callable[[dict[str, str]], None]] = {
            BLOC_DECLARATION: self._traiter_declaration,
            BLOC_ENTREPRISE: self._traiter_entreprise,
            BLOC_ETABLISSEMENT: self._traiter_etablissement,
            BLOC_INDIVIDU: self._traiter_individu,
            BLOC_CONTRAT: self._traiter_contrat,
            BLOC_FIN_CONTRAT: self._traiter_fin_contrat,
        }

    def construire(self, lignes: list[LigneDSN]) -> Declaration:
        index = 0
        while index < len(lignes):
            code_bloc = lignes[index].code_bloc
            bloc, index = extraire_bloc(lignes, index, code_bloc)
            traitement = self._traitements.get(code_bloc)
            if traitement is not None:
                traitement(bloc)

        logger.debug(
            "Declaration construite : %d etablissement(s), %d individu(s), %d anomalie(s)",
            len(self.declaration.etablissements),
            self.declaration.nb_individus,
            len(self.declaration.anomalies),
        )
        return self.declaration

    def _signaler(self, message: str) -> None:
        logger.warning("%s", message)
        self.declaration.anomalies.append(message)

    def _entreprise(self) -> Entreprise:
        if self.declaration.entreprise is None:
            self.declaration.entreprise = Entreprise()
        return self.declaration.entreprise

    def _traiter_declaration(self, bloc: dict[str, str]) -> None:
        _remplir(self.declaration, bloc, RUBRIQUES_DECLARATION)

    def _traiter_entreprise(self, bloc: dict[str, str]) -> None:
        _remplir(self._entreprise(), bloc, RUBRIQUES_ENTREPRISE)

    def _traiter_etablissement(self, bloc: dict[str, str]) -> None:
        etablissement = Etablissement()
        _remplir(etablissement, bloc, RUBRIQUES_ETABLISSEMENT)
        etablissements = self._entreprise().etablissements
        etablissements.append(etablissement)
        self.curseur.ouvrir_etablissement(len(etablissements) - 1)

    def _traiter_individu(self, bloc: dict[str, str]) -> None:
        individu = Individu()
        _remplir(individu, bloc, RUBRIQUES_INDIVIDU)
        etablissement = self.curseur.etablissement_actif(self.declaration)
        if etablissement is None:
            self._signaler(
                f"Individu {individu.identifiant or '?'} sans etablissement "
                f"({BLOC_INDIVIDU}) : ignore."
            )
            return
        etablissement.individus.append(individu)
        self.curseur.ouvrir_individu(len(etablissement.individus) - 1)

    def _traiter_contrat(self, bloc: dict[str, str]) -> None:
        contrat = Contrat()
        _remplir(contrat, bloc, RUBRIQUES_CONTRAT)
        individu = self.curseur.individu_actif(self.declaration)
        if individu is None:
            self._signaler(
                f"Contrat debutant le {contrat.date_debut or '?'} sans individu "
                f"({BLOC_CONTRAT}) : ignore."
            )
            return
        individu.contrats.append(contrat)
        self.curseur.ouvrir_contrat(len(individu.contrats) - 1)

    def _traiter_fin_contrat(self, bloc: dict[str, str]) -> None:
        date_fin = bloc.get(RUBRIQUE_DATE_FIN_CONTRAT)
        contrat = self.curseur.contrat_actif(self.declaration)
        if contrat is None:
            self._signaler(
                f"Fin de contrat au {date_fin or '?'} sans contrat "
                f"({BLOC_FIN_CONTRAT}) : ignoree."
            )
            return
        contrat.date_fin = date_fin


def construire_declaration(lignes: list[LigneDSN]) -> Declaration:
    """Construit la declaration a partir des lignes DSN."""
    return ConstructeurDeclaration().construire(lignes)
