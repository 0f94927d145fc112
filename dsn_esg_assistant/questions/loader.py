"""Chargement du catalogue de questions ESRS en arbre de QuestionNode.

Le catalogue est un tableau (CSV separe par ';' ou classeur .xlsx) dont la
premiere ligne nomme les colonnes. Chaque ligne devient un noeud ; la colonne
"relatedQuestion ID" designe le parent. Les freres sont tries par "order".
"""

import logging
import re
from pathlib import Path
from typing import Iterator, Optional

import openpyxl
from pydantic import ValidationError

from dsn_esg_assistant.config.constants import (
    COLONNE_ID, COLONNE_LABEL_EN, COLONNE_LABEL_FR, COLONNE_CONTENU,
    COLONNE_PARENT, COLONNE_ORDRE, COLONNE_UNITE, COLONNE_ENUM_EN,
    COLONNE_ENUM_FR, COLONNES_OBLIGATOIRES, EXTENSIONS_CATALOGUE,
    SEPARATEUR_CSV, SEPARATEUR_ENUM, TypeContenu,
)
from dsn_esg_assistant.config.settings import QuestionsConfig
from dsn_esg_assistant.core.exceptions import CatalogueError
from dsn_esg_assistant.models.questionnaire import QuestionNode

logger = logging.getLogger("dsn_esg_assistant.questions")

_ENTIER_INITIAL = re.compile(r"^\s*([+-]?\d+)")


def decouper_ligne_csv(ligne: str) -> list[str]:
    """Decoupe une ligne ';' ; les champs vides et le ';' final sont conserves."""
    if not ligne.strip():
        return []
    return [champ.strip() for champ in ligne.split(SEPARATEUR_CSV)]


def creer_ligne(entetes: list[str], valeurs: list[str]) -> dict[str, str]:
    return {entete: (valeurs[i] if i < len(valeurs) else "") for i, entete in enumerate(entetes)}


def _parser_enum(valeur: str) -> Optional[list[str]]:
    if not valeur:
        return None
    return [v.strip() for v in valeur.split(SEPARATEUR_ENUM) if v.strip()]


def _parser_ordre(valeur: str) -> int:
    match = _ENTIER_INITIAL.match(valeur or "")
    return int(match.group(1)) if match else 0


def creer_noeud(ligne: dict[str, str], numero: int) -> QuestionNode:
    """Transforme une ligne du catalogue en noeud (sans enfants)."""
    contenu = ligne.get(COLONNE_CONTENU, "")
    try:
        type_contenu = TypeContenu(contenu)
    except ValueError:
        attendus = ", ".join(f'"{t.value}"' for t in TypeContenu)
        raise CatalogueError(
            f'Ligne {numero} : type de contenu inconnu "{contenu}" (attendu : {attendus})'
        ) from None

    try:
        return QuestionNode(
            id=ligne[COLONNE_ID],
            label_en=ligne[COLONNE_LABEL_EN],
            label_fr=ligne.get(COLONNE_LABEL_FR) or None,
            content=type_contenu,
            parent_id=ligne.get(COLONNE_PARENT) or None,
            order=_parser_ordre(ligne[COLONNE_ORDRE]),
            unit=ligne.get(COLONNE_UNITE) or None,
            enum_en=_parser_enum(ligne.get(COLONNE_ENUM_EN, "")),
            enum_fr=_parser_enum(ligne.get(COLONNE_ENUM_FR, "")),
        )
    except ValidationError as e:
        raise CatalogueError(f"Ligne {numero} : question invalide ({e.error_count()} erreur(s)) : {e}") from e


def _trier_enfants(noeuds: list[QuestionNode]) -> None:
    # tri stable : a ordre egal, l'ordre du fichier est conserve
    noeuds.sort(key=lambda n: n.order)
    for noeud in noeuds:
        _trier_enfants(noeud.children)


def construire_arbre(noeuds: list[QuestionNode]) -> list[QuestionNode]:
    """Rattache chaque noeud a son parent ; sans parent connu, il devient racine."""
    index: dict[str, QuestionNode] = {}
    for noeud in noeuds:
        if noeud.id in index:
            raise CatalogueError(f'Identifiant de question en double : "{noeud.id}"')
        index[noeud.id] = noeud

    racines = []
    for noeud in noeuds:
        parent = index.get(noeud.parent_id) if noeud.parent_id else None
        if parent is not None:
            parent.children.append(noeud)
        else:
            if noeud.parent_id:
                logger.warning(
                    "Question %s : parent %s introuvable, traitee comme racine",
                    noeud.id, noeud.parent_id,
                )
            racines.append(noeud)

    _trier_enfants(racines)
    return racines


def charger_questions_lignes(lignes: list[list[str]]) -> list[QuestionNode]:
    """Valide un tableau (entete + lignes de donnees) et construit l'arbre."""
    if len(lignes) < 2:
        raise CatalogueError("Le catalogue doit contenir une ligne d'en-tete et au moins une question.")

    entetes = lignes[0]
    for colonne in COLONNES_OBLIGATOIRES:
        if colonne not in entetes:
            raise CatalogueError(f'Colonne obligatoire absente du catalogue : "{colonne}"')

    noeuds = []
    for numero, valeurs in enumerate(lignes[1:], start=1):
        if len(valeurs) != len(entetes):
            raise CatalogueError(
                f"Ligne {numero} : {len(entetes)} champs attendus, {len(valeurs)} trouves"
            )
        noeuds.append(creer_noeud(creer_ligne(entetes, valeurs), numero))

    racines = construire_arbre(noeuds)
    logger.info("Catalogue charge : %d question(s), %d racine(s)", len(noeuds), len(racines))
    return racines


def charger_questions_texte(texte: str) -> list[QuestionNode]:
    """Charge un catalogue CSV ';' deja lu en memoire."""
    lignes = [ligne.strip() for ligne in texte.replace("\r", "").split("\n")]
    return charger_questions_lignes([decouper_ligne_csv(l) for l in lignes if l])


def charger_questions_csv(chemin: Path) -> list[QuestionNode]:
    try:
        with open(chemin, "r", encoding="utf-8-sig") as f:
            texte = f.read()
    except OSError as e:
        raise CatalogueError(f"Impossible de lire le catalogue {chemin}: {e}") from e
    return charger_questions_texte(texte)


def charger_questions_excel(chemin: Path) -> list[QuestionNode]:
    """Charge la premiere feuille d'un classeur .xlsx."""
    try:
        wb = openpyxl.load_workbook(chemin, read_only=True, data_only=True)
    except Exception as e:
        raise CatalogueError(f"Impossible de lire le classeur {chemin}: {e}") from e

    try:
        ws = wb[wb.sheetnames[0]]
        cellules = [
            ["" if c is None else str(c).strip() for c in row]
            for row in ws.iter_rows(values_only=True)
        ]
    finally:
        wb.close()

    cellules = [row for row in cellules if any(row)]
    if not cellules:
        return charger_questions_lignes([])

    # Une feuille a une largeur fixe : on la ramene a celle de l'en-tete
    entete = cellules[0]
    while entete and not entete[-1]:
        entete = entete[:-1]
    largeur = len(entete)
    lignes = [entete]
    for row in cellules[1:]:
        while len(row) > largeur and not row[-1]:
            row = row[:-1]
        lignes.append(row + [""] * (largeur - len(row)))
    return charger_questions_lignes(lignes)


def charger_questions(
    chemin: Optional[Path] = None, config: Optional[QuestionsConfig] = None
) -> list[QuestionNode]:
    """Charge le catalogue configure (ou ``chemin``) selon son extension."""
    if chemin is None:
        chemin = (config or QuestionsConfig()).chemin_catalogue
    chemin = Path(chemin)

    format_catalogue = EXTENSIONS_CATALOGUE.get(chemin.suffix.lower())
    if format_catalogue is None:
        raise CatalogueError(
            f"Format de catalogue '{chemin.suffix}' non supporte. "
            f"Formats acceptes : {', '.join(EXTENSIONS_CATALOGUE.keys())}"
        )
    if format_catalogue == "excel":
        return charger_questions_excel(chemin)
    return charger_questions_csv(chemin)


def parcourir(noeuds: list[QuestionNode]) -> Iterator[QuestionNode]:
    """Parcours en profondeur, parent avant enfants."""
    for noeud in noeuds:
        yield noeud
        yield from parcourir(noeud.children)
