"""Modeles de donnees de la declaration DSN decodee."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class LigneDSN:
    """Une ligne DSN reconnue : S21.G00.30.001,'valeur'."""
    code_bloc: str        # S21.G00.30
    code_rubrique: str    # S21.G00.30.001
    code_sequence: str    # 001
    valeur: str


@dataclass
class DateRange:
    debut: date
    fin: date


@dataclass
class Contrat:
    """Contrat de travail (S21.G00.40), date de fin via S21.G00.62."""
    date_debut: Optional[str] = None
    date_fin: Optional[str] = None
    statut_conventionnel: Optional[str] = None
    pcs_ese: Optional[str] = None
    complement_pcs_ese: Optional[str] = None
    nature: Optional[str] = None
    dispositif_politique: Optional[str] = None
    numero: Optional[str] = None
    unite_mesure: Optional[str] = None
    quotite_categorie: Optional[str] = None
    quotite: Optional[str] = None
    modalite_temps: Optional[str] = None


@dataclass
class Individu:
    """Salarie (S21.G00.30)."""
    identifiant: Optional[str] = None     # NIR
    nom_famille: Optional[str] = None
    nom_usage: Optional[str] = None
    prenoms: Optional[str] = None
    sexe: Optional[str] = None
    pays_naissance: Optional[str] = None
    identifiant_technique: Optional[str] = None
    contrats: list[Contrat] = field(default_factory=list)


@dataclass
class Etablissement:
    """Etablissement d'affectation (S21.G00.11)."""
    nic: Optional[str] = None
    code_pays: Optional[str] = None
    individus: list[Individu] = field(default_factory=list)


@dataclass
class Entreprise:
    """Entreprise declarante (S21.G00.06)."""
    siren: Optional[str] = None
    nic: Optional[str] = None
    pays: Optional[str] = None
    etablissements: list[Etablissement] = field(default_factory=list)


@dataclass
class Declaration:
    """Declaration DSN decodee : en-tete S20 et arborescence S21."""
    nature: Optional[str] = None
    type_declaration: Optional[str] = None
    fraction: Optional[str] = None
    ordre: Optional[str] = None
    mois: Optional[str] = None
    date_fichier: Optional[str] = None
    champ: Optional[str] = None
    devise: Optional[str] = None
    entreprise: Optional[Entreprise] = None
    anomalies: list[str] = field(default_factory=list)
    valide: bool = True

    @property
    def etablissements(self) -> list[Etablissement]:
        return self.entreprise.etablissements if self.entreprise else []

    @property
    def nb_individus(self) -> int:
        return sum(len(e.individus) for e in self.etablissements)


@dataclass(frozen=True)
class Employe:
    """Salarie normalise, une ligne par individu (dernier contrat)."""
    id: str = ""
    pays: Optional[str] = None             # S21.G00.11.015 (pays d'emploi)
    pays_naissance: Optional[str] = None   # S21.G00.30.029
    genre: Optional[str] = None            # "M" | "F" | None
    debut_contrat: Optional[date] = None
    fin_contrat: Optional[date] = None
    pcs_ese: Optional[str] = None          # S21.G00.40.004
