"""
Constantes DSN et questionnaire ESRS S1-6.

Sources :
- net-entreprises.fr : cahier technique DSN (blocs S20 / S21)
- EFRAG : ESRS S1-6 "Characteristics of the undertaking's employees"
"""

from enum import Enum


# --- Format DSN ---

# Prefixes obligatoires (controle de conformite avant parsing)
BLOCS_OBLIGATOIRES = ("S10.", "S20.", "S21.")

SEQUENCE_PAR_DEFAUT = "001"

BLOC_DECLARATION = "S20.G00.05"
BLOC_ENTREPRISE = "S21.G00.06"
BLOC_ETABLISSEMENT = "S21.G00.11"
BLOC_INDIVIDU = "S21.G00.30"
BLOC_CONTRAT = "S21.G00.40"
BLOC_FIN_CONTRAT = "S21.G00.62"

# S20.G00.05 - Envoi / declaration
RUBRIQUES_DECLARATION = {
    "nature": "S20.G00.05.001",
    "type_declaration": "S20.G00.05.002",
    "fraction": "S20.G00.05.003",
    "ordre": "S20.G00.05.004",
    "mois": "S20.G00.05.005",
    "date_fichier": "S20.G00.05.007",
    "champ": "S20.G00.05.008",
    "devise": "S20.G00.05.010",
}

# S21.G00.06 - Entreprise
RUBRIQUES_ENTREPRISE = {
    "siren": "S21.G00.06.001",
    "nic": "S21.G00.06.002",
    "pays": "S21.G00.06.010",
}

# S21.G00.11 - Etablissement
RUBRIQUES_ETABLISSEMENT = {
    "nic": "S21.G00.11.001",
    "code_pays": "S21.G00.11.015",
}

# S21.G00.30 - Individu
RUBRIQUES_INDIVIDU = {
    "identifiant": "S21.G00.30.001",
    "nom_famille": "S21.G00.30.002",
    "nom_usage": "S21.G00.30.003",
    "prenoms": "S21.G00.30.004",
    "sexe": "S21.G00.30.005",
    "identifiant_technique": "S21.G00.30.020",
    "pays_naissance": "S21.G00.30.029",
}

# S21.G00.40 - Contrat
RUBRIQUES_CONTRAT = {
    "date_debut": "S21.G00.40.001",
    "statut_conventionnel": "S21.G00.40.002",
    "pcs_ese": "S21.G00.40.004",
    "complement_pcs_ese": "S21.G00.40.005",
    "nature": "S21.G00.40.007",
    "dispositif_politique": "S21.G00.40.008",
    "numero": "S21.G00.40.009",
    "unite_mesure": "S21.G00.40.011",
    "quotite_categorie": "S21.G00.40.012",
    "quotite": "S21.G00.40.013",
    "modalite_temps": "S21.G00.40.014",
}

# S21.G00.62 - Fin du contrat
RUBRIQUE_DATE_FIN_CONTRAT = "S21.G00.62.001"

# Codes sexe (S21.G00.30.005)
CODES_SEXE = {"01": "M", "02": "F"}

ANNEE_MIN = 1900
ANNEE_MAX = 2100


# --- Catalogue de questions ---

COLONNE_ID = "ID"
COLONNE_LABEL_EN = "question label en"
COLONNE_LABEL_FR = "question label fr"
COLONNE_CONTENU = "content"
COLONNE_PARENT = "relatedQuestion ID"
COLONNE_ORDRE = "order"
COLONNE_UNITE = "unit"
COLONNE_ENUM_EN = "enum en"
COLONNE_ENUM_FR = "enum fr"

COLONNES_OBLIGATOIRES = (COLONNE_ID, COLONNE_LABEL_EN, COLONNE_CONTENU, COLONNE_ORDRE)

SEPARATEUR_CSV = ";"
SEPARATEUR_ENUM = ","


class TypeContenu(str, Enum):
    """Nature d'un noeud du questionnaire."""
    SECTION = ""
    TABLE = "Table"
    NOMBRE = "number"
    ENUMERATION = "enum"
    TEXTE = "Text"


class SourceReponse(str, Enum):
    CALCULEE = "computed"
    MANUELLE = "manual"


# --- Questions ESRS S1-6 ---

# Questions de methodologie renseignees a la main
QUESTIONS_MANUELLES = frozenset({"S1-6_14", "S1-6_15", "S1-6_16", "S1-6_17"})

Q_EFFECTIF_FIN = "S1-6_02"
Q_EFFECTIF_MOYEN = "S1-6_03"
Q_SORTIES = "S1-6_11"
Q_TAUX_ROTATION = "S1-6_12"

CLE_INCONNUE = "unknown"


# --- Depot de fichiers ---

TAILLE_MAX_DEPOT_OCTETS = 10_000_000  # 10 MB
EXTENSIONS_DEPOT = {".txt": "dsn"}
EXTENSIONS_CATALOGUE = {".csv": "csv", ".txt": "csv", ".xlsx": "excel"}
