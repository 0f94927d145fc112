"""Exceptions personnalisees pour l'assistant ESG DSN."""


class DSNAssistantError(Exception):
    """Exception de base."""


class StructuralInputError(DSNAssistantError):
    """Donnees d'entree invalides (fichier DSN, catalogue, periode)."""


class ParseError(StructuralInputError):
    """Erreur lors du parsing d'un fichier DSN."""


class ConformityError(ParseError):
    """Blocs obligatoires absents du fichier DSN."""


class CatalogueError(StructuralInputError):
    """Catalogue de questions mal forme."""


class PeriodError(StructuralInputError):
    """Periode de declaration absente ou invalide."""


class IntakeError(StructuralInputError):
    """Fichier depose refuse avant parsing."""


class AnswerEditError(DSNAssistantError):
    """Modification d'une reponse inexistante."""


class InternalError(DSNAssistantError):
    """Erreur inattendue pendant le traitement (hors erreur de donnees)."""
