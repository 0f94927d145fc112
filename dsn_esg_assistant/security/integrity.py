"""Empreinte SHA-256 des fichiers DSN deposes (tracabilite d'audit)."""

import hashlib


def calculer_hash_sha256(donnees: bytes) -> str:
    """Calcule le hash SHA-256 d'un contenu deja charge en memoire."""
    return hashlib.sha256(donnees).hexdigest()
