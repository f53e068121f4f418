# bulletin/errors.py
"""Exceptions de l'application bulletin.

Le calcul des moyennes ne lève jamais d'exception : celles-ci concernent
uniquement le chargement, la récupération et l'export des données.
"""

class BulletinAppError(Exception):
    """Classe de base pour toutes les exceptions de l'application."""
    pass

class DataValidationError(BulletinAppError):
    """Données inexploitables (colonne obligatoire absente, format inconnu)."""
    pass

class FileProcessingError(BulletinAppError):
    """Erreur lors d'une opération sur un fichier."""
    pass

class RecordsFetchError(BulletinAppError):
    """Échec de récupération des données depuis l'API distante."""
    pass

class StudentNotFoundError(BulletinAppError):
    """Aucun étudiant ne correspond à l'identifiant ou au matricule demandé."""
    pass
