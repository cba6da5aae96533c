"""
Taxonomie des erreurs métier du portail.

Les erreurs de la couche entité (validation, référence, conflit) sont toujours
remontées à l'appelant. Les erreurs de dérivation restent internes : elles sont
journalisées et n'annulent jamais l'écriture de l'entité.
"""


class PortalError(Exception):
    """Base de toutes les erreurs métier."""


class ValidationError(PortalError):
    """Champs manquants ou invalides : rien n'est persisté."""

    def __init__(self, message: str, errors: list | None = None):
        super().__init__(message)
        self.errors = errors or []


class ReferentialError(PortalError):
    """Le payload référence un élève, un utilisateur ou une classe inexistant."""


class ConflictError(PortalError):
    """Doublon sur un champ unique, ou suppression bloquée par une référence."""


class DerivationFailure(PortalError):
    """Échec du calcul ou de l'ajout d'une notification après le commit de l'entité."""


class TransactionFailure(PortalError):
    """Le remplacement en bloc a échoué et a été entièrement annulé."""
