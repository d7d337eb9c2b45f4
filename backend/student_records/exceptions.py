"""
Erreurs métier levées par les services.

Chaque classe porte le code HTTP et le code d'erreur renvoyés au client.
Les handlers enregistrés dans main.py les convertissent en enveloppe ApiResponse.
"""


class AppError(Exception):
    status_code = 500
    error_code = "INTERNAL_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(AppError):
    """Entité introuvable."""
    status_code = 404
    error_code = "NOT_FOUND"


class ConflictError(AppError):
    """Violation d'unicité ou d'état (doublon, élève déjà pointé...)."""
    status_code = 409
    error_code = "CONFLICT"


class BadRequestError(AppError):
    """Règle métier violée par des données pourtant bien formées."""
    status_code = 400
    error_code = "INVALID_ARGUMENT"


class UnauthorizedError(AppError):
    # Réservé : aucune authentification dans cette version
    status_code = 401
    error_code = "UNAUTHORIZED"
