"""
Registration and edit errors.

Every error carries a user-facing message and the HTTP status the routes
answer with. None of them is fatal to the process.
"""

from typing import Iterable


class StudentConfigError(Exception):
    """Base class for recoverable registration/edit failures."""

    status_code = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class MissingRequiredField(StudentConfigError):
    """One or more required fields are empty."""

    def __init__(self, fields: Iterable[str]):
        self.fields = list(fields)
        super().__init__(
            f"Todos los campos son requeridos (faltan: {', '.join(self.fields)})"
        )


class DuplicatePhoneNumberId(StudentConfigError):
    """A record already exists for this phone-number id."""

    def __init__(self, phone_number_id: str, owner: str):
        self.phone_number_id = phone_number_id
        self.owner = owner
        super().__init__(
            f'Ya existe un registro con Phone Number ID "{phone_number_id}" '
            f'para "{owner}". Si eres tú, usa el enlace "Editar mi configuración" '
            f"desde la página principal."
        )


class InvalidFlowUrl(StudentConfigError):
    """The flow URL has no `.../prediction/<flowId>` segment pair."""

    def __init__(self, url: str = ""):
        self.url = url
        super().__init__("La URL del flujo IA no tiene el formato correcto")


class NotFound(StudentConfigError):
    status_code = 404

    def __init__(self, phone_number_id: str):
        self.phone_number_id = phone_number_id
        super().__init__("No se encontró configuración con ese Phone Number ID")


class InvalidToken(StudentConfigError):
    status_code = 401

    def __init__(self):
        super().__init__("Webhook Verify Token incorrecto")
