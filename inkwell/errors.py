from typing import List, NamedTuple


class FieldError(NamedTuple):
    field: str
    message: str


class FormValidationError(Exception):
    """Form input that passed schema validation but breaks a business rule."""

    def __init__(self, errors: List[FieldError]) -> None:
        super().__init__("; ".join(f"{e.field}: {e.message}" for e in errors))
        self.errors = errors
