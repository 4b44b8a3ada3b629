"""Email value object.

Provides validated, normalized email addresses for user identification.
Validation is the same ``EmailStr`` rule the API applies to request
bodies, so any address a request may carry is also a valid ``Email``.
"""

from dataclasses import dataclass

from pydantic import EmailStr, TypeAdapter, ValidationError

from atelier.domain.shared.exceptions import EntityValidationError, FieldError

_EMAIL_ADAPTER = TypeAdapter(EmailStr)


@dataclass(frozen=True)
class Email:
    """Value object representing a validated, lower-cased email address."""

    value: str

    def __post_init__(self) -> None:
        normalized = (self.value or "").lower().strip()

        if not normalized:
            raise EntityValidationError(
                [FieldError("email", "Email is required", self.value)],
            )

        try:
            _EMAIL_ADAPTER.validate_python(normalized)
        except ValidationError as e:
            raise EntityValidationError(
                [FieldError("email", "Please provide a valid email", self.value)],
            ) from e

        # frozen dataclass: replace value with the normalized form
        object.__setattr__(self, "value", normalized)

    @property
    def domain(self) -> str:
        return self.value.rsplit("@", 1)[1]

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"Email('{self.value}')"
