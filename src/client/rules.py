"""
Composable field rules for request schemas.

Each rule is a plain callable wrapped in a pydantic ``BeforeValidator`` or
``AfterValidator`` so schemas can stack them with ``Annotated``. Rules raise
``PydanticCustomError`` so the message reaches the API response verbatim.
Cross-field rules are model validators built by ``matching_confirmation``.
"""
import re
from typing import Annotated, Any, Callable

from pydantic import AfterValidator, BeforeValidator, ModelWrapValidatorHandler, ValidationError
from pydantic.networks import validate_email
from pydantic_core import ErrorDetails, InitErrorDetails, PydanticCustomError

PASSWORD_COMPLEXITY = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")
LETTERS_AND_SPACES = re.compile(r"^[a-zA-Z\s]+$")


def strip_text(value: Any) -> Any:
    """Trim surrounding whitespace from strings, leave other input for type checks."""
    if isinstance(value, str):
        return value.strip()
    return value


def blank_to_none(value: Any) -> Any:
    """Trim strings and map empty ones to None."""
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def normalize_email(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower()
    return value


def min_length(limit: int, message: str) -> AfterValidator:
    def check(value: str) -> str:
        if len(value) < limit:
            raise PydanticCustomError("too_short", message)
        return value

    return AfterValidator(check)


def max_length(limit: int, message: str) -> AfterValidator:
    def check(value: str | None) -> str | None:
        if value is not None and len(value) > limit:
            raise PydanticCustomError("too_long", message)
        return value

    return AfterValidator(check)


def pattern(regex: re.Pattern, message: str) -> AfterValidator:
    def check(value: str) -> str:
        if not regex.search(value):
            raise PydanticCustomError("pattern_mismatch", message)
        return value

    return AfterValidator(check)


def email_format(message: str = "Invalid email format") -> AfterValidator:
    """
    Accept a bare address only.

    ``validate_email`` also parses the ``Name <addr>`` display form; the parsed
    address must be the whole input.
    """
    def check(value: str) -> str:
        try:
            _, address = validate_email(value)
        except PydanticCustomError:
            raise PydanticCustomError("invalid_email", message)
        if address != value:
            raise PydanticCustomError("invalid_email", message)
        return value

    return AfterValidator(check)


def _line_error(error: ErrorDetails) -> InitErrorDetails:
    return {
        "type": PydanticCustomError(error["type"], error["msg"]),
        "loc": error["loc"],
        "input": error["input"],
    }


def matching_confirmation(
    confirmation: str,
    original: str,
    message: str = "Passwords don't match",
) -> Callable[..., Any]:
    """
    Cross-field rule for ``model_validator(mode="wrap")``.

    Compares the submitted values of ``original`` and ``confirmation`` before
    field rules run, so a mismatch is reported on the confirmation field even
    when the original also breaks its own rules. Field errors and the mismatch
    are raised together. The comparison is skipped when either value is
    missing or not a string.
    """
    def check(cls, data: Any, handler: ModelWrapValidatorHandler) -> Any:
        line_errors: list[InitErrorDetails] = []
        model = None
        try:
            model = handler(data)
        except ValidationError as e:
            line_errors = [_line_error(error) for error in e.errors()]

        if isinstance(data, dict):
            confirmation_key = cls.model_fields[confirmation].alias or confirmation
            original_key = cls.model_fields[original].alias or original
            confirmed = data.get(confirmation_key, data.get(confirmation))
            submitted = data.get(original_key, data.get(original))
            if isinstance(confirmed, str) and isinstance(submitted, str) and confirmed != submitted:
                line_errors.append({
                    "type": PydanticCustomError("fields_mismatch", message),
                    "loc": (confirmation_key,),
                    "input": confirmed,
                })

        if line_errors:
            raise ValidationError.from_exception_data(cls.__name__, line_errors)
        return model

    return check


def required_text(message: str) -> Callable[[str], str]:
    def check(value: str) -> str:
        if not value:
            raise PydanticCustomError("missing_text", message)
        return value

    return check


# Reusable annotated types
Email = Annotated[str, BeforeValidator(normalize_email), email_format()]

StrongPassword = Annotated[
    str,
    min_length(8, "Password must be at least 8 characters"),
    max_length(128, "Password must be less than 128 characters"),
    pattern(
        PASSWORD_COMPLEXITY,
        "Password must contain at least one lowercase letter, one uppercase letter, and one number",
    ),
]

FullName = Annotated[
    str,
    min_length(2, "Full name must be at least 2 characters"),
    max_length(100, "Full name must be less than 100 characters"),
    pattern(LETTERS_AND_SPACES, "Full name can only contain letters and spaces"),
]


def optional_text(limit: int) -> Any:
    """Optional free-text field: trimmed, empty becomes None, bounded length."""
    return Annotated[
        str | None,
        BeforeValidator(blank_to_none),
        max_length(limit, f"Must be less than {limit} characters"),
    ]


def trimmed_text(message: str, limit: int) -> Any:
    """Required free-text field: trimmed, non-empty, bounded length."""
    return Annotated[
        str,
        BeforeValidator(strip_text),
        AfterValidator(required_text(message)),
        max_length(limit, f"Must be less than {limit} characters"),
    ]
