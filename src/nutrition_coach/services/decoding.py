"""Schema-validated decoding of model output."""

from typing import TypeVar

from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


class ModelOutputError(ValueError):
    """Raised when model output does not match the expected schema."""

    def __init__(self, message: str, raw_text: str) -> None:
        super().__init__(message)
        self.raw_text = raw_text


def looks_like_json(text: str) -> bool:
    """Return True if the text starts like a JSON object or array."""
    stripped = text.strip()
    return stripped.startswith(("{", "["))


def decode_model_json(text: str, model_type: type[ModelT]) -> ModelT:
    """Decode model output into a typed value or raise ModelOutputError."""
    if not looks_like_json(text):
        raise ModelOutputError("Model output is not JSON", raw_text=text)
    try:
        return model_type.model_validate_json(text)
    except ValidationError as exc:
        raise ModelOutputError(
            f"Model output failed {model_type.__name__} validation: {exc}",
            raw_text=text,
        ) from exc
