from pydantic import BaseModel


class ValidationPreviewResponse(BaseModel):
    """Result of dry-running a submission against a form"""
    valid: bool
    errors: dict[str, str]  # field id -> message
    warnings: list[str]  # Non-blocking: unknown keys, duplicate field ids
