"""Operation Schemas — structured results the façade hands to UI collaborators.

Invariants:
    - ok=True ⇒ error is None
    - ok=False ⇒ error holds WMStoreError.to_response()["error"]
    - notification is None when nothing should be shown (e.g. throttled failures)
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict


class Notification(BaseModel):
    level: Literal["success", "info", "warning", "danger"]
    message: str
    code: str | None = None


class ProfileRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    is_active: bool


class OperationResult(BaseModel):
    ok: bool
    value: Any = None
    error: dict | None = None
    notification: Notification | None = None

    @classmethod
    def success(cls, value: Any = None, message: str | None = None) -> "OperationResult":
        note = Notification(level="success", message=message) if message else None
        return cls(ok=True, value=value, notification=note)
