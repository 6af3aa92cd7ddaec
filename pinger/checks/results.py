from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CheckResult:
    success: bool
    message: str
    data: Any | None = None
    error: Any | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"success": self.success, "message": self.message}
        # The success path always carries data, even when the target sent null.
        if self.success:
            out["data"] = self.data
        if self.error is not None:
            out["error"] = self.error
        return out

    @classmethod
    def from_payload(cls, payload: Any) -> CheckResult:
        """
        Rebuild a result from the /check JSON body.
        Raises ValueError when the body does not have the expected shape.
        """
        if not isinstance(payload, dict):
            raise ValueError("check payload is not a JSON object")
        success = payload.get("success")
        message = payload.get("message")
        if not isinstance(success, bool) or not isinstance(message, str):
            raise ValueError("check payload is missing success/message")
        return cls(
            success=success,
            message=message,
            data=payload.get("data"),
            error=payload.get("error"),
        )
