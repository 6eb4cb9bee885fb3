from dataclasses import dataclass, field
from typing import Any

STATUS_KIND_COMPLETED = "completed"
STATUS_KIND_ERROR = "error"
STATUS_KIND_CREDITS_CHECKED = "creditsChecked"


@dataclass(frozen=True)
class WebhookAck:
    """Acknowledgment returned to the provider for one callback."""

    status_code: int
    body: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def received(cls, **extra: Any) -> "WebhookAck":
        return cls(status_code=200, body={"received": True, **extra})

    @classmethod
    def ignored(cls) -> "WebhookAck":
        return cls(status_code=202, body={"ignored": True})
