import logging

from fastapi import FastAPI

from detailbot.api.webhooks import router as webhooks_router
from detailbot.core.config import settings


# Record attributes passed through `extra=` that are appended to each log line.
CONTEXT_KEYS = (
    "identity",
    "owner",
    "evicted",
    "event_kind",
    "flow",
    "step",
    "service",
    "vehicle_class",
    "reason",
    "event_count",
    "reply_token",
    "message_count",
    "error",
)


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in CONTEXT_KEYS:
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


def configure_logging(level: str) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)


configure_logging(settings.LOG_LEVEL)

app = FastAPI(title=f"{settings.BUSINESS_NAME} LINE Booking Assistant", version="1.0.0")

app.include_router(webhooks_router, tags=["webhooks"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
