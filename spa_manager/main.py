import logging

from fastapi import FastAPI

from spa_manager.api.v1.appointments import router as appointments_router
from spa_manager.api.v1.chat import router as chat_router
from spa_manager.core.config import settings

CONTEXT_KEYS = (
    "session_id",
    "appointment_id",
    "date",
    "time",
    "intent",
    "pattern",
    "reason",
    "available_count",
    "tip",
    "path",
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


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

logger = logging.getLogger(__name__)
logger.info(
    "Starting appointment service (store=%s, timezone=%s)", settings.STORE_PROVIDER, settings.BUSINESS_TIMEZONE
)

app = FastAPI(title=f"{settings.BUSINESS_NAME} Appointments", version="1.0.0")

app.include_router(appointments_router, tags=["appointments"])
app.include_router(chat_router, tags=["chat"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
