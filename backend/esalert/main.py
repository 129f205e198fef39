"""FastAPI app entrypoint."""

import logging

from fastapi import FastAPI

from esalert.api.routes import router
from esalert.config import get_settings

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Elasticsearch Alert Compiler")
app.include_router(router)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
