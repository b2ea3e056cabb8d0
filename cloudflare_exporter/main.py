import logging

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest

from cloudflare_exporter.collector import ZoneCollector
from cloudflare_exporter.config import Settings
from cloudflare_exporter.errors import SourceError
from cloudflare_exporter.source import CloudflareClient

logger = logging.getLogger(__name__)

settings = Settings.from_env()
COLLECTOR = ZoneCollector(
    CloudflareClient.from_settings(settings),
    timeout=settings.scrape_timeout,
    max_workers=settings.max_workers,
)
REGISTRY.register(COLLECTOR)

app = FastAPI(title="Cloudflare Exporter")

@app.get("/health")
def health():
    return {"status":"ok"}

@app.get("/metrics")
def metrics():
    try:
        payload = generate_latest()
    except SourceError as e:
        raise HTTPException(status_code=503, detail=f"scrape failed: {e}")
    return Response(payload, media_type=CONTENT_TYPE_LATEST)


def run() -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    logger.info("serving metrics on %s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
