import logging
import os
from contextlib import asynccontextmanager

import httpx
import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

import logging_utils

from .api import program, scrapers, source_html
from .core.settings import get_settings
from .services.html_retriever import SourcePageLocator
from .services.program import ProgramScraper, ReferenceResolver
from .services.retrievers import WolRetriever

dotenv_path = os.path.join(os.path.dirname(__file__), "..", ".env")
load_dotenv(dotenv_path=dotenv_path)

logger = logging_utils.get_logger("mwb_service", service="mwb")


class HealthCheckFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.getMessage().find("/health") == -1


logging.getLogger("uvicorn.access").addFilter(HealthCheckFilter())


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    app.state.settings = settings
    app.state.http_client = httpx.AsyncClient(
        timeout=settings.request_timeout_seconds,
        follow_redirects=True,
    )
    app.state.retriever = WolRetriever(
        app.state.http_client,
        base_url=settings.base_url,
        accept_language=settings.accept_language,
        slow_request_seconds=settings.slow_request_seconds,
    )
    app.state.scraper = ProgramScraper(ReferenceResolver(app.state.retriever))
    app.state.source_locator = SourcePageLocator(
        app.state.retriever, landing_language=settings.landing_language
    )
    logger.info(f"Program scraper ready against [{settings.base_url}]")

    yield

    logger.info("Shutting down...")
    await app.state.http_client.aclose()


app = FastAPI(title="Meeting Workbook Service", version="1.0.0", lifespan=lifespan)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception for request {request.url}: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"error": "An internal server error occurred."})


app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_credentials=True, allow_methods=["*"], allow_headers=["*"])

app.include_router(scrapers.router)
app.include_router(source_html.router)
app.include_router(program.router)


@app.get("/ping", response_class=PlainTextResponse)
async def ping():
    return "pong"


@app.get("/health")
async def health():
    return {"status": "ok"}


def run():
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
