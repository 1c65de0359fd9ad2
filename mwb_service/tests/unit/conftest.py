from typing import Any, Dict, List

import httpx
import pytest

from mwb_service.services.program import ProgramScraper, ReferenceResolver
from mwb_service.services.retrievers import WolRetriever

from .fixtures import BASE_URL, PAGE_HTML, PAYLOADS, make_handler


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def page_html() -> str:
    return PAGE_HTML


@pytest.fixture
def payloads() -> Dict[str, Dict[str, Any]]:
    return dict(PAYLOADS)


@pytest.fixture
def requested() -> List[str]:
    return []


@pytest.fixture
def retriever(payloads, requested) -> WolRetriever:
    client = httpx.AsyncClient(transport=httpx.MockTransport(make_handler(payloads, requested)))
    return WolRetriever(client, base_url=BASE_URL)


@pytest.fixture
def resolver(retriever) -> ReferenceResolver:
    return ReferenceResolver(retriever)


@pytest.fixture
def scraper(resolver) -> ProgramScraper:
    return ProgramScraper(resolver)
