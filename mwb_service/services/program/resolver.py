"""Resolution of in-page reference anchors into normalized text."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from bs4 import Tag

from ...core.errors import RetrievalError, StructuralError
from ...core.result import Result, returns_result
from ..retrievers import WolRetriever
from . import logging as program_logging
from .reference_parsers import PublicationKind, detect_publication_kind, normalize_publication
from .text import clean_text

logger = logging.getLogger(__name__)

_LANGUAGE_SEGMENT = re.compile(r"^/[A-Za-z]{2,3}(?=/)")


@dataclass(slots=True)
class AnchorReference:
    """Where an anchor points and where its tooltip payload is fetched from."""

    source_href: str
    language_prefix: str
    fetch_url: str
    label: str = ""


@dataclass(slots=True)
class ResolvedReference:
    kind: PublicationKind
    normalized_text: str
    item: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def is_talk_publication(self) -> bool:
        return self.kind is PublicationKind.TALK

    @property
    def is_scripture_publication(self) -> bool:
        return self.kind is PublicationKind.SCRIPTURE


def _payload_preview(payload: Any) -> str:
    try:
        return json.dumps(payload, ensure_ascii=False)[:500]
    except (TypeError, ValueError):
        return repr(payload)[:500]


def validate_reference_payload(payload: Any, *, url: Optional[str] = None) -> Dict[str, Any]:
    """Return the single item of a tooltip payload or raise ``RetrievalError``."""
    items = payload.get("items") if isinstance(payload, dict) else None
    if not isinstance(items, list) or len(items) != 1:
        count = len(items) if isinstance(items, list) else 0
        logger.error(f"JSON content doesn't contain exactly one item. JSON content: {_payload_preview(payload)}")
        raise RetrievalError(
            f"JSON content for reference doesn't match the expected format: expected 1 item, got {count}",
            url=url,
        )

    item = items[0]
    if not isinstance(item, dict):
        raise RetrievalError("JSON content for reference doesn't match the expected format: item is not an object", url=url)
    if not isinstance(item.get("content"), str) or not item["content"]:
        logger.error(f"JSON content doesn't contain content. JSON content: {_payload_preview(payload)}")
        raise RetrievalError("JSON content for reference doesn't match the expected format: missing content", url=url)
    if not isinstance(item.get("articleClasses"), str) or not item["articleClasses"]:
        logger.error(f"JSON content doesn't contain articleClasses. JSON content: {_payload_preview(payload)}")
        raise RetrievalError(
            "JSON content for reference doesn't match the expected format: missing articleClasses", url=url
        )
    return item


class ReferenceResolver:
    """Fetches the payload behind an anchor, classifies it and normalizes its text."""

    def __init__(self, retriever: WolRetriever, api_root: Optional[str] = None):
        self.retriever = retriever
        self.api_root = (api_root or retriever.base_url).rstrip("/")

    def anchor_reference(self, anchor: Tag) -> AnchorReference:
        href = anchor.get("href")
        if not href:
            message = f"Anchor [{clean_text(anchor.get_text())}] has no href"
            logger.error(message)
            raise StructuralError(message)
        match = _LANGUAGE_SEGMENT.match(href)
        language_prefix = match.group(0) if match else ""
        return AnchorReference(
            source_href=href,
            language_prefix=language_prefix,
            fetch_url=f"{self.api_root}{href[len(language_prefix):]}",
            label=clean_text(anchor.get_text()),
        )

    @returns_result
    async def fetch_item(self, anchor: Tag) -> Dict[str, Any]:
        """Fetch the tooltip payload behind ``anchor`` and return its single item."""
        reference = self.anchor_reference(anchor)
        payload = (await self.retriever.fetch_json(reference.fetch_url)).unwrap()
        return validate_reference_payload(payload, url=reference.fetch_url)

    @returns_result
    async def resolve(self, anchor: Tag) -> ResolvedReference:
        """Fetch, classify and normalize the reference behind ``anchor``."""
        item = (await self.fetch_item(anchor)).unwrap()
        kind = detect_publication_kind(item["articleClasses"])
        resolved = ResolvedReference(kind=kind, normalized_text=normalize_publication(kind, item["content"]), item=item)
        program_logging.log_reference_resolved(clean_text(anchor.get_text()), kind.value, len(resolved.normalized_text))
        return resolved


async def resolve_text(resolver: ReferenceResolver, anchor: Tag) -> str:
    """Resolve ``anchor`` and return its text, raising on failure."""
    result: Result[ResolvedReference] = await resolver.resolve(anchor)
    return result.unwrap().normalized_text
