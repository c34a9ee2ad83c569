"""JSON output renderers.

Renders API records into JSON-serializable objects and writes accumulated
listings to a timestamped file on finalize.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Sequence

from ApiCatalog.core.models import ApiMetadata
from ApiCatalog.core.query import SearchIntent
from ApiCatalog.renderers.base import OutputWriter
from ApiCatalog.utils.log import log


def render_json(apis: Iterable[ApiMetadata]) -> list[dict[str, Any]]:
    """Render API records into JSON-serializable dicts using wire (camelCase) keys."""
    out: list[dict[str, Any]] = []
    for api in apis:
        out.append(
            {
                "name": api.name,
                "title": api.title,
                "kind": api.kind,
                "summary": api.summary,
                "description": api.description,
                "lifecycleStage": api.lifecycle_stage,
                "externalDocumentation": [dict(doc) for doc in api.external_documentation],
                "contacts": [dict(contact) for contact in api.contacts],
                "customProperties": dict(api.custom_properties),
                "lastUpdated": api.last_updated.isoformat() if api.last_updated else None,
            }
        )
    return out


class JsonFileWriter(OutputWriter):
    """Accumulate listings and write them to a JSON file on finalize."""

    def __init__(self, base_dir: str) -> None:
        self.output_dir = Path(base_dir) / "json"
        self.all_results: list[dict[str, Any]] = []

    def write_listing(self, apis: Sequence[ApiMetadata], intent: SearchIntent) -> None:
        self.all_results.append(
            {
                "search": intent.text,
                "mode": intent.mode.value,
                "filters": [{"type": c.facet_type, "value": c.value} for c in intent.filters],
                "apis": render_json(apis),
            }
        )

    def finalize(self, action: str) -> None:
        payload = json.dumps(self.all_results, ensure_ascii=False, indent=2)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output_path = self.output_dir / f"{action}_{timestamp}.json"
        output_path.write_text(payload, encoding="utf-8")
        log.info("JSON saved to %s", output_path)
