"""Console text output renderers.

Renders catalog records into human-friendly text and logs it line by line.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Sequence

from ApiCatalog.core.models import ApiDefinition, ApiDeployment, ApiMetadata, ApiVersion
from ApiCatalog.core.query import SearchIntent
from ApiCatalog.renderers.base import OutputWriter
from ApiCatalog.utils.log import log

EMPTY_STATE_MESSAGE = "Can't find any search results. Try a different search term."
_SUMMARY_MAX_LENGTH = 120


def _fmt_dt(dt: datetime | None) -> str:
    if not dt:
        return "-"
    return dt.strftime("%Y-%m-%d")


def _truncate(text: str, max_length: int = _SUMMARY_MAX_LENGTH) -> str:
    flat = " ".join(text.split())
    if len(flat) <= max_length:
        return flat
    return flat[: max_length - 3].rstrip() + "..."


def render_text(apis: Iterable[ApiMetadata]) -> str:
    """Render APIs into a human-readable text block.

    Args:
        apis: Iterable of API records.

    Returns:
        A formatted string; the empty-state message when there are no APIs.
    """
    lines: list[str] = []
    for idx, api in enumerate(apis, start=1):
        lines.append(f"{idx}. {api.title or api.name} ({api.name})")
        details = [part for part in (api.kind, api.lifecycle_stage) if part]
        if details:
            lines.append(f"   Type: {' / '.join(details)}")
        summary = api.summary or api.description
        if summary:
            lines.append(f"   Summary: {_truncate(summary)}")
        lines.append(f"   Updated: {_fmt_dt(api.last_updated)}")
        lines.append("")

    if not lines:
        return EMPTY_STATE_MESSAGE + "\n"
    return "\n".join(lines).rstrip() + "\n"


def render_versions(versions: Sequence[ApiVersion]) -> str:
    lines = [f"- {v.name}: {v.title or '-'} [{v.lifecycle_stage or '-'}]" for v in versions]
    return "\n".join(lines) + "\n" if lines else "No versions.\n"


def render_deployments(deployments: Sequence[ApiDeployment]) -> str:
    lines: list[str] = []
    for deployment in deployments:
        marker = " (recommended)" if deployment.recommended else ""
        lines.append(f"- {deployment.name}{marker}: {deployment.host or '-'}")
    return "\n".join(lines) + "\n" if lines else "No deployments.\n"


def render_definitions(definitions: Sequence[ApiDefinition]) -> str:
    lines: list[str] = []
    for definition in definitions:
        spec = definition.specification
        spec_label = " ".join(part for part in (spec.name, spec.version) if part) or "-"
        lines.append(f"- {definition.name}: {definition.title or '-'} [{spec_label}]")
    return "\n".join(lines) + "\n" if lines else "No definitions.\n"


def log_block(text: str) -> None:
    for line in text.splitlines():
        log.info(line)


class ConsoleOutputWriter(OutputWriter):
    """Write listings to console via logging."""

    def write_listing(self, apis: Sequence[ApiMetadata], intent: SearchIntent) -> None:
        if intent.text:
            log.info("search=%r mode=%s", intent.text, intent.mode.value)
        log_block(render_text(apis))

    def finalize(self, action: str) -> None:
        """No-op for console output."""
