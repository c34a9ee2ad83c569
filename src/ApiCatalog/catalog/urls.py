"""Operation URL template helpers.

Pure functions that turn an operation's URL template into a callable URL for
a chosen deployment and version.
"""

from __future__ import annotations

import re
from typing import Mapping, Optional

from ApiCatalog.core.models import ApiDeployment

_PROTOCOL_RE = re.compile(r"^https?://", re.IGNORECASE)
# Runs of 2+ slashes, except the ones right after a colon (the "://" separator).
_DUPLICATE_SLASH_RE = re.compile(r"(?<!:)/{2,}")
_TEMPLATE_PARAM_RE = re.compile(r"{([^}]+)}")


def compose_base_url(host: Optional[str], version_name: Optional[str], url_template: Optional[str]) -> str:
    """Join host, version and template into one URL.

    A host without protocol gets `https://`. Without a host the result is a
    root-relative path (`/<version>/<template>`).

    Args:
        host: Deployment runtime host, with or without protocol.
        version_name: Version path segment.
        url_template: Operation URL template.

    Returns:
        Joined URL with duplicate slashes collapsed.
    """
    host = host or ""
    if host and not _PROTOCOL_RE.match(host):
        host = f"https://{host}"

    joined = "/".join((host, version_name or "", url_template or ""))
    return _DUPLICATE_SLASH_RE.sub("/", joined)


def extract_param_names(url_template: str) -> list[str]:
    """Return placeholder names left to right, duplicates kept."""
    return _TEMPLATE_PARAM_RE.findall(url_template)


def substitute(url_template: str, param_values: Mapping[str, str]) -> str:
    """Replace `{name}` placeholders with values.

    Placeholders without a (non-empty) value are left untouched, so callers can
    detect missing parameters with `has_unresolved_params`.
    """

    def _replace(match: re.Match[str]) -> str:
        value = param_values.get(match.group(1))
        return str(value) if value else match.group(0)

    return _TEMPLATE_PARAM_RE.sub(_replace, url_template)


def has_unresolved_params(url: str) -> bool:
    return "{" in url


def resolve_operation_url(
    url_template: str,
    deployment: Optional[ApiDeployment] = None,
    version_name: Optional[str] = None,
    param_values: Optional[Mapping[str, str]] = None,
) -> str:
    """Resolve an operation into a ready-to-call URL.

    Args:
        url_template: Operation URL template.
        deployment: Deployment providing the runtime host; optional.
        version_name: Version path segment; optional.
        param_values: Values for template placeholders.

    Returns:
        URL string; may still contain `{name}` placeholders for missing values.
    """
    host = deployment.host if deployment is not None else None
    return substitute(compose_base_url(host, version_name, url_template), param_values or {})
