"""Catalog data API payload parser.

Maps camelCase JSON payloads into the internal records. Parsing is lenient:
wrongly-typed optional keys degrade to None or empty values, and a list
envelope without `value` is treated as an empty page.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Mapping, Optional, TypeVar

from dateutil import parser as dt_parser

from ApiCatalog.core.models import (
    ApiAuthScheme,
    ApiAuthSchemeMetadata,
    ApiDefinition,
    ApiDeployment,
    ApiEnvironment,
    ApiMetadata,
    ApiVersion,
    DeploymentServer,
    MetadataSchema,
    Package,
    PackageArgument,
    Page,
    Remote,
    Server,
    SpecificationInfo,
)

T = TypeVar("T")


def parse_page(payload: Any, parse_item: Callable[[Mapping[str, Any]], T]) -> Page[T]:
    """Parse a `{value: [...], nextLink?: str}` envelope.

    Args:
        payload: Decoded JSON body.
        parse_item: Mapper for one list element.

    Returns:
        Page of parsed items; empty when `value` is missing or malformed.
    """
    if not isinstance(payload, Mapping):
        return Page()
    return Page(items=parse_list(payload.get("value"), parse_item), next_link=_opaque_link(payload.get("nextLink")))


def _opaque_link(value: Any) -> Optional[str]:
    # Continuation links are used verbatim; never normalised.
    return value if isinstance(value, str) and value else None


def parse_list(raw_items: Any, parse_item: Callable[[Mapping[str, Any]], T]) -> list[T]:
    if not isinstance(raw_items, list):
        return []
    return [parse_item(item) for item in raw_items if isinstance(item, Mapping)]


def parse_api(item: Mapping[str, Any]) -> ApiMetadata:
    known = {
        "name",
        "title",
        "kind",
        "description",
        "summary",
        "lifecycleStage",
        "externalDocumentation",
        "contacts",
        "customProperties",
        "lastUpdated",
    }
    return ApiMetadata(
        name=_safe_str(item.get("name")),
        title=_safe_str(item.get("title")),
        kind=_str_or_none(item.get("kind")),
        description=_str_or_none(item.get("description")),
        summary=_str_or_none(item.get("summary")),
        lifecycle_stage=_str_or_none(item.get("lifecycleStage")),
        external_documentation=_mapping_tuple(item.get("externalDocumentation")),
        contacts=_mapping_tuple(item.get("contacts")),
        custom_properties=_mapping(item.get("customProperties")),
        last_updated=_parse_iso_datetime(item.get("lastUpdated")),
        extra=_extra(item, known),
    )


def parse_version(item: Mapping[str, Any]) -> ApiVersion:
    return ApiVersion(
        name=_safe_str(item.get("name")),
        title=_safe_str(item.get("title")),
        lifecycle_stage=_str_or_none(item.get("lifecycleStage")),
        extra=_extra(item, {"name", "title", "lifecycleStage"}),
    )


def parse_deployment(item: Mapping[str, Any]) -> ApiDeployment:
    server = _mapping(item.get("server"))
    return ApiDeployment(
        name=_safe_str(item.get("name")),
        title=_safe_str(item.get("title")),
        description=_str_or_none(item.get("description")),
        environment_id=_str_or_none(item.get("environmentId")),
        server=DeploymentServer(runtime_uri=_str_tuple(server.get("runtimeUri"))),
        recommended=item.get("recommended") is True,
        custom_properties=_mapping(item.get("customProperties")),
        extra=_extra(
            item,
            {"name", "title", "description", "environmentId", "server", "recommended", "customProperties"},
        ),
    )


def parse_definition(item: Mapping[str, Any]) -> ApiDefinition:
    spec = _mapping(item.get("specification"))
    return ApiDefinition(
        name=_safe_str(item.get("name")),
        title=_safe_str(item.get("title")),
        description=_str_or_none(item.get("description")),
        specification=SpecificationInfo(
            name=_str_or_none(spec.get("name")),
            version=_str_or_none(spec.get("version")),
        ),
        extra=_extra(item, {"name", "title", "description", "specification"}),
    )


def parse_environment(item: Mapping[str, Any]) -> ApiEnvironment:
    server = _mapping(item.get("server"))
    onboarding = _mapping(item.get("onboarding"))
    return ApiEnvironment(
        name=_safe_str(item.get("name")),
        title=_safe_str(item.get("title")),
        description=_str_or_none(item.get("description")),
        kind=_str_or_none(item.get("kind")),
        server_type=_str_or_none(server.get("type")),
        management_portal_uri=_str_tuple(server.get("managementPortalUri")),
        onboarding_instructions=_str_or_none(onboarding.get("instructions")),
        developer_portal_uri=_str_tuple(onboarding.get("developerPortalUri")),
        extra=_extra(item, {"name", "title", "description", "kind", "server", "onboarding"}),
    )


def parse_auth_scheme_metadata(item: Mapping[str, Any]) -> ApiAuthSchemeMetadata:
    return ApiAuthSchemeMetadata(
        name=_safe_str(item.get("name")),
        title=_safe_str(item.get("title")),
        description=_str_or_none(item.get("description")),
        security_scheme=_str_or_none(item.get("securityScheme")),
        extra=_extra(item, {"name", "title", "description", "securityScheme"}),
    )


def parse_auth_scheme(item: Mapping[str, Any]) -> ApiAuthScheme:
    api_key = item.get("apiKey")
    oauth2 = item.get("oauth2")
    return ApiAuthScheme(
        name=_safe_str(item.get("name")),
        security_scheme=_str_or_none(item.get("securityScheme")),
        api_key=dict(api_key) if isinstance(api_key, Mapping) else None,
        oauth2=dict(oauth2) if isinstance(oauth2, Mapping) else None,
        extra=_extra(item, {"name", "securityScheme", "apiKey", "oauth2"}),
    )


def parse_metadata_schema(item: Mapping[str, Any]) -> MetadataSchema:
    return MetadataSchema(
        name=_safe_str(item.get("name")),
        schema=_safe_str(item.get("schema")),
        assigned_to=_mapping_tuple(item.get("assignedTo")),
    )


def parse_server(payload: Any) -> Server | None:
    """Unwrap a `{server: {...}, _meta?: {...}}` envelope.

    Returns:
        Parsed server, or None when the envelope carries no server.
    """
    if not isinstance(payload, Mapping):
        return None
    raw = payload.get("server")
    if not isinstance(raw, Mapping):
        return None

    packages = tuple(_parse_package(p) for p in raw.get("packages") or () if isinstance(p, Mapping))
    remotes = tuple(
        Remote(transport_type=_safe_str(r.get("transport_type")), url=_safe_str(r.get("url")))
        for r in raw.get("remotes") or ()
        if isinstance(r, Mapping)
    )
    return Server(
        name=_safe_str(raw.get("name")),
        title=_str_or_none(raw.get("title")),
        description=_str_or_none(raw.get("description")),
        version=_str_or_none(raw.get("version")),
        packages=packages,
        remotes=remotes,
    )


def _parse_package(raw: Mapping[str, Any]) -> Package:
    transport = _mapping(raw.get("transport"))
    return Package(
        registry_type=_safe_str(raw.get("registryType")),
        identifier=_safe_str(raw.get("identifier")),
        version=_safe_str(raw.get("version")),
        runtime_hint=_str_or_none(raw.get("runtimeHint")),
        runtime_arguments=_arguments(raw.get("runtimeArguments")),
        package_arguments=_arguments(raw.get("packageArguments")),
        environment_variables=_arguments(raw.get("environmentVariables")),
        transport_type=_str_or_none(transport.get("type")),
    )


def _arguments(raw: Any) -> tuple[PackageArgument, ...]:
    if not isinstance(raw, list):
        return ()
    return tuple(
        PackageArgument(
            name=_safe_str(arg.get("name")),
            description=_str_or_none(arg.get("description")),
            is_required=arg.get("is_required") is True,
            value=_str_or_none(arg.get("value")),
        )
        for arg in raw
        if isinstance(arg, Mapping)
    )


def _safe_str(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    return ""


def _str_or_none(value: Any) -> Optional[str]:
    return _safe_str(value) or None


def _str_tuple(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(item for item in (_safe_str(v) for v in value) if item)


def _mapping(value: Any) -> dict[str, Any]:
    return dict(value) if isinstance(value, Mapping) else {}


def _mapping_tuple(value: Any) -> tuple[Mapping[str, Any], ...]:
    if not isinstance(value, list):
        return ()
    return tuple(dict(item) for item in value if isinstance(item, Mapping))


def _extra(item: Mapping[str, Any], known: set[str]) -> dict[str, Any]:
    return {key: value for key, value in item.items() if key not in known}


def _parse_iso_datetime(value: Any) -> datetime | None:
    """Parse ISO-8601 text into a datetime."""
    text = _safe_str(value)
    if not text:
        return None
    try:
        return dt_parser.isoparse(text)
    except (TypeError, ValueError):
        return None
