from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Generic, Mapping, Optional, Sequence, TypeVar

T = TypeVar("T")


def _freeze_extra(record: Any) -> None:
    # Keep a stable read-only mapping so unrecognised payload keys survive
    # without risking accidental mutation.
    object.__setattr__(record, "extra", MappingProxyType(dict(record.extra)))


@dataclass(frozen=True, slots=True)
class Page(Generic[T]):
    """One page of a list response.

    Attributes:
        items: Records on this page, in server order.
        next_link: Opaque continuation locator; None marks the last page.
    """

    items: Sequence[T] = ()
    next_link: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))

    @property
    def is_last(self) -> bool:
        return not self.next_link


@dataclass(frozen=True, slots=True)
class ApiMetadata:
    """Catalog entry for a single API.

    This is the unified record every list/search response is mapped to.

    Attributes:
        name: Resource name, unique within the workspace.
        title: Display title.
        kind: API style (rest, graphql, grpc, soap, mcp, ...).
        description: Long markdown description.
        summary: Short description.
        lifecycle_stage: Lifecycle stage (design, development, production, ...).
        external_documentation: Documentation links as raw mappings.
        contacts: Contact entries as raw mappings.
        custom_properties: Workspace-defined metadata values.
        last_updated: Last modification time if provided.
        extra: Extension point for payload keys not modelled here.
    """

    name: str
    title: str = ""
    kind: Optional[str] = None
    description: Optional[str] = None
    summary: Optional[str] = None
    lifecycle_stage: Optional[str] = None
    external_documentation: Sequence[Mapping[str, Any]] = ()
    contacts: Sequence[Mapping[str, Any]] = ()
    custom_properties: Mapping[str, Any] = field(default_factory=dict)
    last_updated: Optional[datetime] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _freeze_extra(self)


@dataclass(frozen=True, slots=True)
class ApiVersion:
    name: str
    title: str = ""
    lifecycle_stage: Optional[str] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _freeze_extra(self)


@dataclass(frozen=True, slots=True)
class DeploymentServer:
    """Runtime endpoints of a deployment; the first URI is the default host."""

    runtime_uri: Sequence[str] = ()


@dataclass(frozen=True, slots=True)
class ApiDeployment:
    """A reachable instance of an API, used to compose callable URLs."""

    name: str
    title: str = ""
    description: Optional[str] = None
    environment_id: Optional[str] = None
    server: DeploymentServer = DeploymentServer()
    recommended: bool = False
    custom_properties: Mapping[str, Any] = field(default_factory=dict)
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _freeze_extra(self)

    @property
    def host(self) -> Optional[str]:
        return self.server.runtime_uri[0] if self.server.runtime_uri else None


@dataclass(frozen=True, slots=True)
class SpecificationInfo:
    name: Optional[str] = None
    version: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ApiDefinition:
    name: str
    title: str = ""
    description: Optional[str] = None
    specification: SpecificationInfo = SpecificationInfo()
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _freeze_extra(self)


@dataclass(frozen=True, slots=True)
class ApiDefinitionId:
    """Composite identifier of one definition; also the specification cache key."""

    api_name: str
    version_name: str
    definition_name: str


@dataclass(frozen=True, slots=True)
class ApiEnvironment:
    name: str
    title: str = ""
    description: Optional[str] = None
    kind: Optional[str] = None
    server_type: Optional[str] = None
    management_portal_uri: Sequence[str] = ()
    onboarding_instructions: Optional[str] = None
    developer_portal_uri: Sequence[str] = ()
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _freeze_extra(self)


@dataclass(frozen=True, slots=True)
class ApiAuthSchemeMetadata:
    """Security requirement advertised by an API version."""

    name: str
    title: str = ""
    description: Optional[str] = None
    security_scheme: Optional[str] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _freeze_extra(self)


@dataclass(frozen=True, slots=True)
class ApiAuthScheme:
    """Credentials returned for one security scheme.

    The credential payloads are passed through untouched; their shape depends
    on the scheme type.
    """

    name: str
    security_scheme: Optional[str] = None
    api_key: Optional[Mapping[str, Any]] = None
    oauth2: Optional[Mapping[str, Any]] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _freeze_extra(self)


@dataclass(frozen=True, slots=True)
class MetadataSchema:
    name: str
    schema: str = ""
    assigned_to: Sequence[Mapping[str, Any]] = ()


@dataclass(frozen=True, slots=True)
class PackageArgument:
    name: str
    description: Optional[str] = None
    is_required: bool = False
    value: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Package:
    registry_type: str
    identifier: str
    version: str = ""
    runtime_hint: Optional[str] = None
    runtime_arguments: Sequence[PackageArgument] = ()
    package_arguments: Sequence[PackageArgument] = ()
    environment_variables: Sequence[PackageArgument] = ()
    transport_type: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Remote:
    transport_type: str
    url: str


@dataclass(frozen=True, slots=True)
class Server:
    """Registry server descriptor (packages to run locally, remotes to connect to)."""

    name: str
    title: Optional[str] = None
    description: Optional[str] = None
    version: Optional[str] = None
    packages: Sequence[Package] = ()
    remotes: Sequence[Remote] = ()
