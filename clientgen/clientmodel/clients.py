"""Client-model nodes: service clients, method groups, methods and proxies.

The client tree is explicit: ``ClientTree`` holds every ``ServiceClient``
in a flat list with the index of its parent, so ownership is visible and no
recursion is needed to walk it.
"""

import dataclasses
from enum import Enum

from clientgen.ast_utils import ImportSymbol
from clientgen.clientmodel.types import ClassType, ClientType
from clientgen.codemodel.models import ParameterLocation

__all__ = [
    'MethodVariant',
    'Visibility',
    'ClientMethodParameter',
    'ParameterCheck',
    'ProxyMethodParameter',
    'ProxyMethod',
    'Proxy',
    'ClientMethod',
    'ServiceClientProperty',
    'Constructor',
    'MethodGroupClient',
    'ClientAccessorMethod',
    'ServiceClient',
    'ClientTree',
]


class MethodVariant(str, Enum):
    """The call shapes one operation expands into."""

    ASYNC_WITH_RESPONSE = 'async_with_response'
    ASYNC_VALUE = 'async_value'
    SYNC_WITH_RESPONSE = 'sync_with_response'
    SYNC_VALUE = 'sync_value'

    @property
    def is_async(self) -> bool:
        return self in (MethodVariant.ASYNC_WITH_RESPONSE, MethodVariant.ASYNC_VALUE)

    @property
    def is_with_response(self) -> bool:
        return self in (
            MethodVariant.ASYNC_WITH_RESPONSE,
            MethodVariant.SYNC_WITH_RESPONSE,
        )

    @property
    def with_response_variant(self) -> 'MethodVariant':
        if self.is_async:
            return MethodVariant.ASYNC_WITH_RESPONSE
        return MethodVariant.SYNC_WITH_RESPONSE


class Visibility(str, Enum):
    PUBLIC = 'public'
    PRIVATE = 'private'


@dataclasses.dataclass
class ClientMethodParameter:
    name: str
    type: ClientType
    required: bool = True
    description: str | None = None


@dataclasses.dataclass(frozen=True)
class ParameterCheck:
    """A required value checked for ``None`` before any pipeline call.

    Attributes:
        path: Attribute path of the value, e.g. ``('self', '_client', 'endpoint')``.
    """

    path: tuple[str, ...]

    @property
    def label(self) -> str:
        return '.'.join(self.path)


@dataclasses.dataclass
class ProxyMethodParameter:
    """One argument of a proxy method and where it goes on the wire.

    Attributes:
        name: Python name of the argument.
        wire_name: Name in the URL template, query string or header.
        location: Where the value is sent.
        type: Type of the value.
        required: Whether the operation requires it.
        client_property: Name of the client property supplying the value.
        constant: Constant value, for parameters the caller never passes.
        description: Documentation of the parameter.
    """

    name: str
    wire_name: str
    location: ParameterLocation
    type: ClientType
    required: bool = False
    client_property: str | None = None
    constant: object = None
    description: str | None = None

    @property
    def is_constant(self) -> bool:
        return self.constant is not None

    @property
    def is_client_level(self) -> bool:
        return self.client_property is not None


@dataclasses.dataclass
class ProxyMethod:
    name: str
    http_method: str
    url_template: str
    parameters: list[ProxyMethodParameter]
    expected_status: tuple[int, ...]
    response_type: ClientType | None
    description: str | None = None
    error_map: tuple[tuple[int, ImportSymbol], ...] = ()
    default_error: ImportSymbol | None = None
    generate_sync: bool = True
    generate_async: bool = True

    @property
    def sync_name(self) -> str:
        return self.name

    @property
    def async_name(self) -> str:
        return f'{self.name}_async'


@dataclasses.dataclass
class Proxy:
    """The private service class that sends an operation through the pipeline."""

    class_name: str
    client_name: str
    methods: list[ProxyMethod] = dataclasses.field(default_factory=list)


@dataclasses.dataclass
class ClientMethod:
    """One call-shape variant of one operation.

    Attributes:
        operation_name: Python name of the operation.
        variant: The call shape of this method.
        name: Method name, without the private underscore.
        visibility: Whether the method is part of the public surface.
        parameters: Caller-supplied parameters, required ones first.
        value_type: Type of the response body, None for bodiless operations.
        return_type: What the method returns.
        required_checks: Values checked for None before calling the proxy.
        raises: (exception name, description) pairs documented on the method.
        proxy_method: The proxy method reached by this method.
        client_reference: Expression path of the owning service client.
        delegate_name: Name of the with-response method a value variant calls.
    """

    operation_name: str
    variant: MethodVariant
    name: str
    visibility: Visibility
    parameters: list[ClientMethodParameter]
    value_type: ClientType | None
    return_type: ClientType | None
    required_checks: list[ParameterCheck]
    raises: list[tuple[str, str]]
    proxy_method: ProxyMethod
    client_reference: tuple[str, ...] = ('self',)
    description: str | None = None
    delegate_name: str | None = None

    @property
    def python_name(self) -> str:
        if self.visibility is Visibility.PRIVATE:
            return f'_{self.name}'
        return self.name


@dataclasses.dataclass
class ServiceClientProperty:
    """A client-level value exposed as a read-only Python property.

    Mutable properties are constructor arguments; read-only ones carry a
    default value expression set by the constructor.
    """

    name: str
    type: ClientType
    description: str | None = None
    read_only: bool = False
    required: bool = True
    default_value: object = None
    inherited: bool = False


@dataclasses.dataclass
class Constructor:
    """One constructor overload.

    The maximal overload is rendered as ``__init__``; the others become
    classmethods delegating to the next more specific overload.
    """

    name: str
    parameters: list[ClientMethodParameter]

    @property
    def parameter_names(self) -> list[str]:
        return [p.name for p in self.parameters]


@dataclasses.dataclass(eq=False)
class MethodGroupClient:
    class_type: ClassType
    variable_name: str
    service_client_type: ClassType
    proxy: Proxy
    client_methods: list[ClientMethod] = dataclasses.field(default_factory=list)
    description: str | None = None

    @property
    def class_name(self) -> str:
        return self.class_type.name

    @property
    def package(self) -> str:
        return self.class_type.package


@dataclasses.dataclass(eq=False)
class ClientAccessorMethod:
    """Factory on a parent client returning a new sub-client instance.

    Attributes:
        name: Method name, e.g. ``get_widgets``.
        service_client: The parent client the accessor is declared on.
        sub_client: The client the accessor returns.
        parameters: Accessor parameters, the sub-client values the parent lacks.
    """

    name: str
    service_client: 'ServiceClient'
    sub_client: 'ServiceClient'
    parameters: list[ClientMethodParameter]

    @property
    def argument_names(self) -> list[str]:
        """Arguments passed to the sub-client constructor, in order.

        The parent's maximal constructor parameters followed by the
        mutable properties the sub-client declares itself.
        """
        names = list(self.service_client.max_constructor.parameter_names)
        names.extend(p.name for p in self.sub_client.own_mutable_properties)
        return names


@dataclasses.dataclass(eq=False)
class ServiceClient:
    class_type: ClassType
    pipeline_parameter: ClientMethodParameter
    description: str | None = None
    serializer_parameter: ClientMethodParameter | None = None
    properties: list[ServiceClientProperty] = dataclasses.field(default_factory=list)
    constructors: list[Constructor] = dataclasses.field(default_factory=list)
    method_group_clients: list[MethodGroupClient] = dataclasses.field(default_factory=list)
    proxy: Proxy | None = None
    client_methods: list[ClientMethod] = dataclasses.field(default_factory=list)
    accessor_methods: list[ClientAccessorMethod] = dataclasses.field(default_factory=list)
    index: int = -1
    parent_index: int | None = None

    @property
    def class_name(self) -> str:
        return self.class_type.name

    @property
    def package(self) -> str:
        return self.class_type.package

    @property
    def max_constructor(self) -> Constructor:
        # Constructors are ordered from least to most specific.
        return self.constructors[-1]

    @property
    def mutable_properties(self) -> list[ServiceClientProperty]:
        return [p for p in self.properties if not p.read_only]

    @property
    def own_mutable_properties(self) -> list[ServiceClientProperty]:
        return [p for p in self.properties if not p.read_only and not p.inherited]

    @property
    def read_only_properties(self) -> list[ServiceClientProperty]:
        return [p for p in self.properties if p.read_only]

    def property_named(self, name: str) -> ServiceClientProperty | None:
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None


class ClientTree:
    """Flat, index-addressed tree of service clients.

    Children are always added before their parents are finalized; ``roots``
    and ``children`` give the top-down view used for rendering.
    """

    def __init__(self):
        self._nodes: list[ServiceClient] = []

    def add(self, client: ServiceClient) -> int:
        client.index = len(self._nodes)
        self._nodes.append(client)
        return client.index

    def set_parent(self, child_index: int, parent_index: int) -> None:
        self._nodes[child_index].parent_index = parent_index

    def __getitem__(self, index: int) -> ServiceClient:
        return self._nodes[index]

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self):
        return iter(self._nodes)

    def roots(self) -> list[ServiceClient]:
        return [c for c in self._nodes if c.parent_index is None]

    def children(self, index: int) -> list[ServiceClient]:
        return [c for c in self._nodes if c.parent_index == index]

    def parent(self, index: int) -> ServiceClient | None:
        parent_index = self._nodes[index].parent_index
        return None if parent_index is None else self._nodes[parent_index]

    def top_down(self) -> list[ServiceClient]:
        """Clients ordered parents first, siblings in declaration order."""
        ordered: list[ServiceClient] = []
        pending = list(reversed(self.roots()))
        while pending:
            client = pending.pop()
            ordered.append(client)
            pending.extend(reversed(self.children(client.index)))
        return ordered
