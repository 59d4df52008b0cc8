"""Construction of the client tree from the clients of a code model."""

import dataclasses
import logging

from clientgen.clientmodel.clients import (
    ClientAccessorMethod,
    ClientMethodParameter,
    ClientTree,
    Constructor,
    MethodGroupClient,
    Proxy,
    ServiceClient,
    ServiceClientProperty,
)
from clientgen.clientmodel.runtime import runtime_symbols
from clientgen.clientmodel.types import ClassType, GenericType, PrimitiveType
from clientgen.codemodel.models import CodeModel, OperationGroup, RawClient, RawParameter
from clientgen.mapper.method_mapper import MethodMapper, get_host_parameter_names
from clientgen.mapper.response_mapper import ResponseMapper
from clientgen.mapper.type_mapper import TypeMapper
from clientgen.naming import to_pascal_case, to_snake_case

logger = logging.getLogger(__name__)

# Host of root clients that declare none.
DEFAULT_HOST_TEMPLATE = '{endpoint}'

# Attributes every generated service client defines besides its properties.
RESERVED_CLIENT_ATTRIBUTES = frozenset(
    {'http_pipeline', 'pipeline', 'serializer', 'service', 'default_poll_interval', 'environment'}
)


@dataclasses.dataclass
class _Frame:
    raw: RawClient
    host_template: str
    properties: list[ServiceClientProperty]
    parameters: list[RawParameter]
    parent: '_Frame | None' = None
    children: list[int] = dataclasses.field(default_factory=list)
    expanded: bool = False


class ClientModelBuilder:
    """Builds the ``ClientTree`` of a code model.

    Sub-clients are built before their parents with an explicit stack, so
    a parent's accessor methods can refer to finished children and deep
    nesting never recurses.

    Example:
        >>> builder = ClientModelBuilder(type_mapper)
        >>> tree = builder.build(code_model)
        >>> [client.class_name for client in tree.top_down()]
        ['ComputeClient', 'WidgetsClient']
    """

    def __init__(
        self,
        type_mapper: TypeMapper,
        response_mapper: ResponseMapper | None = None,
        method_mapper: MethodMapper | None = None,
    ):
        self.type_mapper = type_mapper
        self.settings = type_mapper.settings
        self.runtime = runtime_symbols(self.settings.pipeline_generation)
        self.response_mapper = response_mapper or ResponseMapper(type_mapper)
        self.method_mapper = method_mapper or MethodMapper(type_mapper, self.response_mapper)

    def build(self, code_model: CodeModel) -> ClientTree:
        tree = ClientTree()
        stack = [self._new_frame(raw, None) for raw in reversed(code_model.clients)]

        while stack:
            frame = stack[-1]
            if not frame.expanded:
                frame.expanded = True
                for sub_client in reversed(frame.raw.sub_clients):
                    stack.append(self._new_frame(sub_client, frame))
                continue

            stack.pop()
            client = self.build_service_client(
                frame.raw, frame.host_template, frame.properties, frame.parameters
            )
            index = tree.add(client)
            for child_index in frame.children:
                tree.set_parent(child_index, index)
                client.accessor_methods.append(self.build_accessor(client, tree[child_index]))
            if frame.parent is not None:
                frame.parent.children.append(index)

        logger.info(f'Built {len(tree)} service clients')
        return tree

    def _new_frame(self, raw: RawClient, parent: _Frame | None) -> _Frame:
        properties = (
            [dataclasses.replace(p, inherited=True) for p in parent.properties]
            if parent is not None
            else []
        )
        parameters = list(parent.parameters) if parent is not None else []
        names = {p.name for p in properties}

        if raw.host_template is not None:
            host_template = raw.host_template
        elif parent is not None:
            host_template = parent.host_template
        else:
            host_template = DEFAULT_HOST_TEMPLATE

        declared = {to_snake_case(p.name) for p in raw.parameters}
        for host_name in get_host_parameter_names(host_template):
            name = to_snake_case(host_name)
            if name not in names and name not in declared:
                names.add(name)
                properties.append(
                    ServiceClientProperty(
                        name=name,
                        type=PrimitiveType.STRING,
                        description=f'Server parameter {host_name}.',
                    )
                )

        operation_parameters = [
            p
            for group in raw.operation_groups
            for operation in group.operations
            for p in operation.parameters
            if p.implementation == 'client'
        ]
        for raw_parameter in [*raw.parameters, *operation_parameters]:
            name = to_snake_case(raw_parameter.name)
            if name in names:
                continue
            names.add(name)
            parameters.append(raw_parameter)
            properties.append(self._map_property(raw_parameter, raw.name))

        return _Frame(
            raw=raw,
            host_template=host_template,
            properties=properties,
            parameters=parameters,
            parent=parent,
        )

    def _map_property(self, raw: RawParameter, client_name: str) -> ServiceClientProperty:
        return ServiceClientProperty(
            name=to_snake_case(raw.name),
            type=self.type_mapper.resolve_reference(
                raw.schema_, referrer=f'{client_name}.{raw.name}'
            ),
            description=raw.description,
            read_only=raw.is_constant,
            required=raw.required or raw.is_constant,
            default_value=raw.constant,
        )

    def get_client_class_name(self, raw: RawClient) -> str:
        name = to_pascal_case(raw.name)
        return name if name.endswith('Client') else f'{name}Client'

    def build_service_client(
        self,
        raw: RawClient,
        host_template: str,
        properties: list[ServiceClientProperty],
        parameters: list[RawParameter],
    ) -> ServiceClient:
        registry = self.type_mapper.registry
        package = self.settings.get_package('')
        class_type = ClassType(
            package=package,
            name=registry.unique_name(package, self.get_client_class_name(raw)),
            description=raw.description,
        )
        registry.reserve(class_type)

        client = ServiceClient(
            class_type=class_type,
            description=raw.description or f'Initializes a new instance of {class_type.name}.',
            pipeline_parameter=ClientMethodParameter(
                'pipeline',
                GenericType(self.runtime.pipeline.name, self.runtime.pipeline.module),
                description='The HTTP pipeline to send requests through.',
            ),
            properties=properties,
        )
        if self.settings.is_fluent or self.settings.is_legacy_pipeline:
            client.serializer_parameter = ClientMethodParameter(
                'serializer',
                GenericType(self.runtime.serializer.name, self.runtime.serializer.module),
                description='The serializer to serialize an object into a string.',
            )
        client.constructors = self.build_constructors(client)

        for group in raw.operation_groups:
            if group.is_root:
                self._add_root_operations(client, group, host_template, parameters)

        taken = {p.name for p in properties} | RESERVED_CLIENT_ATTRIBUTES
        taken.update(m.python_name for m in client.client_methods)
        for group in raw.operation_groups:
            if not group.is_root:
                method_group = self.build_method_group(
                    client, group, host_template, parameters, taken
                )
                taken.add(method_group.variable_name)
                client.method_group_clients.append(method_group)

        logger.debug(
            f'Built {class_type.name}: {len(client.method_group_clients)} method groups, '
            f'{len(client.client_methods)} root methods'
        )
        return client

    def build_constructors(self, client: ServiceClient) -> list[Constructor]:
        """Constructors of a client, ordered from least to most specific."""
        mutable = [
            ClientMethodParameter(p.name, p.type, p.required, p.description)
            for p in client.mutable_properties
        ]
        pipeline = client.pipeline_parameter
        serializer = client.serializer_parameter

        if self.settings.is_fluent:
            return [
                Constructor(
                    '__init__',
                    [
                        pipeline,
                        serializer,
                        ClientMethodParameter(
                            'default_poll_interval',
                            PrimitiveType.TIMEDELTA,
                            description='The default poll interval for long-running operations.',
                        ),
                        ClientMethodParameter(
                            'environment',
                            GenericType(
                                self.runtime.environment.name, self.runtime.environment.module
                            ),
                            description='The Azure environment.',
                        ),
                        *mutable,
                    ],
                )
            ]

        if self.settings.is_legacy_pipeline:
            return [
                Constructor('create', list(mutable)),
                Constructor('from_pipeline', [pipeline, *mutable]),
                Constructor('__init__', [pipeline, serializer, *mutable]),
            ]

        return [Constructor('__init__', [pipeline, *mutable])]

    def build_method_group(
        self,
        client: ServiceClient,
        group: OperationGroup,
        host_template: str,
        parameters: list[RawParameter],
        taken: set[str],
    ) -> MethodGroupClient:
        registry = self.type_mapper.registry
        group_name = to_pascal_case(group.name)
        package = self.settings.implementation_package
        class_type = ClassType(
            package=package,
            name=registry.unique_name(package, f'{group_name}Operations'),
            description=group.description,
        )
        registry.reserve(class_type)

        variable_name = to_snake_case(group.name)
        if variable_name in taken:
            variable_name = f'{variable_name}_operations'

        proxy = Proxy(class_name=f'_{group_name}Service', client_name=class_type.name)
        method_group = MethodGroupClient(
            class_type=class_type,
            variable_name=variable_name,
            service_client_type=client.class_type,
            proxy=proxy,
            description=group.description
            or f'Provides access to all the operations defined in {group_name}.',
        )
        for operation in group.operations:
            proxy_method, methods = self.method_mapper.map_operation(
                operation, host_template, parameters, ('self', '_client')
            )
            proxy.methods.append(proxy_method)
            method_group.client_methods.extend(methods)
        return method_group

    def _add_root_operations(
        self,
        client: ServiceClient,
        group: OperationGroup,
        host_template: str,
        parameters: list[RawParameter],
    ) -> None:
        if client.proxy is None:
            client.proxy = Proxy(
                class_name=f'_{client.class_name}Service', client_name=client.class_name
            )
        for operation in group.operations:
            proxy_method, methods = self.method_mapper.map_operation(
                operation, host_template, parameters, ('self',)
            )
            client.proxy.methods.append(proxy_method)
            client.client_methods.extend(methods)

    def build_accessor(self, parent: ServiceClient, sub_client: ServiceClient) -> ClientAccessorMethod:
        """Accessor on ``parent`` returning a new ``sub_client``.

        Its parameters are the mutable properties the sub-client declares
        itself; everything else is forwarded from the parent.
        """
        name = sub_client.class_name
        if name.endswith('Client') and name != 'Client':
            name = name[: -len('Client')]
        return ClientAccessorMethod(
            name=f'get_{to_snake_case(name)}',
            service_client=parent,
            sub_client=sub_client,
            parameters=[
                ClientMethodParameter(p.name, p.type, p.required, p.description)
                for p in sub_client.own_mutable_properties
            ],
        )
