"""Renderer of service client classes.

Class members are emitted in a fixed order: constructors, properties,
method groups, root operations, extra methods, the extra block, accessor
methods and finally the logger.
"""

import ast
from collections.abc import Sequence

from clientgen.ast_utils import (
    _argument,
    _assign,
    _attr,
    _call,
    _func,
    _name,
    _raise_if_none,
)
from clientgen.clientmodel.clients import (
    ClientAccessorMethod,
    ClientMethodParameter,
    Constructor,
    ServiceClient,
)
from clientgen.clientmodel.runtime import RuntimeSymbols, runtime_symbols
from clientgen.config import GeneratorSettings
from clientgen.templates.base import (
    ExtraBlock,
    ExtraMethod,
    ImportSet,
    RenderResult,
    apply_extensions,
    class_def,
    format_docstring,
    logger_block,
    parameter_arguments,
    unparse,
    with_docstring,
)
from clientgen.templates.method_template import build_client_method
from clientgen.templates.proxy_template import build_proxy_class


def _default_argument(
    parameter_name: str, runtime: RuntimeSymbols, imports: ImportSet
) -> ast.expr:
    # Values a less specific constructor synthesizes for the next one.
    if parameter_name == 'pipeline':
        imports.add(
            runtime.pipeline, runtime.transport, runtime.user_agent_policy, runtime.retry_policy
        )
        return _call(
            _name(runtime.pipeline.name),
            keywords=[
                ast.keyword(arg='transport', value=_call(_name(runtime.transport.name))),
                ast.keyword(
                    arg='policies',
                    value=ast.List(
                        elts=[
                            _call(_name(runtime.user_agent_policy.name)),
                            _call(_name(runtime.retry_policy.name)),
                        ],
                        ctx=ast.Load(),
                    ),
                ),
            ],
        )
    if parameter_name == 'serializer':
        imports.add(runtime.serializer)
        return _call(_name(runtime.serializer.name))
    return ast.Constant(None)


def _init(client: ServiceClient, imports: ImportSet) -> ast.FunctionDef:
    constructor = client.max_constructor
    args, defaults = parameter_arguments(constructor.parameters, imports)

    body: list[ast.stmt] = [
        _assign(_attr('self', f'_{p.name}'), _name(p.name)) for p in constructor.parameters
    ]
    for prop in client.read_only_properties:
        body.append(_assign(_attr('self', f'_{prop.name}'), ast.Constant(prop.default_value)))
    for method_group in client.method_group_clients:
        imports.add(*method_group.class_type.imports(imports.current_module))
        body.append(
            _assign(
                _attr('self', f'_{method_group.variable_name}'),
                _call(_name(method_group.class_name), [_name('self')]),
            )
        )
    if client.proxy is not None:
        body.append(
            _assign(
                _attr('self', '_service'),
                _call(_name(client.proxy.class_name), [_attr('self', '_pipeline')]),
            )
        )

    docstring = format_docstring(
        f'Initializes an instance of {client.class_name}.',
        args=[(p.name, p.description) for p in constructor.parameters],
        indent=8,
    )
    return _func(
        '__init__',
        [_argument('self'), *args],
        with_docstring(docstring, body),
        defaults=defaults,
    )


def _delegating_constructor(
    client: ServiceClient,
    constructor: Constructor,
    target: Constructor,
    runtime: RuntimeSymbols,
    imports: ImportSet,
) -> ast.FunctionDef:
    args, defaults = parameter_arguments(constructor.parameters, imports)
    own = set(constructor.parameter_names)
    arguments = [
        _name(name) if name in own else _default_argument(name, runtime, imports)
        for name in target.parameter_names
    ]
    function = _name('cls') if target.name == '__init__' else _attr('cls', target.name)

    docstring = format_docstring(
        f'Creates an instance of {client.class_name}.',
        args=[(p.name, p.description) for p in constructor.parameters],
        indent=8,
    )
    return _func(
        constructor.name,
        [_argument('cls'), *args],
        with_docstring(docstring, [ast.Return(value=_call(function, arguments))]),
        returns=_name(client.class_name),
        defaults=defaults,
        decorators=[_name('classmethod')],
    )


def _getter(
    name: str,
    attribute: str,
    annotation: ast.expr,
    description: str | None,
) -> ast.FunctionDef:
    return _func(
        name,
        [_argument('self')],
        with_docstring(
            format_docstring(description, indent=8),
            [ast.Return(value=_attr('self', attribute))],
        ),
        returns=annotation,
        decorators=[_name('property')],
    )


def _properties(client: ServiceClient, imports: ImportSet) -> list[ast.stmt]:
    getters: list[ast.stmt] = []
    for prop in client.properties:
        imports.annotation(prop.type)
        getters.append(
            _getter(
                prop.name,
                f'_{prop.name}',
                prop.type.annotation(imports.current_module),
                prop.description,
            )
        )

    base_parameters: list[ClientMethodParameter] = [
        p
        for p in client.max_constructor.parameters
        if not any(p.name == prop.name for prop in client.mutable_properties)
    ]
    for parameter in base_parameters:
        imports.annotation(parameter.type)
        getters.append(
            _getter(
                'http_pipeline' if parameter.name == 'pipeline' else parameter.name,
                f'_{parameter.name}',
                parameter.type.annotation(imports.current_module),
                parameter.description,
            )
        )
    return getters


def _method_groups(client: ServiceClient, imports: ImportSet) -> list[ast.stmt]:
    getters: list[ast.stmt] = []
    for method_group in client.method_group_clients:
        getters.append(
            _getter(
                method_group.variable_name,
                f'_{method_group.variable_name}',
                _name(method_group.class_name),
                f'The {method_group.class_name} object to access its operations.',
            )
        )
    return getters


def build_accessor(accessor: ClientAccessorMethod, imports: ImportSet) -> ast.FunctionDef:
    """``get_<sub client>`` returning a new sub-client.

    Arguments come from the accessor's own parameters when it has one of
    that name, else from the parent's attribute.
    """
    sub_client = accessor.sub_client
    imports.add(*sub_client.class_type.imports(imports.current_module))

    args, defaults = parameter_arguments(accessor.parameters, imports)
    own = {p.name for p in accessor.parameters}
    arguments = [
        _name(name) if name in own else _attr('self', f'_{name}')
        for name in accessor.argument_names
    ]

    body: list[ast.stmt] = [
        _raise_if_none(_name(p.name), p.name) for p in accessor.parameters if p.required
    ]
    body.append(ast.Return(value=_call(_name(sub_client.class_name), arguments)))

    docstring = format_docstring(
        f'Gets an instance of {sub_client.class_name} class.',
        args=[(p.name, p.description) for p in accessor.parameters],
        returns=f'An instance of {sub_client.class_name} class.',
        raises=[('ValueError', 'If a required parameter is None.')] if body[:-1] else (),
        indent=8,
    )
    return _func(
        accessor.name,
        [_argument('self'), *args],
        with_docstring(docstring, body),
        returns=_name(sub_client.class_name),
        defaults=defaults,
    )


def render_service_client(
    client: ServiceClient,
    settings: GeneratorSettings,
    extra_methods: Sequence[ExtraMethod] = (),
    extra_block: ExtraBlock | None = None,
) -> RenderResult:
    runtime = runtime_symbols(settings.pipeline_generation)
    imports = ImportSet(client.class_type.module)

    statements: list[ast.stmt] = []
    if client.proxy is not None:
        statements.append(build_proxy_class(client.proxy, settings, imports))

    body: list[ast.stmt] = with_docstring(format_docstring(client.description), [])

    body.append(_init(client, imports))
    for constructor in reversed(client.constructors[:-1]):
        target = client.constructors[client.constructors.index(constructor) + 1]
        body.append(_delegating_constructor(client, constructor, target, runtime, imports))

    body.extend(_properties(client, imports))
    body.extend(_method_groups(client, imports))
    for method in client.client_methods:
        body.append(build_client_method(method, settings, imports))
    body.extend(apply_extensions(client, settings, imports, extra_methods, extra_block))
    for accessor in client.accessor_methods:
        body.append(build_accessor(accessor, imports))
    body.extend(logger_block(settings, imports))

    statements.append(class_def(client.class_name, [], body))
    return RenderResult(unparse(statements), imports.frozen())
