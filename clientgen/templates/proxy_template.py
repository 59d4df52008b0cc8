"""Renderer of proxy service classes.

A proxy service class holds the pipeline of a client and turns each
operation into one ``send``/``send_async`` call describing the request.
"""

import ast
from collections.abc import Sequence

from clientgen.ast_utils import (
    ImportSymbol,
    _argument,
    _assign,
    _async_func,
    _attr,
    _call,
    _docstring,
    _func,
    _name,
    _subscript,
)
from clientgen.clientmodel.clients import Proxy, ProxyMethod
from clientgen.clientmodel.runtime import runtime_symbols
from clientgen.clientmodel.types import GenericType, PrimitiveType
from clientgen.codemodel.models import ParameterLocation
from clientgen.config import GeneratorSettings
from clientgen.templates.base import (
    ExtraBlock,
    ExtraMethod,
    ImportSet,
    RenderResult,
    apply_extensions,
    class_def,
    unparse,
)

_PARAMETER_GROUPS = (
    ('path_params', (ParameterLocation.URI, ParameterLocation.PATH)),
    ('query_params', (ParameterLocation.QUERY,)),
    ('header_params', (ParameterLocation.HEADER,)),
)


def _symbol_name(symbol: ImportSymbol, imports: ImportSet) -> ast.Name:
    imports.add(symbol)
    return _name(symbol.name)


def _send_keywords(
    method: ProxyMethod, settings: GeneratorSettings, imports: ImportSet
) -> list[ast.keyword]:
    keywords = [
        ast.keyword(arg='method', value=ast.Constant(method.http_method)),
        ast.keyword(arg='url_template', value=ast.Constant(method.url_template)),
    ]

    for keyword_name, locations in _PARAMETER_GROUPS:
        parameters = [p for p in method.parameters if p.location in locations]
        if parameters:
            keywords.append(
                ast.keyword(
                    arg=keyword_name,
                    value=ast.Dict(
                        keys=[ast.Constant(p.wire_name) for p in parameters],
                        values=[_name(p.name) for p in parameters],
                    ),
                )
            )

    body = next((p for p in method.parameters if p.location is ParameterLocation.BODY), None)
    if body is not None:
        keywords.append(ast.keyword(arg='body', value=_name(body.name)))

    keywords.append(
        ast.keyword(
            arg='expected_status',
            value=ast.Tuple(
                elts=[ast.Constant(code) for code in method.expected_status], ctx=ast.Load()
            ),
        )
    )

    if method.response_type is None:
        response_type = ast.Constant(None)
    else:
        imports.runtime(method.response_type)
        response_type = method.response_type.annotation(imports.current_module)
    keywords.append(ast.keyword(arg='response_type', value=response_type))

    if method.error_map:
        keywords.append(
            ast.keyword(
                arg='error_map',
                value=ast.Dict(
                    keys=[ast.Constant(code) for code, _ in method.error_map],
                    values=[_symbol_name(error, imports) for _, error in method.error_map],
                ),
            )
        )
    if method.default_error is not None:
        keywords.append(
            ast.keyword(arg='default_error', value=_symbol_name(method.default_error, imports))
        )

    keywords.append(ast.keyword(arg=None, value=_name('kwargs')))
    return keywords


def build_proxy_methods(
    method: ProxyMethod, settings: GeneratorSettings, imports: ImportSet
) -> list[ast.stmt]:
    runtime = runtime_symbols(settings.pipeline_generation)
    imports.add(ImportSymbol('typing', 'Any'))

    args = [_argument('self')]
    for parameter in method.parameters:
        imports.annotation(parameter.type)
        annotation = parameter.type.annotation(imports.current_module)
        if not parameter.required:
            annotation = ast.BinOp(left=annotation, op=ast.BitOr(), right=ast.Constant(None))
        args.append(_argument(parameter.name, annotation))
    kwargs = _argument('kwargs', _name('Any'))

    response = GenericType(
        runtime.response.name,
        runtime.response.module,
        (method.response_type or PrimitiveType.NONE,),
    )
    imports.annotation(response)
    returns = response.annotation(imports.current_module)

    functions: list[ast.stmt] = []
    if method.generate_async:
        send = _call(
            _attr(_attr('self', '_pipeline'), 'send_async'),
            keywords=_send_keywords(method, settings, imports),
        )
        functions.append(
            _async_func(
                method.async_name,
                args,
                [ast.Return(value=ast.Await(value=send))],
                returns=returns,
                kwargs=kwargs,
            )
        )
    if method.generate_sync:
        send = _call(
            _attr(_attr('self', '_pipeline'), 'send'),
            keywords=_send_keywords(method, settings, imports),
        )
        functions.append(
            _func(method.sync_name, args, [ast.Return(value=send)], returns=returns, kwargs=kwargs)
        )
    return functions


def build_proxy_class(
    proxy: Proxy, settings: GeneratorSettings, imports: ImportSet
) -> ast.ClassDef:
    runtime = runtime_symbols(settings.pipeline_generation)
    imports.add(runtime.pipeline)

    body: list[ast.stmt] = [
        _docstring(
            f'The interface defining all the services for {proxy.client_name} '
            'to be used to perform REST calls.'
        ),
        _func(
            '__init__',
            [_argument('self'), _argument('pipeline', _name(runtime.pipeline.name))],
            [_assign(_attr('self', '_pipeline'), _name('pipeline'))],
        ),
    ]
    for method in proxy.methods:
        body.extend(build_proxy_methods(method, settings, imports))
    return class_def(proxy.class_name, [], body)


def render_proxy(
    proxy: Proxy,
    settings: GeneratorSettings,
    current_module: str,
    extra_methods: Sequence[ExtraMethod] = (),
    extra_block: ExtraBlock | None = None,
) -> RenderResult:
    imports = ImportSet(current_module)
    node = build_proxy_class(proxy, settings, imports)
    node.body.extend(apply_extensions(proxy, settings, imports, extra_methods, extra_block))
    return RenderResult(unparse([node]), imports.frozen())
