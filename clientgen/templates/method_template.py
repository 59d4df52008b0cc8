"""Renderer of client method variants."""

import ast

from clientgen.ast_utils import (
    ImportSymbol,
    _argument,
    _assign,
    _async_func,
    _attr,
    _call,
    _func,
    _name,
    _raise_if_none,
)
from clientgen.clientmodel.clients import ClientMethod, ProxyMethodParameter
from clientgen.config import GeneratorSettings
from clientgen.templates.base import ImportSet, format_docstring, parameter_arguments


def attribute_path(path: tuple[str, ...]) -> ast.expr:
    """``('self', '_client', 'endpoint')`` -> ``self._client.endpoint``."""
    expr: ast.expr = _name(path[0])
    for attr in path[1:]:
        expr = _attr(expr, attr)
    return expr


def _proxy_argument(method: ClientMethod, parameter: ProxyMethodParameter) -> ast.expr:
    if parameter.is_client_level and not parameter.is_constant:
        return attribute_path(method.client_reference + (parameter.client_property,))
    return _name(parameter.name)


def _with_response_body(method: ClientMethod) -> list[ast.stmt]:
    body: list[ast.stmt] = [
        _raise_if_none(attribute_path(check.path), check.label)
        for check in method.required_checks
    ]

    proxy_method = method.proxy_method
    for parameter in proxy_method.parameters:
        if parameter.is_constant:
            body.append(_assign(_name(parameter.name), ast.Constant(parameter.constant)))

    proxy_name = proxy_method.async_name if method.variant.is_async else proxy_method.sync_name
    call: ast.expr = _call(
        _attr(_attr('self', '_service'), proxy_name),
        keywords=[
            ast.keyword(arg=p.name, value=_proxy_argument(method, p))
            for p in proxy_method.parameters
        ]
        + [ast.keyword(arg=None, value=_name('kwargs'))],
    )
    if method.variant.is_async:
        call = ast.Await(value=call)
    body.append(ast.Return(value=call))
    return body


def _value_body(method: ClientMethod) -> list[ast.stmt]:
    call: ast.expr = _call(
        _attr('self', method.delegate_name),
        args=[_name(p.name) for p in method.parameters],
    )
    if method.variant.is_async:
        call = ast.Await(value=call)
    if method.value_type is None:
        return [ast.Expr(value=call)]
    return [ast.Return(value=_attr(call, 'value'))]


def build_client_method(
    method: ClientMethod, settings: GeneratorSettings, imports: ImportSet
) -> ast.FunctionDef | ast.AsyncFunctionDef:
    """Build one method variant.

    With-response variants check required values, bind constants and call
    the proxy; value variants call the matching with-response variant and
    unwrap its value.
    """
    args, defaults = parameter_arguments(method.parameters, imports)
    args = [_argument('self'), *args]

    kwargs = None
    if method.variant.is_with_response:
        imports.add(ImportSymbol('typing', 'Any'))
        kwargs = _argument('kwargs', _name('Any'))
        body = _with_response_body(method)
        returns_doc = 'The response, holding the deserialized body as its value.'
    else:
        body = _value_body(method)
        returns_doc = 'The deserialized response body.' if method.value_type is not None else None

    if method.return_type is None:
        returns = ast.Constant(None)
    else:
        imports.annotation(method.return_type)
        returns = method.return_type.annotation(imports.current_module)

    docstring = format_docstring(
        method.description,
        args=[(p.name, p.description) for p in method.parameters],
        returns=returns_doc,
        raises=method.raises,
        indent=8,
    )
    if docstring is not None:
        body.insert(0, docstring)

    factory = _async_func if method.variant.is_async else _func
    return factory(
        method.python_name,
        args,
        body,
        returns=returns,
        kwargs=kwargs,
        defaults=defaults,
    )
