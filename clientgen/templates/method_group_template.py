"""Renderer of method group classes."""

import ast
from collections.abc import Sequence

from clientgen.ast_utils import _argument, _assign, _attr, _call, _func, _name
from clientgen.clientmodel.clients import MethodGroupClient
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
    unparse,
    with_docstring,
)
from clientgen.templates.method_template import build_client_method
from clientgen.templates.proxy_template import build_proxy_class


def render_method_group(
    method_group: MethodGroupClient,
    settings: GeneratorSettings,
    extra_methods: Sequence[ExtraMethod] = (),
    extra_block: ExtraBlock | None = None,
) -> RenderResult:
    imports = ImportSet(method_group.class_type.module)
    proxy = build_proxy_class(method_group.proxy, settings, imports)

    client_type = method_group.service_client_type
    imports.annotation(client_type)
    constructor = _func(
        '__init__',
        [_argument('self'), _argument('client', client_type.annotation(imports.current_module))],
        with_docstring(
            format_docstring(
                f'Initializes an instance of {method_group.class_name}.',
                args=[('client', 'The service client containing this operation class.')],
                indent=8,
            ),
            [
                _assign(
                    _attr('self', '_service'),
                    _call(_name(method_group.proxy.class_name), [_attr('client', 'http_pipeline')]),
                ),
                _assign(_attr('self', '_client'), _name('client')),
            ],
        ),
    )

    body: list[ast.stmt] = with_docstring(
        format_docstring(method_group.description), [constructor]
    )
    for method in method_group.client_methods:
        body.append(build_client_method(method, settings, imports))
    body.extend(apply_extensions(method_group, settings, imports, extra_methods, extra_block))
    body.extend(logger_block(settings, imports))

    node = class_def(method_group.class_name, [], body)
    return RenderResult(unparse([proxy, node]), imports.frozen())
