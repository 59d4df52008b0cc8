"""Renderers turning client-model nodes into Python source.

Every renderer is a pure function of ``(node, settings)`` returning a
``RenderResult``. ``TemplateEngine`` dispatches a node to its renderer.
"""

from collections.abc import Sequence

from clientgen.clientmodel.clients import MethodGroupClient, Proxy, ServiceClient
from clientgen.clientmodel.models import ClientModel
from clientgen.clientmodel.types import EnumType
from clientgen.config import GeneratorSettings
from clientgen.exceptions import RenderError
from clientgen.naming import module_name_for_class
from clientgen.templates.base import ExtraBlock, ExtraMethod, RenderResult
from clientgen.templates.enum_template import render_enum
from clientgen.templates.method_group_template import render_method_group
from clientgen.templates.model_template import render_model
from clientgen.templates.package_template import PackageInfo, render_package
from clientgen.templates.proxy_template import render_proxy
from clientgen.templates.service_client_template import render_service_client

__all__ = [
    'ExtraBlock',
    'ExtraMethod',
    'PackageInfo',
    'RenderResult',
    'TemplateEngine',
    'node_name',
]


def node_name(node: object) -> str:
    if isinstance(node, (ServiceClient, MethodGroupClient)):
        return node.class_name
    if isinstance(node, ClientModel):
        return node.name
    if isinstance(node, EnumType):
        return node.name
    if isinstance(node, Proxy):
        return node.class_name
    if isinstance(node, PackageInfo):
        return node.name
    return type(node).__name__


class TemplateEngine:
    """Dispatches client-model nodes to their renderer.

    Example:
        >>> engine = TemplateEngine()
        >>> result = engine.render(enum_type, settings)
        >>> print(result.text)
    """

    def render(
        self,
        node: object,
        settings: GeneratorSettings,
        extra_methods: Sequence[ExtraMethod] = (),
        extra_block: ExtraBlock | None = None,
    ) -> RenderResult:
        """Render one node.

        Raises:
            RenderError: If the node kind is unknown or its renderer fails.
        """
        try:
            if isinstance(node, ServiceClient):
                return render_service_client(node, settings, extra_methods, extra_block)
            if isinstance(node, MethodGroupClient):
                return render_method_group(node, settings, extra_methods, extra_block)
            if isinstance(node, EnumType):
                return render_enum(node, settings, extra_methods, extra_block)
            if isinstance(node, ClientModel):
                return render_model(node, settings, extra_methods, extra_block)
            if isinstance(node, Proxy):
                module = f'{settings.implementation_package}.{module_name_for_class(node.client_name)}'
                return render_proxy(node, settings, module, extra_methods, extra_block)
            if isinstance(node, PackageInfo):
                return render_package(node, settings, extra_block)
        except RenderError:
            raise
        except Exception as e:
            raise RenderError(node_name(node), cause=e) from e

        raise RenderError(
            node_name(node), cause=TypeError(f'No renderer for {type(node).__name__}')
        )
