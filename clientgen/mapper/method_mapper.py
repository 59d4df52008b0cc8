"""Expansion of operations into proxy methods and client method variants."""

import logging
import re

from clientgen.clientmodel.clients import (
    ClientMethod,
    ClientMethodParameter,
    MethodVariant,
    ParameterCheck,
    ProxyMethod,
    ProxyMethodParameter,
    Visibility,
)
from clientgen.clientmodel.runtime import runtime_symbols
from clientgen.clientmodel.types import ClientType, GenericType, PrimitiveType
from clientgen.codemodel.models import Operation, ParameterLocation, RawParameter
from clientgen.mapper.response_mapper import ResponseMapper
from clientgen.mapper.type_mapper import TypeMapper
from clientgen.naming import to_snake_case

logger = logging.getLogger(__name__)

_HOST_PARAMETER = re.compile(r'\{([^}]+)\}')

_VARIANT_ORDER = (
    MethodVariant.ASYNC_WITH_RESPONSE,
    MethodVariant.ASYNC_VALUE,
    MethodVariant.SYNC_WITH_RESPONSE,
    MethodVariant.SYNC_VALUE,
)


def get_method_name(operation_name: str, variant: MethodVariant) -> str:
    """Python name of one variant of an operation, without visibility prefix."""
    return {
        MethodVariant.ASYNC_WITH_RESPONSE: f'{operation_name}_with_response_async',
        MethodVariant.ASYNC_VALUE: f'{operation_name}_async',
        MethodVariant.SYNC_WITH_RESPONSE: f'{operation_name}_with_response',
        MethodVariant.SYNC_VALUE: operation_name,
    }[variant]


def get_host_parameter_names(host_template: str) -> list[str]:
    return _HOST_PARAMETER.findall(host_template)


class MethodMapper:
    """Builds the proxy method and the client methods of an operation.

    Example:
        >>> mapper = MethodMapper(type_mapper, response_mapper)
        >>> proxy_method, methods = mapper.map_operation(
        ...     operation, '{endpoint}', client_parameters, ('self', '_client')
        ... )
        >>> [m.python_name for m in methods]
        ['patch_with_response_async', 'patch_async', 'patch_with_response', 'patch']
    """

    def __init__(self, type_mapper: TypeMapper, response_mapper: ResponseMapper):
        self.type_mapper = type_mapper
        self.response_mapper = response_mapper
        self.settings = type_mapper.settings
        self.runtime = runtime_symbols(self.settings.pipeline_generation)

    def get_variants(self) -> list[MethodVariant]:
        variants = []
        for variant in _VARIANT_ORDER:
            if variant.is_async and not self.settings.generate_async_methods:
                continue
            if not variant.is_async and not self.settings.generate_sync_methods:
                continue
            variants.append(variant)
        return variants

    def get_visibility(self, variant: MethodVariant) -> Visibility:
        if self.settings.is_fluent and variant is MethodVariant.ASYNC_WITH_RESPONSE:
            return Visibility.PRIVATE
        return Visibility.PUBLIC

    def map_operation(
        self,
        operation: Operation,
        host_template: str,
        client_parameters: list[RawParameter],
        client_reference: tuple[str, ...],
    ) -> tuple[ProxyMethod, list[ClientMethod]]:
        """Map one operation.

        Args:
            operation: The operation to map.
            host_template: Host part of the URL, e.g. ``{endpoint}``.
            client_parameters: Client-level parameters of the owning client.
            client_reference: Attribute path from a method to the owning
                service client, ``('self',)`` or ``('self', '_client')``.
        """
        name = to_snake_case(operation.name)
        proxy_method = self.map_proxy_method(operation, host_template, client_parameters)
        value_type = proxy_method.response_type

        parameters = [
            ClientMethodParameter(
                name=p.name, type=p.type, required=p.required, description=p.description
            )
            for p in proxy_method.parameters
            if not p.is_client_level and not p.is_constant
        ]
        # Required parameters come first so optional ones can default to None.
        parameters.sort(key=lambda p: not p.required)

        checks = self._get_required_checks(proxy_method, client_reference)

        methods = []
        for variant in self.get_variants():
            method_name = get_method_name(name, variant)
            delegate_name = None
            if not variant.is_with_response:
                with_response = variant.with_response_variant
                delegate_name = get_method_name(name, with_response)
                if self.get_visibility(with_response) is Visibility.PRIVATE:
                    delegate_name = f'_{delegate_name}'

            methods.append(
                ClientMethod(
                    operation_name=name,
                    variant=variant,
                    name=method_name,
                    visibility=self.get_visibility(variant),
                    parameters=parameters,
                    value_type=value_type,
                    return_type=self._get_return_type(variant, value_type),
                    required_checks=checks if variant.is_with_response else [],
                    raises=self._get_raises(),
                    proxy_method=proxy_method,
                    client_reference=client_reference,
                    description=operation.description or operation.summary,
                    delegate_name=delegate_name,
                )
            )

        logger.debug(f'Mapped operation {operation.name} into {len(methods)} methods')
        return proxy_method, methods

    def map_proxy_method(
        self,
        operation: Operation,
        host_template: str,
        client_parameters: list[RawParameter],
    ) -> ProxyMethod:
        parameters: list[ProxyMethodParameter] = []
        seen: set[str] = set()

        by_wire_name = {p.wire_name: p for p in client_parameters}
        for host_name in get_host_parameter_names(host_template):
            raw = by_wire_name.get(host_name)
            if raw is None:
                parameters.append(
                    ProxyMethodParameter(
                        name=to_snake_case(host_name),
                        wire_name=host_name,
                        location=ParameterLocation.URI,
                        type=PrimitiveType.STRING,
                        required=True,
                        client_property=to_snake_case(host_name),
                    )
                )
            else:
                parameters.append(
                    self._map_parameter(raw, operation, location=ParameterLocation.URI, client=True)
                )
            seen.add(to_snake_case(host_name))

        for raw in operation.parameters:
            name = to_snake_case(raw.name)
            if name in seen:
                continue
            seen.add(name)
            parameters.append(
                self._map_parameter(raw, operation, client=raw.implementation == 'client')
            )

        status_codes = sorted({code for r in operation.responses for code in r.status_codes})
        if self.settings.is_fluent:
            default_error = self.runtime.management_error
        else:
            default_error = self.runtime.http_response_error

        return ProxyMethod(
            name=to_snake_case(operation.name),
            http_method=operation.method.upper(),
            url_template=f'{host_template}{operation.path}',
            parameters=parameters,
            expected_status=tuple(status_codes) or (200,),
            response_type=self.response_mapper.get_expected_response_body_type(operation),
            description=operation.summary,
            error_map=() if self.settings.is_fluent else self.runtime.error_map,
            default_error=default_error,
            generate_sync=self.settings.generate_sync_methods,
            generate_async=self.settings.generate_async_methods,
        )

    def _map_parameter(
        self,
        raw: RawParameter,
        operation: Operation,
        location: ParameterLocation | None = None,
        client: bool = False,
    ) -> ProxyMethodParameter:
        name = to_snake_case(raw.name)
        return ProxyMethodParameter(
            name=name,
            wire_name=raw.wire_name,
            location=location or raw.location,
            type=self.type_mapper.resolve_reference(
                raw.schema_, referrer=f'{operation.name}.{raw.name}'
            ),
            required=raw.required or raw.location in (ParameterLocation.PATH, ParameterLocation.URI),
            client_property=name if client else None,
            constant=raw.constant,
            description=raw.description,
        )

    def _get_required_checks(
        self, proxy_method: ProxyMethod, client_reference: tuple[str, ...]
    ) -> list[ParameterCheck]:
        client_checks = [
            ParameterCheck(client_reference + (p.client_property,))
            for p in proxy_method.parameters
            if p.is_client_level and p.required and not p.is_constant
        ]
        method_checks = [
            ParameterCheck((p.name,))
            for p in proxy_method.parameters
            if not p.is_client_level and p.required and not p.is_constant
        ]
        return client_checks + method_checks

    def _get_return_type(
        self, variant: MethodVariant, value_type: ClientType | None
    ) -> ClientType | None:
        if variant.is_with_response:
            return GenericType(
                self.runtime.response.name,
                self.runtime.response.module,
                (value_type or PrimitiveType.NONE,),
            )
        return value_type

    def _get_raises(self) -> list[tuple[str, str]]:
        if self.settings.is_fluent:
            error = self.runtime.management_error
        else:
            error = self.runtime.http_response_error
        return [
            ('ValueError', 'If a required parameter is None.'),
            (error.name, 'If the request is rejected by the server.'),
        ]
