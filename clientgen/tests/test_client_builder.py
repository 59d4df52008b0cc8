"""Tests for building the client tree."""

import copy

import pytest

from clientgen.clientmodel import MethodVariant, PrimitiveType, Visibility
from clientgen.codemodel import SchemaArena
from clientgen.mapper import ClientModelBuilder, TypeMapper

from .fixtures import GADGETS_CODE_MODEL, WIDGETS_CODE_MODEL, code_model, settings


def _build(document=None, **overrides):
    model = code_model(document)
    values = dict(model.settings)
    values.update(overrides)
    type_mapper = TypeMapper(SchemaArena.from_code_model(model), settings(**values))
    return type_mapper, ClientModelBuilder(type_mapper).build(model)


def _client(tree, class_name):
    return next(c for c in tree if c.class_name == class_name)


class TestClientTree:
    def test_children_built_before_parents(self):
        _, tree = _build()
        assert [c.class_name for c in tree] == ['WidgetsClient', 'ComputeClient']
        assert [c.class_name for c in tree.top_down()] == ['ComputeClient', 'WidgetsClient']

    def test_parent_links(self):
        _, tree = _build()
        compute = _client(tree, 'ComputeClient')
        widgets = _client(tree, 'WidgetsClient')
        assert tree.roots() == [compute]
        assert tree.parent(widgets.index) is compute
        assert tree.children(compute.index) == [widgets]

    def test_clients_live_in_the_namespace(self):
        _, tree = _build()
        assert _client(tree, 'ComputeClient').class_type.module == 'compute.compute_client'


class TestProperties:
    def test_client_parameters_become_properties(self):
        _, tree = _build()
        compute = _client(tree, 'ComputeClient')
        assert [p.name for p in compute.properties] == ['subscription_id']

    def test_sub_client_inherits_properties(self):
        _, tree = _build()
        widgets = _client(tree, 'WidgetsClient')
        assert [(p.name, p.inherited) for p in widgets.properties] == [
            ('subscription_id', True),
            ('scope', False),
        ]
        assert [p.name for p in widgets.own_mutable_properties] == ['scope']

    def test_host_parameters_become_string_properties(self):
        _, tree = _build(GADGETS_CODE_MODEL)
        [client] = list(tree)
        endpoint = client.property_named('endpoint')
        assert endpoint.type is PrimitiveType.STRING
        assert endpoint.required

    def test_constant_client_parameter_is_read_only(self):
        document = code_model().model_dump(by_alias=True)
        document['clients'][0]['parameters'] = [
            {'name': 'apiVersion', 'schema': 'string', 'constant': '2024-01-01'}
        ]
        _, tree = _build(document)
        compute = _client(tree, 'ComputeClient')
        api_version = compute.property_named('api_version')
        assert api_version.read_only
        assert api_version.default_value == '2024-01-01'
        assert 'api_version' not in compute.max_constructor.parameter_names


class TestHosts:
    def test_sub_client_without_host_uses_parent_host(self):
        _, tree = _build()
        widgets = _client(tree, 'WidgetsClient')
        [get_info] = widgets.proxy.methods
        assert get_info.url_template == 'https://management.example.com/{scope}/info'
        assert widgets.property_named('endpoint') is None
        assert [p.name for p in widgets.properties] == ['subscription_id', 'scope']

    def test_sub_client_host_overrides_parent(self):
        document = copy.deepcopy(WIDGETS_CODE_MODEL)
        document['clients'][0]['sub_clients'][0]['host_template'] = 'https://widgets.example.com'
        _, tree = _build(document)
        [get_info] = _client(tree, 'WidgetsClient').proxy.methods
        assert get_info.url_template == 'https://widgets.example.com/{scope}/info'

    def test_root_client_without_host_uses_endpoint(self):
        document = copy.deepcopy(GADGETS_CODE_MODEL)
        del document['clients'][0]['host_template']
        _, tree = _build(document)
        [client] = list(tree)
        assert client.property_named('endpoint').required
        assert client.proxy.methods[0].url_template == '{endpoint}/gadgets/{name}'

    def test_templated_parent_host_is_inherited(self):
        document = copy.deepcopy(GADGETS_CODE_MODEL)
        document['clients'][0]['sub_clients'] = [
            {
                'name': 'Parts',
                'operation_groups': [
                    {
                        'operations': [
                            {'name': 'listParts', 'path': '/parts', 'responses': [{'status_codes': [204]}]}
                        ]
                    }
                ],
            }
        ]
        _, tree = _build(document)
        parts = _client(tree, 'PartsClient')
        [accessor] = _client(tree, 'GadgetsClient').accessor_methods

        assert [(p.name, p.inherited) for p in parts.properties] == [('endpoint', True)]
        assert accessor.parameters == []
        assert accessor.argument_names == ['pipeline', 'endpoint']
        assert parts.proxy.methods[0].url_template == '{endpoint}/parts'

class TestConstructors:
    def test_default_generation(self):
        _, tree = _build()
        widgets = _client(tree, 'WidgetsClient')
        assert [c.name for c in widgets.constructors] == ['__init__']
        assert widgets.max_constructor.parameter_names == ['pipeline', 'subscription_id', 'scope']

    def test_legacy_generation(self):
        _, tree = _build(pipeline_generation='azure-v1')
        compute = _client(tree, 'ComputeClient')
        assert [(c.name, c.parameter_names) for c in compute.constructors] == [
            ('create', ['subscription_id']),
            ('from_pipeline', ['pipeline', 'subscription_id']),
            ('__init__', ['pipeline', 'serializer', 'subscription_id']),
        ]

    def test_fluent_generation(self):
        _, tree = _build(is_fluent=True)
        compute = _client(tree, 'ComputeClient')
        assert compute.max_constructor.parameter_names == [
            'pipeline',
            'serializer',
            'default_poll_interval',
            'environment',
            'subscription_id',
        ]


class TestMethodGroups:
    def test_method_group(self):
        _, tree = _build()
        [group] = _client(tree, 'ComputeClient').method_group_clients
        assert group.class_name == 'WidgetsOperations'
        assert group.package == 'compute.implementation'
        assert group.variable_name == 'widgets'
        assert group.proxy.class_name == '_WidgetsService'
        assert [m.name for m in group.proxy.methods] == ['patch', 'list_xml']

    def test_variable_name_collision(self):
        document = code_model().model_dump(by_alias=True)
        document['clients'][0]['parameters'] = [
            {'name': 'widgets', 'schema': 'string', 'implementation': 'client'}
        ]
        _, tree = _build(document)
        [group] = _client(tree, 'ComputeClient').method_group_clients
        assert group.variable_name == 'widgets_operations'

    def test_variable_name_avoids_root_method_names(self):
        document = code_model().model_dump(by_alias=True)
        root_group = next(g for g in document['clients'][0]['operation_groups'] if not g['name'])
        root_group['operations'].append(
            {'name': 'widgets', 'path': '/widgets', 'responses': [{'status_codes': [204]}]}
        )
        _, tree = _build(document)
        compute = _client(tree, 'ComputeClient')
        [group] = compute.method_group_clients
        assert 'widgets' in [m.python_name for m in compute.client_methods]
        assert group.variable_name == 'widgets_operations'

    def test_root_operations_use_client_proxy(self):
        _, tree = _build()
        compute = _client(tree, 'ComputeClient')
        assert compute.proxy.class_name == '_ComputeClientService'
        assert [m.python_name for m in compute.client_methods] == [
            'check_health_with_response_async',
            'check_health_async',
            'check_health_with_response',
            'check_health',
        ]


class TestClientMethods:
    def _patch_methods(self, **overrides):
        _, tree = _build(**overrides)
        [group] = _client(tree, 'ComputeClient').method_group_clients
        return [m for m in group.client_methods if m.operation_name == 'patch']

    def test_variants_in_order(self):
        methods = self._patch_methods()
        assert [m.variant for m in methods] == [
            MethodVariant.ASYNC_WITH_RESPONSE,
            MethodVariant.ASYNC_VALUE,
            MethodVariant.SYNC_WITH_RESPONSE,
            MethodVariant.SYNC_VALUE,
        ]

    def test_sync_only(self):
        methods = self._patch_methods(generate_async_methods=False)
        assert [m.python_name for m in methods] == ['patch_with_response', 'patch']

    def test_fluent_async_with_response_is_private(self):
        methods = self._patch_methods(is_fluent=True)
        assert methods[0].visibility is Visibility.PRIVATE
        assert methods[0].python_name == '_patch_with_response_async'
        assert methods[1].delegate_name == '_patch_with_response_async'

    def test_parameters_exclude_client_and_constant_values(self):
        [method, *_] = self._patch_methods()
        assert [p.name for p in method.parameters] == ['resource_group_name', 'widget_name', 'body']

    def test_required_checks_client_first(self):
        methods = self._patch_methods()
        assert [c.label for c in methods[0].required_checks] == [
            'self._client.subscription_id',
            'resource_group_name',
            'widget_name',
            'body',
        ]
        assert methods[1].required_checks == []

    def test_proxy_method(self):
        [method, *_] = self._patch_methods()
        proxy_method = method.proxy_method
        assert proxy_method.http_method == 'PATCH'
        assert proxy_method.expected_status == (200,)
        assert proxy_method.response_type.name == 'Widget'
        assert proxy_method.default_error.name == 'HttpResponseError'
        assert [code for code, _ in proxy_method.error_map] == [401, 404, 409]
        api_version = next(p for p in proxy_method.parameters if p.name == 'api_version')
        assert api_version.wire_name == 'api-version'
        assert api_version.constant == '2024-01-01'

    def test_fluent_uses_management_error(self):
        [method, *_] = self._patch_methods(is_fluent=True)
        assert method.proxy_method.default_error.name == 'ODataV4Error'
        assert method.proxy_method.error_map == ()

    def test_return_types(self):
        methods = self._patch_methods()
        assert str(methods[0].return_type) == 'HttpResponse[Widget]'
        assert str(methods[1].return_type) == 'Widget'

    def test_void_operation(self):
        _, tree = _build()
        method = _client(tree, 'ComputeClient').client_methods[-1]
        assert method.value_type is None
        assert method.return_type is None
        assert method.proxy_method.expected_status == (204,)


class TestAccessors:
    def test_accessor_forwards_parent_values(self):
        _, tree = _build()
        compute = _client(tree, 'ComputeClient')
        [accessor] = compute.accessor_methods
        assert accessor.name == 'get_widgets'
        assert accessor.sub_client is _client(tree, 'WidgetsClient')
        assert [p.name for p in accessor.parameters] == ['scope']
        assert accessor.argument_names == ['pipeline', 'subscription_id', 'scope']

    @pytest.mark.parametrize(
        'overrides,expected',
        [
            ({'pipeline_generation': 'azure-v1'}, ['pipeline', 'serializer', 'subscription_id', 'scope']),
            (
                {'is_fluent': True},
                ['pipeline', 'serializer', 'default_poll_interval', 'environment', 'subscription_id', 'scope'],
            ),
        ],
    )
    def test_accessor_arguments_match_sub_client_constructor(self, overrides, expected):
        _, tree = _build(**overrides)
        [accessor] = _client(tree, 'ComputeClient').accessor_methods
        assert accessor.argument_names == expected
        assert accessor.sub_client.max_constructor.parameter_names == expected
