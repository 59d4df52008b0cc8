"""Test fixtures for clientgen tests.

This module provides sample code model documents, as the plain dicts a
front-end would serialize, and helpers to load them.
"""

import copy

from clientgen.codemodel import CodeModel, SchemaArena
from clientgen.config import GeneratorSettings

STRING = {'id': 'string', 'kind': 'primitive', 'type': 'string'}
INTEGER = {'id': 'integer', 'kind': 'primitive', 'type': 'integer'}

# A management service: a root client with a Widgets operation group and a
# sub-client scoped to a resource.
WIDGETS_CODE_MODEL = {
    'settings': {'namespace': 'compute'},
    'schemas': [
        STRING,
        INTEGER,
        {
            'id': 'widget-color',
            'kind': 'choice',
            'choice_type': 'string',
            'language': {'default': {'name': 'WidgetColor', 'description': 'Color of a widget.'}},
            'choices': [{'value': 'red'}, {'value': 'blue'}],
        },
        {
            'id': 'widget',
            'kind': 'object',
            'language': {'default': {'name': 'Widget', 'description': 'A widget resource.'}},
            'serialization': {'xml': {'name': 'Widget'}},
            'properties': [
                {'name': 'id', 'schema': 'string', 'read_only': True},
                {'name': 'name', 'schema': 'string', 'required': True},
                {'name': 'color', 'schema': 'widget-color'},
                {'name': 'sizeInches', 'schema': 'integer', 'description': 'Size of the widget.'},
                {'name': 'parts', 'schema': 'widget-list'},
            ],
        },
        {'id': 'widget-list', 'kind': 'array', 'element': 'widget'},
        {
            'id': 'widget-list-xml',
            'kind': 'array',
            'element': 'widget',
            'serialization': {'xml': {'name': 'Widgets', 'wrapped': True}},
        },
    ],
    'clients': [
        {
            'name': 'Compute',
            'description': 'Client of the compute management service.',
            'host_template': 'https://management.example.com',
            'operation_groups': [
                {
                    'name': '',
                    'operations': [
                        {
                            'name': 'checkHealth',
                            'method': 'get',
                            'path': '/health',
                            'summary': 'Check the health of the service.',
                            'responses': [{'status_codes': [204]}],
                        }
                    ],
                },
                {
                    'name': 'Widgets',
                    'operations': [
                        {
                            'name': 'patch',
                            'method': 'patch',
                            'path': (
                                '/subscriptions/{subscriptionId}/resourceGroups/'
                                '{resourceGroupName}/widgets/{widgetName}'
                            ),
                            'summary': 'Update a widget.',
                            'parameters': [
                                {
                                    'name': 'subscriptionId',
                                    'location': 'path',
                                    'schema': 'string',
                                    'required': True,
                                    'implementation': 'client',
                                    'description': 'The subscription id.',
                                },
                                {
                                    'name': 'resourceGroupName',
                                    'location': 'path',
                                    'schema': 'string',
                                    'required': True,
                                    'description': 'The resource group.',
                                },
                                {
                                    'name': 'widgetName',
                                    'location': 'path',
                                    'schema': 'string',
                                    'required': True,
                                },
                                {
                                    'name': 'api-version',
                                    'location': 'query',
                                    'schema': 'string',
                                    'constant': '2024-01-01',
                                },
                                {
                                    'name': 'body',
                                    'location': 'body',
                                    'schema': 'widget',
                                    'required': True,
                                },
                            ],
                            'responses': [{'status_codes': [200], 'schema': 'widget'}],
                        },
                        {
                            'name': 'listXml',
                            'method': 'get',
                            'path': '/subscriptions/{subscriptionId}/widgets',
                            'parameters': [
                                {
                                    'name': 'subscriptionId',
                                    'location': 'path',
                                    'schema': 'string',
                                    'required': True,
                                    'implementation': 'client',
                                },
                                {'name': 'top', 'location': 'query', 'schema': 'integer'},
                            ],
                            'responses': [
                                {
                                    'status_codes': [200],
                                    'schema': 'widget-list-xml',
                                    'content_type': 'application/xml',
                                }
                            ],
                        },
                    ],
                },
            ],
            'sub_clients': [
                {
                    'name': 'Widgets',
                    'parameters': [
                        {
                            'name': 'scope',
                            'location': 'path',
                            'schema': 'string',
                            'required': True,
                            'implementation': 'client',
                            'description': 'The scope of the widgets.',
                        }
                    ],
                    'operation_groups': [
                        {
                            'name': '',
                            'operations': [
                                {
                                    'name': 'getInfo',
                                    'method': 'get',
                                    'path': '/{scope}/info',
                                    'parameters': [
                                        {
                                            'name': 'scope',
                                            'location': 'path',
                                            'schema': 'string',
                                            'required': True,
                                            'implementation': 'client',
                                        }
                                    ],
                                    'responses': [{'status_codes': [200], 'schema': 'string'}],
                                }
                            ],
                        }
                    ],
                }
            ],
        }
    ],
}

# A data-plane service whose host is a template.
GADGETS_CODE_MODEL = {
    'settings': {'namespace': 'gadgets', 'isDataPlaneClient': True},
    'schemas': [
        STRING,
        {
            'id': 'gadget',
            'kind': 'object',
            'language': {'default': {'name': 'Gadget'}},
            'usage': ['internal'],
            'properties': [{'name': 'name', 'schema': 'string', 'required': True}],
        },
    ],
    'clients': [
        {
            'name': 'GadgetsClient',
            'host_template': '{endpoint}',
            'operation_groups': [
                {
                    'name': '',
                    'operations': [
                        {
                            'name': 'getGadget',
                            'path': '/gadgets/{name}',
                            'parameters': [
                                {'name': 'name', 'location': 'path', 'schema': 'string'},
                                {'name': 'filter', 'location': 'query', 'schema': 'string'},
                            ],
                            'responses': [{'status_codes': [200], 'schema': 'gadget'}],
                        }
                    ],
                }
            ],
        }
    ],
}


def choice_schema(values: list, name: str | None = 'Letter', kind: str = 'choice') -> dict:
    schema = {
        'id': 'letter',
        'kind': kind,
        'choice_type': 'string',
        'choices': [{'value': v} for v in values],
    }
    if name is not None:
        schema['language'] = {'default': {'name': name}}
    return schema


def code_model(document: dict | None = None, **overrides) -> CodeModel:
    content = copy.deepcopy(document if document is not None else WIDGETS_CODE_MODEL)
    content.update(overrides)
    return CodeModel.model_validate(content)


def schemas_model(*schemas: dict) -> CodeModel:
    return CodeModel.model_validate({'schemas': [STRING, INTEGER, *schemas]})


def arena_for(*schemas: dict) -> SchemaArena:
    return SchemaArena.from_code_model(schemas_model(*schemas))


def settings(**overrides) -> GeneratorSettings:
    values = {'namespace': 'compute'}
    values.update(overrides)
    return GeneratorSettings(**values)
