"""Tests for response body type resolution."""

import logging

from clientgen.clientmodel import ClassType, ListType, PrimitiveType
from clientgen.codemodel import Operation, SchemaArena
from clientgen.mapper import ResponseMapper, TypeMapper, get_lowest_common_schema

from .fixtures import arena_for, code_model, settings


def _operation(*responses: dict) -> Operation:
    return Operation.model_validate({'name': 'op', 'responses': list(responses)})


def _pets():
    return arena_for(
        {'id': 'pet', 'kind': 'object', 'language': {'default': {'name': 'Pet'}}},
        {'id': 'dog', 'kind': 'object', 'parent': 'pet', 'language': {'default': {'name': 'Dog'}}},
        {'id': 'cat', 'kind': 'object', 'parent': 'pet', 'language': {'default': {'name': 'Cat'}}},
    )


class TestLowestCommonSchema:
    def test_identical_schemas(self):
        mapper = TypeMapper(_pets(), settings())
        dog = mapper.arena.index_of('dog')
        assert get_lowest_common_schema([dog, dog], mapper) == dog

    def test_common_parent(self):
        mapper = TypeMapper(_pets(), settings())
        arena = mapper.arena
        result = get_lowest_common_schema([arena.index_of('dog'), arena.index_of('cat')], mapper)
        assert result == arena.index_of('pet')

    def test_unrelated_schemas(self):
        mapper = TypeMapper(_pets(), settings())
        arena = mapper.arena
        assert get_lowest_common_schema([arena.index_of('dog'), arena.index_of('string')], mapper) is None

    def test_empty(self):
        assert get_lowest_common_schema([], TypeMapper(_pets(), settings())) is None


class TestExpectedResponseBodyType:
    def test_no_body(self):
        mapper = ResponseMapper(TypeMapper(_pets(), settings()))
        assert mapper.get_expected_response_body_type(_operation({'status_codes': [204]})) is None

    def test_common_parent_type(self):
        type_mapper = TypeMapper(_pets(), settings())
        mapper = ResponseMapper(type_mapper)
        result = mapper.get_expected_response_body_type(
            _operation({'schema': 'dog'}, {'status_codes': [201], 'schema': 'cat'})
        )
        assert result is type_mapper.resolve_reference('pet')

    def test_unrelated_types_give_any(self):
        mapper = ResponseMapper(TypeMapper(_pets(), settings()))
        result = mapper.get_expected_response_body_type(
            _operation({'schema': 'dog'}, {'status_codes': [201], 'schema': 'integer'})
        )
        assert result is PrimitiveType.ANY

    def test_mixed_responses_warn(self, caplog):
        mapper = ResponseMapper(TypeMapper(_pets(), settings()))
        with caplog.at_level(logging.WARNING, logger='clientgen.mapper.response_mapper'):
            result = mapper.get_expected_response_body_type(
                _operation({'schema': 'dog'}, {'status_codes': [204]})
            )
        assert result.name == 'Dog'
        assert 'mixes responses' in caplog.text


class TestXmlWrapper:
    def _mapper(self, **overrides):
        type_mapper = TypeMapper(SchemaArena.from_code_model(code_model()), settings(**overrides))
        return type_mapper, ResponseMapper(type_mapper)

    def test_wrapped_array_becomes_wrapper_model(self):
        type_mapper, mapper = self._mapper()
        result = mapper.get_expected_response_body_type(_operation({'schema': 'widget-list-xml'}))

        assert isinstance(result, ClassType)
        assert result.name == 'WidgetWrapper'
        assert result.package == 'compute.implementation.models'

        model = type_mapper.registry.get_model(result)
        assert model.xml_name == 'Widgets'
        [items] = model.properties
        assert items.name == 'items'
        assert items.serialized_name == 'Widget'
        assert isinstance(items.type, ListType)
        assert items.type.element is type_mapper.resolve_reference('widget')

    def test_wrapper_is_cached(self):
        type_mapper, mapper = self._mapper()
        operation = _operation({'schema': 'widget-list-xml'})
        first = mapper.get_expected_response_body_type(operation)
        assert mapper.get_expected_response_body_type(operation) is first
        assert [m.name for m in type_mapper.registry.models()].count('WidgetWrapper') == 1

    def test_unwrapped_array_stays_a_list(self):
        type_mapper, mapper = self._mapper()
        result = mapper.get_expected_response_body_type(_operation({'schema': 'widget-list'}))
        assert result is type_mapper.resolve_reference('widget-list')

    def test_custom_wrapper_package(self):
        _, mapper = self._mapper(custom_types={'WidgetWrapper'}, custom_types_subpackage='custom')
        result = mapper.get_expected_response_body_type(_operation({'schema': 'widget-list-xml'}))
        assert result.package == 'compute.custom'
