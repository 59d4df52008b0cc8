"""Tests for schema to client type resolution."""

import threading

import pytest

from clientgen.clientmodel import ClassType, EnumType, GenericType, ListType, MapType, PrimitiveType
from clientgen.codemodel import SchemaArena
from clientgen.exceptions import CodeModelValidationError, UnresolvableTypeReferenceError
from clientgen.mapper import TypeMapper

from .fixtures import arena_for, code_model, settings


def _object(schema_id, *properties, **extra):
    return {
        'id': schema_id,
        'kind': 'object',
        'language': {'default': {'name': schema_id.title()}},
        'properties': [
            {'name': name, 'schema': schema} for name, schema in properties
        ],
        **extra,
    }


class TestPrimitives:
    @pytest.mark.parametrize(
        'primitive,expected',
        [
            ('string', PrimitiveType.STRING),
            ('integer', PrimitiveType.INT),
            ('boolean', PrimitiveType.BOOL),
            ('date-time', PrimitiveType.DATETIME),
            ('uuid', PrimitiveType.UUID),
            ('any', PrimitiveType.ANY),
        ],
    )
    def test_primitive_mapping(self, primitive, expected):
        mapper = TypeMapper(arena_for({'id': 'p', 'kind': 'primitive', 'type': primitive}), settings())
        assert mapper.resolve_reference('p') == expected

    def test_collections(self):
        mapper = TypeMapper(
            arena_for(
                {'id': 'names', 'kind': 'array', 'element': 'string'},
                {'id': 'counts', 'kind': 'dictionary', 'element': 'integer'},
            ),
            settings(),
        )
        assert str(mapper.resolve_reference('names')) == 'list[str]'
        assert isinstance(mapper.resolve_reference('counts'), MapType)
        assert str(mapper.resolve_reference('counts')) == 'dict[str, int]'


class TestTypeIdentity:
    def test_same_schema_same_instance(self):
        mapper = TypeMapper(SchemaArena.from_code_model(code_model()), settings())
        first = mapper.resolve_reference('widget')
        assert mapper.resolve_reference('widget') is first
        assert isinstance(first, ClassType)
        assert first.full_name == 'compute.models.Widget'

    def test_schemas_sharing_a_name_stay_distinct(self):
        mapper = TypeMapper(
            arena_for(
                _object('a', language={'default': {'name': 'Thing'}}),
                _object('b', language={'default': {'name': 'Thing'}}),
            ),
            settings(),
        )
        first = mapper.resolve_reference('a')
        second = mapper.resolve_reference('b')
        assert first is not second
        assert (first.name, second.name) == ('Thing', 'Thing1')

    def test_concurrent_resolution_creates_one_instance(self):
        mapper = TypeMapper(SchemaArena.from_code_model(code_model()), settings())
        results = []

        def resolve():
            results.append(mapper.resolve_reference('widget'))

        threads = [threading.Thread(target=resolve) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert all(result is results[0] for result in results)
        assert len(mapper.registry.models()) == 1


class TestRecursion:
    def test_model_referring_to_itself_through_a_list(self):
        mapper = TypeMapper(SchemaArena.from_code_model(code_model()), settings())
        widget = mapper.resolve_reference('widget')
        model = mapper.registry.get_model(widget)

        parts = next(p for p in model.properties if p.name == 'parts')
        assert isinstance(parts.type, ListType)
        assert parts.type.element is widget

    def test_model_referring_to_itself_directly(self):
        mapper = TypeMapper(arena_for(_object('node', ('next', 'node'))), settings())
        node = mapper.resolve_reference('node')
        assert mapper.registry.get_model(node).properties[0].type is node

    def test_array_containing_itself_raises(self):
        mapper = TypeMapper(arena_for({'id': 'loop', 'kind': 'array', 'element': 'loop'}), settings())
        with pytest.raises(UnresolvableTypeReferenceError) as exc_info:
            mapper.resolve_reference('loop')
        assert exc_info.value.reference == 'loop'

    def test_parent_cycle_raises(self):
        mapper = TypeMapper(
            arena_for(_object('a', parent='b'), _object('b', parent='a')), settings()
        )
        with pytest.raises(UnresolvableTypeReferenceError):
            mapper.resolve_reference('a')

    def test_unknown_property_schema_raises(self):
        mapper = TypeMapper(arena_for(_object('a', ('b', 'missing'))), settings())
        with pytest.raises(UnresolvableTypeReferenceError) as exc_info:
            mapper.resolve_reference('a')
        assert exc_info.value.schema_path == 'a.b'

    def test_duplicate_property_names_rejected(self):
        mapper = TypeMapper(
            arena_for(_object('a', ('sizeInches', 'string'), ('size_inches', 'string'))),
            settings(),
        )
        with pytest.raises(CodeModelValidationError):
            mapper.resolve_reference('a')


class TestModels:
    def test_properties(self):
        mapper = TypeMapper(SchemaArena.from_code_model(code_model()), settings())
        model = mapper.registry.get_model(mapper.resolve_reference('widget'))
        by_name = {p.name: p for p in model.properties}

        assert by_name['size_inches'].serialized_name == 'sizeInches'
        assert by_name['id'].read_only
        assert by_name['name'].required
        assert isinstance(by_name['color'].type, EnumType)
        assert model.xml_name == 'Widget'

    def test_discriminator_inherited(self):
        mapper = TypeMapper(
            arena_for(
                _object('pet', ('kind', 'string'), discriminator='kind'),
                _object('dog', parent='pet', discriminator_value='dog'),
            ),
            settings(),
        )
        dog = mapper.registry.get_model(mapper.resolve_reference('dog'))
        assert dog.parent is mapper.resolve_reference('pet')
        assert dog.discriminator == 'kind'
        assert dog.discriminator_value == 'dog'

    def test_parent_must_be_object(self):
        mapper = TypeMapper(arena_for(_object('a', parent='string')), settings())
        with pytest.raises(UnresolvableTypeReferenceError):
            mapper.resolve_reference('a')

    def test_internal_data_plane_models_go_to_implementation(self):
        mapper = TypeMapper(
            arena_for(_object('a', usage=['internal'])),
            settings(is_data_plane_client=True),
        )
        assert mapper.resolve_reference('a').package == 'compute.implementation.models'

    def test_python_namespace_overrides_root(self):
        mapper = TypeMapper(
            arena_for(
                _object(
                    'a',
                    language={'default': {'name': 'A'}, 'python': {'name': 'A', 'namespace': 'shared'}},
                )
            ),
            settings(),
        )
        assert mapper.resolve_reference('a').package == 'shared.models'

    def test_names_shadowing_model_attributes_renamed(self):
        mapper = TypeMapper(
            arena_for(_object('a', ('modelConfig', 'string'), ('xmlName', 'string'), ('json', 'string'))),
            settings(),
        )
        model = mapper.registry.get_model(mapper.resolve_reference('a'))
        assert [(p.name, p.serialized_name) for p in model.properties] == [
            ('model_config_', 'modelConfig'),
            ('xml_name_', 'xmlName'),
            ('json_', 'json'),
        ]


class TestUnions:
    def test_variants_deduplicated(self):
        mapper = TypeMapper(
            arena_for({'id': 'u', 'kind': 'union', 'variants': ['string', 'integer', 'string']}),
            settings(),
        )
        union = mapper.resolve_reference('u')
        assert isinstance(union, GenericType)
        assert str(union) == 'Union[str, int]'

    def test_single_variant_collapses(self):
        mapper = TypeMapper(arena_for({'id': 'u', 'kind': 'union', 'variants': ['string']}), settings())
        assert mapper.resolve_reference('u') is PrimitiveType.STRING

    def test_resolve_all(self):
        mapper = TypeMapper(SchemaArena.from_code_model(code_model()), settings())
        mapper.resolve_all()
        assert [e.name for e in mapper.registry.enums()] == ['WidgetColor']
        assert [m.name for m in mapper.registry.models()] == ['Widget']
