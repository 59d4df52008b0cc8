"""Resolution of the response body type of an operation."""

import logging

from clientgen.clientmodel.models import ClientModel, ClientModelProperty
from clientgen.clientmodel.types import ClassType, ClientType, ListType, PrimitiveType
from clientgen.codemodel.models import ArraySchema, ObjectSchema, Operation
from clientgen.mapper.type_mapper import TypeMapper
from clientgen.naming import to_pascal_case

logger = logging.getLogger(__name__)


def get_lowest_common_schema(indices: list[int], type_mapper: TypeMapper) -> int | None:
    """Return the arena index of the lowest schema common to all ``indices``.

    Identical schemas give that schema; object schemas give their nearest
    common ancestor. Anything else has no common schema and gives None.
    """
    if not indices:
        return None
    if all(index == indices[0] for index in indices):
        return indices[0]

    arena = type_mapper.arena
    if not all(isinstance(arena[index], ObjectSchema) for index in indices):
        return None

    def ancestors(index: int) -> list[int]:
        chain = [index]
        schema = arena[index]
        while schema.parent is not None:
            index = arena.index_of(schema.parent, referrer=schema.id)
            if index in chain:
                break
            chain.append(index)
            schema = arena[index]
        return chain

    others = [set(ancestors(index)) for index in indices[1:]]
    for candidate in ancestors(indices[0]):
        if all(candidate in chain for chain in others):
            return candidate
    return None


class ResponseMapper:
    """Computes the expected response body type of operations.

    XML-wrapped array responses are materialized as a ``<Element>Wrapper``
    model holding the list; wrappers are cached on the arena index of the
    array schema.
    """

    def __init__(self, type_mapper: TypeMapper):
        self.type_mapper = type_mapper
        self.settings = type_mapper.settings
        self._wrappers: dict[int, ClassType] = {}

    def get_expected_response_body_type(self, operation: Operation) -> ClientType | None:
        """Return the body type of the operation's success responses.

        Returns:
            The client type of the lowest common response schema, ``Any`` when
            the responses share no schema, or None when no response has a body.
        """
        references = [r.schema_ for r in operation.responses if r.schema_ is not None]
        if not references:
            return None
        if len(references) != len(operation.responses):
            logger.warning(
                f"Operation '{operation.name}' mixes responses with and without a body"
            )

        arena = self.type_mapper.arena
        indices = [
            arena.index_of(reference, referrer=f'{operation.name}.responses')
            for reference in references
        ]
        index = get_lowest_common_schema(indices, self.type_mapper)
        if index is None:
            return PrimitiveType.ANY

        schema = arena[index]
        if isinstance(schema, ArraySchema) and schema.is_xml_wrapped:
            return self.get_xml_wrapper_type(index)
        return self.type_mapper.resolve_index(index)

    def get_xml_wrapper_type(self, index: int) -> ClassType:
        cached = self._wrappers.get(index)
        if cached is not None:
            return cached

        schema = self.type_mapper.arena[index]
        list_type = self.type_mapper.resolve_index(index)
        element_type = list_type.element if isinstance(list_type, ListType) else list_type

        if isinstance(element_type, ClassType):
            element_name = element_type.name
        else:
            element_name = to_pascal_case(str(element_type))
        name = f'{element_name}Wrapper'

        if self.settings.is_custom_type(name):
            package = self.settings.custom_types_package
        else:
            package = self.settings.implementation_models_package

        registry = self.type_mapper.registry
        wrapper_type = registry.get_type(f'{package}.{name}')
        if wrapper_type is None:
            wrapper_type = ClassType(package=package, name=name)
            xml_name = schema.serialization.xml.name if schema.serialization.xml else None
            element_xml_name = self._get_element_xml_name(schema, element_name)
            registry.register_model(
                ClientModel(
                    type=wrapper_type,
                    properties=[
                        ClientModelProperty(
                            name='items',
                            serialized_name=element_xml_name,
                            type=ListType(element_type),
                        )
                    ],
                    xml_name=xml_name or element_name,
                    schema_index=index,
                )
            )
            logger.debug(f'Added XML wrapper {wrapper_type.full_name}')

        self._wrappers[index] = wrapper_type
        return wrapper_type

    def _get_element_xml_name(self, schema: ArraySchema, element_name: str) -> str:
        element_schema = self.type_mapper.arena.get(schema.element, referrer=schema.id)
        serialization = element_schema.serialization
        if serialization and serialization.xml and serialization.xml.name:
            return serialization.xml.name
        return element_name
