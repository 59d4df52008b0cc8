"""Mapping of object schemas to generated model classes."""

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel

from clientgen.clientmodel.models import ClientModel, ClientModelProperty
from clientgen.clientmodel.types import ClassType, EnumType
from clientgen.codemodel.models import ObjectSchema
from clientgen.exceptions import CodeModelValidationError, UnresolvableTypeReferenceError
from clientgen.mapper.packages import get_type_package
from clientgen.naming import to_pascal_case, to_snake_case

if TYPE_CHECKING:
    from clientgen.mapper.type_mapper import TypeMapper

logger = logging.getLogger(__name__)

# Class attributes every generated model defines or inherits from pydantic.
RESERVED_MODEL_ATTRIBUTES = frozenset({'xml_name', *dir(BaseModel)})


class ModelMapper:
    """Maps object schemas to ``ClientModel`` entries of the registry.

    The parent chain is resolved before the model itself. The model's
    ClassType is published to the type cache right away and its properties
    are mapped later, so a model can hold fields of its own type.
    """

    def __init__(self, type_mapper: 'TypeMapper'):
        self.type_mapper = type_mapper
        self.settings = type_mapper.settings

    def resolve(self, index: int, schema: ObjectSchema) -> ClassType:
        parent_type = None
        if schema.parent is not None:
            parent_type = self.type_mapper.resolve_reference(schema.parent, referrer=schema.id)
            if not isinstance(parent_type, ClassType) or isinstance(parent_type, EnumType):
                raise UnresolvableTypeReferenceError(
                    schema.parent,
                    schema_path=schema.id,
                    reason='the parent of an object schema must be an object schema',
                )

        name = to_pascal_case(schema.name or schema.id)
        package = get_type_package(schema, name, self.settings)
        name = self.type_mapper.registry.unique_name(package, name)

        class_type = ClassType(package=package, name=name, description=schema.description)
        model = ClientModel(
            type=class_type,
            parent=parent_type,
            discriminator=self._get_discriminator(schema, parent_type),
            discriminator_value=schema.discriminator_value,
            xml_name=(
                schema.serialization.xml.name
                if schema.serialization and schema.serialization.xml
                else None
            ),
            schema_index=index,
        )
        self.type_mapper.registry.register_model(model)
        self.type_mapper.cache(index, class_type)
        self.type_mapper.defer(lambda: self._map_properties(model, schema))

        logger.debug(f'Mapped model {class_type.full_name}')
        return class_type

    def _get_discriminator(self, schema: ObjectSchema, parent_type: ClassType | None) -> str | None:
        if schema.discriminator or parent_type is None:
            return schema.discriminator
        parent = self.type_mapper.registry.get_model(parent_type)
        return parent.discriminator if parent is not None else None

    def _map_properties(self, model: ClientModel, schema: ObjectSchema) -> None:
        seen: set[str] = set()
        for prop in schema.properties:
            name = to_snake_case(prop.name)
            if name in RESERVED_MODEL_ATTRIBUTES:
                name = f'{name}_'
            if name in seen:
                raise CodeModelValidationError(
                    schema.id, errors=[f"property name '{name}' is declared twice"]
                )
            seen.add(name)
            model.properties.append(
                ClientModelProperty(
                    name=name,
                    serialized_name=prop.serialized_name or prop.name,
                    type=self.type_mapper.resolve_reference(
                        prop.schema_, referrer=f'{schema.id}.{prop.name}'
                    ),
                    required=prop.required,
                    read_only=prop.read_only,
                    description=prop.description,
                )
            )
