"""Mapping of choice schemas to enum types."""

import logging
from typing import TYPE_CHECKING

from clientgen.clientmodel.types import ClientType, EnumType, EnumValue, PrimitiveType
from clientgen.codemodel.models import ChoiceSchema, ChoiceValue, SealedChoiceSchema
from clientgen.exceptions import NamingCollisionExhaustedError
from clientgen.mapper.packages import get_type_package
from clientgen.naming import get_enum_member_name, to_pascal_case

if TYPE_CHECKING:
    from clientgen.mapper.type_mapper import TypeMapper

logger = logging.getLogger(__name__)

# Names front-ends give to enums they could not name.
PLACEHOLDER_ENUM_NAMES = frozenset({'enum'})


class EnumMapper:
    """Maps choice and sealed-choice schemas to ``EnumType``.

    Caching is left to the owning ``TypeMapper``; this class only knows how
    to build a new enum for a schema.
    """

    def __init__(self, type_mapper: 'TypeMapper'):
        self.type_mapper = type_mapper
        self.settings = type_mapper.settings

    def resolve(
        self,
        schema: ChoiceSchema | SealedChoiceSchema,
        expandable: bool,
        use_source_member_names: bool,
    ) -> ClientType:
        """Build the enum type of a choice schema.

        Args:
            schema: The choice schema.
            expandable: Whether values outside the declared set are accepted.
            use_source_member_names: Name members after the source names
                instead of the wire values.

        Returns:
            The EnumType, or the primitive of the underlying choice type when
            the schema has no usable name.

        Raises:
            NamingCollisionExhaustedError: If member names cannot be made unique.
        """
        element_type = self.type_mapper.resolve_reference(
            schema.choice_type, referrer=schema.id
        )

        declared_name = schema.name
        if not declared_name or declared_name.strip().lower() in PLACEHOLDER_ENUM_NAMES:
            logger.debug(
                f"Enum schema '{schema.id}' has no usable name, using {element_type}"
            )
            return element_type

        name = to_pascal_case(declared_name)
        package = get_type_package(schema, name, self.settings)
        name = self.type_mapper.registry.unique_name(package, name)

        enum_type = EnumType(
            package=package,
            name=name,
            description=self._get_description(schema, name),
            values=self._get_values(name, schema.choices, use_source_member_names),
            expandable=expandable,
            element_type=(
                element_type if isinstance(element_type, PrimitiveType) else PrimitiveType.STRING
            ),
            from_method_name=self.settings.enum_from_method_name,
            to_method_name=self.settings.enum_to_method_name,
            schema_index=self.type_mapper.arena.index_of(schema.id),
        )
        self.type_mapper.registry.register_enum(enum_type)
        logger.debug(f'Mapped enum {enum_type.full_name} with {len(enum_type.values)} values')
        return enum_type

    def _get_values(
        self,
        enum_name: str,
        choices: list[ChoiceValue],
        use_source_member_names: bool,
    ) -> list[EnumValue]:
        values: list[EnumValue] = []
        accepted: set[str] = set()
        repeats: dict[str, int] = {}

        for choice in choices:
            base = get_enum_member_name(self._get_member_source(choice, use_source_member_names))

            count = repeats.get(base, 0)
            repeats[base] = count + 1
            member_name = base if count == 0 else f'{base}_{count}'

            if member_name in accepted:
                raise NamingCollisionExhaustedError(enum_name, member_name)

            accepted.add(member_name)
            values.append(EnumValue(member_name, choice.value, choice.description))
        return values

    @staticmethod
    def _get_member_source(choice: ChoiceValue, use_source_member_names: bool) -> object:
        if use_source_member_names and choice.language is not None:
            name = choice.language.preferred.name or choice.language.default.name
            if name:
                return name
        return choice.value

    @staticmethod
    def _get_description(schema: ChoiceSchema | SealedChoiceSchema, name: str) -> str:
        parts = [p for p in (schema.summary, schema.description) if p]
        # The summary is often repeated as the first line of the description.
        if len(parts) == 2 and parts[1].startswith(parts[0]):
            parts = parts[1:]
        if not parts:
            return f'Defines values for {name}.'
        return '\n\n'.join(parts)
