"""Pydantic models of the code model consumed by the generator.

The code model is the structured, language-agnostic description of a
service API. It is produced by an external front-end; this module only
validates it. Schemas reference each other by ``id``.
"""

from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    'Language',
    'Languages',
    'SchemaContext',
    'XmlSerialization',
    'Serialization',
    'PrimitiveSchema',
    'ArraySchema',
    'DictionarySchema',
    'ChoiceValue',
    'ChoiceSchema',
    'SealedChoiceSchema',
    'Property',
    'ObjectSchema',
    'UnionSchema',
    'RawSchema',
    'ParameterLocation',
    'RawParameter',
    'RawResponse',
    'Operation',
    'OperationGroup',
    'RawClient',
    'CodeModel',
]


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra='ignore')


class Language(_Node):
    name: str | None = None
    description: str | None = None
    namespace: str | None = None


class Languages(_Node):
    default: Language = Field(default_factory=Language)
    python: Language | None = None

    @property
    def preferred(self) -> Language:
        """The python naming hint, falling back to the default one."""
        return self.python if self.python is not None else self.default


class SchemaContext(str, Enum):
    INPUT = 'input'
    OUTPUT = 'output'
    EXCEPTION = 'exception'
    PUBLIC = 'public'
    INTERNAL = 'internal'


class XmlSerialization(_Node):
    name: str | None = None
    wrapped: bool = False


class Serialization(_Node):
    xml: XmlSerialization | None = None


class _SchemaBase(_Node):
    id: str
    language: Languages = Field(default_factory=Languages)
    summary: str | None = None
    usage: frozenset[SchemaContext] = frozenset()
    serialization: Serialization | None = None

    @property
    def name(self) -> str | None:
        return self.language.preferred.name or self.language.default.name

    @property
    def description(self) -> str | None:
        return self.language.preferred.description or self.language.default.description

    @property
    def is_xml_wrapped(self) -> bool:
        return bool(
            self.serialization
            and self.serialization.xml
            and self.serialization.xml.wrapped
        )


class PrimitiveSchema(_SchemaBase):
    kind: Literal['primitive'] = 'primitive'
    type: Literal[
        'string',
        'integer',
        'number',
        'boolean',
        'date-time',
        'date',
        'time',
        'duration',
        'uuid',
        'binary',
        'decimal',
        'any',
    ] = 'string'


class ArraySchema(_SchemaBase):
    kind: Literal['array'] = 'array'
    element: str


class DictionarySchema(_SchemaBase):
    kind: Literal['dictionary'] = 'dictionary'
    element: str


class ChoiceValue(_Node):
    value: Any
    language: Languages | None = None

    @property
    def description(self) -> str | None:
        if self.language is None:
            return None
        return self.language.preferred.description


class ChoiceSchema(_SchemaBase):
    """An open (expandable) enumeration."""

    kind: Literal['choice'] = 'choice'
    choice_type: str
    choices: list[ChoiceValue] = Field(default_factory=list)


class SealedChoiceSchema(_SchemaBase):
    """A closed enumeration."""

    kind: Literal['sealed-choice'] = 'sealed-choice'
    choice_type: str
    choices: list[ChoiceValue] = Field(default_factory=list)


class Property(_Node):
    name: str
    serialized_name: str | None = None
    schema_: str = Field(..., alias='schema')
    required: bool = False
    read_only: bool = False
    description: str | None = None


class ObjectSchema(_SchemaBase):
    kind: Literal['object'] = 'object'
    properties: list[Property] = Field(default_factory=list)
    parent: str | None = None
    discriminator: str | None = None
    discriminator_value: str | None = None


class UnionSchema(_SchemaBase):
    kind: Literal['union'] = 'union'
    variants: list[str] = Field(default_factory=list)


RawSchema = Annotated[
    PrimitiveSchema
    | ArraySchema
    | DictionarySchema
    | ChoiceSchema
    | SealedChoiceSchema
    | ObjectSchema
    | UnionSchema,
    Field(discriminator='kind'),
]


class ParameterLocation(str, Enum):
    URI = 'uri'
    PATH = 'path'
    QUERY = 'query'
    HEADER = 'header'
    BODY = 'body'


class RawParameter(_Node):
    name: str
    serialized_name: str | None = None
    location: ParameterLocation = ParameterLocation.QUERY
    schema_: str = Field(..., alias='schema')
    required: bool = False
    implementation: Literal['client', 'method'] = 'method'
    constant: Any = None
    description: str | None = None

    @property
    def wire_name(self) -> str:
        return self.serialized_name or self.name

    @property
    def is_constant(self) -> bool:
        return self.constant is not None


class RawResponse(_Node):
    status_codes: list[int] = Field(default_factory=lambda: [200])
    schema_: str | None = Field(None, alias='schema')
    content_type: str = 'application/json'


class Operation(_Node):
    name: str
    method: str = 'get'
    path: str = '/'
    summary: str | None = None
    description: str | None = None
    parameters: list[RawParameter] = Field(default_factory=list)
    responses: list[RawResponse] = Field(default_factory=list)
    exceptions: list[RawResponse] = Field(default_factory=list)


class OperationGroup(_Node):
    name: str = ''
    description: str | None = None
    operations: list[Operation] = Field(default_factory=list)

    @property
    def is_root(self) -> bool:
        return not self.name


class RawClient(_Node):
    name: str
    description: str | None = None
    # None: a sub-client uses its parent's host, a root client '{endpoint}'.
    host_template: str | None = None
    parameters: list[RawParameter] = Field(default_factory=list)
    operation_groups: list[OperationGroup] = Field(default_factory=list)
    sub_clients: list['RawClient'] = Field(default_factory=list)


class CodeModel(_Node):
    schemas: list[RawSchema] = Field(default_factory=list)
    clients: list[RawClient] = Field(default_factory=list)
    settings: dict[str, Any] = Field(default_factory=dict)
