"""Input code model: validated schemas, operations and clients."""

from clientgen.codemodel.arena import SchemaArena
from clientgen.codemodel.loader import CodeModelLoader
from clientgen.codemodel.models import (
    ArraySchema,
    ChoiceSchema,
    ChoiceValue,
    CodeModel,
    DictionarySchema,
    Language,
    Languages,
    ObjectSchema,
    Operation,
    OperationGroup,
    ParameterLocation,
    PrimitiveSchema,
    Property,
    RawClient,
    RawParameter,
    RawResponse,
    RawSchema,
    SchemaContext,
    SealedChoiceSchema,
    UnionSchema,
)

__all__ = [
    'SchemaArena',
    'CodeModelLoader',
    'ArraySchema',
    'ChoiceSchema',
    'ChoiceValue',
    'CodeModel',
    'DictionarySchema',
    'Language',
    'Languages',
    'ObjectSchema',
    'Operation',
    'OperationGroup',
    'ParameterLocation',
    'PrimitiveSchema',
    'Property',
    'RawClient',
    'RawParameter',
    'RawResponse',
    'RawSchema',
    'SchemaContext',
    'SealedChoiceSchema',
    'UnionSchema',
]
