"""Mappers lowering the code model into the client model."""

from clientgen.mapper.client_builder import ClientModelBuilder
from clientgen.mapper.enum_mapper import EnumMapper
from clientgen.mapper.method_mapper import MethodMapper
from clientgen.mapper.model_mapper import ModelMapper
from clientgen.mapper.response_mapper import ResponseMapper, get_lowest_common_schema
from clientgen.mapper.type_mapper import TypeMapper

__all__ = [
    'ClientModelBuilder',
    'EnumMapper',
    'MethodMapper',
    'ModelMapper',
    'ResponseMapper',
    'TypeMapper',
    'get_lowest_common_schema',
]
