"""Client model: the typed graph built by the mappers and read by the templates."""

from clientgen.clientmodel.clients import (
    ClientAccessorMethod,
    ClientMethod,
    ClientMethodParameter,
    ClientTree,
    Constructor,
    MethodGroupClient,
    MethodVariant,
    ParameterCheck,
    Proxy,
    ProxyMethod,
    ProxyMethodParameter,
    ServiceClient,
    ServiceClientProperty,
    Visibility,
)
from clientgen.clientmodel.models import ClientModel, ClientModelProperty, ModelRegistry
from clientgen.clientmodel.runtime import RuntimeSymbols, runtime_symbols
from clientgen.clientmodel.types import (
    ClassType,
    ClientType,
    EnumType,
    EnumValue,
    GenericType,
    ListType,
    MapType,
    PrimitiveType,
)

__all__ = [
    'ClientAccessorMethod',
    'ClientMethod',
    'ClientMethodParameter',
    'ClientTree',
    'Constructor',
    'MethodGroupClient',
    'MethodVariant',
    'ParameterCheck',
    'Proxy',
    'ProxyMethod',
    'ProxyMethodParameter',
    'ServiceClient',
    'ServiceClientProperty',
    'Visibility',
    'ClientModel',
    'ClientModelProperty',
    'ModelRegistry',
    'RuntimeSymbols',
    'runtime_symbols',
    'ClassType',
    'ClientType',
    'EnumType',
    'EnumValue',
    'GenericType',
    'ListType',
    'MapType',
    'PrimitiveType',
]
