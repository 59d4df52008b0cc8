"""Client types: the resolved, Python-level representation of schemas.

Each type knows the annotation expression it renders to and the imports
that expression needs. Class-like types compare by identity: two schemas
that share a display name still resolve to two distinct instances.
"""

import ast
import dataclasses

from clientgen.ast_utils import ImportSymbol, _name, _subscript
from clientgen.naming import module_name_for_class

__all__ = [
    'ClientType',
    'PrimitiveType',
    'ClassType',
    'EnumValue',
    'EnumType',
    'ListType',
    'MapType',
    'GenericType',
]


class ClientType:
    """Base class of all client types."""

    def annotation(self, current_module: str | None = None) -> ast.expr:
        raise NotImplementedError

    def imports(
        self, current_module: str | None = None, type_checking: bool = False
    ) -> set[ImportSymbol]:
        raise NotImplementedError

    def class_types(self) -> list['ClassType']:
        """Generated classes this type refers to, in order of appearance."""
        return []

    def __str__(self) -> str:
        return ast.unparse(self.annotation())


@dataclasses.dataclass(frozen=True)
class PrimitiveType(ClientType):
    name: str
    module: str = 'builtins'

    def annotation(self, current_module: str | None = None) -> ast.expr:
        if self.name == 'None':
            return ast.Constant(value=None)
        return _name(self.name)

    def imports(
        self, current_module: str | None = None, type_checking: bool = False
    ) -> set[ImportSymbol]:
        if self.module == 'builtins':
            return set()
        return {ImportSymbol(self.module, self.name)}


PrimitiveType.STRING = PrimitiveType('str')
PrimitiveType.INT = PrimitiveType('int')
PrimitiveType.FLOAT = PrimitiveType('float')
PrimitiveType.BOOL = PrimitiveType('bool')
PrimitiveType.BYTES = PrimitiveType('bytes')
PrimitiveType.NONE = PrimitiveType('None')
PrimitiveType.DATETIME = PrimitiveType('datetime', 'datetime')
PrimitiveType.DATE = PrimitiveType('date', 'datetime')
PrimitiveType.TIME = PrimitiveType('time', 'datetime')
PrimitiveType.TIMEDELTA = PrimitiveType('timedelta', 'datetime')
PrimitiveType.UUID = PrimitiveType('UUID', 'uuid')
PrimitiveType.DECIMAL = PrimitiveType('Decimal', 'decimal')
PrimitiveType.ANY = PrimitiveType('Any', 'typing')


@dataclasses.dataclass(eq=False)
class ClassType(ClientType):
    package: str
    name: str
    description: str | None = None

    @property
    def module(self) -> str:
        return f'{self.package}.{module_name_for_class(self.name)}'

    @property
    def full_name(self) -> str:
        return f'{self.package}.{self.name}'

    def annotation(self, current_module: str | None = None) -> ast.expr:
        return _name(self.name)

    def imports(
        self, current_module: str | None = None, type_checking: bool = False
    ) -> set[ImportSymbol]:
        if self.module == current_module:
            return set()
        return {ImportSymbol(self.module, self.name, type_checking)}

    def class_types(self) -> list['ClassType']:
        return [self]

    def __str__(self) -> str:
        return self.name


@dataclasses.dataclass(frozen=True)
class EnumValue:
    name: str
    value: object
    description: str | None = None


@dataclasses.dataclass(eq=False)
class EnumType(ClassType):
    values: list[EnumValue] = dataclasses.field(default_factory=list)
    expandable: bool = False
    element_type: PrimitiveType = PrimitiveType.STRING
    from_method_name: str | None = None
    to_method_name: str | None = None
    schema_index: int | None = None


@dataclasses.dataclass(eq=False)
class ListType(ClientType):
    element: ClientType

    def annotation(self, current_module: str | None = None) -> ast.expr:
        return _subscript('list', self.element.annotation(current_module))

    def imports(
        self, current_module: str | None = None, type_checking: bool = False
    ) -> set[ImportSymbol]:
        return self.element.imports(current_module, type_checking)

    def class_types(self) -> list[ClassType]:
        return self.element.class_types()


@dataclasses.dataclass(eq=False)
class MapType(ClientType):
    element: ClientType

    def annotation(self, current_module: str | None = None) -> ast.expr:
        return _subscript(
            'dict',
            ast.Tuple(
                elts=[_name('str'), self.element.annotation(current_module)],
                ctx=ast.Load(),
            ),
        )

    def imports(
        self, current_module: str | None = None, type_checking: bool = False
    ) -> set[ImportSymbol]:
        return self.element.imports(current_module, type_checking)

    def class_types(self) -> list[ClassType]:
        return self.element.class_types()


@dataclasses.dataclass(eq=False)
class GenericType(ClientType):
    """A parameterized runtime or typing class, e.g. ``Response[Widget]``."""

    name: str
    module: str
    type_arguments: tuple[ClientType, ...] = ()

    def annotation(self, current_module: str | None = None) -> ast.expr:
        if not self.type_arguments:
            return _name(self.name)
        arguments = [t.annotation(current_module) for t in self.type_arguments]
        inner = arguments[0] if len(arguments) == 1 else ast.Tuple(elts=arguments, ctx=ast.Load())
        return _subscript(self.name, inner)

    def imports(
        self, current_module: str | None = None, type_checking: bool = False
    ) -> set[ImportSymbol]:
        symbols = {ImportSymbol(self.module, self.name)}
        for argument in self.type_arguments:
            symbols |= argument.imports(current_module, type_checking)
        return symbols

    def class_types(self) -> list[ClassType]:
        found: list[ClassType] = []
        for argument in self.type_arguments:
            found.extend(argument.class_types())
        return found

