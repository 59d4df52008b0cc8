"""Renderer of enum types."""

import ast
from collections.abc import Sequence

from clientgen.ast_utils import (
    ImportSymbol,
    _argument,
    _assign,
    _attr,
    _call,
    _docstring,
    _func,
    _name,
)
from clientgen.clientmodel.types import EnumType
from clientgen.config import GeneratorSettings
from clientgen.templates.base import (
    ExtraBlock,
    ExtraMethod,
    ImportSet,
    RenderResult,
    apply_extensions,
    class_def,
    unparse,
)

# Element types that can be mixed into the generated enum.
_MIXIN_TYPES = {'str', 'int', 'float'}


def _missing_method(mixin: str | None) -> ast.FunctionDef:
    # Values outside the declared set become pseudo-members instead of failing.
    if mixin is None:
        new_member = _call(_attr('object', '__new__'), [_name('cls')])
        guard = []
    else:
        new_member = _call(_attr(mixin, '__new__'), [_name('cls'), _name('value')])
        guard = [
            ast.If(
                test=ast.UnaryOp(
                    op=ast.Not(),
                    operand=_call(_name('isinstance'), [_name('value'), _name(mixin)]),
                ),
                body=[ast.Return(value=ast.Constant(value=None))],
                orelse=[],
            )
        ]
    return _func(
        '_missing_',
        [_argument('cls'), _argument('value', _name('object'))],
        [
            *guard,
            _assign(_name('member'), new_member),
            _assign(
                _attr('member', '_name_'),
                _call(_attr(_call(_name('str'), [_name('value')]), 'upper')),
            ),
            _assign(_attr('member', '_value_'), _name('value')),
            ast.Return(value=_name('member')),
        ],
        decorators=[_name('classmethod')],
    )


def _from_method(enum_type: EnumType, value_annotation: ast.expr) -> ast.FunctionDef:
    return _func(
        enum_type.from_method_name,
        [_argument('cls'), _argument('value', value_annotation)],
        [
            _docstring(f'Creates or finds a {enum_type.name} from its wire value.'),
            ast.If(
                test=ast.Compare(
                    left=_name('value'), ops=[ast.Is()], comparators=[ast.Constant(value=None)]
                ),
                body=[ast.Return(value=ast.Constant(value=None))],
                orelse=[],
            ),
            ast.Return(value=_call(_name('cls'), [_name('value')])),
        ],
        returns=ast.BinOp(
            left=_name(enum_type.name), op=ast.BitOr(), right=ast.Constant(value=None)
        ),
        decorators=[_name('classmethod')],
    )


def _to_method(enum_type: EnumType, value_annotation: ast.expr) -> ast.FunctionDef:
    return _func(
        enum_type.to_method_name,
        [_argument('self')],
        [
            _docstring(f'Returns the wire value of the {enum_type.name} instance.'),
            ast.Return(value=_attr('self', 'value')),
        ],
        returns=value_annotation,
    )


def render_enum(
    enum_type: EnumType,
    settings: GeneratorSettings,
    extra_methods: Sequence[ExtraMethod] = (),
    extra_block: ExtraBlock | None = None,
) -> RenderResult:
    """Render an enum as an ``Enum`` subclass.

    Enums over strings, integers and floats mix in the element type so that
    members compare equal to their wire values. Expandable enums accept
    unknown values through ``_missing_``.
    """
    imports = ImportSet(enum_type.module)
    imports.add(ImportSymbol('enum', 'Enum'))

    element = enum_type.element_type
    mixin = element.name if element.name in _MIXIN_TYPES else None
    imports.runtime(element)
    value_annotation = element.annotation(enum_type.module)

    description = enum_type.description or f'Defines values for {enum_type.name}.'
    body: list[ast.stmt] = [_docstring(description)]
    for value in enum_type.values:
        body.append(_assign(_name(value.name), ast.Constant(value=value.value)))
        if value.description:
            body.append(_docstring(value.description))

    if enum_type.expandable:
        body.append(_missing_method(mixin))
    if enum_type.from_method_name:
        body.append(_from_method(enum_type, value_annotation))
    if enum_type.to_method_name:
        body.append(_to_method(enum_type, value_annotation))

    body.extend(apply_extensions(enum_type, settings, imports, extra_methods, extra_block))

    bases = [_name(mixin), _name('Enum')] if mixin else [_name('Enum')]
    node = class_def(enum_type.name, bases, body)
    return RenderResult(unparse([node]), imports.frozen())
