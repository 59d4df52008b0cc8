"""AST utilities and import collection for code generation.

This module provides helper functions for building Python AST nodes
and utilities for collecting and organizing imports of generated files.
"""

import ast
import dataclasses
import keyword
import sys
from collections.abc import Iterable

PYTHON_KEYWORDS = set(keyword.kwlist)

__all__ = [
    # AST helpers
    '_name',
    '_attr',
    '_subscript',
    '_union_expr',
    '_argument',
    '_assign',
    '_call',
    '_func',
    '_async_func',
    '_docstring',
    '_raise_if_none',
    '_all',
    # Import collection
    'ImportSymbol',
    'ImportCollector',
]


def _name(name: str) -> ast.Name:
    return ast.Name(id=name, ctx=ast.Load())


def _attr(value: str | ast.expr, attr: str) -> ast.Attribute:
    return ast.Attribute(
        value=_name(value) if isinstance(value, str) else value,
        attr=attr,
        ctx=ast.Load(),
    )


def _subscript(generic: str | ast.expr, inner: ast.expr) -> ast.Subscript:
    return ast.Subscript(
        value=_name(generic) if isinstance(generic, str) else generic,
        slice=inner,
        ctx=ast.Load(),
    )


def _union_expr(types: list[ast.expr]) -> ast.expr:
    # A | B | C (using pipe operator instead of Union[A, B, C])
    if not types:
        raise ValueError('_union_expr requires at least one type')
    result = types[0]
    for t in types[1:]:
        result = ast.BinOp(left=result, op=ast.BitOr(), right=t)
    return result


def _argument(name: str, value: ast.expr | None = None) -> ast.arg:
    return ast.arg(
        arg=name,
        annotation=value,
    )


def _assign(target: ast.expr, value: ast.expr) -> ast.Assign:
    # Ensure target has Store context
    if isinstance(target, ast.Name):
        target = ast.Name(id=target.id, ctx=ast.Store())
    elif isinstance(target, ast.Attribute):
        target.ctx = ast.Store()
    return ast.Assign(
        targets=[target],
        value=value,
    )


def _call(
    func: ast.expr,
    args: list[ast.expr] | None = None,
    keywords: list[ast.keyword] | None = None,
) -> ast.Call:
    return ast.Call(
        func=func,
        args=args or [],
        keywords=keywords or [],
    )


def _arguments(
    args: list[ast.arg],
    defaults: list[ast.expr] | None = None,
    kwargs: ast.arg | None = None,
) -> ast.arguments:
    return ast.arguments(
        posonlyargs=[],
        args=args,
        kwarg=kwargs,
        kwonlyargs=[],
        kw_defaults=[],
        defaults=defaults or [],
    )


def _func(
    name: str,
    args: list[ast.arg],
    body: list[ast.stmt],
    returns: ast.expr | None = None,
    kwargs: ast.arg | None = None,
    defaults: list[ast.expr] | None = None,
    decorators: list[ast.expr] | None = None,
) -> ast.FunctionDef:
    return ast.FunctionDef(
        name=name,
        args=_arguments(args, defaults, kwargs),
        body=body,
        decorator_list=decorators or [],
        returns=returns,
    )


def _async_func(
    name: str,
    args: list[ast.arg],
    body: list[ast.stmt],
    returns: ast.expr | None = None,
    kwargs: ast.arg | None = None,
    defaults: list[ast.expr] | None = None,
    decorators: list[ast.expr] | None = None,
) -> ast.AsyncFunctionDef:
    return ast.AsyncFunctionDef(
        name=name,
        args=_arguments(args, defaults, kwargs),
        body=body,
        decorator_list=decorators or [],
        returns=returns,
    )


def _docstring(text: str) -> ast.Expr:
    return ast.Expr(value=ast.Constant(value=text))


def _raise_if_none(value: ast.expr, label: str) -> ast.If:
    """``if <value> is None: raise ValueError('Parameter <label> is required ...')``."""
    return ast.If(
        test=ast.Compare(
            left=value, ops=[ast.Is()], comparators=[ast.Constant(value=None)]
        ),
        body=[
            ast.Raise(
                exc=_call(
                    _name('ValueError'),
                    args=[
                        ast.Constant(
                            value=f'Parameter {label} is required and cannot be None.'
                        )
                    ],
                ),
                cause=None,
            )
        ],
        orelse=[],
    )


def _all(names: Iterable[str]) -> ast.Assign:
    return _assign(
        target=_name('__all__'),
        value=ast.List(
            elts=[ast.Constant(value=name) for name in names], ctx=ast.Load()
        ),
    )


# =============================================================================
# Import Collection
# =============================================================================


@dataclasses.dataclass(frozen=True, order=True)
class ImportSymbol:
    """One ``from <module> import <name>`` a generated file needs.

    Symbols needed only by annotations that would create an import cycle
    are marked ``type_checking`` and land in an ``if TYPE_CHECKING:`` block.
    """

    module: str
    name: str
    type_checking: bool = False


class ImportCollector:
    """Collects and manages imports for generated Python code.

    It deduplicates imports and sorts them for consistent output,
    independent of the order in which they were added.

    Example:
        >>> collector = ImportCollector()
        >>> collector.add_import('typing', 'Any')
        >>> collector.add_imports([ImportSymbol('typing', 'Any')])
        >>> imports = collector.to_ast()
        >>> # Returns [ImportFrom(module='typing', names=['Any'])]
    """

    def __init__(self, local_prefixes: Iterable[str] = ()):
        """Initialize an empty import collector.

        Args:
            local_prefixes: Module prefixes sorted after third-party imports.
        """
        self._imports: dict[str, set[str]] = {}
        self._type_checking: dict[str, set[str]] = {}
        self._local_prefixes = tuple(local_prefixes)

    def add_imports(self, symbols: Iterable[ImportSymbol]) -> None:
        for symbol in symbols:
            if symbol.type_checking:
                self.add_type_checking_import(symbol.module, symbol.name)
            else:
                self.add_import(symbol.module, symbol.name)

    def add_import(self, module: str, name: str) -> None:
        # Skip builtins - they don't need to be imported
        if module == 'builtins':
            return
        self._imports.setdefault(module, set()).add(name)

    def add_type_checking_import(self, module: str, name: str) -> None:
        if module == 'builtins':
            return
        self._type_checking.setdefault(module, set()).add(name)

    def _get_import_category(self, module: str) -> int:
        """Get the sort category for a module.

        Returns:
            0 for ``__future__``, 1 for standard library, 2 for third-party
            and 3 for modules of the generated package.
        """
        if module == '__future__':
            return 0
        if any(
            module == prefix or module.startswith(f'{prefix}.')
            for prefix in self._local_prefixes
        ):
            return 3
        if module.split('.')[0] in sys.stdlib_module_names:
            return 1
        return 2

    def _sorted_import_from(self, imports: dict[str, set[str]]) -> list[ast.ImportFrom]:
        return [
            ast.ImportFrom(
                module=module,
                names=[ast.alias(name=name, asname=None) for name in sorted(names)],
                level=0,
            )
            for module, names in sorted(
                imports.items(),
                key=lambda x: (self._get_import_category(x[0]), x[0]),
            )
        ]

    def to_ast(self) -> list[ast.stmt]:
        """Convert collected imports to AST statements.

        Runtime imports come first, sorted by category and module name,
        followed by the ``if TYPE_CHECKING:`` block when one is needed.
        """
        imports = {module: set(names) for module, names in self._imports.items()}
        # Names already imported at runtime never need the guarded import.
        type_checking = {
            module: names - imports.get(module, set())
            for module, names in self._type_checking.items()
        }
        type_checking = {module: names for module, names in type_checking.items() if names}
        if type_checking:
            imports.setdefault('typing', set()).add('TYPE_CHECKING')

        statements: list[ast.stmt] = list(self._sorted_import_from(imports))
        if type_checking:
            statements.append(
                ast.If(
                    test=_name('TYPE_CHECKING'),
                    body=list(self._sorted_import_from(type_checking)),
                    orelse=[],
                )
            )
        return statements

    def has_imports(self) -> bool:
        return bool(self._imports or self._type_checking)

    def clear(self) -> None:
        self._imports.clear()
        self._type_checking.clear()

    def get_modules(self) -> set[str]:
        return set(self._imports) | set(self._type_checking)
