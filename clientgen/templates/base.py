"""Shared pieces of the renderers."""

import ast
import dataclasses
import textwrap
from collections.abc import Callable, Iterable, Sequence

from clientgen.ast_utils import ImportSymbol, _argument, _assign, _call, _docstring, _name
from clientgen.clientmodel.clients import ClientMethodParameter
from clientgen.clientmodel.types import ClassType, ClientType, EnumType
from clientgen.config import GeneratorSettings


@dataclasses.dataclass(frozen=True)
class RenderResult:
    """Source text of one rendered node and the symbols it needs imported."""

    text: str
    imports: frozenset[ImportSymbol] = frozenset()


@dataclasses.dataclass(frozen=True)
class ExtraMethod:
    """A pre-built method appended to a rendered class.

    Attributes:
        node: The function definition.
        imports: Symbols the function needs.
    """

    node: ast.FunctionDef | ast.AsyncFunctionDef
    imports: frozenset[ImportSymbol] = frozenset()


# Called with the node being rendered and the settings; returns statements
# appended to the class body and the symbols they need.
ExtraBlock = Callable[[object, GeneratorSettings], tuple[list[ast.stmt], Iterable[ImportSymbol]]]


class ImportSet:
    """Accumulates the imports of one rendered file."""

    def __init__(self, current_module: str):
        self.current_module = current_module
        self._symbols: set[ImportSymbol] = set()

    def add(self, *symbols: ImportSymbol) -> None:
        for symbol in symbols:
            if symbol.module != self.current_module:
                self._symbols.add(symbol)

    def update(self, symbols: Iterable[ImportSymbol]) -> None:
        self.add(*symbols)

    def runtime(self, client_type: ClientType) -> None:
        """Import everything ``client_type`` refers to at runtime."""
        self.update(client_type.imports(self.current_module))

    def annotation(
        self,
        client_type: ClientType,
        runtime: Callable[[ClassType], bool] = lambda class_type: False,
    ) -> None:
        """Import what an annotation of ``client_type`` needs.

        Generated classes are imported for type checking only unless
        ``runtime`` says otherwise; stdlib and runtime library types are
        always imported.
        """
        guarded = {
            (c.module, c.name) for c in client_type.class_types() if not runtime(c)
        }
        for symbol in client_type.imports(self.current_module):
            if (symbol.module, symbol.name) in guarded:
                symbol = ImportSymbol(symbol.module, symbol.name, type_checking=True)
            self.add(symbol)

    def frozen(self) -> frozenset[ImportSymbol]:
        return frozenset(self._symbols)


def is_enum(class_type: ClassType) -> bool:
    return isinstance(class_type, EnumType)


def format_docstring(
    summary: str | None,
    args: Sequence[tuple[str, str | None]] = (),
    returns: str | None = None,
    raises: Sequence[tuple[str, str]] = (),
    indent: int = 4,
) -> ast.Expr | None:
    """Build a Google style docstring, or None when there is nothing to say.

    ``indent`` is the column of the docstring in the emitted file.
    """
    sections = []
    if summary:
        sections.append(textwrap.dedent(summary).strip())

    documented_args = [(name, text) for name, text in args if text]
    if documented_args:
        lines = ['Args:'] + [f'    {name}: {text.strip()}' for name, text in documented_args]
        sections.append('\n'.join(lines))
    if raises:
        lines = ['Raises:'] + [f'    {name}: {text}' for name, text in raises]
        sections.append('\n'.join(lines))
    if returns:
        sections.append(f'Returns:\n    {returns}')

    if not sections:
        return None
    text = '\n\n'.join(sections)
    if '\n' in text:
        prefix = ' ' * indent
        text = textwrap.indent(text, prefix).lstrip() + '\n' + prefix
    return _docstring(text)


def with_docstring(docstring: ast.Expr | None, body: list[ast.stmt]) -> list[ast.stmt]:
    return ([docstring] if docstring is not None else []) + body


def parameter_arguments(
    parameters: Sequence[ClientMethodParameter],
    imports: ImportSet,
) -> tuple[list[ast.arg], list[ast.expr]]:
    """Arguments and defaults of a signature.

    An optional parameter and every parameter after it default to None.
    """
    args = []
    defaults = []
    optional = False
    for parameter in parameters:
        imports.annotation(parameter.type)
        annotation = parameter.type.annotation(imports.current_module)
        optional = optional or not parameter.required
        if optional:
            annotation = ast.BinOp(left=annotation, op=ast.BitOr(), right=ast.Constant(value=None))
            defaults.append(ast.Constant(value=None))
        args.append(_argument(parameter.name, annotation))
    return args, defaults


def class_def(
    name: str,
    bases: list[ast.expr],
    body: list[ast.stmt],
    decorators: list[ast.expr] | None = None,
) -> ast.ClassDef:
    return ast.ClassDef(
        name=name,
        bases=bases,
        keywords=[],
        body=body or [ast.Pass()],
        decorator_list=decorators or [],
        type_params=[],
    )


def unparse(body: list[ast.stmt]) -> str:
    module = ast.Module(body=body, type_ignores=[])
    ast.fix_missing_locations(module)
    return ast.unparse(module)


def apply_extensions(
    node: object,
    settings: GeneratorSettings,
    imports: ImportSet,
    extra_methods: Sequence[ExtraMethod],
    extra_block: ExtraBlock | None,
) -> list[ast.stmt]:
    """Statements contributed by the caller: extra methods, then the extra block."""
    body: list[ast.stmt] = []
    for method in extra_methods:
        body.append(method.node)
        imports.update(method.imports)
    if extra_block is not None:
        statements, symbols = extra_block(node, settings)
        body.extend(statements)
        imports.update(symbols)
    return body


def logger_block(settings: GeneratorSettings, imports: ImportSet) -> list[ast.stmt]:
    """``_LOGGER = getLogger(__name__)`` when clients carry a logger."""
    if not settings.use_client_logger:
        return []
    imports.add(ImportSymbol('logging', 'getLogger'))
    return [_assign(_name('_LOGGER'), _call(_name('getLogger'), [_name('__name__')]))]
