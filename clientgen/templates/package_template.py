"""Renderer of package ``__init__`` modules."""

import ast
import dataclasses

from clientgen.ast_utils import ImportSymbol, _all, _attr, _call
from clientgen.clientmodel.types import ClassType
from clientgen.config import GeneratorSettings
from clientgen.templates.base import ExtraBlock, ImportSet, RenderResult, unparse


@dataclasses.dataclass
class PackageInfo:
    """Contents of one generated package.

    Attributes:
        name: Dotted package name.
        exports: Classes defined by modules of the package, re-exported.
        models: Model classes rebuilt once every export is importable.
        dependencies: Classes of other packages the models refer to.
    """

    name: str
    exports: list[ClassType] = dataclasses.field(default_factory=list)
    models: list[ClassType] = dataclasses.field(default_factory=list)
    dependencies: list[ClassType] = dataclasses.field(default_factory=list)

    @property
    def module(self) -> str:
        return f'{self.name}.__init__'


def render_package(
    package: PackageInfo,
    settings: GeneratorSettings,
    extra_block: ExtraBlock | None = None,
) -> RenderResult:
    """Render the ``__init__`` of a package.

    Models refer to each other through ``TYPE_CHECKING`` imports, so each
    model is rebuilt here, where every class it needs has been imported.
    """
    imports = ImportSet(package.module)
    exports = sorted(package.exports, key=lambda c: c.name)
    for class_type in exports:
        imports.add(ImportSymbol(class_type.module, class_type.name))
    for class_type in package.dependencies:
        imports.add(ImportSymbol(class_type.module, class_type.name))

    body: list[ast.stmt] = [_all(c.name for c in exports)]
    for model in sorted(package.models, key=lambda c: c.name):
        body.append(ast.Expr(value=_call(_attr(model.name, 'model_rebuild'))))

    if extra_block is not None:
        statements, symbols = extra_block(package, settings)
        body.extend(statements)
        imports.update(symbols)

    return RenderResult(unparse(body), imports.frozen())
