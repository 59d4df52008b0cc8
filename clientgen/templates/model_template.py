"""Renderer of model classes (object schemas and XML wrappers)."""

import ast
from collections.abc import Sequence

from clientgen.ast_utils import ImportSymbol, _assign, _call, _docstring, _name, _subscript
from clientgen.clientmodel.models import ClientModel, ClientModelProperty
from clientgen.config import GeneratorSettings
from clientgen.naming import to_snake_case
from clientgen.templates.base import (
    ExtraBlock,
    ExtraMethod,
    ImportSet,
    RenderResult,
    apply_extensions,
    class_def,
    is_enum,
    unparse,
)


def _field(prop: ClientModelProperty, imports: ImportSet) -> ast.AnnAssign:
    imports.annotation(prop.type, runtime=is_enum)
    annotation = prop.type.annotation(imports.current_module)

    args: list[ast.expr] = []
    keywords: list[ast.keyword] = []
    if not prop.required:
        annotation = ast.BinOp(left=annotation, op=ast.BitOr(), right=ast.Constant(value=None))
        args.append(ast.Constant(value=None))
    if prop.serialized_name != prop.name:
        keywords.append(ast.keyword(arg='alias', value=ast.Constant(prop.serialized_name)))
    if prop.description:
        keywords.append(ast.keyword(arg='description', value=ast.Constant(prop.description)))
    if prop.read_only:
        keywords.append(ast.keyword(arg='frozen', value=ast.Constant(True)))

    value = None
    if args or keywords:
        imports.add(ImportSymbol('pydantic', 'Field'))
        value = _call(_name('Field'), args, keywords)

    return ast.AnnAssign(target=_name(prop.name), annotation=annotation, value=value, simple=1)


def _discriminator_field(model: ClientModel, imports: ImportSet) -> ast.AnnAssign:
    # Subtypes pin the inherited discriminator to their own value.
    imports.add(ImportSymbol('typing', 'Literal'), ImportSymbol('pydantic', 'Field'))
    name = to_snake_case(model.discriminator)
    keywords = []
    if name != model.discriminator:
        keywords.append(ast.keyword(arg='alias', value=ast.Constant(model.discriminator)))
    return ast.AnnAssign(
        target=_name(name),
        annotation=_subscript('Literal', ast.Constant(model.discriminator_value)),
        value=_call(_name('Field'), [ast.Constant(model.discriminator_value)], keywords),
        simple=1,
    )


def render_model(
    model: ClientModel,
    settings: GeneratorSettings,
    extra_methods: Sequence[ExtraMethod] = (),
    extra_block: ExtraBlock | None = None,
) -> RenderResult:
    """Render a model as a pydantic ``BaseModel``.

    Fields use their Python names and carry the wire name as alias. Other
    generated models are imported for type checking only; the package
    ``__init__`` rebuilds the models once every class is importable.
    """
    imports = ImportSet(model.type.module)

    body: list[ast.stmt] = []
    if model.type.description:
        body.append(_docstring(model.type.description))

    if model.parent is None:
        imports.add(ImportSymbol('pydantic', 'BaseModel'), ImportSymbol('pydantic', 'ConfigDict'))
        bases = [_name('BaseModel')]
        body.append(
            _assign(
                _name('model_config'),
                _call(
                    _name('ConfigDict'),
                    keywords=[ast.keyword(arg='populate_by_name', value=ast.Constant(True))],
                ),
            )
        )
    else:
        imports.runtime(model.parent)
        bases = [model.parent.annotation(imports.current_module)]

    if model.xml_name:
        imports.add(ImportSymbol('typing', 'ClassVar'))
        body.append(
            ast.AnnAssign(
                target=_name('xml_name'),
                annotation=_subscript('ClassVar', _name('str')),
                value=ast.Constant(model.xml_name),
                simple=1,
            )
        )

    if model.discriminator and model.discriminator_value is not None:
        discriminator = to_snake_case(model.discriminator)
        body.append(_discriminator_field(model, imports))
        properties = [p for p in model.properties if p.name != discriminator]
    else:
        properties = model.properties

    for prop in properties:
        body.append(_field(prop, imports))

    body.extend(apply_extensions(model, settings, imports, extra_methods, extra_block))

    node = class_def(model.name, bases, body)
    return RenderResult(unparse([node]), imports.frozen())
