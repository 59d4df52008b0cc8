"""Package placement of generated types."""

from clientgen.codemodel.models import SchemaContext, _SchemaBase
from clientgen.config import GeneratorSettings


def get_type_package(schema: _SchemaBase, name: str, settings: GeneratorSettings) -> str:
    """Return the package a generated enum or model class is placed in.

    Custom types win, then internal data-plane types go to the implementation
    models package, everything else to the models package. A python
    namespace on the schema replaces the root namespace.
    """
    python = schema.language.python
    namespace = python.namespace if python is not None else None

    if settings.is_custom_type(name):
        return settings.get_package(settings.custom_types_subpackage, namespace=namespace)
    if settings.is_data_plane_client and SchemaContext.INTERNAL in schema.usage:
        return settings.get_package(
            settings.implementation_subpackage,
            settings.models_subpackage,
            namespace=namespace,
        )
    return settings.get_package(settings.models_subpackage, namespace=namespace)
