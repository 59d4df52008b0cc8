"""Schema arena: stable integer keys for every schema of a code model.

Mapper caches are keyed on the arena index of a schema rather than on its
name (distinct schemas may share a display name) or on Python object
identity.
"""

from collections.abc import Iterator

from clientgen.codemodel.models import CodeModel, RawSchema
from clientgen.exceptions import CodeModelValidationError, UnresolvableTypeReferenceError


class SchemaArena:
    """Indexes the schemas of a code model in declaration order.

    Example:
        >>> arena = SchemaArena.from_code_model(code_model)
        >>> index = arena.index_of('Widget')
        >>> arena[index].kind
        'object'
    """

    def __init__(self, schemas: list[RawSchema], source: str = '<code model>'):
        self._nodes: list[RawSchema] = []
        self._index_by_id: dict[str, int] = {}

        duplicates = []
        for schema in schemas:
            if schema.id in self._index_by_id:
                duplicates.append(f"duplicate schema id '{schema.id}'")
                continue
            self._index_by_id[schema.id] = len(self._nodes)
            self._nodes.append(schema)

        if duplicates:
            raise CodeModelValidationError(source, errors=duplicates)

    @classmethod
    def from_code_model(cls, code_model: CodeModel, source: str = '<code model>') -> 'SchemaArena':
        return cls(code_model.schemas, source=source)

    def index_of(self, reference: str, referrer: str | None = None) -> int:
        """Return the arena index of a schema id.

        Args:
            reference: The referenced schema id.
            referrer: Path of the node holding the reference, for error reporting.

        Raises:
            UnresolvableTypeReferenceError: If no schema has that id.
        """
        try:
            return self._index_by_id[reference]
        except KeyError:
            raise UnresolvableTypeReferenceError(
                reference, schema_path=referrer, reason='no schema with this id'
            ) from None

    def get(self, reference: str, referrer: str | None = None) -> RawSchema:
        return self._nodes[self.index_of(reference, referrer)]

    def __getitem__(self, index: int) -> RawSchema:
        return self._nodes[index]

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[RawSchema]:
        return iter(self._nodes)

    def __contains__(self, reference: str) -> bool:
        return reference in self._index_by_id
