"""Schema to client type resolution.

``TypeMapper`` is the single entry point of type mapping. Every schema is
resolved at most once; the result is cached on the schema's arena index so
that the same schema always yields the same ClientType instance.
"""

import logging
import threading
from collections import deque
from collections.abc import Callable

from clientgen.clientmodel.models import ModelRegistry
from clientgen.clientmodel.types import (
    ClientType,
    GenericType,
    ListType,
    MapType,
    PrimitiveType,
)
from clientgen.codemodel.arena import SchemaArena
from clientgen.codemodel.models import (
    ArraySchema,
    ChoiceSchema,
    DictionarySchema,
    ObjectSchema,
    PrimitiveSchema,
    SealedChoiceSchema,
    UnionSchema,
)
from clientgen.config import GeneratorSettings
from clientgen.exceptions import UnresolvableTypeReferenceError
from clientgen.mapper.enum_mapper import EnumMapper
from clientgen.mapper.model_mapper import ModelMapper

logger = logging.getLogger(__name__)

_PRIMITIVE_TYPE_MAP = {
    'string': PrimitiveType.STRING,
    'integer': PrimitiveType.INT,
    'number': PrimitiveType.FLOAT,
    'boolean': PrimitiveType.BOOL,
    'date-time': PrimitiveType.DATETIME,
    'date': PrimitiveType.DATE,
    'time': PrimitiveType.TIME,
    'duration': PrimitiveType.TIMEDELTA,
    'uuid': PrimitiveType.UUID,
    'binary': PrimitiveType.BYTES,
    'decimal': PrimitiveType.DECIMAL,
    'any': PrimitiveType.ANY,
}


class TypeMapper:
    """Resolves schemas of one code model into client types.

    Object models are cached before their properties are mapped, and the
    properties themselves are mapped once the outermost resolution finishes,
    so models may refer to themselves directly or through collections. Any
    other cycle (an array containing itself, a class inheriting from its own
    descendant) cannot be expressed and raises.

    The cache is guarded by a re-entrant lock; concurrent callers never
    create two instances for one schema.

    Example:
        >>> mapper = TypeMapper(arena, settings)
        >>> mapper.resolve_reference('Widget') is mapper.resolve_reference('Widget')
        True
    """

    def __init__(
        self,
        arena: SchemaArena,
        settings: GeneratorSettings,
        registry: ModelRegistry | None = None,
    ):
        self.arena = arena
        self.settings = settings
        self.registry = registry if registry is not None else ModelRegistry()
        self.enum_mapper = EnumMapper(self)
        self.model_mapper = ModelMapper(self)

        self._cache: dict[int, ClientType] = {}
        self._in_progress: set[int] = set()
        self._deferred: deque[Callable[[], None]] = deque()
        self._depth = 0
        self._lock = threading.RLock()

    def resolve(self, schema) -> ClientType:
        return self.resolve_index(self.arena.index_of(schema.id))

    def resolve_reference(self, reference: str, referrer: str | None = None) -> ClientType:
        """Resolve a schema id.

        Args:
            reference: The referenced schema id.
            referrer: Path of the node holding the reference, for error reporting.

        Raises:
            UnresolvableTypeReferenceError: If the id is unknown or cyclic.
        """
        return self.resolve_index(self.arena.index_of(reference, referrer))

    def resolve_index(self, index: int) -> ClientType:
        with self._lock:
            cached = self._cache.get(index)
            if cached is not None:
                return cached

            if index in self._in_progress:
                schema = self.arena[index]
                raise UnresolvableTypeReferenceError(
                    schema.id,
                    schema_path=schema.name or schema.id,
                    reason='the schema refers to itself through its elements or parents',
                )

            self._in_progress.add(index)
            self._depth += 1
            try:
                client_type = self._map(index)
                self._cache[index] = client_type
            except Exception:
                self._deferred.clear()
                raise
            finally:
                self._in_progress.discard(index)
                self._depth -= 1

            if self._depth == 0:
                self._run_deferred()
            return client_type

    def cache(self, index: int, client_type: ClientType) -> None:
        """Publish the type of a schema before its resolution has finished."""
        with self._lock:
            self._cache[index] = client_type
            self._in_progress.discard(index)

    def defer(self, task: Callable[[], None]) -> None:
        """Run ``task`` once the outermost resolution has finished."""
        self._deferred.append(task)

    def resolve_all(self) -> None:
        """Resolve every schema of the arena, in declaration order."""
        for index in range(len(self.arena)):
            self.resolve_index(index)
        logger.debug(
            f'Resolved {len(self.arena)} schemas into {len(self.registry.enums())} enums '
            f'and {len(self.registry.models())} models'
        )

    def _run_deferred(self) -> None:
        self._depth += 1
        try:
            while self._deferred:
                task = self._deferred.popleft()
                task()
        except Exception:
            self._deferred.clear()
            raise
        finally:
            self._depth -= 1

    def _map(self, index: int) -> ClientType:
        schema = self.arena[index]

        if isinstance(schema, PrimitiveSchema):
            return _PRIMITIVE_TYPE_MAP[schema.type]

        if isinstance(schema, ArraySchema):
            return ListType(self.resolve_reference(schema.element, referrer=schema.id))

        if isinstance(schema, DictionarySchema):
            return MapType(self.resolve_reference(schema.element, referrer=schema.id))

        if isinstance(schema, (ChoiceSchema, SealedChoiceSchema)):
            return self.enum_mapper.resolve(
                schema,
                expandable=isinstance(schema, ChoiceSchema),
                use_source_member_names=self.settings.use_source_enum_member_names,
            )

        if isinstance(schema, ObjectSchema):
            return self.model_mapper.resolve(index, schema)

        if isinstance(schema, UnionSchema):
            return self._map_union(schema)

        raise UnresolvableTypeReferenceError(
            schema.id, reason=f'unsupported schema kind {schema.kind!r}'
        )

    def _map_union(self, schema: UnionSchema) -> ClientType:
        variants: list[ClientType] = []
        for variant in schema.variants:
            client_type = self.resolve_reference(variant, referrer=schema.id)
            if not any(existing is client_type for existing in variants):
                variants.append(client_type)

        if not variants:
            return PrimitiveType.ANY
        if len(variants) == 1:
            return variants[0]
        return GenericType('Union', 'typing', tuple(variants))
