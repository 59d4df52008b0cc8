"""Model descriptors and the registry shared by all clients of a run."""

import dataclasses

from clientgen.clientmodel.types import ClassType, ClientType, EnumType


@dataclasses.dataclass
class ClientModelProperty:
    """A field of a generated model class.

    Attributes:
        name: Python attribute name.
        serialized_name: Name of the field on the wire.
        type: Resolved type of the field.
        required: Whether the field must be supplied.
        read_only: Whether the field is populated by the service only.
        description: Documentation of the field.
    """

    name: str
    serialized_name: str
    type: ClientType
    required: bool = False
    read_only: bool = False
    description: str | None = None


@dataclasses.dataclass(eq=False)
class ClientModel:
    """A generated model class (object schema or XML wrapper).

    Attributes:
        type: The ClassType the model is emitted as.
        properties: Fields declared on this class (inherited ones excluded).
        parent: The ClassType of the polymorphic parent, if any.
        discriminator: Wire name of the discriminator field, declared here or inherited.
        discriminator_value: Value identifying this class among its siblings.
        xml_name: Element name for XML-wrapped models.
        schema_index: Arena index of the source schema, if any.
    """

    type: ClassType
    properties: list[ClientModelProperty] = dataclasses.field(default_factory=list)
    parent: ClassType | None = None
    discriminator: str | None = None
    discriminator_value: str | None = None
    xml_name: str | None = None
    schema_index: int | None = None

    @property
    def name(self) -> str:
        return self.type.name

    @property
    def package(self) -> str:
        return self.type.package


class ModelRegistry:
    """Registry of every enum and model emitted by a run.

    Types are shared between clients; the registry owns them. Registration is
    keyed on the ClassType instance, so two types sharing a name in different
    packages coexist.

    Example:
        >>> registry = ModelRegistry()
        >>> registry.register_enum(enum_type)
        >>> for model in registry.models():
        ...     render(model)
    """

    def __init__(self):
        self._enums: list[EnumType] = []
        self._models: list[ClientModel] = []
        self._model_by_type: dict[int, ClientModel] = {}
        self._by_full_name: dict[str, ClassType] = {}

    def register_enum(self, enum_type: EnumType) -> EnumType:
        if any(existing is enum_type for existing in self._enums):
            return enum_type
        self.reserve(enum_type)
        self._enums.append(enum_type)
        return enum_type

    def register_model(self, model: ClientModel) -> ClientModel:
        existing = self._model_by_type.get(id(model.type))
        if existing is not None:
            return existing
        self.reserve(model.type)
        self._models.append(model)
        self._model_by_type[id(model.type)] = model
        return model

    def unique_name(self, package: str, name: str) -> str:
        """Return ``name``, or ``name`` with a counter if the package already has it."""
        if f'{package}.{name}' not in self._by_full_name:
            return name
        counter = 1
        while f'{package}.{name}{counter}' in self._by_full_name:
            counter += 1
        return f'{name}{counter}'

    def reserve(self, class_type: ClassType) -> None:
        """Claim the full name of a type before it is registered."""
        existing = self._by_full_name.get(class_type.full_name)
        if existing is not None and existing is not class_type:
            raise ValueError(f"Type '{class_type.full_name}' is already registered")
        self._by_full_name[class_type.full_name] = class_type

    def get_model(self, class_type: ClassType) -> ClientModel | None:
        return self._model_by_type.get(id(class_type))

    def get_type(self, full_name: str) -> ClassType | None:
        return self._by_full_name.get(full_name)

    def enums(self) -> list[EnumType]:
        return list(self._enums)

    def models(self) -> list[ClientModel]:
        return list(self._models)
