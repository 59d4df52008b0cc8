import os
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

from clientgen.exceptions import ConfigurationError

DEFAULT_FILENAMES = ['clientgen.yaml', 'clientgen.yml']


class PipelineGeneration(str, Enum):
    """Generations of the wire pipeline the emitted clients call into."""

    AZURE_V1 = 'azure-v1'
    AZURE_V2 = 'azure-v2'
    CLIENTCORE = 'clientcore'


class GeneratorSettings(BaseModel):
    """Immutable settings of one generation run.

    Built once per run and passed explicitly to every mapper and renderer.
    Keys may be given in snake_case or camelCase (``isFluent``).
    """

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    namespace: str = Field('', description='Root package of the generated client.')

    is_fluent: bool = Field(
        False, description='Generate management-plane (fluent) clients.'
    )

    is_data_plane_client: bool = Field(
        False, description='Generate flat data-plane clients.'
    )

    generate_sync_methods: bool = Field(
        True, description='Generate synchronous client methods.'
    )

    generate_async_methods: bool = Field(
        True, description='Generate asynchronous client methods.'
    )

    pipeline_generation: PipelineGeneration = Field(
        PipelineGeneration.AZURE_V2,
        description='Wire-pipeline generation the emitted code targets.',
    )

    custom_types: frozenset[str] = Field(
        frozenset(),
        description='Type names placed in the custom types package.',
    )

    custom_types_subpackage: str = Field(
        '', description='Subpackage holding custom types (empty for the root).'
    )

    models_subpackage: str = Field('models', description='Subpackage for models.')

    implementation_subpackage: str = Field(
        'implementation', description='Subpackage for implementation details.'
    )

    use_client_logger: bool = Field(
        False, description='Give every client class a module logger.'
    )

    use_source_enum_member_names: bool = Field(
        False,
        description='Name enum members after the source names instead of the wire values.',
    )

    enum_from_method_name: str | None = Field(
        None, description='Name of the generated enum deserialization classmethod.'
    )

    enum_to_method_name: str | None = Field(
        None, description='Name of the generated enum serialization method.'
    )

    render_workers: int = Field(
        1, description='Number of threads used to render files.'
    )

    def check(self) -> None:
        """Reject missing or contradictory settings.

        Raises:
            ConfigurationError: If a setting is missing or conflicts with another.
        """
        if not self.namespace:
            raise ConfigurationError('A namespace is required', field='namespace')
        if self.is_fluent and self.is_data_plane_client:
            raise ConfigurationError(
                'Fluent and data-plane generation are mutually exclusive',
                field='isDataPlaneClient',
                value=True,
            )
        if not self.generate_sync_methods and not self.generate_async_methods:
            raise ConfigurationError(
                'At least one of sync or async methods must be generated',
                field='generateSyncMethods',
                value=False,
            )
        if self.is_fluent and self.pipeline_generation is PipelineGeneration.CLIENTCORE:
            raise ConfigurationError(
                'Fluent clients are not supported on the clientcore pipeline',
                field='pipelineGeneration',
                value=self.pipeline_generation.value,
            )
        if self.render_workers < 1:
            raise ConfigurationError(
                'At least one render worker is required',
                field='renderWorkers',
                value=self.render_workers,
            )

    @property
    def is_legacy_pipeline(self) -> bool:
        return self.pipeline_generation is PipelineGeneration.AZURE_V1

    def is_custom_type(self, name: str) -> bool:
        return name in self.custom_types

    def get_package(self, *suffixes: str, namespace: str | None = None) -> str:
        """Join the root namespace (or an override) with package suffixes.

        Empty suffixes are skipped, so ``get_package('')`` is the namespace itself.
        """
        parts = [namespace or self.namespace]
        for suffix in suffixes:
            parts.extend(p for p in suffix.split('.') if p)
        return '.'.join(parts)

    @property
    def models_package(self) -> str:
        return self.get_package(self.models_subpackage)

    @property
    def implementation_package(self) -> str:
        return self.get_package(self.implementation_subpackage)

    @property
    def implementation_models_package(self) -> str:
        return self.get_package(self.implementation_subpackage, self.models_subpackage)

    @property
    def custom_types_package(self) -> str:
        return self.get_package(self.custom_types_subpackage)


class DocumentConfig(BaseModel):
    """Represents a single code model document to be processed."""

    source: str = Field(..., description='Path or URL to the code model document.')

    output: str = Field(..., description='Output directory for the generated code.')

    settings: GeneratorSettings = Field(
        default_factory=GeneratorSettings,
        description='Settings of the generation run for this document.',
    )


class GenerationConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='CLIENTGEN_')

    documents: list[DocumentConfig] = Field(
        ..., description='List of code model documents to process.'
    )

    write_files: bool = Field(
        True, description='Whether to write the generated files to disk.'
    )


def load_yaml(path: str | Path) -> dict:
    import yaml

    return yaml.safe_load(Path(path).read_text())


def get_config(path: str | None = None) -> GenerationConfig:
    """Load configuration from a file or from pyproject.toml."""
    if path:
        if not Path(path).exists():
            raise ConfigurationError('Configuration file not found', config_path=path)
        return GenerationConfig.model_validate(load_yaml(path))

    cwd = os.getcwd()

    for filename in DEFAULT_FILENAMES:
        candidate = Path(cwd) / filename
        if candidate.exists():
            return GenerationConfig.model_validate(load_yaml(candidate))

    pyproject_path = Path(cwd) / 'pyproject.toml'

    if pyproject_path.exists():
        import tomllib

        pyproject = tomllib.loads(pyproject_path.read_text())
        tools = pyproject.get('tool', {})

        if 'clientgen' in tools:
            return GenerationConfig.model_validate(tools['clientgen'])

    raise ConfigurationError('No clientgen configuration found', config_path=cwd)
