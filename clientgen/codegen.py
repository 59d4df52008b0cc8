"""Code generation driver.

This module provides the Codegen class that runs one generation: it maps the
schemas of a code model to client types, builds the client tree, renders
every node and hands the finished file set to an emitter.
"""

import dataclasses
import logging
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from enum import Enum

from clientgen.clientmodel import ClassType, ClientTree, ModelRegistry
from clientgen.codemodel import CodeModel, CodeModelLoader, SchemaArena
from clientgen.config import DocumentConfig, GeneratorSettings
from clientgen.emitter import (
    CodeEmitter,
    FileEmitter,
    GeneratedFile,
    MemoryEmitter,
    assemble,
    validate_python_syntax,
)
from clientgen.exceptions import ClientGenError, CodeGenerationError
from clientgen.mapper import ClientModelBuilder, TypeMapper
from clientgen.templates import (
    ExtraBlock,
    ExtraMethod,
    PackageInfo,
    TemplateEngine,
    node_name,
)

logger = logging.getLogger(__name__)


class GenerationStage(str, Enum):
    START = 'start'
    MAP_TYPES = 'map_types'
    BUILD_CLIENT_MODEL = 'build_client_model'
    RENDER_ALL = 'render_all'
    DONE = 'done'


@dataclasses.dataclass(frozen=True)
class _RenderJob:
    node: object
    module: str

    @property
    def path(self) -> str:
        return self.module.replace('.', '/') + '.py'


def merge_settings(code_model: CodeModel, settings: GeneratorSettings | None) -> GeneratorSettings:
    """Settings of the code model, overridden by every explicitly set run setting."""
    base = GeneratorSettings.model_validate(code_model.settings)
    if settings is None:
        return base
    merged = base.model_dump(by_alias=True, exclude_unset=True)
    merged.update(settings.model_dump(by_alias=True, exclude_unset=True))
    return GeneratorSettings.model_validate(merged)


def _package_prefixes(package: str) -> list[str]:
    parts = package.split('.')
    return ['.'.join(parts[: i + 1]) for i in range(len(parts))]


class Codegen:
    """Runs one generation of a client library from a code model.

    A run moves through the stages of ``GenerationStage`` exactly once;
    calling ``generate`` a second time raises. Files reach the emitter only
    after every one of them rendered, so a failing run writes nothing.

    Attributes:
        code_model: The validated input.
        settings: Settings of the code model merged with the run settings.
        stage: The stage the run has reached.
        registry: Every enum and model of the run, once types are mapped.
        tree: The client tree, once it is built.

    Example:
        >>> from clientgen.emitter import MemoryEmitter
        >>> emitter = MemoryEmitter()
        >>> codegen = Codegen(code_model, GeneratorSettings(namespace='widgets'), emitter)
        >>> files = codegen.generate()
        >>> sorted(emitter.files)[0]
        'widgets/__init__.py'
    """

    def __init__(
        self,
        code_model: CodeModel,
        settings: GeneratorSettings | None = None,
        emitter: CodeEmitter | None = None,
        source: str = '<code model>',
        extra_methods: Mapping[str, Sequence[ExtraMethod]] | None = None,
        extra_block: ExtraBlock | None = None,
    ):
        """Initialize the code generator.

        Args:
            code_model: The code model to generate from.
            settings: Run settings; explicitly set fields override the code model's.
            emitter: Destination of the generated files (in memory by default).
            source: Name of the code model source, used in error messages.
            extra_methods: Pre-built methods appended to classes, keyed by class name.
            extra_block: Callback contributing statements to every rendered node.
        """
        self.code_model = code_model
        self.settings = merge_settings(code_model, settings)
        self.emitter = emitter if emitter is not None else MemoryEmitter()
        self.source = source
        self.stage = GenerationStage.START
        self.registry: ModelRegistry | None = None
        self.tree: ClientTree | None = None

        self._extra_methods = dict(extra_methods or {})
        self._extra_block = extra_block
        self._started = False
        self._engine = TemplateEngine()

    @classmethod
    def from_config(
        cls,
        config: DocumentConfig,
        loader: CodeModelLoader | None = None,
        write_files: bool = True,
    ) -> 'Codegen':
        """Load the code model of a configured document.

        Files are written below the configured output unless ``write_files``
        is False, in which case they are only kept in memory.
        """
        code_model = (loader or CodeModelLoader()).load(config.source)
        return cls(
            code_model,
            config.settings,
            emitter=FileEmitter(config.output) if write_files else MemoryEmitter(),
            source=config.source,
        )

    def generate(self) -> list[GeneratedFile]:
        """Run every stage and emit the generated files.

        Returns:
            The generated files, sorted by path.

        Raises:
            ConfigurationError: If the settings are missing or contradictory.
            UnresolvableTypeReferenceError: If a schema cannot be mapped.
            CodeGenerationError: If building or rendering fails, or if the
                run has already been started.
            OutputError: If the emitter cannot write a file.
        """
        if self._started:
            raise CodeGenerationError(
                'A generation run can only be started once',
                context=f'{self.source} at stage {self.stage.value}',
            )
        self._started = True

        self.settings.check()
        try:
            type_mapper = self._map_types()
            self._build_client_model(type_mapper)
            files = self._render_all()
        except ClientGenError:
            raise
        except Exception as e:
            raise CodeGenerationError(
                'Generation failed', context=f'{self.source} at stage {self.stage.value}', cause=e
            ) from e

        self.emitter.emit(files)
        self._enter(GenerationStage.DONE)
        logger.info(f'Generated {len(files)} files from {self.source}')
        return files

    def _enter(self, stage: GenerationStage) -> None:
        logger.info(f'{self.source}: {self.stage.value} -> {stage.value}')
        self.stage = stage

    def _map_types(self) -> TypeMapper:
        self._enter(GenerationStage.MAP_TYPES)
        arena = SchemaArena.from_code_model(self.code_model, source=self.source)
        self.registry = ModelRegistry()
        type_mapper = TypeMapper(arena, self.settings, self.registry)
        type_mapper.resolve_all()
        return type_mapper

    def _build_client_model(self, type_mapper: TypeMapper) -> None:
        self._enter(GenerationStage.BUILD_CLIENT_MODEL)
        self.tree = ClientModelBuilder(type_mapper).build(self.code_model)

    def _render_all(self) -> list[GeneratedFile]:
        self._enter(GenerationStage.RENDER_ALL)
        jobs = self._collect_jobs()

        paths: dict[str, _RenderJob] = {}
        for job in jobs:
            if job.path in paths:
                raise CodeGenerationError(
                    f"Two generated modules map to '{job.path}'", context=job.module
                )
            paths[job.path] = job

        if self.settings.render_workers > 1:
            with ThreadPoolExecutor(max_workers=self.settings.render_workers) as pool:
                files = list(pool.map(self._render_job, jobs))
        else:
            files = [self._render_job(job) for job in jobs]
        return sorted(files)

    def _render_job(self, job: _RenderJob) -> GeneratedFile:
        name = node_name(job.node)
        logger.debug(f'Rendering {name} into {job.path}')
        extra_methods = self._extra_methods.get(name, ())

        result = self._engine.render(job.node, self.settings, extra_methods, self._extra_block)
        text = assemble(result, self.settings)
        validate_python_syntax(text, job.path)
        return GeneratedFile(job.path, text)

    def _collect_jobs(self) -> list[_RenderJob]:
        packages: dict[str, PackageInfo] = {}

        def package_of(name: str) -> PackageInfo:
            for prefix in _package_prefixes(name):
                packages.setdefault(prefix, PackageInfo(prefix))
            return packages[name]

        jobs: list[_RenderJob] = []

        def add(node: object, class_type: ClassType) -> None:
            jobs.append(_RenderJob(node, class_type.module))
            package_of(class_type.package).exports.append(class_type)

        for client in self.tree.top_down():
            add(client, client.class_type)
            for method_group in client.method_group_clients:
                add(method_group, method_group.class_type)

        for enum_type in self.registry.enums():
            add(enum_type, enum_type)

        for model in self.registry.models():
            add(model, model.type)
            package = package_of(model.package)
            package.models.append(model.type)
            referenced = [model.parent] if model.parent is not None else []
            for prop in model.properties:
                referenced.extend(prop.type.class_types())
            for class_type in referenced:
                if class_type.package != model.package and not any(
                    class_type is d for d in package.dependencies
                ):
                    package.dependencies.append(class_type)

        for package in packages.values():
            package.dependencies.sort(key=lambda c: (c.module, c.name))
            jobs.append(_RenderJob(package, package.module))
        return jobs
