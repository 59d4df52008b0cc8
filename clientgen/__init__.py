"""clientgen - Generate Python client libraries from API code models.

clientgen maps a language-agnostic code model (schemas, operations and
clients) to a typed client model and renders it into Python source: service
clients, operation groups, enums and pydantic models.

Quick Start:
    >>> from clientgen import Codegen, CodeModelLoader, GeneratorSettings
    >>>
    >>> code_model = CodeModelLoader().load('./widgets.yaml')
    >>> codegen = Codegen(code_model, GeneratorSettings(namespace='widgets'))
    >>> files = codegen.generate()

CLI Usage:
    $ clientgen generate --config clientgen.yaml
    $ clientgen validate ./widgets.yaml
"""

from importlib.metadata import PackageNotFoundError, version

from clientgen.codegen import Codegen, GenerationStage
from clientgen.codemodel import CodeModel, CodeModelLoader
from clientgen.config import (
    DocumentConfig,
    GenerationConfig,
    GeneratorSettings,
    PipelineGeneration,
    get_config,
)
from clientgen.emitter import FileEmitter, GeneratedFile, MemoryEmitter
from clientgen.exceptions import (
    ClientGenError,
    CodeGenerationError,
    CodeModelError,
    CodeModelLoadError,
    CodeModelValidationError,
    ConfigurationError,
    NamingCollisionExhaustedError,
    OutputError,
    RenderError,
    UnresolvableTypeReferenceError,
)

__all__ = [
    # Main classes
    'Codegen',
    'GenerationStage',
    'CodeModel',
    'CodeModelLoader',
    'FileEmitter',
    'MemoryEmitter',
    'GeneratedFile',
    # Configuration
    'DocumentConfig',
    'GenerationConfig',
    'GeneratorSettings',
    'PipelineGeneration',
    'get_config',
    # Exceptions
    'ClientGenError',
    'ConfigurationError',
    'CodeModelError',
    'CodeModelLoadError',
    'CodeModelValidationError',
    'UnresolvableTypeReferenceError',
    'CodeGenerationError',
    'NamingCollisionExhaustedError',
    'RenderError',
    'OutputError',
]

try:
    __version__ = version('clientgen')
except PackageNotFoundError:
    __version__ = 'unknown'
