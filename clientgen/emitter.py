"""Code emitter interfaces and implementations for code generation output.

Emitters receive the complete, ordered set of generated files of a run.
``FileEmitter`` writes them below an output directory; ``MemoryEmitter``
keeps them in a dict, which is what tests and dry runs use.
"""

import ast
import dataclasses
import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path

from upath import UPath

from clientgen.ast_utils import ImportCollector, ImportSymbol
from clientgen.config import GeneratorSettings
from clientgen.exceptions import OutputError, RenderError
from clientgen.templates import RenderResult

logger = logging.getLogger(__name__)

FUTURE_ANNOTATIONS = ImportSymbol('__future__', 'annotations')


@dataclasses.dataclass(frozen=True, order=True)
class GeneratedFile:
    """One emitted file.

    Attributes:
        path: POSIX path relative to the output directory.
        text: Complete file contents.
    """

    path: str
    text: str


def assemble(result: RenderResult, settings: GeneratorSettings) -> str:
    """Prefix a rendered node with its sorted import block."""
    collector = ImportCollector(local_prefixes=[settings.namespace])
    collector.add_imports([FUTURE_ANNOTATIONS])
    collector.add_imports(result.imports)

    module = ast.Module(body=collector.to_ast(), type_ignores=[])
    ast.fix_missing_locations(module)
    header = ast.unparse(module)
    if not result.text:
        return header + '\n'
    return f'{header}\n\n{result.text}\n'


def validate_python_syntax(content: str, path: str) -> None:
    """Validate that the content is valid Python code.

    Raises:
        RenderError: If the code does not compile.
    """
    try:
        compile(content, path, 'exec', dont_inherit=True)
    except SyntaxError as e:
        raise RenderError(path, cause=e) from e


class CodeEmitter(ABC):
    """Abstract base class for code emitters."""

    @abstractmethod
    def emit(self, files: Sequence[GeneratedFile]) -> list[str]:
        """Emit every file of a run.

        Returns:
            The location of each emitted file, in input order.
        """
        pass


class FileEmitter(CodeEmitter):
    """Writes generated files below an output directory.

    The output directory may be any location ``universal_pathlib`` supports.
    """

    def __init__(self, output_dir: str | Path | UPath):
        self.output_dir = UPath(output_dir)
        self._written_files: list[str] = []

    @property
    def written_files(self) -> list[str]:
        return list(self._written_files)

    def emit(self, files: Sequence[GeneratedFile]) -> list[str]:
        return [self._write_file(f.path, f.text) for f in files]

    def _write_file(self, relative_path: str, content: str) -> str:
        """Write content to a file in the output directory.

        Raises:
            OutputError: If the directory or file cannot be written.
        """
        file_path = self.output_dir / relative_path
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(content, encoding='utf-8')
        except OSError as e:
            raise OutputError(str(file_path), cause=e) from e

        logger.debug(f'Wrote {file_path}')
        self._written_files.append(str(file_path))
        return str(file_path)


class MemoryEmitter(CodeEmitter):
    """Keeps generated files in memory, keyed by relative path.

    Example:
        >>> emitter = MemoryEmitter()
        >>> Codegen(code_model, settings, emitter=emitter).generate()
        >>> print(emitter.files['widgets/widgets_client.py'])
    """

    def __init__(self):
        self.files: dict[str, str] = {}

    def emit(self, files: Sequence[GeneratedFile]) -> list[str]:
        for generated in files:
            self.files[generated.path] = generated.text
        return [f.path for f in files]
