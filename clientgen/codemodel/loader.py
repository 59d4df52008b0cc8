"""Code model loading utilities.

Loads a code model document from a local file or an http(s) URL, in JSON
or YAML, and validates it into a :class:`CodeModel`.
"""

import json
import logging
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import httpx
import yaml
from pydantic import ValidationError

from clientgen.codemodel.models import CodeModel
from clientgen.exceptions import CodeModelLoadError, CodeModelValidationError

logger = logging.getLogger(__name__)


class CodeModelLoader:
    """Loads code model documents from URLs or file paths.

    Example:
        >>> loader = CodeModelLoader()
        >>> code_model = loader.load('./widgets.yaml')
    """

    def __init__(self, http_client: httpx.Client | None = None):
        """Initialize the loader.

        Args:
            http_client: Optional HTTP client to use for URL requests.
        """
        self._http_client = http_client

    def load(self, source: str) -> CodeModel:
        """Load and validate a code model.

        Raises:
            CodeModelLoadError: If the document cannot be read or parsed.
            CodeModelValidationError: If the document is not a valid code model.
        """
        try:
            if self._is_url(source):
                content = self._load_from_url(source)
            else:
                content = self._load_from_file(source)
        except CodeModelLoadError:
            raise
        except Exception as e:
            raise CodeModelLoadError(source, cause=e)

        return self.validate(content, source)

    def validate(self, content: Any, source: str = '<memory>') -> CodeModel:
        """Validate already-parsed content into a code model."""
        if not isinstance(content, dict):
            raise CodeModelValidationError(
                source, errors=['document root must be a mapping']
            )
        try:
            code_model = CodeModel.model_validate(content)
        except ValidationError as e:
            raise CodeModelValidationError(
                source,
                errors=[
                    f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                    for err in e.errors()
                ],
            )
        logger.debug(
            f'Loaded code model from {source}: {len(code_model.schemas)} schemas, '
            f'{len(code_model.clients)} clients'
        )
        return code_model

    def _is_url(self, text: str) -> bool:
        try:
            result = urlparse(text)
            return result.scheme in ('http', 'https')
        except ValueError:
            return False

    def _load_from_url(self, url: str) -> dict:
        try:
            if self._http_client:
                response = self._http_client.get(url)
            else:
                response = httpx.get(url, follow_redirects=True, timeout=30.0)

            response.raise_for_status()
            content_type = response.headers.get('content-type', '')

            if 'yaml' in content_type or url.endswith(('.yaml', '.yml')):
                return yaml.safe_load(response.text)
            return json.loads(response.text)

        except (httpx.HTTPError, json.JSONDecodeError, yaml.YAMLError) as e:
            raise CodeModelLoadError(url, cause=e)

    def _load_from_file(self, file_path: str) -> dict:
        path = Path(file_path)

        if not path.exists():
            raise CodeModelLoadError(
                str(file_path), cause=FileNotFoundError(f'File not found: {path}')
            )

        try:
            content = path.read_text(encoding='utf-8')
            if path.suffix.lower() in ('.yaml', '.yml'):
                return yaml.safe_load(content)
            return json.loads(content)
        except (json.JSONDecodeError, yaml.YAMLError, OSError) as e:
            raise CodeModelLoadError(str(file_path), cause=e)
