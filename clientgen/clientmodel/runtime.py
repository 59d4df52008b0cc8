"""Runtime symbols the emitted code refers to, per pipeline generation.

The runtime library is an external collaborator: emitted code only imports
these names and calls ``pipeline.send(...)``/``pipeline.send_async(...)``,
receiving an ``HttpResponse`` whose ``value`` holds the deserialized body.
"""

import dataclasses

from clientgen.ast_utils import ImportSymbol
from clientgen.config import PipelineGeneration


@dataclasses.dataclass(frozen=True)
class RuntimeSymbols:
    pipeline: ImportSymbol
    response: ImportSymbol
    http_response_error: ImportSymbol
    retry_policy: ImportSymbol
    user_agent_policy: ImportSymbol
    transport: ImportSymbol
    serializer: ImportSymbol
    management_error: ImportSymbol
    # status code -> error raised by the pipeline for data-plane clients
    error_map: tuple[tuple[int, ImportSymbol], ...] = ()
    # cloud environment handed to fluent clients
    environment: ImportSymbol | None = None


def _azure(module: str, name: str) -> ImportSymbol:
    return ImportSymbol(f'azure.core.{module}', name)


_AZURE_ERROR_MAP = (
    (401, _azure('exceptions', 'ClientAuthenticationError')),
    (404, _azure('exceptions', 'ResourceNotFoundError')),
    (409, _azure('exceptions', 'ResourceModifiedError')),
)

_AZURE = RuntimeSymbols(
    pipeline=_azure('pipeline', 'Pipeline'),
    response=_azure('rest', 'HttpResponse'),
    http_response_error=_azure('exceptions', 'HttpResponseError'),
    retry_policy=_azure('pipeline.policies', 'RetryPolicy'),
    user_agent_policy=_azure('pipeline.policies', 'UserAgentPolicy'),
    transport=_azure('pipeline.transport', 'RequestsTransport'),
    serializer=_azure('serialization', 'AzureJSONEncoder'),
    management_error=_azure('exceptions', 'ODataV4Error'),
    error_map=_AZURE_ERROR_MAP,
    environment=ImportSymbol('azure.core', 'AzureClouds'),
)

_CLIENTCORE = RuntimeSymbols(
    pipeline=ImportSymbol('corehttp.runtime.pipeline', 'Pipeline'),
    response=ImportSymbol('corehttp.rest', 'HttpResponse'),
    http_response_error=ImportSymbol('corehttp.exceptions', 'HttpResponseError'),
    retry_policy=ImportSymbol('corehttp.runtime.policies', 'RetryPolicy'),
    user_agent_policy=ImportSymbol('corehttp.runtime.policies', 'UserAgentPolicy'),
    transport=ImportSymbol('corehttp.transport.requests', 'RequestsTransport'),
    serializer=ImportSymbol('corehttp.serialization', 'CoreJSONEncoder'),
    management_error=ImportSymbol('corehttp.exceptions', 'HttpResponseError'),
    error_map=(
        (401, ImportSymbol('corehttp.exceptions', 'ClientAuthenticationError')),
        (404, ImportSymbol('corehttp.exceptions', 'ResourceNotFoundError')),
        (409, ImportSymbol('corehttp.exceptions', 'ResourceModifiedError')),
    ),
)

_SYMBOLS = {
    PipelineGeneration.AZURE_V1: _AZURE,
    PipelineGeneration.AZURE_V2: _AZURE,
    PipelineGeneration.CLIENTCORE: _CLIENTCORE,
}


def runtime_symbols(generation: PipelineGeneration) -> RuntimeSymbols:
    return _SYMBOLS[generation]
