"""Tests for the runtime symbols emitted code imports."""

import dataclasses

import pytest

from clientgen.ast_utils import ImportSymbol
from clientgen.clientmodel.runtime import runtime_symbols
from clientgen.config import PipelineGeneration

AZURE = {
    'pipeline': ('azure.core.pipeline', 'Pipeline'),
    'response': ('azure.core.rest', 'HttpResponse'),
    'http_response_error': ('azure.core.exceptions', 'HttpResponseError'),
    'retry_policy': ('azure.core.pipeline.policies', 'RetryPolicy'),
    'user_agent_policy': ('azure.core.pipeline.policies', 'UserAgentPolicy'),
    'transport': ('azure.core.pipeline.transport', 'RequestsTransport'),
    'serializer': ('azure.core.serialization', 'AzureJSONEncoder'),
    'management_error': ('azure.core.exceptions', 'ODataV4Error'),
    'environment': ('azure.core', 'AzureClouds'),
}

CLIENTCORE = {
    'pipeline': ('corehttp.runtime.pipeline', 'Pipeline'),
    'response': ('corehttp.rest', 'HttpResponse'),
    'http_response_error': ('corehttp.exceptions', 'HttpResponseError'),
    'retry_policy': ('corehttp.runtime.policies', 'RetryPolicy'),
    'user_agent_policy': ('corehttp.runtime.policies', 'UserAgentPolicy'),
    'transport': ('corehttp.transport.requests', 'RequestsTransport'),
    'serializer': ('corehttp.serialization', 'CoreJSONEncoder'),
    'management_error': ('corehttp.exceptions', 'HttpResponseError'),
}


class TestRuntimeSymbols:
    @pytest.mark.parametrize(
        'generation,expected',
        [
            (PipelineGeneration.AZURE_V1, AZURE),
            (PipelineGeneration.AZURE_V2, AZURE),
            (PipelineGeneration.CLIENTCORE, CLIENTCORE),
        ],
    )
    def test_symbols(self, generation, expected):
        symbols = runtime_symbols(generation)
        for field, (module, name) in expected.items():
            assert getattr(symbols, field) == ImportSymbol(module, name), field

    def test_clientcore_has_no_environment(self):
        assert runtime_symbols(PipelineGeneration.CLIENTCORE).environment is None

    @pytest.mark.parametrize('generation', list(PipelineGeneration))
    def test_error_map_uses_the_generation_package(self, generation):
        symbols = runtime_symbols(generation)
        package = symbols.pipeline.module.split('.')[0]
        assert [status for status, _ in symbols.error_map] == [401, 404, 409]
        assert all(s.module.startswith(package) for _, s in symbols.error_map)

    def test_symbols_are_frozen(self):
        symbols = runtime_symbols(PipelineGeneration.AZURE_V2)
        with pytest.raises(dataclasses.FrozenInstanceError):
            symbols.pipeline = ImportSymbol('other', 'Pipeline')
