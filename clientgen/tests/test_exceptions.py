"""Test suite for clientgen exceptions."""

import pytest

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


class TestClientGenError:
    """Tests for the base ClientGenError exception."""

    def test_basic_message(self):
        error = ClientGenError('Something went wrong')
        assert error.message == 'Something went wrong'
        assert str(error) == 'Something went wrong'

    def test_can_be_caught_as_exception(self):
        with pytest.raises(Exception):
            raise ClientGenError('Test error')


class TestConfigurationError:
    def test_with_field_and_value(self):
        error = ConfigurationError('Bad setting', field='renderWorkers', value=0)
        assert error.field == 'renderWorkers'
        assert error.value == 0
        assert str(error) == 'Bad setting (field: renderWorkers, value: 0)'

    def test_with_config_path(self):
        error = ConfigurationError('Missing', config_path='clientgen.yaml')
        assert "in 'clientgen.yaml'" in str(error)
        assert isinstance(error, ClientGenError)


class TestCodeModelErrors:
    """Tests for code model exceptions."""

    def test_load_error_with_cause(self):
        cause = ConnectionError('Network unavailable')
        error = CodeModelLoadError('https://example.com/model.yaml', cause=cause)
        assert error.cause is cause
        assert 'Network unavailable' in str(error)
        assert isinstance(error, CodeModelError)

    def test_validation_error_lists_errors(self):
        error = CodeModelValidationError('model.yaml', errors=['a: missing', 'b: invalid'])
        assert error.errors == ['a: missing', 'b: invalid']
        assert 'a: missing; b: invalid' in str(error)

    def test_validation_error_without_errors(self):
        assert CodeModelValidationError('model.yaml').errors == []

    def test_unresolvable_reference(self):
        error = UnresolvableTypeReferenceError('Widget', schema_path='Gadget.parts', reason='gone')
        assert error.reference == 'Widget'
        assert "at 'Gadget.parts'" in str(error)
        assert str(error).endswith(': gone')
        assert isinstance(error, CodeModelError)


class TestCodeGenerationErrors:
    """Tests for code generation exceptions."""

    def test_with_context_and_cause(self):
        error = CodeGenerationError('Failed', context='Widget', cause=ValueError('boom'))
        assert str(error) == 'Failed (while generating Widget): boom'

    def test_naming_collision(self):
        error = NamingCollisionExhaustedError('Letter', 'A_1')
        assert error.type_name == 'Letter'
        assert error.member_name == 'A_1'
        assert 'A_1' in str(error)
        assert isinstance(error, CodeGenerationError)

    def test_render_error(self):
        cause = TypeError('bad node')
        error = RenderError('WidgetsClient', cause=cause)
        assert error.node_name == 'WidgetsClient'
        assert error.cause is cause
        assert isinstance(error, CodeGenerationError)


class TestOutputError:
    def test_output_error(self):
        error = OutputError('/tmp/out', cause=PermissionError('denied'))
        assert error.output_path == '/tmp/out'
        assert 'denied' in str(error)
