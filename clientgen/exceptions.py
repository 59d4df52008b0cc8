"""Custom exceptions for clientgen.

This module defines the hierarchy of exceptions raised by the generator.
Every generator-level error is fatal for the current run: a half-built
client model cannot produce a consistent file set, so nothing is written
once one of these has been raised.
"""


class ClientGenError(Exception):
    """Base exception for all clientgen errors.

    Example:
        try:
            codegen.generate()
        except ClientGenError as e:
            print(f"clientgen error: {e}")
    """

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class ConfigurationError(ClientGenError):
    """A required setting is missing or settings contradict each other.

    Raised before type mapping begins.

    Attributes:
        config_path: The path to the configuration file, if applicable.
        field: The specific setting that is invalid.
        value: The offending value of that setting.
    """

    def __init__(
        self,
        message: str,
        config_path: str | None = None,
        field: str | None = None,
        value: object | None = None,
    ):
        self.config_path = config_path
        self.field = field
        self.value = value
        full_message = message
        if config_path:
            full_message = f"{message} in '{config_path}'"
        if field:
            full_message += f' (field: {field}'
            if value is not None:
                full_message += f', value: {value!r}'
            full_message += ')'
        super().__init__(full_message)


class CodeModelError(ClientGenError):
    """Base exception for errors in the input code model."""

    pass


class CodeModelLoadError(CodeModelError):
    """Failed to load a code model document from a source.

    Attributes:
        source: The source path or URL that failed to load.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, source: str, cause: Exception | None = None):
        self.source = source
        self.cause = cause
        message = f"Failed to load code model from '{source}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)


class CodeModelValidationError(CodeModelError):
    """The loaded document is not a valid code model.

    Attributes:
        source: The source path or URL of the invalid document.
        errors: List of validation error messages.
    """

    def __init__(self, source: str, errors: list[str] | None = None):
        self.source = source
        self.errors = errors or []
        message = f"Code model validation failed for '{source}'"
        if errors:
            message += f': {"; ".join(errors)}'
        super().__init__(message)


class UnresolvableTypeReferenceError(CodeModelError):
    """A schema references a type that cannot be resolved.

    Raised during type mapping, either because the referenced schema id
    does not exist or because the reference forms a cycle that cannot be
    expressed as a type.

    Attributes:
        reference: The schema id that could not be resolved.
        schema_path: Path of the schema holding the reference.
        reason: Explanation of why the reference could not be resolved.
    """

    def __init__(
        self,
        reference: str,
        schema_path: str | None = None,
        reason: str | None = None,
    ):
        self.reference = reference
        self.schema_path = schema_path
        self.reason = reason
        message = f"Failed to resolve type reference '{reference}'"
        if schema_path:
            message += f" at '{schema_path}'"
        if reason:
            message += f': {reason}'
        super().__init__(message)


class CodeGenerationError(ClientGenError):
    """Error while building the client model or rendering it.

    Attributes:
        context: Additional context about what was being generated.
        cause: The underlying exception that caused the failure.
    """

    def __init__(
        self, message: str, context: str | None = None, cause: Exception | None = None
    ):
        self.context = context
        self.cause = cause
        full_message = message
        if context:
            full_message = f'{message} (while generating {context})'
        if cause:
            full_message += f': {cause}'
        super().__init__(full_message)


class NamingCollisionExhaustedError(CodeGenerationError):
    """Enum member name collision that the suffix rule could not resolve.

    Attributes:
        type_name: The enum being mapped.
        member_name: The member name that still collides after suffixing.
    """

    def __init__(self, type_name: str, member_name: str):
        self.type_name = type_name
        self.member_name = member_name
        super().__init__(
            f"Member name '{member_name}' is not unique", context=type_name
        )


class RenderError(CodeGenerationError):
    """A template failed to render a client-model node.

    Attributes:
        node_name: Name of the node being rendered.
    """

    def __init__(self, node_name: str, cause: Exception | None = None):
        self.node_name = node_name
        super().__init__(f"Failed to render '{node_name}'", context=node_name, cause=cause)


class OutputError(ClientGenError):
    """Error writing generated output.

    Attributes:
        output_path: The path where output was being written.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, output_path: str, cause: Exception | None = None):
        self.output_path = output_path
        self.cause = cause
        message = f"Failed to write output to '{output_path}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)
