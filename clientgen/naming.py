"""Identifier naming rules for generated Python code."""

import keyword
import re
import unicodedata

__all__ = (
    'capitalize',
    'remove_accents',
    'to_snake_case',
    'to_pascal_case',
    'get_enum_member_name',
    'sanitize_python_keyword',
    'module_name_for_class',
)

_CAMEL_BOUNDARY = re.compile(r'(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])')


def capitalize(input_string):
    if not input_string:
        return ''
    return input_string[0].upper() + input_string[1:]


def remove_accents(input_str):
    nfkd_form = unicodedata.normalize('NFKD', input_str)
    return ''.join(c for c in nfkd_form if not unicodedata.combining(c))


def sanitize_python_keyword(name: str) -> str:
    if keyword.iskeyword(name) or keyword.issoftkeyword(name):
        return f'{name}_'
    return name


def _words(name: str) -> list[str]:
    text = _CAMEL_BOUNDARY.sub('_', remove_accents(str(name)))
    return [part for part in re.split(r'[^A-Za-z0-9]+', text) if part]


def to_snake_case(name: str) -> str:
    """Convert a name to a valid snake_case Python identifier.

    - Split camelCase and PascalCase humps (``subscriptionId`` -> ``subscription_id``)
    - Replace spaces, hyphens and other invalid characters with underscores
    - Ensure it doesn't start with a digit
    - Suffix Python keywords with an underscore
    """
    if not name:
        raise ValueError('Name cannot be empty')

    sanitized = '_'.join(word.lower() for word in _words(name))
    if not sanitized:
        raise ValueError(f'Name {name!r} has no valid identifier characters')
    if sanitized[0].isdigit():
        sanitized = '_' + sanitized
    return sanitize_python_keyword(sanitized)


def to_pascal_case(name: str) -> str:
    """Convert a string into a PascalCase class name.

    Names that are already a single identifier keep their inner casing
    (``WidgetInner`` stays ``WidgetInner``).
    """
    if not name:
        return 'UnnamedType'

    parts = re.sub(r'[^A-Za-z0-9]+', '_', remove_accents(name)).split('_')
    sanitized = ''.join(capitalize(part) for part in parts if part)

    if sanitized and sanitized[0].isdigit():
        sanitized = '_' + sanitized

    return sanitized or 'UnnamedType'


def get_enum_member_name(value: object) -> str:
    """Normalize an enum wire value or source name into an UPPER_SNAKE member name."""
    words = _words(str(value))
    if not words:
        return 'EMPTY'
    member = '_'.join(word.upper() for word in words)
    if member[0].isdigit():
        member = '_' + member
    return member


def module_name_for_class(class_name: str) -> str:
    """File/module name that holds a generated class."""
    return to_snake_case(class_name)
