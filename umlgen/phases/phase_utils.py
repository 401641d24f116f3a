"""
Naming and type helpers shared across generation phases.

These functions turn free-form diagram labels into the identifiers,
table names, endpoints and type names that the descriptors carry.
"""

import re
from typing import Optional

JAVA_RESERVED_WORDS = frozenset([
    'abstract', 'assert', 'boolean', 'break', 'byte', 'case', 'catch', 'char', 'class', 'const',
    'continue', 'default', 'do', 'double', 'else', 'enum', 'extends', 'false', 'final', 'finally',
    'float', 'for', 'goto', 'if', 'implements', 'import', 'instanceof', 'int', 'interface', 'long',
    'native', 'new', 'null', 'package', 'private', 'protected', 'public', 'return', 'short', 'static',
    'strictfp', 'super', 'switch', 'synchronized', 'this', 'throw', 'throws', 'transient', 'true',
    'try', 'void', 'volatile', 'while',
])

JAVA_TYPES = {
    'string': 'String',
    'str': 'String',
    'text': 'String',
    'int': 'Integer',
    'integer': 'Integer',
    'long': 'Long',
    'short': 'Short',
    'byte': 'Byte',
    'float': 'Float',
    'double': 'Double',
    'decimal': 'BigDecimal',
    'bigdecimal': 'BigDecimal',
    'biginteger': 'BigInteger',
    'boolean': 'Boolean',
    'bool': 'Boolean',
    'char': 'Character',
    'date': 'LocalDate',
    'localdate': 'LocalDate',
    'datetime': 'LocalDateTime',
    'localdatetime': 'LocalDateTime',
    'uuid': 'UUID',
}

DART_TYPES = {
    'String': 'String',
    'Integer': 'int',
    'Long': 'int',
    'Short': 'int',
    'Byte': 'int',
    'Float': 'double',
    'Double': 'double',
    'BigDecimal': 'double',
    'BigInteger': 'int',
    'Boolean': 'bool',
    'Character': 'String',
    'LocalDate': 'DateTime',
    'LocalDateTime': 'DateTime',
    'UUID': 'String',
}


def format_class_name(label: Optional[str], fallback: str = "UnnamedClass") -> str:
    """
    Convert a diagram label to a PascalCase class name.

    Args:
        label: Label as typed in the editor (e.g., "order item")
        fallback: Name used when nothing usable remains

    Returns:
        A legal class identifier (e.g., "OrderItem")
    """
    words = re.split(r"[^a-zA-Z0-9]+", label or "")
    result = "".join(word[0].upper() + word[1:] for word in words if word)

    if result and result[0].isdigit():
        result = "_" + result

    return result or fallback


def to_field_name(class_name: str) -> str:
    """Lower-camel field name for a class name ("OrderItem" -> "orderItem")."""
    if not class_name:
        return class_name
    return class_name[0].lower() + class_name[1:]


def to_identifier(name: Optional[str], fallback: str = "attribute") -> str:
    """
    Sanitize a member name into a legal Java identifier.

    Args:
        name: Raw member name
        fallback: Name used for empty input

    Returns:
        Identifier with invalid characters replaced and reserved words
        suffixed with "Value"
    """
    if not name or not name.strip():
        return fallback

    name = re.sub(r"[^a-zA-Z0-9_]", "_", name.strip())

    if name[0].isdigit():
        name = "attr_" + name

    return escape_reserved(name)


def escape_reserved(name: str) -> str:
    """Suffix Java keywords with "Value" ("package" -> "packageValue")."""
    if name in JAVA_RESERVED_WORDS:
        return name + "Value"
    return name


def normalize_name(name: str) -> str:
    """Collision key for field names: lower-cased, underscores removed."""
    return (name or "").lower().replace("_", "")


def pluralize(word: str) -> str:
    """
    Naive English plural, used for collection fields and table names.

    Args:
        word: Singular word

    Returns:
        Plural form ("order" -> "orders", "category" -> "categories")
    """
    if not word:
        return word
    lower = word.lower()
    if lower.endswith(("s", "x", "z", "ch", "sh")):
        return word + "es"
    if lower.endswith("y") and len(word) > 1 and lower[-2] not in "aeiou":
        return word[:-1] + "ies"
    return word + "s"


def to_snake_case(name: str) -> str:
    """
    Convert a camel or Pascal case name to snake_case.

    Args:
        name: Name to convert ("OrderItem", "createdAt")

    Returns:
        snake_case name ("order_item", "created_at")
    """
    result = re.sub(r"\s+", "_", name or "")
    result = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", result)
    result = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", result)
    return re.sub(r"_+", "_", result).strip("_").lower()


def to_kebab_case(name: str) -> str:
    return to_snake_case(name).replace("_", "-")


def table_name(class_name: str) -> str:
    """Table name for an entity ("OrderItem" -> "order_items")."""
    return pluralize(to_snake_case(class_name))


def endpoint_name(class_name: str) -> str:
    """REST resource segment for an entity ("OrderItem" -> "order-items")."""
    return pluralize(to_kebab_case(class_name))


def capitalize_first(name: str) -> str:
    return name[:1].upper() + name[1:]


def map_java_type(type_token: Optional[str]) -> str:
    """
    Map a semantic type token to a Java type name.

    Args:
        type_token: Type as typed in the editor ("string", "Integer", ...)

    Returns:
        Java type name; unknown tokens (e.g., other class names) are
        returned unchanged and an empty token maps to String
    """
    if not type_token or not type_token.strip():
        return "String"
    token = type_token.strip()
    return JAVA_TYPES.get(token.lower(), token)


def map_dart_type(type_token: Optional[str]) -> str:
    """Map a semantic type token to a Dart type name (String if unknown)."""
    return DART_TYPES.get(map_java_type(type_token), "String")
