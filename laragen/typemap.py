# File: laragen/typemap.py
"""
Laragen - Type Mapper
=====================
Pure lookups from abstract column-type tokens to:

- the Laravel schema-builder method a migration calls (``map_type``),
- the default Faker expression a seeder inserts (``infer_faker``),
- the default Eloquent cast a model declares (``infer_cast``).

``map_type`` is total: unknown tokens pass through unchanged.  The
validators flag such tokens as warnings instead.
"""

from __future__ import annotations

import logging
from typing import Dict, FrozenSet, List, Optional, Tuple

from laragen.models import ColumnDefinition
from laragen.utils import php_boolean, php_double_quoted_array

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("laragen.typemap")

# ---------------------------------------------------------------------------
# Builder lookup
# ---------------------------------------------------------------------------

TYPE_MAP: Dict[str, str] = {
    "varchar": "string",
    "text": "text",
    "longtext": "longText",
    "int": "integer",
    "bigint": "bigInteger",
    "unsignedBigInteger": "unsignedBigInteger",
    "tinyint": "tinyInteger",
    "smallint": "smallInteger",
    "decimal": "decimal",
    "boolean": "boolean",
    "datetime": "dateTime",
    "timestamp": "timestamp",
    "date": "date",
    "json": "json",
}

# Tokens with dedicated handling in the generators
SPECIAL_TOKENS: FrozenSet[str] = frozenset({"id", "enum", "foreignId", "rememberToken"})

KNOWN_BUILDERS: FrozenSet[str] = frozenset(TYPE_MAP.values()) | frozenset({
    "string",
    "integer",
    "bigInteger",
    "tinyInteger",
    "smallInteger",
    "dateTime",
    "longText",
})

INTEGER_BUILDERS: FrozenSet[str] = frozenset({
    "integer",
    "bigInteger",
    "unsignedBigInteger",
    "tinyInteger",
    "smallInteger",
})

TEXT_BUILDERS: FrozenSet[str] = frozenset({"text", "longText"})

# Substring hints for string columns, checked in this order
STRING_NAME_HINTS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("email",), "$faker->safeEmail"),
    (("phone",), "$faker->phoneNumber"),
    (("url", "link"), "$faker->url"),
    (("slug",), "$faker->slug"),
    (("address",), "$faker->address"),
    (("name",), "$faker->name"),
    (("title",), "$faker->sentence"),
    (("code",), "$faker->bothify('???-###')"),
)


def map_type(token: str) -> str:
    """
    Map an abstract type token to a Laravel schema-builder method.

        >>> map_type("varchar")
        'string'
        >>> map_type("bigint")
        'bigInteger'
        >>> map_type("point")
        'point'
    """
    return TYPE_MAP.get(token, token)


def is_known_type(token: str) -> bool:
    """True when *token* maps to a builder the generators understand."""
    return token in SPECIAL_TOKENS or map_type(token) in KNOWN_BUILDERS


# ---------------------------------------------------------------------------
# Faker inference
# ---------------------------------------------------------------------------


def directive_expression(directive: str) -> str:
    """
    Turn an explicit Faker directive into a PHP expression.

    ``bcrypt(...)`` directives are raw PHP; everything else is a chain
    on the ``$faker`` instance.
    """
    if directive.startswith("bcrypt("):
        return directive
    return f"$faker->{directive}"


def infer_faker(column: ColumnDefinition, ceiling: int = 100) -> str:
    """
    Infer a Faker expression from the column's type and name.

    Foreign keys get a bounded numeric reference in ``[1, ceiling]``,
    wrapped in ``optional()`` when the column is nullable.
    """
    if column.is_foreign_key:
        prefix: str = "$faker->optional()->" if column.nullable else "$faker->"
        return f"{prefix}numberBetween(1, {ceiling})"

    builder: str = map_type(column.type)

    if builder == "string":
        for needles, expression in STRING_NAME_HINTS:
            if any(needle in column.name for needle in needles):
                return expression
        return "$faker->word"

    if builder in TEXT_BUILDERS:
        return "$faker->paragraph"

    if builder in INTEGER_BUILDERS:
        return "$faker->numberBetween(0, 100)"

    if builder == "decimal":
        return "$faker->randomFloat(2, 0, 1000)"

    if builder == "boolean":
        if column.default is not None:
            boolean: Optional[str] = php_boolean(column.default)
            if boolean is not None:
                return boolean
            return "true" if column.default else "false"
        return "$faker->boolean"

    if builder == "date":
        return "$faker->date()"

    if builder in ("dateTime", "timestamp"):
        if column.nullable:
            return "$faker->optional()->dateTime"
        return "$faker->dateTime"

    if builder == "enum":
        if column.values:
            return f"$faker->randomElement({php_double_quoted_array(column.values)})"
        return "$faker->word"

    if builder == "json":
        return "json_encode([$faker->word => $faker->sentence])"

    logger.debug(
        "No Faker strategy for column '%s' of type '%s'; using a word.",
        column.name,
        column.type,
    )
    return "$faker->word"


def faker_expression(column: ColumnDefinition, ceiling: int = 100) -> str:
    """Explicit directive when the column has one, inferred otherwise."""
    if column.faker:
        return directive_expression(column.faker)
    return infer_faker(column, ceiling)


# ---------------------------------------------------------------------------
# Cast inference
# ---------------------------------------------------------------------------


def infer_cast(column: ColumnDefinition) -> Optional[str]:
    """
    Default Eloquent cast for a column, or None when it needs none.

    Enum-bound columns cast to their enum class (``Gender::class``).
    Foreign keys and reserved timestamps are left to Eloquent.
    """
    if column.enum is not None:
        return f"{column.enum}::class"
    if column.is_foreign_key or column.is_reserved_timestamp:
        return None

    builder: str = map_type(column.type)

    if builder == "boolean":
        return "boolean"
    if builder == "decimal":
        places: int = column.precision[1] if column.precision else 2
        return f"decimal:{places}"
    if builder == "json":
        return "json"
    if builder == "date":
        return "date"
    if builder in ("dateTime", "timestamp"):
        return "datetime"
    if builder in INTEGER_BUILDERS:
        return "integer"
    return None


__all__: List[str] = [
    "TYPE_MAP",
    "SPECIAL_TOKENS",
    "KNOWN_BUILDERS",
    "INTEGER_BUILDERS",
    "map_type",
    "is_known_type",
    "directive_expression",
    "infer_faker",
    "faker_expression",
    "infer_cast",
]
