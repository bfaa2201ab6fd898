"""Field resolution shared by every generator.

Value-kind mapping, required/optional classification and role player lookup
live here so the model, DTO and registry outputs always agree.
"""

from tqlgen.schema.model import OwnsSpec, ParsedSchema

# TypeQL value kind -> Python annotation
PYTHON_TYPES: dict[str, str] = {
    "string": "str",
    "integer": "int",
    "long": "int",
    "double": "float",
    "decimal": "float",
    "boolean": "bool",
    "datetime": "datetime",
    "datetime-tz": "datetime",
    "date": "date",
}

# TypeQL value kind -> JSON schema property
JSON_SCHEMA_TYPES: dict[str, dict[str, str]] = {
    "string": {"type": "string"},
    "integer": {"type": "integer"},
    "long": {"type": "integer"},
    "double": {"type": "number"},
    "decimal": {"type": "number"},
    "boolean": {"type": "boolean"},
    "datetime": {"type": "string", "format": "date-time"},
    "datetime-tz": {"type": "string", "format": "date-time"},
    "date": {"type": "string", "format": "date"},
}

DATETIME_NAMES = frozenset({"date", "datetime"})


def python_type(value_type: str | None) -> str:
    """Python annotation for a value kind; unknown kinds map to str."""
    return PYTHON_TYPES.get(value_type or "", "str")


def json_schema_type(value_type: str | None) -> dict[str, str]:
    """JSON schema property for a value kind; unknown kinds map to string."""
    return dict(JSON_SCHEMA_TYPES.get(value_type or "", {"type": "string"}))


def card_min(card: str | None) -> int:
    """Minimum of a cardinality expression: "1" -> 1, "1.." -> 1, "0..1" -> 0.

    Missing or unparseable expressions count as 0.
    """
    if not card:
        return 0
    low = card.split("..", 1)[0]
    try:
        return int(low)
    except ValueError:
        return 0


def is_required(owns: OwnsSpec) -> bool:
    """Key or unique ownerships are required; otherwise the @card minimum decides.

    An ownership without @card is optional.
    """
    if owns.key or owns.unique:
        return True
    return card_min(owns.card) >= 1


def datetime_imports(value_types: list[str]) -> list[str]:
    """Names to import from the datetime module for the given value kinds."""
    return sorted({python_type(v) for v in value_types} & DATETIME_NAMES)


def attribute_value_type(schema: ParsedSchema, name: str) -> str | None:
    attribute = schema.attribute(name)
    return attribute.value_type if attribute else None


def role_players(schema: ParsedSchema, relation: str, role: str) -> list[str]:
    """Types declaring `plays relation:role`, most specific only, sorted.

    Both entities and relations can play roles. A player is dropped when one of
    its descendants is also a player of the same role. Returns an empty list
    when nothing plays the role.
    """
    players: set[str] = set()
    for spec in [*schema.entities, *schema.relations]:
        for plays in spec.plays:
            if plays.relation == relation and plays.role == role:
                players.add(spec.name)
    return filter_most_specific(sorted(players), schema)


def filter_most_specific(types: list[str], schema: ParsedSchema) -> list[str]:
    """Remove every type that is an ancestor of another type in the list."""
    if len(types) <= 1:
        return types

    candidates = set(types)
    ancestors: set[str] = set()
    for name in types:
        ancestors.update(a for a in schema.ancestors(name) if a in candidates)
    return [name for name in types if name not in ancestors]
