"""Comment annotation extraction.

Schema authors can attach metadata to a type with comment lines placed right
before its declaration:

    # @description A person entity
    # @version(1.0)
    entity person, owns name @key;

These comments never reach the token stream, so they are read from the raw
source lines instead.
"""

import re

ANNOTATION_PATTERN = re.compile(r"^#\s*@(\w+)(?:\(([^)]*)\)|\s+(.+))?$")
TYPE_PATTERN = re.compile(r"^(entity|relation|attribute|struct)\s+([\w-]+)")


def extract_annotations(schema_text: str) -> dict[str, dict[str, str]]:
    """Collect `# @key value` comments and attach them to the next declared type.

    Blank lines and ordinary comments between the annotations and the
    declaration are allowed. Any other line drops the pending annotations.

    Returns:
        Mapping of type name to its annotation key/value pairs
    """
    result: dict[str, dict[str, str]] = {}
    pending: dict[str, str] = {}

    for line in schema_text.splitlines():
        stripped = line.strip()

        match = ANNOTATION_PATTERN.match(stripped)
        if match:
            key, paren_value, spaced_value = match.groups()
            value = paren_value if paren_value else spaced_value
            pending[key] = (value or "").strip()
            continue

        if not stripped or stripped.startswith("#"):
            continue

        if pending:
            type_match = TYPE_PATTERN.match(stripped)
            if type_match:
                result[type_match.group(2)] = pending
            pending = {}

    return result
