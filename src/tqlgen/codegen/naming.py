"""Name transformations from TypeQL identifiers to Python identifiers."""

import keyword
import re

# Lower-cased word -> rendering used when acronym casing is on
DEFAULT_ACRONYMS: dict[str, str] = {
    "id": "ID",
    "url": "URL",
    "uuid": "UUID",
    "api": "API",
    "http": "HTTP",
    "iid": "IID",
    "nf": "NF",
}

_NON_WORD = re.compile(r"\W+")


def split_name(name: str) -> list[str]:
    """Split a kebab-case or snake_case name into its non-empty words."""
    return [part for part in re.split(r"[-_]", name) if part]


def to_pascal_case(name: str) -> str:
    """user_story -> UserStory, isbn-13 -> Isbn13.

    The first letter of each word is upper-cased and the rest lower-cased.
    """
    return "".join(part[0].upper() + part[1:].lower() for part in split_name(name))


def to_pascal_case_acronyms(name: str, acronyms: dict[str, str] | None = None) -> str:
    """Like to_pascal_case, but known acronyms are rendered fully upper-cased.

    display_id -> DisplayID, external_url -> ExternalURL, nf_category -> NFCategory.
    """
    if acronyms is None:
        acronyms = DEFAULT_ACRONYMS

    words = []
    for part in split_name(name):
        lower = part.lower()
        if lower in acronyms:
            words.append(acronyms[lower])
        else:
            words.append(lower[0].upper() + lower[1:])
    return "".join(words)


def to_snake_case(name: str) -> str:
    """start-date -> start_date."""
    return name.replace("-", "_")


def python_identifier(name: str) -> str:
    """Turn a schema name into a field name usable on dataclasses and pydantic models.

    Hyphens become underscores, leading underscores are dropped (pydantic treats
    them as private), a leading digit gets an ``f_`` prefix and Python keywords
    get a trailing underscore.
    """
    ident = _NON_WORD.sub("_", to_snake_case(name)).lstrip("_")
    if not ident:
        return "field_"
    if ident[0].isdigit():
        ident = "f_" + ident
    if keyword.iskeyword(ident) or keyword.issoftkeyword(ident):
        ident += "_"
    return ident


def constant_name(name: str) -> str:
    """UPPER_SNAKE constant for any string: in-progress -> IN_PROGRESS."""
    ident = _NON_WORD.sub("_", name).strip("_").upper()
    if not ident:
        return "VALUE"
    if ident[0].isdigit():
        ident = "VALUE_" + ident
    return ident


def dedupe(names: list[str]) -> list[str]:
    """Make names unique by appending _2, _3, ... to repeats, keeping order."""
    seen: set[str] = set()
    result = []
    for name in names:
        candidate = name
        counter = 2
        while candidate in seen:
            candidate = f"{name}_{counter}"
            counter += 1
        seen.add(candidate)
        result.append(candidate)
    return result


class Namer:
    """Naming policy shared by the code generators."""

    def __init__(self, use_acronyms: bool = True, acronyms: dict[str, str] | None = None):
        self.use_acronyms = use_acronyms
        self.acronyms = DEFAULT_ACRONYMS if acronyms is None else acronyms

    def pascal(self, name: str) -> str:
        if self.use_acronyms:
            return to_pascal_case_acronyms(name, self.acronyms)
        return to_pascal_case(name)

    def type_name(self, name: str) -> str:
        """Class name for a schema type; always a valid identifier."""
        pascal = _NON_WORD.sub("", self.pascal(name))
        if not pascal or pascal[0].isdigit():
            pascal = "T" + pascal
        return pascal

    def field_name(self, name: str) -> str:
        return python_identifier(name)

    def constant_name(self, prefix: str, name: str) -> str:
        """TYPE_PERSON style constant; an empty prefix gives just the name."""
        if not prefix:
            return constant_name(name)
        return f"{constant_name(prefix)}_{_NON_WORD.sub('_', name).strip('_').upper() or 'VALUE'}"
