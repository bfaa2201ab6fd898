"""Inheritance accumulation.

Copies ancestor ownership (and, for relations, role) declarations down into
every descendant so generators can read a type's full attribute set without
walking the hierarchy themselves.
"""

from typing import Callable

from loguru import logger

from tqlgen.errors import CyclicInheritanceError
from tqlgen.schema.model import EntitySpec, OwnsSpec, ParsedSchema, RelatesSpec, RelationSpec


def merge_owns(parent: list[OwnsSpec], child: list[OwnsSpec]) -> list[OwnsSpec]:
    """Parent entries the child does not redeclare, followed by the child's own."""
    declared = {o.attribute for o in child}
    return [o for o in parent if o.attribute not in declared] + list(child)


def merge_relates(parent: list[RelatesSpec], child: list[RelatesSpec]) -> list[RelatesSpec]:
    """Parent roles the child does not redeclare, followed by the child's own."""
    declared = {r.role for r in child}
    return [r for r in parent if r.role not in declared] + list(child)


def accumulate_inheritance(schema: ParsedSchema) -> ParsedSchema:
    """Merge ancestor declarations into descendants, in place.

    Ancestors are resolved before their descendants, so merging is transitive
    and the nearest declaration of a name wins. Unknown parents are skipped.
    Running this twice gives the same result as running it once.

    Raises:
        CyclicInheritanceError: If a chain of parents loops back on itself
    """
    entities = {e.name: e for e in schema.entities}
    relations = {r.name: r for r in schema.relations}

    _accumulate_all(entities, _merge_entity)
    _accumulate_all(relations, _merge_relation)

    logger.debug(
        f"Accumulated inheritance for {sum(1 for e in schema.entities if e.parent)} entities "
        f"and {sum(1 for r in schema.relations if r.parent)} relations"
    )
    return schema


def _merge_entity(child: EntitySpec, parent: EntitySpec) -> None:
    child.owns = merge_owns(parent.owns, child.owns)


def _merge_relation(child: RelationSpec, parent: RelationSpec) -> None:
    child.owns = merge_owns(parent.owns, child.owns)
    child.relates = merge_relates(parent.relates, child.relates)


def _accumulate_all(types: dict, merge: Callable) -> None:
    """Resolve every type of one kind, parents first."""
    done: set[str] = set()

    def resolve(spec, chain: list[str]) -> None:
        if spec.name in done:
            return
        if spec.name in chain:
            cycle = chain[chain.index(spec.name) :] + [spec.name]
            raise CyclicInheritanceError(cycle)

        parent = types.get(spec.parent) if spec.parent else None
        if parent is not None:
            resolve(parent, chain + [spec.name])
            merge(spec, parent)
        done.add(spec.name)

    for spec in types.values():
        resolve(spec, [])
