"""
Dependency Resolver for Extension Installs.

Turns a set of requested extension names into a linear install order that
respects depends_on edges. Pure functions of the registry and the request
set - no side effects, no database access.

Ordering:
    Kahn's algorithm over the requested extensions plus their transitive
    dependencies. When several extensions are ready at once, the
    lexicographically smallest name goes first, so the same request always
    produces the same order.

Exports:
    resolve_install_order: Ordered ExtensionSpecs for a request
    collect_dependency_closure: Requested names plus transitive dependencies
    find_cycle: First dependency cycle found in a registry, if any
    validate_dependency_graph: Fail-fast check of a whole registry

Dependencies:
    core.models.extension: ExtensionSpec
    exceptions: CyclicDependencyError, UnknownExtensionError
"""

import heapq
from collections import defaultdict
from typing import Dict, Iterable, List, Mapping, Optional

from exceptions import CyclicDependencyError, UnknownExtensionError
from ..models.extension import ExtensionSpec


def collect_dependency_closure(
    requested: Iterable[str],
    registry: Mapping[str, ExtensionSpec]
) -> Dict[str, ExtensionSpec]:
    """
    Collect requested extensions and everything they depend on.

    Args:
        requested: Extension names asked for by the caller
        registry: Full name -> ExtensionSpec mapping

    Returns:
        Dict of name -> ExtensionSpec for the induced subgraph

    Raises:
        UnknownExtensionError: A requested name or a depends_on entry
            is absent from the registry
    """
    closure: Dict[str, ExtensionSpec] = {}
    stack = [(name, None) for name in sorted(set(requested), reverse=True)]

    while stack:
        name, referenced_by = stack.pop()
        if name in closure:
            continue
        spec = registry.get(name)
        if spec is None:
            raise UnknownExtensionError(name, referenced_by=referenced_by, known=registry.keys())
        closure[name] = spec
        for dep in sorted(spec.depends_on, reverse=True):
            if dep not in closure:
                stack.append((dep, name))

    return closure


def find_cycle(registry: Mapping[str, ExtensionSpec]) -> Optional[List[str]]:
    """
    Find one dependency cycle in a registry.

    Dependencies that are not in the registry are ignored here; they are
    reported separately as UnknownExtensionError.

    Args:
        registry: name -> ExtensionSpec mapping

    Returns:
        Cycle members in dependency order (e.g. ['a', 'b'] for a -> b -> a),
        or None if the graph is acyclic
    """
    WHITE, GRAY, BLACK = 0, 1, 2
    color = {name: WHITE for name in registry}
    path: List[str] = []

    def visit(name: str) -> Optional[List[str]]:
        color[name] = GRAY
        path.append(name)
        for dep in sorted(registry[name].depends_on):
            if dep not in registry:
                continue
            if color[dep] == GRAY:
                return path[path.index(dep):]
            if color[dep] == WHITE:
                cycle = visit(dep)
                if cycle:
                    return cycle
        path.pop()
        color[name] = BLACK
        return None

    for name in sorted(registry):
        if color[name] == WHITE:
            cycle = visit(name)
            if cycle:
                return list(cycle)
    return None


def validate_dependency_graph(registry: Mapping[str, ExtensionSpec]) -> None:
    """
    Validate a whole registry: every dependency known, no cycles.

    Raises:
        UnknownExtensionError: A depends_on entry is not registered
        CyclicDependencyError: The dependency graph has a cycle
    """
    for name in sorted(registry):
        for dep in sorted(registry[name].depends_on):
            if dep not in registry:
                raise UnknownExtensionError(dep, referenced_by=name, known=registry.keys())

    cycle = find_cycle(registry)
    if cycle:
        raise CyclicDependencyError(cycle)


def resolve_install_order(
    requested: Iterable[str],
    registry: Mapping[str, ExtensionSpec]
) -> List[ExtensionSpec]:
    """
    Produce a deterministic install order for the requested extensions.

    Every extension appears after all of its depends_on entries. Ties are
    broken lexicographically by name.

    Args:
        requested: Extension names asked for by the caller
        registry: Full name -> ExtensionSpec mapping

    Returns:
        Ordered list of ExtensionSpec (requested plus transitive dependencies)

    Raises:
        UnknownExtensionError: Unknown requested name or dependency
        CyclicDependencyError: The induced subgraph contains a cycle

    Example:
        >>> [s.name for s in resolve_install_order(['postgis_tiger_geocoder'], registry)]
        ['address_standardizer', 'fuzzystrmatch', 'postgis', 'postgis_tiger_geocoder']
    """
    closure = collect_dependency_closure(requested, registry)

    indegree = {name: len(spec.depends_on) for name, spec in closure.items()}
    dependents = defaultdict(list)
    for name, spec in closure.items():
        for dep in spec.depends_on:
            dependents[dep].append(name)

    ready = [name for name, degree in indegree.items() if degree == 0]
    heapq.heapify(ready)

    order: List[ExtensionSpec] = []
    while ready:
        name = heapq.heappop(ready)
        order.append(closure[name])
        for child in dependents[name]:
            indegree[child] -= 1
            if indegree[child] == 0:
                heapq.heappush(ready, child)

    if len(order) < len(closure):
        stuck = {name: closure[name] for name, degree in indegree.items() if degree > 0}
        raise CyclicDependencyError(find_cycle(stuck) or sorted(stuck))

    return order
