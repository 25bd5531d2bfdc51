"""
Scope Fan-out.

Expands an ordered install set into one BootstrapAction per
(extension, database) pair according to each extension's target scope.

ALL_DATABASES extensions are re-attempted on every database, including
databases cloned from a template that already has them.

Exports:
    build_targets: Active database set (template first)
    expand_actions: Actions in install order
"""

from typing import List, Sequence

from ..models.action import BootstrapAction
from ..models.enums import TargetScope
from ..models.extension import DatabaseTarget, ExtensionSpec


def build_targets(database_names: Sequence[str], template_name: str) -> List[DatabaseTarget]:
    """
    Build the active database set.

    Args:
        database_names: Application databases, in the caller's order
        template_name: Designated template database

    Returns:
        Template target followed by the application databases, deduplicated
    """
    targets = [DatabaseTarget(name=template_name, is_template=True)]
    seen = {template_name}
    for name in database_names:
        name = name.strip()
        if not name or name in seen:
            continue
        seen.add(name)
        targets.append(DatabaseTarget(name=name, is_template=False))
    return targets


def expand_actions(
    ordered: Sequence[ExtensionSpec],
    targets: Sequence[DatabaseTarget]
) -> List[BootstrapAction]:
    """
    Fan an ordered install set out over the active databases.

    Actions are extension-major: all actions of an extension come before
    any action of an extension later in the install order, so every
    dependency is attempted before its dependents in every database.

    Args:
        ordered: ExtensionSpecs in resolved install order
        targets: Active database set from build_targets (template first)

    Returns:
        PENDING actions in execution order
    """
    templates = [t for t in targets if t.is_template]
    if len(templates) != 1:
        raise ValueError(f"Expected exactly one template database, got {len(templates)}")
    template = templates[0]

    actions: List[BootstrapAction] = []
    for spec in ordered:
        if spec.target_scope == TargetScope.TEMPLATE_ONLY:
            actions.append(BootstrapAction(extension=spec, database=template))
        else:
            for target in targets:
                actions.append(BootstrapAction(extension=spec, database=target))
    return actions
