"""Build the indexed OU tree the rest of the planner operates on."""

import logging
from typing import Dict, Iterable, List

from ..types import OuNode, OuTree
from .errors import StructuralError

logger = logging.getLogger(__name__)


def build_ou_tree(ous: Iterable[OuNode]) -> OuTree:
    """
    Index a flat OU list by id and by parent.

    Entries without an id are skipped. A duplicate id replaces the earlier
    node entirely: it is listed once, under its last parent, at the position
    of its last occurrence. Child lists otherwise keep the input order.

    Args:
        ous: OU nodes, typically from org discovery

    Returns:
        OuTree with exactly one root

    Raises:
        StructuralError: If the number of nodes without a parent is not one
    """
    by_id: Dict[str, OuNode] = {}
    for ou in ous:
        if not ou.id:
            logger.debug(f"Skipping OU without id (parent {ou.parent_id})")
            continue
        if ou.id in by_id:
            logger.debug(f"Duplicate OU {ou.id}, keeping the last occurrence")
            del by_id[ou.id]
        by_id[ou.id] = ou

    children: Dict[str, List[str]] = {}
    roots: List[str] = []
    for ou in by_id.values():
        if ou.parent_id is None:
            roots.append(ou.id)
        else:
            children.setdefault(ou.parent_id, []).append(ou.id)

    if len(roots) != 1:
        raise StructuralError(
            f"Expected exactly one root OU, found {len(roots)}: [{', '.join(roots)}]"
        )

    return OuTree(by_id=by_id, children=children, roots=roots)
