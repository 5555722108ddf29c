"""
AWS Organizations discovery module.

Lists the organization root and every OU below it. Only the structure is
read here; budgets are applied by the planner.
"""

import logging
from collections import deque
from typing import Deque, List

from boto3.session import Session
from mypy_boto3_organizations.client import OrganizationsClient

from ..types import DiscoveredOu, OrgRoot, OrgStructure

# Set up logging
logger = logging.getLogger(__name__)


def _get_root(org_client: OrganizationsClient) -> OrgRoot:
    """
    Return the organization root.

    Raises:
        RuntimeError: If the organization has no root
    """
    roots_response = org_client.list_roots()
    roots = roots_response.get("Roots", [])
    if not roots or not roots[0].get("Id"):
        raise RuntimeError("Could not find organization root")

    root = roots[0]
    root_id = root["Id"]
    return OrgRoot(id=root_id, name=root.get("Name") or root_id)


def list_child_ous(org_client: OrganizationsClient, parent_id: str) -> List[DiscoveredOu]:
    """
    List the OUs directly below ``parent_id`` across all result pages.

    Entries missing an id or a name are skipped.
    """
    children: List[DiscoveredOu] = []
    paginator = org_client.get_paginator("list_organizational_units_for_parent")
    for page in paginator.paginate(ParentId=parent_id):
        for ou in page.get("OrganizationalUnits", []):
            if not ou.get("Id") or not ou.get("Name"):
                continue
            children.append(DiscoveredOu(id=ou["Id"], name=ou["Name"], parent_id=parent_id))
    return children


def discover_org_structure(session: Session) -> OrgStructure:
    """
    Discover the organization root and all OUs beneath it.

    OUs are walked breadth-first, so every parent precedes its children.

    Args:
        session: boto3 Session with organizations:List* permissions

    Returns:
        OrgStructure with the root and a flat OU list

    Raises:
        RuntimeError: If no organization root is found
        ClientError: If AWS API calls fail
    """
    org_client: OrganizationsClient = session.client("organizations")

    root = _get_root(org_client)
    logger.info(f"Found organization root: {root.name} ({root.id})")

    structure = OrgStructure(root=root)
    queue: Deque[str] = deque([root.id])
    while queue:
        parent_id = queue.popleft()
        for ou in list_child_ous(org_client, parent_id):
            structure.ous.append(ou)
            queue.append(ou.id)

    logger.info(f"Found {len(structure.ous)} OUs under root {root.name} ({root.id})")
    return structure
