"""
Budget config file handling.

Loads the budget config YAML into a validated BudgetConfig, and creates or
refreshes that file from the live OU structure for ``--init``.
"""

import copy
import logging
import re
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .config import BudgetConfig
from .constants import DEFAULT_CURRENCY, INITIAL_DEFAULT_AMOUNT
from .types import DiscoveredOu, OrgStructure

logger = logging.getLogger(__name__)

# Two-space indented key inside the organizationalUnits block
_OU_KEY_PATTERN = re.compile(r"^  ([^\s#:\-][^:]*):(.*)$")


def _read_yaml(full_path: Path) -> Any:
    try:
        with open(full_path, 'r') as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse budget config YAML at {full_path}: {e}")


def _is_budget_config(value: Any) -> bool:
    """Shallow structure check; entries are validated by the model and the planner."""
    if not isinstance(value, dict):
        return False

    default = value.get("default")
    if default is not None and not isinstance(default, dict):
        return False

    ous = value.get("organizationalUnits")
    if ous is not None and not isinstance(ous, dict):
        return False

    return True


def load_budget_config(path: str) -> BudgetConfig:
    """
    Load the budget config YAML and return a defaulted BudgetConfig.

    Args:
        path: Path to the budget config file

    Returns:
        Validated BudgetConfig

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the YAML is malformed or its structure is invalid
    """
    full_path = Path(path).resolve()
    if not full_path.exists():
        raise FileNotFoundError(
            f"Budget config file not found at {full_path}. "
            f"Run \"budget-alerts --init\" first to generate it."
        )

    raw = _read_yaml(full_path)
    if not _is_budget_config(raw):
        raise ValueError(
            f"Invalid budget config structure in {full_path}. "
            f"Check \"default\" and \"organizationalUnits\" blocks."
        )

    config = BudgetConfig.model_validate(raw)
    logger.info(
        f"Loaded budget config from {full_path} "
        f"({len(config.organizational_units)} OU entries)"
    )
    return config


def build_or_merge_config(org: OrgStructure, existing: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Merge the live OU list into an existing raw budget config.

    Existing entries are kept as-is, new OUs get an empty entry (inherit) and
    entries for OUs that no longer exist are dropped. Without an existing
    config a default block is seeded.

    Args:
        org: Discovered organization structure
        existing: Raw config mapping loaded from YAML, or None

    Returns:
        Raw config mapping ready to be rendered
    """
    if existing:
        config = copy.deepcopy(existing)
    else:
        config = {
            "default": {"amount": INITIAL_DEFAULT_AMOUNT, "currency": DEFAULT_CURRENCY},
            "organizationalUnits": {},
        }

    current: Dict[str, Any] = config.get("organizationalUnits") or {}
    known_ids = {org.root.id} | {ou.id for ou in org.ous}
    for ou_id in current:
        if ou_id not in known_ids:
            logger.warning(f"Dropping budget config for OU {ou_id}: no longer in the organization")

    merged: Dict[str, Any] = {}
    if org.root.id in current:
        merged[org.root.id] = current[org.root.id]
    for ou in org.ous:
        if ou.id in current:
            merged[ou.id] = current[ou.id]
        else:
            logger.debug(f"Adding budget config entry for new OU {ou.name} ({ou.id})")
            merged[ou.id] = {}

    config["organizationalUnits"] = merged
    return config


def _describe_ou(ou_id: str, org: OrgStructure, ous_by_id: Dict[str, DiscoveredOu]) -> Optional[str]:
    if ou_id == org.root.id:
        return f"Name: {org.root.name} (ROOT)"

    ou = ous_by_id.get(ou_id)
    if ou is None:
        return None

    parent = ous_by_id.get(ou.parent_id)
    if parent is None:
        return f"Parent: ROOT, Name: {ou.name}"
    return f"Parent: {parent.name} ({parent.id}), Name: {ou.name}"


def render_budget_config_yaml(config: Dict[str, Any], org: OrgStructure) -> str:
    """
    Render a raw budget config as YAML with informational OU comments.

    The ``organizationalUnits`` key is annotated with the root OU and each
    entry with its name and parent. Comments are not read back.
    """
    ous_by_id = {ou.id: ou for ou in org.ous}
    text = yaml.safe_dump(config, sort_keys=False, default_flow_style=False)

    lines = []
    in_ou_block = False
    for line in text.splitlines():
        if line.startswith("organizationalUnits:"):
            in_ou_block = True
            line = f"{line}  # Root OU: {org.root.name} ({org.root.id})"
        elif in_ou_block and line and not line.startswith(" "):
            in_ou_block = False
        elif in_ou_block:
            match = _OU_KEY_PATTERN.match(line)
            if match:
                comment = _describe_ou(match.group(1).strip("'\""), org, ous_by_id)
                if comment:
                    line = f"{line}  # {comment}"
        lines.append(line)

    return "\n".join(lines) + "\n"


def init_budget_config(path: str, org: OrgStructure) -> BudgetConfig:
    """
    Create or refresh the budget config file from the live OU structure.

    Args:
        path: Path of the budget config file to write
        org: Discovered organization structure

    Returns:
        The validated config that was written

    Raises:
        ValueError: If an existing file is malformed
    """
    full_path = Path(path).resolve()
    existing: Optional[Dict[str, Any]] = None
    if full_path.exists():
        raw = _read_yaml(full_path)
        if raw is not None and not _is_budget_config(raw):
            raise ValueError(f"Invalid budget config structure in {full_path}")
        existing = raw

    merged = build_or_merge_config(org, existing)
    config = BudgetConfig.model_validate(merged)

    full_path.parent.mkdir(parents=True, exist_ok=True)
    with open(full_path, 'w') as f:
        f.write(render_budget_config_yaml(merged, org))
    logger.info(f"Written budget config to {full_path}")

    return config
