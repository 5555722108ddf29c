"""
Utility functions used across the budget-alerts codebase.
"""


def make_safe_variable_name(name: str) -> str:
    """
    Convert a name to a safe Terraform identifier.

    Replaces spaces and special characters with underscores, ensures the name
    starts with a letter, and removes consecutive underscores.

    Args:
        name: Original name (e.g., "Shared Services-1")

    Returns:
        Safe variable name (e.g., "shared_services_1")
    """
    safe_name = name.lower().replace(" ", "_").replace("-", "_")
    safe_name = "".join(c if c.isalnum() or c == "_" else "_" for c in safe_name)
    while "__" in safe_name:
        safe_name = safe_name.replace("__", "_")
    safe_name = safe_name.strip("_")
    if safe_name and not safe_name[0].isalpha():
        safe_name = "ou_" + safe_name
    return safe_name


def format_amount(amount: float) -> str:
    """Render a budget amount without a trailing ``.0`` for whole numbers."""
    if float(amount).is_integer():
        return str(int(amount))
    return str(amount)
