"""Referential and value checks on a budget config."""

from typing import Iterable

from ..config import BudgetConfig
from .errors import InvalidAmountError, UndefinedEntryError, UnknownOuError


def validate_budget_config(config: BudgetConfig, known_ou_ids: Iterable[str]) -> None:
    """
    Check every per-OU entry against the known OU ids.

    Args:
        config: Budget configuration to check
        known_ou_ids: Ids of every OU in the organization

    Raises:
        UnknownOuError: If an entry refers to an OU that does not exist
        UndefinedEntryError: If an entry key has no value
        InvalidAmountError: If an entry amount is negative
    """
    known = set(known_ou_ids)

    for ou_id, entry in config.organizational_units.items():
        if ou_id not in known:
            raise UnknownOuError(f"Budget config refers to unknown OU: {ou_id}")

        if entry is None:
            raise UndefinedEntryError(f"Budget config for OU {ou_id} is undefined")

        # amount None means "disabled", which is valid
        if entry.amount is not None and entry.amount < 0:
            raise InvalidAmountError(f"OU {ou_id} has invalid budget amount: {entry.amount}")
