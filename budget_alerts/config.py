from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import (
    DEFAULT_BUDGET_CONFIG_PATH,
    DEFAULT_CURRENCY,
    DEFAULT_TERRAFORM_DIR,
    DEFAULT_THRESHOLDS,
)
from .types import (
    BudgetSetting,
    DisabledBudget,
    ExplicitBudget,
    InheritBudget,
    Thresholds,
)


def _check_thresholds(value: Optional[List[float]]) -> Optional[List[float]]:
    if value is None:
        return value
    for threshold in value:
        if threshold <= 0:
            raise ValueError(f"thresholds must be positive percentages, got {threshold}")
    return value


class BudgetAlertsConfig(BaseModel):
    # Management account holding OrgAndAccountInfoReader; None means use the current credentials
    management_account_id: Optional[str] = None
    # YAML file with default and per-OU budgets
    budget_config_path: str = DEFAULT_BUDGET_CONFIG_PATH
    # Base directory where Terraform budget files are generated
    terraform_dir: str = DEFAULT_TERRAFORM_DIR
    region: Optional[str] = None


class DefaultBudget(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    amount: Optional[float] = None
    currency: str = DEFAULT_CURRENCY
    thresholds: List[float] = Field(default_factory=lambda: list(DEFAULT_THRESHOLDS))
    aggregation_sns_topic_arn: Optional[str] = Field(default=None, alias="aggregationSnsTopicArn")

    @field_validator("thresholds")
    @classmethod
    def validate_thresholds(cls, value: Optional[List[float]]) -> Optional[List[float]]:
        return _check_thresholds(value)


class OuBudgetConfigEntry(BaseModel):
    """
    Budget override for a single OU.

    ``amount: null`` written explicitly disables budgets from this OU down.
    Leaving ``amount`` out (``{}``) keeps inheriting from the parent.
    """
    amount: Optional[float] = None
    currency: Optional[str] = None
    thresholds: Optional[List[float]] = None

    @field_validator("thresholds")
    @classmethod
    def validate_thresholds(cls, value: Optional[List[float]]) -> Optional[List[float]]:
        return _check_thresholds(value)

    @property
    def disables_budget(self) -> bool:
        return "amount" in self.model_fields_set and self.amount is None

    def to_setting(self, default: DefaultBudget) -> BudgetSetting:
        """Resolve this entry into its tagged form, filling gaps from ``default``."""
        if self.disables_budget:
            return DisabledBudget()
        # Zero carries no override, like an absent amount
        if self.amount is None or self.amount == 0:
            return InheritBudget()
        thresholds: Thresholds = tuple(
            self.thresholds if self.thresholds is not None else default.thresholds
        )
        return ExplicitBudget(
            amount=self.amount,
            currency=self.currency or default.currency,
            thresholds=thresholds,
        )


class BudgetConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    default: DefaultBudget = Field(default_factory=DefaultBudget)
    # Values may be None when the YAML has a bare key; the planner rejects those
    organizational_units: Dict[str, Optional[OuBudgetConfigEntry]] = Field(
        default_factory=dict,
        alias="organizationalUnits",
    )

    @field_validator("default", mode="before")
    @classmethod
    def _default_block(cls, value: object) -> object:
        return {} if value is None else value

    @field_validator("organizational_units", mode="before")
    @classmethod
    def _ou_block(cls, value: object) -> object:
        return {} if value is None else value
