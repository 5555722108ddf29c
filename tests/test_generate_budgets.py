"""
Tests for terraform.generate_budgets module.

Covers early returns, missing OUs, name collisions and the rendered module.
"""

from pathlib import Path

import pytest

from budget_alerts.terraform import generate_budget_terraform, make_safe_variable_name
from budget_alerts.terraform.generate_budgets import _build_budget_terraform_module
from budget_alerts.terraform.models import (
    TerraformComment,
    TerraformModule,
    TerraformParameter,
    format_terraform_value,
)
from budget_alerts.types import Attachment, DiscoveredOu, OrgRoot, OrgStructure


def make_org() -> OrgStructure:
    return OrgStructure(
        root=OrgRoot(id="r-root", name="Root"),
        ous=[
            DiscoveredOu(id="ou-prod", name="Prod Workloads", parent_id="r-root"),
            DiscoveredOu(id="ou-dev-a", name="Dev", parent_id="r-root"),
            DiscoveredOu(id="ou-dev-b", name="Dev", parent_id="ou-prod"),
        ],
    )


def test_generate_budget_terraform_no_attachments(tmp_path: Path) -> None:
    """Test no files are written without attachments."""
    assert generate_budget_terraform([], make_org(), str(tmp_path)) == []
    assert not any(tmp_path.iterdir())


def test_generate_budget_terraform_missing_ou(tmp_path: Path) -> None:
    """Test an attachment for an unknown OU raises RuntimeError."""
    attachment = Attachment("ou-unknown", 10, "USD", (75, 100))

    with pytest.raises(RuntimeError, match="OU ou-unknown not found in organization structure"):
        generate_budget_terraform([attachment], make_org(), str(tmp_path))


def test_generate_budget_terraform_writes_one_file_per_attachment(tmp_path: Path) -> None:
    """Test one budget file is written per attachment."""
    attachments = [
        Attachment("ou-prod", 50, "USD", (75, 100)),
        Attachment("r-root", 10, "EUR", (90,)),
    ]

    written = generate_budget_terraform(attachments, make_org(), str(tmp_path / "budgets"))

    assert [p.name for p in written] == ["prod_workloads_budget.tf", "root_budget.tf"]
    prod = (tmp_path / "budgets" / "prod_workloads_budget.tf").read_text()
    assert '# OU Prod Workloads' in prod
    assert 'module "budget_alerts_prod_workloads" {' in prod
    assert '  target_id = "ou-prod"' in prod
    assert '  amount = 50' in prod
    assert '  currency = "USD"' in prod
    assert '  thresholds = [75, 100]' in prod
    assert 'aggregation_sns_topic_arn' not in prod
    root = (tmp_path / "budgets" / "root_budget.tf").read_text()
    assert '# Organization Root' in root
    assert '  target_id = "r-root"' in root


def test_generate_budget_terraform_logs_each_file(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    """Test each written budget file is logged with its target OU."""
    attachments = [Attachment("ou-prod", 50, "USD", (75, 100))]

    with caplog.at_level("INFO", logger="budget_alerts.terraform.generate_budgets"):
        written = generate_budget_terraform(attachments, make_org(), str(tmp_path))

    assert written == [tmp_path / "prod_workloads_budget.tf"]
    assert f"Wrote budget for ou-prod to {written[0]}" in caplog.text


def test_generate_budget_terraform_name_collision(tmp_path: Path) -> None:
    """Test OUs sharing a name get distinct file names."""
    attachments = [
        Attachment("ou-dev-a", 5, "USD", (100,)),
        Attachment("ou-dev-b", 6, "USD", (100,)),
    ]

    written = generate_budget_terraform(attachments, make_org(), str(tmp_path))

    assert [p.name for p in written] == ["dev_budget.tf", "dev_ou_dev_b_budget.tf"]


def test_build_budget_terraform_module_with_aggregation_topic() -> None:
    """Test the aggregation topic is passed to the module."""
    content = _build_budget_terraform_module(
        module_name="budget_alerts_prod",
        attachment=Attachment("ou-prod", 12.5, "USD", (50, 100)),
        comment="OU Prod",
        aggregation_sns_topic_arn="arn:aws:sns:eu-west-1:111111111111:central",
    )

    assert content.startswith('# OU Prod\nmodule "budget_alerts_prod" {\n  source = "../modules/budget_alerts"\n')
    assert '  amount = 12.5' in content
    assert '  # Notifications' in content
    assert '  aggregation_sns_topic_arn = "arn:aws:sns:eu-west-1:111111111111:central"' in content
    assert content.endswith("}\n")


def test_make_safe_variable_name_edge_cases() -> None:
    """Test safe name conversion for awkward OU names."""
    assert make_safe_variable_name("My  Name--X") == "my_name_x"
    assert make_safe_variable_name("a__b---c  d") == "a_b_c_d"
    assert make_safe_variable_name("123bad-name") == "ou_123bad_name"


class TestTerraformModels:
    """Test HCL rendering helpers."""

    def test_format_values(self) -> None:
        assert format_terraform_value(True) == "true"
        assert format_terraform_value(False) == "false"
        assert format_terraform_value(100.0) == "100"
        assert format_terraform_value(0.5) == "0.5"
        assert format_terraform_value('say "hi"') == '"say \\"hi\\""'
        assert format_terraform_value([1, "a"]) == '[1, "a"]'
        assert format_terraform_value([]) == "[]"

    def test_comment_and_parameter(self) -> None:
        assert TerraformComment("").render() == ""
        assert TerraformComment("Budget").render() == "  # Budget"
        assert TerraformParameter("amount", 3).render() == "  amount = 3"

    def test_module_render(self) -> None:
        """Test a full module block renders as HCL."""
        module = TerraformModule(
            name="m",
            source="../x",
            comment="c",
            parameters=[TerraformParameter("a", "b")],
        )

        assert module.render() == '# c\nmodule "m" {\n  source = "../x"\n\n  a = "b"\n}\n'
