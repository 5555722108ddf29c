"""
Terraform element models.

Small building blocks rendered into HCL module calls.
"""

import json
from dataclasses import dataclass, field
from typing import List, Sequence, Union

from ..utils import format_amount

TerraformValue = Union[bool, int, float, str, Sequence[Union[int, float, str]]]

INDENT = "  "


def format_terraform_value(value: TerraformValue) -> str:
    """Render a Python value as an HCL literal."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_amount(value)
    if isinstance(value, str):
        return json.dumps(value)
    return "[" + ", ".join(format_terraform_value(item) for item in value) + "]"


@dataclass
class TerraformComment:
    """Comment line; empty text renders a blank separator line."""
    text: str

    def render(self) -> str:
        if not self.text:
            return ""
        return f"{INDENT}# {self.text}"


@dataclass
class TerraformParameter:
    """Single ``name = value`` argument of a module block."""
    name: str
    value: TerraformValue

    def render(self) -> str:
        return f"{INDENT}{self.name} = {format_terraform_value(self.value)}"


TerraformElement = Union[TerraformComment, TerraformParameter]


@dataclass
class TerraformModule:
    """Module call block with a leading comment."""
    name: str
    source: str
    comment: str
    parameters: List[TerraformElement] = field(default_factory=list)

    def render(self) -> str:
        lines = [
            f"# {self.comment}",
            f'module "{self.name}" {{',
            f"{INDENT}source = {format_terraform_value(self.source)}",
            "",
        ]
        lines.extend(parameter.render() for parameter in self.parameters)
        lines.append("}")
        return "\n".join(lines) + "\n"
