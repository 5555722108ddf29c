"""
Centralized output handling with consistent formatting.

This module provides a single point of control for all user-facing output.
"""

import json
import logging
from typing import Any, Callable, List, Optional

from .types import Attachment
from .utils import format_amount

logger = logging.getLogger(__name__)


class OutputHandler:
    """Centralized output handling with consistent formatting."""

    @staticmethod
    def error(title: str, error: Exception) -> None:
        """
        Print formatted error message.

        Args:
            title: Error title
            error: Exception that occurred
        """
        print(f"\n🚨 {title}:\n{error}\n")

    @staticmethod
    def success(title: str, data: Optional[Any] = None) -> None:
        """
        Print formatted success message.

        Args:
            title: Success message title
            data: Optional data to display (dict will be JSON formatted)
        """
        print(f"\n✅ {title}")
        if not data:
            return

        if isinstance(data, dict):
            print(json.dumps(data, indent=2, default=str))
            return

        print(data)

    @staticmethod
    def section_header(title: str) -> None:
        """
        Print section header with divider.

        Args:
            title: Section title
        """
        print("\n" + "=" * 80)
        print(title)
        print("=" * 80)

    @staticmethod
    def attachments_planned(
        attachments: List[Attachment],
        name_of: Callable[[str], Optional[str]]
    ) -> None:
        """
        Print one block per planned budget attachment.

        Args:
            attachments: Planner output
            name_of: Lookup from OU id to display name
        """
        OutputHandler.section_header("BUDGET ATTACHMENTS")
        if not attachments:
            print("\nNo OU has an active budget - nothing to deploy")
            return

        for attachment in attachments:
            name = name_of(attachment.ou_id) or attachment.ou_id
            thresholds = ", ".join(f"{format_amount(t)}%" for t in attachment.thresholds)
            print(f"\n  Target OU: {name} ({attachment.ou_id})")
            print(f"  Budget: {format_amount(attachment.amount)} {attachment.currency}")
            print(f"  Thresholds: {thresholds or 'none'}")
            print("  " + "-" * 38)
        logger.info(f"Printed {len(attachments)} budget attachments")
