#!/usr/bin/env python3
"""
Report Generation Module for the Backlog deadline reminder
Formats urgency buckets as a Slack mrkdwn message
"""

from typing import List

from classifier import UrgencyBuckets
from config import NO_ITEMS_PLACEHOLDER, REPORT_TITLE, SECTION_TITLES
from models import Issue


class ReportGenerator:
    """Generates the reminder text for one anchor date"""

    def __init__(self, space: str, domain: str):
        self.space = space
        self.domain = domain

    def issue_url(self, issue: Issue) -> str:
        """Browser URL for an issue"""
        return f"https://{self.space}.{self.domain}/view/{issue.issue_key}"

    def format_issue_line(self, issue: Issue) -> str:
        """One bullet: linked key, summary and current status"""
        return f"• <{self.issue_url(issue)}|{issue.issue_key}> {issue.summary} [{issue.status.name}]"

    def format_section(self, title: str, issues: List[Issue]) -> str:
        """Section heading followed by its issues, or the placeholder when empty"""
        lines = [f"*{title}*"]
        if issues:
            lines.extend(self.format_issue_line(issue) for issue in issues)
        else:
            lines.append(NO_ITEMS_PLACEHOLDER)
        return '\n'.join(lines)

    def generate_header(self, anchor_date_label: str, mention_target: str) -> List[str]:
        """Mention line and title line"""
        return [
            f"<@{mention_target}>",
            f"{REPORT_TITLE} ({anchor_date_label})",
        ]

    def render(self, buckets: UrgencyBuckets, anchor_date_label: str, mention_target: str) -> str:
        """
        Render the full reminder.

        Args:
            buckets: Classified issues
            anchor_date_label: Date shown in the title, e.g. "2024-06-10"
            mention_target: Slack user id to mention

        Returns:
            Header and the four sections (overdue, today, in 2 days, in 3 days)
            separated by blank lines
        """
        blocks = self.generate_header(anchor_date_label, mention_target)
        for key, issues in buckets.sections():
            blocks.append(self.format_section(SECTION_TITLES[key], issues))
        return '\n\n'.join(blocks)
