#!/usr/bin/env python3
"""
Urgency classification of open issues by due date
Pure functions, no I/O
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Set, Tuple

from config import DUE_IN_2_DAYS, DUE_IN_3_DAYS, DUE_TODAY_DAYS
from models import Issue
from utils_dates import day_difference


@dataclass
class UrgencyBuckets:
    """Open issues grouped by days until due"""
    overdue: List[Issue] = field(default_factory=list)
    today: List[Issue] = field(default_factory=list)
    in_2_days: List[Issue] = field(default_factory=list)
    in_3_days: List[Issue] = field(default_factory=list)

    def sections(self) -> List[Tuple[str, List[Issue]]]:
        """Buckets in report order"""
        return [
            ('overdue', self.overdue),
            ('today', self.today),
            ('in_2_days', self.in_2_days),
            ('in_3_days', self.in_3_days),
        ]

    @property
    def total(self) -> int:
        return sum(len(issues) for _, issues in self.sections())


def classify(issues: Iterable[Issue], completed_status_ids: Set[int], anchor: date) -> UrgencyBuckets:
    """
    Bucket open issues by whole days between anchor and due date.

    Issues in a completed status or without a due date are skipped.
    A difference of 1 day (due tomorrow) is not reported, nor is
    anything further out than DUE_IN_3_DAYS.
    Input order is kept within each bucket.
    """
    buckets = UrgencyBuckets()

    for issue in issues:
        if issue.status.id in completed_status_ids:
            continue
        if issue.due_date is None:
            continue

        diff = day_difference(anchor, issue.due_date)
        if diff < DUE_TODAY_DAYS:
            buckets.overdue.append(issue)
        elif diff == DUE_TODAY_DAYS:
            buckets.today.append(issue)
        elif diff == DUE_IN_2_DAYS:
            buckets.in_2_days.append(issue)
        elif diff == DUE_IN_3_DAYS:
            buckets.in_3_days.append(issue)

    return buckets
