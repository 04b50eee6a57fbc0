#!/usr/bin/env python3
"""
Data models for Backlog issues and workflow statuses
Parsed once from API payloads and never mutated afterwards
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional


def parse_due_date(value: Optional[str]) -> Optional[date]:
    """
    Parse a Backlog dueDate into a calendar date.

    Backlog sends due dates as "2024-06-10T00:00:00Z"; only the calendar
    date part is meaningful, so the time and offset are dropped.
    """
    if not value:
        return None
    return date.fromisoformat(value[:10])


@dataclass(frozen=True)
class Status:
    """Workflow status belonging to a single project"""
    id: int
    project_id: int
    name: str
    color: str = ''
    display_order: int = 0

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'Status':
        return cls(
            id=data['id'],
            project_id=data.get('projectId', 0),
            name=data.get('name', ''),
            color=data.get('color', ''),
            display_order=data.get('displayOrder', 0),
        )


@dataclass(frozen=True)
class Issue:
    """Backlog issue as returned by the issue search endpoint"""
    id: int
    issue_key: str
    project_id: int
    summary: str
    due_date: Optional[date]
    status: Status
    assignee_id: Optional[int] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'Issue':
        assignee = data.get('assignee') or {}
        return cls(
            id=data['id'],
            issue_key=data['issueKey'],
            project_id=data['projectId'],
            summary=data.get('summary', ''),
            due_date=parse_due_date(data.get('dueDate')),
            status=Status.from_api(data['status']),
            assignee_id=assignee.get('id'),
        )
