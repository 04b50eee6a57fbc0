#!/usr/bin/env python3
"""
Completed-status resolution
Decides which workflow statuses count as done, per project
"""

from typing import Iterable, List, Optional, Set

from backlog_client import BacklogClient
from config import COMPLETED_STATUS_MARKERS
from models import Issue
from status_display import StatusDisplay


def is_completed_status(name: str) -> bool:
    """
    Check whether a status name marks completed work.

    Args:
        name: Status display name, e.g. "完了" or "Completed"

    Returns:
        True if any completed marker appears in the name (case-insensitive)
    """
    lowered = (name or '').lower()
    return any(marker.lower() in lowered for marker in COMPLETED_STATUS_MARKERS)


def distinct_project_ids(issues: Iterable[Issue]) -> List[int]:
    """Unique project ids in order of first appearance"""
    seen = []
    for issue in issues:
        if issue.project_id not in seen:
            seen.append(issue.project_id)
    return seen


def resolve_completed_status_ids(client: BacklogClient, project_ids: Iterable[int],
                                 status: Optional[StatusDisplay] = None) -> Set[int]:
    """
    Collect the ids of completed statuses across projects.

    Projects are looked up one at a time; a RetrievalError from any of
    them propagates, so no partial set is ever returned.
    """
    completed_ids: Set[int] = set()

    for project_id in project_ids:
        statuses = client.get_project_statuses(project_id)
        completed = [s for s in statuses if is_completed_status(s.name)]
        completed_ids.update(s.id for s in completed)

        if status:
            names = ', '.join(s.name for s in completed) or 'none'
            status.update(f"🔍 Project {project_id}: completed statuses: {names}")

    return completed_ids
