#!/usr/bin/env python3
"""
Backlog Deadline Reminder

Collects the Backlog issues assigned to one user, groups the open ones by
how soon they are due (overdue, today, in 2 days, in 3 days) and posts the
summary to a Slack incoming webhook. Meant to run once a day from cron.

Usage:
    python deadline_reminder.py [--date YYYY-MM-DD] [--dry-run] [--skip-empty]

Environment variables (a .env file is loaded if present):
    BACKLOG_SPACE          - space name, e.g. "your-space"
    BACKLOG_API_KEY        - Backlog API key
    SLACK_WEBHOOK_URL      - Slack incoming webhook URL
    BACKLOG_DOMAIN         - "backlog.jp" (default) or "backlog.com"
    TIMEZONE               - default "Asia/Tokyo"
    SKIP_HOLIDAYS          - skip public holidays, default "true"
    HOLIDAYS_COUNTRY       - holiday calendar, default "JP"
    BACKLOG_ASSIGNEE_ID    - numeric user id (default: owner of the API key)
    SLACK_MENTION_USER_ID  - who to mention (default: the assignee id)
    REQUEST_TIMEOUT        - seconds per HTTP request, default 30
    SKIP_EMPTY_REPORT      - send nothing when no issues qualify, default "false"
"""
# /// script
# requires-python = ">=3.8"
# dependencies = [
#     "requests",
#     "python-dotenv",
#     "rich",
#     "pytz",
#     "holidays",
# ]
# ///

import argparse
import sys
from datetime import date
from typing import List, Optional

from dotenv import load_dotenv

from backlog_client import BacklogClient, RetrievalError
from classifier import UrgencyBuckets, classify
from config import ConfigurationError, ReminderConfig, SECTION_TITLES, load_config
from report_generator import ReportGenerator
from slack_notifier import DispatchError, SlackNotifier
from status_display import StatusDisplay
from status_resolver import distinct_project_ids, resolve_completed_status_ids
from utils_dates import get_anchor_date, get_due_date_window, get_holiday_name, iso_date, parse_date_arg


def resolve_assignee_id(client: BacklogClient, config: ReminderConfig) -> int:
    """Configured assignee id, or the owner of the API key"""
    if config.assignee_id is not None:
        return config.assignee_id
    return client.get_myself()['id']


def collect_buckets(client: BacklogClient, assignee_id: int, anchor: date,
                    status: Optional[StatusDisplay] = None) -> UrgencyBuckets:
    """
    Fetch, filter and classify the assignee's issues for one anchor date.

    Any RetrievalError propagates before classification starts, so
    buckets are only ever built from a complete issue and status set.
    """
    since, until = get_due_date_window(anchor)
    issues = client.fetch_assigned_issues(assignee_id, since, until)

    project_ids = distinct_project_ids(issues)
    completed_status_ids = resolve_completed_status_ids(client, project_ids, status)

    buckets = classify(issues, completed_status_ids, anchor)

    if status:
        counts = ', '.join(f"{SECTION_TITLES[key]}: {len(items)}" for key, items in buckets.sections())
        status.update(f"📊 {len(issues)} issues fetched | {counts}")

    return buckets


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Post a Backlog due-date reminder to Slack',
        epilog='''
Sections:
  期限切れ (overdue), 当日 (due today), 残り2日 (due in 2 days), 残り3日 (due in 3 days).
  Issues in a completed status (完了 / Completed) are left out.
        ''',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('--date', type=parse_date_arg, help='Anchor date YYYY-MM-DD (default: today in TIMEZONE)')
    parser.add_argument('--dry-run', action='store_true', help='Print the message instead of posting it to Slack')
    parser.add_argument('--ignore-holidays', action='store_true', help='Run even if the anchor date is a public holiday')
    parser.add_argument('--skip-empty', action='store_true', help='Do not post when no issues qualify')
    parser.add_argument('--quiet', '-q', action='store_true', help='Hide progress output')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main execution function; returns the process exit code"""
    args = build_parser().parse_args(argv)
    status = StatusDisplay(quiet=args.quiet)

    # Load environment variables from .env file
    load_dotenv()

    try:
        config = load_config()
    except ConfigurationError as e:
        status.error(f"❌ {e}")
        return 1

    anchor = args.date or get_anchor_date(config.timezone)

    if config.skip_holidays and not args.ignore_holidays:
        holiday_name = get_holiday_name(anchor, config.holidays_country)
        if holiday_name:
            status.print(f"🎌 祝日({holiday_name})のため通知をスキップします: {iso_date(anchor)}")
            return 0

    client = BacklogClient(config, status)
    notifier = SlackNotifier(config.slack_webhook_url, timeout=config.request_timeout)
    generator = ReportGenerator(config.space, config.domain)

    try:
        assignee_id = resolve_assignee_id(client, config)
        buckets = collect_buckets(client, assignee_id, anchor, status)

        if buckets.total == 0 and (args.skip_empty or config.skip_empty_report):
            status.print("ℹ️  該当なしのため送信しません")
            return 0

        mention_target = config.mention_target or str(assignee_id)
        text = generator.render(buckets, iso_date(anchor), mention_target)

        if args.dry_run:
            status.raw(text)
            return 0

        notifier.send(text)
    except (RetrievalError, DispatchError) as e:
        status.error(f"❌ {e}")
        return 1

    status.print("✅ Slackへ送信しました。", style="green")
    return 0


if __name__ == "__main__":
    sys.exit(main())
