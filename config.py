"""
Configuration module for the Backlog Deadline Reminder
Contains all configurable constants and the validated runtime settings.
"""

import os
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple

import holidays
import pytz


# ============================================================================
# BACKLOG API
# ============================================================================

DEFAULT_BACKLOG_DOMAIN: str = 'backlog.jp'  # or 'backlog.com'

# Issue search pagination
ISSUE_PAGE_SIZE: int = 100
MAX_ISSUE_PAGES: int = 500  # Up to 50,000 issues (500 pages * 100 per page)

# How far back overdue issues are collected
DUE_DATE_LOOKBACK_DAYS: int = 365

# Seconds per HTTP request (Backlog and Slack)
DEFAULT_REQUEST_TIMEOUT: float = 30.0


# ============================================================================
# STATUS CLASSIFICATION
# ============================================================================

# Status names containing any of these (case-insensitive) count as done
COMPLETED_STATUS_MARKERS: Tuple[str, ...] = (
    '完了',
    'completed',
)


# ============================================================================
# DATES & HOLIDAYS
# ============================================================================

DEFAULT_TIMEZONE: str = 'Asia/Tokyo'
DEFAULT_HOLIDAYS_COUNTRY: str = 'JP'

# Day offsets reported in the reminder (overdue is anything below zero)
DUE_TODAY_DAYS: int = 0
DUE_IN_2_DAYS: int = 2
DUE_IN_3_DAYS: int = 3


# ============================================================================
# REPORT FORMATTING
# ============================================================================

REPORT_TITLE: str = ':spiral_calendar_pad: Backlog 期限リマインド'
NO_ITEMS_PLACEHOLDER: str = '（該当なし）'

SECTION_TITLES: Dict[str, str] = {
    'overdue': '🟥 期限切れ',
    'today': '🟧 当日',
    'in_2_days': '🟨 残り2日',
    'in_3_days': '🟩 残り3日',
}

HOLIDAY_FALLBACK_NAME: str = '祝日'


# ============================================================================
# ENVIRONMENT VARIABLES
# ============================================================================

REQUIRED_ENV_VARS: List[str] = [
    'BACKLOG_SPACE',
    'BACKLOG_API_KEY',
    'SLACK_WEBHOOK_URL',
]

TRUTHY_VALUES = ('1', 'true', 'yes')


class ConfigurationError(ValueError):
    """Raised when required settings are missing or malformed"""
    pass


@dataclass(frozen=True)
class ReminderConfig:
    """Validated settings for one reminder run"""
    space: str
    api_key: str
    slack_webhook_url: str
    domain: str = DEFAULT_BACKLOG_DOMAIN
    timezone: str = DEFAULT_TIMEZONE
    skip_holidays: bool = True
    holidays_country: str = DEFAULT_HOLIDAYS_COUNTRY
    assignee_id: Optional[int] = None
    mention_target: Optional[str] = None
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    skip_empty_report: bool = False

    @property
    def host(self) -> str:
        return f"{self.space}.{self.domain}"

    @property
    def api_base(self) -> str:
        return f"https://{self.host}/api/v2"


def _get_flag(environ: Mapping[str, str], name: str, default: bool) -> bool:
    value = environ.get(name)
    if value is None or value.strip() == '':
        return default
    return value.strip().lower() in TRUTHY_VALUES


def _get_text(environ: Mapping[str, str], name: str, default: Optional[str] = None) -> Optional[str]:
    value = (environ.get(name) or '').strip()
    return value or default


def load_config(environ: Optional[Mapping[str, str]] = None) -> ReminderConfig:
    """
    Build and validate the run configuration from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        A ReminderConfig with defaults applied

    Raises:
        ConfigurationError: if a required variable is missing or a value is invalid
    """
    if environ is None:
        environ = os.environ

    missing = [name for name in REQUIRED_ENV_VARS if not _get_text(environ, name)]
    if missing:
        raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")

    timezone_name = _get_text(environ, 'TIMEZONE', DEFAULT_TIMEZONE)
    try:
        pytz.timezone(timezone_name)
    except pytz.UnknownTimeZoneError:
        raise ConfigurationError(f"Unknown timezone: {timezone_name}")

    holidays_country = _get_text(environ, 'HOLIDAYS_COUNTRY', DEFAULT_HOLIDAYS_COUNTRY)
    if holidays_country not in holidays.list_supported_countries():
        raise ConfigurationError(f"Unsupported HOLIDAYS_COUNTRY: {holidays_country}")

    assignee_id = None
    raw_assignee = _get_text(environ, 'BACKLOG_ASSIGNEE_ID')
    if raw_assignee:
        try:
            assignee_id = int(raw_assignee)
        except ValueError:
            raise ConfigurationError(f"BACKLOG_ASSIGNEE_ID must be numeric, got: {raw_assignee}")

    raw_timeout = _get_text(environ, 'REQUEST_TIMEOUT')
    request_timeout = DEFAULT_REQUEST_TIMEOUT
    if raw_timeout:
        try:
            request_timeout = float(raw_timeout)
        except ValueError:
            raise ConfigurationError(f"REQUEST_TIMEOUT must be a number of seconds, got: {raw_timeout}")
        if request_timeout <= 0:
            raise ConfigurationError(f"REQUEST_TIMEOUT must be positive, got: {raw_timeout}")

    return ReminderConfig(
        space=_get_text(environ, 'BACKLOG_SPACE'),
        api_key=_get_text(environ, 'BACKLOG_API_KEY'),
        slack_webhook_url=_get_text(environ, 'SLACK_WEBHOOK_URL'),
        domain=_get_text(environ, 'BACKLOG_DOMAIN', DEFAULT_BACKLOG_DOMAIN),
        timezone=timezone_name,
        skip_holidays=_get_flag(environ, 'SKIP_HOLIDAYS', True),
        holidays_country=holidays_country,
        assignee_id=assignee_id,
        mention_target=_get_text(environ, 'SLACK_MENTION_USER_ID'),
        request_timeout=request_timeout,
        skip_empty_report=_get_flag(environ, 'SKIP_EMPTY_REPORT', False),
    )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    'DEFAULT_BACKLOG_DOMAIN',
    'ISSUE_PAGE_SIZE',
    'MAX_ISSUE_PAGES',
    'DUE_DATE_LOOKBACK_DAYS',
    'DEFAULT_REQUEST_TIMEOUT',
    'COMPLETED_STATUS_MARKERS',
    'DEFAULT_TIMEZONE',
    'DEFAULT_HOLIDAYS_COUNTRY',
    'DUE_TODAY_DAYS',
    'DUE_IN_2_DAYS',
    'DUE_IN_3_DAYS',
    'REPORT_TITLE',
    'NO_ITEMS_PLACEHOLDER',
    'SECTION_TITLES',
    'HOLIDAY_FALLBACK_NAME',
    'REQUIRED_ENV_VARS',
    'ConfigurationError',
    'ReminderConfig',
    'load_config',
]
