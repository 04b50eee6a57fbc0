#!/usr/bin/env python3
"""
Unit tests for backlog_client.py - Backlog API retrieval and pagination
"""

import os
import sys
import unittest
from datetime import date
from unittest.mock import Mock, patch

import requests

# Add parent directory to path to import project modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from backlog_client import BacklogClient, RetrievalError
from config import ReminderConfig


def issue_payload(number, due='2024-06-10T00:00:00Z'):
    return {
        'id': number,
        'projectId': 10,
        'issueKey': f"PROJ-{number}",
        'summary': f"Issue {number}",
        'dueDate': due,
        'assignee': {'id': 42, 'name': 'Tester'},
        'status': {'id': 1, 'projectId': 10, 'name': '未対応', 'color': '#ed8077', 'displayOrder': 1000},
    }


def page_of(size, start=0):
    return [issue_payload(start + n) for n in range(size)]


def ok_response(data):
    response = Mock()
    response.status_code = 200
    response.json.return_value = data
    return response


def error_response(status_code, text):
    response = Mock()
    response.status_code = status_code
    response.text = text
    return response


class TestBacklogClient(unittest.TestCase):
    """Test the BacklogClient class"""

    def setUp(self):
        """Set up test fixtures"""
        self.config = ReminderConfig(
            space='example',
            api_key='secret-key',
            slack_webhook_url='https://hooks.slack.com/services/T/B/X',
            request_timeout=12,
        )
        self.client = BacklogClient(self.config)

    def test_init(self):
        """Test BacklogClient initialization"""
        self.assertEqual(self.client.base_url, 'https://example.backlog.jp/api/v2')
        self.assertEqual(self.client.timeout, 12)

    def test_pagination_stops_on_short_page(self):
        """Test pages of 100, 100, 37 give 237 issues in order"""
        pages = [page_of(100, 0), page_of(100, 100), page_of(37, 200)]
        with patch.object(self.client.session, 'get', side_effect=[ok_response(p) for p in pages]) as mock_get:
            issues = self.client.fetch_assigned_issues(42, date(2023, 6, 11), date(2024, 6, 13))

        self.assertEqual(len(issues), 237)
        self.assertEqual([i.id for i in issues], list(range(237)))
        self.assertEqual(mock_get.call_count, 3)
        offsets = [call.kwargs['params']['offset'] for call in mock_get.call_args_list]
        self.assertEqual(offsets, [0, 100, 200])

    def test_pagination_stops_on_empty_page(self):
        """Test three full pages followed by an empty one give 300 issues"""
        pages = [page_of(100, 0), page_of(100, 100), page_of(100, 200), []]
        with patch.object(self.client.session, 'get', side_effect=[ok_response(p) for p in pages]) as mock_get:
            issues = self.client.fetch_assigned_issues(42, date(2023, 6, 11), date(2024, 6, 13))

        self.assertEqual(len(issues), 300)
        self.assertEqual(mock_get.call_count, 4)

    def test_search_parameters(self):
        """Test the issue search query parameters"""
        with patch.object(self.client.session, 'get', return_value=ok_response([])) as mock_get:
            self.client.fetch_assigned_issues(42, date(2023, 6, 11), date(2024, 6, 13))

        args, kwargs = mock_get.call_args
        self.assertEqual(args[0], 'https://example.backlog.jp/api/v2/issues')
        self.assertEqual(kwargs['timeout'], 12)
        params = kwargs['params']
        self.assertEqual(params['apiKey'], 'secret-key')
        self.assertEqual(params['assigneeId[]'], 42)
        self.assertEqual(params['dueDateSince'], '2023-06-11')
        self.assertEqual(params['dueDateUntil'], '2024-06-13')
        self.assertEqual(params['sort'], 'dueDate')
        self.assertEqual(params['order'], 'asc')
        self.assertEqual(params['count'], 100)
        self.assertEqual(params['offset'], 0)

    def test_issue_fields_parsed(self):
        """Test issue payloads become Issue objects"""
        payload = issue_payload(7, due='2024-06-12T00:00:00Z')
        with patch.object(self.client.session, 'get', return_value=ok_response([payload])):
            issues = self.client.fetch_assigned_issues(42, date(2023, 6, 11), date(2024, 6, 13))

        issue = issues[0]
        self.assertEqual(issue.issue_key, 'PROJ-7')
        self.assertEqual(issue.project_id, 10)
        self.assertEqual(issue.due_date, date(2024, 6, 12))
        self.assertEqual(issue.status.name, '未対応')
        self.assertEqual(issue.assignee_id, 42)

    def test_failed_page_raises(self):
        """Test a failing second page aborts with status and body"""
        responses = [ok_response(page_of(100)), error_response(500, 'Internal Server Error')]
        with patch.object(self.client.session, 'get', side_effect=responses):
            with self.assertRaises(RetrievalError) as ctx:
                self.client.fetch_assigned_issues(42, date(2023, 6, 11), date(2024, 6, 13))

        self.assertEqual(ctx.exception.status_code, 500)
        self.assertEqual(ctx.exception.body, 'Internal Server Error')
        self.assertNotIn('secret-key', str(ctx.exception))

    def test_non_json_body_raises(self):
        """Test a 2xx maintenance page becomes RetrievalError"""
        response = Mock()
        response.status_code = 200
        response.text = '<html>Maintenance</html>'
        response.json.side_effect = requests.exceptions.JSONDecodeError('Expecting value', '<html>', 0)
        with patch.object(self.client.session, 'get', return_value=response):
            with self.assertRaises(RetrievalError) as ctx:
                self.client.get_project_statuses(10)

        self.assertEqual(ctx.exception.status_code, 200)
        self.assertEqual(ctx.exception.body, '<html>Maintenance</html>')

    def test_transport_error_wrapped(self):
        """Test that connection failures become RetrievalError"""
        error = requests.exceptions.ConnectionError('boom /issues?apiKey=secret-key')
        with patch.object(self.client.session, 'get', side_effect=error):
            with self.assertRaises(RetrievalError) as ctx:
                self.client.get_myself()

        self.assertIsNone(ctx.exception.status_code)
        self.assertNotIn('secret-key', str(ctx.exception))

    def test_page_limit(self):
        """Test that endless full pages stop at the page cap with an error"""
        with patch('backlog_client.MAX_ISSUE_PAGES', 3):
            with patch.object(self.client.session, 'get', side_effect=lambda *a, **k: ok_response(page_of(100))) as mock_get:
                with self.assertRaises(RetrievalError):
                    self.client.fetch_assigned_issues(42, date(2023, 6, 11), date(2024, 6, 13))

        self.assertEqual(mock_get.call_count, 3)

    def test_get_project_statuses(self):
        """Test status list retrieval for one project"""
        statuses = [
            {'id': 1, 'projectId': 10, 'name': '未対応', 'color': '#ed8077', 'displayOrder': 1000},
            {'id': 4, 'projectId': 10, 'name': '完了', 'color': '#b0be3c', 'displayOrder': 4000},
        ]
        with patch.object(self.client.session, 'get', return_value=ok_response(statuses)) as mock_get:
            result = self.client.get_project_statuses(10)

        self.assertEqual(mock_get.call_args[0][0], 'https://example.backlog.jp/api/v2/projects/10/statuses')
        self.assertEqual([s.id for s in result], [1, 4])
        self.assertEqual(result[1].name, '完了')
        self.assertEqual(result[1].display_order, 4000)

    def test_get_myself(self):
        """Test current-user lookup"""
        with patch.object(self.client.session, 'get', return_value=ok_response({'id': 42, 'userId': 'tester'})) as mock_get:
            me = self.client.get_myself()

        self.assertEqual(me['id'], 42)
        self.assertTrue(mock_get.call_args[0][0].endswith('/users/myself'))


if __name__ == '__main__':
    unittest.main()
