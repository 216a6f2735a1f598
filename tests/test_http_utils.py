"""
Tests for outbound HTTP helpers.
"""

import unittest
from unittest.mock import ANY, Mock, patch

import requests

from embed_agent.core.exceptions import FetchError, FetchTimeoutError, UnreachableTargetError
from embed_agent.utils.http_utils import (
    DEFAULT_USER_AGENT,
    OEMBED_TIMEOUT,
    create_headers,
    fetch_document,
    fetch_json,
)


def make_response(status_code=200, text='', json_data=None):
    response = Mock()
    response.status_code = status_code
    response.text = text
    if isinstance(json_data, Exception):
        response.json.side_effect = json_data
    else:
        response.json.return_value = json_data
    return response


class TestCreateHeaders(unittest.TestCase):

    def test_default_identity(self):
        headers = create_headers()
        self.assertEqual(headers['User-Agent'], DEFAULT_USER_AGENT)

    def test_overrides(self):
        headers = create_headers('CustomBot/2.0', accept='application/json', custom_headers={'X-Test': '1'})
        self.assertEqual(headers['User-Agent'], 'CustomBot/2.0')
        self.assertEqual(headers['Accept'], 'application/json')
        self.assertEqual(headers['X-Test'], '1')


@patch.object(requests.Session, 'get')
class TestFetchDocument(unittest.TestCase):
    """Error translation for page fetches."""

    def test_returns_body(self, mock_get):
        mock_get.return_value = make_response(text='<html><title>Hi</title></html>')

        self.assertEqual(fetch_document('https://example.com/'), '<html><title>Hi</title></html>')
        mock_get.assert_called_once_with('https://example.com/', params=None, headers=ANY, timeout=10)

    def test_timeout(self, mock_get):
        mock_get.side_effect = requests.Timeout('slow')
        with self.assertRaises(FetchTimeoutError):
            fetch_document('https://example.com/')

    def test_connection_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError('dns failure')
        with self.assertRaises(UnreachableTargetError):
            fetch_document('https://nonexistent.invalid/')

    def test_too_many_redirects(self, mock_get):
        mock_get.side_effect = requests.TooManyRedirects('loop')
        with self.assertRaises(FetchError) as ctx:
            fetch_document('https://example.com/')
        self.assertNotIsInstance(ctx.exception, UnreachableTargetError)

    def test_non_success_status(self, mock_get):
        mock_get.return_value = make_response(status_code=503)
        with self.assertRaises(FetchError):
            fetch_document('https://example.com/')


@patch.object(requests.Session, 'get')
class TestFetchJson(unittest.TestCase):
    """oEmbed style JSON fetches."""

    def test_returns_payload(self, mock_get):
        mock_get.return_value = make_response(json_data={'title': 'x'})

        payload = fetch_json('https://www.youtube.com/oembed', params={'url': 'u', 'format': 'json'})

        self.assertEqual(payload, {'title': 'x'})
        mock_get.assert_called_once_with(
            'https://www.youtube.com/oembed',
            params={'url': 'u', 'format': 'json'},
            headers=ANY,
            timeout=OEMBED_TIMEOUT,
        )
        self.assertEqual(mock_get.call_args.kwargs['headers']['Accept'], 'application/json')

    def test_invalid_json(self, mock_get):
        mock_get.return_value = make_response(json_data=ValueError('not json'))
        with self.assertRaises(FetchError):
            fetch_json('https://www.youtube.com/oembed')

    def test_not_found(self, mock_get):
        mock_get.return_value = make_response(status_code=404)
        with self.assertRaises(FetchError):
            fetch_json('https://www.youtube.com/oembed')


if __name__ == '__main__':
    unittest.main()
