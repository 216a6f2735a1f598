"""
Tests for the HTTP API.
"""

import copy
import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

from embed_agent.api.app import create_app
from embed_agent.config import DEFAULT_CONFIG
from embed_agent.core.embed_service import EmbedService
from embed_agent.core.exceptions import FetchError, FetchTimeoutError

YOUTUBE_URL = 'https://www.youtube.com/watch?v=dQw4w9WgXcQ'

OEMBED_PAYLOAD = {
    'title': 'Never Gonna Give You Up',
    'author_name': 'Rick Astley',
    'author_url': 'https://www.youtube.com/@RickAstleyYT',
    'thumbnail_url': 'https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg',
    'width': 200,
    'height': 113,
}

ARTICLE_PAGE = """
<html><head>
  <meta property="og:title" content="An Article">
  <meta property="og:type" content="article">
</head></html>
"""


def make_config(**rate_limit):
    config = copy.deepcopy(DEFAULT_CONFIG)
    config['rate_limit'].update({'enabled': False})
    config['rate_limit'].update(rate_limit)
    return config


class APITestCase(unittest.TestCase):

    def setUp(self):
        self.config = make_config()
        self.service = EmbedService(self.config)
        self.client = TestClient(create_app(self.config, self.service))

        json_patcher = patch('embed_agent.extractors.oembed_extractor.fetch_json')
        document_patcher = patch('embed_agent.extractors.generic_extractor.fetch_document')
        self.mock_json = json_patcher.start()
        self.mock_document = document_patcher.start()
        self.addCleanup(json_patcher.stop)
        self.addCleanup(document_patcher.stop)


class TestExtractRoute(APITestCase):

    def test_youtube_end_to_end(self):
        self.mock_json.return_value = OEMBED_PAYLOAD

        response = self.client.get('/api/extract', params={'url': YOUTUBE_URL})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body['success'])
        self.assertIn('timestamp', body)
        self.assertEqual(body['data']['platform'], 'youtube')
        self.assertEqual(body['data']['type'], 'video')
        self.assertEqual(body['data']['embedData']['videoId'], 'dQw4w9WgXcQ')
        self.assertEqual(body['data']['embedData']['embedUrl'], 'https://www.youtube.com/embed/dQw4w9WgXcQ')

    def test_missing_url(self):
        response = self.client.get('/api/extract')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'Invalid URL')

    def test_scheme_is_added(self):
        self.mock_document.return_value = ARTICLE_PAGE

        response = self.client.get('/api/extract', params={'url': 'example.com/page'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['data']['url'], 'https://example.com/page')

    def test_non_http_scheme_rejected(self):
        response = self.client.get('/api/extract', params={'url': 'ftp://example.com/file'})

        self.assertEqual(response.status_code, 400)
        self.mock_document.assert_not_called()

    def test_timeout_maps_to_408(self):
        with patch.object(self.service, 'extract_metadata', side_effect=FetchTimeoutError('slow')):
            response = self.client.get('/api/extract', params={'url': 'https://example.com/'})

        self.assertEqual(response.status_code, 408)
        self.assertEqual(response.json()['error'], 'Request timeout')

    def test_server_errors_hide_details(self):
        with patch.object(self.service, 'extract_metadata', side_effect=FetchError('secret upstream detail')):
            response = self.client.get('/api/extract', params={'url': 'https://example.com/'})

        self.assertEqual(response.status_code, 500)
        self.assertNotIn('secret', response.json()['message'])


class TestOEmbedRoute(APITestCase):

    def test_json(self):
        self.mock_document.return_value = ARTICLE_PAGE

        response = self.client.get('/api/oembed', params={'url': 'https://example.com/a', 'maxwidth': '640'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers['cache-control'], 'public, max-age=3600')
        body = response.json()
        self.assertEqual(body['type'], 'rich')
        self.assertEqual(body['width'], 640)
        self.assertEqual(body['height'], 300)

    def test_xml_not_implemented(self):
        response = self.client.get('/api/oembed', params={'url': 'https://example.com/a', 'format': 'xml'})

        self.assertEqual(response.status_code, 501)
        self.mock_document.assert_not_called()

    def test_unknown_format(self):
        response = self.client.get('/api/oembed', params={'url': 'https://example.com/a', 'format': 'yaml'})

        self.assertEqual(response.status_code, 400)

    def test_dimension_out_of_range(self):
        for value in ['0', '2001', 'wide']:
            with self.subTest(value=value):
                response = self.client.get('/api/oembed', params={'url': 'https://example.com/a', 'maxheight': value})
                self.assertEqual(response.status_code, 400)
        self.mock_document.assert_not_called()


class TestRenderRoute(APITestCase):

    def test_malformed_url(self):
        response = self.client.get('/api/render', params={'url': 'not a url'})

        self.assertEqual(response.status_code, 400)
        self.assertIn('text/html', response.headers['content-type'])
        self.assertIn('Embed Error', response.text)
        self.mock_document.assert_not_called()
        self.mock_json.assert_not_called()

    def test_render_youtube(self):
        self.mock_json.return_value = OEMBED_PAYLOAD

        response = self.client.get('/api/render', params={
            'url': YOUTUBE_URL, 'width': '640', 'height': '360', 'autoplay': '1', 'controls': 'false', 'theme': 'dark',
        })

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers['cache-control'], 'public, max-age=3600')
        self.assertEqual(response.headers['x-frame-options'], 'SAMEORIGIN')
        self.assertEqual(response.headers['x-content-type-options'], 'nosniff')
        self.assertIn('var AUTOPLAY = true;', response.text)
        self.assertIn('var CONTROLS = false;', response.text)
        self.assertIn('max-width: 640px', response.text)

    def test_invalid_theme(self):
        response = self.client.get('/api/render', params={'url': 'https://example.com/', 'theme': 'neon'})

        self.assertEqual(response.status_code, 400)

    def test_failure_renders_error_page(self):
        with patch.object(self.service, 'render_embed', side_effect=FetchError('boom')):
            response = self.client.get('/api/render', params={'url': 'https://example.com/'})

        self.assertEqual(response.status_code, 500)
        self.assertIn('Embed Error', response.text)

    def test_unexpected_failure_renders_error_page(self):
        with patch.object(self.service, 'render_embed', side_effect=RuntimeError('bug')):
            response = self.client.get('/api/render', params={'url': 'https://example.com/'})

        self.assertEqual(response.status_code, 500)
        self.assertIn('Embed Error', response.text)


class TestSystemRoutes(APITestCase):

    def test_health(self):
        response = self.client.get('/health')

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body['status'], 'healthy')
        self.assertEqual(body['service']['extractors'], 4)

    def test_index(self):
        response = self.client.get('/')

        self.assertEqual(response.status_code, 200)
        self.assertIn('youtube', response.json()['supportedPlatforms'])

    def test_unknown_path(self):
        response = self.client.get('/api/unknown')

        self.assertEqual(response.status_code, 404)
        self.assertIn('/api/extract', response.json()['availableEndpoints'])

    def test_cors(self):
        response = self.client.get('/health', headers={'Origin': 'http://localhost:3000'})

        self.assertEqual(response.headers['access-control-allow-origin'], 'http://localhost:3000')


class TestRateLimiting(unittest.TestCase):

    def test_rejects_after_budget(self):
        config = make_config(enabled=True, max_requests=2, window_seconds=60)
        client = TestClient(create_app(config, EmbedService(config)))

        self.assertEqual(client.get('/').status_code, 200)
        self.assertEqual(client.get('/').status_code, 200)

        response = client.get('/')
        self.assertEqual(response.status_code, 429)
        self.assertEqual(response.json()['error'], 'Too many requests')
        self.assertIn('retry-after', response.headers)

    def test_forwarded_header_ignored_from_untrusted_peer(self):
        config = make_config(enabled=True, max_requests=1, window_seconds=60)
        client = TestClient(create_app(config, EmbedService(config)))

        self.assertEqual(client.get('/', headers={'X-Forwarded-For': '203.0.113.1'}).status_code, 200)
        response = client.get('/', headers={'X-Forwarded-For': '203.0.113.2'})

        self.assertEqual(response.status_code, 429)

    def test_forwarded_header_from_trusted_proxy(self):
        config = make_config(enabled=True, max_requests=1, window_seconds=60)
        config['server']['trusted_proxies'] = ['testclient']
        client = TestClient(create_app(config, EmbedService(config)))

        self.assertEqual(client.get('/', headers={'X-Forwarded-For': '203.0.113.1'}).status_code, 200)
        self.assertEqual(client.get('/', headers={'X-Forwarded-For': '203.0.113.2, 10.0.0.1'}).status_code, 200)
        self.assertEqual(client.get('/', headers={'X-Forwarded-For': '203.0.113.1'}).status_code, 429)

    def test_health_is_exempt(self):
        config = make_config(enabled=True, max_requests=1, window_seconds=60)
        client = TestClient(create_app(config, EmbedService(config)))

        for _ in range(3):
            self.assertEqual(client.get('/health').status_code, 200)


if __name__ == '__main__':
    unittest.main()
