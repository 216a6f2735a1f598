"""
Tests for the embed service orchestration and oEmbed envelope.
"""

import unittest
from unittest.mock import patch

from embed_agent.core.embed_service import EmbedService, map_oembed_type
from embed_agent.core.exceptions import ExtractionError, FetchError, InvalidURLError, UnreachableTargetError
from embed_agent.core.models import ContentType, EmbedMetadata, OEmbedOptions, Platform
from embed_agent.core.outcome import OutcomeStatus
from embed_agent.extractors.youtube_extractor import YouTubeExtractor

YOUTUBE_URL = 'https://www.youtube.com/watch?v=dQw4w9WgXcQ'

ARTICLE_PAGE = """
<html><head>
  <meta property="og:title" content="An Article">
  <meta property="og:description" content="About things">
  <meta property="og:type" content="article">
  <meta property="og:image" content="https://example.com/cover.png">
</head></html>
"""

VIDEO_PAGE = """
<html><head>
  <meta property="og:title" content="A Video">
  <meta property="og:type" content="video.other">
  <meta property="og:image" content="https://example.com/still.png">
  <meta property="og:video:width" content="1280">
  <meta property="og:video:height" content="720">
</head></html>
"""


@patch('embed_agent.extractors.generic_extractor.fetch_document')
@patch('embed_agent.extractors.oembed_extractor.fetch_json')
class TestExtractMetadata(unittest.TestCase):

    def test_invalid_url(self, mock_json, mock_document):
        service = EmbedService()

        for url in ['', 'not a url', 'example.com']:
            with self.subTest(url=url):
                with self.assertRaises(InvalidURLError):
                    service.extract_metadata(url)

        mock_json.assert_not_called()
        mock_document.assert_not_called()

    def test_youtube_url_is_normalized(self, mock_json, mock_document):
        mock_json.side_effect = FetchError('HTTP 500')

        metadata = EmbedService().extract_metadata(YOUTUBE_URL + '&utm_source=share')

        self.assertEqual(metadata.url, YOUTUBE_URL)
        self.assertEqual(metadata.platform, Platform.YOUTUBE)
        self.assertEqual(metadata.embed_data['videoId'], 'dQw4w9WgXcQ')
        mock_document.assert_not_called()

    def test_platform_failure_falls_back_to_generic(self, mock_json, mock_document):
        mock_document.return_value = ARTICLE_PAGE

        with patch.object(YouTubeExtractor, 'extract_metadata', side_effect=FetchError('boom')):
            metadata = EmbedService().extract_metadata(YOUTUBE_URL)

        self.assertEqual(metadata.platform, Platform.GENERIC)
        self.assertEqual(metadata.title, 'An Article')
        self.assertEqual(metadata.url, YOUTUBE_URL)
        mock_document.assert_called_once()

    def test_unexpected_platform_error_falls_back_to_generic(self, mock_json, mock_document):
        mock_json.return_value = {'title': 'Never Gonna Give You Up'}
        mock_document.return_value = ARTICLE_PAGE

        with patch.object(YouTubeExtractor, 'build_metadata', side_effect=KeyError('title')):
            metadata = EmbedService().extract_metadata(YOUTUBE_URL)

        self.assertEqual(metadata.platform, Platform.GENERIC)
        self.assertEqual(metadata.title, 'An Article')
        mock_document.assert_called_once()

    def test_unexpected_platform_error_is_recoverable(self, mock_json, mock_document):
        with patch.object(YouTubeExtractor, 'extract_metadata', side_effect=OverflowError('too big')):
            outcome = YouTubeExtractor().run(YOUTUBE_URL)

        self.assertEqual(outcome.status, OutcomeStatus.RECOVERABLE)
        self.assertIsInstance(outcome.error, ExtractionError)
        self.assertIsInstance(outcome.error.__cause__, OverflowError)

    def test_generic_failure_degrades(self, mock_json, mock_document):
        mock_document.side_effect = UnreachableTargetError('Name or service not known')

        metadata = EmbedService().extract_metadata('https://nonexistent.invalid/a')

        self.assertEqual(metadata.platform, Platform.GENERIC)
        self.assertEqual(metadata.type, ContentType.LINK)
        self.assertEqual(metadata.title, 'nonexistent.invalid')

    def test_strict_generic_failure_propagates(self, mock_json, mock_document):
        mock_document.side_effect = UnreachableTargetError('Name or service not known')
        service = EmbedService({'generic': {'strict': True}})

        with self.assertRaises(UnreachableTargetError):
            service.extract_metadata('https://nonexistent.invalid/a')

    def test_fetch_settings_reach_extractors(self, mock_json, mock_document):
        mock_document.return_value = ARTICLE_PAGE
        service = EmbedService({'fetch': {'timeout': 3, 'user_agent': 'TestBot/1.0'}})

        service.extract_metadata('https://example.com/a')

        self.assertEqual(mock_document.call_args.kwargs['timeout'], 3)
        self.assertEqual(mock_document.call_args.kwargs['user_agent'], 'TestBot/1.0')


@patch('embed_agent.extractors.generic_extractor.fetch_document')
@patch('embed_agent.extractors.oembed_extractor.fetch_json')
class TestOEmbed(unittest.TestCase):

    def test_explicit_dimensions_win(self, mock_json, mock_document):
        mock_document.return_value = VIDEO_PAGE

        response = EmbedService().get_oembed('https://example.com/v', OEmbedOptions(maxwidth=640, maxheight=480))

        self.assertEqual((response['width'], response['height']), (640, 480))

    def test_metadata_dimensions(self, mock_json, mock_document):
        mock_document.return_value = VIDEO_PAGE

        response = EmbedService().get_oembed('https://example.com/v')

        self.assertEqual((response['width'], response['height']), (1280, 720))

    def test_default_dimensions(self, mock_json, mock_document):
        mock_document.return_value = ARTICLE_PAGE

        response = EmbedService().get_oembed('https://example.com/a')

        self.assertEqual((response['width'], response['height']), (500, 300))

    def test_envelope(self, mock_json, mock_document):
        mock_document.return_value = ARTICLE_PAGE

        response = EmbedService().get_oembed('https://example.com/a')

        self.assertEqual(response['type'], 'rich')
        self.assertEqual(response['version'], '1.0')
        self.assertEqual(response['title'], 'An Article')
        self.assertEqual(response['provider_name'], 'example.com')
        self.assertEqual(response['cache_age'], 3600)
        self.assertIn('embed-card', response['html'])
        self.assertNotIn('thumbnail_url', response)
        self.assertNotIn('author_name', response)

    def test_video_thumbnail(self, mock_json, mock_document):
        mock_document.return_value = VIDEO_PAGE

        response = EmbedService().get_oembed('https://example.com/v')

        self.assertEqual(response['type'], 'video')
        self.assertEqual(response['thumbnail_url'], 'https://example.com/still.png')
        self.assertEqual(response['thumbnail_width'], 1280)

    def test_youtube_envelope(self, mock_json, mock_document):
        mock_json.side_effect = FetchError('HTTP 500')

        response = EmbedService().get_oembed(YOUTUBE_URL, OEmbedOptions(maxwidth=800))

        self.assertEqual(response['type'], 'video')
        self.assertEqual(response['width'], 800)
        self.assertEqual(response['height'], 315)
        self.assertEqual(response['provider_name'], 'YouTube')
        self.assertIn('window.embedPlayer', response['html'])

    def test_default_provider_name(self, mock_json, mock_document):
        service = EmbedService()
        bare = EmbedMetadata(url='https://example.com/', title='Bare')

        with patch.object(service, 'extract_metadata', return_value=bare):
            response = service.get_oembed('https://example.com/')

        self.assertEqual(response['provider_name'], 'External Content')
        self.assertEqual(response['type'], 'link')
        self.assertNotIn('provider_url', response)


class TestServiceHelpers(unittest.TestCase):

    def test_oembed_type_mapping_is_total(self):
        expected = {
            ContentType.VIDEO: 'video',
            ContentType.IMAGE: 'photo',
            ContentType.ARTICLE: 'rich',
            ContentType.AUDIO: 'rich',
            ContentType.LINK: 'link',
        }
        for content_type in ContentType:
            with self.subTest(content_type=content_type):
                self.assertEqual(map_oembed_type(content_type), expected[content_type])
        self.assertEqual(map_oembed_type('hologram'), 'link')

    @patch('embed_agent.extractors.oembed_extractor.fetch_json')
    def test_render_embed(self, mock_json):
        mock_json.side_effect = FetchError('HTTP 500')

        html = EmbedService().render_embed('https://youtu.be/dQw4w9WgXcQ')

        self.assertIn('var VIDEO_ID = "dQw4w9WgXcQ";', html)

    def test_supported_platforms(self):
        self.assertEqual(
            EmbedService().supported_platforms(),
            ['youtube', 'instagram', 'tiktok', 'linkedin', 'twitter', 'generic'],
        )

    def test_health_check(self):
        health = EmbedService().health_check()

        self.assertEqual(health['status'], 'healthy')
        self.assertEqual(health['extractors'], 4)
        self.assertIn('timestamp', health)


if __name__ == '__main__':
    unittest.main()
