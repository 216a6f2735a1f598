"""
Basic tests for Embed Agent.
"""

import unittest

from embed_agent import EmbedService, __version__
from embed_agent.extractors.base_extractor import BaseExtractor
from embed_agent.extractors.generic_extractor import GenericExtractor


class TestBasic(unittest.TestCase):
    """Basic test cases."""

    def test_service_initialization(self):
        """Test that the embed service can be initialized."""
        service = EmbedService()
        self.assertIsNotNone(service)
        self.assertEqual(len(service.extractors), 4)
        self.assertIsInstance(service.extractors[-1], GenericExtractor)

    def test_base_extractor_is_abstract(self):
        """Test that base extractor cannot be used directly."""
        with self.assertRaises(TypeError):
            BaseExtractor()

    def test_extractor_names(self):
        names = [extractor.name for extractor in EmbedService().extractors]
        self.assertEqual(names, ['youtube', 'tiktok', 'twitter', 'generic'])

    def test_version(self):
        self.assertTrue(__version__)


if __name__ == '__main__':
    unittest.main()
