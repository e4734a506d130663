"""
Tests for the offline catalyst table.
"""
from django.test import SimpleTestCase

from apps.intelligence.dtos import CatalystSource
from apps.intelligence.fallback import (
    DEFAULT_FALLBACK_CONTENT,
    FALLBACK_RULES,
    fallback_catalyst,
)


class FallbackCatalystTest(SimpleTestCase):

    def test_write_keyword(self):
        result = fallback_catalyst("Write the annual report")
        self.assertEqual(result.content, "Open a blank document and write just the title and today's date")
        self.assertEqual(result.estimated_minutes, 2)
        self.assertEqual(result.source, CatalystSource.FALLBACK)

    def test_no_keyword_uses_default(self):
        result = fallback_catalyst("Do something unrelated to any keyword")
        self.assertEqual(result.content, DEFAULT_FALLBACK_CONTENT)
        self.assertEqual(result.estimated_minutes, 5)

    def test_matching_is_case_insensitive(self):
        result = fallback_catalyst("CALL THE DENTIST")
        self.assertEqual(result.content, "Find the contact number and save it to your phone favorites")

    def test_earlier_group_wins(self):
        """'write' (group 1) beats 'call' (group 4) regardless of word order."""
        for title in ("Write down who to call", "Call Sam, then write notes"):
            with self.subTest(title=title):
                result = fallback_catalyst(title)
                self.assertEqual(result.content, FALLBACK_RULES[0].content)
                self.assertEqual(result.estimated_minutes, 2)

    def test_each_group_in_order(self):
        cases = [
            ("Study for the exam", 1),
            ("Declutter the garage", 2),
            ("Phone the bank", 3),
            ("Email the landlord", 4),
            ("Go to the gym", 5),
            ("Cook dinner", 6),
        ]
        for title, index in cases:
            with self.subTest(title=title):
                result = fallback_catalyst(title)
                self.assertEqual(result.content, FALLBACK_RULES[index].content)
                self.assertEqual(result.estimated_minutes, FALLBACK_RULES[index].minutes)

    def test_deterministic(self):
        self.assertEqual(fallback_catalyst("Clean the kitchen"), fallback_catalyst("Clean the kitchen"))

    def test_all_durations_in_range(self):
        for rule in FALLBACK_RULES:
            self.assertTrue(1 <= rule.minutes <= 5)
