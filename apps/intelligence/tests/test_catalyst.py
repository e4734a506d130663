"""
Tests for the catalyst generator.

The OpenAI client is replaced by MagicMock doubles; no network access.
"""
import json
from unittest.mock import MagicMock

from django.test import SimpleTestCase, override_settings

from apps.intelligence.catalyst import (
    DEFAULT_CONTENT,
    CatalystGenerator,
    CatalystPayload,
    build_prompt,
    get_catalyst_generator,
)
from apps.intelligence.dtos import CatalystRequestDTO, CatalystSource
from apps.intelligence.fallback import fallback_catalyst


def make_client(content=None, error=None):
    """Fake client whose chat.completions.create returns `content` or raises `error`."""
    client = MagicMock()
    if error is not None:
        client.chat.completions.create.side_effect = error
    else:
        response = MagicMock()
        response.choices = [MagicMock()]
        response.choices[0].message.content = content
        client.chat.completions.create.return_value = response
    return client


class PromptTest(SimpleTestCase):

    def test_prompt_includes_present_fields(self):
        prompt = build_prompt(CatalystRequestDTO(
            task_title="Plan the trip",
            task_description="Two weeks in Japan",
            category="personal",
            priority="high",
        ))
        self.assertIn('Given this task: "Plan the trip"', prompt)
        self.assertIn("Description: Two weeks in Japan", prompt)
        self.assertIn("Category: personal", prompt)
        self.assertIn("Priority: high", prompt)

    def test_prompt_omits_absent_fields(self):
        prompt = build_prompt(CatalystRequestDTO(task_title="Plan the trip"))
        self.assertNotIn("Description:", prompt)
        self.assertNotIn("Category:", prompt)
        self.assertNotIn("Priority:", prompt)
        self.assertNotIn("interested in", prompt)

    def test_prompt_mentions_interests(self):
        prompt = build_prompt(CatalystRequestDTO(task_title="Plan"), interests=["travel", "food"])
        self.assertIn("interested in: travel, food", prompt)


class CatalystPayloadTest(SimpleTestCase):

    def test_clamps_high(self):
        self.assertEqual(CatalystPayload.model_validate({"estimatedMinutes": 30}).estimated_minutes, 5)

    def test_clamps_low(self):
        self.assertEqual(CatalystPayload.model_validate({"estimatedMinutes": -4}).estimated_minutes, 1)

    def test_missing_or_zero_means_five(self):
        self.assertEqual(CatalystPayload.model_validate({}).estimated_minutes, 5)
        self.assertEqual(CatalystPayload.model_validate({"estimatedMinutes": 0}).estimated_minutes, 5)

    def test_rounds_fractions(self):
        self.assertEqual(CatalystPayload.model_validate({"estimatedMinutes": 2.6}).estimated_minutes, 3)
        self.assertEqual(CatalystPayload.model_validate({"estimatedMinutes": "4"}).estimated_minutes, 4)


class CatalystGeneratorTest(SimpleTestCase):

    def setUp(self):
        self.request = CatalystRequestDTO(task_title="Write the annual report", priority="high")

    def test_uses_model_answer(self):
        client = make_client(json.dumps({"content": "Open the report template", "estimatedMinutes": 3}))
        result = CatalystGenerator(client=client).generate_catalyst(self.request)

        self.assertEqual(result.content, "Open the report template")
        self.assertEqual(result.estimated_minutes, 3)
        self.assertEqual(result.source, CatalystSource.AI)

        kwargs = client.chat.completions.create.call_args.kwargs
        self.assertEqual(kwargs['model'], "gpt-4o")
        self.assertEqual(kwargs['response_format'], {'type': 'json_object'})
        self.assertNotIn('timeout', kwargs)

    def test_passes_timeout_when_configured(self):
        client = make_client(json.dumps({"content": "x", "estimatedMinutes": 1}))
        CatalystGenerator(client=client, timeout=7).generate_catalyst(self.request)
        self.assertEqual(client.chat.completions.create.call_args.kwargs['timeout'], 7)

    def test_out_of_range_minutes_are_clamped(self):
        client = make_client(json.dumps({"content": "Open the doc", "estimatedMinutes": 12}))
        result = CatalystGenerator(client=client).generate_catalyst(self.request)
        self.assertEqual(result.estimated_minutes, 5)

    def test_blank_content_gets_default(self):
        client = make_client(json.dumps({"content": "   ", "estimatedMinutes": 2}))
        result = CatalystGenerator(client=client).generate_catalyst(self.request)
        self.assertEqual(result.content, DEFAULT_CONTENT)
        self.assertEqual(result.estimated_minutes, 2)

    def test_client_error_falls_back(self):
        client = make_client(error=ConnectionError("network down"))
        with self.assertLogs('apps.intelligence.catalyst', level='ERROR'):
            result = CatalystGenerator(client=client).generate_catalyst(self.request)
        self.assertEqual(result, fallback_catalyst(self.request.task_title))

    def test_malformed_json_falls_back(self):
        client = make_client("this is not json")
        with self.assertLogs('apps.intelligence.catalyst', level='ERROR'):
            result = CatalystGenerator(client=client).generate_catalyst(self.request)
        self.assertEqual(result.source, CatalystSource.FALLBACK)
        self.assertEqual(result.estimated_minutes, 2)

    def test_wrong_shape_falls_back(self):
        client = make_client(json.dumps(["not", "an", "object"]))
        with self.assertLogs('apps.intelligence.catalyst', level='ERROR'):
            result = CatalystGenerator(client=client).generate_catalyst(self.request)
        self.assertEqual(result.source, CatalystSource.FALLBACK)

    def test_no_client_uses_fallback(self):
        result = CatalystGenerator(client=None).generate_catalyst(self.request)
        self.assertEqual(result.source, CatalystSource.FALLBACK)

    def test_always_valid_with_failing_client(self):
        generator = CatalystGenerator(client=make_client(error=TimeoutError("slow")))
        titles = ["Write essay", "Call mom", "Something", "x", "Run 5k", "Sort mail"]
        with self.assertLogs('apps.intelligence.catalyst', level='ERROR'):
            for title in titles:
                result = generator.generate_catalyst(CatalystRequestDTO(task_title=title))
                self.assertTrue(1 <= result.estimated_minutes <= 5)
                self.assertTrue(result.content.strip())

    def test_relevance_annotation(self):
        client = make_client(json.dumps({"content": "Lay out your running shoes", "estimatedMinutes": 2}))
        result = CatalystGenerator(client=client).generate_catalyst(
            CatalystRequestDTO(task_title="Morning routine", category="fitness"),
            interests=["fitness", "running", "painting"],
        )
        self.assertEqual(result.matched_interests, ("fitness", "running"))
        self.assertEqual(result.relevance_score, 67)

    def test_relevance_without_interests_is_zero(self):
        result = CatalystGenerator(client=None).generate_catalyst(self.request)
        self.assertEqual(result.relevance_score, 0)
        self.assertEqual(result.matched_interests, ())


class DefaultGeneratorTest(SimpleTestCase):

    def tearDown(self):
        get_catalyst_generator.cache_clear()

    @override_settings(OPENAI_API_KEY='')
    def test_without_api_key_has_no_client(self):
        get_catalyst_generator.cache_clear()
        self.assertIsNone(get_catalyst_generator().client)

    @override_settings(OPENAI_API_KEY='sk-test', CATALYST_MODEL='gpt-4o-mini')
    def test_with_api_key_builds_client(self):
        get_catalyst_generator.cache_clear()
        generator = get_catalyst_generator()
        self.assertIsNotNone(generator.client)
        self.assertEqual(generator.model, 'gpt-4o-mini')
