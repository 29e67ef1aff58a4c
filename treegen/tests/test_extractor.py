"""
Tests for orchestrator/extractor.py: brace-span JSON recovery.
"""

import pytest

from treegen.orchestrator.extractor import extract_json
from treegen.shared.exceptions import MalformedResponse


class TestExtractJson:
    def test_pure_json(self):
        assert extract_json('{"question": "Q", "options": []}') == {"question": "Q", "options": []}

    def test_surrounding_prose(self):
        text = 'Here is the tree: {"question":"Q","options":[]} Thanks!'
        assert extract_json(text) == {"question": "Q", "options": []}

    def test_markdown_fence(self):
        text = '```json\n{"question": "Q", "options": [{"text": "A"}]}\n```'
        assert extract_json(text)["options"] == [{"text": "A"}]

    def test_nested_objects_span_to_last_brace(self):
        text = 'Sure! {"question":"Q","options":[{"text":"A","next":{"question":"Q2","options":[]}}]}'
        data = extract_json(text)
        assert data["options"][0]["next"]["question"] == "Q2"

    def test_no_braces_fails(self):
        with pytest.raises(MalformedResponse):
            extract_json("I cannot help with that.")

    def test_empty_text_fails(self):
        with pytest.raises(MalformedResponse):
            extract_json("")

    def test_invalid_json_in_span_fails(self):
        with pytest.raises(MalformedResponse):
            extract_json("{question: Q}")

    def test_trailing_brace_in_prose_widens_span(self):
        # Known limitation of the greedy span
        text = '{"question":"Q","options":[]} note: use {braces} carefully'
        with pytest.raises(MalformedResponse):
            extract_json(text)

    def test_non_object_top_level_fails(self):
        with pytest.raises(MalformedResponse):
            extract_json("[1, 2, 3]")

    def test_non_string_input_fails(self):
        with pytest.raises(MalformedResponse):
            extract_json(None)
