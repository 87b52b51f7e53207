"""
Unit tests for review/response_parser.py

Tests the two-stage parsing of model replies.
"""
import pytest

from review.models import AnalysisStatus
from review.response_parser import (
    HEURISTIC_REASONING,
    HEURISTIC_SUGGESTIONS,
    ResponseParseError,
    extract_json_candidate,
    has_affirmative_signal,
    parse_heuristic,
    parse_model_reply,
    parse_strict,
)


class TestExtractJsonCandidate:
    """Tests for extract_json_candidate function."""

    def test_json_tagged_block(self):
        text = 'Here is my analysis:\n```json\n{"a": 1}\n```\nHope it helps.'
        assert extract_json_candidate(text) == '{"a": 1}'

    def test_untagged_block(self):
        assert extract_json_candidate('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_uppercase_tag(self):
        assert extract_json_candidate('```JSON\n{"a": 1}\n```') == '{"a": 1}'

    def test_no_block_returns_whole_text(self):
        assert extract_json_candidate('  {"a": 1}  ') == '{"a": 1}'

    def test_skips_code_echo(self):
        """Block tagged with another language is not the verdict."""
        text = (
            "The candidate wrote:\n```python\nprint('hi')\n```\n"
            "Verdict:\n```json\n{\"a\": 1}\n```"
        )
        assert extract_json_candidate(text) == '{"a": 1}'

    def test_skips_untagged_code_echo(self):
        """Untagged block without a JSON object is passed over."""
        text = (
            "```\ndef f(): ...\n```\nMy verdict:\n"
            "```json\n{\"isPlagiarized\": true, \"confidence\": 90, \"reasoning\": \"copied\"}\n```"
        )
        assert extract_json_candidate(text).startswith('{"isPlagiarized": true')

    def test_no_object_block_returns_whole_text(self):
        text = "```\nprint(1)\n```"
        assert extract_json_candidate(text) == text


class TestParseStrict:
    """Tests for parse_strict function."""

    def test_fenced_reply_without_suggestions(self):
        """Fenced verdict is copied through, missing suggestions stay None."""
        reply = '```json\n{"isPlagiarized":true,"confidence":85,"reasoning":"matches known solution"}\n```'
        result = parse_strict(reply)

        assert result.is_plagiarized is True
        assert result.confidence == 85
        assert result.reasoning == "matches known solution"
        assert result.suggestions is None
        assert result.status == AnalysisStatus.ASSESSED

    def test_bare_json(self):
        """Unfenced JSON object is parsed from the whole text."""
        reply = '{"isPlagiarized": false, "confidence": 20, "reasoning": "idiomatic", "suggestions": "ask about edge cases"}'
        result = parse_strict(reply)

        assert result.is_plagiarized is False
        assert result.confidence == 20
        assert result.reasoning == "idiomatic"
        assert result.suggestions == "ask about edge cases"

    def test_confidence_out_of_range_copied(self):
        """Bounds are not re-validated."""
        reply = '{"isPlagiarized": true, "confidence": 150, "reasoning": "r"}'
        assert parse_strict(reply).confidence == 150

    def test_float_confidence_rounded(self):
        reply = '{"isPlagiarized": true, "confidence": 72.6, "reasoning": "r"}'
        assert parse_strict(reply).confidence == 73

    def test_nested_braces_in_reasoning(self):
        reply = '```json\n{"isPlagiarized": false, "confidence": 10, "reasoning": "uses {dict} literal"}\n```'
        assert parse_strict(reply).reasoning == "uses {dict} literal"

    @pytest.mark.parametrize("reply", [
        "not json at all",
        '{"isPlagiarized": false, "confidence": NaN, "reasoning": "r"}',
        '{"isPlagiarized": true, "confidence": Infinity, "reasoning": "r"}',
        '{"isPlagiarized": true, "confidence": -Infinity, "reasoning": "r"}',
        "[1, 2, 3]",
        '{"isPlagiarized": "yes", "confidence": 80, "reasoning": "r"}',
        '{"isPlagiarized": true, "confidence": "high", "reasoning": "r"}',
        '{"isPlagiarized": true, "confidence": true, "reasoning": "r"}',
        '{"isPlagiarized": true, "confidence": 80}',
        '{"isPlagiarized": true, "confidence": 80, "reasoning": "r", "suggestions": 5}',
    ])
    def test_rejects_malformed(self, reply):
        with pytest.raises(ResponseParseError):
            parse_strict(reply)


class TestHeuristic:
    """Tests for the text fallback."""

    @pytest.mark.parametrize("text", [
        '"isPlagiarized": true, confidence 90 (truncated',
        "Plagiarized: TRUE",
        "Is this code plagiarized? Yes, it matches a well-known solution.",
        "plagiarised: yes",
    ])
    def test_affirmative_phrases(self, text):
        assert has_affirmative_signal(text) is True

    @pytest.mark.parametrize("text", [
        "The solution looks original and idiomatic.",
        '"isPlagiarized": false',
        "",
    ])
    def test_non_affirmative(self, text):
        assert has_affirmative_signal(text) is False

    def test_positive_verdict(self):
        result = parse_heuristic("plagiarized: true")
        assert result.is_plagiarized is True
        assert result.confidence == 70
        assert result.status == AnalysisStatus.HEURISTIC

    def test_negative_verdict(self):
        result = parse_heuristic("nothing to see here")
        assert result.is_plagiarized is False
        assert result.confidence == 30
        assert result.reasoning == HEURISTIC_REASONING
        assert result.suggestions == HEURISTIC_SUGGESTIONS


class TestParseModelReply:
    """Tests for parse_model_reply function."""

    def test_strict_path_wins(self):
        result = parse_model_reply('{"isPlagiarized": true, "confidence": 55, "reasoning": "r"}')
        assert result.status == AnalysisStatus.ASSESSED
        assert result.confidence == 55

    def test_falls_back_on_garbage(self):
        result = parse_model_reply("I think the code is fine, honestly.")
        assert result.status == AnalysisStatus.HEURISTIC
        assert result.is_plagiarized is False
        assert result.confidence == 30

    def test_falls_back_to_positive(self):
        result = parse_model_reply('```json\n{"isPlagiarized": true, "confidence": 9\n```')
        assert result.status == AnalysisStatus.HEURISTIC
        assert result.is_plagiarized is True
        assert result.confidence == 70

    def test_verdict_after_untagged_code_echo(self):
        """Echoed code in an untagged fence does not hide the verdict."""
        reply = (
            "```\ndef f(): ...\n```\nMy verdict:\n"
            '```json\n{"isPlagiarized": true, "confidence": 90, "reasoning": "copied"}\n```'
        )
        result = parse_model_reply(reply)

        assert result.status == AnalysisStatus.ASSESSED
        assert result.is_plagiarized is True
        assert result.confidence == 90
        assert result.reasoning == "copied"

    def test_nan_confidence_falls_back(self):
        result = parse_model_reply('{"isPlagiarized": false, "confidence": NaN, "reasoning": "x"}')
        assert result.status == AnalysisStatus.HEURISTIC
        assert result.is_plagiarized is False
        assert result.confidence == 30

    def test_infinite_confidence_falls_back(self):
        result = parse_model_reply('{"isPlagiarized": true, "confidence": Infinity, "reasoning": "x"}')
        assert result.status == AnalysisStatus.HEURISTIC
        assert result.is_plagiarized is True
        assert result.confidence == 70
