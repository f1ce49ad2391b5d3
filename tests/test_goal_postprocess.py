"""
Goal Setup Post-Processor Tests
===============================
Covers:
    - Customization questions (shapes, filtering, id defaults, fallback)
    - Language detection aliases and default
    - Description enhancer validation
    - Learning material cleaner defaults and clamps
    - Chat reply cleaner
"""
import pytest

from app.core.constants import (
    DEFAULT_ESTIMATED_MINUTES,
    DEFAULT_LANGUAGE,
    DEFAULT_MATERIAL_OVERVIEW,
    MAX_ESTIMATED_MINUTES,
    MIN_ESTIMATED_MINUTES,
)
from app.core.errors import ValidationError
from app.postprocess.chat import clean_chat_reply
from app.postprocess.goals import (
    FALLBACK_QUESTIONS,
    normalize_description,
    normalize_language,
    normalize_questions,
)
from app.postprocess.learning_material import normalize_learning_material


# ---------------------------------------------------------------------------
# 1. Customization Questions
# ---------------------------------------------------------------------------
class TestNormalizeQuestions:

    QUESTION = {"id": "depth", "question": "How deep?", "type": "select", "options": ["Basics", "Mastery"]}

    @pytest.mark.parametrize("shape", [
        lambda q: [q],
        lambda q: {"questions": [q]},
        lambda q: {"data": {"questions": [q]}},
    ])
    def test_accepted_shapes(self, shape):
        questions = normalize_questions(shape(dict(self.QUESTION)))
        assert len(questions) == 1
        assert questions[0].id == "depth"
        assert questions[0].options == ["Basics", "Mastery"]

    def test_invalid_entries_dropped(self):
        questions = normalize_questions({"questions": [
            {"question": "Name a topic", "type": "text"},
            {"question": "", "type": "text"},
            {"question": "Pick", "type": "radio", "options": ["a"]},
            {"type": "select"},
            "not an object",
        ]})
        assert [q.question for q in questions] == ["Name a topic"]

    def test_ids_default_by_position(self):
        questions = normalize_questions([
            {"question": "First?", "type": "text"},
            {"question": "Second?", "type": "text", "id": ""},
        ])
        assert [q.id for q in questions] == ["q1", "q2"]

    def test_options_only_for_select_types(self):
        questions = normalize_questions([
            {"question": "Free text", "type": "text", "options": ["ignored"]},
            {"question": "Hours?", "type": "multiselect", "options": [2, "4+"]},
        ])
        assert questions[0].options is None
        assert questions[1].options == ["2", "4+"]

    @pytest.mark.parametrize("value", [None, {}, {"questions": []}, [{"nope": 1}]])
    def test_empty_result_uses_fallback(self, value):
        questions = normalize_questions(value)
        assert [q.id for q in questions] == [q.id for q in FALLBACK_QUESTIONS]
        assert len(questions) == 5

    def test_fallback_is_a_copy(self):
        questions = normalize_questions(None)
        questions[0].options.append("mutated")
        assert "mutated" not in FALLBACK_QUESTIONS[0].options


# ---------------------------------------------------------------------------
# 2. Language Detection
# ---------------------------------------------------------------------------
class TestNormalizeLanguage:

    @pytest.mark.parametrize("value,expected", [
        ({"language": "Python"}, "Python"),
        ({"language": "python "}, "Python"),
        ({"language": "js"}, "JavaScript"),
        ({"language": "golang"}, "Go"),
        ({"language": "csharp"}, "C#"),
        ({"language": "css"}, "HTML/CSS"),
        ("TypeScript", "TypeScript"),
    ])
    def test_known_languages(self, value, expected):
        assert normalize_language(value) == expected

    @pytest.mark.parametrize("value", [None, {}, {"language": ""}, {"language": "Brainfuck"}, {"language": 3}])
    def test_unknown_defaults(self, value):
        assert normalize_language(value) == DEFAULT_LANGUAGE


# ---------------------------------------------------------------------------
# 3. Description Enhancer
# ---------------------------------------------------------------------------
class TestNormalizeDescription:

    def test_stripped(self):
        assert normalize_description({"description": "  Learn Rust ownership.  "}) == "Learn Rust ownership."

    @pytest.mark.parametrize("value", [None, {}, {"description": "   "}, {"description": ["x"]}])
    def test_missing_raises(self, value):
        with pytest.raises(ValidationError) as exc_info:
            normalize_description(value)
        assert exc_info.value.field == "description"


# ---------------------------------------------------------------------------
# 4. Learning Material
# ---------------------------------------------------------------------------
class TestNormalizeLearningMaterial:

    def test_complete_material(self):
        material = normalize_learning_material({
            "title": "Closures",
            "overview": "Functions that remember.",
            "sections": [{"heading": "Scope", "body": "Lexical **scope**."}],
            "estimatedTimeMinutes": 10,
            "codeExamples": [{"language": "python", "code": "def f(): pass", "explanation": "stub"}],
        }, fallback_title="Checkpoint")
        assert material.title == "Closures"
        assert material.sections[0].heading == "Scope"
        assert material.estimated_time_minutes == 10
        assert material.code_examples[0].explanation == "stub"

    def test_defaults_when_empty(self):
        material = normalize_learning_material({}, fallback_title="Recursion")
        assert material.title == "Recursion"
        assert material.overview == DEFAULT_MATERIAL_OVERVIEW
        assert len(material.sections) == 1
        assert material.sections[0].heading == "Understanding Recursion"
        assert material.sections[0].body == DEFAULT_MATERIAL_OVERVIEW
        assert material.estimated_time_minutes == DEFAULT_ESTIMATED_MINUTES
        assert material.code_examples == []

    def test_incomplete_entries_dropped(self):
        material = normalize_learning_material({
            "sections": [{"heading": "Only heading"}, {"heading": "H", "body": "B"}],
            "codeExamples": [{"language": "js"}, {"language": "js", "code": "let x = 1;"}],
        }, fallback_title="T")
        assert [s.heading for s in material.sections] == ["H"]
        assert [e.code for e in material.code_examples] == ["let x = 1;"]
        assert material.code_examples[0].explanation == ""

    @pytest.mark.parametrize("value,expected", [
        (0, DEFAULT_ESTIMATED_MINUTES),
        (None, DEFAULT_ESTIMATED_MINUTES),
        ("12", 12),
        (1, MIN_ESTIMATED_MINUTES),
        (90, MAX_ESTIMATED_MINUTES),
        (7.5, 8),
    ])
    def test_minutes_clamped(self, value, expected):
        material = normalize_learning_material({"estimatedTimeMinutes": value}, fallback_title="T")
        assert material.estimated_time_minutes == expected


# ---------------------------------------------------------------------------
# 5. Chat Reply Cleaner
# ---------------------------------------------------------------------------
class TestCleanChatReply:

    def test_think_block_removed(self):
        reply = "<think>The user wants a loop.</think>\nUse a `for` loop over the list."
        assert clean_chat_reply(reply) == "Use a `for` loop over the list."

    def test_thinking_lines_removed(self):
        reply = "Let me think about this.\nThe bug is on line 3.\nMy thought process: none"
        assert clean_chat_reply(reply) == "The bug is on line 3."

    def test_plain_reply_untouched(self):
        assert clean_chat_reply("  Looks good!  ") == "Looks good!"

    def test_none(self):
        assert clean_chat_reply(None) == ""
