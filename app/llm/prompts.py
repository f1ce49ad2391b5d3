"""
LLM Prompts
===========
Centralised store of prompts and schema descriptions for every call site.

Prompt Design Rules:
    - Schema descriptions are ADVISORY: plain-language / pseudo JSON Schema
      shown to the model; the post-processors enforce the real contract
    - The gateway adds the "respond with ONLY JSON" system instruction,
      so structured prompts here describe the task only
    - Free-text prompts (review draft, review chat) ask for prose and are
      sent through generate_text without any repair pass
    - Learner-supplied text is embedded verbatim; prompts never echo
      secrets or user identifiers
"""
import json
import logging
from typing import Optional, Sequence

from app.core.constants import SUPPORTED_LANGUAGES
from app.models.code_review import ReviewComment
from app.models.roadmap import CustomizationAnswer

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Schema Descriptions
# ---------------------------------------------------------------------------
EXERCISE_SCHEMA = """{
  "type": "object",
  "required": ["title", "description", "initialCode", "solution", "hints", "testCases"],
  "properties": {
    "title": {"type": "string", "description": "A clear, concise title for the exercise"},
    "description": {"type": "string", "description": "Detailed problem description including requirements and constraints"},
    "initialCode": {"type": "string", "description": "Starting code template for the exercise"},
    "solution": {"type": "string", "description": "Complete solution code"},
    "hints": {"type": "array", "items": {"type": "string"}},
    "testCases": {
      "type": "array",
      "items": {
        "type": "object",
        "required": ["input", "expectedOutput"],
        "properties": {
          "input": {"description": "Input value for the test case"},
          "expectedOutput": {"description": "Expected output for the test case"}
        }
      }
    }
  }
}"""

REVIEW_SCHEMA = """{
  "comments": [
    {
      "lineRange": [<start_line>, <end_line>],
      "type": "suggestion|issue|praise",
      "comment": "<brief comment>",
      "severity": "low|medium|high"
    }
  ],
  "summary": {
    "strengths": "<concise summary of strengths>",
    "improvements": "<concise summary of improvements>",
    "overallAssessment": "<brief overall assessment>"
  },
  "score": <number between 0 and 100>
}"""

ROADMAP_SCHEMA = """{
  "checkpoints": [
    {"title": "string", "description": "string", "order": "number"}
  ]
}"""

QUESTIONS_SCHEMA = """{
  "questions": [
    {
      "id": "string",
      "question": "string",
      "type": "select" | "multiselect" | "text",
      "options": ["string"] (required for select/multiselect types)
    }
  ]
}"""

LANGUAGE_SCHEMA = '{"language": "string"}'

DESCRIPTION_SCHEMA = '{"description": "string"}'

LEARNING_MATERIAL_SCHEMA = """{
  "type": "object",
  "required": ["title", "overview", "sections", "estimatedTimeMinutes"],
  "properties": {
    "title": {"type": "string", "description": "Clear, engaging title for the learning material"},
    "overview": {"type": "string", "description": "What learners will gain from this material"},
    "sections": {
      "type": "array",
      "description": "2-3 focused learning sections",
      "items": {
        "type": "object",
        "required": ["heading", "body"],
        "properties": {
          "heading": {"type": "string"},
          "body": {"type": "string", "description": "Section content in markdown"}
        }
      }
    },
    "estimatedTimeMinutes": {"type": "number", "description": "Reading time, 5-15 minutes"},
    "codeExamples": {
      "type": "array",
      "items": {
        "type": "object",
        "required": ["language", "code", "explanation"],
        "properties": {
          "language": {"type": "string"},
          "code": {"type": "string"},
          "explanation": {"type": "string"}
        }
      }
    }
  }
}"""

INSIGHTS_SCHEMA = """{
  "type": "object",
  "required": ["strongPoints", "skillsToStrengthen"],
  "properties": {
    "strongPoints": {"type": "array", "maxItems": 3, "items": {"type": "string"}},
    "skillsToStrengthen": {"type": "array", "maxItems": 3, "items": {"type": "string"}}
  }
}"""


# ---------------------------------------------------------------------------
# Exercises
# ---------------------------------------------------------------------------
def build_exercise_prompt(
    goal_title: str,
    checkpoint_title: str,
    checkpoint_description: str,
    language: str,
) -> str:
    parts: list[str] = [
        "You are a coding exercise generator. Create an exercise that helps the "
        "user master one checkpoint of their learning goal.",
        f'GOAL: "{goal_title}"',
        f'CHECKPOINT: "{checkpoint_title}"',
        f'CHECKPOINT DESCRIPTION: "{checkpoint_description}"',
        f"PROGRAMMING LANGUAGE: {language}",
        "RULES:\n"
        "1. The exercise must be appropriate for the given programming language\n"
        "2. The difficulty should match the checkpoint's position in the learning journey\n"
        "3. Include clear examples in the description\n"
        "4. The initial code should provide a good starting point\n"
        "5. The solution should be complete and well-commented\n"
        "6. Hints should guide without giving away the solution\n"
        "7. Test cases should cover various scenarios\n"
        "8. All code must be valid and runnable in the specified language",
        "Make it challenging but achievable for someone at this stage.",
    ]
    return "\n\n".join(parts)


def build_review_draft_prompt(
    exercise_title: str,
    exercise_description: str,
    language: str,
    code: str,
) -> str:
    """Step 1 of a review: human-readable feedback points, no line numbers."""
    fence = language or "code"
    parts: list[str] = [
        "Review the following code submission and identify any issues or notable qualities.",
        f'EXERCISE TITLE: "{exercise_title}"',
        f"EXERCISE DESCRIPTION:\n{exercise_description}",
        f"SUBMITTED CODE:\n```{fence}\n{code}\n```",
        "TASK:\n"
        "List clear, human-readable feedback points that would help a learner "
        "improve or gain confidence. Focus only on issues or praise.\n"
        "For each point include:\n"
        "- Type: issue, suggestion, or praise\n"
        "- Severity: low, medium, or high\n"
        "- Your feedback: short and precise (max 200 characters)\n"
        "Also add a summary with Strengths, Improvements and Overall Assessment "
        "(max 200 characters each).",
        "RULES:\n"
        "- Don't speculate; base feedback only on what is present in the code.\n"
        "- No duplicate comments.\n"
        "- Skip irrelevant boilerplate or unnecessary praise.",
    ]
    return "\n\n".join(parts)


def build_review_mapping_prompt(language: str, code: str, review_text: str) -> str:
    """Step 2 of a review: map feedback onto line ranges and score it."""
    fence = language or "code"
    parts: list[str] = [
        "You are a code review line-mapper and formatter. Check each feedback "
        "point against the original code and map it to the correct line range.",
        f"ORIGINAL CODE:\n```{fence}\n{_number_lines(code)}\n```",
        f"FEEDBACK TO MAP:\n{review_text}",
        "SCORE from 0 to 100 based on:\n"
        "- Correctness (does the code fulfill the exercise requirements?)\n"
        "- Code quality (readability, organization, naming)\n"
        "- Efficiency (algorithmic approach, performance concerns)\n"
        "- Number and severity of issues and suggestions\n"
        "A score below 60 indicates major issues. Don't be too hard on the "
        "score, the user is still learning.",
        "RULES:\n"
        "- If an issue spans a block, place the comment on the first line that causes it.\n"
        "- Skip blank lines, comments and braces unless the issue is there.\n"
        "- Do not guess line numbers.\n"
        "- Keep all fields under 200 characters.",
    ]
    return "\n\n".join(parts)


def build_review_chat_prompt(
    exercise_title: str,
    language: str,
    code: str,
    comments: Sequence[ReviewComment],
    message: str,
) -> str:
    summary_lines = [
        f"- Line {c.line_range[0]}-{c.line_range[1]}: "
        f"{str(c.kind).upper()} ({c.severity}): {c.comment}"
        for c in comments
    ]
    fence = language or "code"
    parts: list[str] = [
        "You are a helpful coding assistant answering questions about a code review.",
        f'EXERCISE: "{exercise_title}"',
        f"SUBMITTED CODE ({language or 'unknown language'}):\n```{fence}\n{code}\n```",
        "REVIEW COMMENTS:\n" + ("\n".join(summary_lines) or "(none)"),
        f'USER QUESTION: "{message}"',
        "RULES:\n"
        "- Answer the user's specific question about the code or the review\n"
        "- Focus ONLY on the code and review\n"
        "- If asked about code modifications, provide specific examples\n"
        "- If unsure about details not in the review, say so rather than speculating\n"
        "- Do NOT include any thinking process or <think> tags; give only the final answer",
    ]
    return "\n\n".join(parts)


def _number_lines(code: str) -> str:
    return "\n".join(f"{n:>4} | {line}" for n, line in enumerate(code.splitlines(), start=1))


# ---------------------------------------------------------------------------
# Goals
# ---------------------------------------------------------------------------
def build_questions_prompt(title: str, description: Optional[str] = None) -> str:
    parts: list[str] = [
        "Based on the following learning goal, generate 5 personalized follow-up "
        "questions that will help customize an exercise-based learning experience.",
        f'TITLE: "{title}"',
    ]
    if description:
        parts.append(f'DESCRIPTION: "{description}"')
    parts.append(
        "The questions should establish:\n"
        "1. How deep/comprehensive the learning should be\n"
        "2. Available weekly time for practicing exercises\n"
        "3. Current programming experience (and languages, if any)\n"
        "4. Preferred difficulty progression (gradual vs challenging)\n"
        "5. Specific focus areas within the topic"
    )
    parts.append(
        "QUESTION REQUIREMENTS:\n"
        '- ALWAYS prefer "select" or "multiselect" over "text"\n'
        "- Each select/multiselect question has 3-4 clear, practical options\n"
        '- Use "text" only for "Other (specify)" scenarios\n'
        "- The platform provides ONLY coding exercises; do not ask about videos or tutorials"
    )
    return "\n\n".join(parts)


def build_language_prompt(title: str, description: Optional[str] = None) -> str:
    parts: list[str] = [
        "Analyze the following learning goal and determine the most appropriate "
        "programming language for it.",
        f'TITLE: "{title}"',
    ]
    if description:
        parts.append(f'DESCRIPTION: "{description}"')
    parts.append("AVAILABLE LANGUAGES:\n" + ", ".join(SUPPORTED_LANGUAGES))
    parts.append(
        "You MUST select exactly one language from the list above. If the goal "
        "does not clearly imply one, choose JavaScript."
    )
    return "\n\n".join(parts)


def build_roadmap_prompt(
    title: str,
    description: Optional[str] = None,
    answers: Optional[Sequence[CustomizationAnswer]] = None,
) -> str:
    parts: list[str] = [
        "Create a detailed learning roadmap for the following goal.",
        f'TITLE: "{title}"',
    ]
    if description:
        parts.append(f'DESCRIPTION: "{description}"')
    if answers:
        answer_lines = "\n".join(f"- {a.question_id}: {a.answer}" for a in answers)
        parts.append(
            "USER CUSTOMIZATION ANSWERS:\n"
            f"{answer_lines}\n"
            "Customize the difficulty, pace and content based on these answers."
        )
    parts.append(
        "RULES:\n"
        "- Each checkpoint is a specific milestone or concept to master\n"
        "- Order checkpoints logically from basics to advanced concepts, starting at 1\n"
        "- Each description explains what needs to be learned and why it matters\n"
        "- Use between 5 and 10 checkpoints depending on the goal's complexity"
    )
    return "\n\n".join(parts)


def build_description_prompt(title: str, description: Optional[str] = None) -> str:
    parts: list[str] = [
        "Write a professional description for a learning goal.",
        f'TITLE: "{title}"',
    ]
    if description:
        parts.append(f'CURRENT DESCRIPTION: "{description}"')
        parts.append("Use the current description as a foundation and enhance it.")
    else:
        parts.append("Create a complete description from scratch.")
    parts.append(
        "The description should outline what the learner will gain and be "
        "concise but professional. Return it in a single field called \"description\"."
    )
    return "\n\n".join(parts)


def build_learning_material_prompt(
    goal_title: str,
    goal_description: str,
    checkpoint_title: str,
    checkpoint_description: str,
    language: str,
) -> str:
    parts: list[str] = [
        "You are an expert educational content creator for programming concepts. "
        "Create concise, engaging learning material that prepares the learner for "
        "hands-on exercises.",
        f'GOAL: "{goal_title}"',
        f'GOAL DESCRIPTION: "{goal_description or "Not provided"}"',
        f'CHECKPOINT: "{checkpoint_title}"',
        f'CHECKPOINT DESCRIPTION: "{checkpoint_description}"',
        f"PROGRAMMING LANGUAGE: {language}",
        "GUIDELINES:\n"
        "1. Keep it bite-sized (one screenful of content max)\n"
        "2. Use 2-3 focused sections with clear analogies and real-world examples\n"
        "3. Add code examples that demonstrate the concepts\n"
        "4. Use markdown formatting inside section bodies\n"
        "5. Estimated reading time should be realistic (5-15 minutes)",
    ]
    return "\n\n".join(parts)


# ---------------------------------------------------------------------------
# Insights
# ---------------------------------------------------------------------------
def build_insights_prompt(activity: list[dict], char_limit: int) -> str:
    activity_json = json.dumps(activity)[:char_limit]
    parts: list[str] = [
        "You are generating concise learning insights.",
        "Use the user's recent activity (grades, languages, difficulty, review "
        "summaries) to create two lists:\n"
        "- Strong Points (2-3 bullets)\n"
        "- Skills to Strengthen (2-3 bullets)",
        "RULES:\n"
        "- Be brief (max ~10 words per bullet)\n"
        "- No fluff, no duplicates, no generic platitudes\n"
        "- Only infer from the provided data",
        f"RECENT ACTIVITY JSON:\n{activity_json}",
    ]
    return "\n\n".join(parts)
