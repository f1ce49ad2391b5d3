"""
Constants
Centralised defaults for every domain result, so normalisers and tests
refer to them by name.
"""
# --- Code review ---
DEFAULT_REVIEW_SCORE = 70
MIN_REVIEW_SCORE = 0
MAX_REVIEW_SCORE = 100
DEFAULT_LINE_RANGE = (1, 1)

DEFAULT_SUMMARY_STRENGTHS = "Good practices identified in your code."
DEFAULT_SUMMARY_IMPROVEMENTS = "Some improvements suggested to enhance quality."
DEFAULT_SUMMARY_ASSESSMENT = "Overall assessment is positive."

# --- Dashboard insights ---
MAX_INSIGHT_ITEMS = 3
INSIGHTS_ACTIVITY_LIMIT = 50
INSIGHTS_PROMPT_CHAR_LIMIT = 12000

# --- Learning material ---
DEFAULT_MATERIAL_OVERVIEW = "Learn the fundamentals of this topic."
DEFAULT_ESTIMATED_MINUTES = 8
MIN_ESTIMATED_MINUTES = 3
MAX_ESTIMATED_MINUTES = 20

# --- Goals ---
DEFAULT_LANGUAGE = "JavaScript"
SUPPORTED_LANGUAGES = [
    "JavaScript", "Python", "Java", "C++", "C#", "Go", "Rust", "TypeScript",
    "PHP", "Ruby", "Swift", "Kotlin", "Scala", "R", "HTML/CSS", "SQL",
]
QUESTION_TYPES = ("text", "select", "multiselect")
