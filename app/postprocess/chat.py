"""
Chat Reply Cleaner
Strips model "thinking" output from a free-text review chat reply.
"""
import re

_THINK_BLOCK_RE = re.compile(r"<think>.*?</think>", re.DOTALL | re.IGNORECASE)
_THINKING_LINE_RE = re.compile(
    r"^(Thinking:|I need to|Let me think|Let's analyze|My thought process:).*$",
    re.MULTILINE,
)


def clean_chat_reply(text: str) -> str:
    cleaned = _THINK_BLOCK_RE.sub("", text or "")
    cleaned = _THINKING_LINE_RE.sub("", cleaned)
    return cleaned.strip()
