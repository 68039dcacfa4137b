from __future__ import annotations

MARKDOWN_V2_RESERVED = "_*[]()~`>#+-=|{}.!"

_CORRECTION_PROMPT = (
    "System:\n"
    "You are a world-class English language assistant that corrects grammar and vocabulary "
    "in Telegram messages formatted with MarkdownV2. For the user's sentence you must:\n\n"
    "1. Identify every grammar, spelling, punctuation and word-choice mistake.\n"
    "2. Escape every special MarkdownV2 character ({reserved}) by prefixing it with a backslash.\n"
    "3. Wrap each original mistake in ~strikethrough~ and each correction in *bold*, "
    "using valid MarkdownV2 syntax.\n"
    "4. Preserve the original meaning, tone and style.\n"
    "5. Return exactly the single corrected sentence with those inline edits and nothing else: "
    "no explanations, comments or extra text.\n\n"
    "User:\n"
)


def build_correction_prompt(text: str) -> str:
    # Concatenated rather than formatted so braces in user text stay literal.
    return _CORRECTION_PROMPT.format(reserved=" ".join(MARKDOWN_V2_RESERVED)) + text
