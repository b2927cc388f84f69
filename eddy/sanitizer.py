"""
eddy/sanitizer.py
-----------------
Text normalization applied before a document is chunked and sent for
phrase extraction.

Lowercases everything, strips every non-alphanumeric character from each
word, and keeps a single sentence-terminal mark (. ? !) only when it ends the
last word of a line. Lines left without words are dropped, so markup such as
code fences disappears entirely:

    >>> sanitize_text('Mary had a "little" lamb?')
    'mary had a little lamb?'
    >>> sanitize_text("Enter the following command:\\n```\\necho \\"Hello, World!\\"\\n```")
    'enter the following command\\necho hello world'

The transform is idempotent, which lets the extractor re-apply it to each
chunk without changing already-sanitized text.
"""

from typing import List

END_MARKS = ".?!"


def sanitize_word(word: str, preserve_end_mark: bool = False) -> str:
    """
    Lowercases a word and removes every non-alphanumeric character.

    Args:
        word:              A single whitespace-free token.
        preserve_end_mark: Keep the final character if it is one of `.?!`.

    Returns:
        The sanitized word; empty if nothing alphanumeric survives.
    """
    lowered = word.lower()
    kept = [c for c in lowered if c.isalnum()]
    if not kept:
        # a bare mark is punctuation, not a sentence end
        return ""
    if preserve_end_mark and lowered[-1] in END_MARKS:
        kept.append(lowered[-1])
    return "".join(kept)


def sanitize_line(line: str) -> str:
    words = line.split()
    sanitized: List[str] = []
    for i, word in enumerate(words):
        cleaned = sanitize_word(word, preserve_end_mark=(i == len(words) - 1))
        if cleaned:
            sanitized.append(cleaned)
    return " ".join(sanitized)


def sanitize_text(text: str) -> str:
    """
    Normalizes raw document text into lowercase, punctuation-free lines.

    Args:
        text: Raw text of any length (markdown, code fences, quotes...).

    Returns:
        Sanitized lines joined with "\\n"; no empty lines, no leading or
        trailing newline.
    """
    # only "\n" and "\r\n" end a line; other separators are in-line whitespace
    raw_lines = (line[:-1] if line.endswith("\r") else line for line in text.split("\n"))
    lines = (sanitize_line(line) for line in raw_lines)
    return "\n".join(line for line in lines if line)
