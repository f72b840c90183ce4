"""Command name validation and normalization.

Resolves the script language from a file extension or a declared code
block language, and turns user-supplied names into canonical artifact
names ("Hello" + js -> "hello.js").

Copyright 2025 Ben Mensi
Licensed under the Apache License, Version 2.0
"""

import re
from typing import Optional, Tuple

from cmdbox.registry.errors import CommandValidationError
from cmdbox.schemas import Language


UNSUPPORTED_LANGUAGE = "Only JS and PY files are supported"

# Command stems: lowercase alphanumeric, hyphen and underscore only
STEM_PATTERN = re.compile(r"^[a-z0-9_-]+$")

LANGUAGE_ALIASES = {
    "js": Language.JS,
    "javascript": Language.JS,
    "py": Language.PY,
    "python": Language.PY,
}

# Fenced code block: ```lang\n<code>\n```
CODE_BLOCK_PATTERN = re.compile(r"^```([\w+-]*)[ \t]*\r?\n(.*?)(?:\r?\n)?```$", re.DOTALL)


def resolve_language(hint: Optional[str]) -> Language:
    """Resolve a file extension or declared language to a Language.

    Args:
        hint: Extension ("js", ".py") or language name ("python").

    Returns:
        The matching Language.

    Raises:
        CommandValidationError: If the hint is missing or unsupported.
    """
    if not hint:
        raise CommandValidationError(UNSUPPORTED_LANGUAGE)
    key = hint.strip().lower().lstrip(".")
    try:
        return LANGUAGE_ALIASES[key]
    except KeyError:
        raise CommandValidationError(UNSUPPORTED_LANGUAGE)


def split_name(name: str) -> Tuple[str, Optional[Language]]:
    """Split a name into (stem, language) when it carries a supported extension.

    Example: "hello.js" -> ("hello", Language.JS); "hello" -> ("hello", None)
    """
    for language in Language:
        if name.endswith(language.extension):
            return name[: -len(language.extension)], language
    return name, None


def validate_stem(stem: str) -> None:
    """Validate a command stem.

    Stems are opaque identifiers, never path fragments:
    - Lowercase alphanumeric, hyphen and underscore: [a-z0-9_-]+
    - No path separators (/, \\) and no dots

    Raises:
        CommandValidationError: If the stem is invalid.
    """
    if not stem:
        raise CommandValidationError("command name cannot be empty")

    if ".." in stem:
        raise CommandValidationError(f"path traversal not allowed in command name: {stem}")

    if "/" in stem or "\\" in stem:
        raise CommandValidationError(f"path separators not allowed in command name: {stem}")

    if not STEM_PATTERN.match(stem):
        raise CommandValidationError(
            f"command name must be alphanumeric with hyphens or underscores only "
            f"([a-z0-9_-]+), got: {stem}"
        )


def validate(raw_name: str, language_hint: Optional[str]) -> Tuple[str, Language]:
    """Validate and normalize a proposed command name.

    The name is lower-cased and the language extension appended unless
    already present, so "Hello" and "hello.js" converge on "hello.js".

    Args:
        raw_name: Name as supplied by the caller.
        language_hint: File extension or declared code block language.

    Returns:
        Tuple of (normalized_name, language).

    Raises:
        CommandValidationError: On unsupported language or invalid name.
    """
    language = resolve_language(language_hint)

    name = (raw_name or "").strip().lower()
    stem, named_language = split_name(name)
    if named_language is not None and named_language != language:
        raise CommandValidationError(
            f"command name '{name}' does not match language '{language.value}'"
        )

    validate_stem(stem)
    return f"{stem}{language.extension}", language


def normalize_lookup(name: str) -> Tuple[str, Optional[Language]]:
    """Normalize a name used to look up an existing command.

    Accepts bare ("greet") or qualified ("greet.py") names.

    Returns:
        Tuple of (stem, language or None when unqualified).

    Raises:
        CommandValidationError: If the name is not a valid identifier.
    """
    stem, language = split_name((name or "").strip().lower())
    validate_stem(stem)
    return stem, language


def default_name(filename: str) -> str:
    """Derive a command name from an uploaded file name ("Tool.PY" -> "tool.py")."""
    return filename.strip().lower()


def parse_code_block(text: str) -> Tuple[Optional[str], str]:
    """Extract the language and body of a Markdown fenced code block.

    Example:
        >>> parse_code_block("```python\\nprint('hi')\\n```")
        ('python', "print('hi')")

    Text without a fence is returned as-is with no language.
    """
    match = CODE_BLOCK_PATTERN.match(text.strip())
    if not match:
        return None, text
    language, code = match.groups()
    return (language or None), code
