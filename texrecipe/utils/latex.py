"""LaTeX text helpers usable as template helpers."""

import re

# Backslash maps to a command, so all characters are replaced in one pass
# rather than with chained str.replace() calls that would re-escape its braces.
LATEX_SPECIAL_CHARS = {
    "\\": r"\textbackslash{}",
    "%": r"\%",
    "$": r"\$",
    "&": r"\&",
    "_": r"\_",
    "#": r"\#",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
}

_SPECIAL_CHAR_RE = re.compile("|".join(re.escape(c) for c in LATEX_SPECIAL_CHARS))


def latex_escape(text) -> str:
    """
    Escape LaTeX special characters in plain text.

    Not registered by default; pass it in a recipe's helpers to use it:

        TemplateRecipe(..., helpers={"escape": latex_escape})

        {{ company | escape }}

    Args:
        text: Plain text (non-strings are converted with str())

    Returns:
        LaTeX-safe string

    Example:
        >>> latex_escape("AI & Machine Learning")
        'AI \\\\& Machine Learning'
        >>> latex_escape("87% on-time delivery")
        '87\\\\% on-time delivery'
    """
    if text is None:
        return ""
    return _SPECIAL_CHAR_RE.sub(lambda m: LATEX_SPECIAL_CHARS[m.group(0)], str(text))
