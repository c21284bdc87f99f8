"""Single-line summaries of clipboard text."""

ELLIPSIS = "..."


def preview(content: str, max_len: int) -> str:
    """Collapse ``content`` to one line of at most ``max_len`` characters.

    Only newlines separate lines; a trailing carriage return is stripped with
    the rest of the surrounding whitespace. Blank lines are dropped and the
    survivors joined with a single space. Text longer than ``max_len`` is cut
    to ``max_len - 3`` characters followed by ``"..."``. When ``max_len`` is
    too small to hold the ellipsis the text is cut without one.

    Lengths count code points, so multi-byte characters are never split.
    """
    single_line = " ".join(line.strip() for line in content.split("\n") if line.strip())
    if len(single_line) <= max_len:
        return single_line
    if max_len < len(ELLIPSIS):
        return single_line[: max(max_len, 0)]
    return single_line[: max_len - len(ELLIPSIS)] + ELLIPSIS
