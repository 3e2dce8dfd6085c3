"""
Fixed-width text rendering for query results and the help screen.

Column widths are constant and never adapt to content: values wider than a
column simply push the rest of the row to the right.
"""

COLUMN_WIDTH = 20
ROW_NUMBER_WIDTH = 3
NULL_TOKEN = "NULL"
NO_RESULTS = "No results found."

HELP_FORMAT = "| {:<32} | {:<12} | {:<80} |"
HELP_RULE = "-" * 134


def format_value(value) -> str:
    """Display form of one cell."""
    if value is None:
        return NULL_TOKEN
    if isinstance(value, float):
        return f"{value:.3f}"
    return str(value)


def format_row(values, number=None) -> str:
    prefix = f"{number:>{ROW_NUMBER_WIDTH}}| " if number is not None else " " * ROW_NUMBER_WIDTH + "| "
    return prefix + "".join(f"{format_value(v):<{COLUMN_WIDTH}} | " for v in values).rstrip()


def render(columns, rows, start: int = 1) -> str:
    """Render rows as a numbered table, numbering from `start`.

    Zero rows renders only the "No results found." notice, never a bare header.
    """
    rows = list(rows)
    if not rows:
        return NO_RESULTS

    lines = [
        format_row(columns),
        "-" * ROW_NUMBER_WIDTH + "| " + "-" * ((COLUMN_WIDTH + 3) * len(columns)),
    ]
    for offset, row in enumerate(rows):
        lines.append(format_row(row, start + offset))

    count = len(rows)
    lines.append(f"--- {count} row{'s' if count != 1 else ''} ---")
    return "\n".join(lines)


def render_result(result, start: int = 1) -> str:
    return render(result.columns, result.rows, start)


def render_help(descriptors) -> str:
    """The command reference table shown by 'h' / 'help'."""
    lines = [
        "",
        "🏈 NFL Database Command Reference (Type 'q' to quit)",
        HELP_RULE,
        HELP_FORMAT.format("COMMAND (and Arguments)", "SHORT FORM", "DESCRIPTION"),
        HELP_RULE,
    ]
    for d in descriptors:
        lines.append(HELP_FORMAT.format(d.usage or d.name, f"[{d.short_form.upper()}]", d.label))
    lines.append(HELP_FORMAT.format("h | help", "[H]", "Display this help screen."))
    lines.append(HELP_FORMAT.format("q | quit", "[Q]", "Exit the program."))
    lines.append(HELP_RULE)
    return "\n".join(lines)
