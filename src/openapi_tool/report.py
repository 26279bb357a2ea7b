"""Human-readable problem reports."""

from itertools import groupby

from openapi_tool.parser.base import Problem, Totals


def get_totals(problems: list[Problem]) -> Totals:
    totals = Totals()
    for problem in problems:
        if problem.severity == "error":
            totals.errors += 1
        else:
            totals.warnings += 1
    return totals


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def _source(problem: Problem) -> str:
    return problem.location[0].source if problem.location else "<unknown>"


def format_problems(problems: list[Problem], totals: Totals, version: str) -> str:
    """Format problems grouped by file, followed by a totals line."""
    lines = []
    # groupby needs input sorted by key; keep problem order inside each file.
    ordered = sorted(problems, key=_source)
    for source, group in groupby(ordered, key=_source):
        lines.append(f"{source}:")
        for problem in group:
            pointer = problem.location[0].pointer if problem.location else "#/"
            lines.append(f"  {pointer}  {problem.severity}  {problem.rule_id}  {problem.message}")
        lines.append("")

    lines.append(
        f"Bundling failed with {_plural(totals.errors, 'error')} "
        f"and {_plural(totals.warnings, 'warning')}. (openapi-tool {version})"
    )
    return "\n".join(lines)
