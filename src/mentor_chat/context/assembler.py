"""Deterministic composition of the system instruction sent to the generator.

Layout, in order, separated by blank lines:

    <template verbatim>

    ## Resources selected by relevance to your question   (or: General resources available)
    - <title> [tags: a, b] (relevance: 91%)
      <description, at most 150 chars + "...">

    <preference instruction>                             (ranked only)

    ## Playbook lessons                                  (only if any)
    - <lesson title> (<course title>)
"""

from mentor_chat.context.auxiliary import AUXILIARY_LIMIT
from mentor_chat.models.match import AuxiliaryItem, MatchResult, ScoredEntry

RANKED_HEADING = "## Resources selected by relevance to your question"
GENERAL_HEADING = "## General resources available"
AUXILIARY_HEADING = "## Playbook lessons"

PREFERENCE_INSTRUCTION = (
    "When they are relevant to the user's question, prefer recommending "
    "the resources listed above."
)

DESCRIPTION_LIMIT = 150
ELLIPSIS = "..."


def truncate_description(text: str, limit: int = DESCRIPTION_LIMIT) -> str:
    """Cut ``text`` to ``limit`` characters, marking the cut with an ellipsis."""
    if len(text) <= limit:
        return text
    return text[:limit] + ELLIPSIS


def format_resource(scored: ScoredEntry, ranked: bool) -> str:
    """Format: - Title [tags: a, b] (relevance: 91%) + indented description."""
    entry = scored.entry
    line = f"- {entry.title}"
    if entry.tags:
        line += f" [tags: {', '.join(entry.tags)}]"
    if ranked and scored.similarity is not None:
        line += f" (relevance: {scored.similarity:.0%})"
    lines = [line]
    if entry.description:
        lines.append(f"  {truncate_description(entry.description)}")
    return "\n".join(lines)


def format_resource_section(match: MatchResult) -> str:
    """Heading plus one block per entry, in match order."""
    heading = RANKED_HEADING if match.ranked else GENERAL_HEADING
    blocks = [format_resource(scored, match.ranked) for scored in match.entries]
    return "\n".join([heading, *blocks])


def format_auxiliary_section(auxiliary: list[AuxiliaryItem]) -> str:
    """Heading plus one line per lesson."""
    lines = [AUXILIARY_HEADING]
    lines.extend(f"- {item.title} ({item.group_name})" for item in auxiliary[:AUXILIARY_LIMIT])
    return "\n".join(lines)


def assemble(template: str, match: MatchResult, auxiliary: list[AuxiliaryItem]) -> str:
    """Build the system instruction. Pure: same inputs, same bytes."""
    sections = [template]
    if match.entries:
        sections.append(format_resource_section(match))
    if match.ranked:
        sections.append(PREFERENCE_INSTRUCTION)
    if auxiliary:
        sections.append(format_auxiliary_section(auxiliary))
    return "\n\n".join(sections)
