"""Compact output formatters for MCP tool responses."""

from mentor_chat.models.prompt import InstructionTemplate, TemplateRevision
from mentor_chat.search.indexer import IndexReport

_PREVIEW_CHARS = 80


def _preview(text: str | None) -> str:
    if text is None:
        return "(none)"
    flat = " ".join(text.split())
    if len(flat) > _PREVIEW_CHARS:
        return flat[:_PREVIEW_CHARS] + "..."
    return flat


def format_template(template: InstructionTemplate) -> str:
    """Header line with key and last editor, then the full text."""
    header = f"[{template.key}]"
    if template.description:
        header += f" {template.description}"
    if template.updated_by:
        header += f" | last edited by {template.updated_by}"
    if template.updated_at:
        header += f" at {template.updated_at.isoformat(timespec='seconds')}"
    return f"{header}\n\n{template.text}"


def format_revision(revision: TemplateRevision) -> str:
    """Format: #12 2025-01-01T10:00:00+00:00 by editor-1 + old/new previews."""
    when = revision.changed_at.isoformat(timespec="seconds")
    return (
        f"#{revision.id} {when} by {revision.changed_by}\n"
        f"  old: {_preview(revision.old_text)}\n"
        f"  new: {_preview(revision.new_text)}"
    )


def format_revision_list(revisions: list[TemplateRevision]) -> str:
    """Count + revisions joined by blank lines."""
    if not revisions:
        return "No revisions recorded."
    lines = [f"{len(revisions)} revision(s)", ""]
    lines.append("\n\n".join(format_revision(r) for r in revisions))
    return "\n".join(lines)


def format_index_report(report: IndexReport, force: bool) -> str:
    """Summary of an embedding rebuild."""
    mode = "all resources" if force else "resources without embeddings"
    line = f"Rebuild embeddings ({mode}): {report.processed}/{report.total} processed"
    if report.errors:
        line += f", {len(report.errors)} error(s)\n" + "\n".join(
            f"  {err}" for err in report.errors
        )
    return line
