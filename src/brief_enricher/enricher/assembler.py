# ABOUTME: Assembles the EnrichedDocument from extraction output and run metadata.
# ABOUTME: Also renders a document as a markdown source list for review.

from datetime import UTC, datetime

from brief_enricher.models import EnrichedDocument, ExtractionResult, LocaleContext


def assemble_document(
    extraction: ExtractionResult,
    prose: str,
    context: LocaleContext,
    model: str,
    processed_at: datetime | None = None,
) -> EnrichedDocument:
    """Combine linked prose, structured data and metadata.

    Empty categories with present prose is a valid prose-only result, not a failure.
    """
    return EnrichedDocument(
        date=context.date_label,
        neighborhood=context.name,
        categories=extraction.categories,
        prose=prose,
        model=model,
        blocked_domains=list(context.blocked_domains),
        subject_teaser=extraction.subject_teaser,
        email_teaser=extraction.email_teaser,
        link_candidates=extraction.link_candidates,
        extraction_status=extraction.status,
        processed_at=processed_at or datetime.now(UTC),
    )


def format_document_as_markdown(document: EnrichedDocument) -> str:
    """Render the per-category source list; prose-only documents return their prose."""
    if document.is_prose_only:
        return document.prose

    md = (
        f"Based on the news happening in {document.neighborhood} around **{document.date}**, "
        "here are the source links for those stories"
    )
    if document.blocked_domains:
        md += f" (excluding *{', '.join(document.blocked_domains)}*)"
    md += ":\n\n"

    for category in document.categories:
        md += f"### **{category.name}**\n\n"

        for story in category.stories:
            md += f"* **{story.entity}**\n"

            if story.source:
                md += f"  * *Source:* **[{story.source.name}]({story.source.url})**\n"
            else:
                md += f"  * *Source:* [Search Google]({story.fallback_url})\n"

            md += f"  * *Context:* {story.context}\n"

            if story.note:
                md += f"  * *Note:* {story.note}\n"

            if story.secondary_source:
                md += (
                    f"  * *Also:* **[{story.secondary_source.name}]"
                    f"({story.secondary_source.url})**\n"
                )

            md += "\n"

    return md
