"""Structured prompt builder for competitive intelligence narratives."""

from typing import Iterable, List, Sequence

from app.domain.competitor import CompetitorRecord

_FORMAT_GUIDANCE = {
    "detailed": "comprehensive and in-depth",
    "summary": "concise and to-the-point",
    "presentation": "formatted in bullet points suitable for a presentation",
}

_SECTIONS_HEADING = "# REQUESTED SECTIONS"

_SYSTEM_INSTRUCTIONS = """\
You are a competitive intelligence analyst.

RULES:
- Use ONLY the competitor data provided below.
- Include only the requested sections, in the order they are listed.
- Write each section title on its own line, exactly as listed, with no
  numbering, markdown or trailing punctuation.
- Write the section content on the lines that follow its title.
"""

_COMPETITOR_TEMPLATE = """\
Company: {name}
Products: {products}
Product Descriptions: {descriptions}
Pricing: {pricing}
Contact Info: {contact}
Social Media: {social}
Recent News: {news}
Key Features: {features}
Image Analysis:{images}
"""

_IMAGE_TEMPLATE = """
  Labels: {labels}
  Text detected: {text}
  Logos detected: {logos}
  Dominant colors: {colors}"""


class SynthesisPromptBuilder:
    """Builds a deterministic prompt for the report narrative.

    Combines scraped competitor records, the requested sections and the
    report format into a single prompt whose section list can be read
    back with ``parse_requested_sections``.
    """

    def build_report_prompt(
        self,
        records: Sequence[CompetitorRecord],
        sections: Sequence[str],
        report_format: str,
    ) -> str:
        """Build the full narrative prompt.

        Args:
            records: Resolved competitor records, in request order.
            sections: Requested section titles, in document order.
            report_format: One of ``detailed``, ``summary`` or
                ``presentation``.

        Returns:
            A fully formatted prompt string ready for LLM consumption.
        """
        guidance = _FORMAT_GUIDANCE.get(report_format, _FORMAT_GUIDANCE["summary"])
        section_list = "\n".join(f"- {section}" for section in sections)
        competitor_blocks = "\n".join(self._format_competitor(record) for record in records)

        return (
            f"{_SYSTEM_INSTRUCTIONS}\n"
            f"Analyze the following competitive intelligence data and generate a "
            f"{report_format} report including only the following sections: "
            f"{', '.join(sections)}.\n\n"
            f"{_SECTIONS_HEADING}\n\n{section_list}\n\n"
            f"# COMPETITOR DATA\n\n{competitor_blocks}\n"
            f"# TASK\n\n"
            f"The report should be {guidance}. "
            f"Focus on the most important insights and actionable information."
        )

    def _format_competitor(self, record: CompetitorRecord) -> str:
        images = "".join(
            _IMAGE_TEMPLATE.format(
                labels=", ".join(image.labels),
                text=image.text,
                logos=", ".join(image.logos),
                colors=image.dominant_colors,
            )
            for image in record.images
        )
        return _COMPETITOR_TEMPLATE.format(
            name=record.name,
            products=", ".join(record.product_names),
            descriptions=" | ".join(record.product_descriptions),
            pricing=", ".join(record.pricing),
            contact=record.contact_info,
            social=", ".join(record.social_links),
            news=" | ".join(record.headlines),
            features=", ".join(record.features),
            images=images,
        )


def parse_requested_sections(prompt: str) -> List[str]:
    """Read the requested section titles back out of a built prompt."""
    sections: List[str] = []
    lines: Iterable[str] = iter(prompt.splitlines())
    for line in lines:
        if line.strip() == _SECTIONS_HEADING:
            break
    else:
        return sections

    for line in lines:
        stripped = line.strip()
        if stripped.startswith("- "):
            sections.append(stripped[2:].strip())
        elif stripped.startswith("#"):
            break
    return sections
