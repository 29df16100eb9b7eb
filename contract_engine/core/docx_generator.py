"""
DOCX contract rendering.

Fills {{Placeholder}} tokens in Word templates with provider data and
converts HTML template content into a simple Word document.

Dependencies: python-docx
System role: Document output for contract generation
"""

import io
import logging
import re
from dataclasses import dataclass, field
from datetime import date
from html.parser import HTMLParser
from typing import Any, Iterator, Mapping
from zipfile import BadZipFile

from docx import Document
from docx.document import Document as DocumentObject
from docx.opc.exceptions import PackageNotFoundError
from docx.table import Table
from docx.text.paragraph import Paragraph

from contract_engine.core.dynamic_fields import get_provider_field_value, parse_dynamic_fields
from contract_engine.core.exceptions import TemplateRenderError
from contract_engine.core.formatting import format_currency, format_date, normalize_smart_quotes
from contract_engine.core.template_processor import PLACEHOLDER_PATTERN

logger = logging.getLogger(__name__)

DOCX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

_NUMERIC_NOISE = re.compile(r"[^0-9.\-]")
_UNSAFE_NAME = re.compile(r"[^a-zA-Z0-9]")


@dataclass
class DocxRenderResult:
    """Rendered document bytes and anything that could not be filled."""

    content: bytes
    warnings: list[str] = field(default_factory=list)
    missing_placeholders: list[str] = field(default_factory=list)


def format_value(field_name: str, value: Any) -> str:
    """
    Format a value for a document by looking at the field name.

    salary/bonus/amount/wage -> currency, date -> MM/DD/YYYY,
    fte -> two decimals, target/factor -> thousands separators.
    """
    if value is None:
        return ""

    lowered = field_name.lower()
    text = str(value)

    if any(word in lowered for word in ("salary", "bonus", "amount", "wage")):
        try:
            return format_currency(float(_NUMERIC_NOISE.sub("", text)))
        except ValueError:
            return text
    if "date" in lowered:
        return format_date(text)
    if "fte" in lowered:
        try:
            return f"{float(text):.2f}"
        except ValueError:
            return text
    if "target" in lowered or "factor" in lowered:
        try:
            number = float(text)
        except ValueError:
            return text
        return f"{int(number):,}" if number.is_integer() else f"{number:,.3f}".rstrip("0")
    return text


def prepare_template_data(
    provider: Mapping[str, Any],
    mapping: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """
    Build the placeholder values for a DOCX template.

    Args:
        provider: Provider record
        mapping: Placeholder -> provider field/dynamic column

    Returns:
        dict[str, str]: Formatted values by placeholder
    """
    data: dict[str, str] = {}

    if mapping:
        for placeholder, column in mapping.items():
            if not placeholder or not column:
                continue
            data[placeholder] = format_value(column, get_provider_field_value(provider, column))
        return data

    fte = provider.get("totalFTE")
    data["ProviderName"] = provider.get("name") or ""
    data["StartDate"] = format_date(provider["startDate"]) if provider.get("startDate") else ""
    data["BaseSalary"] = format_currency(provider["baseSalary"]) if provider.get("baseSalary") else ""
    data["FTE"] = "" if fte is None else str(fte)
    data["Specialty"] = provider.get("specialty") or ""
    data["Credentials"] = provider.get("credentials") or ""

    if provider.get("wRVUTarget"):
        data["wRVUTarget"] = str(provider["wRVUTarget"])
    for key, placeholder in (
        ("conversionFactor", "ConversionFactor"),
        ("signingBonus", "SigningBonus"),
        ("relocationBonus", "RelocationBonus"),
        ("qualityBonus", "QualityBonus"),
        ("cmeAmount", "CMEAmount"),
    ):
        if provider.get(key):
            data[placeholder] = format_currency(provider[key])

    for key, value in parse_dynamic_fields(provider.get("dynamicFields")).items():
        if value is not None and value != "":
            data[key] = format_value(key, value)

    return data


def _iter_table_paragraphs(table: Table) -> Iterator[Paragraph]:
    for row in table.rows:
        for cell in row.cells:
            yield from cell.paragraphs
            for nested in cell.tables:
                yield from _iter_table_paragraphs(nested)


def iter_document_paragraphs(document: DocumentObject) -> Iterator[Paragraph]:
    """Yield every paragraph: body, tables, headers and footers."""
    yield from document.paragraphs
    for table in document.tables:
        yield from _iter_table_paragraphs(table)
    for section in document.sections:
        for part in (section.header, section.footer):
            if part.is_linked_to_previous:
                continue
            yield from part.paragraphs
            for table in part.tables:
                yield from _iter_table_paragraphs(table)


def _replace_in_paragraph(paragraph: Paragraph, data: Mapping[str, str], missing: set[str]) -> None:
    if "{{" not in paragraph.text:
        return

    def _substitute(match: re.Match) -> str:
        name = match.group(1).strip()
        if name not in data:
            missing.add(name)
            return ""
        return data[name]

    # Tokens inside a single run keep that run's formatting.
    for run in paragraph.runs:
        if "{{" in run.text and PLACEHOLDER_PATTERN.search(run.text):
            run.text = PLACEHOLDER_PATTERN.sub(_substitute, run.text)

    # Tokens split across runs collapse into the first run.
    if PLACEHOLDER_PATTERN.search(paragraph.text) and paragraph.runs:
        merged = PLACEHOLDER_PATTERN.sub(_substitute, paragraph.text)
        paragraph.runs[0].text = merged
        for run in paragraph.runs[1:]:
            run.text = ""


def extract_docx_text(content: bytes) -> str:
    """Return all paragraph text of a DOCX, one paragraph per line."""
    try:
        document = Document(io.BytesIO(content))
    except (PackageNotFoundError, BadZipFile, ValueError, KeyError) as e:
        raise TemplateRenderError(f"Not a valid DOCX file: {e}") from e
    return "\n".join(p.text for p in iter_document_paragraphs(document))


def render_docx(template_bytes: bytes, data: Mapping[str, str]) -> DocxRenderResult:
    """
    Fill a DOCX template.

    Args:
        template_bytes: Template file content
        data: Values by placeholder name

    Returns:
        DocxRenderResult: Rendered bytes and warnings for missing values

    Raises:
        TemplateRenderError: If the template is not a readable DOCX
    """
    try:
        document = Document(io.BytesIO(template_bytes))
    except (PackageNotFoundError, BadZipFile, ValueError, KeyError) as e:
        raise TemplateRenderError(f"Not a valid DOCX file: {e}") from e

    missing: set[str] = set()
    for paragraph in iter_document_paragraphs(document):
        _replace_in_paragraph(paragraph, data, missing)

    output = io.BytesIO()
    document.save(output)

    warnings = [f"No value for placeholder: {name}" for name in sorted(missing)]
    if warnings:
        logger.info("DOCX rendered with missing values", extra={"missing_count": len(missing)})
    return DocxRenderResult(content=output.getvalue(), warnings=warnings, missing_placeholders=sorted(missing))


_BLOCK_TAGS = {"p", "div", "li", "tr", "h1", "h2", "h3", "h4", "h5", "h6", "blockquote"}
_SKIP_TAGS = {"style", "script", "head", "title"}


class _HtmlBlockParser(HTMLParser):
    """Split HTML into blocks of (tag, [(text, bold, italic)])."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.blocks: list[tuple[str, list[tuple[str, bool, bool]]]] = []
        self._tag = "p"
        self._runs: list[tuple[str, bool, bool]] = []
        self._bold = 0
        self._italic = 0
        self._skip = 0

    def _flush(self) -> None:
        if any(text.strip() for text, _, _ in self._runs):
            self.blocks.append((self._tag, self._runs))
        self._runs = []
        self._tag = "p"

    def handle_starttag(self, tag, attrs):
        if tag in _SKIP_TAGS:
            self._skip += 1
        elif tag in _BLOCK_TAGS:
            self._flush()
            self._tag = tag
        elif tag == "br":
            self._flush()
        elif tag in ("b", "strong"):
            self._bold += 1
        elif tag in ("i", "em"):
            self._italic += 1
        elif tag in ("td", "th") and self._runs:
            self._runs.append(("\t", False, False))

    def handle_endtag(self, tag):
        if tag in _SKIP_TAGS:
            self._skip = max(0, self._skip - 1)
        elif tag in _BLOCK_TAGS:
            tag_kind = self._tag
            self._flush()
            if tag_kind == "li":
                self._tag = "p"
        elif tag in ("b", "strong"):
            self._bold = max(0, self._bold - 1)
        elif tag in ("i", "em"):
            self._italic = max(0, self._italic - 1)

    def handle_data(self, data):
        if self._skip:
            return
        text = re.sub(r"\s+", " ", data)
        if text.strip() or self._runs:
            self._runs.append((text, self._bold > 0, self._italic > 0))

    def close(self):
        super().close()
        self._flush()


def render_html_to_docx(html: str) -> bytes:
    """
    Convert HTML content into a DOCX document.

    One paragraph per block element. Headings keep their level, list items
    use the bullet style and bold/italic inline markup is preserved.

    Args:
        html: HTML content

    Returns:
        bytes: DOCX file content
    """
    parser = _HtmlBlockParser()
    parser.feed(normalize_smart_quotes(html or ""))
    parser.close()

    document = Document()
    for tag, runs in parser.blocks:
        if tag.startswith("h") and tag[1:].isdigit():
            paragraph = document.add_heading(level=min(int(tag[1:]), 9))
        elif tag == "li":
            paragraph = document.add_paragraph(style="List Bullet")
        else:
            paragraph = document.add_paragraph()
        for index, (text, bold, italic) in enumerate(runs):
            if index == 0:
                text = text.lstrip()
            if index == len(runs) - 1:
                text = text.rstrip()
            run = paragraph.add_run(text)
            run.bold = bold or None
            run.italic = italic or None

    output = io.BytesIO()
    document.save(output)
    return output.getvalue()


def generate_filename(
    template: Mapping[str, Any],
    provider: Mapping[str, Any],
    run_date: str | None = None,
) -> str:
    """
    Build the generated document name.

    Returns:
        str: "{year}_{SafeName}_{TemplateName}_{run_date}.docx"
    """
    run_date = run_date or date.today().isoformat()
    contract_year = template.get("contractYear") or str(date.today().year)
    safe_name = _UNSAFE_NAME.sub("", provider.get("name") or "")
    return f"{contract_year}_{safe_name}_{template.get('name', '')}_{run_date}.docx"
