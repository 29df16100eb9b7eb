"""
CSV upload parsing and validation for provider data.

Parses an uploaded CSV, maps headers onto the provider schema, keeps
unknown columns as dynamic fields and reports row-level errors.

Dependencies: csv (stdlib), pydantic
System role: Validation step before providers are written to DynamoDB
"""

import csv
import io
import logging
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, create_model

from contract_engine.core.exceptions import CsvParsingError
from contract_engine.core.provider_schema import (
    PROVIDER_SCHEMA,
    REQUIRED_FIELDS,
    get_field_config,
    parse_field_value,
    validate_csv_headers,
)
from contract_engine.models.common import CamelModel

logger = logging.getLogger(__name__)

ErrorType = Literal["missing_required", "invalid_format", "duplicate", "validation_error"]

_PYTHON_TYPES: dict[str, Any] = {
    "string": str,
    "number": float,
    "boolean": bool,
    "date": str,
}


class CsvUploadOptions(CamelModel):
    """Upload behaviour switches."""

    allow_extra_columns: bool = True
    skip_duplicates: bool = True
    validate_only: bool = False
    batch_size: int = Field(default=25, ge=1, le=25)


class CsvRowError(CamelModel):
    """One problem found in the upload. Row 0 means the file as a whole."""

    row: int
    field: str | None = None
    message: str
    type: ErrorType
    value: Any = None


class CsvUploadSummary(CamelModel):
    total_rows: int = 0
    valid_rows: int = 0
    invalid_rows: int = 0
    duplicate_rows: int = 0


class ColumnAnalysis(CamelModel):
    recognized_columns: list[str] = Field(default_factory=list)
    extra_columns: list[str] = Field(default_factory=list)
    missing_required_columns: list[str] = Field(default_factory=list)


class CsvUploadResult(CamelModel):
    """Outcome of parsing and validating an upload."""

    success: bool
    data: list[dict[str, Any]] = Field(default_factory=list)
    errors: list[CsvRowError] = Field(default_factory=list)
    summary: CsvUploadSummary = Field(default_factory=CsvUploadSummary)
    column_analysis: ColumnAnalysis = Field(default_factory=ColumnAnalysis)


def _build_row_model() -> type[BaseModel]:
    fields: dict[str, Any] = {}
    for schema_field in PROVIDER_SCHEMA:
        python_type = _PYTHON_TYPES[schema_field.type]
        if schema_field.required:
            fields[schema_field.key] = (python_type, Field(..., min_length=1) if python_type is str else ...)
        else:
            fields[schema_field.key] = (python_type | None, None)
    return create_model(
        "ProviderRow",
        __config__=ConfigDict(extra="allow", str_strip_whitespace=True),
        **fields,
    )


ProviderRow = _build_row_model()


def _read_rows(content: str | bytes) -> tuple[list[str], list[dict[str, str]]]:
    if isinstance(content, bytes):
        try:
            text = content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise CsvParsingError("CSV file is not valid UTF-8", {"error": str(e)}) from e
    else:
        text = content.lstrip("\ufeff")

    try:
        reader = csv.DictReader(io.StringIO(text, newline=""))
        headers = [h.strip() for h in (reader.fieldnames or []) if h and h.strip()]
        rows = []
        for row in reader:
            cleaned = {key.strip(): value or "" for key, value in row.items() if key is not None}
            if any(value.strip() for value in cleaned.values()):
                rows.append(cleaned)
    except csv.Error as e:
        raise CsvParsingError(f"CSV parsing failed: {e}") from e
    return headers, rows


class CsvUploadService:
    """
    Provider CSV parser and validator.

    Rows are numbered as they appear in the file: the header is row 1 and
    the first data row is row 2.
    """

    def __init__(self, options: CsvUploadOptions | None = None) -> None:
        self.options = options or CsvUploadOptions()

    def parse_and_validate(self, content: str | bytes) -> CsvUploadResult:
        """
        Parse and validate an uploaded CSV.

        Args:
            content: Raw file content

        Returns:
            CsvUploadResult: Valid rows, errors, summary and column analysis
        """
        try:
            headers, rows = _read_rows(content)
        except CsvParsingError as e:
            return CsvUploadResult(
                success=False,
                errors=[CsvRowError(row=0, message=e.message, type="validation_error")],
                summary=CsvUploadSummary(invalid_rows=1),
            )

        if not headers:
            return CsvUploadResult(
                success=False,
                errors=[CsvRowError(row=0, message="No headers found in CSV file", type="validation_error")],
                summary=CsvUploadSummary(invalid_rows=1),
            )
        if not rows:
            return CsvUploadResult(
                success=False,
                errors=[CsvRowError(row=0, message="CSV file is empty", type="validation_error")],
                summary=CsvUploadSummary(invalid_rows=1),
            )

        header_check = validate_csv_headers(headers)
        column_analysis = ColumnAnalysis(
            recognized_columns=list(header_check["mapped"]),
            extra_columns=header_check["extra"],
            missing_required_columns=header_check["missing"],
        )

        if not header_check["valid"]:
            logger.warning("CSV missing required columns", extra={"missing": header_check["missing"]})
            return CsvUploadResult(
                success=False,
                errors=[
                    CsvRowError(
                        row=0,
                        field=label,
                        message=f"Missing required column: {label}",
                        type="missing_required",
                    )
                    for label in header_check["missing"]
                ],
                summary=CsvUploadSummary(total_rows=len(rows), invalid_rows=len(rows)),
                column_analysis=column_analysis,
            )

        data, errors, duplicates = self._transform_and_validate(rows, headers, header_check["mapped"])
        invalid_rows = len({e.row for e in errors if e.type != "duplicate"})

        logger.info(
            "CSV validated",
            extra={
                "total_rows": len(rows),
                "valid_rows": len(data),
                "error_count": len(errors),
                "duplicates": duplicates,
            },
        )

        return CsvUploadResult(
            success=not errors,
            data=data,
            errors=errors,
            summary=CsvUploadSummary(
                total_rows=len(rows),
                valid_rows=len(data),
                invalid_rows=invalid_rows,
                duplicate_rows=duplicates,
            ),
            column_analysis=column_analysis,
        )

    def _transform_and_validate(
        self,
        rows: list[dict[str, str]],
        headers: list[str],
        mapped: dict[str, str],
    ) -> tuple[list[dict[str, Any]], list[CsvRowError], int]:
        valid: list[dict[str, Any]] = []
        errors: list[CsvRowError] = []
        seen: set[str] = set()
        duplicates = 0

        for index, raw_row in enumerate(rows):
            row_number = index + 2
            record, format_errors = self._transform_row(raw_row, headers, mapped, row_number)

            duplicate_key = f"{record.get('employeeId')}-{record.get('compensationYear')}"
            if self.options.skip_duplicates and duplicate_key in seen:
                duplicates += 1
                errors.append(CsvRowError(
                    row=row_number,
                    field="employeeId",
                    message=(
                        f"Duplicate provider: {record.get('name')} ({record.get('employeeId')}) "
                        f"for year {record.get('compensationYear')}"
                    ),
                    type="duplicate",
                ))
                continue
            seen.add(duplicate_key)

            missing = [key for key in REQUIRED_FIELDS if record.get(key) in (None, "")]
            if missing:
                errors.extend(
                    CsvRowError(
                        row=row_number,
                        field=key,
                        message=f"Missing required field: {key}",
                        type="missing_required",
                    )
                    for key in missing
                )
                continue

            if format_errors:
                errors.extend(format_errors)
                continue

            try:
                ProviderRow.model_validate({k: v for k, v in record.items() if k != "dynamicFields"})
            except PydanticValidationError as e:
                for err in e.errors():
                    field_name = ".".join(str(part) for part in err["loc"])
                    errors.append(CsvRowError(
                        row=row_number,
                        field=field_name,
                        message=err["msg"],
                        type="validation_error",
                        value=record.get(field_name),
                    ))
                continue

            valid.append(record)

        return valid, errors, duplicates

    def _transform_row(
        self,
        raw_row: dict[str, str],
        headers: list[str],
        mapped: dict[str, str],
        row_number: int,
    ) -> tuple[dict[str, Any], list[CsvRowError]]:
        record: dict[str, Any] = {}
        dynamic: dict[str, str] = {}
        format_errors: list[CsvRowError] = []

        for header in headers:
            raw_value = raw_row.get(header)
            if raw_value is None or raw_value.strip() == "":
                continue

            schema_key = mapped.get(header)
            if schema_key:
                parsed = parse_field_value(schema_key, raw_value)
                config = get_field_config(schema_key)
                if parsed is None and config is not None and config.type == "number":
                    format_errors.append(CsvRowError(
                        row=row_number,
                        field=schema_key,
                        message=f"Invalid number for {config.label}: {raw_value.strip()}",
                        type="invalid_format",
                        value=raw_value.strip(),
                    ))
                    continue
                if parsed is not None:
                    record[schema_key] = parsed
            elif self.options.allow_extra_columns:
                dynamic[header] = raw_value.strip()

        if dynamic:
            record["dynamicFields"] = dynamic
        return record, format_errors


def _sample_value(schema_field) -> str:
    if schema_field.type == "string":
        return {
            "name": "John Doe",
            "employeeId": "EMP001",
            "specialty": "Internal Medicine",
        }.get(schema_field.key, "Sample")
    if schema_field.type == "number":
        if schema_field.format == "currency":
            return "100000"
        if schema_field.format == "percentage":
            return "1.0"
        return "1"
    if schema_field.type == "date":
        return "2024-01-01"
    return "true"


def _quote_all(rows: list[list[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows(rows)
    return buffer.getvalue().rstrip("\n")


def generate_csv_template() -> str:
    """Build a sample upload file: label header row plus one sample row, all cells quoted."""
    headers = [f.label for f in PROVIDER_SCHEMA]
    sample = [_sample_value(f) for f in PROVIDER_SCHEMA]
    return _quote_all([headers, sample])


def export_errors_as_csv(errors: list[CsvRowError]) -> str:
    """Export upload errors as a quoted CSV report."""
    rows = [["Row", "Field", "Error Type", "Message", "Value"]]
    for error in errors:
        rows.append([
            str(error.row),
            error.field or "",
            error.type,
            error.message,
            "" if error.value in (None, "") else str(error.value),
        ])
    return _quote_all(rows)
