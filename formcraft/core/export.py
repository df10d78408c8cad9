"""
CSV export of a form's responses.

Header: Response ID, Submitted At, User Info, then "Q<n>: <prompt>" per
question. One row per response in submission order. Fields are quoted
(csv.QUOTE_MINIMAL) when they hold a delimiter, quote or line break, and
rows end with CRLF.
"""

from __future__ import annotations

import csv
import io
import re
from collections.abc import Iterable

from loguru import logger

from formcraft.core.formatter import csv_cell
from formcraft.core.forms import Form
from formcraft.core.responses import Response

CSV_LINE_END = "\r\n"
FIXED_HEADERS = ["Response ID", "Submitted At", "User Info"]


def header_row(form: Form) -> list[str]:
    return FIXED_HEADERS + [
        f"Q{i + 1}: {question.prompt}" for i, question in enumerate(form.questions)
    ]


def response_row(form: Form, response: Response) -> list[str]:
    """Unquoted cells for one response."""
    cells = [
        response.id or "",
        response.submitted_at.isoformat(timespec="seconds"),
        response.respondent_label(),
    ]
    for index, question in enumerate(form.questions):
        cells.append(csv_cell(response.answer_for(index), question.type))
    return cells


def to_csv(form: Form, responses: Iterable[Response]) -> bytes:
    """Export responses to UTF-8 CSV bytes."""
    output = io.StringIO()
    writer = csv.writer(output, lineterminator=CSV_LINE_END)
    writer.writerow(header_row(form))
    count = 0
    for response in responses:
        writer.writerow(response_row(form, response))
        count += 1
    logger.info(f"Exported {count} response(s) for form {form.id}")
    return output.getvalue().encode("utf-8")


def export_filename(form: Form) -> str:
    """File name for a form's export, safe for Content-Disposition."""
    stem = re.sub(r"[^\w\- ]+", "_", form.title, flags=re.ASCII).strip() or "form"
    return f"{stem}_responses.csv"
