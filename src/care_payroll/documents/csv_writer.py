"""CSV document writer."""

from __future__ import annotations

import csv
import io

from care_payroll.documents.types import ReceiptDocument


class CsvDocumentWriter:
    """Writes a receipt as CSV sections, one block per table."""

    media_type = "text/csv"
    extension = "csv"

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def write(self, document: ReceiptDocument) -> bytes:
        output = io.StringIO()
        writer = csv.writer(output, lineterminator="\n")

        writer.writerow([document.title])
        for key, value in document.header_lines:
            writer.writerow([key, value])

        for table in document.tables:
            writer.writerow([])
            if table.title:
                writer.writerow([table.title])
            writer.writerow(table.columns)
            writer.writerows(table.rows)
            if table.footer_row is not None:
                writer.writerow(table.footer_row)

        if document.summary_lines:
            writer.writerow([])
            for key, value in document.summary_lines:
                writer.writerow([key, value])

        if document.notes:
            writer.writerow([])
            writer.writerow(["Notes", document.notes])

        if document.footer:
            writer.writerow([])
            writer.writerow([document.footer])

        return output.getvalue().encode(self.encoding)
