"""Receipt document model and writers."""

from care_payroll.documents.csv_writer import CsvDocumentWriter
from care_payroll.documents.pdf_writer import PdfDocumentWriter
from care_payroll.documents.types import ReceiptDocument, ReceiptTable

__all__ = [
    "CsvDocumentWriter",
    "PdfDocumentWriter",
    "ReceiptDocument",
    "ReceiptTable",
]
