from enum import StrEnum


class SortKey(StrEnum):
    RELEVANCE = "relevance"
    DATE_DESC = "date_desc"
    DATE_ASC = "date_asc"
    SIZE_DESC = "size_desc"
    SIZE_ASC = "size_asc"


HIGHLIGHT_START = "<mark>"
HIGHLIGHT_END = "</mark>"

# Metadata key holding OCR / extracted document text
EXTRACTED_TEXT_KEY = "ocr_text"
