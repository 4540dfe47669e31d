"""
Response processors that normalize adapter payloads.
"""

from .google_processor import google_item_to_book, process_google_response, select_cover_url
from .open_library_processor import open_library_doc_to_book, process_open_library_response

__all__ = [
    "google_item_to_book",
    "open_library_doc_to_book",
    "process_google_response",
    "process_open_library_response",
    "select_cover_url",
]
