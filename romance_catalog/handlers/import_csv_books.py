"""
Admin import of book rows parsed from a CSV export.
"""

from typing import Optional

from ..config import Settings
from ..csv_importer import CatalogCSVImporter
from ..exceptions import ValidationError
from .common import (
    build_store,
    exception_response,
    get_correlation_id,
    is_preflight,
    json_response,
    log_structured,
    parse_body,
    require_admin,
)

SERVICE = "import_csv_books"


def lambda_handler(event, context, importer: Optional[CatalogCSVImporter] = None):
    correlation_id = get_correlation_id(event)
    if is_preflight(event):
        return json_response(200, {}, correlation_id)

    try:
        admin_id = require_admin(event)
        body = parse_body(event)
        books = body.get("books")
        if not isinstance(books, list):
            raise ValidationError("Invalid books array")

        if importer is None:
            batch_size = int(body.get("batchSize") or 50)
            importer = CatalogCSVImporter(build_store(Settings.from_env()), batch_size=batch_size)

        log_structured("INFO", "CSV import started", correlation_id, SERVICE,
                       admin_id=admin_id, rows=len(books))
        stats = importer.import_rows(books)

        log_structured("INFO", "CSV import finished", correlation_id, SERVICE,
                       imported=stats.imported, skipped=stats.skipped, rejected=stats.rejected)
        return json_response(200, {"success": True, **stats.to_dict()}, correlation_id)

    except Exception as e:
        return exception_response(e, correlation_id, SERVICE)
