"""
Admin pass that reclassifies book tropes with the chat-completion gateway.
"""

from typing import Optional

from ..config import Settings
from ..recategorizer import TropeRecategorizer
from .common import (
    build_chat_client,
    build_store,
    exception_response,
    get_correlation_id,
    is_preflight,
    json_response,
    log_structured,
    require_admin,
)

SERVICE = "recategorize_tropes"


def lambda_handler(event, context, recategorizer: Optional[TropeRecategorizer] = None):
    correlation_id = get_correlation_id(event)
    if is_preflight(event):
        return json_response(200, {}, correlation_id)

    try:
        require_admin(event)
        if recategorizer is None:
            settings = Settings.from_env()
            recategorizer = TropeRecategorizer(build_store(settings), build_chat_client(settings))
        stats = recategorizer.run()

        log_structured("INFO", "Trope recategorization finished", correlation_id, SERVICE,
                       updated=stats.updated, no_detection=stats.no_detection, distribution=stats.distribution)
        return json_response(200, {"success": True, **stats.to_dict()}, correlation_id)

    except Exception as e:
        return exception_response(e, correlation_id, SERVICE)
