"""
Admin pass that reassigns every book's mood from keyword rules.
"""

from typing import Optional

from ..config import Settings
from ..recategorizer import MoodRecategorizer
from .common import (
    build_store,
    exception_response,
    get_correlation_id,
    is_preflight,
    json_response,
    log_structured,
    require_admin,
)

SERVICE = "recategorize_moods"


def lambda_handler(event, context, recategorizer: Optional[MoodRecategorizer] = None):
    correlation_id = get_correlation_id(event)
    if is_preflight(event):
        return json_response(200, {}, correlation_id)

    try:
        require_admin(event)
        recategorizer = recategorizer or MoodRecategorizer(build_store(Settings.from_env()))
        stats = recategorizer.run()

        log_structured("INFO", "Mood recategorization finished", correlation_id, SERVICE,
                       updated=stats.updated, unchanged=stats.unchanged, distribution=stats.distribution)
        return json_response(200, {"success": True, **stats.to_dict()}, correlation_id)

    except Exception as e:
        return exception_response(e, correlation_id, SERVICE)
