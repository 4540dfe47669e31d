"""
Single-shot API caller used by the bibliographic adapters.
"""

import logging
import re
from typing import Dict, Optional, Tuple

import requests


_API_KEY_PARAM = re.compile(r"(key=)[^&\s'\")]+")


def redact_api_key(text: str) -> str:
    """Mask `key=` query parameters before the text reaches the logs"""
    return _API_KEY_PARAM.sub(r"\1[API_KEY]", text)


class APICaller:
    """
    Thin wrapper around requests that never raises.

    Every call is made once; a failed call simply reports failure so the
    adapter can contribute nothing for that query.
    """

    def __init__(self, timeout: int = 10, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.logger = logging.getLogger(self.__class__.__name__)

    def get(self, url: str, params: Optional[Dict] = None) -> Tuple[bool, int, Optional[Dict]]:
        """
        Make an HTTP GET request.

        Returns:
            (success: bool, status_code: int, response_data: Optional[Dict])
        """
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.Timeout:
            self.logger.warning(f"Timeout for {url}")
            return False, 0, None
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Request failed for {url}: {redact_api_key(str(e))}")
            return False, 0, None

        if response.status_code == 200:
            try:
                return True, response.status_code, response.json()
            except ValueError:
                self.logger.warning(f"Invalid JSON response from {url}")
                return False, response.status_code, None

        if 400 <= response.status_code < 500:
            self.logger.warning(f"Client error {response.status_code} for {url}")
        elif response.status_code >= 500:
            self.logger.warning(f"Server error {response.status_code} for {url}")
        else:
            self.logger.warning(f"Unexpected status {response.status_code} for {url}")
        return False, response.status_code, None
