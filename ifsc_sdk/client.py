"""
IFSC SDK Client

Async HTTP client for the IFSC round results endpoint.
Repairs the known defects of the upstream response body before decoding.
"""

import json
import logging
import re
from pathlib import Path
from typing import Optional, Union

import httpx
from pydantic import ValidationError

from .models import RoundResults

logger = logging.getLogger(__name__)

# IFSC API Configuration
DEFAULT_BASE_URL = "https://ifsc.donsz.nl/"
IFSC_SITE_URL = "https://ifsc.results.info"
IFSC_SESSION_COOKIE_NAME = "_verticallife_resultservice_session"

# Lines starting with this character are PHP diagnostics, never JSON
WARNING_LINE_MARKER = "<"

# Default headers for requests
DEFAULT_HEADERS = {
    "accept": "application/json",
    "user-agent": "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
}


class IFSCClientError(Exception):
    """Exception raised for IFSC API errors."""

    pass


class IFSCTransportError(IFSCClientError):
    """The results could not be fetched (network, HTTP status or file access)."""

    pass


class IFSCDecodeError(IFSCClientError):
    """The fetched body is not a valid round result, even after repair."""

    pass


def clean_api_output(text: str) -> str:
    """
    Remove PHP warning lines from an API response body.

    The upstream occasionally prints lines like ``<b>Warning: ...</b>``
    in the middle of the JSON document. Every line starting with ``<`` is
    dropped; all other lines are kept verbatim, line breaks included.

    Args:
        text: Raw response body

    Returns:
        The repaired body
    """
    # Split on \n only, keeping terminators; splitlines() would also cut at
    # characters like U+2028 that may appear inside JSON strings
    return "".join(
        line
        for line in re.split(r"(?<=\n)", text)
        if not line.startswith(WARNING_LINE_MARKER)
    )


def decode_round_results(text: str) -> RoundResults:
    """
    Repair and decode a round results body.

    Args:
        text: Raw response body or file contents

    Returns:
        Parsed round results

    Raises:
        IFSCDecodeError: If the repaired text is not a valid round result
    """
    cleaned = clean_api_output(text)
    try:
        return RoundResults.model_validate(json.loads(cleaned))
    except json.JSONDecodeError as e:
        raise IFSCDecodeError(f"Invalid JSON in round results: {e}") from e
    except ValidationError as e:
        raise IFSCDecodeError(
            f"Unexpected round results shape ({e.error_count()} errors): {e}"
        ) from e


def load_round_results(path: Union[str, Path]) -> RoundResults:
    """
    Load round results from a local snapshot file.

    Args:
        path: Path to a JSON file as served by the results endpoint

    Returns:
        Parsed round results

    Raises:
        IFSCTransportError: If the file cannot be read
        IFSCDecodeError: If the file contents are not a valid round result
    """
    try:
        raw = Path(path).read_bytes()
    except OSError as e:
        raise IFSCTransportError(f"Could not read results file {path}: {e}") from e
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise IFSCDecodeError(f"Results file {path} is not valid UTF-8: {e}") from e
    return decode_round_results(text)


class IFSCClient:
    """
    Client for the IFSC round results endpoint.

    The default base URL is a proxy that needs no session. Set
    `authenticate` when talking to the official results site, which hands
    out a session cookie on its main page.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        authenticate: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the IFSC client.

        Args:
            base_url: API root; round paths are appended to it
            timeout: Request timeout in seconds
            authenticate: Fetch and send the results site session cookie
            transport: Custom httpx transport (used by tests)
        """
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.timeout = timeout
        self.authenticate = authenticate
        self._transport = transport
        self._session_cookie: Optional[str] = None

    def _http_client(self, cookies: Optional[dict[str, str]] = None) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout, transport=self._transport, cookies=cookies
        )

    async def _get_session_cookie(self) -> str:
        """
        Fetch a session cookie from the IFSC main page.

        Returns:
            The session cookie value

        Raises:
            IFSCTransportError: If unable to obtain session cookie
        """
        try:
            async with self._http_client() as client:
                response = await client.get(
                    IFSC_SITE_URL + "/",
                    headers={"user-agent": DEFAULT_HEADERS["user-agent"]},
                    follow_redirects=True,
                )
        except httpx.HTTPError as e:
            raise IFSCTransportError(f"Could not reach IFSC site: {e}") from e

        if IFSC_SESSION_COOKIE_NAME in response.cookies:
            return response.cookies[IFSC_SESSION_COOKIE_NAME]

        # Try parsing from headers directly
        set_cookie = response.headers.get("set-cookie", "")
        match = re.search(rf"{IFSC_SESSION_COOKIE_NAME}=([^;]+)", set_cookie)
        if match:
            return match.group(1)

        raise IFSCTransportError("Could not retrieve session cookie from IFSC")

    async def _session_cookies(self, refresh: bool = False) -> dict[str, str]:
        if not self.authenticate:
            return {}
        if refresh or self._session_cookie is None:
            self._session_cookie = await self._get_session_cookie()
        return {IFSC_SESSION_COOKIE_NAME: self._session_cookie}

    async def fetch_text(self, path: str) -> str:
        """
        GET a path below the base URL and return the raw body.

        Args:
            path: Endpoint path relative to the base URL

        Returns:
            Response body as text, unrepaired

        Raises:
            IFSCTransportError: On network failure or a non-200 response
        """
        url = f"{self.base_url}{path.lstrip('/')}"
        logger.debug(f"Fetching {url}")

        try:
            cookies = await self._session_cookies()
            async with self._http_client(cookies) as client:
                response = await client.get(url, headers=DEFAULT_HEADERS)

                if response.status_code == 401 and self.authenticate:
                    # Session expired, try refreshing
                    client.cookies = await self._session_cookies(refresh=True)
                    response = await client.get(url, headers=DEFAULT_HEADERS)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise IFSCTransportError(f"IFSC API request failed: {e}") from e

        if response.status_code != 200:
            raise IFSCTransportError(
                f"IFSC API request failed: {response.status_code} - {response.text}"
            )

        return response.text

    async def get_round_results(self, category_round_id: int) -> RoundResults:
        """
        Fetch the results of one category round.

        Args:
            category_round_id: The IFSC category round ID

        Returns:
            Round results including the full ranking

        Raises:
            IFSCTransportError: If the request fails
            IFSCDecodeError: If the body is not a valid round result
        """
        text = await self.fetch_text(f"category_rounds/{category_round_id}/results/")
        return decode_round_results(text)
