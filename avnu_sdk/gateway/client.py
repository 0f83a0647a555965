"""
HTTP gateway to the AVNU API.

Every response goes through status handling, then authentication (when the
options carry a public key), then JSON decoding and schema validation, in
that order.
"""
import logging
import urllib.parse
from typing import Any, Dict, Mapping, Optional, Type, TypeVar, Union

import requests
from pydantic import TypeAdapter, ValidationError
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..config import DEFAULT_TIMEOUT, AvnuOptions, get_base_url
from ..exceptions import ContractError, RequestCancelledError, RequestError, ResponseValidationError
from .authenticator import ASK_SIGNATURE_HEADER, SIGNATURE_HEADER, verify_response

T = TypeVar("T")

CONTRACT_ERROR_MARKER = "Contract error"


def _encode_query(params: Optional[Mapping[str, Any]]) -> str:
    # Lists become repeated keys; None values are dropped
    if not params:
        return ""
    pairs = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((key, _query_value(item)) for item in value)
        else:
            pairs.append((key, _query_value(value)))
    return urllib.parse.urlencode(pairs)


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _error_messages(response: requests.Response) -> Dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def raise_for_status(response: requests.Response) -> None:
    """
    Map an error status to the SDK's error types.

    Raises:
        RequestError: On 400, on a 500 that is not a revert, and on any other
            status above 400
        ContractError: On a 500 whose message reports a contract error
    """
    status = response.status_code
    if status < 400:
        return

    if status in (400, 500):
        body = _error_messages(response)
        messages = body.get("messages") or []
        if messages:
            first = str(messages[0])
            if status == 500 and CONTRACT_ERROR_MARKER in first:
                raise ContractError(first, revert_error=body.get("revertError") or "",
                                    status_code=status, messages=messages)
            raise RequestError(first, status_code=status, messages=messages)

    raise RequestError(f"{status} {response.reason}", status_code=status)


class RequestGateway:
    """
    Issues GET/POST requests to the AVNU API and returns trusted, parsed data.

    Args:
        session: Optional pre-configured ``requests.Session``
        retry_count: Connection retries for GET requests; POSTs are never retried
        logger: Optional logger instance
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        retry_count: int = 0,
        logger: Optional[logging.Logger] = None,
    ):
        self.logger = logger or logging.getLogger(__name__)
        if session is None:
            session = requests.Session()
            retries = Retry(
                total=retry_count,
                connect=retry_count,
                read=0,
                status=0,
                other=0,
                allowed_methods=["GET"],
                raise_on_status=False,
            )
            session.mount("http://", HTTPAdapter(max_retries=retries))
            session.mount("https://", HTTPAdapter(max_retries=retries))
        self.session = session

    def get(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        options: Optional[AvnuOptions] = None,
        schema: Optional[Union[Type[T], Any]] = None,
        base_url: Optional[str] = None,
    ) -> Any:
        """
        GET ``path`` and return the authenticated, parsed body.

        Args:
            path: Resource path relative to the base URL (``/swap/v2/quotes``)
            params: Query parameters; list values are sent as repeated keys
            options: Per-call options (base URL, trust anchor, abort signal)
            schema: Type to validate the JSON body against; raw JSON when None
            base_url: Host to call instead of the resolved API base URL
        """
        options = options or AvnuOptions()
        url = self._url(path, options, base_url)
        query = _encode_query(params)
        if query:
            url = f"{url}?{query}"
        return self._send("GET", url, None, options, schema)

    def post(
        self,
        path: str,
        body: Any = None,
        options: Optional[AvnuOptions] = None,
        schema: Optional[Union[Type[T], Any]] = None,
        base_url: Optional[str] = None,
    ) -> Any:
        """
        POST a JSON body to ``path`` and return the authenticated, parsed body.
        """
        options = options or AvnuOptions()
        return self._send("POST", self._url(path, options, base_url), body, options, schema)

    def close(self) -> None:
        self.session.close()

    def _url(self, path: str, options: AvnuOptions, base_url: Optional[str] = None) -> str:
        return f"{(base_url or get_base_url(options)).rstrip('/')}/{path.lstrip('/')}"

    def _headers(self, method: str, options: AvnuOptions) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        if method == "POST":
            headers["Accept"] = "application/json"
            headers["Content-Type"] = "application/json"
        if options.public_key is not None and options.public_key != "":
            headers[ASK_SIGNATURE_HEADER] = "true"
        return headers

    def _check_cancelled(self, options: AvnuOptions, url: str) -> None:
        if options.abort_signal is not None and options.abort_signal.is_set():
            raise RequestCancelledError(f"Request to {url} was cancelled")

    def _send(self, method: str, url: str, body: Any, options: AvnuOptions, schema: Any) -> Any:
        self._check_cancelled(options, url)
        self.logger.debug(f"{method} {url}")

        kwargs: Dict[str, Any] = {
            "headers": self._headers(method, options),
            "timeout": options.timeout or DEFAULT_TIMEOUT,
        }
        if body is not None:
            kwargs["json"] = body
        response = self.session.request(method, url, **kwargs)

        self._check_cancelled(options, url)
        return self.parse_response(response, options, schema)

    def parse_response(self, response: requests.Response, options: Optional[AvnuOptions] = None,
                       schema: Any = None) -> Any:
        """
        Turn a raw response into trusted data.

        Raises:
            RequestError: On an error status
            ContractError: On a reported on-chain revert
            MissingSignatureError: If a public key is set and the signature is absent
            InvalidSignatureError: If the signature does not verify
            ResponseValidationError: If the body does not match ``schema``
        """
        options = options or AvnuOptions()
        raise_for_status(response)

        # Authenticate the untouched bytes before anything reads them as JSON
        verify_response(response.content, response.headers.get(SIGNATURE_HEADER), options.public_key)

        content_type = response.headers.get("Content-Type", "")
        if content_type and "application/json" not in content_type:
            self.logger.warning(f"Unexpected Content-Type: {content_type} (expected application/json)")

        try:
            data = response.json()
        except ValueError as e:
            raise ResponseValidationError(f"Invalid JSON response from {response.url}: {e}") from e

        if schema is None:
            return data
        try:
            return TypeAdapter(schema).validate_python(data)
        except ValidationError as e:
            raise ResponseValidationError(f"Response from {response.url} does not match {schema}: {e}") from e
