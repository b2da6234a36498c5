from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Tuple, Union
from urllib.parse import urlsplit

import requests
from pydantic import BaseModel, TypeAdapter

from dvfapi import signer
from dvfapi.config import DEFAULT_TIMEOUT, ENDPOINT, ClientConfig, validate_base_url
from dvfapi.errors import ApiError, ConfigurationError
from dvfapi.log import get_logger
from dvfapi.models import SignedMessage

logger = get_logger(__name__)

PUBLIC_WS_ENDPOINT = "wss://api.deversifi.com/market-data/ws"

Body = Union[bytes, str, Dict[str, Any], list, None]


def socket_endpoint_hub(private: bool = False) -> str:
    """Public market-data websocket URL; private streams are not resolved here."""
    if private:
        return ""
    return PUBLIC_WS_ENDPOINT


def _encode_body(body: Body) -> bytes:
    if body is None:
        return b""
    if isinstance(body, (bytes, bytearray)):
        return bytes(body)
    if isinstance(body, str):
        return body.encode("utf-8")
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def _text(data: Optional[bytes]) -> str:
    if not data:
        return ""
    if isinstance(data, str):
        return data
    return data.decode("utf-8", errors="replace")


def request_log(req: requests.PreparedRequest) -> str:
    """Raw HTTP/1.1 dump of a prepared request, body included."""
    parts = urlsplit(req.url)
    target = parts.path or "/"
    if parts.query:
        target += "?" + parts.query
    lines = [f"{req.method} {target} HTTP/1.1", f"Host: {parts.netloc}"]
    lines += [f"{k}: {v}" for k, v in req.headers.items()]
    return "\r\n".join(lines) + "\r\n\r\n" + _text(req.body)


def response_log(res: requests.Response) -> str:
    """Raw HTTP/1.1 dump of a response. Reads (and caches) the whole body."""
    lines = [f"HTTP/1.1 {res.status_code} {res.reason or ''}".rstrip()]
    lines += [f"{k}: {v}" for k, v in res.headers.items()]
    return "\r\n".join(lines) + "\r\n\r\n" + _text(res.content)


def decode(res: requests.Response, shape: Any = None) -> Any:
    """
    Read the whole body as JSON and validate it into ``shape``.

    ``shape`` may be None (plain JSON value), a pydantic model class, or any
    type ``pydantic.TypeAdapter`` accepts (``dict[str, int]``, a dataclass,
    ...). The response is closed whatever happens. ``json.JSONDecodeError``
    and ``pydantic.ValidationError`` propagate unchanged.
    """
    try:
        body = res.content
    finally:
        res.close()
    data = json.loads(body)
    if shape is None:
        return data
    if isinstance(shape, type) and issubclass(shape, BaseModel):
        return shape.model_validate(data)
    return TypeAdapter(shape).validate_python(data)


class Client:
    """
    Minimal DeversiFi REST client.

    Please do not send more than 10 requests per second; the API answers
    faster callers with HTTP 429, which surfaces here as ``ApiError``.
    Nothing is signed automatically: use ``sign`` / ``sign_and_public_key``
    and put the result wherever the endpoint expects it.
    """

    def __init__(
        self,
        private_key: str = "",
        subaccount: str = "",
        *,
        base_url: str = ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        if not timeout or timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {timeout!r}")
        self._private_key = private_key
        self._subaccount = subaccount
        self._base_url = validate_base_url(base_url)
        self._timeout = float(timeout)
        self._session = session or requests.Session()

    @classmethod
    def from_config(cls, cfg: ClientConfig, session: Optional[requests.Session] = None) -> "Client":
        return cls(
            cfg.private_key.get_secret_value(),
            cfg.subaccount,
            base_url=cfg.base_url,
            timeout=cfg.timeout,
            session=session,
        )

    @property
    def subaccount(self) -> str:
        return self._subaccount

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def session(self) -> requests.Session:
        return self._session

    def __repr__(self) -> str:
        return (
            f"Client(subaccount={self._subaccount!r}, base_url={self._base_url!r}, "
            f"timeout={self._timeout}, private_key='**********')"
        )

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        self._session.close()

    # -------- HTTP --------
    @staticmethod
    def headers(request: requests.PreparedRequest) -> None:
        request.headers["Accept"] = "application/json"
        request.headers["Content-Type"] = "application/json; charset=UTF-8"

    def new_request(
        self,
        method: str,
        path: str,
        body: Body = None,
        params: Optional[Dict[str, str]] = None,
    ) -> requests.PreparedRequest:
        req = requests.Request(
            method=method.upper(),
            url=self._base_url + path,
            params=dict(params) if params else None,
            data=_encode_body(body),
        ).prepare()
        self.headers(req)
        return req

    def send_request(
        self,
        method: str,
        path: str,
        body: Body = None,
        params: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        req = self.new_request(method, path, body, params)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("request:\n%s", request_log(req))
        res = self._session.send(req, timeout=self._timeout)
        if res.status_code != 200:
            try:
                res.content  # drain
            finally:
                res.close()
            logger.warning(
                "%s %s failed: %s %s", req.method, path, res.status_code, res.reason
            )
            raise ApiError(res.status_code, res.reason)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("response:\n%s", response_log(res))
        return res

    def request(
        self,
        method: str,
        path: str,
        body: Body = None,
        params: Optional[Dict[str, str]] = None,
        shape: Any = None,
    ) -> Any:
        return decode(self.send_request(method, path, body, params), shape)

    def get(self, path: str, params: Optional[Dict[str, str]] = None, shape: Any = None) -> Any:
        return self.request("GET", path, params=params, shape=shape)

    def post(self, path: str, body: Body = None, shape: Any = None) -> Any:
        return self.request("POST", path, body=body, shape=shape)

    # -------- Signing --------
    def sign(self, message: signer.Message, **kwargs: Any) -> str:
        return signer.sign(self._private_key, message, **kwargs)

    def sign_and_public_key(self, message: signer.Message, **kwargs: Any) -> Tuple[str, str]:
        return signer.sign_and_public_key(self._private_key, message, **kwargs)

    def signed_message(self, message: signer.Message, **kwargs: Any) -> SignedMessage:
        sig, pub = self.sign_and_public_key(message, **kwargs)
        return SignedMessage(signature=sig, public_key=pub)


__all__ = [
    "Client",
    "PUBLIC_WS_ENDPOINT",
    "decode",
    "request_log",
    "response_log",
    "socket_endpoint_hub",
]
