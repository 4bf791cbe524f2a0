"""HTTP transport used by the device clients.

A thin layer over `requests.Session` that classifies failures:

- `requests.RequestException` (connection refused, TLS failure, timeout, ...)
  becomes `TransportError`
- any non-2xx status becomes `HTTPStatusError`, keeping the status code

There is no retry, backoff or timeout logic here beyond passing `timeout`
through to requests. Callers needing retries wrap the client calls.

TLS certificates are verified unless `insecure=True` is asked for explicitly.
"""

from __future__ import annotations

import requests
import urllib3
from loguru import logger
from urllib3.exceptions import InsecureRequestWarning

from calnex.types.errors import HTTPStatusError, TransportError
from calnex.util.defaults import DEFAULT_TIMEOUT


class Transport:
    """Performs HTTP requests and classifies their failures.

    Parameters
    ----------
    insecure : bool, optional
        Skip TLS certificate verification, by default False. Only for lab
        devices with self-signed certificates.
    timeout : float | None, optional
        Passed to requests for every call, by default no timeout.
    session : requests.Session | None, optional
        Session to use, a new one by default.
    """

    def __init__(
        self,
        insecure: bool = False,
        timeout: float | None = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self.insecure = insecure
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self.session.verify = not insecure
        if insecure:
            logger.warning("TLS certificate verification disabled")
            urllib3.disable_warnings(InsecureRequestWarning)

    @property
    def verify(self) -> bool:
        return not self.insecure

    def request(self, method: str, url: str, **kwargs) -> requests.Response:
        """Perform a request, returning the response only for 2xx statuses.

        Raises
        ------
        TransportError
            If the exchange itself failed.
        HTTPStatusError
            If the device answered with a non-2xx status.
        """
        kwargs.setdefault("timeout", self.timeout)
        logger.trace("{} {}", method, url)
        try:
            resp = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error("{} {} failed: {}", method, url, e)
            raise TransportError(f"{method} {url}: {e}") from e

        if not 200 <= resp.status_code < 300:
            body = "" if kwargs.get("stream") else resp.text
            resp.close()
            logger.error("{} {} returned HTTP {}", method, url, resp.status_code)
            raise HTTPStatusError(resp.status_code, url, body)
        return resp

    def close(self):
        self.session.close()
