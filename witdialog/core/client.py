"""HTTP client for the Wit converse and message APIs."""

import json
from typing import Any

import requests
from loguru import logger

from witdialog.agents.types import ConversationContext, Session, TurnOutcome
from witdialog.utils.env_cfg import WitConfig, load_wit_env


class WitClient:
    """
    Issues one request per call and reports failures as outcomes instead of raising.
    """

    def __init__(
        self,
        config: WitConfig | None = None,
        http: requests.Session | None = None,
    ) -> None:
        """
        Initialize the WitClient.

        Args:
            config (WitConfig | None, optional): API configuration. Defaults to load_wit_env().
            http (requests.Session | None, optional): HTTP session to reuse. Defaults to a new session.
        """
        self.config = config or load_wit_env()
        self.http = http or requests.Session()
        self.closed = False

    def __enter__(self) -> "WitClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def close(self) -> None:
        """
        Close the HTTP session; later converse calls report a stopped outcome.
        """
        if not self.closed:
            self.http.close()
            self.closed = True

    def _headers(self, access_token: str) -> dict[str, str]:
        if not access_token:
            raise ValueError("An access token is required")
        return {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    def _send(self, method: str, path: str, **kwargs: Any) -> TurnOutcome:
        """
        Perform a request and map the result onto a TurnOutcome.

        Args:
            method (str): HTTP method.
            path (str): API path below the base URL.
            **kwargs (Any): Extra arguments for requests.

        Returns:
            TurnOutcome: OK with the parsed body, or a transport error.
        """
        url = f"{self.config.api_url}{path}"
        try:
            resp = self.http.request(
                method, url, timeout=self.config.request_timeout, **kwargs
            )
        except requests.Timeout as e:
            logger.error("Request to {} timed out: {}", path, e)
            return TurnOutcome.transport_error("timeout", {"message": str(e)})
        except requests.RequestException as e:
            logger.error("Request to {} failed: {}", path, e)
            return TurnOutcome.transport_error("connection_error", {"message": str(e)})

        body = self._parse_body(resp)
        if not resp.ok:
            logger.error("Request to {} returned status {}", path, resp.status_code)
            code = body.get("code") if isinstance(body, dict) else None
            return TurnOutcome.transport_error(code or f"http_{resp.status_code}", body)
        if isinstance(body, dict) and "error" in body:
            logger.error("Service reported an error: {}", body["error"])
            return TurnOutcome.transport_error(body.get("code") or "api_error", body)
        return TurnOutcome.ok(body)

    @staticmethod
    def _parse_body(resp: requests.Response) -> Any:
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            return resp.text

    def converse(
        self, session: Session, text: str, context: ConversationContext
    ) -> TurnOutcome:
        """
        Send one converse turn.

        Args:
            session (Session): Access token and session id.
            text (str): User text, empty for continuation turns.
            context (ConversationContext): The current context, sent as the request body.

        Returns:
            TurnOutcome: The raw outcome of the call.
        """
        if not session.session_id:
            raise ValueError("A session id is required")
        headers = self._headers(session.access_token)
        if self.closed:
            logger.debug("Client closed, skipping converse request")
            return TurnOutcome.stopped()

        params = {"v": self.config.api_version, "session_id": session.session_id}
        if text:
            params["q"] = text
        return self._send(
            "POST", "/converse", params=params, headers=headers, json=context or {}
        )

    def message(
        self,
        access_token: str,
        text: str,
        context: ConversationContext | None = None,
        thread_id: str = "",
        msg_id: str = "",
        total_outcomes: int = 1,
    ) -> TurnOutcome:
        """
        Extract meaning from a single message.

        Args:
            access_token (str): The server access token.
            text (str): The message text.
            context (ConversationContext | None, optional): Context sent with the message. Defaults to None.
            thread_id (str, optional): Thread identifier. Defaults to "".
            msg_id (str, optional): Message identifier. Defaults to "".
            total_outcomes (int, optional): Number of outcomes to request. Defaults to 1.

        Returns:
            TurnOutcome: The raw outcome of the call.
        """
        headers = self._headers(access_token)
        params: dict[str, Any] = {
            "v": self.config.api_version,
            "q": text,
            "n": total_outcomes,
        }
        if thread_id:
            params["thread_id"] = thread_id
        if msg_id:
            params["msg_id"] = msg_id
        if context:
            params["context"] = json.dumps(context)
        return self._send("GET", "/message", params=params, headers=headers)
