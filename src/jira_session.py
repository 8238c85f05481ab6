"""
Jira Session
In-memory credential store and the authenticated HTTP transport used to reach Jira
"""
import logging
from typing import Dict, Any, Optional

import requests
from requests.auth import HTTPBasicAuth

from .exceptions import NotConnectedError, TransportError, JiraError

logger = logging.getLogger(__name__)

DEFAULT_SESSION_ID = 'default'


def normalize_base_url(base_url: str) -> str:
    """Strip exactly one trailing slash"""
    if base_url.endswith('/'):
        return base_url[:-1]
    return base_url


def json_headers() -> Dict[str, str]:
    return {
        'Accept': 'application/json',
        'Content-Type': 'application/json'
    }


class JiraTransport:
    """Issues single authenticated HTTP calls to Jira, without retries"""

    def __init__(self, timeout: Optional[float] = None, http: Optional[requests.Session] = None):
        self.timeout = timeout
        self.http = http or requests.Session()

    def request(self, method: str, url: str, headers: Dict[str, str],
                auth: Optional[HTTPBasicAuth] = None,
                params: Optional[Dict[str, Any]] = None,
                payload: Optional[Dict[str, Any]] = None) -> Any:
        """Perform the request and return the decoded JSON body

        Raises:
            TransportError: on network failure, non-2xx status, or a body that is not JSON
        """
        try:
            response = self.http.request(
                method,
                url,
                headers=headers,
                auth=auth,
                params=params,
                json=payload,
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Request to {url} failed: {e}") from e

        # Read once; requests caches the text for response.json()
        body = response.text
        logger.debug(f"📊 {method} {url} -> {response.status_code} {response.reason}")

        if not response.ok:
            raise TransportError(
                f"{response.status_code} {response.reason} - {body}",
                status_code=response.status_code,
                status_text=response.reason,
                body=body
            )

        if not body:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                f"Invalid JSON response from {url}: {e}",
                status_code=response.status_code,
                status_text=response.reason,
                body=body
            ) from e


class JiraSession:
    """The currently active Jira connection for one operator"""

    def __init__(self, transport: Optional[JiraTransport] = None):
        self.transport = transport or JiraTransport()
        self.base_url = ''
        self.email = ''
        self.api_token = ''
        self.connected = False

    def connect(self, base_url: str, email: str, api_token: str) -> bool:
        """Check the given credentials against Jira and keep them on success

        Returns False when the check fails; the session is left disconnected.
        """
        base_url = normalize_base_url(base_url)
        try:
            self.transport.request(
                'GET',
                f'{base_url}/rest/api/3/myself',
                headers=json_headers(),
                auth=HTTPBasicAuth(email, api_token)
            )
        except JiraError as e:
            logger.error(f"❌ Jira connection to {base_url} failed: {e}")
            self.disconnect()
            return False

        self.base_url = base_url
        self.email = email
        self.api_token = api_token
        self.connected = True
        logger.info(f"✅ Successfully connected to Jira at {base_url}")
        return True

    def disconnect(self):
        self.base_url = ''
        self.email = ''
        self.api_token = ''
        self.connected = False

    def is_connected(self) -> bool:
        return self.connected

    def get_connection_info(self) -> Optional[Dict[str, str]]:
        if not self.connected:
            return None
        return {
            'baseUrl': self.base_url,
            'email': self.email
        }

    def auth(self) -> HTTPBasicAuth:
        """Basic auth built from the current credentials on every call"""
        return HTTPBasicAuth(self.email, self.api_token)

    def auth_headers(self) -> Dict[str, str]:
        """JSON headers sent with every authenticated call"""
        return json_headers()

    def api_request(self, method: str, dialect: str, path: str,
                    params: Optional[Dict[str, Any]] = None,
                    payload: Optional[Dict[str, Any]] = None) -> Any:
        """Call `{base_url}/rest/api/{dialect}{path}` with the session credentials"""
        if not self.connected:
            raise NotConnectedError()
        url = f'{self.base_url}/rest/api/{dialect}{path}'
        return self.transport.request(
            method,
            url,
            headers=self.auth_headers(),
            auth=self.auth(),
            params=params,
            payload=payload
        )


class SessionRegistry:
    """Jira sessions keyed by session id

    Callers that do not supply an id share the single default session, which
    always exists. Other sessions are created on connect and dropped again on
    disconnect or a failed connect, so lookups never grow the registry.
    """

    def __init__(self, timeout: Optional[float] = None, http: Optional[requests.Session] = None):
        self.timeout = timeout
        # None: one requests.Session per Jira session
        self.http = http
        self._sessions: Dict[str, JiraSession] = {DEFAULT_SESSION_ID: self._new_session()}

    def _new_session(self) -> JiraSession:
        return JiraSession(JiraTransport(timeout=self.timeout, http=self.http))

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, session_id: Optional[str] = None) -> JiraSession:
        """Session for `session_id`, created if missing"""
        session_id = session_id or DEFAULT_SESSION_ID
        if session_id not in self._sessions:
            self._sessions[session_id] = self._new_session()
            logger.debug(f"Created Jira session {session_id}")
        return self._sessions[session_id]

    def find(self, session_id: Optional[str] = None) -> Optional[JiraSession]:
        """Existing session for `session_id`, or None"""
        return self._sessions.get(session_id or DEFAULT_SESSION_ID)

    def discard(self, session_id: Optional[str] = None):
        """Forget a session; the default session is kept"""
        session_id = session_id or DEFAULT_SESSION_ID
        if session_id != DEFAULT_SESSION_ID and self._sessions.pop(session_id, None) is not None:
            logger.debug(f"Dropped Jira session {session_id}")

    def discard_disconnected(self, session_id: Optional[str] = None):
        """Forget the session unless it holds an active connection"""
        session = self.find(session_id)
        if session is not None and not session.is_connected():
            self.discard(session_id)
