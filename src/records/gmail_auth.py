"""Gmail API authentication helper."""

import logging
import os
from pathlib import Path
from typing import Optional

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import Resource, build

from .exceptions import NonInteractiveAuthError, ScopeMismatchError

logger = logging.getLogger(__name__)

# Reading messages/attachments and sending forwards
DEFAULT_SCOPES = [
    "https://www.googleapis.com/auth/gmail.readonly",
    "https://www.googleapis.com/auth/gmail.send",
]


class GmailAuthenticator:
    """Loads, refreshes and stores Gmail OAuth credentials.

    Paths default to the GMAIL_CREDENTIALS_PATH / GMAIL_TOKEN_PATH
    environment variables, then to ``config/`` under the project root.
    Setting GMAIL_NON_INTERACTIVE disables the browser flow.
    """

    def __init__(
        self,
        credentials_path: Optional[Path] = None,
        token_path: Optional[Path] = None,
        scopes: Optional[list[str]] = None,
        interactive: bool = True,
    ):
        config_dir = Path(__file__).parent.parent.parent / "config"

        self._credentials_path = credentials_path or Path(
            os.environ.get("GMAIL_CREDENTIALS_PATH") or config_dir / "credentials.json"
        )
        self._token_path = token_path or Path(
            os.environ.get("GMAIL_TOKEN_PATH") or config_dir / "token.json"
        )
        self._scopes = scopes or DEFAULT_SCOPES
        self._service: Optional[Resource] = None
        self._credentials: Optional[Credentials] = None
        self._interactive = interactive and not os.environ.get("GMAIL_NON_INTERACTIVE")

    def _has_required_scopes(self, creds: Credentials) -> bool:
        granted = creds.granted_scopes or creds.scopes
        if not granted:
            return False
        return all(scope in granted for scope in self._scopes)

    def _load_or_refresh_credentials(self) -> Credentials:
        """Load the stored token, refreshing or re-authorizing as needed.

        Raises:
            FileNotFoundError: If the OAuth client file is missing
            ScopeMismatchError: If the token lacks scopes and non-interactive
            NonInteractiveAuthError: If re-auth is needed but non-interactive
        """
        creds = None

        if self._token_path.exists():
            creds = Credentials.from_authorized_user_file(
                str(self._token_path), self._scopes
            )
            if creds and not self._has_required_scopes(creds):
                if not self._interactive:
                    raise ScopeMismatchError(
                        required_scopes=self._scopes,
                        token_scopes=list(creds.scopes or []),
                    )
                logger.info("Stored token lacks required scopes, re-authorizing")
                self._token_path.unlink()
                creds = None

        if creds and creds.valid:
            return creds

        if creds and creds.expired and creds.refresh_token:
            creds.refresh(Request())
        else:
            if not self._interactive:
                reason = "no valid token" if not creds else "token expired without refresh token"
                raise NonInteractiveAuthError(reason)
            if not self._credentials_path.exists():
                raise FileNotFoundError(
                    f"Credentials file not found at {self._credentials_path}. "
                    "Download OAuth credentials from Google Cloud Console."
                )
            flow = InstalledAppFlow.from_client_secrets_file(
                str(self._credentials_path), self._scopes
            )
            creds = flow.run_local_server(port=0)

        self._token_path.parent.mkdir(parents=True, exist_ok=True)
        self._token_path.write_text(creds.to_json())
        return creds

    def get_service(self) -> Resource:
        """Get or lazily create the Gmail API service."""
        if self._service is None:
            self._credentials = self._load_or_refresh_credentials()
            self._service = build("gmail", "v1", credentials=self._credentials)
        return self._service
