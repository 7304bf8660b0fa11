from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Optional
from threading import Lock
from urllib.parse import quote_plus
import time, requests

TOKEN_URL   = "https://id.twitch.tv/oauth2/token"
STREAMS_URL = "https://api.twitch.tv/helix/streams"

# refresh a bit before Twitch actually expires the token
TOKEN_EXPIRY_MARGIN_SEC = 120


class TwitchError(Exception):
    pass

class TwitchAuthError(TwitchError):
    pass

class TwitchQueryError(TwitchError):
    pass


@dataclass
class TwitchStream:
    user_name: str
    type: str


def is_live(streams: list[TwitchStream]) -> bool:
    return any(s.type == "live" for s in streams)


class TwitchAuth:
    """
    App access token (client credentials) with expiry-aware reuse.

    One instance is shared by all request threads; the check-and-refresh
    runs under a lock so concurrent requests never fetch two tokens.
    """

    def __init__(self, client_id: str, client_secret: str, session: requests.Session,
                 timeout: float = 10, clock: Callable[[], float] = time.time):
        self.client_id = client_id
        self.client_secret = client_secret
        self.session = session
        self.timeout = timeout
        self.clock = clock
        self.token: Optional[str] = None
        self.expires_in = 0
        self.expires_at = 0.0
        self._lock = Lock()

    def get_token(self) -> str:
        with self._lock:
            if self.token and self.clock() < self.expires_at:
                print("[Twitch] using cached token")
                return self.token

            try:
                r = self.session.post(TOKEN_URL, params={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "grant_type": "client_credentials",
                }, timeout=self.timeout)
                r.raise_for_status()
            except requests.exceptions.RequestException as e:
                # requests error text carries the full token URL
                raise TwitchAuthError(f"failed to authenticate with twitch: {self._scrub(str(e))}") from e

            try:
                js = r.json()
                token = str(js["access_token"])
                expires_in = int(js["expires_in"])
            except (ValueError, KeyError, TypeError) as e:
                raise TwitchAuthError(f"failed to decode twitch token response: {e}") from e

            now = self.clock()
            self.token = token
            self.expires_in = expires_in
            self.expires_at = now + expires_in - TOKEN_EXPIRY_MARGIN_SEC
            print(f"[Twitch] new app token, expires in {expires_in}s")
            return self.token

    def invalidate(self, token: Optional[str] = None) -> None:
        """Drop the cached token, or only `token` if given and still current."""
        with self._lock:
            if token is not None and token != self.token:
                return
            self.token = None
            self.expires_at = 0.0

    def _scrub(self, text: str) -> str:
        if self.client_secret:
            for s in (self.client_secret, quote_plus(self.client_secret)):
                text = text.replace(s, "***")
        return text

    def snapshot(self) -> dict:
        with self._lock:
            if not self.token:
                return {"cached": False, "expires_in": 0}
            left = max(0, int(self.expires_at - self.clock()))
            return {"cached": left > 0, "expires_in": left}


class TwitchClient:
    def __init__(self, auth: TwitchAuth):
        self.auth = auth

    def get_streams(self, channel: str) -> list[TwitchStream]:
        token = self.auth.get_token()
        headers = {
            "Authorization": f"Bearer {token}",
            "Client-Id": self.auth.client_id,
        }
        try:
            r = self.auth.session.get(STREAMS_URL, params={"user_login": channel},
                                      headers=headers, timeout=self.auth.timeout)
        except requests.exceptions.RequestException as e:
            raise TwitchQueryError(f"error making twitch request: {e}") from e

        if r.status_code == 401:
            # token revoked on Twitch's side; fetch a new one next time
            self.auth.invalidate(token)
        try:
            r.raise_for_status()
        except requests.exceptions.HTTPError as e:
            raise TwitchQueryError(f"twitch streams request failed: {e}") from e

        try:
            data = r.json()["data"]
            return [TwitchStream(user_name=s.get("user_name", ""), type=s.get("type", ""))
                    for s in data]
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise TwitchQueryError(f"failed to decode twitch streams response: {e}") from e

    def is_channel_live(self, channel: str) -> bool:
        return is_live(self.get_streams(channel))
