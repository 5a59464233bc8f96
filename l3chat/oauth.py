"""OAuth login with Google and Discord: authorisation URLs, code exchange and profiles."""

from __future__ import annotations

import logging
import os
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping
from urllib.parse import quote

import httpx

from l3chat.errors import AUTH_COOKIE_NAME, AuthError, AuthErrorKind

log = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"
DISCORD_AUTH_URL = "https://discord.com/api/oauth2/authorize"
DISCORD_TOKEN_URL = "https://discord.com/api/oauth2/token"
DISCORD_USERINFO_URL = "https://discord.com/api/v10/users/@me"
DISCORD_AVATAR_URL = "https://cdn.discordapp.com/avatars/{}/{}.png"

GOOGLE_SCOPES = ("openid", "email", "profile")
DISCORD_SCOPES = ("identify", "email")

_DEFAULT_REDIRECTS = {
    "google": "http://localhost:3000/auth/google/callback",
    "discord": "http://localhost:3000/auth/discord/callback",
}

_CREDENTIAL_SUFFIXES = ("CLIENT_ID", "CLIENT_SECRET")
_ACCESS_FIELD = "access_token"


def _encode(text: str) -> str:
    return quote(text, safe="")


class Provider(Enum):
    """A supported OAuth identity provider."""

    GOOGLE = "google"
    DISCORD = "discord"

    @property
    def env_prefix(self) -> str:
        return self.value.upper()


def _as_provider(value: Provider | str) -> Provider | None:
    if isinstance(value, Provider):
        return value
    try:
        return Provider(value)
    except ValueError:
        return None


@dataclass(frozen=True)
class OAuthState:
    """What is remembered between starting a login and its callback."""

    provider: str
    verifier: str
    return_url: str | None = None


@dataclass(frozen=True)
class UserProfile:
    """A user's identity as reported by a provider."""

    external_id: str
    provider: str
    email: str | None
    username: str | None
    display_name: str | None
    avatar_url: str | None


class OAuthError(Exception):
    """A failed login step, carrying the error code shown on the login page."""

    def __init__(self, code: str, details: str | None = None) -> None:
        self.code = code
        self.details = details
        super().__init__(f"{code}: {details}" if details is not None else code)

    def redirect_url(self) -> str:
        """The login page URL reporting this error."""
        url = f"/admin?error={self.code}"
        if self.details is not None:
            url += f"&details={_encode(self.details)}"
        return url


def _optional_str(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


def _required_str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ValueError(f"missing or invalid field {key!r}")
    return value


def _require_object(data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError("user info must be a JSON object")
    return data


def parse_google_user(data: Any) -> UserProfile:
    """Build a profile from Google's userinfo response."""
    data = _require_object(data)
    return UserProfile(
        external_id=_required_str(data, "id"),
        provider=Provider.GOOGLE.value,
        email=_optional_str(data, "email"),
        username=None,
        display_name=_optional_str(data, "name"),
        avatar_url=_optional_str(data, "picture"),
    )


def parse_discord_user(data: Any) -> UserProfile:
    """Build a profile from Discord's current-user response."""
    data = _require_object(data)
    user_id = _required_str(data, "id")
    raw_username = _optional_str(data, "username")
    avatar = _optional_str(data, "avatar")
    discriminator = _optional_str(data, "discriminator")

    username = raw_username
    if username is None and discriminator is not None:
        username = f"#{discriminator}"

    return UserProfile(
        external_id=user_id,
        provider=Provider.DISCORD.value,
        email=_optional_str(data, "email"),
        username=username,
        display_name=raw_username,
        avatar_url=DISCORD_AVATAR_URL.format(user_id, avatar) if avatar is not None else None,
    )


def auth_cookie(token: str) -> str:
    """The Set-Cookie value that stores the session token."""
    return f"{AUTH_COOKIE_NAME}={token}; HttpOnly; SameSite=Lax; Path=/"


def _status_text(response: httpx.Response) -> str:
    return f"{response.status_code} {response.reason_phrase}".rstrip()


class OAuthClient:
    """Runs the OAuth flow and keeps the pending login states."""

    def __init__(
        self,
        env: Mapping[str, str] | None = None,
        http: httpx.Client | None = None,
    ) -> None:
        self.env = env if env is not None else os.environ
        self.http = http if http is not None else httpx.Client()
        self.states: dict[str, OAuthState] = {}

    def _require_env(self, name: str) -> str:
        value = self.env.get(name)
        if value is None:
            raise AuthError(AuthErrorKind.MISSING_ENVIRONMENT_VAR, name)
        return value

    def _redirect_uri(self, provider: Provider) -> str:
        return self.env.get(
            f"{provider.env_prefix}_REDIRECT_URL", _DEFAULT_REDIRECTS[provider.value]
        )

    def _credentials(self, provider: Provider) -> tuple[str, str]:
        names = [f"{provider.env_prefix}_{suffix}" for suffix in _CREDENTIAL_SUFFIXES]
        client_id, client_secret = (self._require_env(name) for name in names)
        return client_id, client_secret

    def login_url(self, provider: Provider | str) -> str:
        """Register a new login attempt and return the provider's authorisation URL.

        Raises ValueError for an unknown provider and AuthError when the
        client id is not configured.
        """
        chosen = _as_provider(provider)
        if chosen is None:
            log.error("Unsupported OAuth provider: %s", provider)
            raise ValueError(f"Unsupported provider: {provider}")

        client_id = self._require_env(f"{chosen.env_prefix}_CLIENT_ID")
        redirect_uri = _encode(self._redirect_uri(chosen))
        state_id = str(uuid.uuid4())
        verifier = str(uuid.uuid4())

        if chosen is Provider.GOOGLE:
            url = (
                f"{GOOGLE_AUTH_URL}?client_id={client_id}&redirect_uri={redirect_uri}"
                f"&scope={_encode(' '.join(GOOGLE_SCOPES))}&response_type=code"
                f"&state={_encode(state_id)}&code_challenge={_encode(verifier)}"
                "&code_challenge_method=S256"
            )
        else:
            url = (
                f"{DISCORD_AUTH_URL}?client_id={client_id}&redirect_uri={redirect_uri}"
                f"&scope={'%20'.join(DISCORD_SCOPES)}&response_type=code"
                f"&state={_encode(state_id)}"
            )

        self.states[state_id] = OAuthState(provider=chosen.value, verifier=verifier)
        return url

    def exchange_code(self, provider: Provider | str, code: str, verifier: str) -> str:
        """Trade an authorisation code for an access token."""
        try:
            return self._exchange(provider, code, verifier)
        except OAuthError:
            raise
        except (AuthError, ValueError, httpx.HTTPError) as exc:
            raise OAuthError("token_exchange_failed", str(exc)) from exc

    def _exchange(self, provider: Provider | str, code: str, verifier: str) -> str:
        chosen = _as_provider(provider)
        if chosen is None:
            raise OAuthError("token_exchange_failed", "Unsupported provider")
        token_url = GOOGLE_TOKEN_URL if chosen is Provider.GOOGLE else DISCORD_TOKEN_URL
        client_id, client_secret = self._credentials(chosen)
        redirect_uri = self._redirect_uri(chosen)

        log.info(
            "Exchanging code for token - Provider: %s, Client ID: %s",
            chosen.value,
            client_id[:8],
        )
        form = {
            "grant_type": "authorization_code",
            "code": code,
            "client_id": client_id,
            "client_secret": client_secret,
            "redirect_uri": redirect_uri,
        }
        if chosen is Provider.GOOGLE:
            form["code_verifier"] = verifier

        response = self.http.post(token_url, data=form)
        status = _status_text(response)
        body = response.text
        log.debug("Token response status: %s", status)

        if not response.is_success:
            raise OAuthError(
                "token_exchange_failed",
                f"Token exchange failed with status {status}: {body}",
            )

        data = _require_object(response.json())
        access = _required_str(data, _ACCESS_FIELD)
        error = _optional_str(data, "error")
        if error is not None:
            description = _optional_str(data, "error_description") or ""
            raise OAuthError("token_exchange_failed", f"OAuth error: {error} - {description}")

        log.info("Successfully obtained access token")
        return access

    def fetch_user_info(self, provider: Provider | str, token: str) -> UserProfile:
        """Fetch the signed-in user's profile from the provider."""
        chosen = _as_provider(provider)
        if chosen is None:
            raise OAuthError("user_info_failed", "Unsupported provider")
        url = GOOGLE_USERINFO_URL if chosen is Provider.GOOGLE else DISCORD_USERINFO_URL
        label = "Google" if chosen is Provider.GOOGLE else "Discord"
        try:
            response = self.http.get(url, headers={"Authorization": f"Bearer {token}"})
            body = response.text
            log.debug("%s user info response status: %s", label, _status_text(response))
            if not response.is_success:
                raise OAuthError("user_info_failed", f"Failed to get {label} user info: {body}")
            data = response.json()
            if chosen is Provider.GOOGLE:
                profile = parse_google_user(data)
            else:
                profile = parse_discord_user(data)
        except OAuthError:
            raise
        except (ValueError, httpx.HTTPError) as exc:
            raise OAuthError("user_info_failed", str(exc)) from exc
        log.info("Parsed %s user info: ID=%s", label, profile.external_id)
        return profile

    def complete(self, provider: Provider | str, code: str, state: str) -> UserProfile:
        """Finish a login from its callback parameters and return the user's profile.

        The pending state is consumed; an unknown state raises OAuthError
        with code ``invalid_state``.
        """
        log.info("OAuth callback received for provider: %s", provider)
        pending = self.states.pop(state, None)
        if pending is None:
            log.error("OAuth state not found for state: %s", state)
            raise OAuthError("invalid_state")
        token = self.exchange_code(provider, code, pending.verifier)
        return self.fetch_user_info(provider, token)