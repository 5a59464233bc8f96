# l3chat

A library of pieces for a small chat web application. It has no web server,
no command and no database of its own; it provides the logic such an
application calls into.

## Modules

- `l3chat.oauth` — OAuth login with Google (with a PKCE code challenge) and
  Discord. `OAuthClient.login_url(provider)` records a pending `OAuthState`
  and returns the provider's authorisation URL;
  `OAuthClient.complete(provider, code, state)` consumes that state, trades
  the code for an access token (`exchange_code`) and fetches the user's
  profile (`fetch_user_info`) as a `UserProfile`. Failures raise `OAuthError`,
  whose `redirect_url()` gives `/admin?error=...` (with `details=` when
  present). `parse_google_user` and `parse_discord_user` turn the providers'
  JSON into a `UserProfile`, and `auth_cookie(token)` builds the
  `auth_token` `Set-Cookie` value. Client ids, secrets and redirect URLs are
  read from `GOOGLE_CLIENT_ID`, `GOOGLE_CLIENT_SECRET`, `GOOGLE_REDIRECT_URL`,
  `DISCORD_CLIENT_ID`, `DISCORD_CLIENT_SECRET` and `DISCORD_REDIRECT_URL`
  (the environment by default, or a mapping passed as `env`); HTTP goes
  through an `httpx.Client`, which may be passed as `http`.
- `l3chat.errors` — `AuthError` with an `AuthErrorKind` and an optional
  detail, formatted as a readable message; `AUTH_COOKIE_NAME`.
- `l3chat.secure` — `verify_password(password, hash_b64)` checks a password
  against a base64-wrapped Argon2id (version 19) PHC hash string. It returns
  `False` on a mismatch and raises `PasswordHashError` when the stored hash
  cannot be decoded or parsed.
- `l3chat.markdown` — `markdown_to_html(text)` renders Markdown to
  Tailwind-styled HTML: headings, emphasis, links opening in a new tab,
  lists (task-list markers are removed), block quotes, tables,
  strikethrough, inline code and fenced code blocks with a language label and
  a copy button. Quotes, dashes and ellipses are made typographic; raw HTML in
  the input is dropped. `html_escape(text)` escapes `& < > " '`.
- `l3chat.preferences` — `dark_mode_cookie(is_dark, now=None)` builds the
  `bb_dark_mode` `Set-Cookie` value, valid for 365 days;
  `parse_dark_mode(cookie_header)` reads it back as `True`, `False` or `None`.
- `l3chat.drawing` — `DrawEvent`, the JSON message of a shared canvas
  (`line` and `clear` events, `to_json` / `from_json`), and `DrawingSession`,
  which turns `press`, `move` and `release` into line events, produces clear
  events, parses brush-size input and ignores incoming events from its own
  user. `generate_user_id()` gives ids of the form `user-N`.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Examples

Render Markdown:

```python
from l3chat.markdown import markdown_to_html

html = markdown_to_html("# Hello\n\nThis is **bold** text.")
```

Start and finish an OAuth login:

```python
from l3chat.oauth import OAuthClient, OAuthError, Provider

client = OAuthClient(env={"GOOGLE_CLIENT_ID": "placeholder"})
url = client.login_url(Provider.GOOGLE)   # send the browser here

# later, in the callback handler:
try:
    profile = client.complete(Provider.GOOGLE, code, state)
except OAuthError as exc:
    location = exc.redirect_url()
```

Drawing:

```python
from l3chat.drawing import DrawingSession

session = DrawingSession(room_id="default-room", user_id="user-1")
session.press(10, 10)
event = session.move(20, 25)   # a "line" DrawEvent
payload = event.to_json()      # send to the room
```

Dark mode:

```python
from l3chat.preferences import parse_dark_mode

parse_dark_mode("bb_dark_mode=true")  # True
```

## What this package does not do

- It serves no HTTP routes and relays no WebSocket messages; an application
  must wire the functions above into its own server.
- It does not store users or sessions: `OAuthClient.complete` returns a
  `UserProfile`, and saving it and issuing a signed session token are left
  to the caller. Pending OAuth states live only in the client's memory.
- It draws nothing: drawing events are produced and parsed, not rendered.