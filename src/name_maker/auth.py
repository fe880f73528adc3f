"""
Browser-based API key capture

When no Anthropic key is configured, a small Flask app is served on an
ephemeral loopback port. The user pastes a key into the form; the key is
checked with a one-token request, saved to the config file and exported
to the environment for this process.
"""

import logging
import os
import threading
import webbrowser
from typing import Callable, Optional

import anthropic
from flask import Flask, jsonify, request
from werkzeug.serving import make_server

from .config import config, get_api_key, save_api_key

logger = logging.getLogger(__name__)

KeyValidator = Callable[[str], bool]


class CredentialError(Exception):
    """No usable API key could be found or captured."""
    pass


AUTH_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Name Maker - Authentication</title>
  <style>
    body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
           background: #16213e; min-height: 100vh; margin: 0;
           display: flex; align-items: center; justify-content: center; }
    .card { background: white; border-radius: 16px; padding: 40px; max-width: 500px; width: 100%; }
    h1 { margin: 0 0 8px; color: #1a1a2e; }
    p { color: #555; font-size: 14px; }
    ol { color: #444; font-size: 14px; line-height: 1.6; }
    input { width: 100%; padding: 12px; font-family: monospace; margin: 12px 0;
            border: 2px solid #e0e0e0; border-radius: 8px; box-sizing: border-box; }
    button { width: 100%; padding: 12px; background: #6366f1; color: white; border: none;
             border-radius: 8px; font-size: 16px; cursor: pointer; }
    button:disabled { background: #ccc; }
    #error { color: #dc2626; display: none; }
  </style>
</head>
<body>
  <div class="card" id="form-card">
    <h1>Name Maker</h1>
    <p>Connect your Anthropic account to generate names.</p>
    <ol>
      <li>Open the <a href="__CONSOLE_URL__" target="_blank">Anthropic Console</a></li>
      <li>Create a new API key or copy an existing one</li>
      <li>Paste it below</li>
    </ol>
    <p id="error"></p>
    <form id="auth-form">
      <input type="password" id="api-key" placeholder="__KEY_PREFIX__api03-..." autocomplete="off" required>
      <button type="submit" id="submit-btn">Connect Account</button>
    </form>
  </div>
  <div class="card" id="done-card" style="display: none;">
    <h1>Connected!</h1>
    <p>You can close this window and return to your terminal.</p>
  </div>
  <script>
    const form = document.getElementById('auth-form');
    const error = document.getElementById('error');
    const button = document.getElementById('submit-btn');
    function fail(message) {
      error.textContent = message;
      error.style.display = 'block';
      button.disabled = false;
      button.textContent = 'Connect Account';
    }
    form.addEventListener('submit', async (e) => {
      e.preventDefault();
      const apiKey = document.getElementById('api-key').value.trim();
      if (!apiKey.startsWith('__KEY_PREFIX__')) {
        fail('Invalid API key format. It should start with __KEY_PREFIX__');
        return;
      }
      button.disabled = true;
      button.textContent = 'Validating...';
      error.style.display = 'none';
      try {
        const res = await fetch('/auth', {
          method: 'POST',
          headers: {'Content-Type': 'application/json'},
          body: JSON.stringify({api_key: apiKey})
        });
        const data = await res.json();
        if (data.success) {
          document.getElementById('form-card').style.display = 'none';
          document.getElementById('done-card').style.display = 'block';
        } else {
          fail(data.error || 'Authentication failed. Please check your API key.');
        }
      } catch (err) {
        fail('Connection error. Please try again.');
      }
    });
  </script>
</body>
</html>
"""


def validate_api_key(api_key: str) -> bool:
    """One-token request against the API; False on any API error."""
    client = anthropic.Anthropic(api_key=api_key)
    try:
        client.messages.create(
            model=config.models.validation_model,
            max_tokens=1,
            messages=[{"role": "user", "content": "Hi"}],
        )
    except anthropic.APIError as e:
        logger.debug(f"API key rejected: {e}")
        return False
    return True


def create_auth_app(
    on_key: Callable[[str], None],
    validator: KeyValidator = validate_api_key,
) -> Flask:
    """
    Build the key capture app.

    Args:
        on_key: Called with the key once it validates
        validator: Live key check (replaced in tests)
    """
    app = Flask(__name__)
    prefix = config.auth.key_prefix
    page = AUTH_PAGE.replace("__CONSOLE_URL__", config.auth.console_url).replace("__KEY_PREFIX__", prefix)

    @app.get("/")
    def index():
        return page, 200, {"Content-Type": "text/html; charset=utf-8"}

    @app.post("/auth")
    def submit_key():
        data = request.get_json(silent=True)
        api_key = data.get("api_key") if isinstance(data, dict) else None
        if not isinstance(api_key, str) or not api_key.strip():
            return jsonify(success=False, error="Invalid request"), 400

        api_key = api_key.strip()
        if not api_key.startswith(prefix):
            return jsonify(success=False, error=f"Invalid API key format. It should start with {prefix}"), 400
        if not validator(api_key):
            return jsonify(success=False, error="Invalid API key. Please check and try again."), 400

        on_key(api_key)
        return jsonify(success=True)

    return app


class AuthServer:
    """
    Serves the key capture app on 127.0.0.1 in a background thread.

    wait() blocks until a valid key arrives or the timeout expires.
    """

    def __init__(self, validator: KeyValidator = validate_api_key, port: int = 0):
        self._key: Optional[str] = None
        self._received = threading.Event()
        self._server = make_server("127.0.0.1", port, create_auth_app(self._accept, validator), threaded=True)
        self._thread: Optional[threading.Thread] = None

    @property
    def url(self) -> str:
        return f"http://127.0.0.1:{self._server.server_port}"

    def _accept(self, api_key: str) -> None:
        save_api_key(api_key)
        os.environ["ANTHROPIC_API_KEY"] = api_key
        self._key = api_key
        self._received.set()

    def start(self) -> None:
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)
        self._thread.start()
        logger.debug(f"Auth server listening on {self.url}")

    def wait(self, timeout: Optional[float] = None) -> Optional[str]:
        timeout = timeout if timeout is not None else config.auth.timeout_seconds
        self._received.wait(timeout)
        return self._key

    def stop(self) -> None:
        self._server.shutdown()
        if self._thread is not None:
            self._thread.join(timeout=5)


def authenticate_with_browser(
    on_ready: Optional[Callable[[str], None]] = None,
    validator: KeyValidator = validate_api_key,
    open_browser: Callable[[str], bool] = webbrowser.open,
    timeout: Optional[float] = None,
) -> str:
    """
    Capture a key through the local form.

    Args:
        on_ready: Called with the form URL before the browser opens
        validator: Live key check
        open_browser: Opens a URL (webbrowser.open by default)
        timeout: Seconds to wait for a valid key

    Returns:
        The validated key

    Raises:
        CredentialError: If no valid key arrives in time
    """
    server = AuthServer(validator=validator)
    server.start()
    try:
        if on_ready is not None:
            on_ready(server.url)
        if not open_browser(server.url):
            logger.warning(f"Could not open a browser; visit {server.url}")
        open_browser(config.auth.console_url)
        api_key = server.wait(timeout)
    finally:
        server.stop()

    if not api_key:
        raise CredentialError("Authentication timeout")
    return api_key


def ensure_authenticated(
    on_ready: Optional[Callable[[str], None]] = None,
    **kwargs,
) -> str:
    """
    Return a configured API key, capturing one in the browser if needed.

    Raises:
        CredentialError: If no key is configured and none was captured
    """
    existing = get_api_key()
    if existing:
        source = "environment" if os.getenv("ANTHROPIC_API_KEY") else "saved config"
        logger.debug(f"Anthropic API key found in {source}")
        return existing
    return authenticate_with_browser(on_ready=on_ready, **kwargs)
