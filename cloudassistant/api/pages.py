"""HTML returned to the sign-in popup when the callback succeeds."""

from __future__ import annotations

import html
import json

AUTH_MESSAGE_TYPE = "cloudassistant:gauth"
CLOSE_DELAY_MS = 1200


def _script_json(value: object) -> str:
    # Keep "</script>" and friends from terminating the inline script.
    return (
        json.dumps(value)
        .replace("<", "\\u003c")
        .replace(">", "\\u003e")
        .replace("&", "\\u0026")
    )


def render_auth_complete_page(email: str, target_origin: str = "*") -> str:
    """Notify the opener window of the signed-in email, then close the popup."""
    message = {"type": AUTH_MESSAGE_TYPE, "email": email}
    return f"""<!doctype html>
<html>
<head><meta charset="utf-8"><title>Auth complete</title></head>
<body>
<p>Authentication successful for {html.escape(email)}. You can close this window.</p>
<script>
  try {{
    window.opener.postMessage({_script_json(message)}, {_script_json(target_origin)});
  }} catch (e) {{}}
  setTimeout(function () {{ window.close(); }}, {CLOSE_DELAY_MS});
</script>
</body>
</html>
"""


__all__ = ["AUTH_MESSAGE_TYPE", "render_auth_complete_page"]
