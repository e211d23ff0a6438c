"""Informational page served when a request carries no target URL."""

from html import escape

_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>PROXX Service Root</title>
    <style>
      body {{ background-color: black; font-family: sans-serif; color: white; display: flex; align-items: center; justify-content: center; height: 100vh; margin: 0; }}
      .card {{ background-color: #1a1a1a; padding: 2rem; border-radius: 0.5rem; border: 1px solid white; text-align: center; }}
      a {{ color: #9cf; }}
    </style>
</head>
<body>
    <div class="card">
        <h1>PROXX Service Root</h1>
        <p>This path is for proxy routing only. When accessed directly, it cannot parse a URL.</p>
        {footer}
    </div>
</body>
</html>
"""

_HOME_LINK = '<p><a href="{url}">Return home</a> and enter your target site there.</p>'
_NO_HOME = "<p>Please use the main application URL to enter your target site.</p>"


def render_fallback_page(home_url: str | None = None) -> str:
    """Render the fallback document, with a home link when ``home_url`` is known."""
    if home_url:
        footer = _HOME_LINK.format(url=escape(home_url, quote=True))
    else:
        footer = _NO_HOME
    return _PAGE.format(footer=footer)
