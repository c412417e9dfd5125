"""
Lambda@Edge origin-request handler for single page apps served from S3.

Paths without a file extension are routes of the app, not objects, so they
are rewritten to the index.html of their directory.
"""

import posixpath
from typing import Any, Dict

# Lambda@Edge functions cannot have environment variables; keep this module dependency free


def rewrite_uri(uri: str) -> str:
    """Map a request path onto the S3 object that serves it.

    >>> rewrite_uri("/collections/abc")
    '/collections/abc/index.html'
    >>> rewrite_uri("/about/")
    '/about/index.html'
    >>> rewrite_uri("/static/app.js")
    '/static/app.js'
    """
    if uri.endswith("/"):
        return f"{uri}index.html"
    if "." not in posixpath.basename(uri):
        return f"{uri}/index.html"
    return uri


def handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Rewrite the origin request uri and pass the request on."""
    request: Dict[str, Any] = event["Records"][0]["cf"]["request"]
    request["uri"] = rewrite_uri(request.get("uri") or "/")
    return request
