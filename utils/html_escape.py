"""
HTML Escaping Utilities for the Point-of-Sale Receipt

Prevents HTML injection when catalog titles, business details or customer
data are embedded in the receipt markup handed to the host for display and
printing.

Security Note:
- ALWAYS use safe_html() for catalog and customer data (titles, names, addresses)
- NEVER escape localized/static text twice or pre-formatted HTML
- Escapes: < > & " ' to prevent tag injection and attribute breakout
"""

import html
from typing import Optional


def safe_html(text: Optional[str]) -> str:
    """
    Escapes HTML special characters in catalog- or customer-provided text.

    Args:
        text: Product title, category, business name, etc.

    Returns:
        HTML-escaped string safe to embed in HTML

    Examples:
        >>> safe_html("Tea</div><script>alert(1)</script>")
        "Tea&lt;/div&gt;&lt;script&gt;alert(1)&lt;/script&gt;"

        >>> safe_html(None)
        ""
    """
    if text is None:
        return ""
    return html.escape(str(text), quote=True)


def safe_url(url: Optional[str]) -> str:
    """
    Sanitizes URLs before they are handed to the host to open.

    Basic validation to prevent javascript: and data: URI injection through a
    misconfigured business phone or custom link.

    Args:
        url: Outbound link

    Returns:
        The URL unchanged, or empty string if the protocol is not allowed

    Examples:
        >>> safe_url("https://wa.me/919134567890?text=Hi")
        "https://wa.me/919134567890?text=Hi"

        >>> safe_url("javascript:alert(1)")
        ""
    """
    if not url:
        return ""

    url_str = str(url).strip()

    # Only allow safe protocols
    safe_protocols = ["http://", "https://", "whatsapp://"]
    if not any(url_str.startswith(proto) for proto in safe_protocols):
        return ""

    return url_str
