"""
Input Sanitization Module

Cleans user input (ingredient and product names, descriptions, image
links) before it is stored. Values are stored as plain text; escaping
is left to whatever renders them.
"""

import re
from urllib.parse import urlparse

# Control characters except tab, newline and carriage return
CONTROL_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]')


def sanitize_text(text):
    """
    Clean free text: strip surrounding whitespace and control characters.

    Line breaks are kept. Length limits are checked by the caller on the
    returned value.

    Args:
        text: The text to sanitize (can be None)

    Returns:
        Cleaned string, empty string for None
    """
    if text is None:
        return ''

    if not isinstance(text, str):
        text = str(text)

    return CONTROL_CHARS.sub('', text).strip()


def sanitize_url(url):
    """
    Sanitize a URL by rejecting dangerous schemes.

    Prevents javascript:, data:, vbscript:, and other dangerous URL schemes
    that could execute code when used in href or src attributes.

    Args:
        url: The URL to validate (can be None)

    Returns:
        The URL if safe, empty string if unsafe or invalid
    """
    if not url:
        return ''

    if not isinstance(url, str):
        return ''

    url = url.strip()

    dangerous_schemes = {
        'javascript', 'data', 'vbscript', 'file',
        'blob', 'about', 'chrome', 'moz-extension'
    }

    try:
        parsed = urlparse(url)
    except ValueError:
        return ''

    # Only allow http and https
    scheme = parsed.scheme.lower()
    if scheme and scheme not in ('http', 'https'):
        return ''

    url_lower = url.lower()
    for dangerous in dangerous_schemes:
        if dangerous + ':' in url_lower:
            return ''
        # URL-encoded variants
        if dangerous.replace('a', '%61') in url_lower:
            return ''

    return url


def sanitize_name(name):
    """
    Clean an ingredient or product name.

    Removes control characters and collapses runs of whitespace into a
    single space. "Molho & Cia" stays "Molho & Cia".

    Args:
        name: The name to sanitize

    Returns:
        Cleaned name, empty string if nothing is left
    """
    if not name:
        return ''

    if not isinstance(name, str):
        name = str(name)

    name = re.sub(r'[\x00-\x1f\x7f-\x9f]', ' ', name)

    # Collapse multiple spaces
    return re.sub(r'\s+', ' ', name).strip()
