# Utility modules for the stock app
from .sanitizer import sanitize_text, sanitize_url, sanitize_name
