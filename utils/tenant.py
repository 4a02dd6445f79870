"""
Tenant Resolution

The session layer in front of the API tells us which tenant a request
belongs to. This module only reads that identifier; it never
authenticates. Every service call receives the tenant id explicitly.
"""

from flask import current_app, request

from services.errors import ValidationError


def resolve_tenant_id():
    """
    Read the tenant id from the configured request header.

    Raises:
        ValidationError: header missing or not a positive integer
    """
    header = current_app.config.get('TENANT_HEADER', 'X-Tenant-ID')
    raw = request.headers.get(header, '').strip()
    if not raw:
        raise ValidationError(f'{header} header is required', field=header)
    try:
        tenant_id = int(raw)
    except ValueError:
        raise ValidationError(f'{header} must be an integer', field=header)
    if tenant_id < 1:
        raise ValidationError(f'{header} must be positive', field=header)
    return tenant_id
