"""
Tenant Service

Creates tenants at signup. Authentication itself lives outside this
application; only the credential hash is stored.
"""

import logging

from werkzeug.security import generate_password_hash, check_password_hash

from constants import VALID_BUSINESS_TYPES, MAX_NAME_LENGTH
from models import db, Tenant
from .errors import ValidationError, NotFoundError
from .unit_of_work import unit_of_work
from .validation import get_name

logger = logging.getLogger(__name__)


def create_tenant(name, credential, business_type='restaurant'):
    """
    Register a tenant.

    Args:
        name: display name ("Pizzaria do João")
        credential: raw password, stored as a Werkzeug hash
        business_type: pizza / hamburger / restaurant
    """
    name = get_name({'name': name}, 'name', MAX_NAME_LENGTH)
    if not credential or len(str(credential)) < 6:
        raise ValidationError('credential must be at least 6 characters', field='credential')
    business_type = (business_type or '').strip().lower()
    if business_type not in VALID_BUSINESS_TYPES:
        raise ValidationError(f'Invalid business type: {business_type}', field='businessType')

    with unit_of_work() as session:
        tenant = Tenant(
            name=name,
            credential_hash=generate_password_hash(str(credential)),
            business_type=business_type,
        )
        session.add(tenant)
        session.flush()
        tenant_id = tenant.id
    logger.info("Tenant %s created: %s (%s)", tenant_id, name, business_type)
    return tenant


def get_tenant(tenant_id):
    tenant = db.session.get(Tenant, tenant_id)
    if tenant is None:
        raise NotFoundError(f'Tenant {tenant_id} not found')
    return tenant


def verify_credential(tenant, credential):
    return check_password_hash(tenant.credential_hash, str(credential))
