"""Account bootstrap helpers"""
import logging

from django.conf import settings
from django.contrib.auth import get_user_model

logger = logging.getLogger(__name__)

User = get_user_model()


def ensure_default_admin(username=None, password=None):
    """
    Seed the default admin account if it does not exist yet.

    Idempotent: an existing account is returned untouched, including one that
    still carries a legacy plaintext password.

    Returns:
        tuple: (user, created)
    """
    username = username or settings.DEFAULT_ADMIN_USERNAME
    password = password or settings.DEFAULT_ADMIN_PASSWORD

    user = User.objects.filter(username=username).first()
    if user:
        return user, False

    user = User.objects.create_user(
        username=username,
        password=password,
        role='admin',
        is_staff=True,
        is_superuser=True,
    )
    logger.info(f"Seeded default admin user: {username}")
    return user, True


def default_admin_ready():
    """True when the credential table is reachable and the default admin exists"""
    return User.objects.filter(username=settings.DEFAULT_ADMIN_USERNAME).exists()
