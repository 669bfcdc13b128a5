"""Authentication backend that understands pre-hash admin records"""
import logging

from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend
from django.utils.crypto import constant_time_compare

logger = logging.getLogger(__name__)

UserModel = get_user_model()


class LegacyPasswordBackend(ModelBackend):
    """
    Verify against password_hash; fall back to the legacy plaintext column.

    A matching plaintext password is upgraded to a hash on the spot and the
    plaintext is cleared, so the next login takes the hash path.
    """

    def authenticate(self, request, username=None, password=None, **kwargs):
        if username is None:
            username = kwargs.get(UserModel.USERNAME_FIELD)
        if not username or password is None:
            return None

        try:
            user = UserModel._default_manager.get_by_natural_key(username)
        except UserModel.DoesNotExist:
            # Run the hasher once to reduce the timing difference between
            # existing and nonexistent users.
            UserModel().set_password(password)
            return None

        legacy_match = False
        if user.password:
            valid = user.check_password(password)
        elif user.legacy_password:
            valid = legacy_match = constant_time_compare(user.legacy_password, password)
        else:
            valid = False

        if valid and self.user_can_authenticate(user):
            if legacy_match:
                user.upgrade_legacy_password(password)
                logger.info(f"Upgraded legacy plaintext password to hash for user {user.username} (ID: {user.id})")
            return user
        return None
