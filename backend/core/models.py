from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Shop principals allowed to sign in to the dashboard"""
    ROLE_CHOICES = [
        ('admin', 'Admin'),
        ('staff', 'Staff'),
    ]

    # Hashed credential lives in password_hash; the old plaintext column is kept
    # only until the account's first successful login.
    password = models.CharField('password', max_length=128, blank=True, db_column='password_hash')
    legacy_password = models.CharField(max_length=255, blank=True, null=True, db_column='password')
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default='admin')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'admin'

    def upgrade_legacy_password(self, raw_password):
        """Replace the plaintext password with a hash, one way and once."""
        self.set_password(raw_password)
        self.legacy_password = None
        self.save(update_fields=['password', 'legacy_password', 'updated_at'])
