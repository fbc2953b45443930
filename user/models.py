from django.db import models
from django.contrib.auth.models import User


class Role(models.TextChoices):
    READ_ONLY = 'READ_ONLY', 'Read only'
    EDITOR = 'EDITOR', 'Editor'


class UserProfile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='profile')
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.EDITOR)
    # sha256 hex digest of the one-time code, never the code itself
    password_reset_otp = models.CharField(max_length=64, blank=True, null=True)
    password_reset_expires = models.DateTimeField(blank=True, null=True)

    def __str__(self):
        return f"{self.user.email} ({self.role})"
