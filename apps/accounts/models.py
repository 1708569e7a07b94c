from datetime import timedelta

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
from django.utils import timezone
import uuid

from apps.core.tokens import TokenListMixin


PASSWORD_MAX_AGE = timedelta(days=365)
POWER_USER_STREAK = 30


class UserRole(models.TextChoices):
    OWNER = 'owner', 'Owner'
    ADMIN = 'admin', 'Admin'
    GROOMER = 'groomer', 'Groomer'
    RECEPTIONIST = 'receptionist', 'Receptionist'
    STAFF = 'staff', 'Staff'
    CUSTOM = 'custom', 'Custom'


class UserBadge(models.TextChoices):
    MFA = 'mfa', 'MFA Enabled'
    TRUSTED = 'trusted', 'Trusted'
    ONBOARDING = 'onboarding', 'Onboarding'
    COMPLIANCE = 'compliance', 'Compliance'
    SUSPENDED = 'suspended', 'Suspended'
    ARCHIVED = 'archived', 'Archived'
    POWER_USER = 'power_user', 'Power User'
    MULTI_BUSINESS = 'multi_business', 'Multi-Business'
    RISK = 'risk', 'Risk'


class UserManager(BaseUserManager):
    """Custom user manager for email-based authentication."""

    @classmethod
    def normalize_email(cls, email):
        """Lower-case the whole address. Stored emails are always lower case."""
        return super().normalize_email(email).lower()

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('Email is required')

        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('verified', True)
        extra_fields.setdefault('role', UserRole.OWNER)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True')

        return self.create_user(email, password, **extra_fields)


class User(TokenListMixin, AbstractBaseUser, PermissionsMixin):
    """Staff account of the grooming business, authenticated by email."""

    token_choices = UserBadge

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, max_length=255, db_index=True)
    display_name = models.CharField(max_length=100, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    role = models.CharField(max_length=20, choices=UserRole.choices, default=UserRole.STAFF)

    # Account state
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)
    is_suspended = models.BooleanField(default=False)
    is_archived = models.BooleanField(default=False)

    # Security & compliance
    verified = models.BooleanField(default=False)
    mfa_enabled = models.BooleanField(default=False)
    password_last_changed = models.DateTimeField(null=True, blank=True)
    compliance_accepted_at = models.DateTimeField(null=True, blank=True)

    # Engagement
    login_streak = models.PositiveIntegerField(default=0)
    badge_tokens = models.JSONField(default=list, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    last_login = models.DateTimeField(null=True, blank=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'users'
        indexes = [
            models.Index(fields=['email'], name='users_email_idx'),
            models.Index(fields=['role'], name='users_role_idx'),
            models.Index(fields=['created_at'], name='users_created_at_idx'),
        ]

    def __str__(self):
        return self.email

    def get_display_name(self):
        """Return display name or email prefix."""
        return self.display_name or self.email.split('@')[0]

    @property
    def is_enabled(self) -> bool:
        return self.is_active and not self.is_suspended and not self.is_archived

    @property
    def is_trusted(self) -> bool:
        return UserBadge.TRUSTED in self.badge_tokens

    @property
    def is_power_user(self) -> bool:
        return UserBadge.POWER_USER in self.badge_tokens or self.login_streak > POWER_USER_STREAK

    @property
    def risk_score(self) -> int:
        """Simple additive account risk score; higher is riskier."""
        score = 0
        if not self.mfa_enabled:
            score += 1
        if not self.verified:
            score += 1
        if self.is_suspended or self.is_archived:
            score += 2
        if self.password_last_changed and timezone.now() - self.password_last_changed > PASSWORD_MAX_AGE:
            score += 1
        if UserBadge.RISK in self.badge_tokens:
            score += 1
        return score

    def set_password(self, raw_password):
        super().set_password(raw_password)
        self.password_last_changed = timezone.now()
