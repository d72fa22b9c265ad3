from django.contrib.auth.models import AbstractUser
from django.contrib.auth.base_user import BaseUserManager
from django.db import models
from django.utils import timezone


class FormLevel(models.TextChoices):
    FIRST = "1st Form", "1st Form"
    SECOND = "2nd Form", "2nd Form"
    THIRD = "3rd Form", "3rd Form"
    FOURTH = "4th Form", "4th Form"
    FIFTH = "5th Form", "5th Form"
    UPPER_SIXTH = "6A", "6A (Upper 6th)"
    LOWER_SIXTH = "6B", "6B (Lower 6th)"

    @property
    def number(self):
        """Short label used in class names and supervisor scopes: "1".."6", "6A"."""
        return _FORM_NUMBERS[self]

    @classmethod
    def parse(cls, value):
        """
        Map a grade label to a FormLevel, or None when it is not one.
        Accepts the canonical labels plus the short forms stored by older
        submissions ("5th", "5", "6a").
        """
        if isinstance(value, cls):
            return value
        if not value or not isinstance(value, str):
            return None
        key = value.strip().upper()
        if key.endswith(" FORM"):
            key = key[: -len(" FORM")].strip()
        return _FORM_ALIASES.get(key)

    @classmethod
    def from_form_class(cls, form_class):
        """Form level of a class name such as "5-2" or "6A-1"."""
        if not form_class:
            return None
        prefix = form_class.split("-", 1)[0].strip().upper()
        return _FORM_ALIASES.get(prefix)


_FORM_NUMBERS = {
    FormLevel.FIRST: "1",
    FormLevel.SECOND: "2",
    FormLevel.THIRD: "3",
    FormLevel.FOURTH: "4",
    FormLevel.FIFTH: "5",
    FormLevel.UPPER_SIXTH: "6A",
    FormLevel.LOWER_SIXTH: "6",
}

_FORM_ALIASES = {
    "1": FormLevel.FIRST,
    "1ST": FormLevel.FIRST,
    "2": FormLevel.SECOND,
    "2ND": FormLevel.SECOND,
    "3": FormLevel.THIRD,
    "3RD": FormLevel.THIRD,
    "4": FormLevel.FOURTH,
    "4TH": FormLevel.FOURTH,
    "5": FormLevel.FIFTH,
    "5TH": FormLevel.FIFTH,
    "6A": FormLevel.UPPER_SIXTH,
    "6B": FormLevel.LOWER_SIXTH,
    "6": FormLevel.LOWER_SIXTH,
}


class UserManager(BaseUserManager):
    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError("The Email must be set")
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email=None, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email=None, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")
        return self._create_user(email, password, **extra_fields)


class User(AbstractUser):
    username = None
    first_name = None
    last_name = None
    email = models.EmailField(unique=True)
    full_name = models.CharField(max_length=128, blank=True, default="")
    form_class = models.CharField(max_length=16, blank=True, null=True)
    # Decoded from form_class on save so scope filters never parse strings.
    form_level = models.CharField(
        max_length=16, choices=FormLevel.choices, blank=True, default=""
    )
    roles = models.ManyToManyField(
        "accounts.Role",
        through="accounts.MemberRole",
        through_fields=("member", "role"),
        related_name="members",
        blank=True,
    )
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)
    EMAIL_FIELD = "email"
    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []
    objects = UserManager()

    class Meta:
        ordering = ["full_name", "email"]

    def __str__(self):
        return self.full_name or self.email

    def save(self, *args, **kwargs):
        self.form_class = (self.form_class or "").strip().upper() or None
        level = FormLevel.from_form_class(self.form_class)
        self.form_level = level.value if level else ""
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "form_class" in update_fields:
            kwargs["update_fields"] = set(update_fields) | {"form_level"}
        super().save(*args, **kwargs)

    def get_full_name(self):
        return self.full_name or self.email

    def get_short_name(self):
        return (self.full_name.split(" ", 1)[0] if self.full_name else "") or self.email


class Role(models.Model):
    TYPE_CHOICES = [
        ("primary", "primary"),
        ("sub", "sub"),
    ]
    role_name = models.SlugField(max_length=64, unique=True)
    display_name = models.CharField(max_length=128)
    role_type = models.CharField(max_length=16, choices=TYPE_CHOICES, default="primary")
    permission_level = models.PositiveSmallIntegerField(default=0)

    class Meta:
        ordering = ["permission_level", "role_name"]

    def __str__(self):
        return self.display_name or self.role_name


class MemberRole(models.Model):
    member = models.ForeignKey(User, on_delete=models.CASCADE, related_name="role_links")
    role = models.ForeignKey(Role, on_delete=models.CASCADE, related_name="member_links")
    assigned_by = models.ForeignKey(
        User,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="roles_assigned",
    )
    assigned_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = [("member", "role")]

    def __str__(self):
        return f"{self.member} - {self.role.role_name}"
