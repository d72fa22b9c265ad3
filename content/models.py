from django.db import models


class Announcement(models.Model):
    PRIORITY_CHOICES = [
        ("low", "low"),
        ("medium", "medium"),
        ("high", "high"),
    ]

    title = models.CharField(max_length=200)
    priority = models.CharField(max_length=16, choices=PRIORITY_CHOICES, default="medium")
    content = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)
    created_by = models.ForeignKey(
        "accounts.User",
        related_name="announcements_created",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
    )

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return self.title
