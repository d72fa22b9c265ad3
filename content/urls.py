from django.urls import path
from . import views

app_name = "content"

urlpatterns = [
    path("announcements/", views.announcements, name="announcements"),
    path("announcements/new/", views.create_announcement, name="create_announcement"),
    path("announcements/<int:pk>/delete/", views.delete_announcement, name="delete_announcement"),
]
