from django.urls import path
from . import views

app_name = "accounts"

urlpatterns = [
    path("profile/", views.profile, name="profile"),
    path("profile/password/", views.change_password, name="change_password"),
    path("api/profile/", views.api_profile, name="api_profile"),
    path("api/profile/update/", views.api_profile_update, name="api_profile_update"),
    path("api/profile/change-password/", views.api_change_password, name="api_change_password"),
]
