from django.urls import path
from . import views

app_name = "supervision"

urlpatterns = [
    path("supervisor/dashboard/", views.dashboard, name="dashboard"),
    path("supervisor/members/bulk/", views.bulk_update, name="bulk_update"),
    path("supervisor/members/<int:member_id>/beadle/", views.toggle_beadle, name="toggle_beadle"),
    path("supervisor/members/<int:member_id>/form-class/", views.update_form_class, name="update_form_class"),
    path("tech-team/role-management/", views.role_management, name="role_management"),
    path("api/users/list/", views.api_users_list, name="api_users_list"),
    path("api/users/update-roles/", views.api_update_roles, name="api_update_roles"),
]
