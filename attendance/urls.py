from django.urls import path
from . import views

app_name = "attendance"

urlpatterns = [
    path("beadle/", views.submit_slip, name="submit"),
    path("beadle/my-submissions/", views.my_submissions, name="my_submissions"),
    path("admin-tools/slips/", views.slip_dashboard, name="dashboard"),
    path("supervisor/reports/", views.supervisor_reports, name="supervisor_reports"),
]
