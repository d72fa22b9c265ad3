from django.urls import path
from . import views

app_name = "mailer"

urlpatterns = [
    path("admin-tools/email-reports/", views.email_reports, name="email_reports"),
    path("admin-tools/email-reports/send/", views.send_reports, name="send_reports"),
    path("api/email-reports/", views.api_email_reports, name="api_email_reports"),
]
