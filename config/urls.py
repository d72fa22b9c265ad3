from django.contrib import admin
from django.urls import include, path
from accounts import views as accounts_views

urlpatterns = [
    path("admin/", admin.site.urls),
    path("django-rq/", include("django_rq.urls")),
    path("webhooks/email/", include("anymail.urls")),
    path("accounts/", include("allauth.urls")),
    # app URLs
    path("", accounts_views.home, name="home"),
    path("", include("accounts.urls")),
    path("", include("attendance.urls")),
    path("", include("supervision.urls")),
    path("", include("mailer.urls")),
    path("", include("content.urls")),
]
