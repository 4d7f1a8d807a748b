from django.urls import path

from . import views

app_name = "accounts"

urlpatterns = [
    path("", views.home, name="home"),
    path("privacy/", views.privacy, name="privacy"),
    path("login/", views.login_view, name="login"),
    path("logout/", views.logout_view, name="logout"),
]
