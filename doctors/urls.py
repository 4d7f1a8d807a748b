from django.urls import path

from . import views

app_name = "doctors"

urlpatterns = [
    path("", views.dashboard, name="dashboard"),
    path("register/", views.register, name="register"),
    path("appointments/", views.appointments_list, name="appointments"),
]
