from django.urls import path

from . import views

app_name = "patients"

urlpatterns = [
    path("", views.dashboard, name="dashboard"),
    path("register/", views.register, name="register"),
    path("appointments/", views.my_appointments, name="appointments"),
]
