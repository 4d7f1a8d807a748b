from django.urls import path

from . import views

app_name = "appointments"

urlpatterns = [
    path("", views.appointment_list, name="list"),
    path("manage/", views.manage_appointment, name="manage"),
    path("save/", views.save_appointment_view, name="save"),
    path("edit/", views.edit_appointment, name="edit"),
    path("edit/<int:appointment_id>/", views.edit_appointment, name="edit_by_id"),
]
