from django.urls import path

from . import views

urlpatterns = [
    path("history/", views.call_history, name="call-history"),
    path("start/", views.start_call, name="call-start"),
    path("<int:call_id>/end/", views.end_call, name="call-end"),
]
