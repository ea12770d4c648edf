from django.urls import path

from . import views

urlpatterns = [
    path("today/", views.revenue_today, name="revenue-today"),
    path("total/", views.revenue_total, name="revenue-total"),
    path("range/", views.revenue_range, name="revenue-range"),
    path("stats/", views.revenue_stats, name="revenue-stats"),
    path("categories/", views.revenue_by_category, name="revenue-categories"),
]
