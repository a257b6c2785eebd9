"""
URL configuration for dashboard endpoints.
"""

from django.urls import path

from api.v1.dashboard import views

urlpatterns = [
    path("stats", views.DashboardStatsView.as_view(), name="dashboard-stats"),
    path("reseller-clients", views.ResellerClientsView.as_view(), name="reseller-clients"),
]
