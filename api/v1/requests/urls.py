"""
URL configuration for renewal request endpoints.
"""

from django.urls import path

from api.v1.requests import views

urlpatterns = [
    path("", views.RenewalRequestListCreateView.as_view(), name="renewal-requests"),
    path("<uuid:request_id>/quote", views.QuoteView.as_view(), name="renewal-request-quote"),
    path(
        "<uuid:request_id>/approve",
        views.ApproveRenewalRequestView.as_view(),
        name="renewal-request-approve",
    ),
    path(
        "<uuid:request_id>/reject",
        views.RejectRenewalRequestView.as_view(),
        name="renewal-request-reject",
    ),
]
