"""
URL configuration for device endpoints.
"""

from django.urls import path

from api.v1.devices import views

urlpatterns = [
    path("bulk-renew", views.BulkRenewView.as_view(), name="bulk-renew"),
    path("co-term", views.CoTermView.as_view(), name="co-term"),
    path("<uuid:device_id>/grace-token", views.GraceTokenView.as_view(), name="grace-token"),
    path("", views.DeviceListView.as_view(), name="list-devices"),
]
