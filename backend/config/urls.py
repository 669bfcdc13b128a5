"""
URL configuration for the tailoring shop backend.

Routes are mounted at the root without trailing slashes so the browser
dashboard can call `/customers`, `/orders/<id>` and friends directly.
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "Karanjkar Tailors Admin Panel"
admin.site.site_title = "Karanjkar Tailors Admin Portal"
admin.site.index_title = "Welcome to Karanjkar Tailors Admin Portal"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', include('backend.core.urls')),
    path('', include('backend.parties.urls')),
    path('', include('backend.tailoring.urls')),
    path('', include('backend.billing.urls')),
    path('', include('backend.reports.urls')),
]
