from django.contrib import admin
from django.http import JsonResponse
from django.urls import include, path
from django.utils import timezone


def health_check(request):
    return JsonResponse({"status": "healthy", "timestamp": timezone.now().isoformat()})


urlpatterns = [
    path("admin/", admin.site.urls),
    path("health", health_check, name="health"),
    path("", include("core.urls")),
]
