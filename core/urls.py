from rest_framework.routers import DefaultRouter

from . import views

# ==============================================================================
# DRF ROUTER
# ==============================================================================
router = DefaultRouter(trailing_slash=False)
router.register(r'reservations', views.ReservationViewSet, basename='reservation')
router.register(r'tables', views.TableViewSet, basename='table')

# ==============================================================================
# URL PATTERNS
# ==============================================================================
app_name = 'core'

urlpatterns = router.urls
