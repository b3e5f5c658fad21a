# restaurant_reservations/wsgi.py

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "restaurant_reservations.settings")

application = get_wsgi_application()
