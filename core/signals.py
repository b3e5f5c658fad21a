import logging
from django.db.models.signals import pre_save, post_save
from django.dispatch import receiver

from .models import Reservation

# -----------------------------------------------------------------------------
# Logger
# -----------------------------------------------------------------------------
audit_logger = logging.getLogger("audit")

# -----------------------------------------------------------------------------
# Store previous Reservation status
# -----------------------------------------------------------------------------
@receiver(pre_save, sender=Reservation)
def store_previous_reservation_status(sender, instance, **kwargs):
    instance._previous_status = None
    if instance.pk:
        instance._previous_status = (
            Reservation.objects.filter(pk=instance.pk).values_list("status", flat=True).first()
        )

# -----------------------------------------------------------------------------
# Audit trail
# -----------------------------------------------------------------------------
@receiver(post_save, sender=Reservation)
def audit_reservation_status(sender, instance, created, **kwargs):
    if created:
        audit_logger.info(
            f"Reservation {instance.pk} booked: {instance.last_name}, party of {instance.people}"
        )
        return

    previous_status = getattr(instance, "_previous_status", None)
    if previous_status == instance.status:
        return

    audit_logger.info(f"Reservation {instance.pk} status changed: {previous_status} -> {instance.status}")
