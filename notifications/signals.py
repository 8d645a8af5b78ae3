import logging

from django.db.models.signals import pre_save, post_save
from django.dispatch import receiver

from inventory.models import Product
from reports.exports import money
from sales.signals import sale_completed
from .models import Notification
from .utils import notify_admins

logger = logging.getLogger(__name__)


@receiver(pre_save, sender=Product)
def remember_previous_quantity(sender, instance, **kwargs):
    if instance.pk is None:
        instance._previous_quantity = None
        return
    instance._previous_quantity = (
        Product.objects.filter(pk=instance.pk).values_list('quantity', flat=True).first()
    )


@receiver(post_save, sender=Product)
def alert_low_stock(sender, instance, created, **kwargs):
    """Fires once, when the quantity drops from above the threshold to at or below it"""
    previous = getattr(instance, '_previous_quantity', None)
    if created or previous is None:
        return

    if previous > instance.min_threshold >= instance.quantity:
        if instance.quantity == 0:
            message = f"{instance.name} is out of stock."
        else:
            message = (
                f"{instance.name} is down to {instance.quantity} unit(s) "
                f"(threshold {instance.min_threshold})."
            )
        notify_admins('Low stock', message, Notification.TYPE_LOW_STOCK)
        logger.info(f"Low stock alert for {instance.name} ({instance.quantity})")


@receiver(sale_completed)
def announce_sale(sender, sale, **kwargs):
    notify_admins(
        'New sale',
        f"{sale.seller_name} completed sale #{sale.transaction_number} "
        f"for {money(sale.total_amount)}.",
        Notification.TYPE_SALE,
        exclude=sale.seller,
    )
