import time
import uuid

from django.db import models
from django.utils import timezone


def generate_order_id():
    return f"ORD{int(time.time() * 1000)}{uuid.uuid4().hex[:4].upper()}"


class Order(models.Model):
    STATUS_PENDING = 'pending'
    STATUS_CONFIRMED = 'confirmed'
    STATUS_PREPARING = 'preparing'
    STATUS_READY = 'ready'
    STATUS_COMPLETED = 'completed'
    STATUS_CANCELLED = 'cancelled'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_CONFIRMED, 'Confirmed'),
        (STATUS_PREPARING, 'Preparing'),
        (STATUS_READY, 'Ready'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]

    DELIVERY = 'delivery'
    PICKUP = 'pickup'
    DELIVERY_METHODS = [
        (DELIVERY, 'Delivery'),
        (PICKUP, 'Pickup'),
    ]

    order_id = models.CharField(max_length=32, unique=True, default=generate_order_id, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)

    # Informations client
    name = models.CharField(max_length=150)
    email = models.EmailField()
    phone = models.CharField(max_length=30)
    address = models.TextField(blank=True, null=True)
    delivery_method = models.CharField(max_length=20, choices=DELIVERY_METHODS, default=DELIVERY)

    # Données du panier
    items = models.JSONField(default=list)
    subtotal = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    delivery_fee = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    total = models.DecimalField(max_digits=10, decimal_places=2, default=0)

    timeline = models.JSONField(default=list, blank=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['email', 'created_at']),
        ]

    def __str__(self):
        return f"Order {self.order_id} - {self.status}"

    def add_timeline_entry(self, message):
        self.timeline.append({'timestamp': timezone.now().isoformat(), 'message': message})

    def save(self, *args, **kwargs):
        if self.email:
            self.email = self.email.strip().lower()
        if not self.timeline:
            self.add_timeline_entry('Order placed successfully')
        super().save(*args, **kwargs)

    def to_dict(self):
        return {
            'orderId': self.order_id,
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
            'address': self.address,
            'deliveryMethod': self.delivery_method,
            'items': self.items,
            'subtotal': float(self.subtotal),
            'deliveryFee': float(self.delivery_fee),
            'total': float(self.total),
            'status': self.status,
            'timeline': self.timeline,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }
