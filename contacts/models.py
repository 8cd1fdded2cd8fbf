from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class ContactMessage(models.Model):
    """Message laissé via le formulaire de contact"""

    name = models.CharField(max_length=150, verbose_name="Name")
    email = models.EmailField(verbose_name="Email")
    phone = models.CharField(max_length=30, blank=True)
    subject = models.CharField(max_length=200, blank=True)
    message = models.TextField(max_length=5000)
    read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"Message from {self.name} - {self.created_at:%Y-%m-%d}"

    def mark_read(self):
        self.read = True
        self.save(update_fields=['read', 'updated_at'])

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
            'subject': self.subject,
            'message': self.message,
            'read': self.read,
            'createdAt': self.created_at.isoformat(),
        }


class Reservation(models.Model):
    """Réservation de table"""

    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('confirmed', 'Confirmed'),
        ('seated', 'Seated'),
        ('completed', 'Completed'),
        ('cancelled', 'Cancelled'),
    ]

    name = models.CharField(max_length=150)
    email = models.EmailField()
    phone = models.CharField(max_length=30)
    date = models.DateField()
    time = models.TimeField()
    party_size = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(20)]
    )
    special_requests = models.TextField(blank=True)
    notes = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='confirmed')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['date', 'time']
        indexes = [
            models.Index(fields=['date', 'time']),
        ]

    def __str__(self):
        return f"{self.name} - {self.date} {self.time:%H:%M} ({self.party_size})"

    def save(self, *args, **kwargs):
        self.email = self.email.strip().lower()
        super().save(*args, **kwargs)

    def cancel(self):
        self.status = 'cancelled'
        self.save(update_fields=['status', 'updated_at'])

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
            'date': self.date.isoformat(),
            'time': self.time.strftime('%H:%M'),
            'partySize': self.party_size,
            'specialRequests': self.special_requests,
            'status': self.status,
            'createdAt': self.created_at.isoformat(),
        }
