from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Category(models.Model):
    id = models.AutoField(primary_key=True)
    name = models.CharField(max_length=120, unique=True)
    order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["order", "name"]
        verbose_name_plural = "categories"

    def __str__(self): return self.name


class MenuItem(models.Model):
    id = models.AutoField(primary_key=True)
    name = models.CharField(max_length=255)
    category = models.ForeignKey(Category, related_name="items", on_delete=models.PROTECT)
    price = models.DecimalField(max_digits=8, decimal_places=2, validators=[MinValueValidator(0)])
    description_en = models.TextField(blank=True)
    description_th = models.TextField(blank=True)
    vegetarian = models.BooleanField(default=False)
    spicy_level = models.PositiveSmallIntegerField(default=0, validators=[MaxValueValidator(5)])
    image = models.CharField(max_length=255, blank=True)
    available = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["category__order", "name"]

    def __str__(self): return f"{self.name} ({self.price})"

    def to_dict(self):
        return {
            'id': str(self.id),
            'name': self.name,
            'category': self.category.name,
            'price': float(self.price),
            'description_en': self.description_en,
            'description_th': self.description_th,
            'vegetarian': self.vegetarian,
            'spicyLevel': self.spicy_level,
            'image': self.image,
            'available': self.available,
        }


class GalleryImage(models.Model):
    file = models.CharField(max_length=255)
    caption = models.CharField(max_length=255, blank=True)
    order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["order", "id"]

    def __str__(self): return self.caption or self.file

    def to_dict(self):
        return {'id': self.id, 'file': self.file, 'caption': self.caption}


class StaffMember(models.Model):
    """Membre de l'équipe affiché sur la page À propos"""

    name = models.CharField(max_length=150)
    role = models.CharField(max_length=150)
    photo = models.CharField(max_length=255, blank=True)
    bio_en = models.TextField(blank=True)
    bio_th = models.TextField(blank=True)
    order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["order", "name"]

    def __str__(self): return f"{self.name} ({self.role})"

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'role': self.role,
            'photo': self.photo,
            'bio_en': self.bio_en,
            'bio_th': self.bio_th,
        }
