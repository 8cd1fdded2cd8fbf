from django.contrib import admin

from .models import Category, GalleryImage, MenuItem, StaffMember


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ('name', 'order')


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    list_display = ('name', 'category', 'price', 'vegetarian', 'spicy_level', 'available', 'updated_at')
    search_fields = ('name', 'description_en')
    list_filter = ('category', 'vegetarian', 'available')


@admin.register(GalleryImage)
class GalleryImageAdmin(admin.ModelAdmin):
    list_display = ('file', 'caption', 'order')


@admin.register(StaffMember)
class StaffMemberAdmin(admin.ModelAdmin):
    list_display = ('name', 'role', 'order')
