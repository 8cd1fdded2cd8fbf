from django.contrib import admin

from .models import Order


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ('order_id', 'name', 'email', 'status', 'delivery_method', 'total', 'created_at')
    readonly_fields = ('order_id', 'created_at', 'updated_at')
    search_fields = ('order_id', 'email', 'name')
    list_filter = ('status', 'delivery_method')
