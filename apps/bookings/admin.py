from django.contrib import admin
from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = [
        'short_id', 'user_name', 'host_name', 'date', 'time', 'status', 'user_phone', 'created_at',
    ]
    list_filter = ['status', 'date']
    search_fields = ['user_name', 'host_name', 'title', 'user_phone']
    readonly_fields = ['id', 'created_at', 'updated_at']
    date_hierarchy = 'date'
    raw_id_fields = ['user', 'host']
    fieldsets = (
        ('Booking', {'fields': ('id', 'user', 'user_name', 'user_phone', 'title')}),
        ('Schedule', {'fields': ('date', 'time', 'location', 'host', 'host_name')}),
        ('Status', {'fields': ('status', 'notes')}),
        ('Audit', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )

    def short_id(self, obj):
        return obj.id_short
    short_id.short_description = 'ID'
