from django.contrib import admin
from .models import Member


@admin.register(Member)
class MemberAdmin(admin.ModelAdmin):
    list_display = ['display_name', 'role', 'is_active', 'created_at']
    list_filter = ['role', 'is_active']
    search_fields = ['display_name']
    readonly_fields = ['id', 'password', 'last_login', 'created_at']
    fields = ['id', 'display_name', 'role', 'is_active', 'is_superuser',
              'password', 'last_login', 'created_at']
