from django.contrib import admin
from .models import DailySlotSet


@admin.register(DailySlotSet)
class DailySlotSetAdmin(admin.ModelAdmin):
    list_display = ['date', 'slot_count']
    date_hierarchy = 'date'
    readonly_fields = ['id']

    def slot_count(self, obj):
        return len(obj.slots or [])
    slot_count.short_description = 'Slots'
