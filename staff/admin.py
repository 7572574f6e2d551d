# staff/admin.py
from django.contrib import admin
from .models import WorkingWindow

@admin.register(WorkingWindow)
class WorkingWindowAdmin(admin.ModelAdmin):
    list_display = ("staff", "day_of_week", "start_time", "end_time")
    list_filter = ("staff", "day_of_week")
    search_fields = ("staff__name",)
