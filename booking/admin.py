from django.contrib import admin
from .models import Service, ClientProfile, Staff, Booking, MeetingAccess

@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "price", "duration_minutes", "active")
    list_filter = ("active",)
    search_fields = ("name",)
    list_editable = ("price", "duration_minutes", "active")

@admin.register(ClientProfile)
class ClientProfileAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "email", "appointment_limit")

@admin.register(Staff)
class StaffAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "email", "specialization", "timezone")

@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    # Read-only times: rescheduling must go through BookingManager's overlap check.
    list_display = ("id", "client", "service", "staff", "start_time", "end_time", "status")
    list_filter = ("status", "service", "staff")
    search_fields = ("client__name", "service__name")
    readonly_fields = ("start_time", "end_time", "status", "cancellation_time")

@admin.register(MeetingAccess)
class MeetingAccessAdmin(admin.ModelAdmin):
    list_display = ("booking", "link", "access_code", "created_at")
