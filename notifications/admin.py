from django.contrib import admin
from notifications.models import Notification

@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ('recipient_email', 'kind', 'booking', 'status', 'created_at')
    list_filter = ('kind', 'status', 'created_at')
    search_fields = ('recipient_email', 'subject', 'message')
