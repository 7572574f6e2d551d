from rest_framework import serializers
from django.utils import timezone

from .models import BookingStatus, ClientProfile, Service, Staff, Booking, MeetingAccess


class ClientProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = ClientProfile
        fields = ["id", "name", "email", "phone", "appointment_limit"]
        read_only_fields = ["appointment_limit"]


class ServiceSerializer(serializers.ModelSerializer):
    class Meta:
        model = Service
        fields = ["id", "name", "description", "duration_minutes", "price", "active"]


class StaffSerializer(serializers.ModelSerializer):
    class Meta:
        model = Staff
        fields = ["id", "name", "email", "specialization", "timezone"]


class MeetingAccessSerializer(serializers.ModelSerializer):
    class Meta:
        model = MeetingAccess
        fields = ["link", "access_code"]


class BookingSerializer(serializers.ModelSerializer):
    client = serializers.PrimaryKeyRelatedField(queryset=ClientProfile.objects.all())
    service = serializers.PrimaryKeyRelatedField(queryset=Service.objects.all())
    staff = serializers.PrimaryKeyRelatedField(queryset=Staff.objects.all())
    end_time = serializers.DateTimeField(required=False)
    meeting = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = [
            "id",
            "client",
            "service",
            "staff",
            "title",
            "start_time",
            "end_time",
            "created_at",
            "notes",
            "status",
            "cancellation_note",
            "meeting",
        ]
        read_only_fields = ["created_at", "status", "cancellation_note"]

    def get_meeting(self, obj):
        if obj.status != BookingStatus.CONFIRMED:
            return None
        meeting = getattr(obj, "meeting", None)
        return MeetingAccessSerializer(meeting).data if meeting else None

    def validate(self, attrs):
        # prevent past dates
        start_time = attrs.get("start_time")
        if start_time and start_time <= timezone.now():
            raise serializers.ValidationError("Start time must be in the future.")
        end_time = attrs.get("end_time")
        if start_time and end_time and end_time <= start_time:
            raise serializers.ValidationError("End time must be after start time.")
        service = attrs.get("service")
        if service is not None and not service.active:
            raise serializers.ValidationError("This service is not currently available.")
        return attrs


class BookingIntervalSerializer(serializers.Serializer):
    """Payload for rescheduling/reassigning; every field optional."""
    staff = serializers.PrimaryKeyRelatedField(queryset=Staff.objects.all(), required=False)
    start_time = serializers.DateTimeField(required=False)
    end_time = serializers.DateTimeField(required=False)


class StatusChangeSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=BookingStatus.choices)
    note = serializers.CharField(required=False, allow_blank=True, default="")


class SlotQuerySerializer(serializers.Serializer):
    staff = serializers.PrimaryKeyRelatedField(queryset=Staff.objects.all())
    service = serializers.PrimaryKeyRelatedField(queryset=Service.objects.all())
    date = serializers.DateField()
