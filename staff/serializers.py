from rest_framework import serializers

from booking.services.slot_utils import format_hhmm
from .models import WorkingWindow


class HHMMField(serializers.Field):
    """Working-window time as a 24-hour "HH:MM" string."""

    def to_representation(self, value):
        return format_hhmm(value)

    def to_internal_value(self, data):
        # Parsed by WorkingHoursManager so the API and the manager share one rule.
        if not isinstance(data, str):
            raise serializers.ValidationError("Expected a time string in HH:MM format.")
        return data


class WorkingWindowSerializer(serializers.ModelSerializer):
    start_time = HHMMField()
    end_time = HHMMField()

    class Meta:
        model = WorkingWindow
        fields = ["id", "staff", "day_of_week", "start_time", "end_time"]
        read_only_fields = ["id", "staff", "day_of_week"]


class WorkingWindowInputSerializer(serializers.Serializer):
    start_time = HHMMField()
    end_time = HHMMField()
