"""Serializers for transforming domain models to API responses, and for
validating request bodies into domain inputs."""

from rest_framework import serializers

from bookings.domain import EventDraft, EventPatch, EventStatus, ProfilePatch


class IdField(serializers.IntegerField):
    """Renders an ID value object as its integer."""

    def to_representation(self, value):
        return super().to_representation(value.value)


class EnumField(serializers.CharField):
    """Renders an Enum member as its value."""

    def to_representation(self, value):
        return value.value


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = IdField()
    title = serializers.CharField()
    description = serializers.CharField()
    event_date = serializers.DateField()
    event_time = serializers.TimeField()
    starts_at = serializers.DateTimeField()
    gate_opens_at = serializers.TimeField(allow_null=True)
    location = serializers.CharField()
    total_capacity = serializers.IntegerField(source="capacity.total")
    available_capacity = serializers.IntegerField(source="capacity.available")
    status = EnumField()
    notes = serializers.CharField()


class ReservationSerializer(serializers.Serializer):
    """Serializer for Reservation domain model."""

    id = IdField()
    user_id = IdField()
    event_id = IdField()
    sequence_number = serializers.IntegerField()
    status = EnumField()
    attendance = EnumField()
    created_at = serializers.DateTimeField()
    cancelled_at = serializers.DateTimeField(allow_null=True)
    present_at = serializers.DateTimeField(allow_null=True)
    notes = serializers.CharField()


class UserReservationSerializer(serializers.Serializer):
    reservation = ReservationSerializer()
    event = EventSerializer()


class UserSerializer(serializers.Serializer):
    """Serializer for User domain model. Never includes credentials."""

    id = IdField()
    name = serializers.CharField()
    email = serializers.EmailField()
    phone = serializers.CharField()
    role = EnumField()
    is_admin = serializers.BooleanField()
    status = EnumField()
    locked_until = serializers.DateTimeField(allow_null=True)
    consecutive_absences = serializers.IntegerField()
    total_absences = serializers.IntegerField()
    date_joined = serializers.DateTimeField()
    last_login = serializers.DateTimeField(allow_null=True)


class UserStatisticsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    present = serializers.IntegerField()
    absent = serializers.IntegerField()
    cancelled = serializers.IntegerField()
    presence_rate = serializers.IntegerField()


class EventStatisticsSerializer(serializers.Serializer):
    event = EventSerializer()
    present = serializers.IntegerField()
    absent = serializers.IntegerField()
    confirmed = serializers.IntegerField()
    presence_rate = serializers.IntegerField()


class HistoryEntrySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    category = EnumField()
    description = serializers.CharField()
    created_at = serializers.DateTimeField()


class ReservationReportRowSerializer(serializers.Serializer):
    reservation_id = serializers.IntegerField()
    sequence_number = serializers.IntegerField()
    status = EnumField()
    booked_at = serializers.DateTimeField()
    user_id = serializers.IntegerField()
    user_name = serializers.CharField()
    user_email = serializers.EmailField()
    user_phone = serializers.CharField()
    event_id = serializers.IntegerField()
    event_title = serializers.CharField()
    event_date = serializers.DateField()


class UserReportRowSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    name = serializers.CharField()
    email = serializers.EmailField()
    phone = serializers.CharField()
    status = EnumField()
    date_joined = serializers.DateTimeField()
    total_reservations = serializers.IntegerField()
    presences = serializers.IntegerField()
    absences = serializers.IntegerField()
    confirmed = serializers.IntegerField()


class AttendanceSheetRowSerializer(serializers.Serializer):
    sequence_number = serializers.IntegerField()
    name = serializers.CharField()
    event_title = serializers.CharField()
    event_date = serializers.DateField()
    justification = serializers.CharField()
    presence = serializers.CharField()


# Request bodies


class EventCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    event_date = serializers.DateField()
    event_time = serializers.TimeField()
    gate_opens_at = serializers.TimeField(required=False, allow_null=True, default=None)
    location = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    total_capacity = serializers.IntegerField(min_value=0)
    notes = serializers.CharField(required=False, allow_blank=True, default="")

    def to_draft(self) -> EventDraft:
        return EventDraft(**self.validated_data)


class EventUpdateSerializer(serializers.Serializer):
    """Partial update: only the fields present in the body are applied."""

    title = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    event_date = serializers.DateField(required=False)
    event_time = serializers.TimeField(required=False)
    gate_opens_at = serializers.TimeField(required=False)
    location = serializers.CharField(max_length=255, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=[status.value for status in EventStatus], required=False)
    notes = serializers.CharField(required=False, allow_blank=True)

    def to_patch(self) -> EventPatch:
        data = dict(self.validated_data)
        if "status" in data:
            data["status"] = EventStatus(data["status"])
        return EventPatch(**data)


class ReservationCreateSerializer(serializers.Serializer):
    event_id = serializers.IntegerField(min_value=1)


class CancellationSerializer(serializers.Serializer):
    justification = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)


class RegisterSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    email = serializers.EmailField(max_length=255)
    phone = serializers.CharField(max_length=30, required=False, allow_blank=True, default="")
    password = serializers.CharField(write_only=True)
    confirm_password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        if attrs["password"] != attrs["confirm_password"]:
            raise serializers.ValidationError("The passwords do not match.")
        return attrs


class LoginSerializer(serializers.Serializer):
    email = serializers.CharField()
    password = serializers.CharField(write_only=True)


class ProfileSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150, required=False)
    phone = serializers.CharField(max_length=30, required=False, allow_blank=True)

    def to_patch(self) -> ProfilePatch:
        return ProfilePatch(**self.validated_data)


class PasswordChangeSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(write_only=True)
    confirm_password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        if attrs["new_password"] != attrs["confirm_password"]:
            raise serializers.ValidationError("The passwords do not match.")
        return attrs
