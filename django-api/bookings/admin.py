from django.contrib import admin

from bookings.models import Event, HistoryEntry, Reservation, User


class ReservationInline(admin.TabularInline):
    model = Reservation
    extra = 0
    fields = ["sequence_number", "user", "status", "attendance", "notes"]
    readonly_fields = ["sequence_number", "user", "status", "attendance", "notes"]
    can_delete = False


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ["email", "name", "role", "status", "locked_until", "total_absences"]
    list_filter = ["role", "status"]
    search_fields = ["email", "name"]
    # Lock state only changes through the reliability tracker.
    readonly_fields = [
        "status",
        "locked_until",
        "consecutive_absences",
        "total_absences",
        "last_login",
        "date_joined",
    ]
    exclude = ["password"]


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "event_date", "event_time", "location", "total_capacity", "available_capacity", "status"]
    list_filter = ["status"]
    search_fields = ["title", "location"]
    readonly_fields = ["available_capacity"]
    inlines = [ReservationInline]

    def get_readonly_fields(self, request, obj=None):
        # Total capacity is set once; afterwards only the ledger moves seats.
        if obj is not None:
            return [*self.readonly_fields, "total_capacity"]
        return self.readonly_fields

    def save_model(self, request, obj, form, change):
        if not change:
            obj.available_capacity = obj.total_capacity
        super().save_model(request, obj, form, change)


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = ["sequence_number", "user", "event", "status", "attendance", "created_at"]
    list_filter = ["status", "attendance", "event"]
    readonly_fields = ["user", "event", "sequence_number", "status", "attendance", "created_at", "cancelled_at", "present_at"]


@admin.register(HistoryEntry)
class HistoryEntryAdmin(admin.ModelAdmin):
    list_display = ["user", "category", "description", "created_at"]
    list_filter = ["category"]
    readonly_fields = ["user", "category", "description", "created_at"]
