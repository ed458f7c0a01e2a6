from django.contrib import admin
from .models import Event, Attendee, Feedback

@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ('title', 'status', 'event_type', 'created_by', 'date', 'time', 'registration_limit')
    list_filter = ('status', 'event_type', 'event_mode', 'date')
    search_fields = ('title', 'description', 'created_by__email')
    date_hierarchy = 'date'
    readonly_fields = ('qr_code_id', 'roster_version', 'created_at', 'updated_at')

@admin.register(Attendee)
class AttendeeAdmin(admin.ModelAdmin):
    list_display = ('user', 'event', 'registered_college', 'is_attended', 'registered_at', 'attended_at')
    list_filter = ('is_attended', 'event')
    search_fields = ('user__email', 'user__name', 'event__title')

@admin.register(Feedback)
class FeedbackAdmin(admin.ModelAdmin):
    list_display = ('event', 'user', 'rating', 'created_at')
    list_filter = ('rating',)
    search_fields = ('event__title', 'user__email')
