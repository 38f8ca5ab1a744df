from django.contrib import admin
from .models import Appointment, Review

@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ("id","person","doctor","service","status","start_at","end_at","created_at")
    list_filter = ("status",)
    search_fields = ("person__first_name","person__first_last_name","doctor__first_name","doctor__first_last_name","notes")

@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ("id","appointment","score","created_at")
    list_filter = ("score",)
