from django.contrib import admin
from .models import (
    Doctor, Education, Schedule, AgeGroup, PayoutMethod, Payout,
    DoctorService, DoctorTreatmentMethod, DoctorCondition, DoctorLanguage,
)

class ScheduleInline(admin.TabularInline):
    model = Schedule
    extra = 0

class EducationInline(admin.TabularInline):
    model = Education
    extra = 0

class DoctorServiceInline(admin.TabularInline):
    model = DoctorService
    extra = 0

@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ("id","ci","first_name","first_last_name","user","is_active","created_at")
    list_filter = ("is_active",)
    search_fields = ("ci","first_name","first_last_name","user__email")
    inlines = [ScheduleInline, EducationInline, DoctorServiceInline]
    actions = ["approve"]

    @admin.action(description="Approve selected doctors")
    def approve(self, request, queryset):
        queryset.update(is_active=True)

@admin.register(PayoutMethod)
class PayoutMethodAdmin(admin.ModelAdmin):
    list_display = ("id","doctor","type","nickname","is_preferred")
    list_filter = ("type",)

admin.site.register(AgeGroup)
admin.site.register(DoctorTreatmentMethod)
admin.site.register(DoctorCondition)
admin.site.register(DoctorLanguage)

@admin.register(Payout)
class PayoutAdmin(admin.ModelAdmin):
    list_display = ("id","doctor","type","amount","status","processed_at","created_at")
    list_filter = ("status","type")
    search_fields = ("doctor__first_name","doctor__first_last_name","account_number","pago_movil_phone")
