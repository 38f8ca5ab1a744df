from django.contrib import admin
from .models import Place, Institution, Service, Condition, Language, TreatmentMethod

@admin.register(Place)
class PlaceAdmin(admin.ModelAdmin):
    list_display = ("id","name","type")
    search_fields = ("name",)

@admin.register(Institution)
class InstitutionAdmin(admin.ModelAdmin):
    list_display = ("id","name","type","place","is_verified")
    list_filter = ("type","is_verified")
    search_fields = ("name",)

@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ("id","name","duration")
    search_fields = ("name",)

admin.site.register(Condition)
admin.site.register(Language)
admin.site.register(TreatmentMethod)
