from django.contrib import admin
from .models import Person, Phone, PaymentMethod, PaymentMethodPerson, Progress

class PhoneInline(admin.TabularInline):
    model = Phone
    fk_name = "person"
    extra = 0

@admin.register(Person)
class PersonAdmin(admin.ModelAdmin):
    list_display = ("id","ci","first_name","first_last_name","user","is_active","created_at")
    list_filter = ("is_active",)
    search_fields = ("ci","first_name","first_last_name","user__email")
    inlines = [PhoneInline]

@admin.register(PaymentMethodPerson)
class PaymentMethodPersonAdmin(admin.ModelAdmin):
    list_display = ("id","person","nickname","payment_method","is_preferred")

admin.site.register(PaymentMethod)

# Progress notes are clinical data and deliberately not exposed in the admin site.
