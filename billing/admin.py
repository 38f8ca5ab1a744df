from django.contrib import admin
from .models import Payment

@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("id","person","payment_method","amount","date","created_at")
    list_filter = ("date",)
    search_fields = ("person__first_name","person__first_last_name","person__ci")
