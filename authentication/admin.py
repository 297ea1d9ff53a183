from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import CustomUser


@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    list_display = ["email", "username", "full_name", "role", "is_active", "date_joined"]
    list_filter = ["role", "is_active", "is_staff"]
    search_fields = ["email", "username", "full_name"]
    ordering = ["-date_joined"]

    fieldsets = UserAdmin.fieldsets + (("Marketplace", {"fields": ("full_name", "phone_number", "role")}),)
