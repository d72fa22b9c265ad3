from django.contrib import admin
from .models import MemberRole, Role, User


class MemberRoleInline(admin.TabularInline):
    model = MemberRole
    fk_name = "member"
    extra = 0
    autocomplete_fields = ("role",)
    readonly_fields = ("assigned_by", "assigned_at")


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ("id", "email", "full_name", "form_class", "form_level", "is_active", "created_at")
    list_filter = ("form_level", "is_active")
    search_fields = ("email", "full_name", "form_class")
    readonly_fields = ("form_level", "created_at", "updated_at", "last_login")
    exclude = ("password", "groups", "user_permissions")
    inlines = [MemberRoleInline]


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    list_display = ("role_name", "display_name", "role_type", "permission_level")
    search_fields = ("role_name", "display_name")


@admin.register(MemberRole)
class MemberRoleAdmin(admin.ModelAdmin):
    list_display = ("member", "role", "assigned_by", "assigned_at")
    list_filter = ("role",)
    search_fields = ("member__email", "role__role_name")
