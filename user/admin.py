from django.contrib import admin

from user.models import UserProfile


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ('user', 'role')
    search_fields = ('user__email',)
    list_filter = ('role',)
    exclude = ('password_reset_otp', 'password_reset_expires')
