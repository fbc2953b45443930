from django.urls import path
from .adapters.viewsets import auth_viewset
from .adapters.viewsets.auth_refresh import CookieTokenRefreshView

urlpatterns = [
    path('register', auth_viewset.AuthViewSet.as_view({'post': 'register'}), name='register'),
    path('login', auth_viewset.AuthViewSet.as_view({'post': 'login_with_email'}), name='login'),
    path('logout', auth_viewset.AuthViewSet.as_view({'post': 'logout'}), name='logout'),
    path('forgot', auth_viewset.AuthViewSet.as_view({'post': 'forgot_password'}), name='forgot_password'),
    path('reset', auth_viewset.AuthViewSet.as_view({'post': 'reset_password'}), name='reset_password'),
    path('me', auth_viewset.MeViewSet.as_view({'get': 'me'}), name='me'),

    # refresh the access cookie from the refresh cookie
    path('token/refresh', CookieTokenRefreshView.as_view(), name='token_refresh'),
]
