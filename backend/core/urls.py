from django.urls import path
from .views import (
    CustomTokenObtainPairView, CustomTokenRefreshView, user_me, auth_ready,
    service_info, health
)

urlpatterns = [
    path('', service_info, name='service-info'),
    path('health', health, name='health'),

    # Auth endpoints
    path('auth/login', CustomTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/refresh', CustomTokenRefreshView.as_view(), name='token_refresh'),
    path('auth/me', user_me, name='user-me'),
    path('auth/ready', auth_ready, name='auth-ready'),
]
