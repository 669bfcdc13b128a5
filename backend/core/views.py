import logging

from django.db import connection, DatabaseError
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, authentication_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from .serializers import UserSerializer, CustomTokenObtainPairSerializer
from .utils import default_admin_ready

logger = logging.getLogger(__name__)


class CustomTokenObtainPairView(TokenObtainPairView):
    """Login: exchange username/password for a bearer token"""
    serializer_class = CustomTokenObtainPairSerializer

    def post(self, request, *args, **kwargs):
        username = str(request.data.get('username') or '').strip()
        password = str(request.data.get('password') or '')
        if not username or not password:
            return Response(
                {'success': False, 'message': 'Username and password are required'},
                status=status.HTTP_400_BAD_REQUEST
            )

        serializer = self.get_serializer(data={'username': username, 'password': password})
        try:
            serializer.is_valid(raise_exception=True)
        except AuthenticationFailed as e:
            logger.warning(f"Failed login attempt for username: {username}")
            return Response(
                {'success': False, 'message': str(e.detail)},
                status=status.HTTP_401_UNAUTHORIZED
            )
        except TokenError as e:
            raise InvalidToken(e.args[0])

        user = serializer.user
        return Response({
            'success': True,
            'token': serializer.validated_data['access'],
            'refresh': serializer.validated_data['refresh'],
            'user': {'id': user.id, 'username': user.username, 'role': user.role},
        })


class CustomTokenRefreshView(TokenRefreshView):
    """Exchange a refresh token for a fresh access token"""


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Get the principal the bearer token belongs to"""
    return Response(UserSerializer(request.user).data)


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def auth_ready(request):
    """Report whether the credential table is reachable and seeded"""
    try:
        ready = default_admin_ready()
    except DatabaseError as e:
        return Response(
            {'success': False, 'message': 'Auth setup failed', 'error': str(e)},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
    if not ready:
        return Response(
            {'success': False, 'message': 'Default admin missing. Run "python manage.py bootstrap".'},
            status=status.HTTP_503_SERVICE_UNAVAILABLE
        )
    return Response({'success': True})


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def service_info(request):
    return Response({'ok': True, 'service': 'karanjkar-tailors-backend'})


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def health(request):
    """Liveness probe against the database"""
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
    except DatabaseError as e:
        logger.error(f"Health check failed: {str(e)}")
        return Response({'ok': False, 'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response({'ok': True})
