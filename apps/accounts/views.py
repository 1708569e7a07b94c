from rest_framework import status, viewsets, serializers
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.exceptions import TokenError
from drf_spectacular.utils import extend_schema

from apps.audit.buffer import get_audit_log
from apps.core.exceptions import InvalidInputError
from apps.core.permissions import IsAdminRole
from .models import User
from .serializers import (
    UserRegistrationSerializer,
    UserLoginSerializer,
    UserSerializer,
    UserRoleSerializer,
    UserBadgeInputSerializer,
    SuspendInputSerializer,
)
from .services import (
    register_user,
    authenticate_user,
    enable_user,
    disable_user,
    suspend_user,
    archive_user,
    add_user_badge,
    remove_user_badge,
    change_user_role,
    RoleChangeError,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
)


# Response serializers for API documentation
class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()
    tokens = TokensResponseSerializer()


class MessageResponseSerializer(serializers.Serializer):
    message = serializers.CharField()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


class LogoutRequestSerializer(serializers.Serializer):
    refresh = serializers.CharField(help_text="Refresh token issued at login")


def _tokens_for(user):
    refresh = RefreshToken.for_user(user)
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }


@extend_schema(
    request=UserRegistrationSerializer,
    responses={
        201: AuthResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Register a new staff account and receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """Register a new user account."""
    serializer = UserRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    data = serializer.validated_data.copy()
    data.pop('password_confirm', None)

    try:
        user = register_user(**data)
    except UserRegistrationError as e:
        return Response(
            {'error': str(e)},
            status=status.HTTP_400_BAD_REQUEST
        )

    return Response({
        'message': 'Registration successful.',
        'user': UserSerializer(user).data,
        'tokens': _tokens_for(user),
    }, status=status.HTTP_201_CREATED)


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Authenticate with email and password to receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Login with email and password."""
    serializer = UserLoginSerializer(data=request.data)

    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        user = authenticate_user(
            email=serializer.validated_data['email'],
            password=serializer.validated_data['password'],
        )
    except InvalidCredentialsError:
        return Response({
            'error': 'Invalid credentials'
        }, status=status.HTTP_401_UNAUTHORIZED)
    except InactiveAccountError as e:
        return Response({
            'error': str(e)
        }, status=status.HTTP_403_FORBIDDEN)

    return Response({
        'message': 'Login successful',
        'user': UserSerializer(user).data,
        'tokens': _tokens_for(user),
    })


@extend_schema(
    request=LogoutRequestSerializer,
    responses={
        200: MessageResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Logout. The refresh token is validated and the logout recorded.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    """Logout the current user."""
    refresh_token = request.data.get('refresh')
    if refresh_token:
        try:
            RefreshToken(refresh_token)
        except TokenError:
            return Response({
                'error': 'Invalid token'
            }, status=status.HTTP_400_BAD_REQUEST)

    get_audit_log('user').record('logout', actor=request.user.email)
    return Response({
        'message': 'Logout successful'
    })


@extend_schema(
    responses={200: UserSerializer},
    description="Get the current authenticated user's profile.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    """Get current authenticated user profile."""
    return Response(UserSerializer(request.user).data)


@extend_schema(
    request=UserSerializer,
    responses={
        200: UserSerializer,
        400: ErrorResponseSerializer,
    },
    description="Update the current user's profile (display_name, phone, mfa_enabled).",
    tags=['auth'],
)
@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def update_profile(request):
    """Update user profile."""
    user = request.user
    serializer = UserSerializer(user, data=request.data, partial=True)

    if serializer.is_valid():
        serializer.save()
        get_audit_log('user').record('profile_updated', actor=user.email, fields=sorted(request.data.keys()))
        return Response(serializer.data)

    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class UserAdminViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Staff account management for owners and admins.

    list/retrieve: Browse staff accounts
    enable/disable/suspend/archive: Change account state
    role: Change a user's role
    badges: Add (POST) or remove (DELETE) a badge
    """

    queryset = User.objects.order_by('email')
    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated, IsAdminRole]

    @extend_schema(request=None, responses={200: UserSerializer}, tags=['auth'])
    @action(detail=True, methods=['post'])
    def enable(self, request, pk=None):
        user = enable_user(user_id=self.get_object().id, by=request.user.email)
        return Response(UserSerializer(user).data)

    @extend_schema(request=None, responses={200: UserSerializer}, tags=['auth'])
    @action(detail=True, methods=['post'])
    def disable(self, request, pk=None):
        user = disable_user(user_id=self.get_object().id, by=request.user.email)
        return Response(UserSerializer(user).data)

    @extend_schema(request=SuspendInputSerializer, responses={200: UserSerializer}, tags=['auth'])
    @action(detail=True, methods=['post'])
    def suspend(self, request, pk=None):
        serializer = SuspendInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = suspend_user(
            user_id=self.get_object().id,
            by=request.user.email,
            reason=serializer.validated_data['reason'],
        )
        return Response(UserSerializer(user).data)

    @extend_schema(request=None, responses={200: UserSerializer}, tags=['auth'])
    @action(detail=True, methods=['post'])
    def archive(self, request, pk=None):
        user = archive_user(user_id=self.get_object().id, by=request.user.email)
        return Response(UserSerializer(user).data)

    @extend_schema(request=UserRoleSerializer, responses={200: UserSerializer}, tags=['auth'])
    @action(detail=True, methods=['post'])
    def role(self, request, pk=None):
        serializer = UserRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            user = change_user_role(
                user_id=self.get_object().id,
                role=serializer.validated_data['role'],
                by=request.user.email,
            )
        except RoleChangeError as e:
            raise InvalidInputError(str(e))
        return Response(UserSerializer(user).data)

    @extend_schema(request=UserBadgeInputSerializer, responses={200: UserSerializer}, tags=['auth'])
    @action(detail=True, methods=['post', 'delete'])
    def badges(self, request, pk=None):
        serializer = UserBadgeInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        service = add_user_badge if request.method == 'POST' else remove_user_badge
        user = service(
            user_id=self.get_object().id,
            badge=serializer.validated_data['badge'],
            by=request.user.email,
        )
        return Response(UserSerializer(user).data)
