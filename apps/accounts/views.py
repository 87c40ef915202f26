from rest_framework import status, generics, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken
from drf_spectacular.utils import extend_schema
from .models import User, DeletionStatus
from .serializers import (
    UserRegistrationSerializer,
    UserLoginSerializer,
    UserSerializer,
    DeletionRequestInputSerializer,
    DeletionStatusSerializer,
)
from .services import (
    register_user,
    authenticate_user,
    request_deletion,
    recover_account,
    cancel_deletion,
    get_deletion_status,
)


# Response serializers for API documentation
class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()
    tokens = TokensResponseSerializer()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()
    kind = serializers.CharField()


def _auth_payload(user, message):
    refresh = RefreshToken.for_user(user)
    return {
        'message': message,
        'user': UserSerializer(user).data,
        'tokens': {
            'refresh': str(refresh),
            'access': str(refresh.access_token),
        }
    }


@extend_schema(
    request=UserRegistrationSerializer,
    responses={
        201: AuthResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Register a new user account and receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """Register a new user account."""
    serializer = UserRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    data = serializer.validated_data
    user = register_user(
        email=data['email'],
        password=data['password'],
        name=data.get('name', ''),
    )

    return Response(
        _auth_payload(user, 'Registration successful'),
        status=status.HTTP_201_CREATED
    )


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Authenticate with email and password to receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Login with email and password."""
    serializer = UserLoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    user = authenticate_user(
        email=serializer.validated_data['email'],
        password=serializer.validated_data['password'],
    )

    return Response(_auth_payload(user, 'Login successful'))


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
    methods=['GET'],
    responses={200: DeletionStatusSerializer},
    description="Get the current user's account deletion status.",
    tags=['account-deletion'],
)
@extend_schema(
    methods=['POST'],
    request=DeletionRequestInputSerializer,
    responses={
        201: DeletionStatusSerializer,
        409: ErrorResponseSerializer,
    },
    description="Schedule the account for deletion after the grace period.",
    tags=['account-deletion'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def deletion(request):
    """Read or create the current user's deletion request."""
    if request.method == 'GET':
        data = get_deletion_status(user=request.user)
        return Response(DeletionStatusSerializer(data).data)

    serializer = DeletionRequestInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    request_deletion(
        user=request.user,
        reason=serializer.validated_data['reason'],
        reason_text=serializer.validated_data.get('reason_text', ''),
    )

    data = get_deletion_status(user=request.user)
    return Response(DeletionStatusSerializer(data).data, status=status.HTTP_201_CREATED)


@extend_schema(
    request=None,
    responses={
        200: DeletionStatusSerializer,
        409: ErrorResponseSerializer,
        410: ErrorResponseSerializer,
    },
    description="Cancel a scheduled deletion from the account settings.",
    tags=['account-deletion'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def cancel_account_deletion(request):
    """Cancel scheduled deletion."""
    cancel_deletion(user=request.user)
    data = get_deletion_status(user=request.user)
    return Response(DeletionStatusSerializer(data).data)


@extend_schema(
    request=None,
    responses={
        200: DeletionStatusSerializer,
        409: ErrorResponseSerializer,
        410: ErrorResponseSerializer,
    },
    description="Recover an account that is scheduled for deletion.",
    tags=['account-deletion'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def recover(request):
    """Recover account within the grace period."""
    recover_account(user=request.user)
    data = get_deletion_status(user=request.user)
    return Response(DeletionStatusSerializer(data).data)


class UserDetailView(generics.RetrieveAPIView):
    """
    Get user profile by ID.

    Accounts scheduled for deletion are hidden.

    GET /api/auth/users/{id}/
    """
    serializer_class = UserSerializer

    def get_queryset(self):
        return User.objects.filter(is_active=True).exclude(
            deletion_requests__status=DeletionStatus.PENDING_DELETION
        )
