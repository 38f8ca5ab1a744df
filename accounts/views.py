import logging

from rest_framework import permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken

from .serializers import RegisterSerializer, DoctorRegisterSerializer, LoginSerializer, MeSerializer
from .models import User

logger = logging.getLogger(__name__)

def _jwt_pair_for(user: User) -> dict:
    refresh = RefreshToken.for_user(user)
    refresh["role"] = user.role
    return {"access": str(refresh.access_token), "refresh": str(refresh)}

@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated])
def me(request):
    """
    The authenticated user with the id of their person / doctor profile
    (null when the account has none).
    """
    return Response(MeSerializer(request.user).data)

def _register(request, serializer_class):
    s = serializer_class(data=request.data)
    s.is_valid(raise_exception=True)
    user = s.save()
    logger.info(f"registered {user.role} account {user.pk}")
    return Response(
        {"tokens": _jwt_pair_for(user), "user": MeSerializer(user).data},
        status=status.HTTP_201_CREATED,
    )

@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def register(request):
    return _register(request, RegisterSerializer)

@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def register_doctor(request):
    return _register(request, DoctorRegisterSerializer)

@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def login_password(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user = s.validated_data["user"]
    return Response({"tokens": _jwt_pair_for(user), "user": MeSerializer(user).data})
