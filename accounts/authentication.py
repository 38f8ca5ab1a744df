from rest_framework_simplejwt.authentication import JWTAuthentication


class HeaderJWTAuthentication(JWTAuthentication):
    """
    JWT bearer auth that reads the Authorization header through
    request.headers (case-insensitive) rather than request.META.
    """

    def get_header(self, request):
        auth = request.headers.get("Authorization")
        if not auth:
            return None
        if isinstance(auth, str):
            auth = auth.encode("iso-8859-1")
        return auth
