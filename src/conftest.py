import os

# api.security refuses to import without a signing secret
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
