"""Authentication boundary."""

from src.infrastructure.auth.jwt_verifier import JWTTokenVerifier

__all__ = ["JWTTokenVerifier"]
