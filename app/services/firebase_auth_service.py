import asyncio
from google.auth.transport import requests
from google.oauth2 import id_token
from app.config import settings
from typing import Dict


def _verify(token: str) -> dict:
    # Fetches Google's signing certificates; blocking, so run off the event loop
    return id_token.verify_firebase_token(
        token,
        requests.Request(),
        audience=settings.FIREBASE_PROJECT_ID,
        clock_skew_in_seconds=10
    )


async def verify_id_token(token: str) -> Dict[str, str]:
    """
    Verify a Firebase ID token and return the identity it carries

    Args:
        token: ID token issued to the client by Firebase Authentication

    Returns:
        Dictionary with uid, email, name, picture

    Raises:
        ValueError: If the token is invalid, expired or verification is not configured
    """
    if not settings.FIREBASE_PROJECT_ID:
        raise ValueError("Firebase project ID not configured")

    try:
        claims = await asyncio.to_thread(_verify, token)
    except ValueError as e:
        raise ValueError(f"Invalid ID token: {str(e)}")
    except Exception as e:
        raise ValueError(f"Error verifying ID token: {str(e)}")

    if not claims:
        raise ValueError("Invalid ID token: no claims")

    expected_issuer = f"https://securetoken.google.com/{settings.FIREBASE_PROJECT_ID}"
    if claims.get("iss") != expected_issuer:
        raise ValueError("Wrong issuer.")

    uid = claims.get("user_id") or claims.get("sub")
    if not uid:
        raise ValueError("Invalid ID token: missing subject")

    return {
        "uid": uid,
        "email": claims.get("email", ""),
        "name": claims.get("name") or claims.get("display_name") or "",
        "picture": claims.get("picture") or claims.get("photo_url") or "",
    }
