# auth.py
# Bearer-token identity and role gating for the intake API.
#
# Tokens are HS256 JWTs with userId / companyId / role claims. Routes depend
# on get_current_identity, or on require_role(...) to restrict by role.

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
import logging
import os

import jwt
from fastapi import Depends, Header, HTTPException

logger = logging.getLogger(__name__)

JWT_SECRET = os.getenv("JWT_SECRET", "change-me-in-production-use-a-long-random-secret")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "480"))

ROLES = ("admin", "recruiter")


@dataclass(frozen=True)
class Identity:
    user_id: str
    company_id: str
    role: Optional[str]


def create_access_token(user_id: str, company_id: str, role: str,
                        expires_minutes: Optional[int] = None) -> str:
    minutes = JWT_EXPIRES_MINUTES if expires_minutes is None else expires_minutes
    payload = {
        "userId": user_id,
        "companyId": company_id,
        "role": role,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=minutes),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def verify_token(token: str) -> Identity:
    """Decode a token; raises jwt.InvalidTokenError if it is bad or expired"""
    decoded = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    user_id = decoded.get("userId")
    company_id = decoded.get("companyId")
    if not user_id or not company_id:
        raise jwt.InvalidTokenError("token is missing userId or companyId")
    return Identity(user_id=user_id, company_id=company_id, role=decoded.get("role"))


def get_current_identity(authorization: Optional[str] = Header(None)) -> Identity:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Unauthorized")

    token = authorization.split(" ", 1)[1].strip()
    try:
        return verify_token(token)
    except jwt.InvalidTokenError as e:
        logger.info("Rejected token: %s", e)
        raise HTTPException(status_code=401, detail="Invalid or expired token")


def require_role(*allowed: str):
    def checker(identity: Identity = Depends(get_current_identity)) -> Identity:
        if not identity.role:
            raise HTTPException(status_code=401, detail="Unauthorized")
        if identity.role not in allowed:
            raise HTTPException(status_code=403, detail="Forbidden")
        return identity
    return checker
