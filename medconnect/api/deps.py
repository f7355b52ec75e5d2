from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import List, Optional

from ..core.config import settings
from ..core.database import get_db
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, UpstreamError
from ..core.security import security, verify_token, UserRole, TokenPayload
from ..models.patient import Patient
from ..models.user import User
from ..services.diagnosis import DiagnosisService
from ..services.payments import PaymentGateway, StripeCheckoutGateway

async def get_current_user_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> TokenPayload:
    """Extract and verify JWT token from Authorization header."""
    if credentials is None:
        raise AuthenticationError("You are not logged in! Please log in to get access.")

    # Verify token
    token_payload = verify_token(credentials.credentials)
    if not token_payload:
        raise AuthenticationError("Invalid or expired token")

    # Check if token is access token
    if token_payload.token_type != "access":
        raise AuthenticationError("Invalid token type")

    return token_payload

async def get_current_user(
    token_payload: TokenPayload = Depends(get_current_user_token),
    db: Session = Depends(get_db)
) -> User:
    """Get current authenticated user from database."""
    if not token_payload.sub or not token_payload.sub.isdigit():
        raise AuthenticationError("Invalid token payload")

    user = db.query(User).filter(User.id == int(token_payload.sub)).first()
    if not user:
        raise AuthenticationError("User not found")

    if not user.is_active:
        raise AuthenticationError("User account is deactivated")

    return user

def require_role(allowed_roles: List[UserRole]):
    """Create a dependency that requires specific user roles."""
    async def role_checker(
        current_user: User = Depends(get_current_user)
    ) -> User:
        if current_user.role not in allowed_roles:
            raise AuthorizationError(
                f"Access denied. Required roles: {[role.value for role in allowed_roles]}"
            )
        return current_user

    return role_checker

async def get_patient_user(
    current_user: User = Depends(require_role([UserRole.PATIENT]))
) -> User:
    """Require patient role."""
    return current_user

async def get_current_patient(
    current_user: User = Depends(get_patient_user),
    db: Session = Depends(get_db)
) -> Patient:
    """Patient profile of the acting user."""
    patient = db.query(Patient).filter(Patient.user_id == current_user.id).first()
    if not patient:
        raise NotFoundError("No patient profile found for this user")
    return patient

# External collaborators, built from the clients created at startup
def get_payment_gateway(request: Request) -> Optional[PaymentGateway]:
    client = getattr(request.app.state, "http_client", None)
    if client is None:
        return None
    return StripeCheckoutGateway(
        client=client,
        api_url=settings.PAYMENT_API_URL,
        secret_key=settings.PAYMENT_SECRET_KEY,
        currency=settings.PAYMENT_CURRENCY,
    )

def get_diagnosis_service(request: Request) -> DiagnosisService:
    client = getattr(request.app.state, "openai_client", None)
    if client is None:
        raise UpstreamError("Diagnosis service is not configured")
    return DiagnosisService(client, settings.OPENAI_MODEL)
