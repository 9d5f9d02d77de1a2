# app/routers/newsletter.py
from fastapi import APIRouter, Depends, Request
from sqlmodel import Session

from app.core.config import get_settings
from app.database import get_session
from app.repositories.newsletter_repo import NewsletterRepository
from app.schemas.common import Message
from app.schemas.newsletter import SubscribeRequest
from app.services.newsletter_service import NewsletterService

router = APIRouter(prefix="/newsletter", tags=["Newsletter"])

settings = get_settings()

service = NewsletterService(NewsletterRepository())


@router.post("/subscribe", response_model=Message)
def subscribe(
    payload: SubscribeRequest,
    request: Request,
    session: Session = Depends(get_session),
):
    unsubscribe_base_url = (
        f"{str(request.base_url).rstrip('/')}{settings.API_PREFIX}{router.prefix}/unsubscribe"
    )
    return service.subscribe(session, payload.email, unsubscribe_base_url)


@router.get("/unsubscribe/{token}", response_model=Message)
def unsubscribe(token: str, session: Session = Depends(get_session)):
    """
    Target of the unsubscribe link in newsletter emails.
    """
    return service.unsubscribe(session, token)
