"""WhatsApp link endpoint."""

from fastapi import APIRouter, HTTPException, Query

from apps.api.schemas import WhatsAppLinkResponse
from integrations.whatsapp.links import build_whatsapp_link


router = APIRouter(prefix="/whatsapp", tags=["whatsapp"])


@router.get("/link", response_model=WhatsAppLinkResponse)
async def whatsapp_link(
    phone: str = Query(..., description="Recipient number"),
    text: str = Query("", max_length=4000, description="Prefilled message"),
):
    """
    Build a wa.me link for a Mozambique number.

    Raises:
        HTTPException: 422 if the phone is not a valid Mozambique number
    """
    url = build_whatsapp_link(phone, text)
    if url is None:
        raise HTTPException(status_code=422, detail="Número do WhatsApp inválido")
    return WhatsAppLinkResponse(url=url)
