"""Inquiry endpoints — read-only views of the routing state."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from inquiry_router.application.ports.inquiry_repo import InquiryRepository
from inquiry_router.infrastructure.api.dependencies import get_inquiry_repo
from inquiry_router.infrastructure.api.serializers import serialize_inquiry

router = APIRouter(prefix="/inquiries", tags=["inquiries"])


@router.get("")
async def list_inquiries(repo: InquiryRepository = Depends(get_inquiry_repo)):
    inquiries = await repo.get_all()
    return {
        "total": len(inquiries),
        "inquiries": [serialize_inquiry(i) for i in inquiries],
    }


@router.get("/{inquiry_id}")
async def get_inquiry(inquiry_id: str, repo: InquiryRepository = Depends(get_inquiry_repo)):
    inquiry = await repo.get_by_id(inquiry_id)
    if not inquiry:
        raise HTTPException(status_code=404, detail="Inquiry not found")
    return serialize_inquiry(inquiry)
