"""
Contact Routes - address book CRUD.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_session_dependency
from repositories import ContactRepository
from ..schemas import ContactBody

router = APIRouter(tags=["contacts"])


@router.get("/contacts")
async def list_contacts(session: AsyncSession = Depends(get_session_dependency)):
    """All contacts, alphabetical."""
    contacts = await ContactRepository(session).list_all()
    return {"contacts": [c.to_dict() for c in contacts]}


@router.post("/contacts", status_code=201)
async def create_contact(body: ContactBody, session: AsyncSession = Depends(get_session_dependency)):
    """
    Create a contact.
    
    A contact with the same name and email is updated instead
    (company, phone, notes and tags).
    """
    if not body.name:
        raise HTTPException(status_code=400, detail="Name is required")
    
    contact, _ = await ContactRepository(session).upsert(body.changes())
    return contact.to_dict()


@router.put("/contacts/{contact_id}")
async def update_contact(
    contact_id: str,
    body: ContactBody,
    session: AsyncSession = Depends(get_session_dependency),
):
    if not body.name:
        raise HTTPException(status_code=400, detail="Name is required")
    
    repo = ContactRepository(session)
    contact = await repo.get(contact_id)
    if not contact:
        raise HTTPException(status_code=404, detail="Contact not found")
    
    await repo.update(contact, body.changes())
    return contact.to_dict()


@router.delete("/contacts/{contact_id}")
async def delete_contact(contact_id: str, session: AsyncSession = Depends(get_session_dependency)):
    if not await ContactRepository(session).delete(contact_id):
        raise HTTPException(status_code=404, detail="Contact not found")
    return {"message": "Contact deleted successfully"}
