"""
Contact Repository
"""
from typing import Optional, Sequence, Dict, Any, Tuple

from sqlalchemy import select, or_, func

from database.models import Contact
from .base import BaseRepository


class ContactRepository(BaseRepository[Contact]):
    """Repository for the address book."""
    
    model = Contact
    
    async def list_all(self) -> Sequence[Contact]:
        """All contacts, alphabetical."""
        return await self.get_all(order_by="name")
    
    async def get_by_name_email(self, name: str, email: Optional[str]) -> Optional[Contact]:
        """Find the contact matching the (name, email) unique key."""
        email_clause = Contact.email.is_(None) if email is None else Contact.email == email
        stmt = select(Contact).where(Contact.name == name, email_clause)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
    
    async def upsert(self, values: Dict[str, Any]) -> Tuple[Contact, bool]:
        """
        Insert a contact or refresh the one with the same name and email.
        
        An existing contact only takes the new company, phone, notes and tags.
        
        Returns:
            (contact, created)
        """
        existing = await self.get_by_name_email(values["name"], values.get("email"))
        if existing:
            await self.update(existing, {
                "company": values.get("company"),
                "phone": values.get("phone"),
                "notes": values.get("notes"),
                "tags": values.get("tags"),
            })
            return existing, False
        
        contact = await self.add(Contact(**values))
        return contact, True
    
    async def search(self, term: str, limit: int = 5) -> Sequence[Contact]:
        """Case-insensitive match on name or email."""
        pattern = f"%{term.lower()}%"
        stmt = (
            select(Contact)
            .where(or_(
                func.lower(Contact.name).like(pattern),
                func.lower(Contact.email).like(pattern),
            ))
            .order_by(Contact.name)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()
