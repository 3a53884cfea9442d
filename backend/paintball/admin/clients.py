from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from sqlalchemy.orm import Session

from paintball.db.models import Booking, Client, Package

logger = logging.getLogger("paintball.admin.clients")

CLIENT_LIST_LIMIT = 100


class ClientNotFoundError(LookupError):
    pass


class ClientMergeError(ValueError):
    pass


class CreateClientArgs(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, min_length=3)
    notes: str | None = None

    @field_validator("notes")
    @classmethod
    def blank_notes_to_none(cls, value: str | None) -> str | None:
        return value or None


class UpdateClientArgs(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    name: str | None = Field(default=None, min_length=1)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, min_length=3)
    notes: str | None = None

    @field_validator("notes")
    @classmethod
    def blank_notes_to_none(cls, value: str | None) -> str | None:
        return value or None

    @model_validator(mode="after")
    def validate_changes_present(self) -> "UpdateClientArgs":
        if not self.model_fields_set:
            raise ValueError("At least one change is required.")
        if "name" in self.model_fields_set and self.name is None:
            raise ValueError("name cannot be null.")
        return self


class MergeClientsArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    source_client_id: int = Field(alias="sourceClientId")
    target_client_id: int = Field(alias="targetClientId")


def create_client(db: Session, args: CreateClientArgs) -> Client:
    client = Client(name=args.name, email=args.email, phone=args.phone, notes=args.notes)
    db.add(client)
    db.commit()
    return client


def list_clients(db: Session, search: str | None = None) -> list[Client]:
    clients = db.query(Client).all()
    needle = (search or "").strip().lower()
    if needle:
        clients = [
            c
            for c in clients
            if needle in (c.email or "").lower() or needle in (c.phone or "").lower()
        ]
    newest_first = sorted(clients, key=lambda c: c.id, reverse=True)
    return newest_first[:CLIENT_LIST_LIMIT]


def find_client(db: Session, client_id: int) -> Client | None:
    for client in db.query(Client).all():
        if client.id == client_id:
            return client
    return None


def client_bookings(db: Session, client_id: int) -> list[Booking]:
    bookings = [b for b in db.query(Booking).all() if b.client_id == client_id]
    return sorted(bookings, key=lambda b: b.start_time, reverse=True)


def find_duplicate_clients(db: Session, client: Client) -> list[Client]:
    """Other clients sharing this client's email or phone."""
    duplicates = []
    for other in db.query(Client).all():
        if other.id == client.id:
            continue
        if (client.email and other.email == client.email) or (
            client.phone and other.phone == client.phone
        ):
            duplicates.append(other)
    return sorted(duplicates, key=lambda c: c.id, reverse=True)


def update_client(db: Session, client_id: int, args: UpdateClientArgs) -> Client | None:
    client = find_client(db, client_id=client_id)
    if client is None:
        return None
    for field, value in args.model_dump(exclude_unset=True).items():
        setattr(client, field, value)
    db.commit()
    return client


def delete_client(db: Session, client: Client) -> None:
    for booking in client_bookings(db, client_id=client.id):
        booking.client_id = None
    db.delete(client)
    db.commit()


def merge_clients(db: Session, args: MergeClientsArgs) -> Client:
    if args.source_client_id == args.target_client_id:
        raise ClientMergeError("Cannot merge a client into itself.")

    source = find_client(db, client_id=args.source_client_id)
    target = find_client(db, client_id=args.target_client_id)
    if source is None or target is None:
        raise ClientNotFoundError("Client not found.")

    share_email = bool(source.email and target.email and source.email == target.email)
    share_phone = bool(source.phone and target.phone and source.phone == target.phone)
    if not share_email and not share_phone:
        raise ClientMergeError("Clients share neither an email nor a phone number.")

    moved = client_bookings(db, client_id=source.id)
    for booking in moved:
        booking.client_id = target.id

    if not target.email and source.email:
        target.email = source.email
    if not target.phone and source.phone:
        target.phone = source.phone
    target.notes = merge_notes(target.notes, source.notes)

    db.delete(source)
    db.commit()

    logger.info(
        "Merged client source_id=%s into target_id=%s moved_bookings=%s",
        source.id,
        target.id,
        len(moved),
    )
    return target


def merge_notes(target_notes: str | None, source_notes: str | None) -> str | None:
    if not source_notes:
        return target_notes
    if not target_notes:
        return source_notes
    if source_notes in target_notes:
        return target_notes
    return f"{target_notes}\n\n{source_notes}"


def serialize_client(client: Client) -> dict[str, Any]:
    created_at = getattr(client, "created_at", None)
    return {
        "id": client.id,
        "name": client.name,
        "email": client.email,
        "phone": client.phone,
        "notes": client.notes,
        "createdAt": created_at.isoformat() if created_at is not None else None,
    }


def serialize_client_summary(db: Session, client: Client) -> dict[str, Any]:
    bookings = client_bookings(db, client_id=client.id)
    return {
        **serialize_client(client),
        "bookingsCount": len(bookings),
        "lastBookingAt": bookings[0].start_time.isoformat() if bookings else None,
    }


def serialize_client_detail(db: Session, client: Client) -> dict[str, Any]:
    package_names = {p.id: p.name for p in db.query(Package).all()}
    return {
        **serialize_client(client),
        "bookings": [
            {
                "id": booking.id,
                "startISO": booking.start_time.isoformat(),
                "endISO": booking.end_time.isoformat(),
                "status": booking.status,
                "packageName": package_names.get(booking.package_id),
                "groupSize": booking.group_size,
                "notes": booking.notes,
            }
            for booking in client_bookings(db, client_id=client.id)
        ],
        "duplicates": [serialize_client(d) for d in find_duplicate_clients(db, client)],
    }
