from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from sqlalchemy.orm import Session

from paintball.db.models import Addon, Package, Resource


class CreatePackageArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    name: str = Field(min_length=1)
    price_cents: int = Field(alias="priceCents", ge=0)
    duration_min: int = Field(alias="durationMin", ge=1)
    included_balls: int | None = Field(default=None, alias="includedBalls", ge=0)
    is_promo: bool = Field(default=False, alias="isPromo")
    is_public: bool = Field(default=True, alias="isPublic")


class UpdatePackageArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, extra="forbid")

    name: str | None = Field(default=None, min_length=1)
    price_cents: int | None = Field(default=None, alias="priceCents", ge=0)
    duration_min: int | None = Field(default=None, alias="durationMin", ge=1)
    included_balls: int | None = Field(default=None, alias="includedBalls", ge=0)
    is_promo: bool | None = Field(default=None, alias="isPromo")
    is_public: bool | None = Field(default=None, alias="isPublic")

    @model_validator(mode="after")
    def validate_changes_present(self) -> "UpdatePackageArgs":
        if not self.model_fields_set:
            raise ValueError("At least one change is required.")
        return self


class CreateAddonArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    name: str = Field(min_length=1)
    price_cents: int = Field(alias="priceCents", ge=0)


class UpdateAddonArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, extra="forbid")

    name: str | None = Field(default=None, min_length=1)
    price_cents: int | None = Field(default=None, alias="priceCents", ge=0)

    @model_validator(mode="after")
    def validate_changes_present(self) -> "UpdateAddonArgs":
        if not self.model_fields_set:
            raise ValueError("At least one change is required.")
        return self


class CreateResourceArgs(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1)
    capacity: int = Field(default=1, ge=1)


class UpdateResourceArgs(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    name: str | None = Field(default=None, min_length=1)
    capacity: int | None = Field(default=None, ge=1)

    @model_validator(mode="after")
    def validate_changes_present(self) -> "UpdateResourceArgs":
        if not self.model_fields_set:
            raise ValueError("At least one change is required.")
        return self


def create_package(db: Session, args: CreatePackageArgs) -> Package:
    package = Package(
        name=args.name,
        price_cents=args.price_cents,
        duration_min=args.duration_min,
        included_balls=args.included_balls,
        is_promo=args.is_promo,
        is_public=args.is_public,
    )
    db.add(package)
    db.commit()
    return package


def list_packages(db: Session, public_only: bool = False) -> list[Package]:
    packages = db.query(Package).all()
    if public_only:
        packages = [p for p in packages if p.is_public]
    return sorted(packages, key=lambda p: (p.price_cents, p.id))


def update_package(db: Session, package_id: int, args: UpdatePackageArgs) -> Package | None:
    package = find_package(db, package_id=package_id)
    if package is None:
        return None
    _apply_patch(package, args)
    db.commit()
    return package


def create_addon(db: Session, args: CreateAddonArgs) -> Addon:
    addon = Addon(name=args.name, price_cents=args.price_cents)
    db.add(addon)
    db.commit()
    return addon


def list_addons(db: Session) -> list[Addon]:
    return sorted(db.query(Addon).all(), key=lambda a: (a.price_cents, a.id))


def update_addon(db: Session, addon_id: int, args: UpdateAddonArgs) -> Addon | None:
    addon = find_addon(db, addon_id=addon_id)
    if addon is None:
        return None
    _apply_patch(addon, args)
    db.commit()
    return addon


def create_resource(db: Session, args: CreateResourceArgs) -> Resource:
    resource = Resource(name=args.name, capacity=args.capacity)
    db.add(resource)
    db.commit()
    return resource


def list_resources(db: Session) -> list[Resource]:
    return sorted(db.query(Resource).all(), key=lambda r: (r.name, r.id))


def update_resource(db: Session, resource_id: int, args: UpdateResourceArgs) -> Resource | None:
    resource = find_resource(db, resource_id=resource_id)
    if resource is None:
        return None
    _apply_patch(resource, args)
    db.commit()
    return resource


def delete_row(db: Session, row: Any) -> None:
    db.delete(row)
    db.commit()


def find_package(db: Session, package_id: int) -> Package | None:
    for package in db.query(Package).all():
        if package.id == package_id:
            return package
    return None


def find_addon(db: Session, addon_id: int) -> Addon | None:
    for addon in db.query(Addon).all():
        if addon.id == addon_id:
            return addon
    return None


def find_resource(db: Session, resource_id: int) -> Resource | None:
    for resource in db.query(Resource).all():
        if resource.id == resource_id:
            return resource
    return None


def serialize_package(package: Package) -> dict[str, Any]:
    return {
        "id": package.id,
        "name": package.name,
        "priceCents": package.price_cents,
        "durationMin": package.duration_min,
        "includedBalls": package.included_balls,
        "isPromo": bool(package.is_promo),
        "isPublic": bool(package.is_public),
    }


def serialize_addon(addon: Addon) -> dict[str, Any]:
    return {
        "id": addon.id,
        "name": addon.name,
        "priceCents": addon.price_cents,
    }


def serialize_resource(resource: Resource) -> dict[str, Any]:
    return {
        "id": resource.id,
        "name": resource.name,
        "capacity": resource.capacity,
    }


def _apply_patch(row: Any, args: BaseModel) -> None:
    for field, value in args.model_dump(exclude_unset=True).items():
        setattr(row, field, value)
