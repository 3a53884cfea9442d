import json
import logging
import time
import uuid
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from paintball.admin.catalog import (
    CreateAddonArgs,
    CreatePackageArgs,
    CreateResourceArgs,
    UpdateAddonArgs,
    UpdatePackageArgs,
    UpdateResourceArgs,
    create_addon,
    create_package,
    create_resource,
    delete_row,
    find_addon,
    find_package,
    find_resource,
    list_addons,
    list_packages,
    list_resources,
    serialize_addon,
    serialize_package,
    serialize_resource,
    update_addon,
    update_package,
    update_resource,
)
from paintball.admin.clients import (
    ClientMergeError,
    ClientNotFoundError,
    CreateClientArgs,
    MergeClientsArgs,
    UpdateClientArgs,
    create_client,
    delete_client,
    find_client,
    list_clients,
    merge_clients,
    serialize_client,
    serialize_client_detail,
    serialize_client_summary,
    update_client,
)
from paintball.admin.settings import (
    UpdateSettingsArgs,
    get_venue_settings,
    serialize_settings,
    update_venue_settings,
)
from paintball.bookings.availability import list_available_slots, parse_availability_args
from paintball.bookings.create_booking import (
    booking_addon_lines,
    create_booking,
    parse_create_booking_args,
    serialize_booking,
)
from paintball.bookings.errors import (
    AddonNotFoundError,
    BookingNotFoundError,
    InvalidStatusTransitionError,
    PackageNotFoundError,
    ResourceUnavailableError,
)
from paintball.bookings.manage_booking import (
    change_booking_status,
    list_bookings,
    parse_booking_status_args,
    parse_update_booking_args,
    update_booking,
)
from paintball.bookings.quote import map_validation_error, parse_quote_args, quote_booking
from paintball.db.session import SessionLocal
from paintball.engine import InputValidationError
from paintball.security.dependencies import require_admin_api_key


def configure_logging() -> logging.Logger:
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    return logging.getLogger("paintball.backend")


logger = configure_logging()
app = FastAPI(title="Paintball Booking Backend")


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    start_time = time.perf_counter()

    response = await call_next(request)

    duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
    response.headers["x-request-id"] = request_id

    logger.info(
        json.dumps(
            {
                "event": "http_request",
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            }
        )
    )
    return response


def _error(status_code: int, error_code: str, human_message: str, **extra: Any) -> JSONResponse:
    content = {"ok": False, "error_code": error_code, "human_message": human_message}
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


def _invalid_args(exc: ValidationError | InputValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"ok": False, **map_validation_error(exc)})


def _system_down(human_message: str) -> JSONResponse:
    return _error(500, "SYSTEM_DOWN", human_message)


@app.get("/health")
async def health():
    return JSONResponse(content={"ok": True})


@app.post("/v1/bookings/quote")
async def booking_quote(payload: dict[str, Any]) -> JSONResponse:
    try:
        args = parse_quote_args(payload)
    except ValidationError as exc:
        return _invalid_args(exc)

    db = SessionLocal()
    try:
        quote = quote_booking(db=db, args=args)
    except InputValidationError as exc:
        return _invalid_args(exc)
    except PackageNotFoundError as exc:
        return _error(404, "PACKAGE_NOT_FOUND", str(exc))
    except AddonNotFoundError as exc:
        return _error(404, "ADDON_NOT_FOUND", str(exc))
    except Exception:
        logger.exception("Error generating booking quote package_id=%s", args.package_id)
        return _system_down("Temporary issue generating quote.")
    finally:
        db.close()

    logger.info(
        json.dumps(
            {
                "event": "booking_quote_generated",
                "package_id": args.package_id,
                "group_size": args.group_size,
                "total_cents": quote.total_cents,
                "nocturne": quote.nocturne,
            }
        )
    )
    return JSONResponse(content={"ok": True, "data": quote.to_dict()})


@app.get("/v1/availability")
async def availability(request: Request) -> JSONResponse:
    try:
        args = parse_availability_args(dict(request.query_params))
    except ValidationError as exc:
        return _invalid_args(exc)

    db = SessionLocal()
    try:
        slots = list_available_slots(db=db, args=args)
    except InputValidationError as exc:
        return _invalid_args(exc)
    except PackageNotFoundError as exc:
        return _error(404, "PACKAGE_NOT_FOUND", str(exc))
    except Exception:
        logger.exception("Error listing availability package_id=%s", args.package_id)
        return _system_down("Temporary issue listing availability.")
    finally:
        db.close()

    return JSONResponse(
        content={
            "ok": True,
            "data": {"date": args.day.isoformat(), "slots": slots},
        }
    )


@app.post("/v1/bookings")
async def create_booking_endpoint(payload: dict[str, Any]) -> JSONResponse:
    try:
        args = parse_create_booking_args(payload)
    except ValidationError as exc:
        return _invalid_args(exc)

    db = SessionLocal()
    try:
        booking = create_booking(db=db, args=args)
        body = serialize_booking(booking, booking_addon_lines(db, booking_id=booking.id))
    except InputValidationError as exc:
        db.rollback()
        return _invalid_args(exc)
    except PackageNotFoundError as exc:
        db.rollback()
        return _error(404, "PACKAGE_NOT_FOUND", str(exc))
    except AddonNotFoundError as exc:
        db.rollback()
        return _error(404, "ADDON_NOT_FOUND", str(exc))
    except ClientNotFoundError as exc:
        db.rollback()
        return _error(404, "CLIENT_NOT_FOUND", str(exc))
    except ResourceUnavailableError as exc:
        db.rollback()
        return _error(
            409,
            "RESOURCE_UNAVAILABLE",
            str(exc),
            data={"conflict_booking_id": exc.conflict_booking_id},
        )
    except Exception:
        db.rollback()
        logger.exception("Error creating booking package_id=%s", args.package_id)
        return _system_down("Temporary issue creating booking.")
    finally:
        db.close()

    logger.info(
        json.dumps(
            {
                "event": "booking_created",
                "booking_id": body["id"],
                "status": body["status"],
                "total_cents": body["totalCents"],
            }
        )
    )
    return JSONResponse(status_code=201, content={"ok": True, "data": {"booking": body}})


@app.patch("/v1/bookings/{booking_id}", dependencies=[Depends(require_admin_api_key)])
async def update_booking_endpoint(booking_id: int, payload: dict[str, Any]) -> JSONResponse:
    try:
        args = parse_update_booking_args(payload)
    except ValidationError as exc:
        return _invalid_args(exc)

    db = SessionLocal()
    try:
        booking = update_booking(db=db, booking_id=booking_id, args=args)
        body = serialize_booking(booking, booking_addon_lines(db, booking_id=booking.id))
    except InputValidationError as exc:
        db.rollback()
        return _invalid_args(exc)
    except BookingNotFoundError as exc:
        return _error(404, "BOOKING_NOT_FOUND", str(exc))
    except PackageNotFoundError as exc:
        db.rollback()
        return _error(404, "PACKAGE_NOT_FOUND", str(exc))
    except AddonNotFoundError as exc:
        db.rollback()
        return _error(404, "ADDON_NOT_FOUND", str(exc))
    except ClientNotFoundError as exc:
        db.rollback()
        return _error(404, "CLIENT_NOT_FOUND", str(exc))
    except ResourceUnavailableError as exc:
        db.rollback()
        return _error(
            409,
            "RESOURCE_UNAVAILABLE",
            str(exc),
            data={"conflict_booking_id": exc.conflict_booking_id},
        )
    except Exception:
        db.rollback()
        logger.exception("Error updating booking booking_id=%s", booking_id)
        return _system_down("Temporary issue updating booking.")
    finally:
        db.close()

    logger.info(
        json.dumps(
            {
                "event": "booking_updated",
                "booking_id": booking_id,
                "changes": sorted(args.model_fields_set),
            }
        )
    )
    return JSONResponse(content={"ok": True, "data": {"booking": body}})


@app.post("/v1/bookings/{booking_id}/status", dependencies=[Depends(require_admin_api_key)])
async def booking_status_endpoint(booking_id: int, payload: dict[str, Any]) -> JSONResponse:
    try:
        args = parse_booking_status_args(payload)
    except ValidationError as exc:
        return _invalid_args(exc)

    db = SessionLocal()
    try:
        booking = change_booking_status(db=db, booking_id=booking_id, args=args)
        body = serialize_booking(booking, booking_addon_lines(db, booking_id=booking.id))
    except BookingNotFoundError as exc:
        return _error(404, "BOOKING_NOT_FOUND", str(exc))
    except InvalidStatusTransitionError as exc:
        return _error(409, "INVALID_STATUS_TRANSITION", str(exc))
    except Exception:
        db.rollback()
        logger.exception("Error updating booking status booking_id=%s", booking_id)
        return _system_down("Temporary issue updating booking status.")
    finally:
        db.close()

    logger.info(
        json.dumps(
            {
                "event": "booking_status_updated",
                "booking_id": booking_id,
                "action": args.action,
                "status": body["status"],
            }
        )
    )
    return JSONResponse(content={"ok": True, "data": {"booking": body}})


@app.get("/v1/admin/bookings", dependencies=[Depends(require_admin_api_key)])
async def admin_list_bookings(status: str | None = None) -> JSONResponse:
    db = SessionLocal()
    try:
        bookings = list_bookings(db=db, status=status)
        items = [serialize_booking(b, booking_addon_lines(db, booking_id=b.id)) for b in bookings]
    finally:
        db.close()
    return JSONResponse(content={"ok": True, "data": {"bookings": items}})


@app.get("/v1/public/packages")
async def public_packages() -> JSONResponse:
    db = SessionLocal()
    try:
        packages = list_packages(db=db, public_only=True)
        items = [serialize_package(p) for p in packages]
    finally:
        db.close()
    return JSONResponse(content={"ok": True, "data": {"packages": items}})


@app.get("/v1/public/addons")
async def public_addons() -> JSONResponse:
    db = SessionLocal()
    try:
        items = [serialize_addon(a) for a in list_addons(db=db)]
    finally:
        db.close()
    return JSONResponse(content={"ok": True, "data": {"addons": items}})


@app.get("/v1/admin/packages", dependencies=[Depends(require_admin_api_key)])
async def admin_list_packages() -> JSONResponse:
    db = SessionLocal()
    try:
        items = [serialize_package(p) for p in list_packages(db=db)]
    finally:
        db.close()
    return JSONResponse(content={"ok": True, "data": {"packages": items}})


@app.post("/v1/admin/packages", dependencies=[Depends(require_admin_api_key)])
async def admin_create_package(payload: dict[str, Any]) -> JSONResponse:
    try:
        args = CreatePackageArgs.model_validate(payload)
    except ValidationError as exc:
        return _invalid_args(exc)

    db = SessionLocal()
    try:
        package = create_package(db=db, args=args)
        body = serialize_package(package)
    except Exception:
        db.rollback()
        logger.exception("Error creating package")
        return _system_down("Temporary issue creating package.")
    finally:
        db.close()
    return JSONResponse(status_code=201, content={"ok": True, "data": {"package": body}})


@app.patch("/v1/admin/packages/{package_id}", dependencies=[Depends(require_admin_api_key)])
async def admin_update_package(package_id: int, payload: dict[str, Any]) -> JSONResponse:
    try:
        args = UpdatePackageArgs.model_validate(payload)
    except ValidationError as exc:
        return _invalid_args(exc)

    db = SessionLocal()
    try:
        package = update_package(db=db, package_id=package_id, args=args)
        if package is None:
            return _error(404, "PACKAGE_NOT_FOUND", "Package not found.")
        body = serialize_package(package)
    except Exception:
        db.rollback()
        logger.exception("Error updating package package_id=%s", package_id)
        return _system_down("Temporary issue updating package.")
    finally:
        db.close()
    return JSONResponse(content={"ok": True, "data": {"package": body}})


@app.delete("/v1/admin/packages/{package_id}", dependencies=[Depends(require_admin_api_key)])
async def admin_delete_package(package_id: int) -> JSONResponse:
    db = SessionLocal()
    try:
        package = find_package(db, package_id=package_id)
        if package is None:
            return _error(404, "PACKAGE_NOT_FOUND", "Package not found.")
        delete_row(db=db, row=package)
    except Exception:
        db.rollback()
        logger.exception("Error deleting package package_id=%s", package_id)
        return _system_down("Temporary issue deleting package.")
    finally:
        db.close()
    return JSONResponse(content={"ok": True, "data": {"deleted_id": package_id}})


@app.get("/v1/admin/addons", dependencies=[Depends(require_admin_api_key)])
async def admin_list_addons() -> JSONResponse:
    db = SessionLocal()
    try:
        items = [serialize_addon(a) for a in list_addons(db=db)]
    finally:
        db.close()
    return JSONResponse(content={"ok": True, "data": {"addons": items}})


@app.post("/v1/admin/addons", dependencies=[Depends(require_admin_api_key)])
async def admin_create_addon(payload: dict[str, Any]) -> JSONResponse:
    try:
        args = CreateAddonArgs.model_validate(payload)
    except ValidationError as exc:
        return _invalid_args(exc)

    db = SessionLocal()
    try:
        body = serialize_addon(create_addon(db=db, args=args))
    except Exception:
        db.rollback()
        logger.exception("Error creating addon")
        return _system_down("Temporary issue creating addon.")
    finally:
        db.close()
    return JSONResponse(status_code=201, content={"ok": True, "data": {"addon": body}})


@app.patch("/v1/admin/addons/{addon_id}", dependencies=[Depends(require_admin_api_key)])
async def admin_update_addon(addon_id: int, payload: dict[str, Any]) -> JSONResponse:
    try:
        args = UpdateAddonArgs.model_validate(payload)
    except ValidationError as exc:
        return _invalid_args(exc)

    db = SessionLocal()
    try:
        addon = update_addon(db=db, addon_id=addon_id, args=args)
        if addon is None:
            return _error(404, "ADDON_NOT_FOUND", "Addon not found.")
        body = serialize_addon(addon)
    except Exception:
        db.rollback()
        logger.exception("Error updating addon addon_id=%s", addon_id)
        return _system_down("Temporary issue updating addon.")
    finally:
        db.close()
    return JSONResponse(content={"ok": True, "data": {"addon": body}})


@app.delete("/v1/admin/addons/{addon_id}", dependencies=[Depends(require_admin_api_key)])
async def admin_delete_addon(addon_id: int) -> JSONResponse:
    db = SessionLocal()
    try:
        addon = find_addon(db, addon_id=addon_id)
        if addon is None:
            return _error(404, "ADDON_NOT_FOUND", "Addon not found.")
        delete_row(db=db, row=addon)
    except Exception:
        db.rollback()
        logger.exception("Error deleting addon addon_id=%s", addon_id)
        return _system_down("Temporary issue deleting addon.")
    finally:
        db.close()
    return JSONResponse(content={"ok": True, "data": {"deleted_id": addon_id}})


@app.get("/v1/admin/resources", dependencies=[Depends(require_admin_api_key)])
async def admin_list_resources() -> JSONResponse:
    db = SessionLocal()
    try:
        items = [serialize_resource(r) for r in list_resources(db=db)]
    finally:
        db.close()
    return JSONResponse(content={"ok": True, "data": {"resources": items}})


@app.post("/v1/admin/resources", dependencies=[Depends(require_admin_api_key)])
async def admin_create_resource(payload: dict[str, Any]) -> JSONResponse:
    try:
        args = CreateResourceArgs.model_validate(payload)
    except ValidationError as exc:
        return _invalid_args(exc)

    db = SessionLocal()
    try:
        body = serialize_resource(create_resource(db=db, args=args))
    except Exception:
        db.rollback()
        logger.exception("Error creating resource")
        return _system_down("Temporary issue creating resource.")
    finally:
        db.close()
    return JSONResponse(status_code=201, content={"ok": True, "data": {"resource": body}})


@app.patch("/v1/admin/resources/{resource_id}", dependencies=[Depends(require_admin_api_key)])
async def admin_update_resource(resource_id: int, payload: dict[str, Any]) -> JSONResponse:
    try:
        args = UpdateResourceArgs.model_validate(payload)
    except ValidationError as exc:
        return _invalid_args(exc)

    db = SessionLocal()
    try:
        resource = update_resource(db=db, resource_id=resource_id, args=args)
        if resource is None:
            return _error(404, "RESOURCE_NOT_FOUND", "Resource not found.")
        body = serialize_resource(resource)
    except Exception:
        db.rollback()
        logger.exception("Error updating resource resource_id=%s", resource_id)
        return _system_down("Temporary issue updating resource.")
    finally:
        db.close()
    return JSONResponse(content={"ok": True, "data": {"resource": body}})


@app.delete("/v1/admin/resources/{resource_id}", dependencies=[Depends(require_admin_api_key)])
async def admin_delete_resource(resource_id: int) -> JSONResponse:
    db = SessionLocal()
    try:
        resource = find_resource(db, resource_id=resource_id)
        if resource is None:
            return _error(404, "RESOURCE_NOT_FOUND", "Resource not found.")
        delete_row(db=db, row=resource)
    except Exception:
        db.rollback()
        logger.exception("Error deleting resource resource_id=%s", resource_id)
        return _system_down("Temporary issue deleting resource.")
    finally:
        db.close()
    return JSONResponse(content={"ok": True, "data": {"deleted_id": resource_id}})


@app.get("/v1/admin/clients", dependencies=[Depends(require_admin_api_key)])
async def admin_list_clients(search: str | None = None) -> JSONResponse:
    db = SessionLocal()
    try:
        items = [serialize_client_summary(db, c) for c in list_clients(db=db, search=search)]
    except Exception:
        logger.exception("Error listing clients")
        return _system_down("Temporary issue listing clients.")
    finally:
        db.close()
    return JSONResponse(content={"ok": True, "data": {"clients": items}})


@app.post("/v1/admin/clients", dependencies=[Depends(require_admin_api_key)])
async def admin_create_client(payload: dict[str, Any]) -> JSONResponse:
    try:
        args = CreateClientArgs.model_validate(payload)
    except ValidationError as exc:
        return _invalid_args(exc)

    db = SessionLocal()
    try:
        body = serialize_client(create_client(db=db, args=args))
    except Exception:
        db.rollback()
        logger.exception("Error creating client")
        return _system_down("Temporary issue creating client.")
    finally:
        db.close()
    return JSONResponse(status_code=201, content={"ok": True, "data": {"client": body}})


@app.post("/v1/admin/clients/merge", dependencies=[Depends(require_admin_api_key)])
async def admin_merge_clients(payload: dict[str, Any]) -> JSONResponse:
    try:
        args = MergeClientsArgs.model_validate(payload)
    except ValidationError as exc:
        return _invalid_args(exc)

    db = SessionLocal()
    try:
        body = serialize_client(merge_clients(db=db, args=args))
    except ClientNotFoundError as exc:
        return _error(404, "CLIENT_NOT_FOUND", str(exc))
    except ClientMergeError as exc:
        return _error(400, "CLIENT_MERGE_REJECTED", str(exc))
    except Exception:
        db.rollback()
        logger.exception(
            "Error merging clients source_id=%s target_id=%s",
            args.source_client_id,
            args.target_client_id,
        )
        return _system_down("Temporary issue merging clients.")
    finally:
        db.close()

    logger.info(
        json.dumps(
            {
                "event": "clients_merged",
                "source_client_id": args.source_client_id,
                "target_client_id": args.target_client_id,
            }
        )
    )
    return JSONResponse(content={"ok": True, "data": {"client": body}})


@app.get("/v1/admin/clients/{client_id}", dependencies=[Depends(require_admin_api_key)])
async def admin_get_client(client_id: int) -> JSONResponse:
    db = SessionLocal()
    try:
        client = find_client(db, client_id=client_id)
        if client is None:
            return _error(404, "CLIENT_NOT_FOUND", "Client not found.")
        body = serialize_client_detail(db, client)
    except Exception:
        logger.exception("Error fetching client client_id=%s", client_id)
        return _system_down("Temporary issue fetching client.")
    finally:
        db.close()
    return JSONResponse(content={"ok": True, "data": {"client": body}})


@app.patch("/v1/admin/clients/{client_id}", dependencies=[Depends(require_admin_api_key)])
async def admin_update_client(client_id: int, payload: dict[str, Any]) -> JSONResponse:
    try:
        args = UpdateClientArgs.model_validate(payload)
    except ValidationError as exc:
        return _invalid_args(exc)

    db = SessionLocal()
    try:
        client = update_client(db=db, client_id=client_id, args=args)
        if client is None:
            return _error(404, "CLIENT_NOT_FOUND", "Client not found.")
        body = serialize_client(client)
    except Exception:
        db.rollback()
        logger.exception("Error updating client client_id=%s", client_id)
        return _system_down("Temporary issue updating client.")
    finally:
        db.close()
    return JSONResponse(content={"ok": True, "data": {"client": body}})


@app.delete("/v1/admin/clients/{client_id}", dependencies=[Depends(require_admin_api_key)])
async def admin_delete_client(client_id: int) -> JSONResponse:
    db = SessionLocal()
    try:
        client = find_client(db, client_id=client_id)
        if client is None:
            return _error(404, "CLIENT_NOT_FOUND", "Client not found.")
        delete_client(db=db, client=client)
    except Exception:
        db.rollback()
        logger.exception("Error deleting client client_id=%s", client_id)
        return _system_down("Temporary issue deleting client.")
    finally:
        db.close()
    return JSONResponse(content={"ok": True, "data": {"deleted_id": client_id}})


@app.get("/v1/admin/settings", dependencies=[Depends(require_admin_api_key)])
async def admin_get_settings() -> JSONResponse:
    db = SessionLocal()
    try:
        body = serialize_settings(get_venue_settings(db))
    except Exception:
        db.rollback()
        logger.exception("Error fetching venue settings")
        return _system_down("Temporary issue fetching settings.")
    finally:
        db.close()
    return JSONResponse(content={"ok": True, "data": {"settings": body}})


@app.put("/v1/admin/settings", dependencies=[Depends(require_admin_api_key)])
async def admin_update_settings(payload: dict[str, Any]) -> JSONResponse:
    try:
        args = UpdateSettingsArgs.model_validate(payload)
    except ValidationError as exc:
        return _invalid_args(exc)

    db = SessionLocal()
    try:
        body = serialize_settings(update_venue_settings(db=db, args=args))
    except Exception:
        db.rollback()
        logger.exception("Error updating venue settings")
        return _system_down("Temporary issue updating settings.")
    finally:
        db.close()

    logger.info(json.dumps({"event": "venue_settings_updated", "deposit_type": args.deposit_type}))
    return JSONResponse(content={"ok": True, "data": {"settings": body}})
