import logging

from fastapi import Header, HTTPException, status

from paintball import config

logger = logging.getLogger("paintball.security")

DEV_ENVS = {"dev", "development", "local"}


def _admin_auth_error(error_code: str, human_message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error_code": error_code, "human_message": human_message},
    )


def require_admin_api_key(
    x_admin_key: str | None = Header(default=None, alias="X-Admin-Key"),
) -> None:
    if not config.ADMIN_API_KEY:
        if config.ENV in DEV_ENVS:
            logger.warning("ADMIN_API_KEY is unset in %s; admin route left open.", config.ENV)
            return
        raise _admin_auth_error("ADMIN_AUTH_NOT_CONFIGURED", "Admin API key is not configured.")

    if x_admin_key != config.ADMIN_API_KEY:
        logger.warning("Rejected admin request with invalid X-Admin-Key.")
        raise _admin_auth_error("INVALID_ADMIN_API_KEY", "Invalid admin API key.")
