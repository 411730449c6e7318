import logging

from fastapi import APIRouter, Depends, HTTPException

from inkwell.models.email_settings import EmailSettingsForm, EmailSettingsResponse
from inkwell.routers.deps import READ_ROLES, WRITE_ROLES, get_email_settings_store, require_role
from inkwell.services.email_settings import EmailSettingsStore, to_response, upsert_email_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/settings", tags=["Settings"])


@router.get(
    "/email",
    response_model=EmailSettingsResponse,
    summary="Read the SMTP settings (the password is never returned)",
    dependencies=[Depends(require_role(*READ_ROLES))],
)
async def get_email_settings(
    store: EmailSettingsStore = Depends(get_email_settings_store),
) -> EmailSettingsResponse:
    stored = store.get()
    if stored is None:
        raise HTTPException(status_code=404, detail="Email settings have not been configured.")
    return to_response(stored)


@router.put(
    "/email",
    response_model=EmailSettingsResponse,
    summary="Create or update the SMTP settings",
    description=(
        "`email_pass` is write-only: supply it to set or replace the stored "
        "password, omit it to keep the current one. It is required the first "
        "time settings are saved."
    ),
    dependencies=[Depends(require_role(*WRITE_ROLES))],
)
async def put_email_settings(
    body: EmailSettingsForm,
    store: EmailSettingsStore = Depends(get_email_settings_store),
) -> EmailSettingsResponse:
    return to_response(upsert_email_settings(store, body))
