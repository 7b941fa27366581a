# mundolar/api/main.py
from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from typing import Any, Optional

from mundolar.api.schemas import DeleteUploadIn, InviteUserIn, PresignedUploadIn, UpdateUserIn
from mundolar.config import get_config
from mundolar.data.models import Profile
from mundolar.integrations.object_storage import InvalidFolderError, ObjectStorage
from mundolar.integrations.object_storage import get_object_storage as _build_object_storage
from mundolar.integrations.supabase_auth import get_supabase_auth
from mundolar.logging import get_logger

logger = get_logger(__name__)

app = FastAPI(title="Mundolar admin API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[get_config().site_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------
# Errors
# ---------------------------
class ApiError(Exception):
    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    logger.warning(f"Rejected request to {request.url.path}: {message}")
    return JSONResponse({"error": f"Invalid request body: {message}"}, status_code=400)

# ---------------------------
# Dependencies
# ---------------------------
def get_admin_client() -> Any:
    try:
        return get_supabase_auth().get_admin_client()
    except RuntimeError as e:
        raise ApiError(str(e), 500)

def get_object_storage() -> ObjectStorage:
    try:
        return _build_object_storage()
    except RuntimeError as e:
        raise ApiError(str(e), 500)

def _user_json(user: Any) -> Any:
    if hasattr(user, "model_dump"):
        return user.model_dump(mode="json")
    return user

# ---------------------------
# Health
# ---------------------------
@app.get("/api/health")
async def health_check():
    return {"status": "healthy", "service": "Mundolar admin API"}

# ---------------------------
# Admin user endpoints
# ---------------------------
@app.delete("/api/admin/users/delete")
def delete_user(id: Optional[str] = Query(None), admin: Any = Depends(get_admin_client)):
    if not id:
        raise ApiError("Falta el ID del usuario", 400)
    try:
        # profiles rows go with the auth user through ON DELETE CASCADE
        admin.auth.admin.delete_user(id)
    except Exception as e:
        logger.error(f"Delete error: {e}")
        raise ApiError(str(e), 500)
    return {"success": True}

@app.post("/api/admin/users/invite")
def invite_user(request: Request, payload: Optional[InviteUserIn] = None, admin: Any = Depends(get_admin_client)):
    payload = payload or InviteUserIn()
    if not payload.full_name or not payload.email or not payload.role:
        raise ApiError("Faltan campos obligatorios", 400)

    origin = request.headers.get("origin") or get_config().site_url
    redirect_to = f"{origin.rstrip('/')}/auth/actualizar-password"

    try:
        auth_response = admin.auth.admin.invite_user_by_email(
            payload.email,
            {"data": {"full_name": payload.full_name, "role": payload.role}, "redirect_to": redirect_to},
        )
    except Exception as e:
        logger.error(f"Invitation error: {e}")
        raise ApiError(str(e), 500)

    user = auth_response.user
    profile = Profile(
        id=str(user.id),
        full_name=payload.full_name,
        email=payload.email,
        role=payload.role,
        force_password_change=True,
    )
    try:
        admin.table("profiles").upsert(profile.model_dump()).execute()
    except Exception as e:
        # The invitation already went out; keep the auth user and report success
        logger.error(f"Error creating profile for {user.id}: {e}")

    logger.info(f"Invited {payload.email} as {payload.role}")
    return {"success": True, "user": _user_json(user)}

@app.post("/api/admin/users/update")
def update_user(payload: Optional[UpdateUserIn] = None, admin: Any = Depends(get_admin_client)):
    payload = payload or UpdateUserIn()
    if not payload.id:
        raise ApiError("ID de usuario requerido", 400)
    try:
        (
            admin.table("profiles")
            .update({"full_name": payload.full_name, "role": payload.role})
            .eq("id", payload.id)
            .execute()
        )
    except Exception as e:
        logger.error(f"Update User Error: {e}")
        raise ApiError(str(e), 500)
    return {"message": "Usuario actualizado con éxito"}

# ---------------------------
# Upload endpoints
# ---------------------------
@app.post("/api/upload/presigned")
def create_presigned_upload(payload: Optional[PresignedUploadIn] = None, storage: ObjectStorage = Depends(get_object_storage)):
    payload = payload or PresignedUploadIn()
    if not payload.fileName or not payload.contentType or not payload.folder:
        raise ApiError("Missing required fields", 400)
    try:
        upload = storage.presign_upload(payload.fileName, payload.contentType, payload.folder)
    except InvalidFolderError:
        raise ApiError("Invalid folder", 400)
    except Exception as e:
        logger.error(f"Error generating presigned URL: {e}")
        raise ApiError(str(e), 500)
    return {"signedUrl": upload.signed_url, "publicUrl": upload.public_url}

@app.delete("/api/upload/presigned")
def delete_upload(payload: Optional[DeleteUploadIn] = None, storage: ObjectStorage = Depends(get_object_storage)):
    payload = payload or DeleteUploadIn()
    if not payload.publicUrl:
        raise ApiError("Missing publicUrl", 400)
    try:
        deleted = storage.delete_by_public_url(payload.publicUrl)
    except Exception as e:
        logger.error(f"Error deleting object from R2: {e}")
        raise ApiError(str(e), 500)
    if not deleted:
        return {"success": True, "message": "Object already deleted"}
    return {"success": True}
