from fastapi import APIRouter, Depends, Security

from app.middleware.rbac import get_current_user
from app.schemas.user import (
    ClienteRegisterSchema,
    ForgotPasswordSchema,
    LoginSchema,
    ProfesionalRegisterSchema,
    ResetPasswordSchema,
)
from app.utils.email_utils import get_mailer
from profesiones.core.responses import success
from profesiones.db.database import get_db
from profesiones.serialize import serialize_doc
from profesiones.service import auth_service
from profesiones.service.auth_service import ROLE_CLIENT, ROLE_PROFESSIONAL

auth_router = APIRouter(prefix="/auth", tags=["Auth"])


# ------------------------
# Register
# ------------------------
@auth_router.post("/registro/cliente", status_code=201)
async def registro_cliente(data: ClienteRegisterSchema, db=Depends(get_db)):
    cliente = await auth_service.register(db, ROLE_CLIENT, data.model_dump())
    return success(cliente, "Cliente registrado exitosamente")


@auth_router.post("/registro/profesional", status_code=201)
async def registro_profesional(data: ProfesionalRegisterSchema, db=Depends(get_db)):
    profesional = await auth_service.register(db, ROLE_PROFESSIONAL, data.model_dump())
    return success(profesional, "Profesional registrado exitosamente")


# ------------------------
# Login / Logout
# ------------------------
@auth_router.post("/login")
async def login(data: LoginSchema, db=Depends(get_db)):
    result = await auth_service.login(db, data.email, data.password)
    return success(result, "Login exitoso")


@auth_router.post("/logout")
async def logout():
    # Bearer tokens are stateless; the client drops its copy
    return success(message="Logout exitoso")


# ------------------------
# Forgot/Reset Password
# ------------------------
@auth_router.post("/forgot-password")
async def forgot_password(data: ForgotPasswordSchema, db=Depends(get_db), send_email=Depends(get_mailer)):
    await auth_service.forgot_password(db, data.email, send_email)
    return success(message="Se ha enviado un email con las instrucciones para recuperar tu contraseña")


@auth_router.post("/reset-password")
async def reset_password(data: ResetPasswordSchema, db=Depends(get_db)):
    await auth_service.reset_password(db, data.token, data.newPassword)
    return success(message="Contraseña actualizada exitosamente")


# ------------------------
# Get current user info
# ------------------------
@auth_router.get("/me")
async def get_current_user_info(current_user: dict = Security(get_current_user)):
    return success(serialize_doc(current_user))
