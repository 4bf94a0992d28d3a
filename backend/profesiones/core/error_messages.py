# profesiones/core/error_messages.py
from fastapi import HTTPException, status


class ErrorResponses:
    # 400
    USER_EXISTS = HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST, detail="El email ya está registrado"
    )
    INVALID_ID = HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Identificador inválido")
    INVALID_RESET_TOKEN = HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST, detail="Token inválido o expirado"
    )
    INVALID_RATING = HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST, detail="La puntuación debe estar entre 1 y 5"
    )
    INVALID_TRANSITION = HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST, detail="Cambio de estado no permitido"
    )
    REASON_REQUIRED = HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST, detail="El motivo de la cita es obligatorio"
    )

    # 401
    INVALID_CREDENTIALS = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED, detail="Credenciales inválidas"
    )
    NOT_AUTHENTICATED = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="No autenticado",
        headers={"WWW-Authenticate": "Bearer"},
    )
    INVALID_TOKEN = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Token inválido",
        headers={"WWW-Authenticate": "Bearer"},
    )
    TOKEN_EXPIRED = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Token expirado",
        headers={"WWW-Authenticate": "Bearer"},
    )

    # 403
    FORBIDDEN = HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Acceso no autorizado")
    CLIENT_ONLY = HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Acceso solo para clientes")
    PROFESSIONAL_ONLY = HTTPException(
        status_code=status.HTTP_403_FORBIDDEN, detail="Acceso solo para profesionales"
    )

    # 404
    USER_NOT_FOUND = HTTPException(
        status_code=status.HTTP_404_NOT_FOUND, detail="No existe una cuenta con ese email"
    )
    CLIENT_NOT_FOUND = HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cliente no encontrado")
    PROFESSIONAL_NOT_FOUND = HTTPException(
        status_code=status.HTTP_404_NOT_FOUND, detail="Profesional no encontrado"
    )
    APPOINTMENT_NOT_FOUND = HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cita no encontrada")

    # 409
    SLOT_UNAVAILABLE = HTTPException(
        status_code=status.HTTP_409_CONFLICT, detail="El horario ya no está disponible"
    )
    CONCURRENT_UPDATE = HTTPException(
        status_code=status.HTTP_409_CONFLICT, detail="La cita fue modificada por otra operación"
    )

    # 500
    INTERNAL_SERVER_ERROR = HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error interno del servidor"
    )
    EMAIL_FAILED = HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Error al procesar la recuperación de contraseña",
    )
