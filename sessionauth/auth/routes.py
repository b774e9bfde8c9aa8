"""Authentication routes."""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse

from sessionauth.auth.guard import require_admin
from sessionauth.auth.session import Role, Session, SessionUser, get_session
from sessionauth.config import get_settings
from sessionauth.responses import err, ok
from sessionauth.users import DuplicateEmailError, UserRecord, UserStore, get_user_store

logger = logging.getLogger(__name__)
router = APIRouter(tags=["auth"])

INTERNAL_ERROR = "Error interno del servidor."
INVALID_CREDENTIALS = "Datos no válidos"
EMAIL_TAKEN = "El correo ya está registrado."
REGISTERED = "Usuario registrado exitosamente."
ADMIN_DATA = "Estos son los datos privados"


async def read_body(request: Request) -> dict:
    """Read a JSON or form-encoded request body into a dict."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        body = await request.json()
        return body if isinstance(body, dict) else {}

    form = await request.form()
    return dict(form)


def redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=status.HTTP_302_FOUND)


@router.get("/")
async def index(users: UserStore = Depends(get_user_store)):
    """Send visitors to registration until the first user exists, then to login."""
    settings = get_settings()
    try:
        registered = await users.find_all()
    except Exception as e:
        logger.exception(f"Failed to list users: {e}")
        return err(INTERNAL_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR)

    if not registered:
        return redirect(settings.register_url)

    return redirect(settings.login_url)


@router.get("/logout")
async def logout(session: Session = Depends(get_session)):
    """Destroy the current session and go back to login."""
    try:
        await session.destroy()
    except Exception as e:
        logger.error(f"Failed to destroy session: {e}")
        return err(str(e), status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.info("Session destroyed")
    response = redirect(get_settings().login_url)
    session.clear_cookie(response)
    return response


@router.get("/admin")
async def admin_data(user: SessionUser = Depends(require_admin)):
    """Private data, admins only."""
    return ok(ADMIN_DATA)


@router.post("/login")
async def login(
    request: Request,
    session: Session = Depends(get_session),
    users: UserStore = Depends(get_user_store),
):
    """Check credentials and attach the user to the session."""
    try:
        body = await read_body(request)
        mail, password = body.get("mail"), body.get("pass")
        user = await users.find_by_email(mail)

        # Passwords are stored and compared in plain text
        if user and user.password == password:
            await session.set_user(SessionUser(username=user.first_name, rol=Role.USER))
            logger.info(f"User logged in: {user.email}")

            response = redirect(get_settings().products_url)
            session.attach_cookie(response)
            return response

        logger.info(f"Rejected login for {mail}")
        return err(INVALID_CREDENTIALS, status.HTTP_401_UNAUTHORIZED)
    except Exception as e:
        logger.error(f"Login failed: {e}")
        return err(str(e), status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.post("/register")
async def register(
    request: Request,
    users: UserStore = Depends(get_user_store),
):
    """Register a new user unless the email is already taken."""
    try:
        user = UserRecord.model_validate(await read_body(request))

        if await users.find_by_email(user.email):
            return err(EMAIL_TAKEN, status.HTTP_400_BAD_REQUEST)

        await users.insert(user)
        logger.info(f"Registered user: {user.email}")
        return ok(REGISTERED)
    except DuplicateEmailError:
        # Lost the race against a concurrent registration
        return err(EMAIL_TAKEN, status.HTTP_400_BAD_REQUEST)
    except Exception as e:
        logger.exception(f"Registration failed: {e}")
        return err(INTERNAL_ERROR, status.HTTP_400_BAD_REQUEST)
