"""Entry point of the ASGI server: `uvicorn app.main:app`"""

from app.app import get_application
from app.dependencies import get_settings

app = get_application(settings=get_settings())
