# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# Tests replace them through app.dependency_overrides.
# =============================================================================

from collections.abc import Generator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from agents.assistant import Assistant
from lib.database import get_db
from lib.mailer import Mailer
from lib.square_client import SquareClient


def get_square_client() -> Generator[SquareClient, None, None]:
    """
    Square client for one request.

    Closed after the response so the underlying HTTP connection pool
    doesn't leak.
    """
    client = SquareClient.from_settings()
    try:
        yield client
    finally:
        client.close()


def get_mailer() -> Mailer:
    return Mailer()


def get_assistant() -> Assistant:
    return Assistant()


# Type aliases for dependency injection
DbDep = Annotated[Session, Depends(get_db)]
SquareDep = Annotated[SquareClient, Depends(get_square_client)]
MailerDep = Annotated[Mailer, Depends(get_mailer)]
AssistantDep = Annotated[Assistant, Depends(get_assistant)]
