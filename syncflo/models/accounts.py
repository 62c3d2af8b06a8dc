"""
Account Models

Request bodies for the user and billing endpoints.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class FindOrCreateUserRequest(BaseModel):
    """Body of ``POST /api/user/find-or-create``"""

    model_config = ConfigDict(extra="ignore")

    email: Optional[str] = None
    fullName: Optional[str] = None
