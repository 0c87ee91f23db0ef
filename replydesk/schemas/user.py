from replydesk.schemas.base import CamelModel


class UserCreate(CamelModel):
    username: str
    # Stored as given; the demo app has no real authentication.
    password: str


class User(UserCreate):
    id: str
