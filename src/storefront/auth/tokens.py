"""Signed access tokens (HS256 JWT) carrying the user id."""

from datetime import UTC, datetime, timedelta

import jwt


class InvalidToken(Exception):
    pass


class TokenService:
    def __init__(self, secret: str, algorithm: str = "HS256", expiry: timedelta = timedelta(days=7)):
        self.secret = secret
        self.algorithm = algorithm
        self.expiry = expiry

    def issue(self, user_id) -> str:
        now = datetime.now(UTC)
        payload = {"userId": str(user_id), "iat": now, "exp": now + self.expiry}
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode(self, token: str) -> str:
        """Return the user id carried by ``token``."""
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.PyJWTError as exc:
            raise InvalidToken(str(exc)) from exc

        user_id = payload.get("userId")
        if not user_id:
            raise InvalidToken("Token carries no user id")
        return user_id
