# reset_password.py: set a user's password from the shell
# usage: python reset_password.py <email> [new_password]   (prompts when omitted)
import getpass
import sys

from app.core.logging import setup_logging
from app.db import models
from app.db.session import SessionLocal
from app.services.security import hash_password

MIN_PASSWORD_LENGTH = 6

logger = setup_logging()


def reset_password(email: str, new_password: str) -> int:
    if len(new_password) < MIN_PASSWORD_LENGTH:
        logger.error("Password must be at least %d characters", MIN_PASSWORD_LENGTH)
        return 2

    with SessionLocal() as db:
        user = db.query(models.User).filter(models.User.email == email).first()
        if user is None:
            logger.error("No user with email %s", email)
            return 1
        user.hashed_password = hash_password(new_password)
        db.commit()

    logger.info("Password reset for user %s", email)
    return 0


if __name__ == "__main__":
    if len(sys.argv) not in (2, 3):
        print("Usage: python reset_password.py <email> [new_password]")
        sys.exit(2)
    password = sys.argv[2] if len(sys.argv) == 3 else getpass.getpass("New password: ")
    sys.exit(reset_password(sys.argv[1], password))
