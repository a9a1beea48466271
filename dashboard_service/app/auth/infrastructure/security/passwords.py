import logging

import bcrypt

DEFAULT_BCRYPT_ROUNDS = 10
logger = logging.getLogger(__name__)


def hash_password(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds)).decode("utf-8")


def password_matches(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError as exc:
        logger.warning("password_hash_check_rejected error=%s", str(exc))
        return False
