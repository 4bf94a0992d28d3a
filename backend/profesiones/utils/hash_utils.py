# profesiones/utils/hash_utils.py
from passlib.hash import argon2, bcrypt


def hash_password(password: str) -> str:
    """Hash plain password with Argon2."""
    return argon2.hash(password)


async def verify_and_upgrade_password(user_id, plain_password: str, hashed_password: str, collection) -> bool:
    if not hashed_password:
        return False

    if hashed_password.startswith("$argon2"):
        return argon2.verify(plain_password, hashed_password)

    elif hashed_password.startswith(("$2b$", "$2a$", "$2y$")):
        # Accounts imported from the previous backend carry bcrypt hashes
        if bcrypt.verify(plain_password, hashed_password):
            # Auto-upgrade → store argon2
            new_hash = argon2.hash(plain_password)
            await collection.update_one({"_id": user_id}, {"$set": {"password": new_hash}})
            return True
    return False
