"""
Create the publisher account used for local testing.
Run:  python create_test_user.py [email] [password]
"""
import sys

from app.auth import hash_password, get_user_by_email, normalize_email
from app.infrastructure.db.session import get_session_factory
from app.infrastructure.db.models import User

email = normalize_email(sys.argv[1] if len(sys.argv) > 1 else "test@example.com")
password = sys.argv[2] if len(sys.argv) > 2 else "password123"

db = get_session_factory()()
try:
    user = get_user_by_email(db, email)
    if user:
        print(f"Publisher already exists: {email} (ID: {user.id})")
    else:
        user = User(email=email, password_hash=hash_password(password))
        db.add(user)
        db.commit()
        print(f"Created publisher {email} (ID: {user.id}), password: {password}")
finally:
    db.close()
