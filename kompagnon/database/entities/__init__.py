"""
Entities Package — SQLAlchemy 2.0 ORM Models
============================================

Tech Stack & Conventions
------------------------
- SQLAlchemy 2.0 style `Mapped[...]` + `mapped_column(...)`
- Timezone-aware timestamps

Contents
--------
- User
    A registered user: profile, bcrypt password hash, user type,
    activation state and last login time.
"""
