"""
DAOs Package — Data Access Layer
================================

Conventions
-----------
- Statements are built with SQLAlchemy Core against the entity tables
- Queries go through `get_connection()`: they join the ambient transaction
  when there is one and autocommit otherwise
- DAOs never commit or roll back; they surface exceptions so upper layers decide

Contents
--------
- UserDao
    * createUser — inserts an inactive user, unique email
    * findByEmail / findById — single-row lookups
    * activateUserById — marks a user active
    * updateLastLoggedAt — stamps the last successful login
    * incrementLoginAttempts / lockAccountUntil / resetLoginAttempts — failed login lockout
    * setPasswordResetToken / updatePassword — password reset
"""
