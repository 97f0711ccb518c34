"""
The `crypt` package provides the password utilities used by the identity
workflows.

Contents
--------
- encrypt_decrypt
    Utility module exposing the `EncryptionDec` class:
        * `hash_password` — hashes plaintext passwords using bcrypt (cost from `PASSWORD_HASH_ROUNDS`)
        * `check_passwords` — verifies a plaintext password against a hashed one
        * `validate_password_strength` — lists unmet password rules:
            - length between 8 and 128
            - must include lowercase, uppercase, digit, and special character
        * `is_valid_password` — boolean shortcut of the above
"""
