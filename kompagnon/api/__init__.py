"""
API Package — FastAPI Router • Models • JWT Utils • Dependencies
================================================================

Contents
--------
- fast_api
    FastAPI router with endpoints for:
      • Health: GET /api/health
      • Authentication: register, authenticate, activate, me,
        password-reset/request, password-reset (under /api/authentication)
- models
    Pydantic data contracts for request/response validation:
      • UserRegistration, UserCredentials, PasswordResetRequest, PasswordReset (request bodies)
      • AuthenticationResponse, ActivationResponse, MessageResponse, AuthenticatedUser (responses)
- utils
    JWT helpers:
      • encode_token(payload, expires_minutes) — issues signed JWTs with iat/exp
      • decode_token(token) — validates JWTs, raising typed token errors
      • extract_token(header) — strips an optional Bearer prefix
- dependencies
    • get_authenticated_user — resolves the caller from its token, 401 otherwise
"""
